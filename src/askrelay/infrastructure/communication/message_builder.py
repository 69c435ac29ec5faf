"""Slack Block Kit payload builders.

Turns a ``Question`` into a channel-native message.  The question id is
carried twice: in the message ``metadata`` (out-of-band, never parsed from
visible text) and in every button value, so a thread can be tied back to
the question that produced it.

All builders are pure: host name and timestamp are passed in.
"""

from __future__ import annotations

import json
import secrets
import time
from typing import Any

from askrelay.core.domain.question import Question

QUESTION_EVENT_TYPE = "agent_question"
OTHER_ACTION_ID = "answer_other"
OTHER_INDEX = -1
DEFAULT_HEADER = "\U0001f916 Your agent needs your input"


def generate_question_id() -> str:
    """Return a new correlation id: ``<epoch millis>-<8 hex chars>``."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def _section(text: str) -> dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _button(
    *,
    text: str,
    correlation_id: str,
    label: str,
    index: int,
    action_id: str,
) -> dict[str, Any]:
    return {
        "type": "button",
        "text": {"type": "plain_text", "text": text, "emoji": True},
        "value": json.dumps(
            {"questionId": correlation_id, "label": label, "index": index}
        ),
        "action_id": action_id,
    }


def build_question_message(
    question: Question,
    correlation_id: str,
    *,
    hostname: str,
    timestamp: str,
) -> dict[str, Any]:
    """Build the message payload for one question.

    Questions with options get one button per option plus a synthetic
    "Other" button (index -1) inviting a free-text reply.  Option-less
    questions ask for a threaded reply and carry no buttons.

    Args:
        question: The question to render.
        correlation_id: Identifier tying the thread back to this question.
        hostname: Machine the agent runs on, shown as context.
        timestamp: ISO timestamp shown as context.

    Returns:
        Payload suitable for ``chat.postMessage``.
    """
    blocks: list[dict[str, Any]] = [
        {
            "type": "header",
            "text": {
                "type": "plain_text",
                "text": question.header or DEFAULT_HEADER,
                "emoji": True,
            },
        },
        _section(f"*{question.text}*"),
        {
            "type": "context",
            "elements": [
                {"type": "mrkdwn", "text": f"*Host:* {hostname} | *Time:* {timestamp}"}
            ],
        },
        {"type": "divider"},
    ]

    if question.options:
        buttons = [
            _button(
                text=option.label,
                correlation_id=correlation_id,
                label=option.label,
                index=index,
                action_id=f"answer_{index}",
            )
            for index, option in enumerate(question.options)
        ]
        other = _button(
            text="Other...",
            correlation_id=correlation_id,
            label="Other",
            index=OTHER_INDEX,
            action_id=OTHER_ACTION_ID,
        )
        other["style"] = "primary"
        buttons.append(other)
        blocks.append({"type": "actions", "elements": buttons})

        described = [opt for opt in question.options if opt.description]
        if described:
            blocks.append(
                _section(
                    "\n".join(f"*{opt.label}*: {opt.description}" for opt in described)
                )
            )
        if question.allow_multiple_select:
            blocks.append(
                _section("_Several options may apply: reply in thread with each one._")
            )
    else:
        blocks.append(_section("\U0001f4ac *Reply in thread with your answer*"))

    return {
        "blocks": blocks,
        "text": f"Agent question: {question.text}",
        "metadata": {
            "event_type": QUESTION_EVENT_TYPE,
            "event_payload": {
                "questionId": correlation_id,
                "hostname": hostname,
                "timestamp": timestamp,
            },
        },
    }


def build_text_message(text: str) -> dict[str, Any]:
    """Build a plain notice."""
    return {"blocks": [_section(text)], "text": text}


def build_success_message(text: str) -> dict[str, Any]:
    """Build a notice prefixed with a check mark."""
    return {"blocks": [_section(f":white_check_mark: {text}")], "text": text}


def build_error_message(text: str) -> dict[str, Any]:
    """Build a notice prefixed with a cross mark."""
    return {"blocks": [_section(f":x: {text}")], "text": text}


def selectable_actions(payload: dict[str, Any]) -> list[dict[str, Any]]:
    """Return all button elements of a built payload."""
    return [
        element
        for block in payload.get("blocks", [])
        if block.get("type") == "actions"
        for element in block.get("elements", [])
    ]
