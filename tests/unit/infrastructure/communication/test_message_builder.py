"""Tests for the Slack Block Kit payload builders."""

import json
import re

import pytest

from askrelay.core.domain.question import Option, Question
from askrelay.infrastructure.communication.message_builder import (
    OTHER_ACTION_ID,
    build_error_message,
    build_question_message,
    build_success_message,
    build_text_message,
    generate_question_id,
    selectable_actions,
)

QID = "1700000000000-deadbeef"


def _build(question: Question) -> dict:
    return build_question_message(
        question, QID, hostname="devbox", timestamp="2026-01-15T10:00:00+00:00"
    )


@pytest.fixture
def auth_question() -> Question:
    return Question(
        text="Which authentication method should we use?",
        options=(
            Option("OAuth 2.0", "Industry standard, secure"),
            Option("JWT", "Stateless, scalable"),
            Option("Session-based"),
        ),
    )


class TestQuestionWithOptions:
    """Multiple-choice questions render one button per option plus Other."""

    def test_one_action_per_option_plus_other(self, auth_question):
        actions = selectable_actions(_build(auth_question))

        assert len(actions) == len(auth_question.options) + 1
        assert [a["text"]["text"] for a in actions] == [
            "OAuth 2.0",
            "JWT",
            "Session-based",
            "Other...",
        ]

    def test_every_action_encodes_id_label_and_index(self, auth_question):
        actions = selectable_actions(_build(auth_question))
        values = [json.loads(a["value"]) for a in actions]

        assert all(v["questionId"] == QID for v in values)
        assert [v["label"] for v in values] == [
            "OAuth 2.0",
            "JWT",
            "Session-based",
            "Other",
        ]
        assert [v["index"] for v in values] == [0, 1, 2, -1]
        assert [a["action_id"] for a in actions] == [
            "answer_0",
            "answer_1",
            "answer_2",
            OTHER_ACTION_ID,
        ]

    def test_other_action_is_highlighted(self, auth_question):
        other = selectable_actions(_build(auth_question))[-1]
        assert other["style"] == "primary"

    def test_descriptions_listed_only_for_described_options(self, auth_question):
        payload = _build(auth_question)
        sections = [
            b["text"]["text"] for b in payload["blocks"] if b["type"] == "section"
        ]

        assert "*OAuth 2.0*: Industry standard, secure\n*JWT*: Stateless, scalable" in sections
        assert not any("Session-based*:" in s for s in sections)

    def test_single_option_still_gets_other(self):
        actions = selectable_actions(_build(Question("Proceed?", (Option("Yes"),))))
        assert len(actions) == 2

    def test_multi_select_hint(self):
        question = Question(
            "Which files?", (Option("a.py"), Option("b.py")), allow_multiple_select=True
        )
        texts = json.dumps(_build(question)["blocks"])
        assert "Several options may apply" in texts


class TestFreeTextQuestion:
    """Option-less questions ask for a threaded reply."""

    def test_no_actions_and_reply_prompt(self):
        payload = _build(Question("What should the service be called?"))

        assert selectable_actions(payload) == []
        assert not any(b["type"] == "actions" for b in payload["blocks"])
        assert "Reply in thread" in payload["blocks"][-1]["text"]["text"]


class TestPayloadEnvelope:
    def test_correlation_id_is_out_of_band_metadata(self, auth_question):
        payload = _build(auth_question)

        assert payload["metadata"]["event_type"] == "agent_question"
        assert payload["metadata"]["event_payload"]["questionId"] == QID
        visible = json.dumps(
            [b for b in payload["blocks"] if b["type"] != "actions"]
        )
        assert QID not in visible

    def test_fallback_text_and_context(self, auth_question):
        payload = _build(auth_question)

        assert payload["text"] == f"Agent question: {auth_question.text}"
        context = payload["blocks"][2]
        assert context["type"] == "context"
        assert "devbox" in context["elements"][0]["text"]

    def test_header_uses_question_header(self):
        payload = _build(Question("Pick one", header="Auth Method"))
        assert payload["blocks"][0]["text"]["text"] == "Auth Method"

    def test_pure_function(self, auth_question):
        assert _build(auth_question) == _build(auth_question)


def test_generate_question_id_format_and_uniqueness():
    ids = {generate_question_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(re.fullmatch(r"\d{13,}-[0-9a-f]{8}", qid) for qid in ids)


@pytest.mark.parametrize(
    "builder, prefix",
    [
        (build_text_message, ""),
        (build_success_message, ":white_check_mark: "),
        (build_error_message, ":x: "),
    ],
)
def test_notice_builders(builder, prefix):
    payload = builder("Timeout: no answer")

    assert payload["text"] == "Timeout: no answer"
    assert payload["blocks"][0]["text"]["text"] == f"{prefix}Timeout: no answer"
