"""Domain models for the question/answer relay.

All structured types that flow between the dispatcher, the message
formatter, the chat gateway and the response poller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from askrelay.core.domain.enums import AnswerKind, ChannelVisibility
from askrelay.core.domain.errors import QuestionFormatError


@dataclass(frozen=True)
class Option:
    """One selectable choice of a multiple-choice question.

    Attributes:
        label: Text shown on the button (unique within a question).
        description: Optional longer explanation of the choice.
    """

    label: str
    description: str | None = None


@dataclass(frozen=True)
class Question:
    """A question the agent wants a human to answer.

    Attributes:
        text: The question itself.
        options: Ordered choices; empty for a free-text question.
        allow_multiple_select: Whether more than one option may be picked.
        header: Optional short tag supplied by the host.
    """

    text: str
    options: tuple[Option, ...] = ()
    allow_multiple_select: bool = False
    header: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Question:
        """Build a Question from the host's parameter bag.

        Raises:
            QuestionFormatError: If the bag is not shaped like a question.
        """
        if not isinstance(data, dict):
            raise QuestionFormatError("Question entry must be an object")

        text = data.get("question")
        if not isinstance(text, str) or not text.strip():
            raise QuestionFormatError(
                "Question entry is missing 'question' text", details={"entry": data}
            )

        raw_options = data.get("options") or []
        if not isinstance(raw_options, list):
            raise QuestionFormatError(
                "'options' must be a list", details={"question": text}
            )

        options: list[Option] = []
        for raw in raw_options:
            if not isinstance(raw, dict) or not raw.get("label"):
                raise QuestionFormatError(
                    "Every option needs a 'label'", details={"question": text}
                )
            description = raw.get("description")
            options.append(
                Option(
                    label=str(raw["label"]),
                    description=str(description) if description else None,
                )
            )

        header = data.get("header")
        return cls(
            text=text,
            options=tuple(options),
            allow_multiple_select=bool(data.get("multiSelect", False)),
            header=str(header) if header else None,
        )

    def with_text(self, text: str) -> Question:
        """Return a copy carrying different question text."""
        return Question(
            text=text,
            options=self.options,
            allow_multiple_select=self.allow_multiple_select,
            header=self.header,
        )


@dataclass(frozen=True)
class PostedMessage:
    """A question message that was accepted by the chat service.

    Attributes:
        channel_id: Channel the message was posted to.
        message_handle: Thread root identifier (Slack ``ts``).
        correlation_id: Identifier embedded in the message metadata.
        posted_at: When the post succeeded.
    """

    channel_id: str
    message_handle: str
    correlation_id: str
    posted_at: datetime


@dataclass(frozen=True)
class Reply:
    """A message posted in a question's thread.

    Attributes:
        ts: Slack message timestamp, unique within the channel.
        text: Message body.
        authored_at: UTC time derived from ``ts``.
        user_id: Author user ID, if any.
        bot_id: Set when the reply was posted by a bot.
    """

    ts: str
    text: str
    authored_at: datetime
    user_id: str | None = None
    bot_id: str | None = None


@dataclass(frozen=True)
class Answer:
    """The value that resolves a question."""

    value: str
    kind: AnswerKind = AnswerKind.TEXT


@dataclass(frozen=True)
class ResponseTimeout:
    """No qualifying reply arrived before the deadline.

    Attributes:
        elapsed_seconds: Time spent waiting.
        attempts: Number of thread fetches issued.
    """

    elapsed_seconds: float
    attempts: int = 0


@dataclass(frozen=True)
class Channel:
    """A channel visible to the bot."""

    id: str
    name: str
    visibility: ChannelVisibility = ChannelVisibility.PUBLIC


@dataclass(frozen=True)
class IdentityInfo:
    """Who the credential authenticates as."""

    user_id: str
    bot_id: str | None = None
    team_id: str | None = None
    team: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class HookDecision:
    """Outcome of one intercepted tool call.

    Attributes:
        allow: Whether the host should let the tool call proceed.
        answers: Question text -> answer value, when redirection succeeded.
        error: Terminal failure reason when ``allow`` is False.
    """

    allow: bool
    answers: dict[str, str] | None = None
    error: str | None = None

    def to_response(self, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Render the decision in the shape the host expects."""
        if not self.allow:
            return {"allow": False, "error": self.error or "unknown error"}
        if self.answers is None:
            return {"allow": True}
        return {
            "allow": True,
            "modified_params": {**(params or {}), "answers": dict(self.answers)},
        }


PASS_THROUGH = HookDecision(allow=True)


@dataclass(frozen=True)
class QuestionBatch:
    """Ordered questions from a single tool call."""

    questions: tuple[Question, ...] = field(default_factory=tuple)

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> QuestionBatch:
        """Parse the ``questions`` list out of a tool call's parameters."""
        raw = (params or {}).get("questions") or []
        if not isinstance(raw, list):
            raise QuestionFormatError("'questions' must be a list")
        return cls(questions=tuple(Question.from_dict(item) for item in raw))
