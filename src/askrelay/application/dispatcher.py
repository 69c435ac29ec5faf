"""Question dispatcher.

Runs the format -> post -> poll cycle for every question of one tool call,
strictly in order, and folds the outcome into a ``HookDecision``:

* every question answered -> allow with answers
* any question timed out  -> deny with ``"Slack response timeout"``
  (answers collected so far are dropped)
* anything else failed    -> allow without answers, after writing a
  diagnostic record; a broken relay must never block the agent
"""

from __future__ import annotations

import socket
from collections.abc import Callable, Sequence

import structlog

from askrelay.core.domain.config import RelayConfig
from askrelay.core.domain.question import (
    PASS_THROUGH,
    HookDecision,
    PostedMessage,
    Question,
    ResponseTimeout,
)
from askrelay.core.domain.reply_policy import select_reply_policy
from askrelay.core.interfaces.chat_gateway import ChatGatewayProtocol
from askrelay.core.interfaces.diagnostics import DiagnosticSinkProtocol
from askrelay.core.utils.sanitize import sanitize_message
from askrelay.core.utils.time import utc_now
from askrelay.infrastructure.communication import message_builder
from askrelay.infrastructure.communication.response_poller import ResponsePoller

TIMEOUT_ERROR = "Slack response timeout"

PollerFactory = Callable[[ChatGatewayProtocol, RelayConfig], ResponsePoller]


def default_poller_factory(
    gateway: ChatGatewayProtocol, config: RelayConfig
) -> ResponsePoller:
    """Build a real-time poller honoring the configured reply policy."""
    return ResponsePoller(
        gateway,
        is_qualifying_reply=select_reply_policy(ignore_bots=config.ignore_bot_replies),
    )


class QuestionDispatcher:
    """Relay a batch of questions to a chat channel and collect answers.

    Usage::

        dispatcher = QuestionDispatcher(config=config, gateway=gateway)
        decision = await dispatcher.resolve(batch.questions)
    """

    def __init__(
        self,
        *,
        config: RelayConfig,
        gateway: ChatGatewayProtocol,
        diagnostics: DiagnosticSinkProtocol | None = None,
        poller_factory: PollerFactory = default_poller_factory,
        question_id_factory: Callable[[], str] = message_builder.generate_question_id,
        hostname: str | None = None,
    ) -> None:
        self._config = config
        self._gateway = gateway
        self._diagnostics = diagnostics
        self._poller_factory = poller_factory
        self._question_id_factory = question_id_factory
        self._hostname = hostname or socket.gethostname()
        self._logger = structlog.get_logger(__name__)

    async def resolve(self, questions: Sequence[Question]) -> HookDecision:
        """Ask every question in order and return the aggregate decision."""
        if not self._config.is_usable:
            self._logger.debug("dispatcher.relay_unavailable")
            return PASS_THROUGH

        try:
            return await self._resolve_all(questions)
        except Exception as exc:
            self._logger.error(
                "dispatcher.failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            if self._diagnostics is not None:
                self._diagnostics.record(f"Question relay failed: {exc}", exc)
            return PASS_THROUGH

    async def _resolve_all(self, questions: Sequence[Question]) -> HookDecision:
        answers: dict[str, str] = {}
        total = len(questions)

        for position, question in enumerate(questions, start=1):
            outgoing = self._prepare(question, position, total)
            posted = await self._post(outgoing)

            poller = self._poller_factory(self._gateway, self._config)
            outcome = await poller.wait_for_answer(
                posted.channel_id,
                posted.message_handle,
                posted.correlation_id,
                poll_interval=self._config.poll_interval,
                timeout=self._config.timeout_seconds,
            )

            if isinstance(outcome, ResponseTimeout):
                self._logger.warning(
                    "dispatcher.question_timed_out",
                    question_id=posted.correlation_id,
                    position=position,
                    total=total,
                    attempts=outcome.attempts,
                )
                await self._post_timeout_notice()
                return HookDecision(allow=False, error=TIMEOUT_ERROR)

            self._logger.info(
                "dispatcher.answer_received",
                question_id=posted.correlation_id,
                position=position,
                total=total,
            )
            answers[question.text] = outcome.value

        return HookDecision(allow=True, answers=answers)

    def _prepare(self, question: Question, position: int, total: int) -> Question:
        """Sanitize if configured, then number the question within its batch.

        The counter is appended last so the path pattern cannot eat ``/N``.
        """
        text = question.text
        if self._config.sanitize_messages:
            text = sanitize_message(text)
        if total > 1:
            text = f"{text} ({position}/{total})"
        return question.with_text(text)

    async def _post(self, question: Question) -> PostedMessage:
        correlation_id = self._question_id_factory()
        payload = message_builder.build_question_message(
            question,
            correlation_id,
            hostname=self._hostname,
            timestamp=utc_now().isoformat(),
        )
        channel_id = self._config.channel_id
        message_handle = await self._gateway.post_message(channel_id, payload)
        self._logger.info(
            "dispatcher.question_posted",
            question_id=correlation_id,
            message_ts=message_handle,
            actions=len(message_builder.selectable_actions(payload)),
        )
        return PostedMessage(
            channel_id=channel_id,
            message_handle=message_handle,
            correlation_id=correlation_id,
            posted_at=utc_now(),
        )

    async def _post_timeout_notice(self) -> None:
        notice = message_builder.build_error_message(
            f"Timeout: No response received after {self._config.timeout_minutes:g} "
            "minutes. The agent will continue without this answer."
        )
        try:
            await self._gateway.post_message(self._config.channel_id, notice)
        except Exception as exc:
            self._logger.warning("dispatcher.timeout_notice_failed", error=str(exc))
