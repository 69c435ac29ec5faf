"""Wait for the answer to a posted question.

Slack gives us no push channel here, so the poller re-reads the question's
thread until a qualifying reply shows up or the deadline passes.  One wait
is a small state machine::

    POSTED -> POLLING -> ANSWERED
                     \\-> TIMED_OUT

Each tick sleeps ``poll_interval`` (never past the deadline) and then
fetches the thread once.  A failing fetch is logged and the next tick tries
again; only the deadline ends a wait without an answer.  Cancelling the
awaiting task abandons the wait with no further calls to the chat service.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

import structlog

from askrelay.core.domain.enums import AnswerKind, PollState
from askrelay.core.domain.question import Answer, ResponseTimeout
from askrelay.core.domain.reply_policy import ReplyPredicate, accept_any_reply
from askrelay.core.interfaces.chat_gateway import ChatGatewayProtocol

logger = structlog.get_logger(__name__)

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]


class ResponsePoller:
    """Poll a thread until it is answered or the deadline passes.

    Usage::

        poller = ResponsePoller(gateway)
        outcome = await poller.wait_for_answer(
            channel_id, ts, question_id,
            poll_interval=45, timeout=30 * 60,
        )
        if isinstance(outcome, ResponseTimeout):
            ...
    """

    def __init__(
        self,
        gateway: ChatGatewayProtocol,
        *,
        is_qualifying_reply: ReplyPredicate = accept_any_reply,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._gateway = gateway
        self._is_qualifying_reply = is_qualifying_reply
        self._clock = clock
        self._sleep = sleep
        self.state = PollState.POSTED

    async def wait_for_answer(
        self,
        channel_id: str,
        message_handle: str,
        correlation_id: str,
        *,
        poll_interval: float,
        timeout: float,
    ) -> Answer | ResponseTimeout:
        """Block cooperatively until the question is answered.

        Args:
            channel_id: Channel holding the question.
            message_handle: Thread root of the question.
            correlation_id: Question id, used for log context.
            poll_interval: Seconds between fetches.
            timeout: Seconds to wait in total; zero or less times out at once.

        Returns:
            The earliest qualifying reply as an ``Answer``, or
            ``ResponseTimeout`` if none arrived in time.

        Raises:
            ValueError: If ``poll_interval`` is not positive.
        """
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")

        log = logger.bind(question_id=correlation_id, message_ts=message_handle)
        started = self._clock()
        deadline = started + timeout
        attempts = 0
        self.state = PollState.POLLING

        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                self.state = PollState.TIMED_OUT
                elapsed = self._clock() - started
                log.info(
                    "response_poller.timed_out",
                    attempts=attempts,
                    elapsed_seconds=round(elapsed, 3),
                )
                return ResponseTimeout(elapsed_seconds=elapsed, attempts=attempts)

            await self._sleep(min(poll_interval, remaining))

            attempts += 1
            log.debug("response_poller.attempt", attempt=attempts)
            try:
                replies = await self._gateway.get_thread_replies(
                    channel_id, message_handle
                )
            except Exception as exc:
                # Transient: DeliveryError or anything else from the fetch.
                log.warning(
                    "response_poller.fetch_failed",
                    attempt=attempts,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                continue

            for reply in replies:
                if self._is_qualifying_reply(reply):
                    self.state = PollState.ANSWERED
                    log.info(
                        "response_poller.answered",
                        attempts=attempts,
                        reply_ts=reply.ts,
                    )
                    return Answer(value=reply.text, kind=AnswerKind.TEXT)
