"""Host call contract for the ask-the-user interception hook.

The host hands over every tool call before running it.  Only the
``AskUserQuestion`` call is redirected; everything else passes through.
Whatever happens, the host gets back a well-formed result dict and never
an exception:

* ``{"allow": True}`` - let the host ask locally (pass-through)
* ``{"allow": True, "modified_params": {..., "answers": {...}}}`` - answered
* ``{"allow": False, "error": "..."}`` - the tool call should fail
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

import structlog

from askrelay.application.dispatcher import QuestionDispatcher
from askrelay.core.domain.config import RelayConfig
from askrelay.core.domain.question import PASS_THROUGH, QuestionBatch
from askrelay.core.interfaces.diagnostics import DiagnosticSinkProtocol
from askrelay.infrastructure.communication.slack_gateway import SlackChatGateway
from askrelay.infrastructure.persistence.config_store import read_config
from askrelay.infrastructure.persistence.diagnostic_log import FileDiagnosticLog

ASK_USER_TOOL_NAME = "AskUserQuestion"

ConfigLoader = Callable[[], RelayConfig | None]
GatewayFactory = Callable[[RelayConfig], AbstractAsyncContextManager[Any]]

logger = structlog.get_logger(__name__)


def slack_gateway_factory(config: RelayConfig) -> SlackChatGateway:
    return SlackChatGateway(config.bot_token)


async def handle_tool_call(
    tool_name: str,
    params: dict[str, Any] | None,
    *,
    config_loader: ConfigLoader = read_config,
    gateway_factory: GatewayFactory = slack_gateway_factory,
    diagnostics: DiagnosticSinkProtocol | None = None,
    dispatcher_options: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Decide what the host should do with one tool call.

    Args:
        tool_name: Name of the tool the agent is about to invoke.
        params: The tool's parameter bag.
        config_loader: Loads the relay configuration once for this call.
        gateway_factory: Builds the chat gateway (an async context manager).
        diagnostics: Sink for absorbed failures; defaults to the per-user log.
        dispatcher_options: Extra keyword arguments for ``QuestionDispatcher``.

    Returns:
        The result dict described in the module docstring.
    """
    if tool_name != ASK_USER_TOOL_NAME:
        return PASS_THROUGH.to_response()

    params = params or {}
    diagnostics = diagnostics or FileDiagnosticLog()

    try:
        config = config_loader()
        if config is None or not config.is_usable:
            logger.debug("hook.relay_unavailable")
            return PASS_THROUGH.to_response()

        batch = QuestionBatch.from_params(params)
        if not batch.questions:
            return PASS_THROUGH.to_response()

        async with gateway_factory(config) as gateway:
            dispatcher = QuestionDispatcher(
                config=config,
                gateway=gateway,
                diagnostics=diagnostics,
                **(dispatcher_options or {}),
            )
            decision = await dispatcher.resolve(batch.questions)
    except Exception as exc:
        logger.error(
            "hook.failed",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        logger.info("hook.falling_back_to_local_prompt")
        diagnostics.record(f"Hook failed: {exc}", exc)
        return PASS_THROUGH.to_response()

    return decision.to_response(params)
