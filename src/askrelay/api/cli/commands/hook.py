"""Hook command - the process the agent host invokes before each tool call.

Reads the host payload from stdin and prints the decision as JSON on
stdout.  Both payload spellings are accepted::

    {"tool_name": "AskUserQuestion", "tool_input": {"questions": [...]}}
    {"toolName": "AskUserQuestion", "params": {"questions": [...]}}
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import structlog
import typer

from askrelay.api.cli.logging_setup import configure_logging
from askrelay.application.hook import handle_tool_call
from askrelay.infrastructure.persistence.config_store import read_config

logger = structlog.get_logger(__name__)

PASS_THROUGH_RESULT = {"allow": True}


def _parse_payload(raw: str) -> tuple[str, dict[str, Any]]:
    data = json.loads(raw) if raw.strip() else {}
    if not isinstance(data, dict):
        return "", {}
    tool_name = data.get("tool_name") or data.get("toolName") or ""
    params = data.get("tool_input")
    if params is None:
        params = data.get("params")
    return str(tool_name), params if isinstance(params, dict) else {}


def _handle(raw: str, *, debug: bool) -> dict[str, Any]:
    config = read_config()
    if config is not None:
        configure_logging(config.log_level, debug=debug)

    try:
        tool_name, params = _parse_payload(raw)
    except json.JSONDecodeError:
        return PASS_THROUGH_RESULT

    return asyncio.run(
        handle_tool_call(tool_name, params, config_loader=lambda: config)
    )


def run_hook(ctx: typer.Context) -> None:
    """Handle one tool call from the agent host (stdin -> stdout JSON).

    Always prints a result and exits 0: anything that goes wrong here lets
    the host ask locally.
    """
    debug = (ctx.obj or {}).get("debug", False)
    configure_logging("warning", debug=debug)

    try:
        result = _handle(sys.stdin.read(), debug=debug)
    except Exception as exc:
        logger.error(
            "hook.command_failed",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        result = PASS_THROUGH_RESULT

    typer.echo(json.dumps(result, ensure_ascii=False))
