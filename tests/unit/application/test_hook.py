"""End-to-end tests for the host call contract (handle_tool_call)."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from askrelay.application.hook import ASK_USER_TOOL_NAME, handle_tool_call
from askrelay.core.domain.config import RelayConfig
from askrelay.core.domain.errors import DeliveryError

FIRST_TS = "1700000000.000001"
SECOND_TS = "1700000000.000002"


@pytest.fixture
def diagnostics() -> MagicMock:
    return MagicMock()


@pytest.fixture
def call(gateway, config, diagnostics, poller_factory):
    """Invoke the hook against the fake gateway and fake clock."""
    factory = MagicMock(return_value=gateway)

    async def _call(tool_name, params, *, cfg=config):
        return await handle_tool_call(
            tool_name,
            params,
            config_loader=lambda: cfg,
            gateway_factory=factory,
            diagnostics=diagnostics,
            dispatcher_options={"poller_factory": poller_factory, "hostname": "devbox"},
        )

    _call.gateway_factory = factory
    return _call


COLOR_PARAMS = {
    "questions": [
        {
            "question": "Pick a color?",
            "header": "Color",
            "options": [{"label": "Red"}, {"label": "Blue"}],
            "multiSelect": False,
        }
    ]
}


@pytest.mark.asyncio
async def test_scenario_answered_in_thread(call, gateway, reply):
    gateway.thread_script[FIRST_TS] = [[reply("Blue")]]

    result = await call(ASK_USER_TOOL_NAME, COLOR_PARAMS)

    assert result == {
        "allow": True,
        "modified_params": {**COLOR_PARAMS, "answers": {"Pick a color?": "Blue"}},
    }
    assert gateway.closed is True


@pytest.mark.asyncio
async def test_scenario_missing_channel_is_inert(call, gateway):
    cfg = RelayConfig(bot_token="xoxb-1", channel_id="")

    result = await call(ASK_USER_TOOL_NAME, COLOR_PARAMS, cfg=cfg)

    assert result == {"allow": True}
    call.gateway_factory.assert_not_called()
    assert gateway.posted == []


@pytest.mark.asyncio
async def test_scenario_no_config_file_is_inert(call):
    result = await call(ASK_USER_TOOL_NAME, COLOR_PARAMS, cfg=None)

    assert result == {"allow": True}
    call.gateway_factory.assert_not_called()


@pytest.mark.asyncio
async def test_scenario_second_question_times_out(call, gateway, reply):
    gateway.thread_script[FIRST_TS] = [[reply("JWT")]]
    params = {"questions": [{"question": "Auth?"}, {"question": "Database?"}]}

    result = await call(ASK_USER_TOOL_NAME, params)

    assert result == {"allow": False, "error": "Slack response timeout"}
    assert "modified_params" not in result


@pytest.mark.asyncio
async def test_other_tools_pass_through_untouched(call):
    result = await call("Bash", {"command": "ls"})

    assert result == {"allow": True}
    call.gateway_factory.assert_not_called()


@pytest.mark.asyncio
async def test_empty_question_list_passes_through(call):
    assert await call(ASK_USER_TOOL_NAME, {"questions": []}) == {"allow": True}
    call.gateway_factory.assert_not_called()


@pytest.mark.asyncio
async def test_malformed_questions_degrade_with_diagnostic(call, diagnostics):
    result = await call(ASK_USER_TOOL_NAME, {"questions": [{"header": "no text"}]})

    assert result == {"allow": True}
    diagnostics.record.assert_called_once()
    call.gateway_factory.assert_not_called()


@pytest.mark.asyncio
async def test_gateway_failure_degrades_with_diagnostic(call, gateway, diagnostics):
    gateway.post_errors = [DeliveryError("invalid_auth", method="chat.postMessage")]

    result = await call(ASK_USER_TOOL_NAME, COLOR_PARAMS)

    assert result == {"allow": True}
    diagnostics.record.assert_called_once()
    assert gateway.closed is True


@pytest.mark.asyncio
async def test_config_loader_failure_never_escapes(diagnostics):
    def broken_loader():
        raise PermissionError("denied")

    result = await handle_tool_call(
        ASK_USER_TOOL_NAME,
        COLOR_PARAMS,
        config_loader=broken_loader,
        diagnostics=diagnostics,
    )

    assert result == {"allow": True}
    diagnostics.record.assert_called_once()


@pytest.mark.asyncio
async def test_none_params_are_tolerated(call):
    assert await call(ASK_USER_TOOL_NAME, None) == {"allow": True}
