"""Slack Web API adapter implementing ChatGatewayProtocol.

Every method is a single HTTP call; failures of any kind surface as
``DeliveryError`` and are never retried here.  The ``aiohttp`` session is
created lazily on first use and released via ``close()`` or by using the
gateway as an async context manager::

    async with SlackChatGateway(token) as gateway:
        ts = await gateway.post_message(channel_id, payload)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import aiohttp
import structlog

from askrelay.core.domain.enums import ChannelVisibility
from askrelay.core.domain.errors import DeliveryError
from askrelay.core.domain.question import Channel, IdentityInfo, Reply
from askrelay.core.utils.time import from_slack_ts

logger = structlog.get_logger(__name__)

SLACK_API_URL = "https://slack.com/api"
PAGE_LIMIT = 100


class SlackChatGateway:
    """Talk to Slack with a bot token."""

    def __init__(
        self,
        token: str,
        *,
        base_url: str = SLACK_API_URL,
        request_timeout: float = 10.0,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._request_timeout = request_timeout
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> SlackChatGateway:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    async def post_message(self, channel_id: str, payload: dict[str, Any]) -> str:
        """Post ``payload`` to ``channel_id`` and return the message ``ts``."""
        data = await self._call(
            "chat.postMessage", json_body={"channel": channel_id, **payload}
        )
        ts = data.get("ts")
        if not ts:
            raise DeliveryError(
                "chat.postMessage returned no message timestamp",
                method="chat.postMessage",
            )
        return str(ts)

    async def get_thread_replies(
        self, channel_id: str, message_handle: str
    ) -> Sequence[Reply]:
        """Return the thread's replies, oldest first, without the root."""
        data = await self._call(
            "conversations.replies",
            params={"channel": channel_id, "ts": message_handle, "limit": PAGE_LIMIT},
        )
        replies = [
            _to_reply(message)
            for message in data.get("messages") or []
            if message.get("ts") and message.get("ts") != message_handle
        ]
        replies.sort(key=lambda reply: float(reply.ts))
        return replies

    async def list_channels(self) -> Sequence[Channel]:
        """List public and private channels the bot can see."""
        data = await self._call(
            "conversations.list",
            params={"types": "public_channel,private_channel", "limit": PAGE_LIMIT},
        )
        return [
            Channel(
                id=channel["id"],
                name=channel.get("name", ""),
                visibility=(
                    ChannelVisibility.PRIVATE
                    if channel.get("is_private")
                    else ChannelVisibility.PUBLIC
                ),
            )
            for channel in data.get("channels") or []
        ]

    async def verify_identity(self) -> IdentityInfo:
        """Run ``auth.test`` for the held token."""
        data = await self._call("auth.test", json_body={})
        return IdentityInfo(
            user_id=data.get("user_id", ""),
            bot_id=data.get("bot_id"),
            team_id=data.get("team_id"),
            team=data.get("team"),
            url=data.get("url"),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._request_timeout)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"Authorization": f"Bearer {self._token}"},
            )
        return self._session

    async def _call(
        self,
        method: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Invoke one Web API method and return its decoded body.

        GET is used when ``params`` are given, POST with a JSON body otherwise.
        """
        session = await self._get_session()
        url = f"{self._base_url}/{method}"
        try:
            if json_body is None:
                request = session.get(url, params=params)
            else:
                request = session.post(url, json=json_body)
            async with request as response:
                if response.status >= 400:
                    body = await response.text()
                    logger.error(
                        "slack_gateway.http_error",
                        method=method,
                        status=response.status,
                        body=body[:200],
                    )
                    raise DeliveryError(
                        f"Slack {method} failed with HTTP {response.status}",
                        method=method,
                        status=response.status,
                    )
                data = await response.json(content_type=None)
        except (TimeoutError, aiohttp.ClientError, ValueError) as exc:
            logger.error("slack_gateway.transport_error", method=method, error=str(exc))
            raise DeliveryError(
                f"Slack {method} failed: {exc}", method=method
            ) from exc

        if not isinstance(data, dict) or not data.get("ok"):
            api_error = data.get("error") if isinstance(data, dict) else None
            logger.error("slack_gateway.api_error", method=method, error=api_error)
            raise DeliveryError(
                f"Slack {method} rejected the request: {api_error or 'unknown error'}",
                method=method,
                api_error=api_error,
            )
        return data


def _to_reply(message: dict[str, Any]) -> Reply:
    ts = str(message["ts"])
    return Reply(
        ts=ts,
        text=message.get("text", ""),
        authored_at=from_slack_ts(ts),
        user_id=message.get("user"),
        bot_id=message.get("bot_id"),
    )
