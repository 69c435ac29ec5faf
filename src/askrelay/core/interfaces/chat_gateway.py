"""Protocol for the remote chat service.

The relay only needs four capabilities from the chat service.  Each one is
an independent remote call that can fail with ``DeliveryError``; nothing at
this layer retries.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from askrelay.core.domain.question import Channel, IdentityInfo, Reply


class ChatGatewayProtocol(Protocol):
    """Capability interface over a chat service such as Slack.

    Implementations hold no mutable state beyond the credential (and,
    where applicable, a pooled HTTP session).
    """

    async def post_message(self, channel_id: str, payload: dict[str, Any]) -> str:
        """Post a message payload to a channel.

        Args:
            channel_id: Target channel identifier.
            payload: Channel-native message (blocks, fallback text, metadata).

        Returns:
            The posted message's handle, used as the thread root.

        Raises:
            DeliveryError: On transport, auth or validation failure.
        """
        ...

    async def get_thread_replies(
        self, channel_id: str, message_handle: str
    ) -> Sequence[Reply]:
        """Fetch replies to a thread, oldest first, excluding the root.

        Raises:
            DeliveryError: If the thread cannot be read.
        """
        ...

    async def list_channels(self) -> Sequence[Channel]:
        """List channels visible to the credential.

        Raises:
            DeliveryError: If the listing fails.
        """
        ...

    async def verify_identity(self) -> IdentityInfo:
        """Check the credential and describe who it authenticates as.

        Raises:
            DeliveryError: If the credential is rejected.
        """
        ...
