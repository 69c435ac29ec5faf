"""
Relay Configuration Schema

Pydantic model for the per-user relay configuration. The on-disk file uses
camelCase keys; snake_case field names are accepted too so the model can be
built directly in code and tests.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_POLL_INTERVAL_SECONDS = 45
DEFAULT_TIMEOUT_MINUTES = 30


class RelayConfig(BaseModel):
    """Immutable configuration loaded once per invocation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    enabled: bool = Field(True, description="Master switch for the relay")
    bot_token: str = Field("", alias="botToken", description="Slack bot token")
    channel_id: str = Field("", alias="channelId", description="Target channel ID")
    poll_interval_seconds: float = Field(
        DEFAULT_POLL_INTERVAL_SECONDS,
        alias="pollIntervalSeconds",
        description="Seconds between thread fetches",
    )
    timeout_minutes: float = Field(
        DEFAULT_TIMEOUT_MINUTES,
        alias="timeoutMinutes",
        description="Minutes to wait for an answer",
    )
    log_level: str = Field("info", alias="logLevel")
    sanitize_messages: bool = Field(False, alias="sanitizeMessages")
    ignore_bot_replies: bool = Field(False, alias="ignoreBotReplies")

    @field_validator("enabled", mode="before")
    @classmethod
    def _enabled_unless_false(cls, value: Any) -> Any:
        # Only an explicit false disables the relay.
        return True if value is None else value

    @field_validator("bot_token", "channel_id", mode="before")
    @classmethod
    def _strip_identifiers(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @field_validator("poll_interval_seconds", mode="before")
    @classmethod
    def _default_interval(cls, value: Any) -> Any:
        return value or DEFAULT_POLL_INTERVAL_SECONDS

    @field_validator("timeout_minutes", mode="before")
    @classmethod
    def _default_timeout(cls, value: Any) -> Any:
        return value or DEFAULT_TIMEOUT_MINUTES

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        return str(value or "info").lower()

    @property
    def is_usable(self) -> bool:
        """True when the relay is enabled and has a token and channel."""
        return self.enabled and bool(self.bot_token) and bool(self.channel_id)

    @property
    def poll_interval(self) -> float:
        """Poll interval in seconds."""
        return float(self.poll_interval_seconds)

    @property
    def timeout_seconds(self) -> float:
        """Answer deadline in seconds."""
        return float(self.timeout_minutes) * 60.0

    def to_file_dict(self) -> dict[str, Any]:
        """Serialize using the on-disk camelCase keys."""
        return self.model_dump(by_alias=True)

    def masked_token(self) -> str:
        """Token with everything but a short prefix and suffix hidden."""
        token = self.bot_token
        if len(token) <= 10:
            return "*" * len(token)
        return f"{token[:6]}...{token[-4:]}"
