"""
Core Domain Enums

Status values and kinds shared across the relay, kept here to avoid
magic strings in the poller, dispatcher and gateway.
"""

from enum import Enum


class PollState(str, Enum):
    """Lifecycle of a single posted question."""

    POSTED = "posted"
    POLLING = "polling"
    ANSWERED = "answered"
    TIMED_OUT = "timed_out"


class AnswerKind(str, Enum):
    """How an answer was given."""

    TEXT = "text"
    # Reserved for an endpoint that reads button clicks; replies are TEXT.
    SELECTION = "selection"


class ChannelVisibility(str, Enum):
    """Visibility of a chat channel."""

    PUBLIC = "public"
    PRIVATE = "private"
