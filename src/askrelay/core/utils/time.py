"""Shared time helpers.

``utc_now`` gives wall-clock timestamps for records and messages; the poll
loop measures deadlines on ``time.monotonic`` instead so clock adjustments
cannot stretch or cut a wait short.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC timestamp."""
    return datetime.now(UTC)


def from_slack_ts(ts: str) -> datetime:
    """Convert a Slack message timestamp (``"1700000000.000100"``) to UTC."""
    return datetime.fromtimestamp(float(ts), UTC)
