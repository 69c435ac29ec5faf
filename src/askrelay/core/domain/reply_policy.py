"""Reply qualification strategies.

The poller asks a predicate whether a thread reply answers the question.
The default accepts the first reply of any shape from anyone; stricter
policies can be swapped in without touching the poll loop.
"""

from __future__ import annotations

from collections.abc import Callable

from askrelay.core.domain.question import Reply

ReplyPredicate = Callable[[Reply], bool]


def accept_any_reply(reply: Reply) -> bool:
    """Every thread reply qualifies, regardless of author or content."""
    return True


def ignore_bot_replies(reply: Reply) -> bool:
    """Only human-authored replies qualify."""
    return reply.bot_id is None


def select_reply_policy(*, ignore_bots: bool) -> ReplyPredicate:
    """Pick the predicate matching the configuration switch."""
    return ignore_bot_replies if ignore_bots else accept_any_reply
