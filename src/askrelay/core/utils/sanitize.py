"""Redaction of sensitive substrings before text leaves the machine.

File paths and long token-like strings are replaced with fixed markers.
The markers contain no characters the patterns match, so sanitizing is
idempotent.
"""

from __future__ import annotations

import re

PATH_MARKER = "[PATH]"
SECRET_MARKER = "[REDACTED]"

_WINDOWS_PATH = re.compile(r"[A-Z]:\\[\w\\\-.]+", re.IGNORECASE | re.ASCII)
_UNIX_PATH = re.compile(r"/[\w/\-.]+", re.ASCII)
_TOKEN = re.compile(r"\b[A-Za-z0-9]{32,}\b")


def sanitize_message(message: str, enabled: bool = True) -> str:
    """Redact paths and API-key-like strings from ``message``.

    Args:
        message: Text to clean.
        enabled: When False the message is returned untouched.

    Returns:
        The sanitized text.
    """
    if not enabled:
        return message

    sanitized = _WINDOWS_PATH.sub(PATH_MARKER, message)
    sanitized = _UNIX_PATH.sub(PATH_MARKER, sanitized)
    return _TOKEN.sub(SECRET_MARKER, sanitized)
