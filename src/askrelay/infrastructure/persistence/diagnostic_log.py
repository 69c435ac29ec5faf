"""Append-only diagnostic log for failures absorbed at the hook boundary.

Entries look like::

    2026-01-15T10:00:00.000000+00:00 [ERROR] Slack chat.postMessage failed ...
    Traceback (most recent call last):
      ...

Writing is best-effort; a sink that cannot write logs a warning and moves on.
"""

from __future__ import annotations

import traceback
from pathlib import Path

import structlog

from askrelay.core.utils.time import utc_now

logger = structlog.get_logger(__name__)

LOG_RELATIVE_PATH = Path(".claude") / "logs" / "slack-notify.log"


def get_log_path() -> Path:
    """Return the per-user diagnostic log location."""
    return Path.home() / LOG_RELATIVE_PATH


class FileDiagnosticLog:
    """File-backed implementation of DiagnosticSinkProtocol."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or get_log_path()

    @property
    def path(self) -> Path:
        return self._path

    def record(self, message: str, error: BaseException | None = None) -> None:
        """Append one entry with timestamp, message and failure trace."""
        if error is not None:
            trace = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        else:
            trace = ""
        entry = f"{utc_now().isoformat()} [ERROR] {message}\n{trace}\n"

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(entry)
        except OSError as exc:
            logger.warning(
                "diagnostic_log.write_failed", path=str(self._path), error=str(exc)
            )
