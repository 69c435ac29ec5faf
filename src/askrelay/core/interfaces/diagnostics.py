"""Protocol for best-effort diagnostic records."""

from typing import Protocol


class DiagnosticSinkProtocol(Protocol):
    """Append-only store for failures that were absorbed at the boundary."""

    def record(self, message: str, error: BaseException | None = None) -> None:
        """Persist a diagnostic entry.

        Implementations must never raise: a sink that cannot write
        simply drops the entry.
        """
        ...
