"""Terminal failure types raised by :mod:`web_carbon` analyses.

Only failures that end a request are modelled as exceptions. Recoverable
conditions (a single response that cannot be buffered, a degraded hosting
lookup, a failed history write) are logged where they happen and never reach
the caller.
"""

from __future__ import annotations

__all__ = [
    "AnalysisError",
    "InternalAnalysisError",
    "InvalidInputError",
    "PageLoadFailureError",
    "PageLoadTimeoutError",
]


class AnalysisError(RuntimeError):
    """Base class for failures that end an analysis request.

    Attributes:
        status: HTTP-style status code distinguishing the failure kind.
        kind: Stable identifier for the failure kind.
    """

    status: int = 500
    kind: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-ready error payload."""

        return {"error": self.kind, "status": self.status, "message": self.message}


class InvalidInputError(AnalysisError, ValueError):
    """Raised for a malformed or missing URL or an invalid traffic volume."""

    status = 400
    kind = "invalid_input"


class PageLoadTimeoutError(AnalysisError):
    """Raised when navigation or the whole analysis exceeded its time bound."""

    status = 408
    kind = "page_load_timeout"

    def __init__(self, url: str, timeout_ms: int | float) -> None:
        super().__init__(
            f"Page load timeout: {url} did not settle within {timeout_ms:g} ms."
        )
        self.url = url
        self.timeout_ms = timeout_ms


class PageLoadFailureError(AnalysisError):
    """Raised for non-timeout navigation errors (DNS, refused, TLS)."""

    status = 502
    kind = "page_load_failure"

    def __init__(self, url: str, cause: str) -> None:
        super().__init__(f"Failed to load {url}: {cause}")
        self.url = url
        self.cause = cause


class InternalAnalysisError(AnalysisError):
    """Raised for any other unexpected failure during an analysis."""

    status = 500
    kind = "internal_error"
