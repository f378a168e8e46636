"""Page-weight data models produced by the network tracer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from web_carbon.classification import ResourceCategory

__all__ = [
    "BYTES_PER_KB",
    "BYTES_PER_MB",
    "CaptureOutcome",
    "CaptureStatus",
    "ResourceBreakdown",
    "ResourceTransfer",
    "TraceResult",
]

BYTES_PER_KB = 1024
BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True, slots=True)
class ResourceTransfer:
    """One observed network response."""

    url: str
    byte_size: int
    declared_content_type: str | None
    resource_role: str

    def __post_init__(self) -> None:
        if self.byte_size < 0:
            raise ValueError("byte_size must be non-negative")


@dataclass(frozen=True, slots=True)
class ResourceBreakdown:
    """Accumulated bytes per resource category.

    ``total`` is derived from the categories so it can never drift from
    their sum.
    """

    images: int = 0
    js: int = 0
    css: int = 0
    fonts: int = 0
    other: int = 0

    def __post_init__(self) -> None:
        for category in ResourceCategory:
            if getattr(self, category.value) < 0:
                raise ValueError(f"{category.value} bytes must be non-negative")

    @property
    def total(self) -> int:
        """Sum of bytes across all categories."""

        return self.images + self.js + self.css + self.fonts + self.other

    def bytes_for(self, category: ResourceCategory) -> int:
        """Return the byte count accumulated for ``category``."""

        return int(getattr(self, category.value))

    def to_kilobytes(self) -> dict[str, int]:
        """Return each category in whole kilobytes (1 KB = 1024 bytes)."""

        return {
            category.value: int(round(self.bytes_for(category) / BYTES_PER_KB))
            for category in ResourceCategory
        }

    @property
    def total_megabytes(self) -> float:
        """Total page weight in megabytes (unrounded)."""

        return self.total / BYTES_PER_MB


class CaptureStatus(str, Enum):
    """Result of processing a single network response."""

    CAPTURED = "captured"
    EMPTY = "empty"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class CaptureOutcome:
    """Explicit success or skip record for one capture attempt."""

    status: CaptureStatus
    url: str
    transfer: ResourceTransfer | None = None
    category: ResourceCategory | None = None
    reason: str | None = None

    @classmethod
    def captured(
        cls, transfer: ResourceTransfer, category: ResourceCategory
    ) -> CaptureOutcome:
        return cls(
            status=CaptureStatus.CAPTURED,
            url=transfer.url,
            transfer=transfer,
            category=category,
        )

    @classmethod
    def empty(cls, url: str) -> CaptureOutcome:
        return cls(status=CaptureStatus.EMPTY, url=url, reason="zero-byte body")

    @classmethod
    def skipped(cls, url: str, reason: str) -> CaptureOutcome:
        return cls(status=CaptureStatus.SKIPPED, url=url, reason=reason)


@dataclass(frozen=True, slots=True)
class TraceResult:
    """Outcome of a completed page trace.

    Attributes:
        breakdown: Bytes per resource category.
        transfer_count: Number of non-empty transfers folded into the
            breakdown.
        skipped_count: Responses whose body could not be buffered.
        empty_count: Responses discarded for having a zero-byte body.
        final_url: URL of the page after redirects, when known.
    """

    breakdown: ResourceBreakdown
    transfer_count: int
    skipped_count: int = 0
    empty_count: int = 0
    final_url: str | None = None
    outcomes: tuple[CaptureOutcome, ...] = field(default=(), repr=False)
