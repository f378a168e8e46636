"""Order-independent accumulation of captured transfers."""

from __future__ import annotations

import threading
from collections import Counter

from web_carbon.classification import ResourceCategory, classify
from web_carbon.page_models import (
    CaptureOutcome,
    CaptureStatus,
    ResourceBreakdown,
    ResourceTransfer,
)

__all__ = ["BreakdownAccumulator"]


class BreakdownAccumulator:
    """Fold transfers into per-category byte totals.

    Additions only ever sum integers per category, so the final breakdown
    does not depend on the order in which responses complete. A lock guards
    the counters so handlers may also run on worker threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._bytes: Counter[ResourceCategory] = Counter()
        self._counts: Counter[CaptureStatus] = Counter()

    def add(self, transfer: ResourceTransfer) -> CaptureOutcome:
        """Classify ``transfer`` and fold its bytes into the totals.

        Zero-byte transfers are discarded without being classified.
        """

        if transfer.byte_size <= 0:
            return self.record(CaptureOutcome.empty(transfer.url))
        category = classify(transfer.declared_content_type, transfer.url)
        return self.record(CaptureOutcome.captured(transfer, category))

    def record(self, outcome: CaptureOutcome) -> CaptureOutcome:
        """Register an outcome, adding its bytes when it was captured."""

        with self._lock:
            self._counts[outcome.status] += 1
            if (
                outcome.status is CaptureStatus.CAPTURED
                and outcome.transfer is not None
                and outcome.category is not None
            ):
                self._bytes[outcome.category] += outcome.transfer.byte_size
        return outcome

    @property
    def transfer_count(self) -> int:
        with self._lock:
            return self._counts[CaptureStatus.CAPTURED]

    @property
    def skipped_count(self) -> int:
        with self._lock:
            return self._counts[CaptureStatus.SKIPPED]

    @property
    def empty_count(self) -> int:
        with self._lock:
            return self._counts[CaptureStatus.EMPTY]

    def snapshot(self) -> ResourceBreakdown:
        """Return an immutable copy of the current totals."""

        with self._lock:
            return ResourceBreakdown(
                **{category.value: self._bytes[category] for category in ResourceCategory}
            )
