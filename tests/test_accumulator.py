"""Tests for order-independent breakdown accumulation."""

from __future__ import annotations

import threading

from hypothesis import given, strategies as st

from web_carbon.page_models import CaptureOutcome, CaptureStatus, ResourceTransfer
from web_carbon.tracing.accumulator import BreakdownAccumulator

_TRANSFERS = st.builds(
    ResourceTransfer,
    url=st.sampled_from(
        [
            "https://example.com/a.png",
            "https://example.com/app.js",
            "https://example.com/site.css",
            "https://example.com/font.woff2",
            "https://example.com/data",
        ]
    ),
    byte_size=st.integers(min_value=0, max_value=5_000_000),
    declared_content_type=st.sampled_from(
        [None, "image/jpeg", "application/javascript", "text/css", "font/ttf", "text/html"]
    ),
    resource_role=st.just("other"),
)


def _fold(transfers: list[ResourceTransfer]) -> BreakdownAccumulator:
    accumulator = BreakdownAccumulator()
    for transfer in transfers:
        accumulator.add(transfer)
    return accumulator


@given(transfers=st.lists(_TRANSFERS, max_size=40), rng=st.randoms())
def test_breakdown_is_order_independent(transfers, rng):
    shuffled = list(transfers)
    rng.shuffle(shuffled)

    in_order = _fold(transfers)
    permuted = _fold(shuffled)

    assert in_order.snapshot() == permuted.snapshot()
    assert in_order.transfer_count == permuted.transfer_count
    assert in_order.snapshot().total == sum(t.byte_size for t in transfers)


def test_empty_accumulator_is_all_zero():
    accumulator = BreakdownAccumulator()
    snapshot = accumulator.snapshot()
    assert snapshot.total == 0
    assert accumulator.transfer_count == 0


def test_zero_byte_transfers_counted_as_empty():
    accumulator = BreakdownAccumulator()
    outcome = accumulator.add(
        ResourceTransfer("https://example.com/pixel.gif", 0, "image/gif", "image")
    )
    assert outcome.status is CaptureStatus.EMPTY
    assert accumulator.empty_count == 1
    assert accumulator.transfer_count == 0
    assert accumulator.snapshot().images == 0


def test_skips_are_counted_but_add_no_bytes():
    accumulator = BreakdownAccumulator()
    accumulator.record(CaptureOutcome.skipped("https://example.com/r", "redirect"))
    accumulator.add(ResourceTransfer("https://example.com/x.css", 120, None, "stylesheet"))

    assert accumulator.skipped_count == 1
    assert accumulator.transfer_count == 1
    assert accumulator.snapshot().css == 120


def test_concurrent_adds_from_threads():
    accumulator = BreakdownAccumulator()
    transfer = ResourceTransfer("https://example.com/x.js", 3, None, "script")

    def _worker() -> None:
        for _ in range(1_000):
            accumulator.add(transfer)

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert accumulator.snapshot().js == 8 * 1_000 * 3
    assert accumulator.transfer_count == 8_000
