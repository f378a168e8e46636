"""Tests for structured logging pipeline utilities."""

from __future__ import annotations

import io
import json
import logging
import sys
from logging.handlers import QueueListener
from queue import Queue

import pytest

from web_carbon import logging_pipeline


def _detach(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if isinstance(handler, logging_pipeline.BoundedQueueHandler):
            logger.removeHandler(handler)


def test_configure_structured_logging_emits_json() -> None:
    logger = logging.getLogger("web-carbon-test")
    buffer = io.StringIO()
    listener = logging_pipeline.configure_structured_logging(
        logger, analysis_id="analysis-123", stream=buffer
    )
    try:
        logger.info("Page traced", extra={"url": "https://example.com", "total_bytes": 42})
    finally:
        logging_pipeline.shutdown_listeners([listener])
        _detach(logger)

    payload = json.loads(buffer.getvalue().strip())
    assert payload["message"] == "Page traced"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "web-carbon-test"
    assert payload["analysis_id"] == "analysis-123"
    assert payload["context"] == {"url": "https://example.com", "total_bytes": 42}


def test_per_record_analysis_id_wins() -> None:
    logger = logging.getLogger("web-carbon-override")
    buffer = io.StringIO()
    listener = logging_pipeline.configure_structured_logging(
        logger, analysis_id="default", stream=buffer
    )
    try:
        logger.warning("degraded", extra={"analysis_id": "specific"})
    finally:
        logging_pipeline.shutdown_listeners([listener])
        _detach(logger)

    payload = json.loads(buffer.getvalue())
    assert payload["analysis_id"] == "specific"
    assert "analysis_id" not in payload["context"]


def test_analysis_id_generated_when_omitted() -> None:
    logger = logging.getLogger("web-carbon-auto-id")
    buffer = io.StringIO()
    listener = logging_pipeline.configure_structured_logging(logger, stream=buffer)
    try:
        logger.info("auto")
    finally:
        logging_pipeline.shutdown_listeners([listener])
        _detach(logger)

    payload = json.loads(buffer.getvalue())
    assert isinstance(payload["analysis_id"], str)
    assert len(payload["analysis_id"]) == 32


def test_exceptions_are_rendered() -> None:
    formatter = logging_pipeline.JsonFormatter(default_analysis_id="x")
    try:
        raise RuntimeError("sink down")
    except RuntimeError:
        record = logging.getLogger("t").makeRecord(
            "t", logging.ERROR, __file__, 1, "Failed to save analysis", None, None
        )
        record.exc_info = sys.exc_info()

    payload = json.loads(formatter.format(record))
    assert "RuntimeError: sink down" in payload["exception"]
    assert payload["context"] == {}


def test_full_queue_drops_records() -> None:
    record_queue: Queue[logging.LogRecord] = Queue(maxsize=1)
    handler = logging_pipeline.BoundedQueueHandler(record_queue)
    logger = logging.getLogger("web-carbon-bounded")
    logger.propagate = False
    logger.addHandler(handler)
    try:
        logger.warning("first")
        logger.warning("second")
    finally:
        logger.removeHandler(handler)
        logger.propagate = True

    assert record_queue.qsize() == 1
    assert record_queue.get_nowait().getMessage() == "first"


def test_shutdown_listeners_logs_failures(caplog: pytest.LogCaptureFixture) -> None:
    class _FailingListener(QueueListener):
        def __init__(self) -> None:
            super().__init__(Queue(), logging.StreamHandler())

        def stop(self) -> None:
            raise RuntimeError("stop failure")

    with caplog.at_level(logging.WARNING):
        logging_pipeline.shutdown_listeners([_FailingListener()])

    assert "Failed to stop logging listener" in caplog.text
