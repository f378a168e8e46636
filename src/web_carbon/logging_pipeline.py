"""JSON log output for analyses run from the command line or a service."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from queue import Full, Queue
from typing import Iterable

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override
from uuid import uuid4

LOGGER = logging.getLogger(__name__)

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRIBUTES: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line.

    The ``extra`` mapping passed to a logging call is emitted under
    ``context``. Every line carries an ``analysis_id`` so the records of one
    analysis can be grouped; a per-call ``extra={"analysis_id": ...}`` wins
    over the formatter default.
    """

    def __init__(self, *, default_analysis_id: str | None = None) -> None:
        super().__init__()
        self._default_analysis_id = default_analysis_id

    @override
    def format(self, record: logging.LogRecord) -> str:
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and key != "analysis_id"
        }
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "analysis_id": getattr(record, "analysis_id", None)
            or self._default_analysis_id,
            "context": context,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            payload["exception"] = record.exc_text
        return json.dumps(payload, default=str)


class BoundedQueueHandler(logging.handlers.QueueHandler):
    """Queue handler that drops records instead of blocking when full."""

    @override
    def enqueue(self, record: logging.LogRecord) -> None:
        try:
            self.queue.put_nowait(record)
        except Full:
            self.handleError(record)

    @override
    def handleError(self, record: logging.LogRecord) -> None:
        return


def configure_structured_logging(
    logger: logging.Logger | None = None,
    *,
    analysis_id: str | None = None,
    level: int = logging.INFO,
    stream: object | None = None,
    queue_size: int = 1024,
) -> logging.handlers.QueueListener:
    """Attach a queued JSON handler to ``logger``.

    Args:
        logger: Logger to configure; defaults to the ``web_carbon`` package
            logger.
        analysis_id: Identifier stamped on every record; a random one is
            generated when omitted.
        level: Logging verbosity level.
        stream: Output stream for the JSON lines; defaults to stderr.
        queue_size: Capacity of the record queue. Records beyond it are
            dropped.

    Returns:
        The started queue listener. Pass it to :func:`shutdown_listeners`
        when done.
    """

    target = logger or logging.getLogger("web_carbon")
    target.setLevel(level)

    record_queue: Queue[logging.LogRecord] = Queue(maxsize=queue_size)
    target.addHandler(BoundedQueueHandler(record_queue))

    stream_handler = logging.StreamHandler(stream)  # type: ignore[arg-type]
    stream_handler.setFormatter(
        JsonFormatter(default_analysis_id=analysis_id or uuid4().hex)
    )

    listener = logging.handlers.QueueListener(record_queue, stream_handler)
    listener.start()
    return listener


def shutdown_listeners(listeners: Iterable[logging.handlers.QueueListener]) -> None:
    """Flush and stop queue listeners, logging any failure to stop."""

    for listener in listeners:
        try:
            listener.stop()
        except Exception as exc:  # pragma: no cover
            LOGGER.warning("Failed to stop logging listener", exc_info=exc)
