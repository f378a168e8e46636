"""Append-only NDJSON history store for past analyses.

Each line is one :class:`~web_carbon.schemas.AnalysisRecord` serialised as
JSON. Writers hold an exclusive ``portalocker`` lock on the file so that
concurrent processes never interleave lines; readers take a shared lock and
skip lines that do not validate instead of failing the whole listing.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

import portalocker
from pydantic import ValidationError

from web_carbon.schemas import AnalysisRecord, HistoryPage

__all__ = ["AnalysisHistory", "AnalysisSink"]

logger = logging.getLogger(__name__)


@runtime_checkable
class AnalysisSink(Protocol):
    """Destination for completed analyses."""

    def save(self, record: AnalysisRecord) -> None:
        """Persist ``record``."""


class AnalysisHistory:
    """File-backed history of analyses."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def save(self, record: AnalysisRecord) -> None:
        """Append ``record`` as one NDJSON line.

        Raises:
            OSError: When the file cannot be written.
        """

        line = json.dumps(
            record.model_dump_json_ready(), separators=(",", ":"), sort_keys=True
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            portalocker.lock(handle, portalocker.LOCK_EX)
            try:
                handle.write(line + "\n")
                handle.flush()
            finally:
                portalocker.unlock(handle)
        logger.debug(
            "Analysis saved", extra={"record_id": record.id, "path": str(self.path)}
        )

    def _read_all(self) -> list[AnalysisRecord]:
        if not self.path.exists():
            return []
        records: list[AnalysisRecord] = []
        with self.path.open("r", encoding="utf-8") as handle:
            portalocker.lock(handle, portalocker.LOCK_SH)
            try:
                text = handle.read()
            finally:
                portalocker.unlock(handle)
        for line_number, raw in enumerate(text.splitlines(), start=1):
            if not raw.strip():
                continue
            try:
                records.append(AnalysisRecord.model_validate_json(raw))
            except ValidationError as exc:
                logger.warning(
                    "Skipping unreadable history line",
                    extra={"path": str(self.path), "line_number": line_number},
                    exc_info=exc,
                )
        return records

    def recent(
        self, limit: int = 20, offset: int = 0, domain: str | None = None
    ) -> HistoryPage:
        """Return stored analyses newest first.

        Args:
            limit: Maximum number of records to return.
            offset: Number of records to skip.
            domain: Only return analyses of this domain when given.

        Raises:
            ValueError: If ``limit`` or ``offset`` is negative.
        """

        if limit < 0 or offset < 0:
            raise ValueError("limit and offset must be non-negative")
        records = self._read_all()
        if domain:
            wanted = domain.strip().lower()
            records = [record for record in records if record.domain == wanted]
        records.sort(key=lambda record: record.created_at, reverse=True)
        return HistoryPage(
            analyses=records[offset : offset + limit],
            total=len(records),
            limit=limit,
            offset=offset,
        )
