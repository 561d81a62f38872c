"""JSON Document Sink — loads and overwrites the record store's backing file.

Invariants:
    - load() fails soft: unreadable, invalid or non-object documents yield {}
      and an ERROR log entry; non-object entries are dropped with an ERROR
    - save() encodes the payload before any file is opened; encoding failures
      surface as PersistenceError
    - save() rewrites the whole document (no partial writes, no journal)
    - save() is atomic on disk: temp file in the same directory, then os.replace
    - Write failures surface as PersistenceError, never silently

Design Decisions:
    - Serialize on the event loop, write in a worker thread: the snapshot is
      consistent with memory while the disk IO does not block other requests
    - Whole-document overwrite kept on every commit; cost grows with store size
"""

import asyncio
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from tempfile import NamedTemporaryFile

from stockswap.core.domain_types import Record
from stockswap.core.errors import ErrorContext, PersistenceError

logger = logging.getLogger(__name__)


class JsonDocumentSink:
    """Persistence sink backed by a single JSON object file."""

    def __init__(self, path: str | Path, indent: int | None = 2):
        self.path = Path(path)
        self.indent = indent

    def load(self) -> dict[str, Record]:
        """Parse the document; any failure yields an empty mapping.

        Entries whose value is not a JSON object are dropped and logged.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load {self.path.name}: {e}", extra={"path": str(self.path)})
            return {}
        if not isinstance(data, dict):
            logger.error(
                f"Failed to load {self.path.name}: document is not a JSON object",
                extra={"path": str(self.path)},
            )
            return {}
        records: dict[str, Record] = {}
        for record_id, record in data.items():
            if not isinstance(record, dict):
                logger.error(
                    f"Skipping entry {record_id} in {self.path.name}: not a JSON object",
                    extra={"path": str(self.path), "record_id": record_id},
                )
                continue
            records[record_id] = record
        logger.info(f"Loaded {len(records)} records from {self.path.name}")
        return records

    async def save(self, records: Mapping[str, Record]) -> None:
        """Overwrite the document with the current records."""
        try:
            payload = json.dumps(
                records, indent=self.indent, ensure_ascii=False,
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise PersistenceError(
                "records are not JSON serializable", str(self.path),
                ErrorContext(debug_info={"reason": str(e)}),
            ) from e
        try:
            await asyncio.to_thread(self._write_atomic, payload)
        except OSError as e:
            raise PersistenceError(
                "document write failed", str(self.path),
                ErrorContext(debug_info={"reason": str(e)}),
            ) from e

    def _write_atomic(self, payload: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_name: str | None = None
        try:
            with NamedTemporaryFile(
                "wb", dir=str(self.path.parent),
                prefix=f".{self.path.name}.", suffix=".tmp", delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, self.path)
        except Exception:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
