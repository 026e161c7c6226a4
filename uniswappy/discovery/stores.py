"""Pair store implementations.

Factory discovery runs on worker threads that share one store, so both
stores guard their state with a lock.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path

import structlog

from uniswappy.models.records import PairRecord
from uniswappy.models.types import normalize_address

logger = structlog.get_logger()


class InMemoryPairStore:
    """Pair store that forgets everything when the process exits."""

    def __init__(self, records: list[PairRecord] | None = None) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, PairRecord] = {}
        for record in records or []:
            self._records[record.market_address] = record

    def exists(self, market_address: str) -> bool:
        with self._lock:
            return normalize_address(market_address) in self._records

    def save(self, record: PairRecord) -> None:
        with self._lock:
            self._records[record.market_address] = record

    def records(self) -> list[PairRecord]:
        """Snapshot of all saved records, in save order."""
        with self._lock:
            return list(self._records.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class JsonFilePairStore(InMemoryPairStore):
    """Pair store persisted as JSON lines, one record per line.

    The file is read once on construction and each new record is appended
    as a single line, which keeps discovery idempotent across process
    restarts without rewriting the file.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        records: list[PairRecord] = []
        if self.path.exists():
            with open(self.path) as f:
                records = [PairRecord.model_validate_json(line) for line in f if line.strip()]
            logger.debug("pair_store_loaded", path=str(self.path), count=len(records))
        super().__init__(records)

    def save(self, record: PairRecord) -> None:
        with self._lock:
            if record.market_address in self._records:
                return
            self._records[record.market_address] = record
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a") as f:
                f.write(json.dumps(record.model_dump(by_alias=True)) + "\n")


__all__ = ["InMemoryPairStore", "JsonFilePairStore"]
