from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import ValidationError

from casedash.data import DATA_DIR
from casedash.records import CaseRecord
from casedash.schemas import CachedRecordsModel


CACHE_DIR = DATA_DIR / ".casedash_cache"
DATASET_KEY = "covidData"
LAST_UPDATED_KEY = "lastUpdated"

logger = logging.getLogger(__name__)


class FileKeyValueCache:
    """String values stored one file per key under ``root``."""

    def __init__(self, root: Path | str = CACHE_DIR):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class RecordStore:
    def __init__(self, cache: Optional[FileKeyValueCache] = None):
        self.cache = cache if cache is not None else FileKeyValueCache()
        self.records: List[CaseRecord] = []
        self.last_updated: Optional[str] = None

    def load(self) -> Optional[List[CaseRecord]]:
        """Return the cached dataset, or None on a miss or unreadable cache."""
        try:
            data = self.cache.get(DATASET_KEY)
            last_updated = self.cache.get(LAST_UPDATED_KEY)
            if not data or not last_updated:
                return None
            records = CachedRecordsModel.model_validate_json(data).root
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("Failed to load cached case data: %s", exc)
            return None
        self.records = records
        self.last_updated = last_updated
        logger.info("Data loaded from cache, last updated: %s", _display_timestamp(last_updated))
        return records

    def save(self, records: Iterable[CaseRecord]) -> None:
        try:
            self.cache.set(DATASET_KEY, json.dumps(list(records)))
            stamp = datetime.now(timezone.utc).isoformat()
            self.cache.set(LAST_UPDATED_KEY, stamp)
            self.last_updated = stamp
        except Exception as exc:
            logger.warning("Failed to save case data to cache: %s", exc)

    def replace(self, records: Iterable[CaseRecord]) -> None:
        self.records = list(records)
        self.save(self.records)

    def clear(self) -> None:
        try:
            self.cache.delete(DATASET_KEY)
            self.cache.delete(LAST_UPDATED_KEY)
        except OSError as exc:
            logger.warning("Failed to clear case data cache: %s", exc)
        self.records = []
        self.last_updated = None


def _display_timestamp(value: str) -> str:
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        return value
