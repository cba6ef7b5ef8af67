"""Persistent calculation history.

LocalStorage is a file-backed string key-value store. RecordStore keeps the
calculation history under one key as a JSON array, rewritten wholesale on
each append. Reads fail soft: a corrupt value reads as empty history.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from .config import CalcConfig
from .errors import PersistenceReadFailure
from .models import CalculationRecord

logger = logging.getLogger(__name__)


class LocalStorage:
    """String key-value storage persisted as a single JSON object file."""

    def __init__(self, path):
        """Initialize with the storage file path.

        Args:
            path: JSON file holding the key-value map. Created on first write.
        """
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError, UnicodeDecodeError) as e:
            logger.warning("Storage file %s is unreadable, treating as empty: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s is not a JSON object, treating as empty", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: Dict[str, str]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value for key, or None."""
        return self._read().get(key)

    def set_item(self, key: str, value: str):
        """Store a value, replacing any previous one."""
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str):
        """Remove a key if present."""
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def keys(self) -> List[str]:
        """List stored keys."""
        return list(self._read().keys())


class RecordStore:
    """Append-only calculation history under one storage key."""

    def __init__(
        self,
        storage: LocalStorage,
        key: str = "calculationHistory",
        max_stored: int = 0,
    ):
        """Initialize the record store.

        Args:
            storage: Backing key-value storage.
            key: Storage key holding the JSON array.
            max_stored: Keep at most this many records on write (0 = unlimited).
        """
        self.storage = storage
        self.key = key
        self.max_stored = max_stored

    def _decode(self, raw: str) -> List[dict]:
        """Decode the stored JSON array.

        Raises:
            PersistenceReadFailure: If the value is not a JSON array.
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PersistenceReadFailure(f"{self.key} is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise PersistenceReadFailure(f"{self.key} is not a JSON array")
        return data

    def _read_raw_list(self) -> List[dict]:
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []
        return self._decode(raw)

    def append(self, record: CalculationRecord) -> bool:
        """Append a record and write the whole list back.

        A corrupt stored value is moved aside to "<key>.corrupt" and a new
        list is started. Write failures are logged, not raised.

        Returns:
            True if the record was persisted.
        """
        try:
            try:
                history = self._read_raw_list()
            except PersistenceReadFailure as e:
                logger.warning("%s; saving it as %s.corrupt and starting fresh", e, self.key)
                self.storage.set_item(f"{self.key}.corrupt", self.storage.get_item(self.key))
                history = []

            history.append(record.to_dict())
            if self.max_stored > 0 and len(history) > self.max_stored:
                history = history[-self.max_stored:]

            self.storage.set_item(self.key, json.dumps(history))
        except OSError as e:
            logger.error("Could not save record %s to %s: %s", record.id, self.storage.path, e)
            return False

        logger.debug("Stored record %s (%d total)", record.id, len(history))
        return True

    def load_all(self) -> List[CalculationRecord]:
        """Load every record in chronological order.

        Returns:
            Records oldest first, or an empty list if the stored value
            cannot be read. Malformed entries are skipped.
        """
        try:
            raw_records = self._read_raw_list()
        except PersistenceReadFailure as e:
            logger.warning("Could not load history: %s", e)
            return []

        records = []
        for entry in raw_records:
            try:
                records.append(CalculationRecord.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError, OverflowError, OSError) as e:
                logger.warning("Skipping malformed history entry: %s", e)
        return records

    def load_recent(self, n: int = 10) -> List[CalculationRecord]:
        """Load the last n records, most recent first."""
        if n <= 0:
            return []
        return list(reversed(self.load_all()[-n:]))

    def clear(self):
        """Remove all stored history."""
        self.storage.remove_item(self.key)


def get_record_store(config: CalcConfig) -> RecordStore:
    """Get a record store for a configuration.

    Args:
        config: Loaded calculator configuration.

    Returns:
        RecordStore backed by the configured storage file.
    """
    return RecordStore(
        LocalStorage(config.storage_path),
        key=config.storage_key,
        max_stored=config.max_stored,
    )
