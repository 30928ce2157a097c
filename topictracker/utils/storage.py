"""
Storage utility.

Persistent key-value map used by the language and topic stores.
"""

import json
import os
import shutil
import logging
from typing import Callable, Dict, Generic, List, Optional, TypeVar
from datetime import datetime

logger = logging.getLogger(__name__)

V = TypeVar("V")


class PersistentMap(Generic[V]):
    """
    Key-value map of records, written through to a JSON file on every change.

    Handles:
    - Load from disk (with restore from backup if the file is corrupted)
    - Atomic writes (backup, temp file, rename)
    - In-memory operation when no path is given
    """

    def __init__(
        self,
        path: Optional[str],
        decode: Callable[[dict], V],
        encode: Callable[[V], dict],
        key: Callable[[V], str]
    ):
        """
        Initialize map from disk or create new empty map.

        Args:
            path: Path to the JSON file, or None for an in-memory map
            decode: Builds a record from its JSON dict
            encode: Converts a record to a JSON-serializable dict
            key: Extracts the key of a record when loading from disk
        """
        self.path = path
        self._decode = decode
        self._encode = encode
        self._key = key
        self._records: Dict[str, V] = {}
        self.version = "1.0.0"
        self.last_updated = datetime.utcnow().isoformat() + "Z"

        if path is None:
            logger.debug("Using in-memory map")
        elif os.path.exists(path):
            self._load()
        else:
            logger.info(f"No existing data file at {path}, initializing empty map")

    def _load(self) -> None:
        """Load records from disk."""
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)

            self.version = data.get("version", "1.0.0")
            self.last_updated = data.get("last_updated", self.last_updated)

            self._records = {}
            for record_data in data.get("records", []):
                record = self._decode(record_data)
                self._records[self._key(record)] = record

            logger.info(f"Loaded {len(self._records)} records from {self.path}")

        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Failed to parse {self.path}: {e}")
            self._try_restore_from_backup()

    def _try_restore_from_backup(self) -> None:
        """Attempt to restore from backup file if the data file is corrupted."""
        backup_path = f"{self.path}.backup"
        if not os.path.exists(backup_path):
            logger.warning(f"No backup file found for {self.path}. Starting with empty map.")
            self._records = {}
            return

        logger.warning(f"Attempting to restore from backup: {backup_path}")
        try:
            with open(backup_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            records = {}
            for record_data in data.get("records", []):
                record = self._decode(record_data)
                records[self._key(record)] = record
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Backup restoration failed: {e}. Starting with empty map.")
            self._records = {}
            return

        shutil.copy(backup_path, self.path)
        self._records = records
        logger.info(f"Restored {len(records)} records from backup")

    def get(self, key: str) -> Optional[V]:
        """Retrieve a record by key. Returns None if not found."""
        return self._records.get(key)

    def insert(self, key: str, value: V) -> Optional[V]:
        """
        Insert or replace a record.

        Returns:
            The record previously stored under key, or None
        """
        previous = self._records.get(key)
        self._records[key] = value
        try:
            self.save()
        except OSError:
            # Keep memory in line with what is on disk
            if previous is None:
                del self._records[key]
            else:
                self._records[key] = previous
            raise
        return previous

    def remove(self, key: str) -> Optional[V]:
        """
        Remove a record.

        Returns:
            The removed record, or None if key was absent
        """
        removed = self._records.pop(key, None)
        if removed is not None:
            try:
                self.save()
            except OSError:
                self._records[key] = removed
                raise
        return removed

    def remove_many(self, keys: List[str]) -> List[V]:
        """
        Remove several records with a single write.

        Either every present key is removed or, if the write fails,
        none of them is.

        Returns:
            The removed records (absent keys are skipped)
        """
        removed = {}
        for key in keys:
            record = self._records.pop(key, None)
            if record is not None:
                removed[key] = record

        if removed:
            try:
                self.save()
            except OSError:
                self._records.update(removed)
                raise
        return list(removed.values())

    def values(self) -> List[V]:
        """Return all records. Order is unspecified."""
        return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: str) -> bool:
        return key in self._records

    def save(self) -> None:
        """
        Persist records to disk with atomic write pattern.
        Creates backup before write. No-op for in-memory maps.
        """
        if self.path is None:
            return

        self.last_updated = datetime.utcnow().isoformat() + "Z"

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        if os.path.exists(self.path):
            backup_path = f"{self.path}.backup"
            shutil.copy(self.path, backup_path)
            logger.debug(f"Created backup: {backup_path}")

        data = {
            "version": self.version,
            "last_updated": self.last_updated,
            "records": [self._encode(record) for record in self._records.values()]
        }

        temp_path = f"{self.path}.tmp"
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            os.replace(temp_path, self.path)
            logger.debug(f"Saved {len(self._records)} records to {self.path}")

        except OSError as e:
            logger.error(f"Failed to save {self.path}: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
