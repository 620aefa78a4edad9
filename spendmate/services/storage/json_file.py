"""
JSON File Storage Implementation

DESIGN DECISION: All state lives in one small JSON object on disk,
{key: string_value}. That mirrors browser local storage:
1. Every write rewrites the whole file (the data is tiny)
2. No transactions, no migrations, no versioning
3. The user can open the file and read it

TRADEOFFS:
- A corrupt file means starting over. We surface that as an empty
  store rather than an error (see ExpenseStore.load)
- Writes go to a temp file first and are swapped in, so a crash
  mid-write leaves the previous file intact
"""

import json
import os
from pathlib import Path
from typing import Optional

import structlog

from spendmate.config import get_settings
from spendmate.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileStorage(KeyValueStorageInterface):
    """
    Key-value storage backed by a single JSON file.

    The file is read on every get so external edits are picked up;
    lists of personal expenses are small enough for this to be cheap.
    """

    def __init__(self, path: Optional[str | Path] = None):
        self._path = Path(path or get_settings().storage.data_file)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        """
        Read the whole file.

        A missing file is an empty store. A file that is not a JSON
        object is also treated as empty - the caller resets to defaults.
        """
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(
                "storage_file_unreadable",
                path=str(self._path),
                error=str(e),
            )
            return {}
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

        if not isinstance(data, dict):
            logger.warning(
                "storage_file_unexpected_shape",
                path=str(self._path),
                type=type(data).__name__,
            )
            return {}

        return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in data.items()}

    def _write_all(self, data: dict[str, str]) -> None:
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def keys(self) -> list[str]:
        return list(self._read_all().keys())
