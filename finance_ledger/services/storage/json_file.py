"""
JSON File Storage Implementation

DESIGN DECISION: The default backend is a single JSON document on local
disk mapping key -> value, the same shape as browser local storage.

Writes go to a temporary file in the same directory which then replaces
the original, so a crash mid-write never leaves a half-written document.
Transient OS errors (locked file, full buffer) are retried.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from finance_ledger.services.storage.interface import KeyValueStoreInterface, StorageError


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """Key-value store backed by one JSON file."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, str]:
        """Load the whole document; a missing file is an empty store."""
        if not self._path.exists():
            return {}

        try:
            document = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

        if not isinstance(document, dict):
            raise StorageError(f"Unexpected content in {self._path}: not a JSON object")
        return document

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write_document(self, document: dict[str, str]) -> None:
        """Atomically replace the file with a new document."""
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read_document().get(key)

    def set(self, key: str, value: str) -> bool:
        document = self._read_document()
        document[key] = value
        try:
            self._write_document(document)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")
        return True

    def delete(self, key: str) -> bool:
        document = self._read_document()
        if key not in document:
            return False

        del document[key]
        try:
            self._write_document(document)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")
        return True
