# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Durable string key-value storage, the local-storage stand-in.

Every key maps to a string value. Structured values (account records) are
serialised to JSON by their owners before they reach this layer.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

# Anchor the default storage path to the project root, not the working directory.
BASE_DIR = Path(__file__).resolve().parents[3]
DEFAULT_STORAGE_PATH = Path(
    os.getenv("ACCT_STORAGE_PATH", str(BASE_DIR / "data" / "storage.yml"))
).resolve()


class StorageError(Exception):
    pass


class KeyValueStore:
    """String-keyed slots persisted to a YAML file.

    `path=None` keeps everything in memory. With `autoflush` every mutation is
    written through immediately, so a crash never loses an acknowledged write.
    """

    def __init__(self, path: Optional[Path] = None, *, autoflush: bool = True) -> None:
        self.path = Path(path).resolve() if path is not None else None
        self.autoflush = autoflush
        self._data: Dict[str, str] = {}
        self.load()

    def load(self) -> None:
        if self.path is None or not self.path.exists():
            self._data = {}
            return
        try:
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise StorageError(f"Unreadable storage file {self.path}: {e}") from e
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise StorageError(f"Storage file {self.path} does not hold a mapping")
        self._data = {str(k): ("" if v is None else str(v)) for k, v in raw.items()}
        logger.debug("Loaded %d storage keys from %s", len(self._data), self.path)

    def flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.safe_dump(self._data, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )

    def close(self) -> None:
        self.flush()

    def __enter__(self) -> "KeyValueStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _changed(self) -> None:
        if self.autoflush:
            self.flush()

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)
        self._changed()

    def remove_item(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._changed()

    def keys(self) -> List[str]:
        return list(self._data.keys())

    def clear(self) -> None:
        self._data = {}
        self._changed()

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
