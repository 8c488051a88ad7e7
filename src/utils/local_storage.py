"""
A durable key-value slot on disk, standing in for browser local storage.

Values are strings (callers serialize), the whole map lives in one JSON file.
Reads and writes raise LocalStorageError; callers decide how loud to be.
"""

import json
import os
from typing import Dict, Optional

from utils.logger import get_logger

_logger = get_logger(__name__)


class LocalStorageError(Exception):
    pass


class LocalStorage:
    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise LocalStorageError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise LocalStorageError(f"Unexpected content in {self.path}")
        return data

    def _dump(self, data: Dict[str, str]) -> None:
        tmp_path = self.path + ".tmp"
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise LocalStorageError(f"Cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._load()
        except LocalStorageError as e:
            # unreadable file gets replaced rather than blocking every write
            _logger.warning(f"{e}; starting a fresh store")
            data = {}
        data[key] = value
        self._dump(data)
        _logger.debug(f"local storage: wrote {key!r}")

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)
