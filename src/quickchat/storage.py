"""
Durable key-value cells for the token and the theme preference.

Writes are last-writer-wins; there is no coupling with in-memory state
beyond callers writing here before they update memory.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol, Union

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
THEME_KEY = "theme"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store. Useful for embedding and tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Store backed by a single JSON object on disk.

    Other keys in the file (e.g. the CLI's ``server_url``) are preserved.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            data = json.loads(self._path.read_text())
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable state file %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2))

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)
