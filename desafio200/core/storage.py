"""Durable storage for the challenge state.

``StatePersistence`` serializes an ``AppState`` under a versioned key in a
key-value backend. Three backends are provided: an in-memory dict, one file
per key under a directory, and a Qt ``QSettings`` INI file.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from PySide6.QtCore import QSettings

from desafio200.core.errors import ValidationError
from desafio200.core.models import AppState, STORAGE_KEY
from desafio200.core.validation import parse_state

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_DIR = Path.home() / ".desafio200"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class FileKeyValueStore:
    """Stores each key as a UTF-8 file under ``base_dir`` (default ~/.desafio200)."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else DEFAULT_STORAGE_DIR
        self._base_dir.mkdir(parents=True, exist_ok=True)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def path_for(self, key: str) -> Path:
        # ':' is not allowed in Windows file names
        safe = re.sub(r"[^A-Za-z0-9._-]", "_", key)
        return self._base_dir / f"{safe}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


class QSettingsKeyValueStore:
    """Stores keys in an INI file through Qt's ``QSettings``."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._settings = QSettings(str(self._file_path), QSettings.Format.IniFormat)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self, key: str) -> Optional[str]:
        if not self._settings.contains(key):
            return None
        value = self._settings.value(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        self._settings.setValue(key, value)
        self._settings.sync()

    def remove(self, key: str) -> None:
        self._settings.remove(key)
        self._settings.sync()


class StatePersistence:
    """Loads and saves the challenge state under a single versioned key."""

    def __init__(self, backend: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self._backend = backend
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> Optional[AppState]:
        """Return the stored state, or None when absent or unusable.

        Corrupt or schema-invalid content is logged and ignored so that startup
        can always fall back to a fresh state.
        """
        try:
            raw = self._backend.get(self._key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read stored state %r: %s", self._key, e)
            return None
        if not raw:
            return None
        try:
            return parse_state(raw)
        except ValidationError as e:
            logger.warning("Ignoring invalid stored state %r: %s", self._key, e)
            return None

    def save(self, state: AppState) -> None:
        self._backend.set(self._key, json.dumps(state.to_dict(), ensure_ascii=False))
        logger.debug("Saved state under %r", self._key)

    def clear(self) -> None:
        self._backend.remove(self._key)
        logger.debug("Removed stored state %r", self._key)
