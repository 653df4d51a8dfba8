"""
Auth - Key/Value Stores

Backends de persistance pour le TokenStore.

Note:
    MemoryKeyValueStore pour tests et sessions éphémères,
    JsonFileKeyValueStore pour conserver la session entre deux lancements.
"""

import asyncio
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from .interfaces import IKeyValueStore


class KeyValueStoreError(Exception):
    """Erreur de lecture/écriture du stockage persistant."""

    pass


class MemoryKeyValueStore(IKeyValueStore):
    """Stockage en mémoire (durée de vie du processus)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    async def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    async def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        """Copie du contenu (tests)."""
        with self._lock:
            return dict(self._data)


class JsonFileKeyValueStore(IKeyValueStore):
    """
    Stockage dans un document JSON unique.

    Chaque écriture réécrit le document dans un fichier temporaire puis le
    remplace atomiquement (os.replace): un lecteur ne voit jamais un
    document partiel. Les I/O fichier sont exécutées hors event loop.

    Example:
        store = JsonFileKeyValueStore("~/.config/juice-admin/session.json")
        await store.set("adminToken", token)
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    async def get(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read)
        value = data.get(key)
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._update, key, value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._update, key, None)

    def _read(self) -> Dict[str, object]:
        with self._lock:
            return self._read_unlocked()

    def _read_unlocked(self) -> Dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            # Document corrompu: traité comme vide, réécrit au prochain set
            return {}
        except OSError as e:
            raise KeyValueStoreError(f"Cannot read {self.path}: {e}")
        return data if isinstance(data, dict) else {}

    def _update(self, key: str, value: Optional[str]) -> None:
        with self._lock:
            data = self._read_unlocked()
            if value is None:
                if key not in data:
                    return
                data.pop(key)
            else:
                data[key] = value
            self._write_unlocked(data)

    def _write_unlocked(self, data: Dict[str, object]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".kv-", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise KeyValueStoreError(f"Cannot write {self.path}: {e}")
