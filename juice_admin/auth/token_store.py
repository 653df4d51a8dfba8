"""
Auth - Token Store

Slot unique et persistant du token de session.

Règles:
    - Une seule valeur: chaque save remplace la précédente (last-write-wins)
    - load ne lève jamais: None signifie "absent"
    - clear est idempotent
"""

import threading
from typing import Optional

from ..logging import StructuredLogger
from .interfaces import IKeyValueStore, ITokenStore
from .key_value_store import KeyValueStoreError, MemoryKeyValueStore


class TokenStoreError(Exception):
    """Utilisation invalide du TokenStore."""

    pass


class TokenStore(ITokenStore):
    """
    Persistance du token via un IKeyValueStore.

    La valeur courante est aussi conservée dans un slot protégé par verrou:
    un lecteur concurrent obtient soit l'ancienne, soit la nouvelle valeur,
    jamais un token partiel. Si une écriture ou un effacement échoue dans le
    backend, le slot en mémoire fait foi jusqu'à la prochaine écriture
    réussie (mode dégradé, sans crash).

    Example:
        store = TokenStore(JsonFileKeyValueStore("session.json"))
        await store.save(token)
        assert await store.load() == token
    """

    DEFAULT_STORAGE_KEY: str = "adminToken"

    def __init__(
        self,
        backend: Optional[IKeyValueStore] = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        """
        Args:
            backend: Collaborateur de persistance (mémoire si None)
            storage_key: Clé fixe du token dans le backend
            logger: Logger structuré
        """
        if not storage_key or not storage_key.strip():
            raise TokenStoreError("storage_key cannot be empty")

        self._backend = backend or MemoryKeyValueStore()
        self._storage_key = storage_key
        self._logger = logger or StructuredLogger("juice_admin.token_store")
        self._lock = threading.Lock()
        self._slot: Optional[str] = None
        self._backend_stale = False

    @property
    def storage_key(self) -> str:
        return self._storage_key

    async def save(self, token: str) -> None:
        """
        Persiste le token.

        Raises:
            TokenStoreError: Si token vide ou non-string
        """
        if not token or not isinstance(token, str):
            raise TokenStoreError("token must be a non-empty string")

        with self._lock:
            self._slot = token

        try:
            await self._backend.set(self._storage_key, token)
        except KeyValueStoreError as e:
            self._mark_stale(True)
            self._logger.error("Token persistence failed, keeping in-memory copy", error=str(e))
        else:
            self._mark_stale(False)

    async def load(self) -> Optional[str]:
        """Retourne le token persisté, None si absent."""
        with self._lock:
            if self._backend_stale:
                return self._slot

        try:
            value = await self._backend.get(self._storage_key)
        except KeyValueStoreError as e:
            self._logger.warn("Token backend unreadable, using in-memory copy", error=str(e))
            with self._lock:
                return self._slot

        with self._lock:
            self._slot = value or None
            return self._slot

    async def clear(self) -> None:
        """Efface le token. Sans effet si déjà absent."""
        with self._lock:
            self._slot = None

        try:
            await self._backend.delete(self._storage_key)
        except KeyValueStoreError as e:
            self._mark_stale(True)
            self._logger.error("Token removal failed in backend", error=str(e))
        else:
            self._mark_stale(False)

    def _mark_stale(self, stale: bool) -> None:
        """Le backend ne reflète plus le slot: load lit le slot seul."""
        with self._lock:
            self._backend_stale = stale
