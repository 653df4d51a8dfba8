"""
Auth: session d'administration

- Décodage des claims du token (exp, iat, sub)
- TokenStore: slot unique persistant (last-write-wins)
- SessionManager: login, restore, logout, expiration, rafraîchissement
"""

from .interfaces import (
    # Enums
    SessionState,
    # Data classes
    Session,
    AuthResult,
    # Interfaces
    IKeyValueStore,
    ITokenStore,
    IAuthGateway,
    ISessionManager,
    # Exceptions
    SessionInvariantError,
)
from .key_value_store import MemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStoreError
from .token_decoder import TokenDecoder, TokenDecodeError
from .token_store import TokenStore, TokenStoreError
from .session_manager import SessionManager

__all__ = [
    # Enums
    "SessionState",
    # Data classes
    "Session",
    "AuthResult",
    # Interfaces
    "IKeyValueStore",
    "ITokenStore",
    "IAuthGateway",
    "ISessionManager",
    # Implementations
    "MemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "TokenDecoder",
    "TokenStore",
    "SessionManager",
    # Exceptions
    "SessionInvariantError",
    "KeyValueStoreError",
    "TokenDecodeError",
    "TokenStoreError",
]
