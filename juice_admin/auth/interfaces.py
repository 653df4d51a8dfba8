"""
Auth - Interfaces

Contrats pour la session d'administration: persistance du token,
cycle de vie de la session et appel de login.

Règles:
    - Une seule session courante à la fois
    - Le token est sauvegardé AVANT que login ne retourne
    - Un token indécodable est traité comme expiré
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from ..core.errors import AuthError, NetworkError

if TYPE_CHECKING:
    from ..network.interfaces import ApiResponse


class SessionInvariantError(ValueError):
    """Session incohérente (expires_at <= issued_at)."""

    pass


class SessionState(Enum):
    """États du SessionManager."""

    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Session:
    """
    Session décodée depuis les claims du token.

    Attributes:
        token: Token brut (opaque)
        subject: Identité (claim sub, ou login renvoyé par le serveur)
        issued_at: Émission (claim iat, ou instant du décodage)
        expires_at: Expiration (claim exp)
        user: Données utilisateur renvoyées par /admin/login
    """

    token: str
    subject: str
    issued_at: datetime
    expires_at: datetime
    user: Optional[Dict[str, Any]] = field(default=None, compare=False)

    def __post_init__(self):
        if self.expires_at <= self.issued_at:
            raise SessionInvariantError("expires_at must be after issued_at")

    def __repr__(self) -> str:
        return f"Session(subject={self.subject!r}, expires_at={self.expires_at.isoformat()})"


@dataclass
class AuthResult:
    """
    Résultat d'une tentative de login.

    Attributes:
        success: True si session établie
        session: Session créée (si succès)
        error: Catégorie d'échec
        message: Message lisible
        errors: Violations de validation (INVALID_INPUT)
    """

    success: bool
    session: Optional[Session] = None
    error: Optional[Union[AuthError, NetworkError]] = None
    message: Optional[str] = None
    errors: List[str] = field(default_factory=list)


class IKeyValueStore(ABC):
    """Collaborateur de persistance clé/valeur (équivalent localStorage)."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Retourne la valeur ou None si absente."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Écrit la valeur (remplacement atomique)."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Supprime la clé; sans effet si absente."""
        pass


class ITokenStore(ABC):
    """Slot unique persistant du token de session."""

    @abstractmethod
    async def save(self, token: str) -> None:
        """Persiste le token en écrasant la valeur précédente."""
        pass

    @abstractmethod
    async def load(self) -> Optional[str]:
        """Retourne le token courant, None si absent (jamais d'exception)."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Efface le token. Idempotent."""
        pass


class IAuthGateway(ABC):
    """Appel POST /admin/login (implémenté par AdminApi)."""

    @abstractmethod
    async def login(self, credentials: Mapping[str, Any]) -> "ApiResponse":
        pass


class ISessionManager(ABC):
    """
    Interface cycle de vie de la session.

    États: ANONYMOUS → AUTHENTICATING → AUTHENTICATED → ANONYMOUS
    """

    @property
    @abstractmethod
    def state(self) -> SessionState:
        pass

    @property
    @abstractmethod
    def current_session(self) -> Optional[Session]:
        pass

    @abstractmethod
    async def login(self, credentials: Any) -> AuthResult:
        """
        Valide puis authentifie.

        Returns:
            AuthResult (jamais d'exception)
        """
        pass

    @abstractmethod
    async def restore(self) -> Optional[Session]:
        """Restaure la session persistée au démarrage si non expirée."""
        pass

    @abstractmethod
    async def logout(self, reason: str = "manual") -> bool:
        """
        Termine la session et efface le token. Idempotent.

        Returns:
            True si une session a été terminée
        """
        pass

    @abstractmethod
    def is_expired(self, session: Optional[Session] = None) -> bool:
        """True si expirée, absente ou indécodable."""
        pass

    @abstractmethod
    def should_refresh(self, session: Optional[Session] = None) -> bool:
        """True si expiration dans moins de refresh_threshold_hours (indicatif)."""
        pass
