"""
Network - Interfaces

Contrats pour les appels vers l'API d'administration:
- Timeouts par endpoint
- Retry avec backoff exponentiel (lectures idempotentes uniquement)
- Pipeline de requêtes (credential Bearer, logout sur 401)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from ..core.errors import AuthError, NetworkError

T = TypeVar("T")


class TimeoutType(Enum):
    """Types de timeout supportés."""

    CONNECTION = "connection"
    REQUEST = "request"
    READ = "read"
    WRITE = "write"


@dataclass
class TimeoutConfig:
    """
    Configuration des timeouts (secondes).

    Défaut: 10s, valeur historique de la console.
    """

    connection_timeout: float = 10.0
    request_timeout: float = 10.0
    read_timeout: Optional[float] = None
    write_timeout: Optional[float] = None


@dataclass
class RetryConfig:
    """Configuration des retries."""

    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 10.0
    exponential_base: float = 2.0
    retryable_exceptions: tuple = field(default_factory=lambda: (ConnectionError, TimeoutError))


@dataclass
class RetryResult:
    """Résultat d'une opération avec retry."""

    success: bool
    result: Optional[Any]
    attempts: int
    total_delay: float
    last_error: Optional[Exception]


@dataclass
class ApiResponse:
    """
    Réponse d'un appel API telle que remise à l'appelant.

    Attributes:
        status_code: Code HTTP (None si échec transport)
        data: Corps JSON décodé, texte brut, ou None
        error: UNAUTHORIZED (401), TIMEOUT / UNREACHABLE (transport), ou None
        message: Détail lisible de l'échec
        attempts: Nombre de tentatives effectuées
    """

    status_code: Optional[int] = None
    data: Any = None
    error: Optional[Union[AuthError, NetworkError]] = None
    message: Optional[str] = None
    attempts: int = 1

    @property
    def success(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300


class ITimeoutManager(ABC):
    """Interface gestion timeouts."""

    @abstractmethod
    def get_timeout(self, timeout_type: TimeoutType, endpoint: Optional[str] = None) -> float:
        """Retourne le timeout configuré (endpoint-specific ou défaut)."""
        pass

    @abstractmethod
    def set_endpoint_timeout(self, endpoint: str, config: TimeoutConfig) -> None:
        """Configure un timeout spécifique par endpoint."""
        pass

    @abstractmethod
    def validate_timeout(self, timeout_type: TimeoutType, value: float) -> bool:
        """Valide que le timeout respecte les limites."""
        pass


class IRetryHandler(ABC):
    """Interface gestion retries."""

    @abstractmethod
    async def execute_with_retry(
        self,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        config: Optional[RetryConfig] = None,
        **kwargs: Any,
    ) -> RetryResult:
        """Exécute avec retry et backoff exponentiel."""
        pass

    @abstractmethod
    def calculate_delay(self, attempt: int, config: RetryConfig) -> float:
        """Délai backoff pour une tentative (0-indexed)."""
        pass


class IRequestPipeline(ABC):
    """
    Enveloppe de tout appel sortant.

    Avant: attache le token courant (Bearer) s'il existe.
    Après: sur 401, logout terminé AVANT de remettre la réponse.
    """

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        endpoint: Optional[str] = None,
        teardown_on_unauthorized: bool = True,
    ) -> ApiResponse:
        pass
