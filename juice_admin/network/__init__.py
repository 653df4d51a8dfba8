"""
Network: appels vers l'API d'administration

- Timeouts connexion/requête (défaut 10s, configurables par endpoint)
- Retry avec backoff exponentiel, lectures idempotentes uniquement
- Pipeline: token Bearer relu à chaque appel, logout automatique sur 401
- Échecs transport remontés en NetworkError.TIMEOUT / UNREACHABLE
"""

from .interfaces import (
    # Enums
    TimeoutType,
    # Data classes
    TimeoutConfig,
    RetryConfig,
    RetryResult,
    ApiResponse,
    # Interfaces
    ITimeoutManager,
    IRetryHandler,
    IRequestPipeline,
)
from .timeout_manager import TimeoutManager, InvalidTimeoutError
from .retry_handler import RetryHandler
from .request_pipeline import RequestPipeline
from .http_client import build_async_client

__all__ = [
    # Enums
    "TimeoutType",
    # Data classes
    "TimeoutConfig",
    "RetryConfig",
    "RetryResult",
    "ApiResponse",
    # Interfaces
    "ITimeoutManager",
    "IRetryHandler",
    "IRequestPipeline",
    # Implementations
    "TimeoutManager",
    "RetryHandler",
    "RequestPipeline",
    "build_async_client",
    # Exceptions
    "InvalidTimeoutError",
]
