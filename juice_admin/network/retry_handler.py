"""
Network - Retry Handler

Retries avec backoff exponentiel pour les lectures idempotentes.

Les appels mutants (POST, DELETE) ne passent jamais par ici: un retry
pourrait dupliquer une écriture côté serveur.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from .interfaces import IRetryHandler, RetryConfig, RetryResult

T = TypeVar("T")


class RetryHandler(IRetryHandler):
    """
    Gestion retries avec backoff exponentiel.

    Example:
        handler = RetryHandler(RetryConfig(max_attempts=3, initial_delay=1.0))
        result = await handler.execute_with_retry(client.get, "/products")
    """

    DEFAULT_MAX_ATTEMPTS: int = 3
    DEFAULT_INITIAL_DELAY: float = 1.0
    DEFAULT_MAX_DELAY: float = 10.0
    DEFAULT_EXPONENTIAL_BASE: float = 2.0

    def __init__(self, default_config: Optional[RetryConfig] = None) -> None:
        """
        Args:
            default_config: Configuration par défaut (optionnel)

        Raises:
            ValueError: Si max_attempts < 1
        """
        self._default_config = default_config or RetryConfig()
        if self._default_config.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        self._retry_stats: Dict[str, int] = {
            "total_retries": 0,
            "successful_retries": 0,
            "failed_retries": 0,
        }

    @property
    def default_config(self) -> RetryConfig:
        return self._default_config

    async def execute_with_retry(
        self,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        config: Optional[RetryConfig] = None,
        **kwargs: Any,
    ) -> RetryResult:
        """
        Exécute func avec backoff exponentiel entre les tentatives.

        Backoff: delay = min(initial * (base ^ attempt), max_delay)
        - Attempt 0: 1s
        - Attempt 1: 2s

        Une exception non retryable termine immédiatement (pas de délai).

        Returns:
            RetryResult avec succès/échec et détails
        """
        retry_config = config or self._default_config
        last_error: Optional[Exception] = None
        total_delay: float = 0.0

        for attempt in range(retry_config.max_attempts):
            try:
                result = await func(*args, **kwargs)

                if attempt > 0:
                    self._retry_stats["successful_retries"] += 1

                return RetryResult(
                    success=True,
                    result=result,
                    attempts=attempt + 1,
                    total_delay=total_delay,
                    last_error=None,
                )

            except Exception as e:
                last_error = e

                if not self.is_retryable(e, retry_config):
                    return RetryResult(
                        success=False,
                        result=None,
                        attempts=attempt + 1,
                        total_delay=total_delay,
                        last_error=e,
                    )

                if attempt < retry_config.max_attempts - 1:
                    self._retry_stats["total_retries"] += 1
                    delay = self.calculate_delay(attempt, retry_config)
                    total_delay += delay
                    await asyncio.sleep(delay)

        self._retry_stats["failed_retries"] += 1

        return RetryResult(
            success=False,
            result=None,
            attempts=retry_config.max_attempts,
            total_delay=total_delay,
            last_error=last_error,
        )

    def calculate_delay(self, attempt: int, config: RetryConfig) -> float:
        """
        Calcule délai backoff exponentiel.

        Formula: min(initial * (base ^ attempt), max_delay)
        """
        delay = config.initial_delay * (config.exponential_base**attempt)
        return min(delay, config.max_delay)

    def is_retryable(self, error: Exception, config: RetryConfig) -> bool:
        return isinstance(error, config.retryable_exceptions)

    def get_retry_stats(self) -> Dict[str, int]:
        """Retourne total_retries, successful_retries, failed_retries."""
        return dict(self._retry_stats)

    def reset_stats(self) -> None:
        self._retry_stats = {
            "total_retries": 0,
            "successful_retries": 0,
            "failed_retries": 0,
        }
