"""
Network - Timeout Manager

Gestion centralisée des timeouts des appels API.

Limites:
    - Connexion: 10 secondes max
    - Requête: 30 secondes max (configurable par endpoint)
"""

from typing import Dict, Optional

import httpx

from .interfaces import ITimeoutManager, TimeoutConfig, TimeoutType


class InvalidTimeoutError(Exception):
    """Configuration timeout invalide."""

    pass


class TimeoutManager(ITimeoutManager):
    """
    Gestion centralisée des timeouts.

    Example:
        manager = TimeoutManager(TimeoutConfig(request_timeout=10.0))
        manager.set_endpoint_timeout("products.update_insides", TimeoutConfig(request_timeout=20.0))
        timeout = manager.httpx_timeout("products.update_insides")
    """

    MAX_CONNECTION_TIMEOUT: float = 10.0
    MAX_REQUEST_TIMEOUT: float = 30.0
    MAX_READ_TIMEOUT: float = 60.0
    MAX_WRITE_TIMEOUT: float = 60.0

    def __init__(self, default_config: Optional[TimeoutConfig] = None) -> None:
        """
        Args:
            default_config: Configuration par défaut (optionnel)

        Raises:
            InvalidTimeoutError: Si configuration hors limites
        """
        self._default = default_config or TimeoutConfig()
        self._endpoint_configs: Dict[str, TimeoutConfig] = {}

        self._validate_config(self._default)

    def _validate_config(self, config: TimeoutConfig) -> None:
        if config.connection_timeout <= 0:
            raise InvalidTimeoutError("connection_timeout must be positive")
        if config.connection_timeout > self.MAX_CONNECTION_TIMEOUT:
            raise InvalidTimeoutError(
                f"connection_timeout ({config.connection_timeout}s) exceeds "
                f"maximum ({self.MAX_CONNECTION_TIMEOUT}s)"
            )

        if config.request_timeout <= 0:
            raise InvalidTimeoutError("request_timeout must be positive")
        if config.request_timeout > self.MAX_REQUEST_TIMEOUT:
            raise InvalidTimeoutError(
                f"request_timeout ({config.request_timeout}s) exceeds "
                f"maximum ({self.MAX_REQUEST_TIMEOUT}s)"
            )

        for name, value, maximum in (
            ("read_timeout", config.read_timeout, self.MAX_READ_TIMEOUT),
            ("write_timeout", config.write_timeout, self.MAX_WRITE_TIMEOUT),
        ):
            if value is None:
                continue
            if value <= 0:
                raise InvalidTimeoutError(f"{name} must be positive")
            if value > maximum:
                raise InvalidTimeoutError(f"{name} ({value}s) exceeds maximum ({maximum}s)")

    def get_timeout(self, timeout_type: TimeoutType, endpoint: Optional[str] = None) -> float:
        """
        Retourne le timeout configuré (endpoint-specific ou défaut).

        READ et WRITE retombent sur request_timeout s'ils ne sont pas définis.
        """
        config = self._config_for(endpoint)

        if timeout_type == TimeoutType.CONNECTION:
            return config.connection_timeout
        elif timeout_type == TimeoutType.REQUEST:
            return config.request_timeout
        elif timeout_type == TimeoutType.READ:
            return config.read_timeout or config.request_timeout
        elif timeout_type == TimeoutType.WRITE:
            return config.write_timeout or config.request_timeout
        else:
            raise ValueError(f"Unknown timeout type: {timeout_type}")

    def httpx_timeout(self, endpoint: Optional[str] = None) -> httpx.Timeout:
        """
        Construit le httpx.Timeout d'un appel.

        Le pool d'attente est borné par le timeout de requête.
        """
        return httpx.Timeout(
            connect=self.get_timeout(TimeoutType.CONNECTION, endpoint),
            read=self.get_timeout(TimeoutType.READ, endpoint),
            write=self.get_timeout(TimeoutType.WRITE, endpoint),
            pool=self.get_timeout(TimeoutType.REQUEST, endpoint),
        )

    def set_endpoint_timeout(self, endpoint: str, config: TimeoutConfig) -> None:
        """
        Configure un timeout spécifique par endpoint.

        Raises:
            InvalidTimeoutError: Si configuration invalide
            ValueError: Si endpoint vide
        """
        if not endpoint or not endpoint.strip():
            raise ValueError("endpoint cannot be empty")

        self._validate_config(config)
        self._endpoint_configs[endpoint] = config

    def validate_timeout(self, timeout_type: TimeoutType, value: float) -> bool:
        if value <= 0:
            return False

        limits = {
            TimeoutType.CONNECTION: self.MAX_CONNECTION_TIMEOUT,
            TimeoutType.REQUEST: self.MAX_REQUEST_TIMEOUT,
            TimeoutType.READ: self.MAX_READ_TIMEOUT,
            TimeoutType.WRITE: self.MAX_WRITE_TIMEOUT,
        }
        maximum = limits.get(timeout_type)
        return maximum is not None and value <= maximum

    def get_endpoint_config(self, endpoint: str) -> Optional[TimeoutConfig]:
        return self._endpoint_configs.get(endpoint)

    def get_default_config(self) -> TimeoutConfig:
        return self._default

    def _config_for(self, endpoint: Optional[str]) -> TimeoutConfig:
        if endpoint and endpoint in self._endpoint_configs:
            return self._endpoint_configs[endpoint]
        return self._default
