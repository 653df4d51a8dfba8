"""
Core: configuration et taxonomie d'erreurs de la console.
"""

from .errors import AuthError, NetworkError, ConfigError
from .config import (
    ApiSettings,
    JwtSettings,
    StorageSettings,
    LoggingSettings,
    FeatureFlags,
    ConsoleConfig,
)
from .interfaces import (
    CheckSeverity,
    ConfigIssue,
    ConfigCheckResult,
    IConfigLoader,
    IConfigChecker,
)
from .config_loader import ConfigLoader
from .config_checker import ConfigChecker

__all__ = [
    # Errors
    "AuthError",
    "NetworkError",
    "ConfigError",
    # Configuration
    "ApiSettings",
    "JwtSettings",
    "StorageSettings",
    "LoggingSettings",
    "FeatureFlags",
    "ConsoleConfig",
    # Check results
    "CheckSeverity",
    "ConfigIssue",
    "ConfigCheckResult",
    # Interfaces
    "IConfigLoader",
    "IConfigChecker",
    # Implementations
    "ConfigLoader",
    "ConfigChecker",
]
