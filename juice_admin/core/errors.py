"""
Taxonomie des erreurs de la console.

Les erreurs d'authentification et de transport sont des valeurs (Enum)
portées par AuthResult / ApiResponse; seules les erreurs de configuration
et de programmation sont des exceptions.
"""

from enum import Enum


class AuthError(Enum):
    """Échecs d'authentification remontés jusqu'à l'interface."""

    INVALID_INPUT = "invalid_input"  # credentials rejetés avant tout appel réseau
    INVALID_CREDENTIALS = "invalid_credentials"  # login refusé par le serveur
    UNAUTHORIZED = "unauthorized"  # appel rejeté a posteriori → logout automatique


class NetworkError(Enum):
    """Échecs de transport: la session n'est jamais modifiée."""

    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"


class ConfigError(Exception):
    """Configuration illisible ou invalide."""

    def __init__(self, message: str, location: str = "config") -> None:
        self.location = location
        super().__init__(message)
