"""
Core - Interfaces
Contrats du chargement et de la vérification de configuration.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .config import ConsoleConfig


# ══════════════════════════════════════════════════════════════════════════════
# TYPES
# ══════════════════════════════════════════════════════════════════════════════


class CheckSeverity(Enum):
    BLOCKING = "blocking"
    WARNING = "warning"


class ConfigIssue(BaseModel):
    """Violation d'une règle de configuration."""

    rule_id: str
    message: str
    location: str
    value: Optional[str] = None
    severity: CheckSeverity = CheckSeverity.BLOCKING


class ConfigCheckResult(BaseModel):
    """Résultat de vérification d'une configuration."""

    valid: bool
    errors: list[ConfigIssue] = []
    warnings: list[ConfigIssue] = []
    checked_at: datetime

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.errors]


# ══════════════════════════════════════════════════════════════════════════════
# INTERFACES
# ══════════════════════════════════════════════════════════════════════════════


class IConfigLoader(ABC):
    """Charge la configuration (fichier, environnement, profil)."""

    @abstractmethod
    async def load(self) -> ConsoleConfig:
        """
        Raises:
            ConfigError: Fichier illisible ou valeurs invalides
        """
        pass


class IConfigChecker(ABC):
    """Vérifie la cohérence d'une configuration chargée."""

    @abstractmethod
    def check(self, config: ConsoleConfig) -> ConfigCheckResult:
        """
        Vérifie TOUTES les règles.
        Retourne TOUTES les violations (pas fail-fast).
        """
        pass

    @abstractmethod
    def check_rule(self, rule_id: str, config: ConsoleConfig) -> Optional[ConfigIssue]:
        """Vérifie UNE règle spécifique."""
        pass
