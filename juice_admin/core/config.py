"""
Core - Configuration

Modèles pydantic de la configuration de la console.
Les valeurs par défaut reprennent celles de la console historique.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..logging import LogLevel
from ..validation import ValidationLimits


class ApiSettings(BaseModel):
    """Accès à l'API d'administration."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = "http://localhost:3000"
    timeout_seconds: float = Field(default=10.0, gt=0)
    retry_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=1.0, ge=0)

    def endpoint_url(self, path: str) -> str:
        """URL absolue d'un chemin d'endpoint (ex: "/admin/products")."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


class JwtSettings(BaseModel):
    """Token de session et en-tête d'authentification."""

    model_config = ConfigDict(extra="forbid")

    storage_key: str = "adminToken"
    header_prefix: str = "Bearer "
    expiry_hours: float = 24
    refresh_threshold_hours: float = Field(default=1, ge=0)


class StorageSettings(BaseModel):
    """Persistance du token: mémoire (process) ou fichier JSON."""

    model_config = ConfigDict(extra="forbid")

    backend: Literal["memory", "file"] = "memory"
    path: str = ".juice_admin/session.json"


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: LogLevel = LogLevel.INFO
    enable_console: bool = True
    enable_file: bool = False
    log_file: str = "admin-system.log"
    max_entries: int = Field(default=1000, ge=1)

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return LogLevel.parse(value)
        return value


class FeatureFlags(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enable_product_management: bool = True
    enable_text_management: bool = True
    enable_user_management: bool = False
    enable_audit_log: bool = False
    enable_realtime_updates: bool = False


class ConsoleConfig(BaseModel):
    """
    Configuration complète de la console.

    Example:
        config = ConsoleConfig(api=ApiSettings(base_url="https://priceofjuice.com"))
        config.get_value("api.timeout_seconds")  # 10.0
        config.is_feature_enabled("enable_text_management")  # True
    """

    model_config = ConfigDict(extra="forbid")

    environment: Literal["development", "production", "test"] = "development"
    api: ApiSettings = Field(default_factory=ApiSettings)
    jwt: JwtSettings = Field(default_factory=JwtSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    validation: ValidationLimits = Field(default_factory=ValidationLimits)
    features: FeatureFlags = Field(default_factory=FeatureFlags)

    def get_value(self, path: str, fallback: Optional[Any] = None) -> Any:
        """
        Lit une valeur par chemin pointé ("jwt.expiry_hours").

        Returns:
            La valeur, ou fallback si un segment n'existe pas
        """
        value: Any = self
        for key in path.split("."):
            if isinstance(value, BaseModel) and key in type(value).model_fields:
                value = getattr(value, key)
            elif isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return fallback
        return value

    def is_feature_enabled(self, name: str) -> bool:
        return getattr(self.features, name, None) is True
