"""
Core - Config Loader
Charge la configuration de la console depuis YAML, environnement et profil.

Ordre d'application:
    1. Fichier YAML optionnel
    2. Variables JUICE_ADMIN_<SECTION>_<CHAMP>
    3. Surcharges du profil d'environnement

Le profil s'applique en dernier: logging.level (et features.enable_audit_log
hors profil test) venant du fichier ou de JUICE_ADMIN_LOGGING_LEVEL est
toujours remplacé par la valeur du profil.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ValidationError

from .config import ConsoleConfig
from .errors import ConfigError
from .interfaces import IConfigLoader


class ConfigLoader(IConfigLoader):
    """
    Chargement de la configuration.

    Example:
        config = await ConfigLoader("console.yaml").load()
    """

    ENV_PREFIX = "JUICE_ADMIN_"

    PROFILE_OVERRIDES: Dict[str, Dict[str, Dict[str, Any]]] = {
        "development": {"logging": {"level": "DEBUG"}, "features": {"enable_audit_log": True}},
        "production": {"logging": {"level": "WARN"}, "features": {"enable_audit_log": False}},
        "test": {"logging": {"level": "ERROR"}},
    }

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.config_path = Path(config_path) if config_path else None
        self._environ = os.environ if environ is None else environ

    async def load(self) -> ConsoleConfig:
        """
        Construit la configuration.

        Note:
            Chaque profil fixe logging.level: JUICE_ADMIN_LOGGING_LEVEL
            n'a aucun effet.

        Raises:
            ConfigError: Fichier inexistant ou illisible, YAML invalide,
                valeur hors type
        """
        raw = self._read_file()
        self._apply_environment(raw)

        environment = raw.get("environment", ConsoleConfig.model_fields["environment"].default)
        profile = self.PROFILE_OVERRIDES.get(environment, {}) if isinstance(environment, str) else {}
        for section, overrides in profile.items():
            raw.setdefault(section, {}).update(overrides)

        try:
            return ConsoleConfig.model_validate(raw)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "config"
            raise ConfigError(f"Invalid configuration value at {location}: {first['msg']}", location=location)

    def _read_file(self) -> Dict[str, Any]:
        if self.config_path is None:
            return {}

        if not self.config_path.exists():
            raise ConfigError(f"Configuration file not found: {self.config_path}", location=str(self.config_path))

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parsing error: {e}", location=str(self.config_path))
        except OSError as e:
            raise ConfigError(f"Configuration file unreadable: {e}", location=str(self.config_path))

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigError("Configuration must be a YAML mapping", location=str(self.config_path))

        for section, value in config.items():
            if isinstance(value, dict):
                config[section] = dict(value)
            elif section != "environment":
                raise ConfigError(f"Section '{section}' must be a mapping", location=str(section))
        return config

    def _apply_environment(self, raw: Dict[str, Any]) -> None:
        """Applique JUICE_ADMIN_ENVIRONMENT et JUICE_ADMIN_<SECTION>_<CHAMP>."""
        environment = self._environ.get(f"{self.ENV_PREFIX}ENVIRONMENT")
        if environment:
            raw["environment"] = environment.strip().lower()

        for section, field_info in ConsoleConfig.model_fields.items():
            model = field_info.annotation
            if not (isinstance(model, type) and issubclass(model, BaseModel)):
                continue
            for name in model.model_fields:
                key = f"{self.ENV_PREFIX}{section.upper()}_{name.upper()}"
                if key in self._environ:
                    raw.setdefault(section, {})[name] = self._environ[key]
