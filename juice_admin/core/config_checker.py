"""
Core - Config Checker
Vérifie les règles de cohérence d'une configuration chargée.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, Optional
from urllib.parse import urlparse

from .config import ConsoleConfig
from .interfaces import CheckSeverity, ConfigCheckResult, ConfigIssue, IConfigChecker


class ConfigChecker(IConfigChecker):
    """
    Vérification des règles de configuration.

    Règles:
        API_URL: URL de base requise (http/https)
        JWT_EXPIRY: expiration d'au moins 1 heure
        ROW_MIN: numéro de ligne minimum >= 1
        PRICE_MIN: prix minimum >= 0
        REFRESH_THRESHOLD: seuil de rafraîchissement < expiration (warning)
    """

    def __init__(self):
        self._rules: Dict[str, Callable[[ConsoleConfig], Optional[ConfigIssue]]] = {
            "API_URL": self._check_api_url,
            "JWT_EXPIRY": self._check_jwt_expiry,
            "ROW_MIN": self._check_row_min,
            "PRICE_MIN": self._check_price_min,
            "REFRESH_THRESHOLD": self._check_refresh_threshold,
        }

    def check(self, config: ConsoleConfig) -> ConfigCheckResult:
        errors = []
        warnings = []

        for rule_id in self._rules:
            issue = self.check_rule(rule_id, config)
            if issue:
                if issue.severity == CheckSeverity.BLOCKING:
                    errors.append(issue)
                else:
                    warnings.append(issue)

        return ConfigCheckResult(
            valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            checked_at=datetime.now(timezone.utc),
        )

    def check_rule(self, rule_id: str, config: ConsoleConfig) -> Optional[ConfigIssue]:
        if rule_id not in self._rules:
            return ConfigIssue(
                rule_id=rule_id,
                message=f"Unknown rule: {rule_id}",
                location="config",
            )

        return self._rules[rule_id](config)

    def _check_api_url(self, config: ConsoleConfig) -> Optional[ConfigIssue]:
        base_url = config.api.base_url.strip()
        if not base_url:
            return ConfigIssue(rule_id="API_URL", message="API base URL is required", location="api.base_url")

        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return ConfigIssue(
                rule_id="API_URL",
                message="API base URL must be an absolute http(s) URL",
                location="api.base_url",
                value=base_url,
            )
        return None

    def _check_jwt_expiry(self, config: ConsoleConfig) -> Optional[ConfigIssue]:
        if config.jwt.expiry_hours < 1:
            return ConfigIssue(
                rule_id="JWT_EXPIRY",
                message="JWT expiry hours must be at least 1",
                location="jwt.expiry_hours",
                value=str(config.jwt.expiry_hours),
            )
        return None

    def _check_row_min(self, config: ConsoleConfig) -> Optional[ConfigIssue]:
        if config.validation.row_min < 1:
            return ConfigIssue(
                rule_id="ROW_MIN",
                message="Product row minimum must be at least 1",
                location="validation.row_min",
                value=str(config.validation.row_min),
            )
        return None

    def _check_price_min(self, config: ConsoleConfig) -> Optional[ConfigIssue]:
        if config.validation.price_min < 0:
            return ConfigIssue(
                rule_id="PRICE_MIN",
                message="Product price minimum cannot be negative",
                location="validation.price_min",
                value=str(config.validation.price_min),
            )
        return None

    def _check_refresh_threshold(self, config: ConsoleConfig) -> Optional[ConfigIssue]:
        if config.jwt.refresh_threshold_hours >= config.jwt.expiry_hours:
            return ConfigIssue(
                rule_id="REFRESH_THRESHOLD",
                message="Refresh threshold is not below token expiry: sessions will always be flagged for refresh",
                location="jwt.refresh_threshold_hours",
                value=str(config.jwt.refresh_threshold_hours),
                severity=CheckSeverity.WARNING,
            )
        return None
