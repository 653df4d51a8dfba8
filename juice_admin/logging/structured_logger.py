"""
Logging - Structured Logger

Logger JSON structuré avec champs obligatoires, utilisé par tous les
composants de la console (session, pipeline, configuration).
"""

import sys
import threading
import uuid
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Deque, Dict, List, Optional, Union

from .interfaces import (
    IStructuredLogger,
    ISensitiveMasker,
    LogConfig,
    LogEntry,
    LogLevel,
)
from .sensitive_masker import SensitiveMasker


class MissingRequiredFieldError(Exception):
    """Champ obligatoire manquant."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Required field missing: {field_name}")


def console_output_handler(line: str) -> None:
    """Écrit une ligne JSON sur stderr."""
    print(line, file=sys.stderr, flush=True)


class FileOutputHandler:
    """
    Handler d'écriture en fichier (append, une entrée JSON par ligne).

    Example:
        logger = StructuredLogger("juice_admin", output_handler=FileOutputHandler("admin-system.log"))
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def __call__(self, line: str) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")


class StructuredLogger(IStructuredLogger):
    """
    Logger JSON structuré avec champs obligatoires.

    Chaque entrée contient timestamp ISO 8601 UTC, niveau, correlation_id
    et message. Les données extra sont masquées avant émission.

    Example:
        logger = StructuredLogger("juice_admin.session")
        logger.info("Login succeeded", subject="admin")
    """

    def __init__(
        self,
        name: str,
        config: Optional[LogConfig] = None,
        masker: Optional[ISensitiveMasker] = None,
        output_handler: Optional[Callable[[str], None]] = None,
    ) -> None:
        """
        Initialise le logger structuré.

        Args:
            name: Nom du logger (identifiant composant)
            config: Configuration optionnelle
            masker: Masker pour données sensibles
            output_handler: Destination des lignes JSON (None = capture seule)

        Raises:
            ValueError: Si name vide
        """
        if not name or not name.strip():
            raise ValueError("Logger name cannot be empty")

        self._name = name.strip()
        self._config = config or LogConfig()
        self._masker = masker or SensitiveMasker()
        self._output_handler = output_handler
        self._entries: Deque[LogEntry] = deque(maxlen=max(1, self._config.max_entries))
        self._default_correlation_id: Optional[str] = self._config.default_correlation_id

    @property
    def name(self) -> str:
        """Retourne le nom du logger."""
        return self._name

    @property
    def config(self) -> LogConfig:
        """Retourne la configuration."""
        return self._config

    def child(self, suffix: str) -> "StructuredLogger":
        """
        Crée un logger enfant partageant configuration et sortie.

        Args:
            suffix: Suffixe ajouté au nom (ex: "session")

        Returns:
            Nouveau StructuredLogger nommé "<parent>.<suffix>"
        """
        return StructuredLogger(
            f"{self._name}.{suffix}",
            config=self._config,
            masker=self._masker,
            output_handler=self._output_handler,
        )

    def set_default_correlation(self, correlation_id: str) -> None:
        """Définit correlation_id par défaut."""
        self._default_correlation_id = correlation_id

    def log(
        self,
        level: LogLevel,
        message: str,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> Optional[LogEntry]:
        """
        Crée un log structuré JSON.

        Processus:
            1. Vérifie niveau >= min_level
            2. Résout correlation_id (généré si absent)
            3. Masque données sensibles dans extra
            4. Crée LogEntry et l'émet en JSON

        Returns:
            LogEntry créé ou None si filtré

        Raises:
            MissingRequiredFieldError: Si message vide
        """
        if not self._should_log(level):
            return None

        if not message:
            raise MissingRequiredFieldError("message")

        resolved_correlation = (
            correlation_id or self._default_correlation_id or self._generate_correlation_id()
        )

        masked_extra: Dict[str, Any] = {}
        if extra and self._config.include_extra:
            if self._config.mask_sensitive:
                masked_extra = self._masker.mask(dict(extra))
            else:
                masked_extra = dict(extra)

        entry = LogEntry(
            timestamp=self._generate_timestamp(),
            level=level,
            correlation_id=resolved_correlation,
            message=message,
            extra=masked_extra,
            logger_name=self._name,
        )

        self._entries.append(entry)

        if self._output_handler:
            self._output_handler(entry.to_json())

        return entry

    def _generate_timestamp(self) -> str:
        """
        Génère timestamp ISO 8601 UTC avec millisecondes.

        Format: 2024-12-04T14:30:00.123Z
        """
        now = datetime.now(timezone.utc)
        return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"

    def _generate_correlation_id(self) -> str:
        return str(uuid.uuid4())

    def _should_log(self, level: LogLevel) -> bool:
        return LogLevel.get_priority(level) >= LogLevel.get_priority(self._config.min_level)

    def debug(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau DEBUG."""
        return self.log(LogLevel.DEBUG, message, **extra)

    def info(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau INFO."""
        return self.log(LogLevel.INFO, message, **extra)

    def warn(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau WARN."""
        return self.log(LogLevel.WARN, message, **extra)

    def error(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau ERROR."""
        return self.log(LogLevel.ERROR, message, **extra)

    def critical(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau CRITICAL."""
        return self.log(LogLevel.CRITICAL, message, **extra)

    def get_entries(self) -> List[LogEntry]:
        """
        Retourne les entrées de log capturées.

        Le buffer est borné par LogConfig.max_entries (les plus anciennes
        sont évincées).
        """
        return list(self._entries)

    def clear_entries(self) -> None:
        """Efface les entrées capturées."""
        self._entries.clear()

    def get_entries_by_level(self, level: LogLevel) -> List[LogEntry]:
        """Filtre les entrées par niveau."""
        return [e for e in self._entries if e.level == level]

    def get_entries_by_correlation(self, correlation_id: str) -> List[LogEntry]:
        """Filtre les entrées par correlation_id."""
        return [e for e in self._entries if e.correlation_id == correlation_id]

    def with_context(self, correlation_id: Optional[str] = None) -> "ContextualLogger":
        """
        Crée un logger avec correlation_id fixé.

        Args:
            correlation_id: ID corrélation (généré si absent)

        Returns:
            ContextualLogger lié à ce logger
        """
        return ContextualLogger(self, correlation_id or self._generate_correlation_id())


class ContextualLogger:
    """
    Logger avec correlation_id pré-défini.

    Le pipeline en crée un par requête pour regrouper les lignes d'un
    même appel API.
    """

    def __init__(self, logger: StructuredLogger, correlation_id: str) -> None:
        self._logger = logger
        self._correlation_id = correlation_id

    @property
    def correlation_id(self) -> str:
        return self._correlation_id

    def log(self, level: LogLevel, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log avec contexte."""
        return self._logger.log(level, message, correlation_id=self._correlation_id, **extra)

    def debug(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.DEBUG, message, **extra)

    def info(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.INFO, message, **extra)

    def warn(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.WARN, message, **extra)

    def error(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.ERROR, message, **extra)
