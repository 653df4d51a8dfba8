"""
Logging

Module de logging structuré avec:
- Format JSON, une entrée par ligne
- Champs obligatoires: timestamp, level, correlation_id, message
- Timestamp ISO 8601 UTC
- Masquage des tokens et mots de passe
"""

from .interfaces import (
    # Enums
    LogLevel,
    # Dataclasses
    LogEntry,
    LogConfig,
    # Interfaces
    IStructuredLogger,
    ISensitiveMasker,
)
from .sensitive_masker import SensitiveMasker
from .structured_logger import (
    StructuredLogger,
    ContextualLogger,
    FileOutputHandler,
    console_output_handler,
    # Exceptions
    MissingRequiredFieldError,
)

__all__ = [
    # Enums
    "LogLevel",
    # Dataclasses
    "LogEntry",
    "LogConfig",
    # Interfaces
    "IStructuredLogger",
    "ISensitiveMasker",
    # Implementations
    "SensitiveMasker",
    "StructuredLogger",
    "ContextualLogger",
    "FileOutputHandler",
    "console_output_handler",
    # Exceptions
    "MissingRequiredFieldError",
]
