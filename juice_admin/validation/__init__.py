"""
Validation

Moteur de validation déclaratif pour les enregistrements de la console:
- Credentials (login / password)
- Produits (row + insides) et mises à jour de row
- Contenu texte HTML
"""

from .interfaces import (
    # Enums
    FieldKind,
    # Data classes
    FieldRule,
    CollectionRule,
    EntitySchema,
    ValidationLimits,
    ValidationResult,
    # Interfaces
    IValidationEngine,
)
from .schema_validator import SchemaValidator
from .schemas import SchemaSet, build_schemas
from .validation_engine import ValidationEngine
from .helpers import (
    create_validation_error,
    format_validation_errors,
    is_empty,
    is_valid_email,
    is_valid_object_id,
    is_valid_url,
    sanitize_html,
)

__all__ = [
    # Enums
    "FieldKind",
    # Data classes
    "FieldRule",
    "CollectionRule",
    "EntitySchema",
    "ValidationLimits",
    "ValidationResult",
    "SchemaSet",
    # Interfaces
    "IValidationEngine",
    # Implementations
    "SchemaValidator",
    "ValidationEngine",
    "build_schemas",
    # Helpers
    "create_validation_error",
    "format_validation_errors",
    "is_empty",
    "is_valid_email",
    "is_valid_object_id",
    "is_valid_url",
    "sanitize_html",
]
