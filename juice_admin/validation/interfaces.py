"""
Validation - Interfaces

Contrats du moteur de validation: schémas déclaratifs par entité,
résultat structuré et limites configurables.

Règles:
    - Un validateur ne lève JAMAIS d'exception: il retourne ValidationResult
    - Toutes les violations sont accumulées (pas fail-fast)
    - Ordre: requis/type, puis longueur/plage, puis invariants inter-items
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Pattern, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════════
# TYPES
# ══════════════════════════════════════════════════════════════════════════════


class ValidationResult(BaseModel):
    """
    Résultat de validation d'un enregistrement.

    Attributes:
        is_valid: True si aucune violation
        errors: Messages lisibles, dans l'ordre d'évaluation
        value: Valeur validée (renvoyée telle quelle)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    value: Any = None

    @classmethod
    def from_errors(cls, errors: List[str], value: Any) -> "ValidationResult":
        return cls(is_valid=len(errors) == 0, errors=list(errors), value=value)


class ValidationLimits(BaseModel):
    """Bornes de validation (surchargeables par configuration)."""

    row_min: int = Field(default=1)
    row_max: int = Field(default=1000)
    price_min: float = Field(default=0)
    price_max: float = Field(default=999999.99)
    string_min_length: int = Field(default=1, ge=0)
    string_max_length: int = Field(default=500, ge=1)
    text_min_length: int = Field(default=0, ge=0)
    text_max_length: int = Field(default=10000, ge=0)
    credentials_min_length: int = Field(default=1, ge=0)
    credentials_max_length: int = Field(default=100, ge=1)


class FieldKind(Enum):
    """Types de champ supportés par le SchemaValidator."""

    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    INTEGER = "integer"
    POSITIVE_INTEGER = "positive_integer"


@dataclass(frozen=True)
class FieldRule:
    """
    Règle déclarative pour un champ scalaire.

    Attributes:
        name: Clé du champ dans l'enregistrement
        kind: Type attendu
        type_message: Message si absent ou mal typé
        missing_message: Message supplémentaire si le champ est absent (None)
        minimum: Borne basse (longueur pour STRING, valeur sinon)
        maximum: Borne haute
        range_message: Message si hors bornes
        min_message: Message spécifique borne basse (prioritaire)
        max_message: Message spécifique borne haute (prioritaire)
        allow_empty: Accepte "" pour STRING
        forbidden: Motif interdit dans une STRING
        forbidden_message: Message si motif trouvé
    """

    name: str
    kind: FieldKind
    type_message: str
    missing_message: Optional[str] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    range_message: Optional[str] = None
    min_message: Optional[str] = None
    max_message: Optional[str] = None
    allow_empty: bool = False
    forbidden: Optional[Pattern[str]] = None
    forbidden_message: Optional[str] = None


@dataclass(frozen=True)
class EntitySchema:
    """Schéma d'une entité: champs scalaires puis collections imbriquées."""

    name: str
    fields: Tuple[FieldRule, ...]
    collections: Tuple["CollectionRule", ...] = ()


@dataclass(frozen=True)
class CollectionRule:
    """
    Règle pour une séquence ordonnée d'items imbriqués.

    Attributes:
        name: Clé de la séquence (ex: "insides")
        item_schema: Schéma appliqué à chaque item
        empty_message: Message si absente, non-séquence ou vide
        unique_key: Champ devant être unique sur toute la séquence
        duplicate_message: Message agrégé unique en cas de doublon
    """

    name: str
    item_schema: EntitySchema
    empty_message: str
    unique_key: Optional[str] = None
    duplicate_message: Optional[str] = None


# Caractères de contrôle C0 hors tabulation, LF et CR
CONTROL_CHARACTERS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


# ══════════════════════════════════════════════════════════════════════════════
# INTERFACES
# ══════════════════════════════════════════════════════════════════════════════


class IValidationEngine(ABC):
    """Validation des trois types d'enregistrement gérés par la console."""

    @abstractmethod
    def validate_credentials(self, credentials: Any) -> ValidationResult:
        """Login et mot de passe: présents, chaînes non vides, ≤100 caractères."""
        pass

    @abstractmethod
    def validate_product_inside(self, item: Any) -> ValidationResult:
        """Un item produit: six champs typés et bornés."""
        pass

    @abstractmethod
    def validate_product(self, product: Any) -> ValidationResult:
        """Enregistrement produit: row + insides non vide, ids uniques."""
        pass

    @abstractmethod
    def validate_product_update(self, update: Any) -> ValidationResult:
        """Remplacement complet des items d'une row: row + data, ids uniques."""
        pass

    @abstractmethod
    def validate_text(self, text: Any) -> ValidationResult:
        """Contenu texte HTML: chaîne de longueur bornée."""
        pass
