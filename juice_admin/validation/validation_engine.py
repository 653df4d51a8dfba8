"""
Validation - Validation Engine

Validation pure et sans état des enregistrements saisis dans la console,
avant tout appel mutant vers l'API.
"""

from collections.abc import Mapping
from typing import Any, Optional

from .interfaces import IValidationEngine, ValidationLimits, ValidationResult
from .schema_validator import SchemaValidator
from .schemas import SchemaSet, build_schemas


class ValidationEngine(IValidationEngine):
    """
    Moteur de validation des credentials, produits et contenus texte.

    Chaque appel est indépendant: même entrée, même résultat. Aucune
    exception n'est levée, l'appelant branche sur `is_valid`.

    Example:
        engine = ValidationEngine()
        result = engine.validate_product({"row": 4, "insides": [...]})
        if not result.is_valid:
            show(result.errors)
    """

    def __init__(
        self,
        limits: Optional[ValidationLimits] = None,
        schema_validator: Optional[SchemaValidator] = None,
    ) -> None:
        """
        Args:
            limits: Bornes de validation (défauts de l'API si None)
            schema_validator: Évaluateur de schémas (injectable pour tests)
        """
        self._limits = limits or ValidationLimits()
        self._schemas: SchemaSet = build_schemas(self._limits)
        self._validator = schema_validator or SchemaValidator()

    @property
    def limits(self) -> ValidationLimits:
        return self._limits

    @property
    def schemas(self) -> SchemaSet:
        return self._schemas

    def validate_credentials(self, credentials: Any) -> ValidationResult:
        """
        Valide login/password avant tout appel réseau.

        Un objet credentials absent ou non-mapping produit une seule
        erreur "Credentials object is required".
        """
        if not isinstance(credentials, Mapping):
            return ValidationResult.from_errors(["Credentials object is required"], credentials)

        errors = self._validator.validate(credentials, self._schemas.credentials)
        return ValidationResult.from_errors(errors, credentials)

    def validate_product_inside(self, item: Any) -> ValidationResult:
        errors = self._validator.validate(item, self._schemas.product_inside)
        return ValidationResult.from_errors(errors, item)

    def validate_product(self, product: Any) -> ValidationResult:
        """
        Valide un enregistrement produit complet.

        Ordre des erreurs: row/insides manquants, plage row, erreurs de
        chaque item (dans l'ordre), puis un unique message de doublon d'id.
        """
        errors = self._validator.validate(product, self._schemas.product)
        return ValidationResult.from_errors(errors, product)

    def validate_product_update(self, update: Any) -> ValidationResult:
        """
        Valide un remplacement complet des items d'une row.

        Les ids dupliqués sont une erreur bloquante, y compris pour une
        mise à jour partielle.
        """
        errors = self._validator.validate(update, self._schemas.product_update)
        return ValidationResult.from_errors(errors, update)

    def validate_text(self, text: Any) -> ValidationResult:
        errors = self._validator.validate({"text": text}, self._schemas.text)
        return ValidationResult.from_errors(errors, text)
