"""
Validation - Schémas déclarés

Un schéma par entité gérée par la console. Les messages sont ceux affichés
par l'interface d'administration; les bornes viennent de ValidationLimits.
"""

from dataclasses import dataclass
from typing import Optional

from .interfaces import (
    CONTROL_CHARACTERS,
    CollectionRule,
    EntitySchema,
    FieldKind,
    FieldRule,
    ValidationLimits,
)
from .schema_validator import format_bound


@dataclass(frozen=True)
class SchemaSet:
    """Ensemble des schémas construits pour un jeu de limites."""

    credentials: EntitySchema
    product_inside: EntitySchema
    product: EntitySchema
    product_update: EntitySchema
    text: EntitySchema


def _string_rule(name: str, label: str, minimum: int, maximum: int) -> FieldRule:
    return FieldRule(
        name=name,
        kind=FieldKind.STRING,
        type_message=f"{label} is required and must be a string",
        minimum=minimum,
        maximum=maximum,
        range_message=f"{label} must be between {minimum} and {maximum} characters",
    )


def _row_rule(limits: ValidationLimits) -> FieldRule:
    return FieldRule(
        name="row",
        kind=FieldKind.INTEGER,
        type_message="Row number is required and must be an integer",
        minimum=limits.row_min,
        maximum=limits.row_max,
        range_message=f"Row number must be between {limits.row_min} and {limits.row_max}",
    )


def build_schemas(limits: Optional[ValidationLimits] = None) -> SchemaSet:
    """
    Construit les schémas des entités pour des limites données.

    Args:
        limits: Bornes de validation (défauts de l'API si None)

    Returns:
        SchemaSet prêt à être évalué par SchemaValidator
    """
    limits = limits or ValidationLimits()
    str_min, str_max = limits.string_min_length, limits.string_max_length
    price_min, price_max = format_bound(limits.price_min), format_bound(limits.price_max)
    cred_min, cred_max = limits.credentials_min_length, limits.credentials_max_length

    credentials = EntitySchema(
        name="Credentials",
        fields=(
            _string_rule("login", "Login", cred_min, cred_max),
            _string_rule("password", "Password", cred_min, cred_max),
        ),
    )

    product_inside = EntitySchema(
        name="ProductInsideItem",
        fields=(
            _string_rule("product", "Product name", str_min, str_max),
            _string_rule("activeSubstance", "Active substance", str_min, str_max),
            _string_rule("dosage", "Dosage", str_min, str_max),
            FieldRule(
                name="availability",
                kind=FieldKind.BOOLEAN,
                type_message="Availability must be a boolean value",
            ),
            FieldRule(
                name="price",
                kind=FieldKind.NUMBER,
                type_message="Price must be a valid number",
                minimum=limits.price_min,
                maximum=limits.price_max,
                range_message=f"Price must be between {price_min} and {price_max}",
            ),
            FieldRule(
                name="id",
                kind=FieldKind.POSITIVE_INTEGER,
                type_message="ID must be a positive integer",
            ),
        ),
    )

    product = EntitySchema(
        name="ProductRecord",
        fields=(_row_rule(limits),),
        collections=(
            CollectionRule(
                name="insides",
                item_schema=product_inside,
                empty_message="Product must have at least one inside item",
                unique_key="id",
                duplicate_message="Product inside items must have unique IDs",
            ),
        ),
    )

    product_update = EntitySchema(
        name="ProductUpdate",
        fields=(_row_rule(limits),),
        collections=(
            CollectionRule(
                name="data",
                item_schema=product_inside,
                empty_message="Update data must contain at least one item",
                unique_key="id",
                duplicate_message="Update data items must have unique IDs",
            ),
        ),
    )

    text = EntitySchema(
        name="TextContent",
        fields=(
            FieldRule(
                name="text",
                kind=FieldKind.STRING,
                missing_message="Text content is required",
                type_message="Text content must be a string",
                allow_empty=True,
                minimum=limits.text_min_length,
                maximum=limits.text_max_length,
                min_message=f"Text content must be at least {limits.text_min_length} characters long",
                max_message=f"Text content must not exceed {limits.text_max_length} characters",
                forbidden=CONTROL_CHARACTERS,
                forbidden_message="Text content must not contain control characters",
            ),
        ),
    )

    return SchemaSet(
        credentials=credentials,
        product_inside=product_inside,
        product=product,
        product_update=product_update,
        text=text,
    )
