"""
Validation - Schema Validator

Évaluateur générique paramétré par un EntitySchema.

Passes (dans cet ordre, sans court-circuit):
    1. Requis / type de chaque champ, présence des collections
    2. Longueur / plage des champs ayant passé l'étape 1
    3. Validation de chaque item des collections (ordre des items)
    4. Unicité inter-items: un seul message agrégé par collection
"""

import math
from collections.abc import Mapping
from typing import Any, List

from .interfaces import CollectionRule, EntitySchema, FieldKind, FieldRule


def format_bound(value: float) -> str:
    """Formate une borne comme dans les messages d'origine (0, 999999.99)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class SchemaValidator:
    """
    Validateur générique de schémas déclaratifs.

    Example:
        validator = SchemaValidator()
        errors = validator.validate({"row": 0, "insides": []}, product_schema)
    """

    def validate(self, data: Any, schema: EntitySchema) -> List[str]:
        """
        Évalue toutes les règles du schéma.

        Args:
            data: Enregistrement (mapping); toute autre valeur est traitée
                comme un mapping vide
            schema: Schéma de l'entité

        Returns:
            Liste ordonnée des messages d'erreur (vide si valide)
        """
        record = data if isinstance(data, Mapping) else {}
        errors: List[str] = []

        typed: List[FieldRule] = []
        for rule in schema.fields:
            type_errors = self._check_type(record.get(rule.name), rule)
            if type_errors:
                errors.extend(type_errors)
            else:
                typed.append(rule)

        for collection in schema.collections:
            if not self._is_non_empty_sequence(record.get(collection.name)):
                errors.append(collection.empty_message)

        for rule in typed:
            errors.extend(self._check_range(record[rule.name], rule))

        for collection in schema.collections:
            items = record.get(collection.name)
            if not self._is_sequence(items):
                continue
            for item in items:
                errors.extend(self.validate(item, collection.item_schema))
            if self._has_duplicates(items, collection):
                errors.append(collection.duplicate_message or f"{collection.name} must be unique")

        return errors

    def _check_type(self, value: Any, rule: FieldRule) -> List[str]:
        if value is None:
            if rule.missing_message:
                return [rule.missing_message, rule.type_message]
            return [rule.type_message]

        if not self._matches_kind(value, rule):
            return [rule.type_message]
        return []

    def _matches_kind(self, value: Any, rule: FieldRule) -> bool:
        kind = rule.kind
        if kind == FieldKind.STRING:
            return isinstance(value, str) and (rule.allow_empty or value != "")
        if kind == FieldKind.BOOLEAN:
            return isinstance(value, bool)

        # bool est une sous-classe de int: jamais accepté comme nombre
        if isinstance(value, bool):
            return False
        if kind == FieldKind.NUMBER:
            return isinstance(value, (int, float)) and not math.isnan(value)
        if kind == FieldKind.INTEGER:
            return isinstance(value, int)
        if kind == FieldKind.POSITIVE_INTEGER:
            return isinstance(value, int) and value >= 1
        return False

    def _check_range(self, value: Any, rule: FieldRule) -> List[str]:
        errors: List[str] = []
        measured = len(value) if rule.kind == FieldKind.STRING else value

        if rule.minimum is not None and measured < rule.minimum:
            message = rule.min_message or rule.range_message
            if message:
                errors.append(message)
        elif rule.maximum is not None and measured > rule.maximum:
            message = rule.max_message or rule.range_message
            if message:
                errors.append(message)

        if rule.forbidden is not None and isinstance(value, str) and rule.forbidden.search(value):
            errors.append(rule.forbidden_message or f"{rule.name} contains forbidden characters")

        return errors

    def _is_sequence(self, value: Any) -> bool:
        return isinstance(value, (list, tuple))

    def _is_non_empty_sequence(self, value: Any) -> bool:
        return self._is_sequence(value) and len(value) > 0

    def _has_duplicates(self, items: Any, collection: CollectionRule) -> bool:
        if not collection.unique_key:
            return False

        seen = set()
        for item in items:
            if not isinstance(item, Mapping):
                continue
            key = item.get(collection.unique_key)
            # Un id absent est signalé par la validation de l'item, pas ici
            if key is None:
                continue
            try:
                marker = (type(key).__name__, key) if isinstance(key, bool) else key
                if marker in seen:
                    return True
                seen.add(marker)
            except TypeError:
                continue
        return False
