"""
Logging - Sensitive Masker

Masquage automatique des tokens, mots de passe et en-têtes d'autorisation
avant écriture des logs.
"""

import re
from typing import Any, Dict, List, Optional

from .interfaces import ISensitiveMasker

# En-tête JWT encodé: commence toujours par "eyJ" (base64url de {")
JWT_PATTERN = re.compile(r"\beyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*")
BEARER_PATTERN = re.compile(r"(?i)\bbearer\s+\S+")


class SensitiveMasker(ISensitiveMasker):
    """
    Masquage récursif des données sensibles.

    Deux niveaux de protection:
        - Clés sensibles (password, token, authorization...) → valeur masquée
        - Valeurs texte libres → JWT et "Bearer xxx" remplacés

    Example:
        masker = SensitiveMasker()
        safe_data = masker.mask({"password": "secret123"})
        # {"password": "***MASKED***"}
    """

    def __init__(self, additional_patterns: Optional[List[str]] = None) -> None:
        """
        Args:
            additional_patterns: Patterns supplémentaires à masquer
        """
        self._patterns: List[str] = [p.lower() for p in self.SENSITIVE_PATTERNS]
        for pattern in additional_patterns or []:
            if pattern and pattern.lower() not in self._patterns:
                self._patterns.append(pattern.lower())

    @property
    def patterns(self) -> List[str]:
        """Retourne les patterns sensibles configurés."""
        return list(self._patterns)

    def mask(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Masque récursivement toutes les données sensibles.

        Comportement:
            - Clés contenant patterns sensibles → valeur masquée
            - Valeurs dict → récursion
            - Valeurs list → masque chaque élément
            - Valeurs str → tokens embarqués remplacés

        Args:
            data: Dictionnaire à masquer

        Returns:
            Copie avec données sensibles masquées
        """
        if not isinstance(data, dict):
            return data

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if self.is_sensitive_key(str(key)):
                result[key] = self.MASK_VALUE
            else:
                result[key] = self._mask_value(value)
        return result

    def _mask_value(self, value: Any) -> Any:
        if isinstance(value, dict):
            return self.mask(value)
        if isinstance(value, (list, tuple)):
            return [self._mask_value(item) for item in value]
        if isinstance(value, str):
            return self.scrub_string(value)
        return value

    def scrub_string(self, value: str) -> str:
        """
        Remplace les tokens embarqués dans un texte libre.

        Args:
            value: Texte à nettoyer

        Returns:
            Texte sans JWT ni credential Bearer
        """
        scrubbed = BEARER_PATTERN.sub(f"Bearer {self.MASK_VALUE}", value)
        return JWT_PATTERN.sub(self.MASK_VALUE, scrubbed)

    def is_sensitive_key(self, key: str) -> bool:
        """
        Vérifie si clé contient un pattern sensible (case-insensitive).

        Args:
            key: Nom de la clé à vérifier

        Returns:
            True si clé contient pattern sensible
        """
        if not key:
            return False

        key_lower = key.lower()
        return any(pattern in key_lower for pattern in self._patterns)

    def add_pattern(self, pattern: str) -> None:
        """
        Ajoute pattern sensible personnalisé.

        Raises:
            ValueError: Si pattern vide
        """
        if not pattern or not pattern.strip():
            raise ValueError("Pattern cannot be empty")

        pattern_lower = pattern.lower().strip()
        if pattern_lower not in self._patterns:
            self._patterns.append(pattern_lower)
