"""
Validation - Helpers

Prédicats et utilitaires de formatage partagés par les écrans de la console.
"""

import re
from collections.abc import Mapping
from typing import Any, List, Optional
from urllib.parse import urlparse

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

SCRIPT_ELEMENT = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
IFRAME_ELEMENT = re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE)
JAVASCRIPT_SCHEME = re.compile(r"javascript:", re.IGNORECASE)


def is_valid_object_id(value: Any) -> bool:
    """Identifiant MongoDB: 24 caractères hexadécimaux."""
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value))


def is_valid_url(value: Any) -> bool:
    """URL absolue avec schéma et hôte (ex: http://localhost:3000)."""
    if not value or not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def is_empty(value: Any) -> bool:
    """
    Vérifie si une valeur est vide.

    None, chaîne blanche, séquence vide et mapping vide sont vides;
    0 et False ne le sont pas.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return len(value.strip()) == 0
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    if isinstance(value, Mapping):
        return len(value) == 0
    return False


def create_validation_error(field: str, message: str) -> str:
    return f"{field}: {message}"


def format_validation_errors(errors: Optional[List[str]]) -> str:
    """Concatène les messages pour affichage sur une ligne."""
    if not errors or not isinstance(errors, (list, tuple)):
        return ""
    return "; ".join(errors)


def sanitize_html(html: Any) -> Any:
    """
    Retire les éléments <script>/<iframe> et le schéma javascript:.

    Liste de refus partielle: ne protège PAS contre les attributs
    d'événements (onerror=...) ni les autres vecteurs XSS. Le rendu HTML
    reste de la responsabilité de la couche présentation.
    """
    if not html or not isinstance(html, str):
        return html

    cleaned = SCRIPT_ELEMENT.sub("", html)
    cleaned = IFRAME_ELEMENT.sub("", cleaned)
    return JAVASCRIPT_SCHEME.sub("", cleaned)
