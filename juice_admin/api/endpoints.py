"""
API - Endpoints

Table des endpoints de l'API d'administration.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple
from urllib.parse import quote


@dataclass(frozen=True)
class Endpoint:
    """
    Endpoint de l'API.

    Attributes:
        name: Nom logique (clé des timeouts spécifiques)
        method: Verbe HTTP
        path: Chemin, segments ":param" substitués par format()
        auth_required: True si le serveur exige le token
    """

    name: str
    method: str
    path: str
    auth_required: bool

    def format(self, **params: Any) -> str:
        """
        Substitue les segments ":param".

        Raises:
            ValueError: Si un paramètre manque
        """
        segments = []
        for segment in self.path.split("/"):
            if segment.startswith(":"):
                key = segment[1:]
                if key not in params:
                    raise ValueError(f"Missing path parameter '{key}' for {self.name}")
                segment = quote(str(params[key]), safe="")
            segments.append(segment)
        return "/".join(segments)


LOGIN = Endpoint("auth.login", "POST", "/admin/login", auth_required=False)
PRODUCTS_LIST = Endpoint("products.list", "GET", "/admin/products", auth_required=False)
PRODUCTS_GET = Endpoint("products.get", "GET", "/admin/products/:id", auth_required=False)
PRODUCTS_CREATE = Endpoint("products.create", "POST", "/admin/products", auth_required=True)
PRODUCTS_UPDATE_INSIDES = Endpoint("products.update_insides", "PATCH", "/admin/products/insides", auth_required=True)
PRODUCTS_DELETE = Endpoint("products.delete", "DELETE", "/admin/products/:id", auth_required=True)
TEXT_GET = Endpoint("text.get", "GET", "/admin/text", auth_required=False)
TEXT_UPDATE = Endpoint("text.update", "PATCH", "/admin/text", auth_required=True)
TEXT_TEST = Endpoint("text.test", "GET", "/admin/text/test", auth_required=False)

ENDPOINTS: Tuple[Endpoint, ...] = (
    LOGIN,
    PRODUCTS_LIST,
    PRODUCTS_GET,
    PRODUCTS_CREATE,
    PRODUCTS_UPDATE_INSIDES,
    PRODUCTS_DELETE,
    TEXT_GET,
    TEXT_UPDATE,
    TEXT_TEST,
)

PUBLIC_ENDPOINTS: Tuple[Endpoint, ...] = tuple(e for e in ENDPOINTS if not e.auth_required)
PROTECTED_ENDPOINTS: Tuple[Endpoint, ...] = tuple(e for e in ENDPOINTS if e.auth_required)

_BY_NAME: Dict[str, Endpoint] = {e.name: e for e in ENDPOINTS}


def get_endpoint(name: str) -> Endpoint:
    """
    Raises:
        KeyError: Si nom inconnu
    """
    return _BY_NAME[name]
