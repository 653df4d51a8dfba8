"""
API: endpoints de la console et client typé
"""

from .endpoints import (
    Endpoint,
    ENDPOINTS,
    PUBLIC_ENDPOINTS,
    PROTECTED_ENDPOINTS,
    get_endpoint,
)
from .admin_api import AdminApi

__all__ = [
    "Endpoint",
    "ENDPOINTS",
    "PUBLIC_ENDPOINTS",
    "PROTECTED_ENDPOINTS",
    "get_endpoint",
    "AdminApi",
]
