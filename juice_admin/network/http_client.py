"""
Network - HTTP Client

Construction du httpx.AsyncClient partagé par le pipeline.
"""

from typing import Dict, Optional

import httpx

from ..core.config import ApiSettings


def build_async_client(
    settings: Optional[ApiSettings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    extra_headers: Optional[Dict[str, str]] = None,
) -> httpx.AsyncClient:
    """
    Crée le client HTTP de la console.

    Args:
        settings: URL de base et timeout par défaut
        transport: Transport alternatif (httpx.MockTransport en test)
        extra_headers: En-têtes ajoutés à chaque requête
    """
    settings = settings or ApiSettings()
    headers: Dict[str, str] = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)

    return httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers=headers,
        transport=transport,
    )
