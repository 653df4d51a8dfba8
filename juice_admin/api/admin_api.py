"""
API - Admin API

Appels typés vers l'API d'administration, tous via le RequestPipeline.
"""

from typing import Any, Mapping, Optional

from ..auth.interfaces import IAuthGateway, ITokenStore
from ..logging import StructuredLogger
from ..network.interfaces import ApiResponse, IRequestPipeline
from .endpoints import (
    LOGIN,
    PRODUCTS_CREATE,
    PRODUCTS_DELETE,
    PRODUCTS_GET,
    PRODUCTS_LIST,
    PRODUCTS_UPDATE_INSIDES,
    TEXT_GET,
    TEXT_TEST,
    TEXT_UPDATE,
    Endpoint,
)


class AdminApi(IAuthGateway):
    """
    Client de l'API d'administration.

    Les corps sont envoyés tels quels: la validation relève de l'appelant
    (ValidationEngine) avant tout appel mutant.

    Example:
        api = AdminApi(pipeline, token_store)
        response = await api.get_products()
        if response.success:
            rows = response.data
    """

    def __init__(
        self,
        pipeline: IRequestPipeline,
        token_store: ITokenStore,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        self._pipeline = pipeline
        self._token_store = token_store
        self._logger = logger or StructuredLogger("juice_admin.api")

    async def login(self, credentials: Mapping[str, Any]) -> ApiResponse:
        """
        POST /admin/login.

        Un 401 ici signifie credentials refusés: pas de logout automatique.
        """
        body = {"login": credentials.get("login"), "password": credentials.get("password")}
        return await self._call(LOGIN, json=body)

    async def get_products(self) -> ApiResponse:
        return await self._call(PRODUCTS_LIST)

    async def get_product(self, product_id: Any) -> ApiResponse:
        return await self._call(PRODUCTS_GET, id=product_id)

    async def create_product(self, record: Mapping[str, Any]) -> ApiResponse:
        return await self._call(PRODUCTS_CREATE, json=dict(record))

    async def update_product_insides(self, update: Mapping[str, Any]) -> ApiResponse:
        """PATCH /admin/products/insides: remplacement complet des items d'une ligne."""
        return await self._call(PRODUCTS_UPDATE_INSIDES, json=dict(update))

    async def delete_product(self, product_id: Any) -> ApiResponse:
        return await self._call(PRODUCTS_DELETE, id=product_id)

    async def get_text(self) -> ApiResponse:
        return await self._call(TEXT_GET)

    async def update_text(self, text: str) -> ApiResponse:
        return await self._call(TEXT_UPDATE, json={"text": text})

    async def test_text(self) -> ApiResponse:
        return await self._call(TEXT_TEST)

    async def _call(self, endpoint: Endpoint, json: Any = None, **params: Any) -> ApiResponse:
        path = endpoint.format(**params)

        # l'appel part quand même, le serveur répondra 401
        if endpoint.auth_required and not await self._token_store.load():
            self._logger.warn("Protected call without session token", endpoint=endpoint.name)

        return await self._pipeline.request(
            endpoint.method,
            path,
            json=json,
            endpoint=endpoint.name,
            teardown_on_unauthorized=endpoint is not LOGIN,
        )
