"""
Network - Request Pipeline

Enveloppe de tout appel sortant vers l'API d'administration.

Règles:
    - Le token est relu dans le TokenStore à CHAQUE appel (pas d'en-tête global)
    - Réponse 401: logout terminé AVANT de remettre la réponse à l'appelant
    - Échec transport: TIMEOUT / UNREACHABLE, session intacte
    - Seules les lectures (GET) sont rejouées
"""

import dataclasses
from typing import Any, Dict, Optional

import httpx

from ..auth.interfaces import ISessionManager, ITokenStore
from ..core.errors import AuthError, NetworkError
from ..logging import ContextualLogger, StructuredLogger
from .interfaces import ApiResponse, IRequestPipeline, RetryConfig
from .retry_handler import RetryHandler
from .timeout_manager import TimeoutManager


class RequestPipeline(IRequestPipeline):
    """
    Pipeline de requêtes authentifiées.

    Le SessionManager est lié après construction (bind_session_manager):
    il dépend lui-même de l'API qui passe par ce pipeline.

    Example:
        pipeline = RequestPipeline(token_store, client)
        pipeline.bind_session_manager(session_manager)
        response = await pipeline.request("DELETE", "/admin/products/42")
        if response.error is AuthError.UNAUTHORIZED:
            ...  # session déjà terminée
    """

    IDEMPOTENT_METHODS = frozenset({"GET"})
    DEFAULT_HEADER_PREFIX: str = "Bearer "

    def __init__(
        self,
        token_store: ITokenStore,
        client: httpx.AsyncClient,
        timeout_manager: Optional[TimeoutManager] = None,
        retry_handler: Optional[RetryHandler] = None,
        logger: Optional[StructuredLogger] = None,
        header_prefix: str = DEFAULT_HEADER_PREFIX,
    ) -> None:
        """
        Args:
            token_store: Slot du token courant
            client: Client HTTP (base_url déjà configurée)
            timeout_manager: Timeouts par endpoint
            retry_handler: Retries des lectures
            logger: Logger structuré
            header_prefix: Préfixe de l'en-tête Authorization
        """
        self._token_store = token_store
        self._client = client
        self._timeouts = timeout_manager or TimeoutManager()
        self._retry = retry_handler or RetryHandler()
        self._logger = logger or StructuredLogger("juice_admin.pipeline")
        self._header_prefix = header_prefix
        self._session_manager: Optional[ISessionManager] = None

        self._retry_config: RetryConfig = dataclasses.replace(
            self._retry.default_config,
            retryable_exceptions=(httpx.TransportError,),
        )

    def bind_session_manager(self, manager: ISessionManager) -> None:
        self._session_manager = manager

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        endpoint: Optional[str] = None,
        teardown_on_unauthorized: bool = True,
    ) -> ApiResponse:
        """
        Exécute un appel.

        Args:
            method: Verbe HTTP
            path: Chemin relatif à la base URL
            json: Corps JSON (optionnel)
            endpoint: Nom logique (timeouts spécifiques)
            teardown_on_unauthorized: False pour le login (401 = credentials refusés)

        Returns:
            ApiResponse (jamais d'exception pour les échecs httpx)
        """
        method = method.upper()
        log = self._logger.with_context()

        headers = await self._auth_headers()
        timeout = self._timeouts.httpx_timeout(endpoint)

        async def send() -> httpx.Response:
            return await self._client.request(
                method,
                path,
                json=json,
                headers=headers,
                timeout=timeout,
            )

        log.debug("Request started", method=method, path=path, authenticated="Authorization" in headers)

        if method in self.IDEMPOTENT_METHODS:
            outcome = await self._retry.execute_with_retry(send, config=self._retry_config)
            attempts = outcome.attempts
            if not outcome.success:
                if isinstance(outcome.last_error, httpx.RequestError):
                    return self._transport_failure(log, method, path, outcome.last_error, attempts)
                raise outcome.last_error
            response: httpx.Response = outcome.result
        else:
            attempts = 1
            try:
                response = await send()
            except httpx.RequestError as e:
                return self._transport_failure(log, method, path, e, attempts)

        data = self._decode_body(response)

        if response.status_code == 401:
            log.warn("Unauthorized response", method=method, path=path, attempts=attempts)
            if teardown_on_unauthorized:
                await self._teardown(log)
            return ApiResponse(
                status_code=401,
                data=data,
                error=AuthError.UNAUTHORIZED,
                message=self._server_message(data) or "Unauthorized",
                attempts=attempts,
            )

        log.info(
            "Request completed",
            method=method,
            path=path,
            status_code=response.status_code,
            attempts=attempts,
        )
        return ApiResponse(status_code=response.status_code, data=data, attempts=attempts)

    async def _auth_headers(self) -> Dict[str, str]:
        token = await self._token_store.load()
        if not token:
            return {}
        return {"Authorization": f"{self._header_prefix}{token}"}

    async def _teardown(self, log: ContextualLogger) -> None:
        if self._session_manager is not None:
            await self._session_manager.logout(reason="unauthorized")
        else:
            await self._token_store.clear()
        log.info("Session torn down after unauthorized response")

    def _transport_failure(
        self,
        log: ContextualLogger,
        method: str,
        path: str,
        error: httpx.RequestError,
        attempts: int,
    ) -> ApiResponse:
        if isinstance(error, httpx.TimeoutException):
            kind, message = NetworkError.TIMEOUT, "Request timed out"
        else:
            kind, message = NetworkError.UNREACHABLE, "Server unreachable"

        log.warn(
            "Request failed on transport",
            method=method,
            path=path,
            error=kind.value,
            detail=type(error).__name__,
            attempts=attempts,
        )
        return ApiResponse(error=kind, message=message, attempts=attempts)

    def _decode_body(self, response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _server_message(self, data: Any) -> Optional[str]:
        if isinstance(data, dict):
            message = data.get("message")
            if isinstance(message, str) and message:
                return message
        return None
