"""
Tests unitaires Network - RequestPipeline

Couvre:
- En-tête Bearer relu à chaque appel
- 401: logout terminé avant le retour de la réponse
- Échecs transport: TIMEOUT / UNREACHABLE, session intacte
- Retry des GET uniquement
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from juice_admin.auth import SessionManager, SessionState, TokenStore
from juice_admin.core import AuthError, NetworkError
from juice_admin.logging import LogLevel, StructuredLogger
from juice_admin.network import (
    ApiResponse,
    IRequestPipeline,
    RequestPipeline,
    RetryConfig,
    RetryHandler,
)


# ══════════════════════════════════════════════════════════════════════════════
# FIXTURES
# ══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def token_store() -> TokenStore:
    return TokenStore()


@pytest.fixture
def logger() -> StructuredLogger:
    return StructuredLogger("test.pipeline")


@pytest.fixture
def pipeline(token_store: TokenStore, api_stub, logger: StructuredLogger) -> RequestPipeline:
    client = httpx.AsyncClient(base_url="http://admin.test", transport=api_stub.transport)
    return RequestPipeline(token_store, client, logger=logger)


def raise_connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def raise_read_timeout(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)


# ══════════════════════════════════════════════════════════════════════════════
# TESTS EN-TÊTE D'AUTHENTIFICATION
# ══════════════════════════════════════════════════════════════════════════════


class TestAuthorizationHeader:
    """Token attaché à chaque appel, jamais via un état global."""

    def test_implements_interface(self, pipeline: RequestPipeline) -> None:
        assert isinstance(pipeline, IRequestPipeline)

    @pytest.mark.asyncio
    async def test_no_header_without_token(self, pipeline: RequestPipeline, api_stub) -> None:
        api_stub.on("GET", "/admin/products", json=[])

        await pipeline.request("GET", "/admin/products")

        assert "Authorization" not in api_stub.requests[0].headers

    @pytest.mark.asyncio
    async def test_bearer_header_with_token(self, pipeline: RequestPipeline, token_store: TokenStore, api_stub) -> None:
        api_stub.on("GET", "/admin/products", json=[])
        await token_store.save("abc.def.ghi")

        await pipeline.request("GET", "/admin/products")

        assert api_stub.requests[0].headers["Authorization"] == "Bearer abc.def.ghi"

    @pytest.mark.asyncio
    async def test_token_reread_on_every_call(self, pipeline: RequestPipeline, token_store: TokenStore, api_stub) -> None:
        api_stub.on("GET", "/admin/text", json={"text": ""})

        await token_store.save("first")
        await pipeline.request("GET", "/admin/text")
        await token_store.save("second")
        await pipeline.request("GET", "/admin/text")

        assert api_stub.requests[0].headers["Authorization"] == "Bearer first"
        assert api_stub.requests[1].headers["Authorization"] == "Bearer second"

    @pytest.mark.asyncio
    async def test_custom_header_prefix(self, token_store: TokenStore, api_stub) -> None:
        client = httpx.AsyncClient(base_url="http://admin.test", transport=api_stub.transport)
        pipeline = RequestPipeline(token_store, client, header_prefix="Token ")
        api_stub.on("GET", "/admin/text", json={})
        await token_store.save("xyz")

        await pipeline.request("GET", "/admin/text")

        assert api_stub.requests[0].headers["Authorization"] == "Token xyz"


# ══════════════════════════════════════════════════════════════════════════════
# TESTS RÉPONSES
# ══════════════════════════════════════════════════════════════════════════════


class TestResponses:
    """Statuts et corps transmis sans modification."""

    @pytest.mark.asyncio
    async def test_success_body_decoded(self, pipeline: RequestPipeline, api_stub) -> None:
        api_stub.on("GET", "/admin/products", json=[{"row": 1, "insides": []}])

        response = await pipeline.request("GET", "/admin/products")

        assert isinstance(response, ApiResponse)
        assert response.success is True
        assert response.status_code == 200
        assert response.data == [{"row": 1, "insides": []}]

    @pytest.mark.asyncio
    async def test_error_status_passes_through(self, pipeline: RequestPipeline, api_stub) -> None:
        api_stub.on("POST", "/admin/products", status=400, json={"message": "Row already exists"})

        response = await pipeline.request("POST", "/admin/products", json={"row": 1})

        assert response.success is False
        assert response.status_code == 400
        assert response.error is None
        assert response.data == {"message": "Row already exists"}

    @pytest.mark.asyncio
    async def test_text_body(self, pipeline: RequestPipeline, api_stub) -> None:
        api_stub.on("GET", "/admin/text/test", handler=lambda r: httpx.Response(200, text="pong"))

        response = await pipeline.request("GET", "/admin/text/test")

        assert response.data == "pong"

    @pytest.mark.asyncio
    async def test_empty_body(self, pipeline: RequestPipeline, api_stub) -> None:
        api_stub.on("DELETE", "/admin/products/1", handler=lambda r: httpx.Response(204))

        response = await pipeline.request("DELETE", "/admin/products/1")

        assert response.success is True
        assert response.data is None

    @pytest.mark.asyncio
    async def test_json_body_sent(self, pipeline: RequestPipeline, api_stub) -> None:
        api_stub.on("PATCH", "/admin/text", json={"text": "<p>hi</p>"})

        await pipeline.request("PATCH", "/admin/text", json={"text": "<p>hi</p>"})

        assert api_stub.body() == {"text": "<p>hi</p>"}


# ══════════════════════════════════════════════════════════════════════════════
# TESTS 401
# ══════════════════════════════════════════════════════════════════════════════


class TestUnauthorized:
    """401: teardown de la session avant le retour."""

    @pytest.mark.asyncio
    async def test_unauthorized_clears_store_without_manager(
        self, pipeline: RequestPipeline, token_store: TokenStore, api_stub
    ) -> None:
        api_stub.on("DELETE", "/admin/products/42", status=401, json={"message": "Token expired"})
        await token_store.save("abc.def.ghi")

        response = await pipeline.request("DELETE", "/admin/products/42")

        assert response.error == AuthError.UNAUTHORIZED
        assert response.message == "Token expired"
        assert await token_store.load() is None

    @pytest.mark.asyncio
    async def test_unauthorized_logs_out_session(
        self, pipeline: RequestPipeline, token_store: TokenStore, api_stub, clock, make_token
    ) -> None:
        token = make_token()
        await token_store.save(token)
        manager = SessionManager(token_store, clock=clock)
        await manager.restore()
        pipeline.bind_session_manager(manager)
        api_stub.on("DELETE", "/admin/products/42", status=401)

        response = await pipeline.request("DELETE", "/admin/products/42")

        assert response.error == AuthError.UNAUTHORIZED
        assert response.message == "Unauthorized"
        assert manager.state == SessionState.ANONYMOUS
        assert await token_store.load() is None

    @pytest.mark.asyncio
    async def test_logout_completes_before_response_returned(
        self, pipeline: RequestPipeline, token_store: TokenStore, api_stub
    ) -> None:
        manager = AsyncMock()
        pipeline.bind_session_manager(manager)
        api_stub.on("PATCH", "/admin/text", status=401)

        await pipeline.request("PATCH", "/admin/text", json={"text": "x"})

        manager.logout.assert_awaited_once_with(reason="unauthorized")

    @pytest.mark.asyncio
    async def test_teardown_can_be_disabled(self, pipeline: RequestPipeline, token_store: TokenStore, api_stub) -> None:
        api_stub.on("POST", "/admin/login", status=401, json={"message": "Invalid credentials"})
        await token_store.save("still.valid.token")

        response = await pipeline.request("POST", "/admin/login", json={}, teardown_on_unauthorized=False)

        assert response.error == AuthError.UNAUTHORIZED
        assert await token_store.load() == "still.valid.token"

    @pytest.mark.asyncio
    async def test_unauthorized_is_logged(
        self, pipeline: RequestPipeline, token_store: TokenStore, api_stub, logger: StructuredLogger
    ) -> None:
        api_stub.on("GET", "/admin/products", status=401)

        await pipeline.request("GET", "/admin/products")

        warnings = logger.get_entries_by_level(LogLevel.WARN)
        assert [e.message for e in warnings] == ["Unauthorized response"]


# ══════════════════════════════════════════════════════════════════════════════
# TESTS TRANSPORT / RETRY
# ══════════════════════════════════════════════════════════════════════════════


class TestTransportFailures:
    """Échecs transport: session intacte, GET rejoués."""

    @pytest.mark.asyncio
    async def test_post_unreachable_not_retried(
        self, pipeline: RequestPipeline, token_store: TokenStore, api_stub
    ) -> None:
        api_stub.on("POST", "/admin/products", handler=raise_connect_error)
        await token_store.save("abc.def.ghi")

        with patch("asyncio.sleep", new_callable=AsyncMock):
            response = await pipeline.request("POST", "/admin/products", json={"row": 1})

        assert response.error == NetworkError.UNREACHABLE
        assert response.status_code is None
        assert response.attempts == 1
        assert api_stub.count("POST", "/admin/products") == 1
        assert await token_store.load() == "abc.def.ghi"

    @pytest.mark.asyncio
    async def test_get_timeout_retried(self, pipeline: RequestPipeline, api_stub) -> None:
        api_stub.on("GET", "/admin/products", handler=raise_read_timeout)

        with patch("asyncio.sleep", new_callable=AsyncMock):
            response = await pipeline.request("GET", "/admin/products")

        assert response.error == NetworkError.TIMEOUT
        assert response.attempts == 3
        assert api_stub.count("GET", "/admin/products") == 3

    @pytest.mark.asyncio
    async def test_get_recovers_after_transient_failure(self, pipeline: RequestPipeline, api_stub) -> None:
        calls = []

        def flaky(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=[])

        api_stub.on("GET", "/admin/products", handler=flaky)

        with patch("asyncio.sleep", new_callable=AsyncMock):
            response = await pipeline.request("GET", "/admin/products")

        assert response.success is True
        assert response.attempts == 2

    @pytest.mark.asyncio
    async def test_retry_attempts_from_handler_config(self, token_store: TokenStore, api_stub) -> None:
        client = httpx.AsyncClient(base_url="http://admin.test", transport=api_stub.transport)
        pipeline = RequestPipeline(token_store, client, retry_handler=RetryHandler(RetryConfig(max_attempts=5)))
        api_stub.on("GET", "/admin/text", handler=raise_connect_error)

        with patch("asyncio.sleep", new_callable=AsyncMock):
            response = await pipeline.request("GET", "/admin/text")

        assert response.attempts == 5
        assert response.error == NetworkError.UNREACHABLE

    @pytest.mark.asyncio
    async def test_server_errors_are_not_retried(self, pipeline: RequestPipeline, api_stub) -> None:
        api_stub.on("GET", "/admin/products", status=503, json={"message": "down"})

        response = await pipeline.request("GET", "/admin/products")

        assert response.status_code == 503
        assert response.attempts == 1

    @pytest.mark.asyncio
    async def test_authenticated_write_timeout_keeps_session(
        self, pipeline: RequestPipeline, token_store: TokenStore, api_stub, clock, make_token
    ) -> None:
        """Un timeout n'est pas un refus d'autorisation."""
        token = make_token()
        await token_store.save(token)
        manager = SessionManager(token_store, clock=clock)
        await manager.restore()
        pipeline.bind_session_manager(manager)
        api_stub.on("PATCH", "/admin/text", handler=raise_read_timeout)

        response = await pipeline.request("PATCH", "/admin/text", json={"text": "<p>x</p>"})

        assert response.error == NetworkError.TIMEOUT
        assert response.attempts == 1
        assert manager.state == SessionState.AUTHENTICATED
        assert await token_store.load() == token


class TestOtherHttpxFailures:
    """Erreurs httpx hors transport: résultat UNREACHABLE, jamais d'exception."""

    @staticmethod
    def raise_decoding_error(request: httpx.Request) -> httpx.Response:
        raise httpx.DecodingError("bad gzip stream", request=request)

    @pytest.mark.asyncio
    async def test_post_decoding_error(self, pipeline: RequestPipeline, api_stub) -> None:
        api_stub.on("POST", "/admin/login", handler=self.raise_decoding_error)

        response = await pipeline.request("POST", "/admin/login", json={"login": "admin"})

        assert response.error == NetworkError.UNREACHABLE
        assert response.status_code is None

    @pytest.mark.asyncio
    async def test_get_decoding_error_not_retried(self, pipeline: RequestPipeline, api_stub) -> None:
        api_stub.on("GET", "/admin/products", handler=self.raise_decoding_error)

        with patch("asyncio.sleep", new_callable=AsyncMock):
            response = await pipeline.request("GET", "/admin/products")

        assert response.error == NetworkError.UNREACHABLE
        assert response.attempts == 1
        assert api_stub.count("GET", "/admin/products") == 1
