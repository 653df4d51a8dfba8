"""
juice_admin - Pytest Configuration
Fixtures partagées pour tous les tests.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import jwt
import pytest

from juice_admin import AdminConsole
from juice_admin.core import ConsoleConfig, LoggingSettings


FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Horloge UTC contrôlable."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class ApiStub:
    """
    Serveur d'administration simulé (httpx.MockTransport).

    Route par (méthode, chemin); 404 si route inconnue.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ) -> None:
        if handler is None:

            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(status, json=json)

        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Not found"})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def clock() -> FrozenClock:
    """Horloge figée au 2026-01-15 12:00 UTC."""
    return FrozenClock()


@pytest.fixture
def make_token(clock: FrozenClock) -> Callable[..., str]:
    """Fabrique de tokens signés HS256 (la signature n'est pas vérifiée)."""

    def _make(
        exp_in: float = 3600,
        iat_in: Optional[float] = 0,
        sub: Optional[str] = "admin",
        **claims: Any,
    ) -> str:
        now = int(clock.now.timestamp())
        payload: Dict[str, Any] = {"exp": now + int(exp_in)}
        if iat_in is not None:
            payload["iat"] = now + int(iat_in)
        if sub is not None:
            payload["sub"] = sub
        payload.update(claims)
        return jwt.encode(payload, "test-secret", algorithm="HS256")

    return _make


@pytest.fixture
def api_stub() -> ApiStub:
    return ApiStub()


@pytest.fixture
def login_ok(api_stub: ApiStub, make_token: Callable[..., str]) -> str:
    """Route /admin/login acceptant les credentials; retourne le token émis."""
    token = make_token()
    api_stub.on(
        "POST",
        "/admin/login",
        json={"access_token": token, "user": {"login": "admin", "role": "admin"}},
    )
    return token


@pytest.fixture
def quiet_config() -> ConsoleConfig:
    """Configuration de test sans sortie console."""
    return ConsoleConfig(environment="test", logging=LoggingSettings(enable_console=False))


@pytest.fixture
def console(quiet_config: ConsoleConfig, api_stub: ApiStub, clock: FrozenClock) -> AdminConsole:
    return AdminConsole.create(quiet_config, transport=api_stub.transport, clock=clock)


@pytest.fixture
def valid_item() -> Dict[str, Any]:
    return {
        "product": "Paracetamol",
        "activeSubstance": "Paracetamol",
        "dosage": "500mg",
        "availability": True,
        "price": 4.99,
        "id": 1,
    }


@pytest.fixture
def valid_product(valid_item: Dict[str, Any]) -> Dict[str, Any]:
    second = dict(valid_item, id=2, product="Ibuprofen", activeSubstance="Ibuprofen", dosage="200mg")
    return {"row": 1, "insides": [valid_item, second]}
