"""
Auth - Session Manager

Cycle de vie de la session d'administration: login, restauration au
démarrage, logout, détection d'expiration et de rafraîchissement.

Règles:
    - Credentials validés AVANT tout appel réseau
    - TokenStore.save terminé AVANT que login ne retourne
    - Logout idempotent
    - Token indécodable = expiré (fail-closed)
"""

from datetime import datetime, timedelta
from typing import Any, Callable, Mapping, Optional

from ..core.errors import AuthError, NetworkError
from ..logging import StructuredLogger
from ..validation import IValidationEngine, ValidationEngine
from .interfaces import (
    AuthResult,
    IAuthGateway,
    ISessionManager,
    ITokenStore,
    Session,
    SessionState,
)
from .token_decoder import TokenDecodeError, TokenDecoder, _utcnow


class SessionManager(ISessionManager):
    """
    Gestionnaire de la session courante (une seule à la fois).

    Example:
        manager = SessionManager(token_store, gateway=admin_api)
        result = await manager.login({"login": "admin", "password": "secret"})
        if result.success:
            manager.should_refresh()
    """

    DEFAULT_REFRESH_THRESHOLD_HOURS: float = 1.0

    def __init__(
        self,
        token_store: ITokenStore,
        gateway: Optional[IAuthGateway] = None,
        validator: Optional[IValidationEngine] = None,
        refresh_threshold_hours: float = DEFAULT_REFRESH_THRESHOLD_HOURS,
        clock: Optional[Callable[[], datetime]] = None,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        """
        Args:
            token_store: Slot persistant du token
            gateway: Appel /admin/login (peut être lié plus tard via bind_gateway)
            validator: Moteur de validation des credentials
            refresh_threshold_hours: Seuil d'alerte avant expiration (heures)
            clock: Source de temps UTC (injectable pour tests)
            logger: Logger structuré
        """
        if refresh_threshold_hours < 0:
            raise ValueError("refresh_threshold_hours must be >= 0")

        self._token_store = token_store
        self._gateway = gateway
        self._validator = validator or ValidationEngine()
        self.refresh_threshold_hours = refresh_threshold_hours
        self._clock = clock or _utcnow
        self._decoder = TokenDecoder(clock=self._clock)
        self._logger = logger or StructuredLogger("juice_admin.session")

        self._state = SessionState.ANONYMOUS
        self._session: Optional[Session] = None

    def bind_gateway(self, gateway: IAuthGateway) -> None:
        self._gateway = gateway

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_session(self) -> Optional[Session]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._state == SessionState.AUTHENTICATED

    async def login(self, credentials: Any) -> AuthResult:
        """
        Authentifie l'administrateur.

        Processus:
            1. Validation structurelle (échec → INVALID_INPUT, pas de réseau)
            2. Appel /admin/login (état AUTHENTICATING)
            3. Décodage du token → Session
            4. TokenStore.save, puis état AUTHENTICATED

        En cas d'échec, la session précédente (si elle existe) reste courante.

        Returns:
            AuthResult (jamais d'exception)
        """
        validation = self._validator.validate_credentials(credentials)
        if not validation.is_valid:
            self._logger.info("Login rejected before network call", errors=validation.errors)
            return AuthResult(
                success=False,
                error=AuthError.INVALID_INPUT,
                message="; ".join(validation.errors),
                errors=validation.errors,
            )

        login_name = credentials.get("login")

        if self._gateway is None:
            self._logger.error("Login attempted without auth gateway", login=login_name)
            return AuthResult(success=False, error=NetworkError.UNREACHABLE, message="Login service unavailable")

        self._state = SessionState.AUTHENTICATING
        self._logger.info("Login attempt", login=login_name)

        try:
            response = await self._gateway.login(credentials)
        except Exception as e:
            self._settle_state()
            self._logger.error("Login call failed unexpectedly", login=login_name, detail=type(e).__name__)
            return AuthResult(success=False, error=NetworkError.UNREACHABLE, message="Server unreachable")

        if isinstance(response.error, NetworkError):
            self._settle_state()
            self._logger.warn("Login failed on transport", login=login_name, error=response.error.value)
            return AuthResult(success=False, error=response.error, message=response.message)

        if not response.success:
            self._settle_state()
            message = self._server_message(response.data) or "Login failed"
            self._logger.warn(
                "Login rejected by server",
                login=login_name,
                status_code=response.status_code,
            )
            return AuthResult(success=False, error=AuthError.INVALID_CREDENTIALS, message=message)

        body = response.data if isinstance(response.data, Mapping) else {}
        token = body.get("access_token")
        try:
            session = self._decoder.to_session(token, user=body.get("user"))
        except TokenDecodeError as e:
            self._settle_state()
            self._logger.error("Login response carried an undecodable token", login=login_name, reason=str(e))
            return AuthResult(success=False, error=AuthError.INVALID_CREDENTIALS, message="Login failed")

        await self._token_store.save(token)
        self._session = session
        self._state = SessionState.AUTHENTICATED
        self._logger.info("Login succeeded", subject=session.subject, expires_at=session.expires_at.isoformat())

        return AuthResult(success=True, session=session)

    async def restore(self) -> Optional[Session]:
        """
        Restaure la session persistée (appelé une fois au démarrage).

        Returns:
            Session si token présent et non expiré, None sinon (token effacé)
        """
        token = await self._token_store.load()
        if token is None:
            self._logger.debug("No persisted session")
            return None

        try:
            session = self._decoder.to_session(token)
        except TokenDecodeError as e:
            self._logger.warn("Persisted token undecodable, clearing", reason=str(e))
            await self._token_store.clear()
            return None

        if self.is_expired(session):
            self._logger.info("Persisted session expired, clearing", subject=session.subject)
            await self._token_store.clear()
            return None

        self._session = session
        self._state = SessionState.AUTHENTICATED
        self._logger.info("Session restored", subject=session.subject)
        return session

    async def logout(self, reason: str = "manual") -> bool:
        """
        Termine la session courante.

        Le TokenStore est toujours effacé (idempotent); l'état passe à
        ANONYMOUS.

        Args:
            reason: Motif (manual, unauthorized, expired)

        Returns:
            True si une session a été terminée, False si déjà anonyme
        """
        ended = self._session is not None or self._state != SessionState.ANONYMOUS
        subject = self._session.subject if self._session else None

        self._session = None
        self._state = SessionState.ANONYMOUS
        await self._token_store.clear()

        if ended:
            self._logger.info("Logged out", subject=subject, reason=reason)
        return ended

    def is_expired(self, session: Optional[Session] = None) -> bool:
        """
        Compare l'expiration à l'instant courant.

        Args:
            session: Session à vérifier (session courante si None)

        Returns:
            True si absente, expirée ou token indécodable
        """
        target = session or self._session
        if target is None:
            return True
        return self._decoder.is_expired(target.token)

    def is_token_expired(self, token: Optional[str]) -> bool:
        """Variante sur token brut (fail-closed)."""
        return self._decoder.is_expired(token)

    def expiry_time(self, token: str) -> Optional[datetime]:
        return self._decoder.expiry_time(token)

    def should_refresh(self, session: Optional[Session] = None) -> bool:
        """
        Indique que l'expiration approche (expires_at - now <= seuil).

        Indicatif uniquement: aucun endpoint de rafraîchissement n'existe,
        l'appelant peut proposer une ré-authentification.

        Returns:
            False si aucune session ou token indécodable
        """
        target = session or self._session
        if target is None:
            return False

        expires_at = self._decoder.expiry_time(target.token)
        if expires_at is None:
            return False

        remaining = expires_at - self._clock()
        return remaining <= timedelta(hours=self.refresh_threshold_hours)

    def _settle_state(self) -> None:
        """Revient à l'état cohérent avec la session en mémoire après un échec."""
        self._state = SessionState.AUTHENTICATED if self._session else SessionState.ANONYMOUS

    def _server_message(self, data: Any) -> Optional[str]:
        if isinstance(data, Mapping):
            message = data.get("message")
            if isinstance(message, str) and message:
                return message
        return None
