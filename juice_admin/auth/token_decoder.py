"""
Auth - Token Decoder

Décodage des claims du token de session émis par /admin/login.

Le token est lu avec PyJWT sans vérification de signature: la console ne
détient pas la clé, le serveur reste seul juge de l'autorisation.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

import jwt

from .interfaces import Session, SessionInvariantError


class TokenDecodeError(Exception):
    """Token malformé ou claims inexploitables."""

    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenDecoder:
    """
    Décodeur de claims sans validation de signature.

    Example:
        decoder = TokenDecoder()
        claims = decoder.decode_claims(token)
        session = decoder.to_session(token, user={"login": "admin"})
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        """
        Args:
            clock: Source de temps UTC (injectable pour tests)
        """
        self._clock = clock or _utcnow

    def decode_claims(self, token: str) -> Dict[str, Any]:
        """
        Décode les claims du token (signature non vérifiée).

        Raises:
            TokenDecodeError: Token malformé (structure, base64, JSON,
                claims non-mapping) ou exp absent/non numérique
        """
        if not token or not isinstance(token, str):
            raise TokenDecodeError("Token is empty")

        try:
            payload = jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError as e:
            raise TokenDecodeError(f"Invalid token: {e}")

        exp = payload.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise TokenDecodeError("Claim 'exp' missing or not numeric")

        return payload

    def expiry_time(self, token: str) -> Optional[datetime]:
        """Retourne l'expiration du token, None si indécodable."""
        try:
            return self._timestamp(self.decode_claims(token)["exp"])
        except TokenDecodeError:
            return None

    def is_expired(self, token: Optional[str]) -> bool:
        """
        Vérifie l'expiration (fail-closed).

        Returns:
            True si absent, indécodable ou exp <= maintenant
        """
        if not token:
            return True
        expires_at = self.expiry_time(token)
        if expires_at is None:
            return True
        return self._clock() >= expires_at

    def to_session(self, token: str, user: Optional[Mapping[str, Any]] = None) -> Session:
        """
        Construit la Session à partir des claims.

        Args:
            token: Token brut
            user: Données utilisateur de la réponse login (fallback subject)

        Raises:
            TokenDecodeError: Token indécodable ou iat >= exp
        """
        claims = self.decode_claims(token)
        expires_at = self._timestamp(claims["exp"])

        iat = claims.get("iat")
        if isinstance(iat, (int, float)) and not isinstance(iat, bool):
            issued_at = self._timestamp(iat)
        else:
            issued_at = self._clock()

        user_data = dict(user) if isinstance(user, Mapping) else None
        subject = claims.get("sub") or self._subject_from_user(user_data) or ""

        try:
            return Session(
                token=token,
                subject=str(subject),
                issued_at=issued_at,
                expires_at=expires_at,
                user=user_data,
            )
        except SessionInvariantError as e:
            raise TokenDecodeError(str(e))

    def _timestamp(self, value: float) -> datetime:
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise TokenDecodeError(f"Invalid timestamp: {e}")

    def _subject_from_user(self, user: Optional[Dict[str, Any]]) -> Optional[str]:
        if not user:
            return None
        return user.get("login") or user.get("username") or user.get("id")
