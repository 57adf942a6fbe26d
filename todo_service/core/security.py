"""
Token service: issues and verifies signed, expiring identity tokens.

Tokens are HS256 JWTs carrying the username as ``sub``, the user id as
``userId`` and the comma-joined role list as ``roles``.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from jose import jwt, JWTError, ExpiredSignatureError

from .config import get_settings
from .exceptions import InvalidTokenError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    """Identity extracted from a verified token."""
    subject: str
    user_id: uuid.UUID
    roles: List[str] = field(default_factory=list)


class TokenService:
    """Signs and verifies identity tokens with a process-wide key."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 1440):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(
        self,
        user_id: uuid.UUID,
        username: str,
        roles: Iterable[str],
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Create a signed token for the given user."""
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else timedelta(minutes=self.expire_minutes))
        to_encode = {
            "sub": username,
            "userId": str(user_id),
            "roles": ",".join(roles),
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def _decode(self, token: str) -> dict:
        return jwt.decode(token, self._secret_key, algorithms=[self.algorithm])

    def verify(self, token: Optional[str]) -> TokenClaims:
        """
        Verify a token and return its claims.

        Raises:
            InvalidTokenError: for a bad signature, malformed or expired token,
                unsupported algorithm, or missing claims.
        """
        if not token:
            logger.warning("JWT claims string is empty")
            raise InvalidTokenError()

        try:
            payload = self._decode(token)
        except ExpiredSignatureError as e:
            logger.warning(f"JWT token is expired: {e}")
            raise InvalidTokenError()
        except JWTError as e:
            logger.warning(f"Invalid JWT token: {e}")
            raise InvalidTokenError()

        subject = payload.get("sub")
        raw_user_id = payload.get("userId")
        if not subject or not raw_user_id:
            logger.warning("JWT token is missing required claims")
            raise InvalidTokenError()
        try:
            user_id = uuid.UUID(raw_user_id)
        except (TypeError, ValueError, AttributeError):
            logger.warning("JWT token carries a malformed userId claim")
            raise InvalidTokenError()

        roles = [role for role in (payload.get("roles") or "").split(",") if role]
        return TokenClaims(subject=subject, user_id=user_id, roles=roles)

    def validate(self, token: Optional[str]) -> bool:
        """True if the token verifies, False otherwise."""
        try:
            self.verify(token)
            return True
        except InvalidTokenError:
            return False

    def extract_user_id(self, token: str) -> uuid.UUID:
        """Read the user id from a token that has already been validated."""
        return uuid.UUID(self._decode(token)["userId"])

    def extract_username(self, token: str) -> str:
        """Read the username from a token that has already been validated."""
        return self._decode(token)["sub"]


_token_service: Optional[TokenService] = None


def get_token_service() -> TokenService:
    """Process-wide token service, keyed once from settings."""
    global _token_service
    if _token_service is None:
        settings = get_settings()
        _token_service = TokenService(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.jwt_expiration_minutes,
        )
    return _token_service
