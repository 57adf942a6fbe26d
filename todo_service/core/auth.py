"""
Authorization guard for the Todo Service.

Resolves the caller's identity from the bearer token once per request and
decides whether that caller may touch a given task.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .exceptions import UnauthenticatedError
from .security import TokenService, get_token_service

# Configure logging
logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(
    scheme_name="Bearer Token",
    description="JWT Bearer token issued by /auth/login",
    auto_error=False,
)


@dataclass(frozen=True)
class CurrentUser:
    """Represents the current authenticated user."""
    user_id: uuid.UUID
    username: str
    roles: List[str] = field(default_factory=list)

    def __str__(self):
        return f"User(id={self.user_id}, username={self.username})"


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an ownership check."""
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self):
        return self.allowed


ACCESS_GRANTED = AccessDecision(allowed=True)


def current_user_id(token: Optional[str], token_service: TokenService) -> CurrentUser:
    """
    Resolve the caller from a raw bearer string.

    Raises:
        UnauthenticatedError: no token was presented
        InvalidTokenError: the token failed verification
    """
    if not token:
        raise UnauthenticatedError()
    claims = token_service.verify(token)
    return CurrentUser(user_id=claims.user_id, username=claims.subject, roles=claims.roles)


def verify_ownership(resource_owner_id: uuid.UUID, caller_id: uuid.UUID) -> AccessDecision:
    """Allow access only when the caller owns the resource."""
    if resource_owner_id != caller_id:
        return AccessDecision(
            allowed=False,
            reason="You do not have permission to access this task",
        )
    return ACCESS_GRANTED


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service),
) -> CurrentUser:
    """
    Dependency to get current authenticated user.

    Args:
        credentials: HTTP Bearer credentials from request

    Returns:
        CurrentUser: Current authenticated user
    """
    token = credentials.credentials if credentials else None
    current_user = current_user_id(token, token_service)
    logger.debug(f"Authenticated user: {current_user}")
    return current_user
