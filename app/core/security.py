"""Security utilities for tenant bearer tokens."""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError
from pydantic import BaseModel, ConfigDict, ValidationError

from app.core.config import settings
from app.core.exceptions import AuthenticationError, ConfigurationError


class TokenPayload(BaseModel):
    """Claims carried by a tenant access token."""
    model_config = ConfigDict(extra="allow")

    tenantId: str
    iat: datetime
    exp: datetime


def _require_secret(secret: Optional[str]) -> str:
    secret = secret if secret is not None else settings.JWT_SECRET_KEY
    if not secret:
        raise ConfigurationError("JWT secret is not configured")
    return secret


def create_access_token(
    tenant_id: str,
    secret: Optional[str] = None,
    expires_in: Optional[timedelta] = None,
) -> str:
    """Create a tenant access token valid for ``ACCESS_TOKEN_EXPIRE_HOURS``."""
    now = datetime.now(timezone.utc)
    if expires_in is None:
        expires_in = timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)

    payload = {
        "tenantId": tenant_id,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }

    return jwt.encode(payload, _require_secret(secret), algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, secret: Optional[str] = None) -> TokenPayload:
    """
    Verify signature and expiry of a tenant token and return its claims.

    Raises ConfigurationError when no secret is configured and
    AuthenticationError for any invalid or expired token.
    """
    key = _require_secret(secret)
    try:
        payload = jwt.decode(token, key, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise AuthenticationError(f"Invalid token: {e}", status_code=403) from e

    if not payload.get("tenantId"):
        raise AuthenticationError("Invalid token: missing tenantId claim", status_code=403)

    try:
        return TokenPayload(**payload)
    except ValidationError as e:
        raise AuthenticationError(f"Invalid token claims: {e.error_count()} errors", status_code=403) from e
