"""
Session tokens: signed JWTs carrying the user id (sub) and role, valid for JWT_EXPIRE_HOURS.

There is no revocation list. A token stays valid until it expires, even if the
password changes or the account is deleted in the meantime; routes that
resolve the user still reject tokens whose account no longer exists.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from faculty_portal.config import settings
from faculty_portal.errors import ConfigurationError, TokenExpired, TokenInvalid
from faculty_portal.models.user import ROLES


@dataclass(frozen=True)
class TokenClaims:
    id: uuid.UUID
    role: str


def _secret() -> str:
    secret = (settings.jwt_secret or "").strip()
    if not secret:
        raise ConfigurationError("JWT_SECRET is not configured")
    return secret


def issue_token(user) -> str:
    """Sign a token for user (anything with .id and .role)."""
    secret = _secret()
    now = datetime.now(timezone.utc)
    expire = now + timedelta(hours=settings.jwt_expire_hours)
    # JWT exp/iat must be numeric (Unix timestamp), not datetime
    payload = {
        "sub": str(user.id),
        "role": user.role,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> TokenClaims:
    """Decode and check a token. Raises TokenExpired or TokenInvalid."""
    secret = _secret()
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpired("Token has expired") from e
    except JWTError as e:
        raise TokenInvalid("Invalid token") from e
    sub = payload.get("sub")
    role = payload.get("role")
    if not sub or role not in ROLES:
        raise TokenInvalid("Invalid token payload")
    try:
        user_id = uuid.UUID(str(sub))
    except ValueError as e:
        raise TokenInvalid("Invalid user ID format") from e
    return TokenClaims(id=user_id, role=role)
