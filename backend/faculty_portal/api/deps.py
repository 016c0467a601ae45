"""
Access control dependencies: bearer token -> verified claims -> User -> role gate.

Routes declare the roles they accept with require_roles(...); scope checks on
individual records live in services.access.
"""
import logging

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from faculty_portal.database import get_db
from faculty_portal.errors import Forbidden, TokenExpired, TokenInvalid, Unauthenticated
from faculty_portal.models.user import ADMIN_ROLES, User
from faculty_portal.services.tokens import TokenClaims, verify_token

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> TokenClaims:
    """Require `Authorization: Bearer <token>` and a valid, unexpired token."""
    token = (getattr(credentials, "credentials", None) or "").strip() if credentials else ""
    if not token:
        logger.debug("Auth failed: no Bearer token in request")
        raise Unauthenticated("No token, authorization denied")
    try:
        return verify_token(token)
    except TokenExpired:
        logger.debug("Auth failed: expired token")
        raise Unauthenticated("Token has expired")
    except TokenInvalid:
        logger.debug("Auth failed: invalid token")
        raise Unauthenticated("Invalid token")


def get_current_user(
    claims: TokenClaims = Depends(get_token_claims),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the token subject to a live account; 401 if it was deleted."""
    user = db.get(User, claims.id)
    if not user:
        raise Unauthenticated("User not found")
    return user


def require_roles(*roles: str):
    """Dependency factory: 403 unless the caller's role is in roles."""
    allowed = frozenset(roles)

    def _check(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.info(
                "Access denied: user=%s role=%s allowed=%s",
                current_user.id, current_user.role, sorted(allowed),
            )
            raise Forbidden(f"Access denied. Required role: {' or '.join(sorted(allowed))}")
        return current_user

    return _check


require_admin = require_roles(*ADMIN_ROLES)
