import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cuahquick.auth import jwt_handler
from cuahquick.auth.jwt_handler import SessionClaims
from cuahquick.core.errors import Forbidden, InvalidToken, MissingToken

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> SessionClaims:
    if credentials is None or not credentials.credentials:
        raise MissingToken()

    result = jwt_handler.verify_access_token(credentials.credentials)
    if not result.ok:
        logger.info("Rejected bearer token: %s", result.reason)
        raise InvalidToken()
    return result.claims


def require_role(role: str):
    """Build a dependency that admits only identities carrying ``role``."""

    def check_role(claims: SessionClaims | None = Depends(get_current_claims)) -> SessionClaims:
        if claims is None or claims.role != role:
            logger.info("Role check failed: required %s, got %s", role, getattr(claims, "role", None))
            raise Forbidden(f"Access denied. The {role} role is required.")
        return claims

    return check_role
