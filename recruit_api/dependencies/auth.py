"""Authentication dependencies for FastAPI."""
import hmac
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from recruit_api import config
from recruit_api.dependencies.services import get_jwt_service
from recruit_api.services.jwt_service import CANDIDATE_ROLE, JwtService

# HTTP Bearer scheme for JWT
security = HTTPBearer(auto_error=False)


def _auth_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": "UNAUTHORIZED", "message": detail, "details": None},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_candidate_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    jwt_service: Annotated[JwtService, Depends(get_jwt_service)],
) -> dict:
    """Decode the candidate access token.

    Raises:
        HTTPException: 401 if not authenticated or the token is invalid.
    """
    if credentials is None:
        raise _auth_error("Not authenticated")

    claims = jwt_service.validate(credentials.credentials)
    if claims is None:
        raise _auth_error("Invalid or expired token")
    if claims.get("role") != CANDIDATE_ROLE or not claims.get("sub"):
        raise _auth_error("Invalid token payload")
    return claims


def ensure_candidate(claims: dict, candidate_id: str) -> None:
    """Reject access to another candidate's data with 403."""
    if claims.get("sub") != candidate_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "code": "FORBIDDEN",
                "message": "Token does not belong to this candidate",
                "details": None,
            },
        )


async def require_admin_key(
    x_admin_key: Annotated[str | None, Header()] = None,
) -> None:
    """Check the X-Admin-Key header; the admin API is off without a configured key."""
    expected = config.ADMIN_API_KEY
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": "ADMIN_DISABLED", "message": "Admin API is disabled", "details": None},
        )
    if not x_admin_key or not hmac.compare_digest(x_admin_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "UNAUTHORIZED", "message": "Invalid admin key", "details": None},
        )
