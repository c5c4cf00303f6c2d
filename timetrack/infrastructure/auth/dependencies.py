"""
Authentication dependencies for FastAPI.
"""

from typing import Annotated, Any, Dict

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from timetrack.domain.models.base import AuthorizationError, ValidationError
from timetrack.infrastructure.auth.jwt_handler import JWTHandler


# Security scheme
security = HTTPBearer()

jwt_handler = JWTHandler()


def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    return jwt_handler


def _decode(credentials: HTTPAuthorizationCredentials, handler: JWTHandler) -> Dict[str, Any]:
    try:
        return handler.verify_token(credentials.credentials)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> str:
    """
    FastAPI dependency to get current authenticated user ID.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    return str(_decode(credentials, jwt_handler)["sub"])


def require_scope(scope: str):
    """
    Build a dependency that only admits tokens granting ``scope``.

    Returns the caller's ``sub``. A valid token without the scope is an
    AuthorizationError (403); an invalid token is a 401.
    """

    async def dependency(
        credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
        jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
    ) -> str:
        payload = _decode(credentials, jwt_handler)
        if scope not in jwt_handler.scopes(payload):
            raise AuthorizationError(f"Token lacks the '{scope}' scope")
        return str(payload["sub"])

    return dependency


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
