"""
JWT bearer token handling.
Validates tokens issued by the identity provider and extracts the user.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Set

from jose import JWTError, jwt as jose_jwt

from timetrack.config import get_settings
from timetrack.domain.models.base import ValidationError


class JWTHandler:
    """Handles JWT token validation and user extraction."""

    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None):
        self.settings = get_settings()
        self.jwt_secret = secret or self.settings.jwt_secret_key
        self.jwt_algorithm = algorithm or self.settings.jwt_algorithm

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string

        Returns:
            Dict containing token payload

        Raises:
            ValidationError: If token is invalid or expired
        """
        if token.startswith('Bearer '):
            token = token[7:]

        try:
            payload = jose_jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"verify_exp": True, "verify_aud": False}
            )
        except JWTError as e:
            raise ValidationError(f"Invalid JWT token: {str(e)}")

        if not payload.get('sub'):
            raise ValidationError("Token missing user ID (sub claim)")

        return payload

    def get_user_id(self, token: str) -> str:
        """Extract the user ID (``sub`` claim) from a JWT token."""
        return str(self.verify_token(token)['sub'])

    def scopes(self, payload: Dict[str, Any]) -> Set[str]:
        """Scopes granted by a decoded token (space separated ``scope`` claim)."""
        scope = payload.get("scope") or ""
        if isinstance(scope, str):
            return set(scope.split())
        return {str(s) for s in scope}

    def create_access_token(
        self,
        user_id: str,
        expires_in: timedelta = timedelta(hours=1),
        extra_claims: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Issue a signed token for ``user_id`` (used by tooling and tests)."""
        claims: Dict[str, Any] = {
            "sub": user_id,
            "exp": datetime.now(timezone.utc) + expires_in,
        }
        if extra_claims:
            claims.update(extra_claims)
        return jose_jwt.encode(claims, self.jwt_secret, algorithm=self.jwt_algorithm)
