"""
Bearer-token authentication.
"""

from .dependencies import get_current_user_id, get_jwt_handler, require_scope, CurrentUserId
from .jwt_handler import JWTHandler

__all__ = ["get_current_user_id", "get_jwt_handler", "require_scope", "CurrentUserId", "JWTHandler"]
