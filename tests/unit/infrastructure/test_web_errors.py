"""
Unit tests for HTTP error mapping and token handling.
"""

from datetime import timedelta

import pytest

from timetrack.domain.models.base import (
    AuthorizationError,
    BusinessRuleViolation,
    ConflictError,
    InvalidIntervalError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from timetrack.infrastructure.auth.jwt_handler import JWTHandler
from timetrack.infrastructure.web.middleware.error_handler import format_domain_error


class TestFormatDomainError:
    """Status and body for each domain error."""

    @pytest.mark.parametrize("exc,status_code,code", [
        (ConflictError("A timer is already running"), 409, "CONFLICT"),
        (NotFoundError("TimeEntry", 3), 404, "NOT_FOUND"),
        (InvalidIntervalError("bad"), 422, "INVALID_INTERVAL"),
        (AuthorizationError(), 403, "FORBIDDEN"),
        (ValidationError("bad"), 400, "VALIDATION_ERROR"),
        (BusinessRuleViolation("no"), 422, "BUSINESS_RULE_VIOLATION"),
        (StorageUnavailableError(), 503, "STORAGE_UNAVAILABLE"),
    ])
    def test_status_mapping(self, exc, status_code, code):
        body = format_domain_error(exc)

        assert body["status_code"] == status_code
        assert body["code"] == code
        assert body["message"] == exc.message

    def test_field_detail(self):
        body = format_domain_error(ValidationError("Month must be between 1 and 12", "month"))

        assert body["details"] == {"field": "month"}


class TestJWTHandler:
    """Test cases for JWTHandler."""

    def setup_method(self):
        self.handler = JWTHandler(secret="test-secret", algorithm="HS256")

    def test_round_trip_user_id(self):
        token = self.handler.create_access_token("u1")

        assert self.handler.get_user_id(token) == "u1"
        assert self.handler.get_user_id(f"Bearer {token}") == "u1"

    def test_expired_token(self):
        token = self.handler.create_access_token("u1", expires_in=timedelta(seconds=-10))

        with pytest.raises(ValidationError, match="Invalid JWT token"):
            self.handler.verify_token(token)

    def test_wrong_secret(self):
        token = JWTHandler(secret="other", algorithm="HS256").create_access_token("u1")

        with pytest.raises(ValidationError):
            self.handler.verify_token(token)

    def test_missing_subject(self):
        token = self.handler.create_access_token("", extra_claims={"role": "member"})

        with pytest.raises(ValidationError, match="sub claim"):
            self.handler.verify_token(token)

    def test_scopes_from_space_separated_claim(self):
        token = self.handler.create_access_token("svc", extra_claims={"scope": "tasks:hooks reports:read"})

        assert self.handler.scopes(self.handler.verify_token(token)) == {"tasks:hooks", "reports:read"}

    def test_no_scope_claim(self):
        token = self.handler.create_access_token("u1")

        assert self.handler.scopes(self.handler.verify_token(token)) == set()
