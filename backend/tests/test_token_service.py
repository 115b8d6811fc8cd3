"""
TokenService tests: issuance, admin non-expiry, and failure classification.
"""

from datetime import datetime, timezone

import pytest
from jose import jwt

from utils.tokenJWT import TokenService, TOKEN_EXPIRED, TOKEN_INVALID


@pytest.fixture
def service():
    return TokenService(
        access_secret="access-secret",
        refresh_secret="refresh-secret",
        access_expire_minutes=30,
    )


class TestAccessTokens:

    @pytest.mark.parametrize("role", ["admin", "ADMIN", "Admin"])
    def test_admin_token_has_no_expiry(self, service, role):
        token = service.issue_access_token(1, "boss@shop.test", role)
        claims = jwt.get_unverified_claims(token)
        assert "exp" not in claims
        assert claims["role"] == "admin"
        assert claims["id"] == 1
        assert claims["email"] == "boss@shop.test"

    @pytest.mark.parametrize("role", ["cashier", "CASHIER", "customer"])
    def test_other_roles_expire_after_configured_duration(self, service, role):
        before = datetime.now(timezone.utc).timestamp()
        token = service.issue_access_token(2, "till@shop.test", role)
        claims = jwt.get_unverified_claims(token)
        assert "exp" in claims
        lifetime = claims["exp"] - before
        assert 30 * 60 - 5 <= lifetime <= 30 * 60 + 5

    def test_verify_returns_claims(self, service):
        token = service.issue_access_token(3, "a@shop.test", "cashier")
        check = service.verify(token)
        assert check.ok
        assert check.error is None
        assert check.claims["id"] == 3
        assert check.claims["role"] == "cashier"

    def test_admin_token_verifies(self, service):
        check = service.verify(service.issue_access_token(4, "a@shop.test", "admin"))
        assert check.ok
        assert check.claims["role"] == "admin"


class TestRefreshTokens:

    def test_refresh_token_carries_identity_only(self, service):
        token = service.issue_refresh_token(7)
        claims = jwt.get_unverified_claims(token)
        assert set(claims) == {"id", "exp"}
        lifetime = claims["exp"] - datetime.now(timezone.utc).timestamp()
        assert 7 * 24 * 3600 - 10 <= lifetime <= 7 * 24 * 3600 + 10

    def test_refresh_token_uses_its_own_secret(self, service):
        token = service.issue_refresh_token(7)
        assert service.verify_refresh(token).ok
        assert service.verify(token).error == TOKEN_INVALID

    def test_access_token_is_not_a_refresh_token(self, service):
        token = service.issue_access_token(7, "a@shop.test", "cashier")
        assert service.verify_refresh(token).error == TOKEN_INVALID


class TestFailureClassification:

    def test_expired_is_distinct_from_invalid(self):
        expired_service = TokenService("access-secret", "refresh-secret", access_expire_minutes=-1)
        token = expired_service.issue_access_token(1, "a@shop.test", "cashier")
        check = expired_service.verify(token)
        assert not check.ok
        assert check.expired
        assert check.error == TOKEN_EXPIRED

    def test_wrong_signature_is_invalid(self, service):
        other = TokenService("another-secret", "refresh-secret")
        token = other.issue_access_token(1, "a@shop.test", "cashier")
        check = service.verify(token)
        assert not check.ok
        assert not check.expired
        assert check.error == TOKEN_INVALID

    def test_tampered_payload_is_invalid(self, service):
        token = service.issue_access_token(1, "a@shop.test", "cashier")
        header, payload, signature = token.split(".")
        forged = service.issue_access_token(1, "a@shop.test", "admin").split(".")[1]
        assert service.verify(f"{header}.{forged}.{signature}").error == TOKEN_INVALID

    @pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c", None])
    def test_garbage_never_raises(self, service, garbage):
        check = service.verify(garbage)
        assert not check.ok
        assert check.error == TOKEN_INVALID
