"""
Authorization tests.

Verifies:
- Missing, expired and invalid tokens return 401 with distinct messages
- Role and disabled flag are read from the store on every request
- Route-group policy: admin-only vs cashier/admin resources
"""

import pytest

from config import get_settings
from models.users import Role
from utils.tokenJWT import TokenService


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# TOKEN VERIFICATION (401)
# =============================================================================


class TestTokenVerification:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/categories"),
            ("GET", "/products"),
            ("GET", "/users"),
            ("GET", "/orders"),
            ("GET", "/transactions"),
            ("GET", "/stocks"),
            ("POST", "/products"),
            ("PUT", "/users/1"),
        ],
    )
    def test_requires_token(self, client, method, path):
        resp = client.request(method, path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        assert resp.json()["status"] == "error"

    def test_missing_header_message(self, client):
        resp = client.get("/orders")
        assert resp.json()["message"] == "Token not found or not logged in"

    def test_raw_token_without_bearer_prefix(self, client, token_service, cashier_user):
        token = token_service.issue_access_token(cashier_user.id, cashier_user.email, cashier_user.role)
        resp = client.get("/orders", headers={"Authorization": token})
        assert resp.status_code == 200

    def test_expired_token(self, client, cashier_user):
        settings = get_settings()
        expired = TokenService(settings.JWT_SECRET, settings.JWT_REFRESH_SECRET, access_expire_minutes=-5)
        token = expired.issue_access_token(cashier_user.id, cashier_user.email, cashier_user.role)
        resp = client.get("/orders", headers=bearer(token))
        assert resp.status_code == 401
        assert resp.json()["message"] == "Token expired, please log in again"

    def test_bad_signature(self, client, cashier_user):
        forged = TokenService("not-the-secret", "whatever")
        token = forged.issue_access_token(cashier_user.id, cashier_user.email, "admin")
        resp = client.get("/orders", headers=bearer(token))
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid token"

    def test_refresh_token_is_not_an_access_token(self, client, token_service, cashier_user):
        token = token_service.issue_refresh_token(cashier_user.id)
        resp = client.get("/orders", headers=bearer(token))
        assert resp.status_code == 401

    def test_open_routes_need_no_token(self, client, db_session):
        assert client.get("/").status_code == 200
        assert client.post("/auth/login", json={"email": "x@x.com", "password": "x"}).status_code == 404


# =============================================================================
# ROLE / STATUS STAGE (403)
# =============================================================================


class TestRoleStage:

    def test_disabled_account_is_rejected_with_valid_token(self, client, db_session, cashier_user, cashier_headers):
        assert client.get("/orders", headers=cashier_headers).status_code == 200

        cashier_user.is_disabled = True
        db_session.commit()

        resp = client.get("/orders", headers=cashier_headers)
        assert resp.status_code == 403
        assert resp.json()["message"] == "Account disabled"

    def test_disabled_admin_is_rejected(self, client, db_session, admin_user, admin_headers):
        admin_user.is_disabled = True
        db_session.commit()
        assert client.get("/categories", headers=admin_headers).status_code == 403

    def test_role_change_applies_immediately(self, client, db_session, cashier_user, cashier_headers):
        assert client.get("/categories", headers=cashier_headers).status_code == 403

        # Token still says cashier, the store now says admin
        cashier_user.role = Role.ADMIN.value
        db_session.commit()
        assert client.get("/categories", headers=cashier_headers).status_code == 200

    def test_demoted_admin_loses_access(self, client, db_session, admin_user, admin_headers):
        admin_user.role = Role.CASHIER.value
        db_session.commit()
        resp = client.get("/users", headers=admin_headers)
        assert resp.status_code == 403

    def test_deleted_user_token(self, client, db_session, cashier_user, cashier_headers):
        db_session.delete(cashier_user)
        db_session.commit()
        assert client.get("/orders", headers=cashier_headers).status_code == 404

    def test_cashier_cannot_update_users_regardless_of_payload(self, client, cashier_headers):
        for payload in ({"role": "admin"}, {"email": "not-an-email"}, {}):
            resp = client.put("/users/5", json=payload, headers=cashier_headers)
            assert resp.status_code == 403
            assert resp.json()["message"].startswith("Role not permitted")


# =============================================================================
# ROUTE-GROUP POLICY
# =============================================================================


ADMIN_ONLY = ["/categories", "/products", "/users"]
CASHIER_OR_ADMIN = ["/orders", "/transactions", "/stocks"]


class TestRouteGroupPolicy:

    @pytest.mark.parametrize("path", ADMIN_ONLY)
    def test_cashier_denied_admin_resources(self, client, cashier_headers, path):
        assert client.get(path, headers=cashier_headers).status_code == 403

    @pytest.mark.parametrize("path", ADMIN_ONLY + CASHIER_OR_ADMIN)
    def test_admin_allowed_everywhere(self, client, admin_headers, path):
        assert client.get(path, headers=admin_headers).status_code == 200

    @pytest.mark.parametrize("path", CASHIER_OR_ADMIN)
    def test_cashier_allowed_shop_floor_resources(self, client, cashier_headers, path):
        assert client.get(path, headers=cashier_headers).status_code == 200

    @pytest.mark.parametrize("path", ADMIN_ONLY + CASHIER_OR_ADMIN)
    def test_customer_denied(self, client, token_service, make_user, path):
        customer = make_user(Role.CUSTOMER)
        headers = bearer(token_service.issue_access_token(customer.id, customer.email, customer.role))
        assert client.get(path, headers=headers).status_code == 403


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"status": "error", "message": "Endpoint not found"}
