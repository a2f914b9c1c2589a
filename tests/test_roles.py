"""
Role resolution, capability endpoint and single-role replacement.
"""

import pytest

from app.config.permissions_config import AppRole
from app.modules.roles.service import RoleService, get_capabilities

pytestmark = pytest.mark.unit


def test_missing_role_row_resolves_to_viewer(fake_db):
    assert RoleService(fake_db).resolve_role("nobody") == AppRole.VISUALIZADOR


def test_stored_role_is_returned(fake_db):
    fake_db.seed("user_roles", user_id="u1", role="gestor")
    assert RoleService(fake_db).resolve_role("u1") == AppRole.GESTOR


def test_lookup_failure_resolves_to_none(fake_db):
    fake_db.fail("user_roles", "select")
    service = RoleService(fake_db)
    role = service.resolve_role("u1")
    assert role is None
    capabilities = get_capabilities(role)
    assert capabilities.can_edit is False
    assert capabilities.is_admin is False


def test_unrecognised_role_value_resolves_to_none(fake_db):
    fake_db.seed("user_roles", user_id="u1", role="superuser")
    assert RoleService(fake_db).resolve_role("u1") is None


def test_has_role_uses_backend_function(fake_db):
    fake_db.seed("user_roles", user_id="u1", role="admin")
    service = RoleService(fake_db)
    assert service.has_role("u1", AppRole.ADMIN) is True
    assert service.has_role("u1", AppRole.GESTOR) is False
    assert ("rpc", "has_role") in fake_db.calls


def test_set_role_keeps_a_single_row(fake_db):
    fake_db.seed("user_roles", user_id="u1", role="visualizador")
    service = RoleService(fake_db)

    previous, row = service.set_role("u1", AppRole.GESTOR)

    assert previous == AppRole.VISUALIZADOR
    assert row.role == AppRole.GESTOR
    rows = [r for r in fake_db.rows("user_roles") if r["user_id"] == "u1"]
    assert len(rows) == 1
    assert service.resolve_role("u1") == AppRole.GESTOR


def test_set_role_for_user_without_row(fake_db):
    previous, row = RoleService(fake_db).set_role("u2", AppRole.ADMIN)
    assert previous is None
    assert row.user_id == "u2"


def test_capabilities_endpoint(client, make_user):
    gestor = make_user(AppRole.GESTOR)
    response = client.get("/api/v1/roles/me", headers=gestor.headers)
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "gestor"
    assert body["can_edit"] is True
    assert body["is_admin"] is False
    assert "contracts:insert" in body["permissions"]


def test_capabilities_fail_closed_when_resolution_fails(client, make_user, fake_db):
    admin = make_user(AppRole.ADMIN)
    fake_db.fail("user_roles", "select")
    response = client.get("/api/v1/roles/me", headers=admin.headers)
    assert response.status_code == 200
    assert response.json()["role"] is None
    assert response.json()["can_edit"] is False


def test_auth_me_reports_profile_and_capabilities(client, make_user):
    viewer = make_user(full_name="Ana Lima")
    response = client.get("/api/v1/auth/me", headers=viewer.headers)
    assert response.status_code == 200
    body = response.json()
    assert body["full_name"] == "Ana Lima"
    assert body["role"] == "visualizador"
    assert body["can_edit"] is False


def test_requests_without_valid_token_are_rejected(client):
    response = client.get("/api/v1/roles/me", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.json()["category"] == "unauthorized"


def test_permission_matrix_endpoint(client, make_user):
    viewer = make_user()
    response = client.get("/api/v1/roles/matrix", headers=viewer.headers)
    assert response.status_code == 200
    assert response.json()["tables"]["storage"]["delete"] == "admin"


def test_get_user_role_uses_backend_function(fake_db):
    fake_db.seed("user_roles", user_id="u1", role="admin")
    service = RoleService(fake_db)
    assert service.get_user_role("u1") == AppRole.ADMIN
    assert service.get_user_role("u2") == AppRole.VISUALIZADOR
    assert ("rpc", "get_user_role") in fake_db.calls
