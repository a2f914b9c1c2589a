"""
Shared fixtures: an in-memory Supabase double injected into the app through
dependency overrides, and a factory for authenticated users with a role.
"""

import os
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("ENVIRONMENT", "test")

from fastapi.testclient import TestClient  # noqa: E402

from app.core.dependencies import get_user_supabase  # noqa: E402
from app.core.session import SessionContext  # noqa: E402
from app.database.supabase_client import get_auth_supabase, get_supabase, get_service_supabase  # noqa: E402
from app.main import app  # noqa: E402
from app.modules.auth.service import clear_auth_cache  # noqa: E402
from app.modules.profiles.provisioning import ProvisioningService  # noqa: E402
from app.config.permissions_config import AppRole  # noqa: E402
from tests.fakes import FakeSupabase  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")


@pytest.fixture(autouse=True)
def _reset_auth_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def client(fake_db):
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_service_supabase] = lambda: fake_db
    app.dependency_overrides[get_auth_supabase] = lambda: fake_db
    app.dependency_overrides[get_user_supabase] = lambda: fake_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(fake_db):
    """
    Create an auth user, provision their rows and set their role.
    Returns a namespace with id, token, headers and a SessionContext.
    """
    def _make(role: AppRole = AppRole.VISUALIZADOR, email: str = None, full_name: str = None):
        email = email or f"{role.value}-{len(fake_db.auth.users)}@example.com"
        full_name = full_name or f"{role.value.title()} User"
        user, token = fake_db.auth.create_user(email, full_name=full_name)
        ProvisioningService(fake_db).provision(user.id, email, full_name)
        if role != AppRole.VISUALIZADOR:
            for row in fake_db.rows("user_roles"):
                if row["user_id"] == user.id:
                    row["role"] = role.value
        fake_db.calls.clear()

        return SimpleNamespace(
            id=user.id,
            email=email,
            full_name=full_name,
            token=token,
            headers={"Authorization": f"Bearer {token}"},
            session=SessionContext(user_id=user.id, email=email, role=role),
        )
    return _make
