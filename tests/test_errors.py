"""
Backend error translation into categories and generic messages.
"""

import httpx
import pytest

from app.core.errors import AppError, ErrorCategory, MESSAGES, backend_error, classify
from tests.fakes import api_error

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "error, category",
    [
        (api_error("42501", "permission denied for table contracts"), ErrorCategory.FORBIDDEN),
        (api_error("XX000", 'new row violates row-level security policy for table "contracts"'),
         ErrorCategory.FORBIDDEN),
        (api_error("23505", "duplicate key value"), ErrorCategory.CONFLICT),
        (api_error("23503", "violates foreign key constraint"), ErrorCategory.VALIDATION),
        (api_error("23514", "violates check constraint"), ErrorCategory.VALIDATION),
        (api_error("22P02", "invalid input syntax for type uuid"), ErrorCategory.VALIDATION),
        (api_error("PGRST116", "no rows"), ErrorCategory.NOT_FOUND),
        (api_error("PGRST100", "failed to parse logic tree"), ErrorCategory.VALIDATION),
        (httpx.ConnectError("connection refused"), ErrorCategory.TRANSIENT),
        (httpx.ReadTimeout("timed out"), ErrorCategory.TRANSIENT),
        (RuntimeError("boom"), ErrorCategory.INTERNAL),
    ],
)
def test_classify(error, category):
    assert classify(error) == category


def test_backend_error_hides_raw_message():
    error = backend_error(api_error("23505", 'duplicate key value violates "contracts_contract_number_key"'),
                          "creating contracts")
    assert error.status_code == 409
    assert error.detail == MESSAGES[ErrorCategory.CONFLICT]
    assert "contract_number" not in error.detail


def test_backend_error_passes_app_errors_through():
    original = AppError(ErrorCategory.NOT_FOUND, "Contrato não encontrado.")
    assert backend_error(original, "loading") is original


def test_transient_failure_over_http(client, make_user, fake_db):
    viewer = make_user()
    fake_db.fail("suppliers", "select", httpx.ConnectError("connection refused"))

    response = client.get("/api/v1/suppliers", headers=viewer.headers)

    assert response.status_code == 503
    assert response.json()["category"] == "transient"


def test_security_headers_and_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"


def test_readiness_reflects_backend(client, fake_db):
    assert client.get("/ready").json() == {"status": "ready"}
    fake_db.fail("user_roles", "select", httpx.ConnectError("down"))
    assert client.get("/ready").status_code == 503
