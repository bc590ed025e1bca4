# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock
from typing import Generator

from main import create_app
from core.audit import InMemoryAuditSink
from dependencies.auth import CurrentUser, create_access_token
from models.enums import Role


@pytest.fixture
def audit_sink() -> InMemoryAuditSink:
    """In-memory collector standing in for the audit destinations."""
    return InMemoryAuditSink()


@pytest.fixture(scope="function")
def app(audit_sink):
    """Create a test FastAPI application instance."""
    return create_app(audit_sinks=[audit_sink])


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


def make_user(role: Role, user_id: str) -> CurrentUser:
    return CurrentUser(
        id=user_id,
        username=user_id.replace("-id", ""),
        email=f"{user_id}@example.com",
        role=role,
    )


@pytest.fixture
def admin_user():
    return make_user(Role.admin, "admin-id")


@pytest.fixture
def manager_user():
    return make_user(Role.manager, "manager-id")


@pytest.fixture
def sales_rep_user():
    return make_user(Role.sales_rep, "rep-id")


@pytest.fixture
def viewer_user():
    return make_user(Role.viewer, "viewer-id")


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a user."""
    def _headers(user: CurrentUser) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return _headers


@pytest.fixture
def mock_supabase_client():
    """
    Mock Supabase client whose query builder chains back to itself.
    Set `mock_supabase_client.query.execute.return_value` to shape results.
    """
    mock_client = Mock()
    mock_query = Mock()
    for method in ("select", "eq", "order", "limit", "insert", "update", "delete"):
        getattr(mock_query, method).return_value = mock_query
    mock_query.execute.return_value = Mock(data=[])
    mock_client.table.return_value = mock_query
    mock_client.query = mock_query
    return mock_client
