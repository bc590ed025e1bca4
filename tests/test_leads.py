# tests/test_leads.py

"""
Tests for lead endpoints: read scope and ownership checks.
"""

from unittest.mock import patch, Mock

from fastapi.testclient import TestClient


def lead(owner_id: str, lead_id: str = "lead-1") -> dict:
    return {"id": lead_id, "name": "Acme", "status": "New", "owner_id": owner_id}


def test_sales_rep_lists_only_own_leads(client: TestClient, sales_rep_user, auth_headers, mock_supabase_client):
    mock_supabase_client.query.execute.return_value = Mock(data=[lead("rep-id")])

    with patch("routers.leads.get_supabase_client", return_value=mock_supabase_client):
        response = client.get("/leads", headers=auth_headers(sales_rep_user))

    assert response.status_code == 200
    mock_supabase_client.query.eq.assert_called_with("owner_id", "rep-id")


def test_manager_lists_all_leads(client: TestClient, manager_user, auth_headers, mock_supabase_client):
    with patch("routers.leads.get_supabase_client", return_value=mock_supabase_client):
        response = client.get("/leads", headers=auth_headers(manager_user))

    assert response.status_code == 200
    mock_supabase_client.query.eq.assert_not_called()


def test_owner_can_read_lead(client: TestClient, sales_rep_user, auth_headers, mock_supabase_client):
    mock_supabase_client.query.execute.return_value = Mock(data=[lead("rep-id")])

    with patch("routers.leads.get_supabase_client", return_value=mock_supabase_client):
        response = client.get("/leads/lead-1", headers=auth_headers(sales_rep_user))

    assert response.status_code == 200
    assert response.json()["data"]["id"] == "lead-1"


def test_sales_rep_cannot_read_others_lead(client: TestClient, sales_rep_user, auth_headers, mock_supabase_client):
    mock_supabase_client.query.execute.return_value = Mock(data=[lead("someone-else")])

    with patch("routers.leads.get_supabase_client", return_value=mock_supabase_client):
        response = client.get("/leads/lead-1", headers=auth_headers(sales_rep_user))

    assert response.status_code == 403
    assert response.json()["detail"]["error"]["message"] == "You can only access your own resources"


def test_manager_and_admin_read_any_lead(client: TestClient, manager_user, admin_user, auth_headers, mock_supabase_client):
    mock_supabase_client.query.execute.return_value = Mock(data=[lead("someone-else")])

    with patch("routers.leads.get_supabase_client", return_value=mock_supabase_client):
        for user in (manager_user, admin_user):
            response = client.get("/leads/lead-1", headers=auth_headers(user))
            assert response.status_code == 200


def test_update_own_lead(client: TestClient, sales_rep_user, auth_headers, mock_supabase_client):
    mock_supabase_client.query.execute.return_value = Mock(data=[lead("rep-id")])

    with patch("routers.leads.get_supabase_client", return_value=mock_supabase_client):
        response = client.patch(
            "/leads/lead-1",
            json={"status": "Qualified"},
            headers=auth_headers(sales_rep_user),
        )

    assert response.status_code == 200
    mock_supabase_client.query.update.assert_called_with({"status": "Qualified"})


def test_update_others_lead_forbidden(client: TestClient, sales_rep_user, auth_headers, mock_supabase_client):
    mock_supabase_client.query.execute.return_value = Mock(data=[lead("someone-else")])

    with patch("routers.leads.get_supabase_client", return_value=mock_supabase_client):
        response = client.patch(
            "/leads/lead-1",
            json={"status": "Lost"},
            headers=auth_headers(sales_rep_user),
        )

    assert response.status_code == 403
    mock_supabase_client.query.update.assert_not_called()


def test_reassign_requires_assign_permission(client: TestClient, sales_rep_user, auth_headers, mock_supabase_client):
    mock_supabase_client.query.execute.return_value = Mock(data=[lead("rep-id")])

    with patch("routers.leads.get_supabase_client", return_value=mock_supabase_client):
        response = client.patch(
            "/leads/lead-1",
            json={"owner_id": "someone-else"},
            headers=auth_headers(sales_rep_user),
        )

    assert response.status_code == 403
    assert response.json()["detail"]["error"]["required"] == ["lead:assign"]


def test_viewer_cannot_update(client: TestClient, viewer_user, auth_headers):
    response = client.patch("/leads/lead-1", json={"status": "Lost"}, headers=auth_headers(viewer_user))

    assert response.status_code == 403
    assert response.json()["detail"]["error"]["required"] == ["lead:update", "lead:update:all"]


def test_create_lead_sets_owner(client: TestClient, sales_rep_user, auth_headers, mock_supabase_client):
    with patch("routers.leads.get_supabase_client", return_value=mock_supabase_client):
        response = client.post(
            "/leads",
            json={"name": "Initech", "owner_id": "someone-else"},
            headers=auth_headers(sales_rep_user),
        )

    assert response.status_code == 201
    inserted = mock_supabase_client.query.insert.call_args[0][0]
    assert inserted["owner_id"] == "rep-id"


def test_only_admin_deletes(client: TestClient, manager_user, admin_user, auth_headers, mock_supabase_client):
    mock_supabase_client.query.execute.return_value = Mock(data=[lead("someone-else")])

    with patch("routers.leads.get_supabase_client", return_value=mock_supabase_client):
        denied = client.delete("/leads/lead-1", headers=auth_headers(manager_user))
        allowed = client.delete("/leads/lead-1", headers=auth_headers(admin_user))

    assert denied.status_code == 403
    assert allowed.status_code == 200
    assert allowed.json()["deleted"] == "lead-1"
