# tests/test_audit.py

"""
Tests for the audit recorder, its sinks and the audit middleware.
"""

import asyncio
import json
import logging
import time
from unittest.mock import Mock, patch

import httpx
from fastapi.testclient import TestClient

from main import create_app
from core.audit import AuditRecorder, InMemoryAuditSink, LoggerAuditSink, SupabaseAuditSink


class BrokenSink:
    def write(self, entry):
        raise ConnectionError("audit store down")


class SlowSink(InMemoryAuditSink):
    def write(self, entry):
        time.sleep(0.5)
        super().write(entry)


# -----------------------------------------------------
# Recorder
# -----------------------------------------------------
def test_recorder_builds_entry(sales_rep_user):
    sink = InMemoryAuditSink()
    recorder = AuditRecorder([sink])

    entry = recorder.record(sales_rep_user, "POST", "/leads", 201, "10.0.0.1")

    assert sink.entries() == [entry]
    assert entry.user_id == "rep-id"
    assert entry.username == "rep"
    assert entry.role == "Sales Rep"
    assert entry.method == "POST"
    assert entry.path == "/leads"
    assert entry.status == 201
    assert entry.ip == "10.0.0.1"
    assert entry.to_log_dict()["timestamp"] == entry.timestamp.isoformat()


def test_recorder_survives_sink_failure(sales_rep_user):
    sink = InMemoryAuditSink()
    recorder = AuditRecorder([BrokenSink(), sink])

    entry = recorder.record(sales_rep_user, "GET", "/leads", 200)

    assert entry is not None
    assert len(sink) == 1


def test_in_memory_sink_is_bounded(sales_rep_user):
    sink = InMemoryAuditSink(max_entries=2)
    recorder = AuditRecorder([sink])
    for status in (200, 201, 204):
        recorder.record(sales_rep_user, "GET", "/leads", status)

    assert [e.status for e in sink.entries()] == [201, 204]
    assert [e.status for e in sink.entries(limit=1)] == [204]


def test_logger_sink_writes_json(sales_rep_user, caplog):
    log = logging.getLogger("crm.audit-test")
    recorder = AuditRecorder([LoggerAuditSink(log)])

    with caplog.at_level(logging.INFO, logger="crm.audit-test"):
        recorder.record(sales_rep_user, "DELETE", "/leads/1", 403, "127.0.0.1")

    message = caplog.records[-1].getMessage()
    assert message.startswith("[AUDIT] ")
    payload = json.loads(message[len("[AUDIT] "):])
    assert payload["status"] == 403
    assert payload["role"] == "Sales Rep"


def test_supabase_sink_inserts_row(sales_rep_user, mock_supabase_client):
    recorder = AuditRecorder([SupabaseAuditSink(lambda: mock_supabase_client)])
    recorder.record(sales_rep_user, "GET", "/leads", 200)

    mock_supabase_client.table.assert_called_with("audit_logs")
    inserted = mock_supabase_client.query.insert.call_args[0][0]
    assert inserted["user_id"] == "rep-id"


def test_supabase_sink_reuses_one_client(sales_rep_user, mock_supabase_client):
    factory = Mock(return_value=mock_supabase_client)
    recorder = AuditRecorder([SupabaseAuditSink(factory)])

    recorder.record(sales_rep_user, "GET", "/leads", 200)
    recorder.record(sales_rep_user, "GET", "/leads", 200)

    factory.assert_called_once()
    assert mock_supabase_client.query.insert.call_count == 2


# -----------------------------------------------------
# Middleware
# -----------------------------------------------------
def test_audit_records_success_status(client: TestClient, audit_sink, sales_rep_user, auth_headers):
    response = client.get("/auth/me", headers=auth_headers(sales_rep_user))

    assert response.status_code == 200
    entry = audit_sink.entries()[-1]
    assert entry.status == 200
    assert entry.path == "/auth/me"
    assert entry.method == "GET"
    assert entry.user_id == sales_rep_user.id


def test_audit_records_early_denial(client: TestClient, audit_sink, viewer_user, auth_headers):
    response = client.post(
        "/import/leads/csv",
        json={"csv_data": "name\nAnn"},
        headers=auth_headers(viewer_user),
    )

    assert response.status_code == 403
    assert audit_sink.entries()[-1].status == response.status_code


def test_audit_records_not_found(client: TestClient, audit_sink, manager_user, auth_headers, mock_supabase_client):
    with patch("routers.leads.get_supabase_client", return_value=mock_supabase_client):
        response = client.get("/leads/missing", headers=auth_headers(manager_user))

    assert response.status_code == 404
    assert audit_sink.entries()[-1].status == 404


def test_audit_uses_forwarded_ip(client: TestClient, audit_sink, sales_rep_user, auth_headers):
    headers = {**auth_headers(sales_rep_user), "X-Forwarded-For": "203.0.113.9, 10.0.0.1"}
    client.get("/auth/me", headers=headers)

    assert audit_sink.entries()[-1].ip == "203.0.113.9"


def test_unauthenticated_requests_are_not_audited(client: TestClient, audit_sink):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert len(audit_sink) == 0


def test_exempt_paths_are_not_audited(client: TestClient, audit_sink, sales_rep_user, auth_headers):
    client.get("/health/app", headers=auth_headers(sales_rep_user))
    assert len(audit_sink) == 0


def test_broken_sink_does_not_change_response(sales_rep_user, auth_headers):
    sink = InMemoryAuditSink()
    app = create_app(audit_sinks=[BrokenSink(), sink])

    with TestClient(app) as test_client:
        response = test_client.get("/auth/me", headers=auth_headers(sales_rep_user))

    assert response.status_code == 200
    assert sink.entries()[-1].status == 200


def test_unhandled_error_is_recorded_as_500(sales_rep_user, auth_headers):
    sink = InMemoryAuditSink()
    app = create_app(audit_sinks=[sink])

    with TestClient(app, raise_server_exceptions=False) as test_client:
        with patch("routers.leads.get_supabase_client", side_effect=RuntimeError("boom")):
            response = test_client.get("/leads", headers=auth_headers(sales_rep_user))

    assert response.status_code == 500
    assert sink.entries()[-1].status == 500


def test_slow_sink_does_not_serialize_requests(sales_rep_user, auth_headers):
    sink = SlowSink()
    app = create_app(audit_sinks=[sink])
    headers = auth_headers(sales_rep_user)

    async def fetch_all():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
            return await asyncio.gather(*[http.get("/auth/me", headers=headers) for _ in range(4)])

    started = time.monotonic()
    responses = asyncio.run(fetch_all())
    elapsed = time.monotonic() - started

    assert [r.status_code for r in responses] == [200] * 4
    assert len(sink) == 4
    # Four writes one after another would take two seconds
    assert elapsed < 1.5


# -----------------------------------------------------
# GET /audit
# -----------------------------------------------------
def test_audit_view_requires_permission(client: TestClient, manager_user, auth_headers):
    response = client.get("/audit", headers=auth_headers(manager_user))

    assert response.status_code == 403
    error = response.json()["detail"]["error"]
    assert error["required"] == ["audit:view"]
    assert error["user_role"] == "Manager"


def test_audit_view_lists_newest_first(client: TestClient, admin_user, sales_rep_user, auth_headers):
    client.get("/auth/me", headers=auth_headers(sales_rep_user))
    client.get("/auth/me/permissions", headers=auth_headers(sales_rep_user))

    response = client.get("/audit", headers=auth_headers(admin_user))

    assert response.status_code == 200
    paths = [entry["path"] for entry in response.json()["data"]]
    assert paths[:2] == ["/auth/me/permissions", "/auth/me"]
