# core/audit.py

"""
Audit trail for authenticated requests.

AuditRecorder turns a finished request into an AuditEntry and hands it
to every configured sink. Recording is best effort: a failing sink is
logged and skipped, and never changes the response the caller got.

Sinks:
    • LoggerAuditSink    - one "[AUDIT] {...}" line on the crm.audit logger
    • InMemoryAuditSink  - bounded buffer, backs GET /audit and tests
    • SupabaseAuditSink  - row in the audit_logs table
"""

import json
from collections import deque
from datetime import datetime, timezone
from threading import Lock
from typing import Iterable, List, Optional, Protocol

from fastapi import Request

from core.logging_config import logger, audit_logger
from models.audit import AuditEntry


class AuditSink(Protocol):
    def write(self, entry: AuditEntry) -> None:
        ...


# ============================================================
# Sinks
# ============================================================

class LoggerAuditSink:
    """Writes entries to the crm.audit logger as JSON."""

    def __init__(self, log=None):
        self._log = log or audit_logger

    def write(self, entry: AuditEntry) -> None:
        self._log.info("[AUDIT] %s", json.dumps(entry.to_log_dict()))


class InMemoryAuditSink:
    """
    Keeps the most recent entries in memory.

    Thread-safe for concurrent access. Oldest entries fall off
    once max_entries is reached.
    """

    def __init__(self, max_entries: int = 1000):
        self._entries: deque = deque(maxlen=max_entries)
        self._lock = Lock()

    def write(self, entry: AuditEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def entries(self, limit: Optional[int] = None) -> List[AuditEntry]:
        """
        Snapshot of stored entries, oldest first.

        Args:
            limit: Only return the newest `limit` entries
        """
        with self._lock:
            items = list(self._entries)
        if limit is not None:
            items = items[-limit:] if limit > 0 else []
        return items

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SupabaseAuditSink:
    """Inserts entries into the audit_logs table using one shared client."""

    TABLE = "audit_logs"

    def __init__(self, client_factory=None):
        if client_factory is None:
            from core.supabase_client import get_supabase_client
            client_factory = get_supabase_client
        self._client_factory = client_factory
        self._client = None
        self._lock = Lock()

    def _get_client(self):
        with self._lock:
            if self._client is None:
                self._client = self._client_factory()
            return self._client

    def write(self, entry: AuditEntry) -> None:
        client = self._get_client()
        if client is None:
            raise RuntimeError("Supabase client not configured")
        client.table(self.TABLE).insert(entry.to_log_dict()).execute()


# ============================================================
# Recorder
# ============================================================

class AuditRecorder:
    def __init__(self, sinks: Iterable[AuditSink]):
        self._sinks = list(sinks)

    @property
    def sinks(self) -> List[AuditSink]:
        return list(self._sinks)

    def build_entry(self, user, method: str, path: str, status: int, ip: Optional[str]) -> AuditEntry:
        return AuditEntry(
            timestamp=datetime.now(timezone.utc),
            user_id=user.id,
            username=user.username,
            role=str(user.role),
            method=method,
            path=path,
            status=status,
            ip=ip,
        )

    def record(self, user, method: str, path: str, status: int, ip: Optional[str] = None) -> Optional[AuditEntry]:
        """
        Build and dispatch one entry. Returns the entry, or None if it
        could not even be built. Never raises.
        """
        try:
            entry = self.build_entry(user, method, path, status, ip)
        except Exception as e:
            logger.error(f"Failed to build audit entry for {method} {path}: {e}")
            return None

        for sink in self._sinks:
            try:
                sink.write(entry)
            except Exception as e:
                logger.error(f"Failed to write audit entry to {type(sink).__name__}: {e}")

        return entry


# ============================================================
# Request helpers
# ============================================================

def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


def build_default_sinks(settings) -> List[AuditSink]:
    sinks: List[AuditSink] = [
        LoggerAuditSink(),
        InMemoryAuditSink(settings.AUDIT_BUFFER_SIZE),
    ]
    if settings.AUDIT_TO_SUPABASE:
        sinks.append(SupabaseAuditSink())
    return sinks
