# models/audit.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class AuditEntry(BaseModel):
    """
    One completed, authenticated request.

    Frozen once built: the audit trail is append-only and nothing in
    this service updates or deletes an entry.
    """
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    user_id: str
    username: str
    role: str
    method: str
    path: str
    status: int
    ip: Optional[str] = None

    def to_log_dict(self) -> dict:
        data = self.model_dump()
        data["timestamp"] = self.timestamp.isoformat()
        return data
