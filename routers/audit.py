# routers/audit.py

from fastapi import APIRouter, Depends, Query, Request

from core.permission_helpers import requires_permission
from models.enums import Permission


router = APIRouter(
    prefix="/audit",
    tags=["Audit"],
)


# -----------------------------------------------------
# GET /audit
# Newest entries first, from the in-memory audit buffer
# -----------------------------------------------------
@router.get(
    "",
    summary="Recent audit entries",
    dependencies=[Depends(requires_permission(Permission.audit_view))],
)
def list_audit_entries(
    request: Request,
    limit: int = Query(100, ge=1, le=1000),
):
    buffer = getattr(request.app.state, "audit_buffer", None)
    if buffer is None:
        return {"success": True, "data": []}

    entries = buffer.entries(limit=limit)
    return {
        "success": True,
        "data": [entry.to_log_dict() for entry in reversed(entries)],
    }
