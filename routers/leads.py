# routers/leads.py

from fastapi import APIRouter, HTTPException, Depends, Query

from dependencies.auth import CurrentUser
from core.errors import access_denied_detail, handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import (
    requires_permission,
    has_permission,
    can_modify_resource,
    require_resource_access,
)
from core.supabase_client import get_supabase_client
from models.enums import Permission
from models.lead import LeadCreate, LeadUpdate


router = APIRouter(
    prefix="/leads",
    tags=["Leads"],
)


def _store():
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")
    return client


def get_lead_or_404(client, lead_id: str) -> dict:
    try:
        result = (
            client.table("leads")
            .select("*")
            .eq("id", lead_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch lead")

    if not result.data:
        raise HTTPException(404, f"Lead {lead_id} not found")
    return result.data[0]


# ============================================================
# LIST LEADS (own, or all with lead:read:all)
# ============================================================
@router.get("", summary="List Leads")
def list_leads(
    limit: int = Query(100, ge=1, le=1000),
    current_user: CurrentUser = Depends(
        requires_permission(Permission.lead_read, Permission.lead_read_all)
    ),
):
    client = _store()

    try:
        query = client.table("leads").select("*")
        if not has_permission(current_user.role, Permission.lead_read_all):
            query = query.eq("owner_id", current_user.id)
        result = query.order("created_at", desc=True).limit(limit).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to list leads")

    return {"success": True, "data": result.data or []}


# ============================================================
# CREATE LEAD
# ============================================================
@router.post("", summary="Create Lead", status_code=201)
def create_lead(
    payload: LeadCreate,
    current_user: CurrentUser = Depends(requires_permission(Permission.lead_create)),
):
    data = payload.model_dump(mode="json", exclude_none=True)

    # Only users who can assign leads may create them for someone else
    if not data.get("owner_id") or not has_permission(current_user.role, Permission.lead_assign):
        data["owner_id"] = current_user.id

    try:
        result = _store().table("leads").insert(data).execute()
    except HTTPException:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create lead")

    return {"success": True, "data": (result.data or [data])[0]}


# ============================================================
# GET LEAD (owner, or Admin / Manager)
# ============================================================
@router.get("/{lead_id}", summary="Get Lead")
def get_lead(
    lead_id: str,
    current_user: CurrentUser = Depends(
        requires_permission(Permission.lead_read, Permission.lead_read_all)
    ),
):
    lead = get_lead_or_404(_store(), lead_id)
    require_resource_access(current_user, lead.get("owner_id"))
    return {"success": True, "data": lead}


# ============================================================
# UPDATE LEAD
# ============================================================
@router.patch("/{lead_id}", summary="Update Lead")
def update_lead(
    lead_id: str,
    payload: LeadUpdate,
    current_user: CurrentUser = Depends(
        requires_permission(Permission.lead_update, Permission.lead_update_all)
    ),
):
    client = _store()
    lead = get_lead_or_404(client, lead_id)

    if not can_modify_resource(
        current_user,
        lead.get("owner_id"),
        Permission.lead_update,
        Permission.lead_update_all,
    ):
        raise HTTPException(
            403,
            detail=access_denied_detail(
                "You can only modify your own resources",
                403,
                required=[str(Permission.lead_update), str(Permission.lead_update_all)],
                user_role=str(current_user.role),
            ),
        )

    updates = payload.model_dump(mode="json", exclude_none=True)

    if "owner_id" in updates and updates["owner_id"] != lead.get("owner_id"):
        if not has_permission(current_user.role, Permission.lead_assign):
            raise HTTPException(
                403,
                detail=access_denied_detail(
                    "Insufficient permissions",
                    403,
                    required=[str(Permission.lead_assign)],
                    user_role=str(current_user.role),
                ),
            )

    if not updates:
        return {"success": True, "data": lead}

    try:
        result = client.table("leads").update(updates).eq("id", lead_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update lead")

    return {"success": True, "data": (result.data or [{**lead, **updates}])[0]}


# ============================================================
# DELETE LEAD
# ============================================================
@router.delete("/{lead_id}", summary="Delete Lead")
def delete_lead(
    lead_id: str,
    current_user: CurrentUser = Depends(requires_permission(Permission.lead_delete)),
):
    client = _store()
    get_lead_or_404(client, lead_id)

    try:
        client.table("leads").delete().eq("id", lead_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete lead")

    logger.info(f"Lead {lead_id} deleted by {current_user.id}")
    return {"success": True, "deleted": lead_id}
