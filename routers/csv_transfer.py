# routers/csv_transfer.py

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import Response
from pydantic import ValidationError

from dependencies.auth import CurrentUser
from core.config import settings
from core.csv_codec import (
    decode_rows,
    generate_csv_filename,
    leads_to_csv,
    contacts_to_csv,
    opportunities_to_csv,
)
from core.errors import handle_supabase_error
from core.import_validator import validate_lead_rows
from core.logging_config import logger
from core.permission_helpers import requires_permission, has_permission
from core.supabase_client import get_supabase_client
from models.enums import Permission
from models.imports import CSVImportRequest, CSVImportResult, ValidationResult
from models.lead import LeadCreate


router = APIRouter(
    tags=["CSV Import / Export"],
)


def _store():
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")
    return client


def _csv_response(csv_text: str, prefix: str) -> Response:
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{generate_csv_filename(prefix)}"'
        },
    )


def _fetch_all(table: str) -> list:
    try:
        result = (
            _store().table(table)
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return result.data or []
    except HTTPException:
        raise
    except Exception as e:
        raise handle_supabase_error(e, f"Failed to export {table}")


# ============================================================
# EXPORT
# ============================================================
@router.get(
    "/export/leads/csv",
    summary="Export leads as CSV",
    dependencies=[Depends(requires_permission(Permission.report_export))],
)
def export_leads_csv():
    return _csv_response(leads_to_csv(_fetch_all("leads")), "leads")


@router.get(
    "/export/contacts/csv",
    summary="Export contacts as CSV",
    dependencies=[Depends(requires_permission(Permission.report_export))],
)
def export_contacts_csv():
    return _csv_response(contacts_to_csv(_fetch_all("contacts")), "contacts")


@router.get(
    "/export/opportunities/csv",
    summary="Export opportunities as CSV",
    dependencies=[Depends(requires_permission(Permission.report_export))],
)
def export_opportunities_csv():
    return _csv_response(opportunities_to_csv(_fetch_all("opportunities")), "opportunities")


# ============================================================
# IMPORT
# ============================================================

def _decode_or_400(payload: CSVImportRequest) -> list:
    if not payload.csv_data or not payload.csv_data.strip():
        raise HTTPException(400, "CSV data is required")

    rows = decode_rows(payload.csv_data)
    if len(rows) > settings.IMPORT_MAX_ROWS:
        raise HTTPException(
            400,
            f"CSV has {len(rows)} rows; at most {settings.IMPORT_MAX_ROWS} can be imported at once",
        )
    return rows


def row_to_lead(row: dict, current_user: CurrentUser) -> LeadCreate:
    """
    Map one decoded CSV row onto a new lead.
    owner_id from the file is honored only for users who may assign leads.
    """
    owner_id = current_user.id
    if row.get("owner_id") and has_permission(current_user.role, Permission.lead_assign):
        owner_id = row["owner_id"]

    return LeadCreate(
        name=row.get("name"),
        company=row.get("company"),
        email=row.get("email"),
        phone=row.get("phone"),
        status=row.get("status") or "New",
        source=row.get("source"),
        rating=row.get("rating"),
        value=row.get("value"),
        description=row.get("description"),
        owner_id=owner_id,
    )


@router.post(
    "/import/leads/validate",
    summary="Dry-run a lead CSV import",
    response_model=ValidationResult,
)
def validate_leads_csv(
    payload: CSVImportRequest,
    current_user: CurrentUser = Depends(requires_permission(Permission.lead_create)),
):
    return validate_lead_rows(_decode_or_400(payload))


@router.post(
    "/import/leads/csv",
    summary="Import leads from CSV",
    response_model=CSVImportResult,
)
def import_leads_csv(
    payload: CSVImportRequest,
    current_user: CurrentUser = Depends(requires_permission(Permission.lead_create)),
):
    rows = _decode_or_400(payload)

    validation = validate_lead_rows(rows)
    if not validation.valid:
        raise HTTPException(
            400,
            detail={"message": "CSV validation failed", "errors": validation.errors},
        )

    client = _store()
    created = 0
    error_details = []

    for index, row in enumerate(rows, start=1):
        try:
            lead = row_to_lead(row, current_user)
            client.table("leads").insert(lead.model_dump(mode="json", exclude_none=True)).execute()
            created += 1
        except ValidationError as e:
            error_details.append({"row": index, "data": row, "error": str(e)})
        except Exception as e:
            logger.error(f"Lead import row {index} failed: {e}")
            error_details.append({"row": index, "data": row, "error": str(e)})

    logger.info(f"User {current_user.id} imported {created}/{len(rows)} leads")

    return CSVImportResult(
        message=f"Imported {created} leads",
        created=created,
        errors=len(error_details),
        error_details=error_details,
    )
