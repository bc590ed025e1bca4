# core/errors.py

from typing import List, Optional
from fastapi import HTTPException

from core.logging_config import logger


def access_denied_detail(
    message: str,
    status_code: int,
    required: Optional[List[str]] = None,
    user_role: Optional[str] = None,
) -> dict:
    """
    Body placed in HTTPException.detail for 401/403 responses.
    `required` and `user_role` are only present for forbidden decisions.
    """
    error = {"message": message, "status": status_code}
    if required is not None:
        error["required"] = list(required)
    if user_role is not None:
        error["user_role"] = user_role
    return {"error": error}


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors (carry .message)
      • errors with args
      • Generic Python exceptions
    """
    message = getattr(error, "message", None)
    if message:
        return str(message)

    if error.args:
        return str(error.args[0])

    return str(error) or "Unknown Supabase error"


def handle_supabase_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Handle Supabase errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The exception that occurred
        operation: Description of what operation failed (e.g., "Failed to import leads")
        status_code: HTTP status code (default 500)
    """
    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Record already exists")
    elif "foreign key" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid reference")
    elif "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    else:
        return HTTPException(status_code=status_code, detail=f"{operation} failed")
