# core/import_validator.py

"""
Screens decoded CSV rows before they are imported.

Problems are collected across every row and returned in a
ValidationResult; nothing here raises for bad row content. The
email and phone checks are shape checks only.
"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from models.enums import ImportEntity
from models.imports import ValidationResult


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PHONE_LENGTH = 10

LEAD_REQUIRED_FIELDS = ["name"]


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def _cell(row: Mapping[str, Any], field: str) -> Optional[str]:
    """Field value as text; None for absent, None or blank cells."""
    value = row.get(field)
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _lead_row_errors(row: Mapping[str, Any], row_number: int) -> List[str]:
    errors = []

    for field in LEAD_REQUIRED_FIELDS:
        if _cell(row, field) is None:
            errors.append(f"Row {row_number}: Missing required field '{field}'")

    email = _cell(row, "email")
    if email and not is_valid_email(email):
        errors.append(f"Row {row_number}: Invalid email format '{email}'")

    phone = _cell(row, "phone")
    if phone and len(phone) < MIN_PHONE_LENGTH:
        errors.append(f"Row {row_number}: Invalid phone number '{phone}'")

    return errors


_ROW_RULES: Dict[ImportEntity, Callable[[Mapping[str, Any], int], List[str]]] = {
    ImportEntity.lead: _lead_row_errors,
}


def validate_import(rows: Sequence[Mapping[str, Any]], entity: ImportEntity = ImportEntity.lead) -> ValidationResult:
    """
    Validate every row for the given record kind.

    Args:
        rows: Output of decode_rows
        entity: Kind of record being imported

    Returns:
        ValidationResult; errors reference 1-based row numbers
    """
    rule = _ROW_RULES[ImportEntity(entity)]

    errors: List[str] = []
    for index, row in enumerate(rows, start=1):
        errors.extend(rule(row, index))

    return ValidationResult(valid=not errors, errors=errors)


def validate_lead_rows(rows: Sequence[Mapping[str, Any]]) -> ValidationResult:
    return validate_import(rows, ImportEntity.lead)
