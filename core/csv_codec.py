# core/csv_codec.py

"""
CSV encode/decode for bulk import and export of CRM records.

The format is the one spreadsheet tools exchange:
    • comma-delimited, header line first
    • lines separated by LF on output (CRLF accepted on input)
    • a field is wrapped in double quotes, with inner quotes doubled,
      only when it contains a comma, a double quote or a line break

Decoding is lenient: it never raises. Input with no data line decodes
to an empty list, and any data line whose field count differs from the
header's is dropped without error so a partly broken file still
imports its good rows.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence


QUOTE = '"'
DELIMITER = ","
LINE_BREAK = "\n"

_NEEDS_QUOTING = (DELIMITER, QUOTE, "\n", "\r")


# ============================================================
# Export column sets (order is the CSV column order)
# ============================================================

LEAD_EXPORT_COLUMNS = [
    "name",
    "company",
    "email",
    "phone",
    "status",
    "source",
    "rating",
    "value",
    "description",
    "created_at",
]

CONTACT_EXPORT_COLUMNS = [
    "first_name",
    "last_name",
    "email",
    "phone",
    "mobile",
    "title",
    "department",
    "account_id",
    "created_at",
]

OPPORTUNITY_EXPORT_COLUMNS = [
    "name",
    "stage",
    "value",
    "probability",
    "expected_close_date",
    "source",
    "description",
    "account_id",
    "owner_id",
    "created_at",
]


# ============================================================
# ENCODE
# ============================================================

def format_field(value: Any) -> str:
    """
    Render one value as a CSV field.

    Args:
        value: None, a date/datetime, or any value with a str() form

    Returns:
        The field text, quoted if needed
    """
    if value is None:
        return ""

    if isinstance(value, (datetime, date)):
        text = value.isoformat()
    else:
        text = str(value)

    if any(ch in text for ch in _NEEDS_QUOTING):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE

    return text


def encode_rows(rows: Sequence[Mapping[str, Any]], columns: Optional[Sequence[str]] = None) -> str:
    """
    Convert rows to CSV text.

    Args:
        rows: Uniform-shape mappings of column name → value
        columns: Column order; defaults to the key order of the first row

    Returns:
        Header line plus one line per row, joined with LF.
        An empty row list gives an empty string (no header).
    """
    if not rows:
        return ""

    headers = list(columns) if columns is not None else list(rows[0].keys())

    lines = [DELIMITER.join(headers)]
    for row in rows:
        lines.append(DELIMITER.join(format_field(row.get(header)) for header in headers))

    return LINE_BREAK.join(lines)


# ============================================================
# DECODE
# ============================================================

def _scan_records(text: str, multiline: bool = True) -> List[List[str]]:
    """
    Split text into records of fields.

    A double quote toggles quoted mode, two double quotes inside quotes
    are one literal quote, and commas and line breaks only separate
    fields and records outside quotes. Fields are whitespace-stripped.

    If the text ends while still inside quotes, the unfinished record
    and everything after it are re-read one physical line at a time, so
    a stray quote only damages its own line. With multiline=False the
    text is treated as a single line.
    """
    records: List[List[str]] = []
    fields: List[str] = []
    current: List[str] = []
    inside_quotes = False
    record_start = 0

    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        next_ch = text[i + 1] if i + 1 < length else ""

        if ch == QUOTE:
            if inside_quotes and next_ch == QUOTE:
                current.append(QUOTE)
                i += 1
            else:
                inside_quotes = not inside_quotes
        elif inside_quotes:
            current.append(ch)
        elif ch == DELIMITER:
            fields.append("".join(current).strip())
            current = []
        elif multiline and ch == "\r" and next_ch == "\n":
            pass  # CRLF: the LF ends the record
        elif multiline and ch == "\n":
            fields.append("".join(current).strip())
            records.append(fields)
            fields = []
            current = []
            record_start = i + 1
        else:
            current.append(ch)

        i += 1

    if inside_quotes and multiline:
        # Unbalanced quote: fall back to one record per line
        for line in text[record_start:].split("\n"):
            records.extend(_scan_records(line.rstrip("\r"), multiline=False))
        return records

    fields.append("".join(current).strip())
    records.append(fields)
    return records


def decode_rows(text: str) -> List[Dict[str, str]]:
    """
    Parse CSV text into rows keyed by the header's column names.

    Args:
        text: Raw CSV, header first

    Returns:
        One dict per well-formed data line, values as strings.
        Returns [] when there is no header plus at least one data line.
    """
    records = _scan_records((text or "").strip())
    if len(records) < 2:
        return []

    headers = records[0]
    rows = []
    for values in records[1:]:
        # Ragged lines are dropped, not reported
        if len(values) != len(headers):
            continue
        rows.append(dict(zip(headers, values)))

    return rows


# ============================================================
# Helpers used by the export endpoints
# ============================================================

def generate_csv_filename(prefix: str) -> str:
    """e.g. leads-2025-01-31.csv"""
    return f"{prefix}-{datetime.now(timezone.utc).date().isoformat()}.csv"


def leads_to_csv(leads: Sequence[Mapping[str, Any]]) -> str:
    return encode_rows(leads, LEAD_EXPORT_COLUMNS)


def contacts_to_csv(contacts: Sequence[Mapping[str, Any]]) -> str:
    return encode_rows(contacts, CONTACT_EXPORT_COLUMNS)


def opportunities_to_csv(opportunities: Sequence[Mapping[str, Any]]) -> str:
    return encode_rows(opportunities, OPPORTUNITY_EXPORT_COLUMNS)
