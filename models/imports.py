# models/imports.py

from typing import List
from pydantic import BaseModel, ConfigDict, Field


class ValidationResult(BaseModel):
    """Outcome of screening decoded CSV rows before import."""
    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: List[str] = Field(default_factory=list)


class CSVImportRequest(BaseModel):
    """Body of POST /import/leads/csv."""
    csv_data: str = ""


class CSVImportResult(BaseModel):
    message: str
    created: int
    errors: int
    error_details: List[dict] = Field(default_factory=list)
