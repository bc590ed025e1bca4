from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .enums import LeadStatus


# -------------------------------------------------
# Shared Fields (Supabase-safe)
# -------------------------------------------------
class LeadBase(BaseModel):
    name: str = Field(..., min_length=1)
    company: Optional[str] = None

    # Shape-checked by the CSV import validator, not here
    email: Optional[str] = None
    phone: Optional[str] = None

    status: LeadStatus = LeadStatus.new
    source: Optional[str] = None
    rating: Optional[str] = None
    value: Optional[float] = None
    description: Optional[str] = None


# -------------------------------------------------
# Create
# -------------------------------------------------
class LeadCreate(LeadBase):
    owner_id: Optional[str] = None

    @field_validator("company", "email", "phone", "source", "rating", "description", mode="before")
    def blank_to_none(cls, v):
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @field_validator("value", mode="before")
    def parse_value(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return float(v) if v else None
        return v


# -------------------------------------------------
# Update (partial)
# -------------------------------------------------
class LeadUpdate(BaseModel):
    name: Optional[str] = None
    company: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[LeadStatus] = None
    source: Optional[str] = None
    rating: Optional[str] = None
    value: Optional[float] = None
    description: Optional[str] = None
    owner_id: Optional[str] = None
