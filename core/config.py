# core/config.py

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Pipeline CRM API"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # -------------------------------------------------
    # Supabase (record store)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None)
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None)

    # -------------------------------------------------
    # Bearer tokens (issued by the login service)
    # -------------------------------------------------
    JWT_SECRET_KEY: str = Field("dev-secret-change-me")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 12

    # -------------------------------------------------
    # Audit trail
    # -------------------------------------------------
    AUDIT_ENABLED: bool = True
    AUDIT_TO_SUPABASE: bool = Field(False, description="Also insert audit entries into the audit_logs table")
    AUDIT_BUFFER_SIZE: int = Field(1000, description="Entries kept in memory for GET /audit")
    AUDIT_EXEMPT_PATHS: List[str] = ["/health", "/docs", "/openapi.json"]

    # -------------------------------------------------
    # CSV import
    # -------------------------------------------------
    IMPORT_MAX_ROWS: int = Field(5000, description="Maximum data rows accepted by one CSV import")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()
