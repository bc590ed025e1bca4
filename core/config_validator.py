# core/config_validator.py

from typing import List
from core.config import settings
from core.logging_config import logger


DEFAULT_JWT_SECRET = "dev-secret-change-me"


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")
    if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
        missing.append("JWT_SECRET_KEY")

    return missing


def validate_optional_config() -> List[str]:
    """
    Validate optional but recommended configuration.
    Returns list of warnings.
    """
    warnings = []

    if not settings.AUDIT_ENABLED:
        warnings.append("AUDIT_ENABLED is off (no audit trail will be recorded)")
    if settings.AUDIT_TO_SUPABASE and not settings.SUPABASE_URL:
        warnings.append("AUDIT_TO_SUPABASE is on but SUPABASE_URL is not set")

    return warnings


def validate_config_on_startup():
    """
    Validate configuration on application startup.
    Raises RuntimeError if critical config is missing outside development.
    Logs warnings for optional config.
    """
    missing_required = validate_required_config()
    missing_optional = validate_optional_config()

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        if settings.ENV == "development":
            logger.warning(error_msg)
        else:
            logger.error(error_msg)
            raise RuntimeError(error_msg)

    for warning in missing_optional:
        logger.warning(f"Optional configuration missing: {warning}")

    logger.info("Configuration validation passed")
