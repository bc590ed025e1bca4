# tests/test_config.py

"""
Tests for startup configuration validation.
"""

import pytest
from unittest.mock import patch

from core.config import settings
from core.config_validator import validate_config_on_startup, validate_required_config


def test_reports_missing_store_settings():
    with patch.object(settings, "SUPABASE_URL", None):
        assert "SUPABASE_URL" in validate_required_config()


def test_missing_config_only_warns_in_development():
    with patch.object(settings, "ENV", "development"), patch.object(settings, "SUPABASE_URL", None):
        validate_config_on_startup()


def test_missing_config_fails_outside_development():
    with patch.object(settings, "ENV", "production"), patch.object(settings, "SUPABASE_URL", None):
        with pytest.raises(RuntimeError, match="SUPABASE_URL"):
            validate_config_on_startup()
