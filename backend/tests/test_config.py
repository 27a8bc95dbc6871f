"""
Tests for settings loading
"""
import os
from unittest.mock import patch

import pytest

from privacy_consent.core.config import Settings, get_settings


def test_config_defaults():
    """Test default protocol settings"""
    with patch.dict(os.environ, {}, clear=False):
        get_settings.cache_clear()
        settings = get_settings()

        assert settings.consent_header_name == "Privacy-Consent"
        assert settings.ack_header_name == "Privacy-Consent-Ack"
        assert settings.reason_soft_limit == 280
        assert settings.always_acknowledge is True
        assert settings.vocabulary_file is None


def test_config_custom_values():
    """Test environment overrides"""
    with patch.dict(os.environ, {
        "PRIVACY_CONSENT_HEADER_NAME": " X-Consent ",
        "PRIVACY_ACK_HEADER_NAME": "X-Consent-Ack",
        "PRIVACY_REASON_SOFT_LIMIT": "140",
        "PRIVACY_ALWAYS_ACKNOWLEDGE": "false",
        "PRIVACY_ALLOWED_ORIGINS": "http://a.test, http://b.test,",
    }):
        get_settings.cache_clear()
        settings = get_settings()

        assert settings.consent_header_name == "X-Consent"
        assert settings.ack_header_name == "X-Consent-Ack"
        assert settings.reason_soft_limit == 140
        assert settings.always_acknowledge is False
        assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]


@pytest.mark.parametrize("env", [
    {"PRIVACY_REASON_SOFT_LIMIT": "0"},
    {"PRIVACY_LOG_FILE_RETENTION": "0"},
    {"PRIVACY_CONSENT_HEADER_NAME": "   "},
])
def test_config_validation(env):
    """Invalid values are rejected when settings are built"""
    with patch.dict(os.environ, env):
        with pytest.raises(Exception):
            Settings()
