import pytest
import os
from unittest.mock import patch
from pydantic import ValidationError
from codel_sms.core.config import Settings


def test_settings_defaults():
    """Test default settings."""
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.app_name == "Codel SMS Client"
    assert settings.api_token is None
    assert settings.default_sender_id is None
    assert settings.base_url == "https://2wcapi.codel.tech"
    assert settings.default_country_code == "263"
    assert settings.default_validity == "03:00"
    assert settings.metrics_enabled
    assert not settings.tracing_enabled
    assert settings.log_level == "INFO"


def test_settings_override():
    """Test environment variable overrides."""
    env = {
        "CODEL_SMS_API_TOKEN": "secret",
        "CODEL_SMS_DEFAULT_SENDER_ID": "brand",
        "CODEL_SMS_REQUEST_TIMEOUT": "5",
        "CODEL_SMS_METRICS_ENABLED": "false",
    }
    with patch.dict(os.environ, env):
        settings = Settings(_env_file=None)

    assert settings.api_token == "secret"
    assert settings.default_sender_id == "brand"
    assert settings.request_timeout == 5.0
    assert not settings.metrics_enabled


def test_unprefixed_variables_are_ignored():
    with patch.dict(os.environ, {"API_TOKEN": "not-ours"}, clear=True):
        assert Settings(_env_file=None).api_token is None


def test_url_for():
    settings = Settings(_env_file=None, base_url="https://gateway.test/")

    assert settings.base_url == "https://gateway.test"
    assert settings.url_for("/2wc/balance/v1/api") == "https://gateway.test/2wc/balance/v1/api"
    assert settings.url_for(settings.bulk_sms_endpoint) == "https://gateway.test/2wc/bulk-sms/v1/api"


def test_log_level_is_normalized():
    assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"


@pytest.mark.parametrize("field, value", [
    ("log_level", "chatty"),
    ("default_validity", "3h"),
    ("request_timeout", 0),
])
def test_invalid_values_are_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})
