from __future__ import annotations

import pytest

from oxr.config import API_URL, DEFAULT_LOG_FORMAT, get_settings


def test_defaults_applied_when_only_app_id_set():
    settings = get_settings({"OXR_APP_ID": "abc"})

    assert settings.app_id == "abc"
    assert settings.api_base_url == API_URL
    assert settings.base_currency == "USD"
    assert settings.show_alternative is False
    assert settings.request_timeout_seconds == 5.0
    assert settings.log_level == "INFO"
    assert settings.log_json_enabled is False
    assert settings.log_format == DEFAULT_LOG_FORMAT


def test_values_read_from_environment():
    settings = get_settings(
        {
            "OXR_APP_ID": " abc ",
            "OXR_API_BASE_URL": "https://example.com/api",
            "OXR_BASE_CURRENCY": "EUR",
            "OXR_SHOW_ALTERNATIVE": "yes",
            "REQUEST_TIMEOUT_SECONDS": "2.5",
            "LOG_LEVEL": "debug",
            "LOG_JSON_ENABLED": "1",
        }
    )

    assert settings.app_id == "abc"
    assert settings.api_base_url == "https://example.com/api"
    assert settings.base_currency == "EUR"
    assert settings.show_alternative is True
    assert settings.request_timeout_seconds == 2.5
    assert settings.log_level == "DEBUG"
    assert settings.log_json_enabled is True


def test_reads_process_environment_by_default(monkeypatch):
    monkeypatch.setenv("OXR_APP_ID", "from-env")

    assert get_settings().app_id == "from-env"


def test_missing_app_id_raises():
    with pytest.raises(ValueError, match="OXR_APP_ID"):
        get_settings({})


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("REQUEST_TIMEOUT_SECONDS", "soon"),
        ("REQUEST_TIMEOUT_SECONDS", "0"),
        ("OXR_SHOW_ALTERNATIVE", "maybe"),
        ("LOG_JSON_ENABLED", "sometimes"),
    ],
)
def test_invalid_values_raise(name, value):
    with pytest.raises(ValueError, match=name):
        get_settings({"OXR_APP_ID": "abc", name: value})
