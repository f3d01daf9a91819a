"""Settings loading and duration parsing."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from core.config import DEFAULT_ALLOWED_FILE_TYPES, Settings, parse_duration


@pytest.mark.parametrize(
    "value, expected",
    [
        ("24h", timedelta(hours=24)),
        ("30m", timedelta(minutes=30)),
        ("7d", timedelta(days=7)),
        ("90s", timedelta(seconds=90)),
        ("3600", timedelta(hours=1)),
        (" 2H ", timedelta(hours=2)),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "h", "24x", "-5m", "0h", "1.5h", "24 hours"])
def test_parse_duration_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_duration(value)


def test_defaults():
    settings = Settings(_env_file=None, secret_key="s")

    assert settings.token_lifetime == timedelta(hours=24)
    assert settings.max_file_size == 5 * 1024 * 1024
    assert settings.max_files_per_request == 5
    assert settings.allowed_file_types == DEFAULT_ALLOWED_FILE_TYPES
    assert settings.seed_demo_products is False


def test_secret_key_is_required(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "from-env")
    monkeypatch.setenv("TOKEN_EXPIRES_IN", "15m")
    monkeypatch.setenv("MAX_FILE_SIZE", "1024")
    monkeypatch.setenv("MAX_FILES_PER_REQUEST", "2")
    monkeypatch.setenv("ALLOWED_FILE_TYPES", '{"png": ["image/png"]}')

    settings = Settings(_env_file=None)

    assert settings.secret_key == "from-env"
    assert settings.token_lifetime == timedelta(minutes=15)
    assert settings.max_file_size == 1024
    assert settings.max_files_per_request == 2
    assert settings.allowed_file_types == {"png": ["image/png"]}
