"""
Tests for API configuration.
"""

import pytest
from pydantic import ValidationError

from api.config import APIConfig


def test_defaults():
    config = APIConfig()
    assert config.algorithm == "HS256"
    assert config.token_expire_days == 3


def test_environment_override(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "from-the-environment")
    monkeypatch.setenv("PORT", "8080")

    config = APIConfig()

    assert config.secret_key == "from-the-environment"
    assert config.port == 8080


def test_log_settings_are_normalized():
    config = APIConfig(log_level="debug", log_format="CONSOLE")
    assert config.log_level == "DEBUG"
    assert config.log_format == "console"


@pytest.mark.parametrize("field,value", [
    ("log_level", "VERBOSE"),
    ("log_format", "xml"),
    ("token_expire_days", 0),
])
def test_invalid_settings(field, value):
    with pytest.raises(ValidationError):
        APIConfig(**{field: value})
