from __future__ import annotations

import pytest
from pydantic import ValidationError

from deepguard.config import REALITY_DEFENDER_URL, Settings


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("REALITY_DEFENDER_API_KEY", raising=False)
    settings = Settings(_env_file=None)

    assert settings.reality_defender_url == REALITY_DEFENDER_URL
    assert settings.reality_defender_api_key.get_secret_value() == ""
    assert settings.default_quota_limit == 50
    assert settings.jwt_algorithm == "HS256"


def test_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("REALITY_DEFENDER_API_KEY", "rd-secret")
    monkeypatch.setenv("PROVIDER_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("JWT_SECRET", "jwt")

    settings = Settings(_env_file=None)

    assert settings.reality_defender_api_key.get_secret_value() == "rd-secret"
    assert "rd-secret" not in repr(settings)
    assert settings.provider_timeout_seconds == 12.5
    assert settings.jwt_secret == "jwt"


def test_empty_jwt_secret_rejected_in_aws(monkeypatch) -> None:
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.setenv("AWS_EXECUTION_ENV", "AWS_ECS_FARGATE")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_non_positive_timeout_rejected(monkeypatch) -> None:
    monkeypatch.setenv("PROVIDER_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
