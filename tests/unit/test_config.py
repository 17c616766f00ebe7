"""Unit tests for settings."""

import pytest
from pydantic import ValidationError

from demandflow.config import Settings


def test_defaults(monkeypatch) -> None:
    for name in (
        "COMPLIANCE_THRESHOLD",
        "CONFLICT_RETRIES",
        "MIN_REJECTION_REASON_LENGTH",
        "TRUSTED_PROXIES",
    ):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.compliance_threshold == 70.0
    assert settings.min_rejection_reason_length == 10
    assert settings.conflict_retries == 1
    assert settings.anonymous_role is None
    assert settings.trusted_proxies == ""


def test_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("COMPLIANCE_THRESHOLD", "80")
    monkeypatch.setenv("OPERATION_TIMEOUT_SECONDS", "2.5")
    settings = Settings(_env_file=None)
    assert settings.compliance_threshold == 80.0
    assert settings.operation_timeout_seconds == 2.5


def test_threshold_range_validated(monkeypatch) -> None:
    monkeypatch.setenv("COMPLIANCE_THRESHOLD", "120")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_trusted_proxies_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("TRUSTED_PROXIES", "10.0.0.1, 10.0.0.2")
    settings = Settings(_env_file=None)
    assert settings.trusted_proxies == "10.0.0.1, 10.0.0.2"
