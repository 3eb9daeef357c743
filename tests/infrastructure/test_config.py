"""Tests for environment-driven configuration and the composition root."""

from datetime import timedelta

import click
import pytest

from ims.infrastructure import bootstrap
from ims.infrastructure.config import Config


def test_defaults(monkeypatch):
    for name in ("IMS_HOLD_MINUTES", "IMS_RETRY_ATTEMPTS", "IMS_RETRY_BACKOFF_MS", "IMS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config = Config.from_env()
    assert config.hold_minutes == 10
    assert config.retry_attempts == 3
    assert config.log_level == "WARNING"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("IMS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("IMS_HOLD_MINUTES", "2")
    monkeypatch.setenv("IMS_RETRY_ATTEMPTS", "5")
    monkeypatch.setenv("IMS_RETRY_BACKOFF_MS", "20")
    monkeypatch.setenv("IMS_LOG_LEVEL", "debug")

    config = Config.from_env()

    assert config.data_dir == tmp_path
    assert config.log_level == "DEBUG"
    settings = bootstrap.settings(config)
    assert settings.hold == timedelta(minutes=2)
    assert settings.retry.attempts == 5
    assert settings.retry.backoff == 0.02


def test_unit_of_work_factory_uses_data_dir(tmp_path):
    factory = bootstrap.unit_of_work_factory(Config(data_dir=tmp_path))
    with factory() as uow:
        assert uow.products.list_all() == []
    assert (tmp_path / "store.json").exists()


@pytest.mark.parametrize("name", ["IMS_HOLD_MINUTES", "IMS_RETRY_ATTEMPTS", "IMS_RETRY_BACKOFF_MS"])
def test_non_integer_setting_names_the_variable(monkeypatch, name):
    monkeypatch.setenv(name, "ten")
    with pytest.raises(click.ClickException, match=f"{name} must be an integer"):
        Config.from_env()


def test_zero_retry_attempts_rejected(monkeypatch):
    monkeypatch.setenv("IMS_RETRY_ATTEMPTS", "0")
    with pytest.raises(click.ClickException, match="IMS_RETRY_ATTEMPTS must be at least 1"):
        Config.from_env()


def test_unknown_log_level_rejected(monkeypatch):
    monkeypatch.setenv("IMS_LOG_LEVEL", "loud")
    with pytest.raises(click.ClickException, match="IMS_LOG_LEVEL must be one of"):
        Config.from_env()
