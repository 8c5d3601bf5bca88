"""Settings loading and environment overrides."""
import logging
import pytest
import sys
import os
from pathlib import Path

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from workshop_pricing.api.state import get_rule_repository, get_rules_service, get_workshop_repository
from workshop_pricing.config.logging_config import configure_logging
from workshop_pricing.config.settings import Settings, get_package_data_dir, get_settings, reset_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


def test_defaults_point_at_package_data(monkeypatch):
    monkeypatch.delenv("WORKSHOP_PRICING_DATA_DIR", raising=False)
    monkeypatch.delenv("WORKSHOP_PRICING_LOG_LEVEL", raising=False)
    settings = Settings.load()

    assert settings.data_dir == get_package_data_dir()
    assert settings.membership_rules_csv.name == "membership_pricing_rules.csv"
    assert settings.workshops_csv.exists()
    assert settings.currency == "CAD"
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("WORKSHOP_PRICING_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("WORKSHOP_PRICING_ETRANSFER_EMAIL", "treasurer@example.org")
    monkeypatch.setenv("WORKSHOP_PRICING_LOG_LEVEL", "debug")

    settings = get_settings()
    assert settings.data_dir == Path(tmp_path)
    assert settings.membership_rules_csv == Path(tmp_path) / "membership_pricing_rules.csv"
    assert settings.etransfer_email == "treasurer@example.org"
    assert settings.log_level == "DEBUG"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_api_providers_follow_reset_settings(monkeypatch, tmp_path):
    first, second = tmp_path / "first", tmp_path / "second"

    monkeypatch.setenv("WORKSHOP_PRICING_DATA_DIR", str(first))
    reset_settings()
    repo = get_rule_repository()
    assert repo.csv_path == first / "membership_pricing_rules.csv"
    assert get_rule_repository() is repo

    monkeypatch.setenv("WORKSHOP_PRICING_DATA_DIR", str(second))
    reset_settings()
    assert get_rule_repository().csv_path == second / "membership_pricing_rules.csv"
    assert get_workshop_repository().csv_path == second / "workshops.csv"
    assert get_rules_service().rules_csv_path == second / "membership_pricing_rules.csv"


def test_configure_logging_is_idempotent():
    logger = logging.getLogger("workshop_pricing")

    configure_logging("INFO")
    configure_logging("DEBUG")
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False

    configure_logging("INFO")
    assert len(logger.handlers) == 1
