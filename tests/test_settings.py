import logging

import pytest

from utils import settings
from utils.settings import DashboardDefaults, get_setting, load_dashboard_defaults


@pytest.fixture(autouse=True)
def _no_secrets(monkeypatch):
    monkeypatch.setattr(settings.st, "secrets", {})
    for name in (
        "GESS_DEFAULT_MASS_KG",
        "GESS_DEFAULT_HEIGHT_M",
        "GESS_DEFAULT_CYCLES",
        "GESS_STRICT_CRITERIA",
        "GESS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_overrides():
    assert load_dashboard_defaults() == DashboardDefaults()


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("GESS_DEFAULT_MASS_KG", "7500")
    monkeypatch.setenv("GESS_STRICT_CRITERIA", "yes")
    monkeypatch.setenv("GESS_LOG_LEVEL", "debug")

    defaults = load_dashboard_defaults()

    assert defaults.mass == 7500.0
    assert defaults.strict_criteria is True
    assert defaults.log_level == "DEBUG"


def test_secrets_take_precedence_over_environment(monkeypatch):
    monkeypatch.setattr(settings.st, "secrets", {"default_height_m": 150})
    monkeypatch.setenv("GESS_DEFAULT_HEIGHT_M", "20")

    assert load_dashboard_defaults().height == 150.0


def test_overrides_are_clamped_to_slider_range(monkeypatch):
    monkeypatch.setenv("GESS_DEFAULT_MASS_KG", "1e9")
    monkeypatch.setenv("GESS_DEFAULT_CYCLES", "1")

    defaults = load_dashboard_defaults()

    assert defaults.mass == settings.MASS_RANGE.max_value
    assert defaults.cycles == int(settings.CYCLES_RANGE.min_value)


def test_invalid_value_falls_back_with_warning(monkeypatch, caplog):
    monkeypatch.setenv("GESS_DEFAULT_HEIGHT_M", "tall")

    with caplog.at_level(logging.WARNING, logger="utils.settings"):
        value = get_setting("default_height_m", 100.0, float)

    assert value == 100.0
    assert "default_height_m" in caplog.text
