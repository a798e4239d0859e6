import logging

import pytest
import structlog

from uaa.cli import config as config_module
from uaa.cli.logs import configure_logging


def test_settings_singleton_exists_and_matches_get_settings():
    assert hasattr(config_module, "settings")
    assert config_module.get_settings() is config_module.settings


def test_settings_read_prefixed_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("UAA_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("UAA_CALLBACK_PORT", "9090")

    settings = config_module.Settings()

    assert settings.config_path == tmp_path / "config.yaml"
    assert settings.callback_port == 9090


@pytest.fixture
def captured_levels(monkeypatch):
    captured = {}

    def fake_basicConfig(*, level=None, **kwargs):
        captured["level"] = level

    orig_make = structlog.make_filtering_bound_logger

    def fake_make_filtering_bound_logger(level):
        captured["structlog_level"] = level
        return orig_make(level)

    monkeypatch.setattr(logging, "basicConfig", fake_basicConfig)
    monkeypatch.setattr(structlog, "make_filtering_bound_logger", fake_make_filtering_bound_logger)
    yield captured
    structlog.reset_defaults()


def test_configure_logging_uses_settings_level(monkeypatch, captured_levels):
    monkeypatch.setattr(config_module.settings, "log_level", "WARNING")

    configure_logging()

    assert captured_levels["level"] == logging.WARNING
    assert captured_levels["structlog_level"] == logging.WARNING


@pytest.mark.parametrize(
    "log_level, expected",
    [("debug", logging.DEBUG), ("ERROR", logging.ERROR), (20, logging.INFO), ("bogus", logging.INFO)],
)
def test_configure_logging_level_names(captured_levels, log_level, expected):
    configure_logging(log_level, json_format=True)

    assert captured_levels["level"] == expected
    assert captured_levels["structlog_level"] == expected


def test_configure_logging_quiets_http_libraries(captured_levels):
    configure_logging("DEBUG", json_format=False)

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
