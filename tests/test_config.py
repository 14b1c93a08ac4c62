# tests/test_config.py
import logging

from perfmon.config import config


def test_debug_mode_controls_log_level(monkeypatch):
    monkeypatch.setitem(config._app_config, "ENABLE_DEBUG_MODE", False)
    assert config.log_level == logging.INFO

    monkeypatch.setitem(config._app_config, "ENABLE_DEBUG_MODE", True)
    assert config.log_level == logging.DEBUG


def test_feature_flags(monkeypatch):
    monkeypatch.setitem(config._app_config, "ENABLE_EXPORT", False)
    assert not config.is_feature_enabled("export")
    assert config.is_feature_enabled("SIGNUP")


def test_sqlite_url_override():
    assert config.get_db_config()['url'] == "sqlite://"
