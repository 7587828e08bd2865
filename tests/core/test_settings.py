"""Tests for bitcolumn.core.settings and bitcolumn.core.logging."""

import structlog

from bitcolumn.core.logging import configure_logging, get_logger
from bitcolumn.core.settings import BitColumnSettings, get_settings


class TestBitColumnSettingsDefaults:
    def test_defaults(self):
        s = BitColumnSettings()
        assert s.log_level == "INFO"
        assert s.max_flags is None
        assert s.warn_on_collision is True
        assert s.database_url == "sqlite:///:memory:"


class TestBitColumnSettingsEnvOverride:
    def test_max_flags_from_env(self, monkeypatch):
        monkeypatch.setenv("BITCOLUMN_MAX_FLAGS", "8")
        assert BitColumnSettings().max_flags == 8

    def test_warn_on_collision_from_env(self, monkeypatch):
        monkeypatch.setenv("BITCOLUMN_WARN_ON_COLLISION", "false")
        assert BitColumnSettings().warn_on_collision is False

    def test_unprefixed_env_ignored(self, monkeypatch):
        monkeypatch.setenv("MAX_FLAGS", "3")
        assert BitColumnSettings().max_flags is None


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload_reads_env(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("BITCOLUMN_LOG_LEVEL", "DEBUG")
        assert get_settings().log_level == first.log_level
        assert get_settings(_force_reload=True).log_level == "DEBUG"


class TestLogging:
    def test_configure_and_log(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        try:
            get_logger("bitcolumn.test").info("bitfield_test_event", column="status")
            captured = capsys.readouterr()
            assert "bitfield_test_event" in captured.out
            assert '"column": "status"' in captured.out
        finally:
            structlog.reset_defaults()
