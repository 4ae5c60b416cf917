from __future__ import annotations

from policyscan_agent.config import (
    DEFAULT_UPSTREAM_TIMEOUT_S,
    FORTIGUARD_PLACEHOLDER_URL,
    TALOS_PLACEHOLDER_URL,
    EngineSettings,
    load_settings,
)


def test_defaults_leave_engines_unconfigured():
    s = load_settings({})
    assert s.talos.api_url == TALOS_PLACEHOLDER_URL
    assert s.fortiguard.api_url == FORTIGUARD_PLACEHOLDER_URL
    assert not s.talos.configured
    assert not s.fortiguard.configured
    assert s.port == 3000
    assert s.scan_concurrency == 1
    assert s.upstream_timeout_s == DEFAULT_UPSTREAM_TIMEOUT_S
    assert s.cors_origins == ("http://localhost:3000",)


def test_reads_environment():
    s = load_settings(
        {
            "PORT": "8080",
            "TALOS_API_URL": "https://talos.internal/lookup",
            "TALOS_API_KEY": "t-key",
            "FORTIGUARD_API_URL": "https://fg.internal/rate",
            "FORTIGUARD_API_KEY": "f-key",
            "UPSTREAM_TIMEOUT_S": "2.5",
            "SCAN_CONCURRENCY": "4",
            "POLICYSCAN_CORS_ORIGINS": "https://a.example, https://b.example,",
        }
    )
    assert s.port == 8080
    assert s.talos == EngineSettings("https://talos.internal/lookup", "t-key")
    assert s.fortiguard == EngineSettings("https://fg.internal/rate", "f-key")
    assert s.talos.configured and s.fortiguard.configured
    assert s.upstream_timeout_s == 2.5
    assert s.scan_concurrency == 4
    assert s.cors_origins == ("https://a.example", "https://b.example")


def test_bad_numbers_fall_back_to_defaults():
    s = load_settings({"PORT": "http", "UPSTREAM_TIMEOUT_S": "-1", "SCAN_CONCURRENCY": "0"})
    assert s.port == 3000
    assert s.upstream_timeout_s == DEFAULT_UPSTREAM_TIMEOUT_S
    assert s.scan_concurrency == 1


def test_empty_endpoint_is_unconfigured():
    assert not EngineSettings("").configured
    assert not EngineSettings("  ").configured
    assert EngineSettings("http://localhost:9000/lookup").configured


def test_log_settings_come_from_environment():
    s = load_settings({"LOG_LEVEL": " debug ", "LOG_FORMAT": "Console"})
    assert s.log_level == "DEBUG"
    assert s.log_format == "console"

    defaults = load_settings({})
    assert defaults.log_level == "INFO"
    assert defaults.log_format == "json"


def test_dotenv_log_settings_are_loaded(tmp_path, monkeypatch):
    # setenv then delenv so values loaded from .env are removed on teardown.
    for name in ("LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    (tmp_path / ".env").write_text("LOG_LEVEL=warning\nLOG_FORMAT=console\n")
    monkeypatch.chdir(tmp_path)

    s = load_settings()
    assert s.log_level == "WARNING"
    assert s.log_format == "console"
