"""Unit tests for podscope.config.load_config."""

from __future__ import annotations

import pytest

from podscope.config import load_config


class TestDefaults:
    def test_defaults_without_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in (
            "RESYNC_SECONDS",
            "SYNC_TIMEOUT_SECONDS",
            "RETRY_DELAY_SECONDS",
            "RUNNING_ONLY",
            "KUBECONFIG",
            "API_PORT",
            "LOG_LEVEL",
        ):
            monkeypatch.delenv(f"PODSCOPE_{key}", raising=False)
        config = load_config()
        assert config.cache.resync_seconds == 600
        assert config.cache.sync_timeout_seconds == 60
        assert config.cache.retry_delay_seconds == 5.0
        assert config.resolver.running_only is True
        assert config.kubernetes.kubeconfig == ""
        assert config.api.port == 8080
        assert config.log.level == "info"


class TestOverrides:
    def test_values_read_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PODSCOPE_RESYNC_SECONDS", "120")
        monkeypatch.setenv("PODSCOPE_SYNC_TIMEOUT_SECONDS", "30")
        monkeypatch.setenv("PODSCOPE_RETRY_DELAY_SECONDS", "2.5")
        monkeypatch.setenv("PODSCOPE_RUNNING_ONLY", "false")
        monkeypatch.setenv("PODSCOPE_KUBECONFIG", "/tmp/kubeconfig")
        monkeypatch.setenv("PODSCOPE_API_PORT", "9090")
        monkeypatch.setenv("PODSCOPE_LOG_LEVEL", "DEBUG")
        config = load_config()
        assert config.cache.resync_seconds == 120
        assert config.cache.sync_timeout_seconds == 30
        assert config.cache.retry_delay_seconds == 2.5
        assert config.resolver.running_only is False
        assert config.kubernetes.kubeconfig == "/tmp/kubeconfig"
        assert config.api.port == 9090
        assert config.log.level == "debug"

    @pytest.mark.parametrize("value", ["true", "1", "yes", "TRUE"])
    def test_truthy_running_only(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("PODSCOPE_RUNNING_ONLY", value)
        assert load_config().resolver.running_only is True


class TestClamping:
    def test_resync_has_a_floor(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PODSCOPE_RESYNC_SECONDS", "1")
        assert load_config().cache.resync_seconds == 30

    def test_sync_timeout_bounded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PODSCOPE_SYNC_TIMEOUT_SECONDS", "0")
        assert load_config().cache.sync_timeout_seconds == 1
        monkeypatch.setenv("PODSCOPE_SYNC_TIMEOUT_SECONDS", "100000")
        assert load_config().cache.sync_timeout_seconds == 600

    def test_port_bounded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PODSCOPE_API_PORT", "80")
        assert load_config().api.port == 1024

    def test_retry_delay_floor(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PODSCOPE_RETRY_DELAY_SECONDS", "0")
        assert load_config().cache.retry_delay_seconds == 0.1


class TestInvalid:
    def test_unknown_log_level_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PODSCOPE_LOG_LEVEL", "verbose")
        with pytest.raises(ValueError, match="Invalid log level"):
            load_config()

    def test_non_numeric_int_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PODSCOPE_API_PORT", "eighty")
        with pytest.raises(ValueError):
            load_config()
