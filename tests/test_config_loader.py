"""Tests for configuration loading."""

from pathlib import Path

import pytest
import yaml

from ozwell_proxy.config_loader import (
    GatewaySettings,
    load_config,
    load_settings,
    resolve_env_path,
    settings_from_config,
)
from ozwell_proxy.core.exceptions import ConfigurationError


def _write_config(path: Path, data: dict) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestLoadConfig:
    def test_reads_yaml(self, tmp_path):
        config_path = _write_config(tmp_path / "config_default.yaml", {"server": {"port": 4000}})
        assert load_config(str(config_path)) == {"server": {"port": 4000}}

    def test_explicit_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_env_var_path(self, tmp_path, monkeypatch):
        config_path = _write_config(tmp_path / "custom.yaml", {"model": {"default_label": "Env"}})
        monkeypatch.setenv("OZWELL_PROXY_CONFIG", str(config_path))
        assert load_config()["model"]["default_label"] == "Env"

    def test_non_mapping_rejected(self, tmp_path):
        config_path = tmp_path / "config_list.yaml"
        config_path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(str(config_path))

    def test_substitutes_from_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("OZWELL_TEST_BACKEND", raising=False)
        config_path = _write_config(
            tmp_path / "config_default.yaml",
            {"backend": {"base_url": "${OZWELL_TEST_BACKEND}"}},
        )
        (tmp_path / ".env_default").write_text(
            "OZWELL_TEST_BACKEND=http://from-env-file.test\n", encoding="utf-8"
        )
        assert load_config(str(config_path))["backend"]["base_url"] == "http://from-env-file.test"

    def test_substitutes_from_process_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OZWELL_TEST_BACKEND", "http://from-process.test")
        config_path = _write_config(
            tmp_path / "settings.yaml",
            {"backend": {"base_url": "$OZWELL_TEST_BACKEND"}},
        )
        assert load_config(str(config_path))["backend"]["base_url"] == "http://from-process.test"

    def test_unset_variable_keeps_placeholder(self, tmp_path, monkeypatch):
        monkeypatch.delenv("OZWELL_TEST_UNSET", raising=False)
        config_path = _write_config(
            tmp_path / "settings.yaml",
            {"backend": {"base_url": "${OZWELL_TEST_UNSET}"}},
        )
        assert load_config(str(config_path))["backend"]["base_url"] == "${OZWELL_TEST_UNSET}"

    def test_substitution_can_be_disabled(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OZWELL_TEST_BACKEND", "http://from-process.test")
        config_path = _write_config(
            tmp_path / "settings.yaml",
            {"backend": {"base_url": "${OZWELL_TEST_BACKEND}"}},
        )
        data = load_config(str(config_path), substitute_env=False)
        assert data["backend"]["base_url"] == "${OZWELL_TEST_BACKEND}"


def test_resolve_env_path():
    assert resolve_env_path(Path("/cfg/config_default.yaml")) == Path("/cfg/.env_default")
    assert resolve_env_path(Path("/cfg/gateway.yaml")) == Path("/cfg/.env")


class TestSettingsFromConfig:
    def test_defaults(self):
        settings = settings_from_config({}, environ={})
        assert settings == GatewaySettings()
        assert settings.port == 3001
        assert settings.backend_timeout == 30.0
        assert settings.stream_chunk_delay == 0.05
        assert settings.default_model == "Ozwell"

    def test_reads_every_section(self):
        cfg = {
            "server": {"host": "127.0.0.1", "port": 8080},
            "backend": {
                "base_url": "http://backend.test",
                "completion_path": "/v2/complete",
                "timeout_seconds": 12,
            },
            "model": {"default_label": "Ozwell-2", "owned_by": "acme"},
            "stream": {"chunk_delay_seconds": 0},
            "logging": {"level": "DEBUG", "log_payloads": "yes"},
        }
        settings = settings_from_config(cfg, environ={})
        assert settings == GatewaySettings(
            host="127.0.0.1",
            port=8080,
            backend_url="http://backend.test",
            completion_path="/v2/complete",
            backend_timeout=12.0,
            default_model="Ozwell-2",
            model_owner="acme",
            stream_chunk_delay=0.0,
            log_level="DEBUG",
            log_payloads=True,
        )

    def test_environment_overrides_config(self):
        cfg = {"server": {"port": 8080}, "backend": {"base_url": "http://config.test"}}
        environ = {
            "PORT": "9090",
            "OZWELL_PROXY_HOST": "localhost",
            "OZWELL_BACKEND_URL": "http://env.test",
            "OZWELL_BACKEND_TIMEOUT": "7.5",
            "OZWELL_STREAM_DELAY": "0.2",
            "OZWELL_PROXY_LOG_LEVEL": "WARNING",
        }
        settings = settings_from_config(cfg, environ=environ)
        assert settings.port == 9090
        assert settings.host == "localhost"
        assert settings.backend_url == "http://env.test"
        assert settings.backend_timeout == 7.5
        assert settings.stream_chunk_delay == 0.2
        assert settings.log_level == "WARNING"

    def test_invalid_values_fall_back_to_defaults(self):
        cfg = {
            "server": {"port": "not-a-port"},
            "backend": {"timeout_seconds": -1},
            "stream": {"chunk_delay_seconds": "soon"},
        }
        settings = settings_from_config(cfg, environ={"OZWELL_BACKEND_TIMEOUT": "never"})
        assert settings.port == 3001
        assert settings.backend_timeout == 30.0
        assert settings.stream_chunk_delay == 0.05


def test_load_settings_from_file(tmp_path, monkeypatch):
    for name in ("PORT", "OZWELL_PROXY_HOST", "OZWELL_BACKEND_URL", "OZWELL_BACKEND_TIMEOUT",
                 "OZWELL_STREAM_DELAY", "OZWELL_PROXY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config_path = _write_config(tmp_path / "gateway.yaml", {"server": {"port": 5005}})
    assert load_settings(str(config_path)).port == 5005


def test_shipped_default_config_matches_builtin_defaults():
    shipped = Path(__file__).resolve().parents[1] / "configs" / "config_default.yaml"
    data = yaml.safe_load(shipped.read_text(encoding="utf-8"))
    assert settings_from_config(data, environ={}) == GatewaySettings()
