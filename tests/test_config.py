"""Tests for fluent_openapi.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from fluent_openapi.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
)
from fluent_openapi.exceptions import ConfigError
from fluent_openapi.models import ClientConfig, GlobalConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG paths
# ---------------------------------------------------------------------------


class TestXDGPaths:
    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("fluent_openapi.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "fluent-openapi"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("fluent_openapi.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "fluent-openapi"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("fluent_openapi.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_data_dir() == tmp_path / ".local" / "share" / "fluent-openapi"

    def test_fallback_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("fluent_openapi.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".fluent-openapi"
        assert get_data_dir() == tmp_path / ".fluent-openapi" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "config.json"
        _atomic_write(target, '{"a": 1}')
        assert target.read_text(encoding="utf-8") == '{"a": 1}'

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        with patch("fluent_openapi.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.client.max_retries == 0

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        config = GlobalConfig(
            default_spec="./swagger.json",
            client=ClientConfig(url="https://k8s.local", headers={"x-team": "infra"}),
        )
        save_global_config(config)
        assert load_global_config() == config

    def test_load_invalid_json_raises_config_error(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{broken", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_load_invalid_schema_raises_config_error(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", {"client": {"timeout": "soon"}})
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_missing_returns_none(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loads_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "fluent-openapi.json", {"spec": "api.yaml"})
        assert load_project_config() == {"spec": "api.yaml"}

    def test_non_object_raises(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "fluent-openapi.json", ["api.yaml"])
        with pytest.raises(ConfigError, match="must be a JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    """CLI flag > env > project config > global config > defaults."""

    def _save_global(self) -> None:
        save_global_config(
            GlobalConfig(
                default_spec="global.json",
                client=ClientConfig(url="https://global.example.com"),
            )
        )

    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config.default_spec is None
        assert config.client.url is None

    def test_global(self, isolated_config: Path) -> None:
        self._save_global()
        config = resolve_config()
        assert config.default_spec == "global.json"
        assert config.client.url == "https://global.example.com"

    def test_project_over_global(self, isolated_config: Path) -> None:
        self._save_global()
        _write_json(isolated_config / "fluent-openapi.json", {"spec": "project.json"})
        config = resolve_config()
        assert config.default_spec == "project.json"
        assert config.client.url == "https://global.example.com"

    def test_env_over_project(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_json(
            isolated_config / "fluent-openapi.json",
            {"spec": "project.json", "url": "https://project.example.com"},
        )
        monkeypatch.setenv("FLUENT_OPENAPI_SPEC", "env.json")
        monkeypatch.setenv("FLUENT_OPENAPI_URL", "https://env.example.com")
        config = resolve_config()
        assert config.default_spec == "env.json"
        assert config.client.url == "https://env.example.com"

    def test_cli_over_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLUENT_OPENAPI_SPEC", "env.json")
        monkeypatch.setenv("FLUENT_OPENAPI_URL", "https://env.example.com")
        config = resolve_config(cli_spec="cli.json", cli_url="https://cli.example.com")
        assert config.default_spec == "cli.json"
        assert config.client.url == "https://cli.example.com"

    def test_resolution_does_not_persist(self, isolated_config: Path) -> None:
        self._save_global()
        resolve_config(cli_spec="cli.json")
        assert load_global_config().default_spec == "global.json"
