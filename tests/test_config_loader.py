"""
Unit tests for configuration loading.

Tests user and project config merging, environment variable overrides,
token handling and layered .env files.
"""

import json
import os
from pathlib import Path

import pytest

from clparse.core.changelog import OutputFormat
from clparse.core.config import (
    ClParseConfig,
    ConfigError,
    get_project_config_path,
    get_user_config_path,
    load_config,
    load_layered_env,
)
from clparse.core.config.loader import apply_env_overrides, load_json_file


def write_json(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadJsonFile:
    """Test JSON file loading."""

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_json_file(tmp_path / "missing.json") is None

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_json_file(path) is None

    def test_non_object(self, tmp_path: Path) -> None:
        assert load_json_file(write_json(tmp_path / "list.json", [1, 2])) is None


class TestApplyEnvOverrides:
    """Test CL_PARSE_* environment overrides."""

    def test_string_and_bool_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CL_PARSE_FORMAT", "yaml")
        monkeypatch.setenv("CL_PARSE_INCLUDE_BODY", "true")
        monkeypatch.setenv("CL_PARSE_FETCH_ITEM_DETAILS", "off")

        result = apply_env_overrides({"changelog": "docs/CHANGELOG.md"})

        assert result == {
            "changelog": "docs/CHANGELOG.md",
            "format": "yaml",
            "include_body": True,
            "fetch_item_details": False,
        }

    def test_empty_values_are_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CL_PARSE_CHANGELOG", "")
        assert apply_env_overrides({}) == {}


class TestLoadConfig:
    """Test multi-layer config loading."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config == ClParseConfig()
        assert config.changelog == "CHANGELOG.md"
        assert config.format == OutputFormat.JSON
        assert config.token is None

    def test_project_overrides_user(self, tmp_path: Path) -> None:
        write_json(get_user_config_path(), {"format": "yaml", "include_body": True})
        write_json(get_project_config_path(tmp_path), {"format": "json"})

        config = load_config(tmp_path)

        assert config.format == OutputFormat.JSON
        assert config.include_body is True

    def test_env_overrides_project(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        write_json(get_project_config_path(tmp_path), {"changelog": "HISTORY.md"})
        monkeypatch.setenv("CL_PARSE_CHANGELOG", "docs/CHANGES.md")
        monkeypatch.setenv("CL_PARSE_TOKEN", "secret")

        config = load_config(tmp_path)

        assert config.changelog == "docs/CHANGES.md"
        assert config.token == "secret"
        assert "secret" not in repr(config)

    def test_token_in_file_is_ignored(self, tmp_path: Path) -> None:
        write_json(get_project_config_path(tmp_path), {"token": "leaked"})
        assert load_config(tmp_path).token is None

    def test_unknown_key_is_an_error(self, tmp_path: Path) -> None:
        write_json(get_project_config_path(tmp_path), {"colour": "blue"})
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(tmp_path)

    def test_invalid_format_is_an_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CL_PARSE_FORMAT", "xml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestLoadLayeredEnv:
    """Test .env file loading."""

    @pytest.fixture(autouse=True)
    def restore_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        # Register the variables so monkeypatch removes them afterwards
        for name in ("CLPARSE_TEST_A", "CLPARSE_TEST_B", "CLPARSE_TEST_OS"):
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)

    def test_project_overrides_user(self, tmp_path: Path) -> None:
        user_env = tmp_path / "user.env"
        user_env.write_text("CLPARSE_TEST_A=user\nCLPARSE_TEST_B=user\n", encoding="utf-8")
        (tmp_path / ".env").write_text("CLPARSE_TEST_B=project\n", encoding="utf-8")

        loaded = load_layered_env(project_dir=tmp_path, user_env_paths=[user_env])

        assert loaded == {"CLPARSE_TEST_A", "CLPARSE_TEST_B"}
        assert os.environ["CLPARSE_TEST_A"] == "user"
        assert os.environ["CLPARSE_TEST_B"] == "project"

    def test_os_environment_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLPARSE_TEST_OS", "from-os")
        (tmp_path / ".env").write_text("CLPARSE_TEST_OS=from-file\n", encoding="utf-8")

        loaded = load_layered_env(project_dir=tmp_path, user_env_paths=[])

        assert loaded == set()
        assert os.environ["CLPARSE_TEST_OS"] == "from-os"
