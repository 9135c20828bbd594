"""Tests for the config loader module."""

from pathlib import Path

import pytest
import yaml

from chathub_proxy.config_loader import (
    _substitute_env_vars,
    default_config_path,
    load_config,
    resolve_config_path,
    resolve_env_path,
)
from chathub_proxy.core.exceptions import ConfigurationError


class TestLoadConfig:
    """Tests for loading configuration from YAML files."""

    def test_loads_simple_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"upstream": {"url": "http://chathub.test/api"}}), encoding="utf-8")

        result = load_config(str(path))

        assert result["upstream"]["url"] == "http://chathub.test/api"

    def test_empty_file_is_empty_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path)) == {}

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Config file not found"):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("upstream: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(str(path))

    def test_non_mapping_root_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(str(path))

    def test_substitutes_from_sibling_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CHATHUB_COOKIE", raising=False)
        (tmp_path / ".env").write_text("CHATHUB_COOKIE=session=from-dotenv\n", encoding="utf-8")
        path = tmp_path / "config.yaml"
        path.write_text("upstream:\n  cookie: ${CHATHUB_COOKIE}\n", encoding="utf-8")

        result = load_config(str(path))

        assert result["upstream"]["cookie"] == "session=from-dotenv"

    def test_substitution_can_be_disabled(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CHATHUB_COOKIE", "session=env")
        path = tmp_path / "config.yaml"
        path.write_text("upstream:\n  cookie: ${CHATHUB_COOKIE}\n", encoding="utf-8")

        result = load_config(str(path), substitute_env=False)

        assert result["upstream"]["cookie"] == "${CHATHUB_COOKIE}"

    def test_bundled_default_config_loads(self):
        result = load_config()
        assert "upstream" in result
        assert "model_mapping" in result


class TestSubstituteEnvVars:
    """Tests for environment variable substitution."""

    def test_braced_and_simple_formats(self, monkeypatch):
        monkeypatch.setenv("PROXY_TEST_HOST", "chathub.test")
        result = _substitute_env_vars({"a": "https://${PROXY_TEST_HOST}/api", "b": "$PROXY_TEST_HOST"})
        assert result == {"a": "https://chathub.test/api", "b": "chathub.test"}

    def test_env_file_values_win_over_process_env(self, monkeypatch):
        monkeypatch.setenv("PROXY_TEST_VALUE", "process")
        assert _substitute_env_vars("$PROXY_TEST_VALUE", {"PROXY_TEST_VALUE": "file"}) == "file"

    def test_recurses_into_lists(self, monkeypatch):
        monkeypatch.setenv("PROXY_TEST_VALUE", "x")
        assert _substitute_env_vars([{"k": ["$PROXY_TEST_VALUE"]}]) == [{"k": ["x"]}]

    def test_unset_variable_keeps_placeholder(self, monkeypatch):
        monkeypatch.delenv("PROXY_TEST_UNSET", raising=False)
        assert _substitute_env_vars("${PROXY_TEST_UNSET}") == "${PROXY_TEST_UNSET}"

    def test_unset_variable_is_logged_by_name(self, monkeypatch, caplog):
        monkeypatch.delenv("PROXY_TEST_UNSET", raising=False)
        with caplog.at_level("WARNING", logger="chathub-proxy"):
            _substitute_env_vars("${PROXY_TEST_UNSET}")
        assert "Environment variable '$PROXY_TEST_UNSET' is not set" in caplog.text

    def test_non_strings_pass_through(self):
        assert _substitute_env_vars({"port": 8080, "flag": True, "none": None}) == {
            "port": 8080,
            "flag": True,
            "none": None,
        }


class TestPaths:
    def test_relative_paths_resolve_against_project_root(self):
        resolved = resolve_config_path("configs/config.yaml")
        assert resolved.is_absolute()
        assert resolved.parts[-2:] == ("configs", "config.yaml")

    def test_absolute_paths_are_kept(self, tmp_path):
        assert resolve_config_path(str(tmp_path)) == tmp_path

    def test_env_file_defaults_to_sibling(self, tmp_path):
        assert resolve_env_path(tmp_path / "config.yaml") == tmp_path / ".env"

    def test_default_path_honors_environment(self, monkeypatch):
        monkeypatch.setenv("CHATHUB_PROXY_CONFIG", "/etc/chathub/config.yaml")
        assert default_config_path() == "/etc/chathub/config.yaml"

    def test_default_path_without_environment(self):
        assert Path(default_config_path()) == Path("configs/config.yaml")
