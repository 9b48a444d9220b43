"""Tests for gush.config."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from gush.config import (
    CONFIG_FILENAME,
    MISSING,
    Config,
    deep_merge,
    default_home,
    load_config,
    read_config_file,
    save_config,
    split_path,
)
from gush.errors import ConfigError


class TestSplitPath:
    def test_dotted(self) -> None:
        assert split_path("adapters.github.config") == ["adapters", "github", "config"]

    def test_bracketed(self) -> None:
        assert split_path("[adapters][github][config]") == ["adapters", "github", "config"]

    def test_bracketed_allows_dots_in_keys(self) -> None:
        assert split_path("[hosts][gitlab.example.com]") == ["hosts", "gitlab.example.com"]

    def test_malformed_bracket_path_raises(self) -> None:
        with pytest.raises(ValueError, match="Malformed"):
            split_path("[adapters]github")

    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError):
            split_path("")


class TestDeepMerge:
    def test_nested_maps_combine_key_by_key(self) -> None:
        base = {"adapters": {"github": {"config": {"base_url": "a", "repo_domain_url": "b"}}}}
        override = {"adapters": {"github": {"config": {"base_url": "z"}}}}
        merged = deep_merge(base, override)
        assert merged["adapters"]["github"]["config"] == {"base_url": "z", "repo_domain_url": "b"}

    def test_scalar_replaces_mapping(self) -> None:
        assert deep_merge({"a": {"b": 1}}, {"a": 2}) == {"a": 2}

    def test_inputs_not_mutated(self) -> None:
        base = {"a": {"b": 1}}
        override = {"a": {"c": 2}}
        deep_merge(base, override)
        assert base == {"a": {"b": 1}}
        assert override == {"a": {"c": 2}}


class TestConfig:
    def test_get_dotted_and_bracketed_agree(self, github_tree: dict) -> None:
        config = Config(github_tree)
        assert config.get("adapters.github.authentication") == config.get(
            "[adapters][github][authentication]"
        )
        assert config.get("adapters.github.authentication.username") == "cordoval"

    def test_missing_path_returns_sentinel(self, github_tree: dict) -> None:
        config = Config(github_tree)
        assert config.get("adapters.gitlab.config") is MISSING
        assert config.get("adapter.deeper") is MISSING

    def test_missing_sentinel_is_distinct_from_stored_none(self) -> None:
        config = Config({"token": None})
        assert config.get("token") is None
        assert config.has("token")
        assert not config.has("other")

    def test_get_with_default(self) -> None:
        assert Config().get("nope", "fallback") == "fallback"

    def test_merge_new_tree_wins(self, github_tree: dict) -> None:
        config = Config(github_tree)
        config.merge({"adapter": "gitlab", "adapters": {"github": {"config": {"base_url": "x"}}}})
        assert config.get("adapter") == "gitlab"
        assert config.get("adapters.github.config.base_url") == "x"
        assert config.get("adapters.github.config.repo_domain_url") == "https://github.com"

    def test_raw_is_a_copy(self, github_tree: dict) -> None:
        config = Config(github_tree)
        raw = config.raw()
        raw["adapters"].clear()
        assert config.has("adapters.github")

    def test_constructor_copies_tree(self, github_tree: dict) -> None:
        config = Config(github_tree)
        github_tree["adapter"] = "bitbucket"
        assert config.get("adapter") == "github"

    def test_missing_is_falsy(self) -> None:
        assert not MISSING
        assert repr(MISSING) == "MISSING"


class TestReadConfigFile:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert read_config_file(tmp_path / "absent.yml") == {}

    def test_parameters_wrapper_is_unwrapped(self, gush_home: Path) -> None:
        data = read_config_file(gush_home / CONFIG_FILENAME)
        assert data["adapter"] == "github"
        assert data["adapters"]["github"]["authentication"]["username"] == "cordoval"

    def test_plain_mapping(self, tmp_path: Path, write_yaml) -> None:
        path = write_yaml(tmp_path / "c.yml", {"adapter": "gitlab"})
        assert read_config_file(path) == {"adapter": "gitlab"}

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert read_config_file(path) == {}

    def test_malformed_yaml_raises_config_error(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yml"
        path.write_text("adapter: [github\n")
        with pytest.raises(ConfigError, match="Malformed configuration file"):
            read_config_file(path)

    def test_non_mapping_raises_config_error(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yml"
        path.write_text("- github\n- gitlab\n")
        with pytest.raises(ConfigError, match="expected a mapping"):
            read_config_file(path)


class TestLoadConfig:
    def test_defaults_present(self, tmp_path: Path) -> None:
        home = tmp_path / "home"
        local = tmp_path / "project"
        local.mkdir()
        config = load_config(home=home, local=local)
        assert config.get("home") == str(home)
        assert config.get("cache-dir") == str(home / "cache")
        assert config.get("local_config") == str(local / CONFIG_FILENAME)
        assert config.get("adapter") is MISSING

    def test_project_file_overrides_home_leaf_by_leaf(
        self, tmp_path: Path, gush_home: Path, write_yaml
    ) -> None:
        local = tmp_path / "project"
        write_yaml(
            local / CONFIG_FILENAME,
            {"adapters": {"github": {"config": {"base_url": "https://ghe.local/api/v3"}}}},
        )
        config = load_config(home=gush_home, local=local)
        assert config.get("adapters.github.config.base_url") == "https://ghe.local/api/v3"
        assert config.get("adapters.github.config.repo_domain_url") == "https://github.com"
        assert config.get("adapters.github.authentication.username") == "cordoval"

    def test_overrides_win(self, tmp_path: Path, gush_home: Path) -> None:
        local = tmp_path / "project"
        local.mkdir()
        config = load_config(home=gush_home, local=local, overrides={"adapter": "gitlab"})
        assert config.get("adapter") == "gitlab"

    def test_file_values_override_defaults(self, tmp_path: Path, gush_home: Path) -> None:
        local = tmp_path / "project"
        local.mkdir()
        config = load_config(home=gush_home, local=local)
        assert config.get("cache-dir") == "/home/cordoval/.gush/cache"

    def test_home_from_environment(self, tmp_path: Path, gush_home: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert config.get("home_config") == str(gush_home / CONFIG_FILENAME)
        assert config.get("adapter") == "github"

    def test_malformed_project_file_aborts(self, tmp_path: Path, gush_home: Path) -> None:
        local = tmp_path / "project"
        local.mkdir()
        (local / CONFIG_FILENAME).write_text("adapters: {github: [\n")
        with pytest.raises(ConfigError):
            load_config(home=gush_home, local=local)


class TestDefaultHome:
    def test_env_var(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("GUSH_HOME", str(tmp_path))
        assert default_home() == tmp_path

    def test_falls_back_to_user_home(self, monkeypatch) -> None:
        monkeypatch.delenv("GUSH_HOME", raising=False)
        assert default_home() == Path.home() / ".gush"


class TestSaveConfig:
    def test_writes_parameters_wrapper(self, tmp_path: Path, github_tree: dict) -> None:
        path = save_config(tmp_path / "nested" / CONFIG_FILENAME, github_tree)
        data = yaml.safe_load(path.read_text())
        assert data == {"parameters": github_tree}
        assert read_config_file(path) == github_tree

    def test_no_temp_files_left(self, tmp_path: Path, github_tree: dict) -> None:
        save_config(tmp_path / CONFIG_FILENAME, github_tree)
        assert [p.name for p in tmp_path.iterdir()] == [CONFIG_FILENAME]
