"""
Tests for configuration discovery, loading and validation.

Feature: pullmaster
"""

import json
from pathlib import Path

import pytest

from pullmaster.config import (
    CONFIG_FILENAME,
    DEFAULT_MAX_FILES,
    PullmasterConfig,
    find_config,
    init_config,
    load_config,
    save_config,
    validate_config,
)
from pullmaster.exceptions import ConfigurationError

SAMPLE = {
    "github": {"token": "ghp_sampletoken"},
    "analysis": {"maxFiles": 25, "excludePaths": [r"\.lock$", "^vendor/"], "aiModel": "gpt-4"},
}


def write_config(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestFindConfig:
    def test_walks_up_to_nearest_ancestor(self, tmp_path: Path) -> None:
        expected = write_config(tmp_path / CONFIG_FILENAME, SAMPLE)
        nested = tmp_path / "a" / "b" / "c"
        nested.mkdir(parents=True)

        assert find_config(nested, home=tmp_path / "home") == expected.resolve()

    def test_nearest_file_wins(self, tmp_path: Path) -> None:
        write_config(tmp_path / CONFIG_FILENAME, SAMPLE)
        inner = tmp_path / "project"
        inner.mkdir()
        expected = write_config(inner / CONFIG_FILENAME, SAMPLE)

        assert find_config(inner, home=tmp_path / "home") == expected.resolve()

    def test_falls_back_to_home(self, tmp_path: Path) -> None:
        home = tmp_path / "home"
        start = tmp_path / "work"
        start.mkdir()

        # No ancestor of tmp_path is expected to carry a config file
        found = find_config(start, home=home)
        if found.parent != home:
            pytest.skip("a config file exists above the temporary directory")

        assert found == home / CONFIG_FILENAME


class TestLoadConfig:
    def test_loads_json_layout(self, tmp_path: Path) -> None:
        path = write_config(tmp_path / CONFIG_FILENAME, SAMPLE)

        config = load_config(path)

        assert config.github_token == "ghp_sampletoken"
        assert config.max_files == 25
        assert config.exclude_paths == [r"\.lock$", "^vendor/"]
        assert config.ai_model == "gpt-4"
        assert config.api_url == "https://api.github.com"
        assert config.max_concurrency == 10

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "missing")

        assert "configure --init" in exc_info.value.message
        assert exc_info.value.code == "CONFIGURATION_ERROR"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert exc_info.value.message.startswith("Error loading configuration")

    def test_top_level_must_be_object(self, tmp_path: Path) -> None:
        path = write_config(tmp_path / CONFIG_FILENAME, ["github"])

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_save_then_load(self, tmp_path: Path) -> None:
        config = PullmasterConfig(
            github_token="ghp_saved",
            max_files=5,
            exclude_paths=["^docs/"],
            max_concurrency=4,
        )

        path = save_config(config, tmp_path / CONFIG_FILENAME)

        assert load_config(path) == config


class TestInitConfig:
    def test_defaults(self) -> None:
        config = init_config()

        assert config.max_files == DEFAULT_MAX_FILES
        assert config.ai_model == "gpt-4"
        assert config.exclude_paths == []
        assert config.github_token == ""

    def test_keeps_existing_values(self) -> None:
        existing = PullmasterConfig(github_token="ghp_old", max_files=7)

        config = init_config(existing, token="ghp_new")

        assert config.github_token == "ghp_new"
        assert config.max_files == 7


class TestValidateConfig:
    def test_valid(self) -> None:
        assert validate_config(PullmasterConfig.from_dict(SAMPLE)) == []

    def test_missing_token(self) -> None:
        assert validate_config(PullmasterConfig()) == ["GitHub token is missing"]

    @pytest.mark.parametrize("max_files", [0, -1, "10", True, 2.5])
    def test_bad_max_files(self, max_files: object) -> None:
        config = PullmasterConfig(github_token="t", max_files=max_files)  # type: ignore[arg-type]

        assert validate_config(config) == ["analysis.maxFiles must be a positive integer"]

    def test_exclude_paths_must_be_list(self) -> None:
        config = PullmasterConfig(github_token="t", exclude_paths="node_modules")  # type: ignore[arg-type]

        assert validate_config(config) == ["analysis.excludePaths must be an array"]

    def test_invalid_pattern(self) -> None:
        config = PullmasterConfig(github_token="t", exclude_paths=["ok", "("])

        issues = validate_config(config)

        assert len(issues) == 1
        assert "invalid pattern" in issues[0]

    def test_ai_model_must_be_string(self) -> None:
        config = PullmasterConfig(github_token="t", ai_model=4)  # type: ignore[arg-type]

        assert validate_config(config) == ["analysis.aiModel must be a string"]

    def test_bad_concurrency(self) -> None:
        config = PullmasterConfig(github_token="t", max_concurrency=0)

        assert validate_config(config) == ["github.maxConcurrency must be a positive integer"]

    @pytest.mark.parametrize("timeout", ["30", 0, -1.5, True, None])
    def test_bad_timeout(self, timeout: object) -> None:
        config = PullmasterConfig(github_token="t", timeout=timeout)  # type: ignore[arg-type]

        assert validate_config(config) == ["github.timeout must be a positive number"]

    @pytest.mark.parametrize("api_url", ["", "api.github.com", "ftp://example.com", 42])
    def test_bad_api_url(self, api_url: object) -> None:
        config = PullmasterConfig(github_token="t", api_url=api_url)  # type: ignore[arg-type]

        assert validate_config(config) == ["github.apiUrl must be an http(s) URL"]

    def test_non_numeric_timeout_from_file(self, tmp_path: Path) -> None:
        path = write_config(
            tmp_path / CONFIG_FILENAME,
            {"github": {"token": "t", "timeout": "soon"}, "analysis": {}},
        )

        assert validate_config(load_config(path)) == ["github.timeout must be a positive number"]

    def test_collects_every_issue(self) -> None:
        config = PullmasterConfig(max_files=0, max_concurrency=0)

        assert len(validate_config(config)) == 3


def test_filter_config_from_settings() -> None:
    config = PullmasterConfig.from_dict(SAMPLE)

    filter_config = config.filter_config()

    assert filter_config.max_files == 25
    assert filter_config.exclude_patterns == (r"\.lock$", "^vendor/")
