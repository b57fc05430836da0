"""
Pullmaster configuration.

Configuration lives in a JSON ``.pullmasterrc`` file found by walking up
from the working directory, falling back to the user's home directory.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pullmaster.exceptions import ConfigurationError
from pullmaster.filters import FilterConfig

CONFIG_FILENAME = ".pullmasterrc"

DEFAULT_MAX_FILES = 50
DEFAULT_AI_MODEL = "gpt-4"


@dataclass
class PullmasterConfig:
    """Validated settings for one run."""

    github_token: str = ""
    max_files: int | None = None
    exclude_paths: list[str] = field(default_factory=list)
    ai_model: str = DEFAULT_AI_MODEL
    api_url: str = "https://api.github.com"
    max_concurrency: int = 10
    timeout: float = 30.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PullmasterConfig":
        """Build a config from the on-disk JSON layout."""
        github = data.get("github") or {}
        analysis = data.get("analysis") or {}
        defaults = cls()
        return cls(
            github_token=github.get("token", ""),
            api_url=github.get("apiUrl", defaults.api_url),
            timeout=github.get("timeout", defaults.timeout),
            max_concurrency=github.get("maxConcurrency", defaults.max_concurrency),
            max_files=analysis.get("maxFiles"),
            exclude_paths=analysis.get("excludePaths", []),
            ai_model=analysis.get("aiModel", defaults.ai_model),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the on-disk JSON layout."""
        analysis: dict[str, Any] = {
            "excludePaths": list(self.exclude_paths),
            "aiModel": self.ai_model,
        }
        if self.max_files is not None:
            analysis["maxFiles"] = self.max_files
        return {
            "github": {
                "token": self.github_token,
                "apiUrl": self.api_url,
                "timeout": self.timeout,
                "maxConcurrency": self.max_concurrency,
            },
            "analysis": analysis,
        }

    def filter_config(self) -> FilterConfig:
        return FilterConfig(
            max_files=self.max_files,
            exclude_patterns=tuple(self.exclude_paths),
        )


def find_config(start: Path | str | None = None, home: Path | None = None) -> Path:
    """
    Find the nearest config file.

    Walks from start (default: the working directory) up to the filesystem
    root. Returns the home-directory path when no ancestor holds one; that
    file may not exist.
    """
    current = Path(start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return (home or Path.home()) / CONFIG_FILENAME


def load_config(path: Path | str | None = None) -> PullmasterConfig:
    """
    Load configuration from path, or from the nearest config file.

    Raises:
        ConfigurationError: If the file is missing or cannot be parsed
    """
    config_path = Path(path) if path else find_config()
    try:
        raw = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigurationError(
            "Configuration file not found. Run 'pullmaster configure --init' to create one."
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Error loading configuration: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Error loading configuration: top level must be an object"
        )

    return PullmasterConfig.from_dict(data)


def save_config(config: PullmasterConfig, path: Path | str | None = None) -> Path:
    """Write configuration as indented JSON and return the path written."""
    config_path = Path(path) if path else find_config()
    try:
        config_path.write_text(
            json.dumps(config.to_dict(), indent=2), encoding="utf-8"
        )
    except OSError as e:
        raise ConfigurationError(f"Error saving configuration: {e}") from e
    return config_path


def init_config(
    existing: PullmasterConfig | None = None, token: str | None = None
) -> PullmasterConfig:
    """Fill in defaults for a new configuration, keeping existing values."""
    config = existing or PullmasterConfig()
    if token:
        config.github_token = token
    if not config.max_files:
        config.max_files = DEFAULT_MAX_FILES
    if not config.ai_model:
        config.ai_model = DEFAULT_AI_MODEL
    return config


def validate_config(config: PullmasterConfig) -> list[str]:
    """
    Check a configuration and return human-readable issues.

    An empty list means the configuration is valid.
    """
    issues = []

    if not config.github_token:
        issues.append("GitHub token is missing")

    max_files = config.max_files
    if max_files is not None and (
        isinstance(max_files, bool) or not isinstance(max_files, int) or max_files < 1
    ):
        issues.append("analysis.maxFiles must be a positive integer")

    if not isinstance(config.exclude_paths, list):
        issues.append("analysis.excludePaths must be an array")
    else:
        for pattern in config.exclude_paths:
            try:
                re.compile(pattern)
            except (re.error, TypeError):
                issues.append(
                    f"analysis.excludePaths contains an invalid pattern: {pattern!r}"
                )

    if not isinstance(config.ai_model, str):
        issues.append("analysis.aiModel must be a string")

    if (
        isinstance(config.max_concurrency, bool)
        or not isinstance(config.max_concurrency, int)
        or config.max_concurrency < 1
    ):
        issues.append("github.maxConcurrency must be a positive integer")

    timeout = config.timeout
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        issues.append("github.timeout must be a positive number")

    if not isinstance(config.api_url, str) or not config.api_url.startswith(
        ("http://", "https://")
    ):
        issues.append("github.apiUrl must be an http(s) URL")

    return issues
