"""
Project configuration file (.repo2ctx.json).

Holds the list of repositories a ``build`` combines and the default output
settings. Missing files yield defaults; unknown keys are ignored.
"""

import json
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .core.allocator import BudgetPolicy
from .core.serializer import OutputFormat
from .exceptions import ConfigError

CONFIG_FILE = ".repo2ctx.json"


@dataclass
class RepoConfig:
    """One configured repository."""

    url: str
    ref: Optional[str] = None       # Git branch/tag/commit
    paths: Optional[List[str]] = None
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class OutputConfig:
    """Default output settings for ``build``."""

    format: str = OutputFormat.MARKDOWN.value
    max_tokens: int = 100_000
    include_tests: bool = True
    budget_policy: str = BudgetPolicy.FIXED_DENOMINATOR.value


@dataclass
class ProjectConfig:
    """Contents of the project configuration file."""

    repos: List[RepoConfig] = field(default_factory=list)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repos": [r.to_dict() for r in self.repos],
            "output": asdict(self.output),
        }


def _string_list(value: Any, key: str) -> Optional[List[str]]:
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return value


def _repo_from_dict(data: Any) -> RepoConfig:
    if not isinstance(data, dict) or not isinstance(data.get("url"), str):
        raise ConfigError("Each repository entry needs a 'url' string")
    ref = data.get("ref")
    if ref is not None and not isinstance(ref, str):
        raise ConfigError("'ref' must be a string")
    return RepoConfig(
        url=data["url"],
        ref=ref,
        paths=_string_list(data.get("paths"), "paths"),
        include=_string_list(data.get("include"), "include"),
        exclude=_string_list(data.get("exclude"), "exclude"),
    )


def _output_from_dict(data: Any) -> OutputConfig:
    if not isinstance(data, dict):
        raise ConfigError("'output' must be an object")
    output = OutputConfig()
    if "format" in data:
        try:
            output.format = OutputFormat(data["format"]).value
        except ValueError:
            raise ConfigError(f"Unknown output format: {data['format']}")
    if "maxTokens" in data or "max_tokens" in data:
        value = data.get("max_tokens", data.get("maxTokens"))
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError("'max_tokens' must be an integer")
        output.max_tokens = value
    if "include_tests" in data or "includeTests" in data:
        value = data.get("include_tests", data.get("includeTests"))
        if not isinstance(value, bool):
            raise ConfigError("'include_tests' must be a boolean")
        output.include_tests = value
    if "budget_policy" in data:
        try:
            output.budget_policy = BudgetPolicy(data["budget_policy"]).value
        except ValueError:
            raise ConfigError(f"Unknown budget policy: {data['budget_policy']}")
    return output


def config_path(directory: Optional[str] = None) -> str:
    return os.path.join(directory or os.getcwd(), CONFIG_FILE)


def load_config(directory: Optional[str] = None) -> ProjectConfig:
    """
    Load the project configuration.

    Args:
        directory: Directory holding the config file; defaults to the cwd.

    Returns:
        The parsed configuration, or defaults when the file is missing.

    Raises:
        ConfigError: If the file is not valid JSON or has wrongly typed values.
    """
    path = config_path(directory)
    if not os.path.exists(path):
        return ProjectConfig()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")

    repos = data.get("repos", [])
    if not isinstance(repos, list):
        raise ConfigError("'repos' must be a list")

    return ProjectConfig(
        repos=[_repo_from_dict(r) for r in repos],
        output=_output_from_dict(data.get("output", {})),
    )


def save_config(config: ProjectConfig, directory: Optional[str] = None) -> str:
    """Write the configuration as indented JSON and return its path."""
    path = config_path(directory)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
        f.write("\n")
    return path
