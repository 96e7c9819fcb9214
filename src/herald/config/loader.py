"""Configuration loading from pyproject.toml.

herald reads its settings from the ``[tool.herald]`` table::

    [tool.herald.version]
    initial_version = "0.1.0"
    tag_prefix = "v"

    [tool.herald.commits.types.perf]
    title = "Performance"
    semver = "patch"

Commit types listed under ``[tool.herald.commits.types]`` are merged over
the default type table.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from herald.config.models import HeraldConfig, default_commit_types
from herald.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

PYPROJECT_FILENAME = "pyproject.toml"
TOOL_SECTION = "herald"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or one of its parents.

    Args:
        start: Directory to start searching from (defaults to cwd)

    Returns:
        Path to pyproject.toml

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / PYPROJECT_FILENAME
        if candidate.is_file():
            return candidate

    raise ConfigNotFoundError(f"Could not find {PYPROJECT_FILENAME} in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigNotFoundError(f"Configuration file not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_herald_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.herald]`` table, or an empty dict when absent."""
    return pyproject.get("tool", {}).get(TOOL_SECTION, {})


def build_config(data: dict[str, Any]) -> HeraldConfig:
    """Validate raw configuration data into a :class:`HeraldConfig`.

    Raises:
        ConfigValidationError: If the data fails validation
        UnknownSemverLevelError: If a commit type has an unknown semver level
    """
    data = dict(data)
    raw_commits = data.get("commits") or {}
    if not isinstance(raw_commits, dict):
        raise ConfigValidationError("Invalid herald configuration: commits must be a table")
    commits = dict(raw_commits)
    if "types" in commits:
        if not isinstance(commits["types"], dict):
            raise ConfigValidationError("Invalid herald configuration: commits.types must be a table")
        types: dict[str, Any] = dict(default_commit_types())
        types.update(commits["types"])
        commits["types"] = types
        data["commits"] = commits

    try:
        return HeraldConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid herald configuration: {e}") from e


def load_config(path: Path | None = None) -> HeraldConfig:
    """Load configuration for the project at ``path``.

    Args:
        path: Project directory or pyproject.toml path (defaults to cwd)

    Returns:
        Validated configuration; defaults when no ``[tool.herald]`` table exists
    """
    if path is not None and path.is_file():
        pyproject_path = path
    else:
        pyproject_path = find_pyproject_toml(path)

    data = extract_herald_config(load_pyproject_toml(pyproject_path))
    if not data:
        logger.debug("No [tool.%s] table in %s, using defaults", TOOL_SECTION, pyproject_path)
    return build_config(data)
