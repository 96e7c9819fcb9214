"""Configuration management for herald."""

from __future__ import annotations

from herald.config.loader import build_config, load_config
from herald.config.models import (
    ChangelogConfig,
    CommitsConfig,
    CommitTypeConfig,
    HeraldConfig,
    VersionConfig,
    default_commit_types,
    default_config,
)

__all__ = [
    "ChangelogConfig",
    "CommitTypeConfig",
    "CommitsConfig",
    "HeraldConfig",
    "VersionConfig",
    "build_config",
    "default_commit_types",
    "default_config",
    "load_config",
]
