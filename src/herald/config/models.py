"""Configuration models for herald.

Configuration is validated once, when it is built, so the release
pipeline can rely on every commit type resolving to a known bump level.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from herald.core.commits import DEFAULT_BREAKING_KEYWORDS, get_commit_type_title
from herald.core.version import BumpType, Version, parse_bump_type
from herald.exceptions import VersionError


class CommitTypeConfig(BaseModel):
    """Display title and version bump for one commit type."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str = Field(min_length=1)
    semver: BumpType = BumpType.NONE

    @field_validator("semver", mode="before")
    @classmethod
    def _parse_semver(cls, value: object) -> BumpType:
        # UnknownSemverLevelError is not a ValueError, so it is not wrapped by pydantic.
        return parse_bump_type(value)  # type: ignore[arg-type]


def default_commit_types() -> dict[str, CommitTypeConfig]:
    """Return the default commit type table."""
    return {
        "feat": CommitTypeConfig(title="Features", semver=BumpType.MINOR),
        "fix": CommitTypeConfig(title="Bug Fixes", semver=BumpType.PATCH),
        "docs": CommitTypeConfig(title="Documentation"),
        "style": CommitTypeConfig(title="Styles"),
        "refactor": CommitTypeConfig(title="Code Refactoring"),
        "test": CommitTypeConfig(title="Tests"),
        "chore": CommitTypeConfig(title="Chores"),
    }


class VersionConfig(BaseModel):
    """Version settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    initial_version: str = "0.1.0"
    tag_prefix: str = "v"

    @field_validator("initial_version")
    @classmethod
    def _check_initial_version(cls, value: str) -> str:
        try:
            Version.parse(value)
        except VersionError as e:
            raise ValueError(e.message) from e
        return value


class CommitsConfig(BaseModel):
    """Conventional commit settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    types: dict[str, CommitTypeConfig] = Field(default_factory=default_commit_types)
    breaking_change_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BREAKING_KEYWORDS)
    )

    @field_validator("types")
    @classmethod
    def _check_types(cls, value: dict[str, CommitTypeConfig]) -> dict[str, CommitTypeConfig]:
        if not value:
            raise ValueError("commits.types cannot be empty")
        return value


class ChangelogConfig(BaseModel):
    """Changelog settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: Path = Path("CHANGELOG.md")
    include_all: bool = False

    @field_validator("path", mode="before")
    @classmethod
    def _check_path(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            raise ValueError("changelog.path cannot be empty")
        return value


class HeraldConfig(BaseModel):
    """Root configuration for a release run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: VersionConfig = Field(default_factory=VersionConfig)
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)

    @property
    def effective_tag_prefix(self) -> str:
        return self.version.tag_prefix

    @property
    def changelog_path(self) -> Path:
        return self.changelog.path

    def type_title(self, commit_type: str) -> str:
        """Display title for a commit type, title-casing unconfigured types."""
        return get_commit_type_title(commit_type, self.commits.types)


def default_config() -> HeraldConfig:
    """Return a fresh default configuration."""
    return HeraldConfig()
