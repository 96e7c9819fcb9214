"""Exception hierarchy for herald.

All errors raised by herald derive from :class:`HeraldError`, so callers
can decide in one place whether to abort or continue a release.
"""

from __future__ import annotations


class HeraldError(Exception):
    """Base class for all herald errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# =============================================================================
# Version errors
# =============================================================================


class VersionError(HeraldError):
    """Base class for version parsing errors."""


class EmptyVersionError(VersionError):
    """Raised when an empty string is parsed as a version."""


class InvalidVersionError(VersionError):
    """Raised when a string is not a valid semantic version."""

    def __init__(self, message: str, *, value: str | None = None) -> None:
        super().__init__(message)
        self.value = value


# =============================================================================
# Configuration errors
# =============================================================================


class ConfigError(HeraldError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when pyproject.toml cannot be located."""


class ConfigValidationError(ConfigError):
    """Raised when configuration values fail validation."""


class UnknownSemverLevelError(ConfigError):
    """Raised when a commit type maps to a level other than major/minor/patch/none."""

    def __init__(self, message: str, *, level: str | None = None) -> None:
        super().__init__(message)
        self.level = level


# =============================================================================
# Changelog errors
# =============================================================================


class ChangelogError(HeraldError):
    """Base class for changelog errors."""


class ChangelogIOError(ChangelogError):
    """Raised when the changelog file cannot be read or written."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
