"""Semantic version parsing and manipulation.

This module implements the subset of Semantic Versioning 2.0.0 needed
for release automation: parsing tags such as ``v1.2.3-rc.1+build5``,
precedence comparison, bumping, and pre-release creation.

Versions are immutable. Every transformation returns a new instance.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import TYPE_CHECKING

from herald.exceptions import EmptyVersionError, InvalidVersionError, UnknownSemverLevelError

if TYPE_CHECKING:
    from collections.abc import Iterable

# Only "v" is recognized as a tag prefix when parsing.
VERSION_PREFIX = "v"

_NUMERIC = r"0|[1-9]\d*"
_PRERELEASE_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_IDENT = r"[0-9a-zA-Z-]+"

SEMVER_PATTERN = re.compile(
    rf"(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?P<prerelease>-{_PRERELEASE_IDENT}(?:\.{_PRERELEASE_IDENT})*)?"
    rf"(?P<build>\+{_BUILD_IDENT}(?:\.{_BUILD_IDENT})*)?",
    re.ASCII,
)


class BumpType(IntEnum):
    """Magnitude of a version increment.

    Members are ordered ``NONE < PATCH < MINOR < MAJOR`` so the strongest
    bump of a commit set is simply ``max()`` over its members.
    """

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    def __str__(self) -> str:
        return self.name.lower()


def parse_bump_type(value: str | BumpType) -> BumpType:
    """Parse a bump level name.

    Args:
        value: One of ``major``, ``minor``, ``patch`` or ``none``
               (case-insensitive), or an existing :class:`BumpType`

    Returns:
        Matching BumpType

    Raises:
        UnknownSemverLevelError: If the name is not a known level
    """
    if isinstance(value, BumpType):
        return value
    if isinstance(value, str):
        try:
            return BumpType[value.strip().upper()]
        except KeyError:
            pass
    raise UnknownSemverLevelError(
        f"Invalid semver level '{value}' (must be: major, minor, patch, or none)",
        level=str(value),
    )


@dataclass(frozen=True)
class Version:
    """A semantic version.

    ``prerelease`` and ``build`` keep their leading ``-`` / ``+`` so that
    rendering is plain concatenation. ``raw`` holds the text a version was
    parsed from; constructed and derived versions get their rendered form.
    Equality ignores ``raw``.
    """

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: str = ""
    build: str = ""
    prefix: str = ""
    raw: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if self.major < 0 or self.minor < 0 or self.patch < 0:
            raise InvalidVersionError(
                f"Version components must be non-negative: {self.major}.{self.minor}.{self.patch}"
            )
        if not self.raw:
            object.__setattr__(self, "raw", self.render())

    def __str__(self) -> str:
        return self.render()

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string such as ``1.2.3`` or ``v1.2.3-rc.1+build5``.

        Args:
            text: Version string, optionally prefixed with ``v``

        Returns:
            Parsed Version

        Raises:
            EmptyVersionError: If text is empty
            InvalidVersionError: If text is not a valid semantic version
        """
        if not text:
            raise EmptyVersionError("Version string cannot be empty")

        prefix = ""
        body = text
        if body.startswith(VERSION_PREFIX):
            prefix = VERSION_PREFIX
            body = body[len(VERSION_PREFIX) :]

        match = SEMVER_PATTERN.fullmatch(body)
        if match is None:
            raise InvalidVersionError(f"Invalid semantic version: {text}", value=text)

        return cls(
            major=_to_int(match.group("major")),
            minor=_to_int(match.group("minor")),
            patch=_to_int(match.group("patch")),
            prerelease=match.group("prerelease") or "",
            build=match.group("build") or "",
            prefix=prefix,
            raw=text,
        )

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def without_prefix(self) -> str:
        """Render ``major.minor.patch[-prerelease][+build]`` without the prefix."""
        return f"{self.major}.{self.minor}.{self.patch}{self.prerelease}{self.build}"

    def render(self) -> str:
        """Render the version including its stored prefix."""
        return self.prefix + self.without_prefix()

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    # -------------------------------------------------------------------------
    # Transformations
    # -------------------------------------------------------------------------

    def bump(self, bump_type: BumpType) -> Version:
        """Return the version incremented by ``bump_type``.

        Pre-release and build metadata are cleared. ``BumpType.NONE``
        returns this version unchanged.
        """
        if bump_type == BumpType.NONE:
            return self
        if bump_type == BumpType.MAJOR:
            major, minor, patch = self.major + 1, 0, 0
        elif bump_type == BumpType.MINOR:
            major, minor, patch = self.major, self.minor + 1, 0
        else:
            major, minor, patch = self.major, self.minor, self.patch + 1
        return Version(major, minor, patch, prefix=self.prefix)

    def with_prerelease(self, label: str, iteration: int = 0) -> Version:
        """Return this version with a ``-label`` or ``-label.N`` pre-release.

        Core numbers, build metadata and prefix are preserved.
        """
        prerelease = f"-{label}.{iteration}" if iteration > 0 else f"-{label}"
        return replace(self, prerelease=prerelease, raw="")

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def compare(self, other: Version) -> int:
        """Compare by semantic-version precedence.

        Returns:
            -1, 0 or 1. Build metadata and prefix never participate.
        """
        core = (self.major, self.minor, self.patch)
        other_core = (other.major, other.minor, other.patch)
        if core != other_core:
            return -1 if core < other_core else 1
        return _compare_prerelease(self.prerelease, other.prerelease)

    def __lt__(self, other: Version) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: Version) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: Version) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: Version) -> bool:
        return self.compare(other) >= 0


def _to_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def _compare_prerelease(left: str, right: str) -> int:
    """Compare two pre-release suffixes (with leading ``-``) per SemVer §11."""
    if left == right:
        return 0
    # A release outranks any of its pre-releases.
    if not left:
        return 1
    if not right:
        return -1

    left_ids = left[1:].split(".")
    right_ids = right[1:].split(".")
    for a, b in zip(left_ids, right_ids, strict=False):
        if a == b:
            continue
        a_numeric, b_numeric = a.isdigit(), b.isdigit()
        if a_numeric and b_numeric:
            return -1 if int(a) < int(b) else 1
        if a_numeric:
            return -1
        if b_numeric:
            return 1
        return -1 if a < b else 1

    if len(left_ids) == len(right_ids):
        return 0
    return -1 if len(left_ids) < len(right_ids) else 1


# =============================================================================
# Module-level helpers
# =============================================================================


def parse_version(text: str) -> Version:
    """Parse a version string. See :meth:`Version.parse`."""
    return Version.parse(text)


def compare_versions(a: Version, b: Version) -> int:
    return a.compare(b)


def next_version(current: Version, bump_type: BumpType) -> Version:
    """Calculate the next version, keeping ``current`` when nothing changed."""
    if bump_type == BumpType.NONE:
        return current
    return current.bump(bump_type)


def format_tag_name(version: Version, prefix: str = "") -> str:
    """Format a version as a tag name.

    A configured ``prefix`` replaces whatever prefix the version carries.
    """
    if prefix:
        return prefix + version.without_prefix()
    return version.render()


def find_latest_version(candidates: Iterable[str], initial: str) -> Version:
    """Find the highest valid version among tag strings.

    Unparsable candidates are skipped. Falls back to ``initial`` when no
    candidate is a valid version.
    """
    latest: Version | None = None
    for candidate in candidates:
        try:
            version = Version.parse(candidate)
        except (EmptyVersionError, InvalidVersionError):
            continue
        if latest is None or version > latest:
            latest = version

    if latest is None:
        return Version.parse(initial)
    return latest


def suggest_versions(current: Version, bump_type: BumpType) -> dict[str, Version]:
    """Suggest next versions for every bump level.

    The resolved bump is offered as ``"auto"`` and under its own name;
    the remaining levels are offered as explicit alternatives.
    """
    suggestions: dict[str, Version] = {}
    if bump_type != BumpType.NONE:
        auto = current.bump(bump_type)
        suggestions["auto"] = auto
        suggestions[str(bump_type)] = auto

    for level in (BumpType.MAJOR, BumpType.MINOR, BumpType.PATCH):
        if level != bump_type:
            suggestions[str(level)] = current.bump(level)

    return suggestions
