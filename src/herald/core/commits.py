"""Conventional commit parsing and bump resolution.

This module turns raw commit records into structured
:class:`ConventionalCommit` values and decides which version bump a set
of commits implies.

Supported subject format::

    <type>[(scope)]: <description>

Breaking changes are signalled by ``!:`` in the subject or by a
breaking-change keyword (``BREAKING CHANGE`` / ``BREAKING-CHANGE`` by
default) anywhere in the subject or body.

Classification never fails: subjects that do not follow the convention
get the type ``"other"`` and keep their full subject as description.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from herald.core.version import BumpType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from herald.config.models import CommitTypeConfig

# Type assigned to subjects that are not conventional commits
OTHER_TYPE = "other"

DEFAULT_BREAKING_KEYWORDS: tuple[str, ...] = ("BREAKING CHANGE", "BREAKING-CHANGE")

# Marker for "type!:" and "type(scope)!:". Matched as a plain substring of the subject.
BREAKING_MARKER = "!:"

# Always shown in the changelog
ALWAYS_SHOWN_TYPES: frozenset[str] = frozenset({"feat", "fix"})

# Shown only when the commit is breaking
BREAKING_ONLY_TYPES: frozenset[str] = frozenset({"docs", "style", "refactor", "test", "chore"})

# Section order in the changelog; remaining types follow in first-seen order
TYPE_PRIORITY: tuple[str, ...] = ("feat", "fix", "docs", "style", "refactor", "test", "chore")

COMMIT_PATTERN = re.compile(
    r"^(?P<type>\w+)"  # type (e.g. feat, fix, chore)
    r"(?:\((?P<scope>[^()]+)\))?"  # optional scope in parens
    r": (?P<description>.+)$"
)

SHORT_SHA_LENGTH = 7


@dataclass(frozen=True)
class Commit:
    """A raw commit record as delivered by the version-control adapter."""

    sha: str
    subject: str
    body: str = ""
    author_name: str = ""
    author_email: str = ""
    date: datetime | None = None

    @classmethod
    def from_message(
        cls,
        sha: str,
        message: str,
        author_name: str = "",
        author_email: str = "",
        date: datetime | None = None,
    ) -> Commit:
        """Build a commit from a full message, splitting subject and body.

        The first line is the subject; everything after the first blank
        line separator is the body.
        """
        subject, _, rest = message.partition("\n")
        return cls(
            sha=sha,
            subject=subject.strip(),
            body=rest.strip("\n"),
            author_name=author_name,
            author_email=author_email,
            date=date,
        )

    @property
    def message(self) -> str:
        """Full commit message (subject, blank line, body)."""
        if self.body:
            return f"{self.subject}\n\n{self.body}"
        return self.subject

    @property
    def short_sha(self) -> str:
        return self.sha[:SHORT_SHA_LENGTH]


@dataclass(frozen=True)
class ConventionalCommit:
    """A commit classified according to the Conventional Commits convention.

    Attributes:
        commit_type: Commit type (``feat``, ``fix``, ...) or ``"other"``
        scope: Optional scope, empty when absent
        description: Subject text after the ``type(scope):`` prefix
        body: Commit body
        is_breaking: Whether the commit signals a breaking change
        breaking_descriptions: Text following each breaking-change keyword
        commit: The raw commit this was classified from
    """

    commit_type: str
    description: str
    commit: Commit
    scope: str = ""
    body: str = ""
    is_breaking: bool = False
    breaking_descriptions: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_conventional(self) -> bool:
        return self.commit_type != OTHER_TYPE

    @property
    def sha(self) -> str:
        return self.commit.sha

    @classmethod
    def from_commit(
        cls,
        commit: Commit,
        keywords: Sequence[str] = DEFAULT_BREAKING_KEYWORDS,
    ) -> ConventionalCommit:
        """Classify a raw commit.

        Args:
            commit: Raw commit record
            keywords: Breaking-change keywords searched in subject and body

        Returns:
            Classified commit; never raises
        """
        match = COMMIT_PATTERN.match(commit.subject)
        if match is None:
            commit_type = OTHER_TYPE
            scope = ""
            description = commit.subject
        else:
            commit_type = match.group("type")
            scope = match.group("scope") or ""
            description = match.group("description")

        full_message = f"{commit.subject}\n{commit.body}"

        return cls(
            commit_type=commit_type,
            scope=scope,
            description=description,
            body=commit.body,
            is_breaking=_has_breaking_change(commit.subject, full_message, keywords),
            breaking_descriptions=_extract_breaking_changes(full_message, keywords),
            commit=commit,
        )


def _has_breaking_change(subject: str, full_message: str, keywords: Sequence[str]) -> bool:
    # Substring check: also fires on "!:" later in the subject.
    if BREAKING_MARKER in subject:
        return True
    return any(keyword in full_message for keyword in keywords)


def _extract_breaking_changes(full_message: str, keywords: Sequence[str]) -> tuple[str, ...]:
    """Collect the text after each breaking-change keyword, line by line."""
    descriptions: list[str] = []
    lines = full_message.split("\n")

    for keyword in keywords:
        if keyword not in full_message:
            continue
        for line in lines:
            if keyword not in line:
                continue
            description = line.split(keyword, 1)[1].strip()
            if description.startswith(":"):
                description = description[1:].strip()
            if description:
                descriptions.append(description)

    return tuple(descriptions)


# =============================================================================
# Classification
# =============================================================================


def parse_commit(
    commit: Commit,
    keywords: Sequence[str] = DEFAULT_BREAKING_KEYWORDS,
) -> ConventionalCommit:
    """Classify a single raw commit. See :meth:`ConventionalCommit.from_commit`."""
    return ConventionalCommit.from_commit(commit, keywords)


def parse_commits(
    commits: Iterable[Commit],
    keywords: Sequence[str] = DEFAULT_BREAKING_KEYWORDS,
) -> list[ConventionalCommit]:
    """Classify a sequence of raw commits, preserving their order."""
    return [ConventionalCommit.from_commit(commit, keywords) for commit in commits]


# =============================================================================
# Bump resolution
# =============================================================================


def calculate_bump(
    commits: Iterable[ConventionalCommit],
    types: Mapping[str, CommitTypeConfig],
) -> BumpType:
    """Determine the version bump implied by a set of commits.

    Any breaking commit yields ``MAJOR``. Otherwise the result is the
    highest severity configured for the commit types present; types
    missing from ``types`` contribute ``NONE``.

    Args:
        commits: Classified commits
        types: Commit type configuration (type name -> title/severity)

    Returns:
        The bump to apply, ``NONE`` for an empty commit list
    """
    bump = BumpType.NONE
    for commit in commits:
        if commit.is_breaking:
            return BumpType.MAJOR
        type_config = types.get(commit.commit_type)
        if type_config is not None:
            bump = max(bump, type_config.semver)
    return bump


# =============================================================================
# Changelog selection helpers
# =============================================================================


def filter_commits_for_changelog(
    commits: Iterable[ConventionalCommit],
    *,
    include_all: bool = False,
) -> list[ConventionalCommit]:
    """Select the commits shown in a changelog section.

    ``feat`` and ``fix`` are always shown, housekeeping types only when
    breaking, and any other type is shown so no history is hidden.
    """
    if include_all:
        return list(commits)

    selected = []
    for commit in commits:
        if commit.commit_type in ALWAYS_SHOWN_TYPES:
            selected.append(commit)
        elif commit.commit_type in BREAKING_ONLY_TYPES:
            if commit.is_breaking:
                selected.append(commit)
        else:
            selected.append(commit)
    return selected


def group_commits_by_type(
    commits: Iterable[ConventionalCommit],
) -> dict[str, list[ConventionalCommit]]:
    """Group commits by type, preserving relative order within each group."""
    groups: dict[str, list[ConventionalCommit]] = {}
    for commit in commits:
        groups.setdefault(commit.commit_type, []).append(commit)
    return groups


def sort_commit_types(groups: Mapping[str, Sequence[ConventionalCommit]]) -> list[str]:
    """Order the types of a grouping for display.

    Priority types come first, the rest keep the grouping's iteration order.
    """
    ordered = [commit_type for commit_type in TYPE_PRIORITY if commit_type in groups]
    ordered.extend(commit_type for commit_type in groups if commit_type not in TYPE_PRIORITY)
    return ordered


def get_breaking_changes(commits: Iterable[ConventionalCommit]) -> list[ConventionalCommit]:
    return [commit for commit in commits if commit.is_breaking]


def is_known_type(commit_type: str, types: Mapping[str, CommitTypeConfig]) -> bool:
    return commit_type in types


def get_commit_type_title(commit_type: str, types: Mapping[str, CommitTypeConfig]) -> str:
    """Display title for a type, falling back to the title-cased type name."""
    type_config = types.get(commit_type)
    if type_config is not None:
        return type_config.title
    return commit_type.title()


def format_commit_for_changelog(
    commit: ConventionalCommit,
    *,
    include_scope: bool = True,
    include_sha: bool = True,
) -> str:
    """Format a commit as a changelog bullet body (without the bullet).

    The short SHA reference is only added for SHAs of at least 7 characters.
    """
    parts = []
    if include_scope and commit.scope:
        parts.append(f"**{commit.scope}:** ")
    parts.append(commit.description)
    if include_sha and len(commit.sha) >= SHORT_SHA_LENGTH:
        parts.append(f" ([{commit.commit.short_sha}])")
    return "".join(parts)
