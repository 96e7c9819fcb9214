"""Changelog assembly.

This module builds a :class:`Release` from classified commits, renders it
as a Keep a Changelog style markdown section, and merges that section
into an existing changelog document.

Merging is idempotent in shape: the document keeps exactly one
``# Changelog`` header and new releases are always inserted above the
previous ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from herald.core.commits import (
    filter_commits_for_changelog,
    format_commit_for_changelog,
    get_breaking_changes,
    get_commit_type_title,
    group_commits_by_type,
    sort_commit_types,
)
from herald.exceptions import ChangelogIOError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from herald.config.models import HeraldConfig
    from herald.core.commits import ConventionalCommit
    from herald.core.version import Version

logger = logging.getLogger(__name__)

CHANGELOG_MARKER = "# Changelog"

CHANGELOG_HEADER = (
    "# Changelog\n"
    "\n"
    "All notable changes to this project will be documented in this file.\n"
    "\n"
    "The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),\n"
    "and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).\n"
    "\n"
)

RELEASE_HEADING_PREFIX = "## "

BREAKING_SECTION_TITLE = "### ⚠ BREAKING CHANGES"


@dataclass(frozen=True)
class Release:
    """A release entry ready to be rendered.

    ``commits`` and ``grouped_commits`` hold the commits selected for
    display, while ``breaking_changes`` is computed from every commit so
    hidden housekeeping types still surface when they break things.
    """

    version: Version
    date: datetime
    commits: tuple[ConventionalCommit, ...] = ()
    grouped_commits: dict[str, list[ConventionalCommit]] = field(default_factory=dict)
    breaking_changes: tuple[ConventionalCommit, ...] = ()


def build_release(
    version: Version,
    commits: Sequence[ConventionalCommit],
    config: HeraldConfig,
    date: datetime | None = None,
) -> Release:
    """Build a release entry from classified commits.

    Args:
        version: Version being released
        commits: Classified commits, in delivery order
        config: Release configuration
        date: Release date, defaults to now (UTC)

    Returns:
        Release ready to be rendered
    """
    filtered = filter_commits_for_changelog(commits, include_all=config.changelog.include_all)
    return Release(
        version=version,
        date=date or datetime.now(UTC),
        commits=tuple(filtered),
        grouped_commits=group_commits_by_type(filtered),
        breaking_changes=tuple(get_breaking_changes(commits)),
    )


def render_release(release: Release, config: HeraldConfig) -> str:
    """Render a release as a markdown section.

    The section ends with a blank line so sections can be concatenated.
    """
    types = config.commits.types
    lines = [
        f"{RELEASE_HEADING_PREFIX}[{release.version}] - {release.date.strftime('%Y-%m-%d')}",
        "",
    ]

    if release.breaking_changes:
        lines.append(BREAKING_SECTION_TITLE)
        lines.append("")
        for commit in release.breaking_changes:
            scope = f" (**{commit.scope}**)" if commit.scope else ""
            lines.append(f"* {commit.description}{scope}")
            lines.extend(f"  {detail}" for detail in commit.breaking_descriptions if detail)
        lines.append("")

    for commit_type in sort_commit_types(release.grouped_commits):
        commits_of_type = release.grouped_commits[commit_type]
        if not commits_of_type:
            continue
        lines.append(f"### {get_commit_type_title(commit_type, types)}")
        lines.append("")
        lines.extend(f"* {format_commit_for_changelog(commit)}" for commit in commits_of_type)
        lines.append("")

    return "\n".join(lines) + "\n"


def merge_into_document(existing: str, section: str) -> str:
    """Insert a rendered release section into a changelog document.

    Without a ``# Changelog`` header, a standard header is synthesized and
    the existing text is kept verbatim below the new section. With a
    header, the new section is inserted right before the first release
    heading (a line starting with ``## ``), keeping the header block and
    every earlier release. A header with no releases gets the section
    appended.

    Args:
        existing: Current document text, empty when there is no file
        section: Output of :func:`render_release`

    Returns:
        The new document text
    """
    if CHANGELOG_MARKER not in existing:
        return CHANGELOG_HEADER + section + existing

    lines = existing.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if line.startswith(RELEASE_HEADING_PREFIX):
            logger.debug("Existing releases start at line %d", index + 1)
            header = "".join(lines[:index])
            releases = "".join(lines[index:])
            return header + section + releases

    logger.debug("Changelog header has no releases yet")
    header = existing.rstrip("\n") + "\n\n"
    return header + section


# =============================================================================
# File I/O
# =============================================================================


def read_changelog(path: Path) -> str:
    """Read the changelog, treating a missing file as an empty document.

    Raises:
        ChangelogIOError: If the file exists but cannot be read
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("Changelog %s does not exist yet", path)
        return ""
    except (OSError, UnicodeDecodeError) as e:
        raise ChangelogIOError(f"Failed to read changelog file {path}: {e}", path=str(path)) from e


def write_changelog(path: Path, content: str) -> None:
    """Write the changelog document.

    Raises:
        ChangelogIOError: If the file cannot be written
    """
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ChangelogIOError(f"Failed to write changelog file {path}: {e}", path=str(path)) from e
    logger.info("Wrote changelog %s", path)


def prepend_release(path: Path, release: Release, config: HeraldConfig) -> str:
    """Merge a release into the changelog file at ``path``.

    Returns:
        The document text that was written
    """
    existing = read_changelog(path)
    content = merge_into_document(existing, render_release(release, config))
    write_changelog(path, content)
    return content


def render_full_changelog(releases: Iterable[Release], config: HeraldConfig) -> str:
    """Render a complete changelog document from scratch, newest release first."""
    return CHANGELOG_HEADER + "".join(render_release(release, config) for release in releases)


# =============================================================================
# Inspection
# =============================================================================


def preview_release(release: Release, config: HeraldConfig) -> str:
    return "=== CHANGELOG PREVIEW ===\n\n" + render_release(release, config) + "\n=== END PREVIEW ===\n"


def changelog_stats(release: Release) -> dict[str, int]:
    """Count displayed commits per type plus ``total`` and ``breaking_changes``."""
    stats = {commit_type: len(commits) for commit_type, commits in release.grouped_commits.items()}
    stats["total"] = len(release.commits)
    stats["breaking_changes"] = len(release.breaking_changes)
    return stats


def has_significant_changes(release: Release) -> bool:
    """Whether a release has breaking changes, features or fixes."""
    if release.breaking_changes:
        return True
    return any(release.grouped_commits.get(commit_type) for commit_type in ("feat", "fix"))


def format_commit_list(commits: Iterable[ConventionalCommit]) -> str:
    """Format commits as a numbered markdown list, flagging breaking ones."""
    lines = []
    for number, commit in enumerate(commits, start=1):
        line = f"{number}. {format_commit_for_changelog(commit, include_sha=False)}"
        if commit.is_breaking:
            line += " ⚠️"
        lines.append(line)
    return "\n".join(lines) + "\n" if lines else ""
