"""Release pipeline.

Ties the pieces together the way a release run uses them::

    raw commits -> classified commits -> bump -> next version
                -> release section -> merged changelog

Fetching commits and tags and creating the tag itself belong to the
caller; this module only decides and renders.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from herald.core.changelog import Release, build_release, prepend_release, render_release
from herald.core.commits import calculate_bump, parse_commits
from herald.core.version import BumpType, Version, format_tag_name, next_version

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from herald.config.models import HeraldConfig
    from herald.core.commits import Commit, ConventionalCommit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleasePlan:
    """Outcome of a release decision.

    Attributes:
        current_version: Version of the latest tag, or the initial version
        bump: Bump resolved from the commits
        next_version: Version to release
        tag_name: Tag text for ``next_version`` using the configured prefix
        commits: Classified commits the decision was made from
        release: Release entry for the changelog
        section: Rendered markdown section for ``release``
        is_first_release: True when there was no previous tag
    """

    current_version: Version
    bump: BumpType
    next_version: Version
    tag_name: str
    commits: tuple[ConventionalCommit, ...]
    release: Release
    section: str
    is_first_release: bool = False

    @property
    def has_changes(self) -> bool:
        """Whether the commits warrant a new version."""
        return self.bump != BumpType.NONE


def resolve_current_version(latest_tag: str | None, config: HeraldConfig) -> Version:
    """Parse the latest tag, falling back to the configured initial version.

    Raises:
        EmptyVersionError: If the tag is empty
        InvalidVersionError: If the tag is not a semantic version
    """
    if latest_tag is None:
        return Version.parse(config.version.initial_version)
    return Version.parse(latest_tag)


def plan_release(
    commits: Iterable[Commit],
    config: HeraldConfig,
    latest_tag: str | None = None,
    date: datetime | None = None,
) -> ReleasePlan:
    """Decide the next version and render its changelog section.

    Args:
        commits: Raw commits since ``latest_tag``, in delivery order
        config: Release configuration
        latest_tag: Latest release tag, ``None`` for a first release
        date: Release date, defaults to now (UTC)

    Returns:
        The release plan; ``next_version`` equals ``current_version``
        when no commit warrants a bump
    """
    current = resolve_current_version(latest_tag, config)
    classified = parse_commits(commits, config.commits.breaking_change_keywords)
    bump = calculate_bump(classified, config.commits.types)
    upcoming = next_version(current, bump)

    logger.debug(
        "Resolved %s bump from %d commits: %s -> %s", bump, len(classified), current, upcoming
    )

    release = build_release(upcoming, classified, config, date=date)
    return ReleasePlan(
        current_version=current,
        bump=bump,
        next_version=upcoming,
        tag_name=format_tag_name(upcoming, config.effective_tag_prefix),
        commits=tuple(classified),
        release=release,
        section=render_release(release, config),
        is_first_release=latest_tag is None,
    )


def write_release(plan: ReleasePlan, config: HeraldConfig, root: Path | None = None) -> Path:
    """Merge the plan's release into the configured changelog file.

    Args:
        plan: Plan from :func:`plan_release`
        config: Release configuration
        root: Directory the changelog path is relative to (defaults to cwd)

    Returns:
        Path of the written changelog

    Raises:
        ChangelogIOError: If the changelog cannot be read or written
    """
    changelog_path = (root or Path.cwd()) / config.changelog_path
    logger.info("Updating changelog %s for %s", changelog_path, plan.next_version)
    prepend_release(changelog_path, plan.release, config)
    return changelog_path
