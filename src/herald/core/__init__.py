"""Core business logic for herald.

This module contains the fundamental building blocks:
- Semantic version parsing and manipulation
- Conventional commit parsing and bump resolution
- Changelog rendering and merging
- The release pipeline that ties them together
"""

from __future__ import annotations

from herald.core.changelog import (
    Release,
    build_release,
    merge_into_document,
    prepend_release,
    render_release,
)
from herald.core.commits import (
    Commit,
    ConventionalCommit,
    calculate_bump,
    filter_commits_for_changelog,
    get_breaking_changes,
    group_commits_by_type,
    parse_commit,
    parse_commits,
)
from herald.core.release import ReleasePlan, plan_release, write_release
from herald.core.version import BumpType, Version, next_version, parse_bump_type, parse_version

__all__ = [
    # Version
    "BumpType",
    # Commits
    "Commit",
    "ConventionalCommit",
    # Changelog
    "Release",
    # Release
    "ReleasePlan",
    "Version",
    "build_release",
    "calculate_bump",
    "filter_commits_for_changelog",
    "get_breaking_changes",
    "group_commits_by_type",
    "merge_into_document",
    "next_version",
    "parse_bump_type",
    "parse_commit",
    "parse_commits",
    "parse_version",
    "plan_release",
    "prepend_release",
    "render_release",
    "write_release",
]
