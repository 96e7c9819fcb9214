"""Shared fixtures for herald tests."""

from __future__ import annotations

from datetime import datetime

import pytest

from herald.config import HeraldConfig, default_config
from herald.core.commits import Commit


@pytest.fixture
def config() -> HeraldConfig:
    """Default configuration."""
    return default_config()


@pytest.fixture
def release_date() -> datetime:
    return datetime(2024, 3, 15, 12, 0, 0)


@pytest.fixture
def feat_commit() -> Commit:
    return Commit(
        sha="feat1234567890",
        subject="feat: add user authentication",
        author_name="Test",
        author_email="test@test.com",
        date=datetime(2024, 3, 1),
    )


@pytest.fixture
def fix_commit() -> Commit:
    return Commit(
        sha="fix1234567890",
        subject="fix(core): handle null response",
        author_name="Test",
        author_email="test@test.com",
        date=datetime(2024, 3, 2),
    )


@pytest.fixture
def breaking_commit() -> Commit:
    return Commit.from_message(
        "break1234567890",
        "feat!: remove legacy API\n\nBREAKING CHANGE: legacy API removed",
        author_name="Test",
        author_email="test@test.com",
        date=datetime(2024, 3, 3),
    )


@pytest.fixture
def sample_commits(feat_commit: Commit, fix_commit: Commit, breaking_commit: Commit) -> list[Commit]:
    """A typical mix of commits since the last release."""
    return [
        feat_commit,
        fix_commit,
        Commit("docs1234567890", "docs: update readme"),
        Commit("chore1234567890", "chore: bump dependencies"),
        breaking_commit,
    ]
