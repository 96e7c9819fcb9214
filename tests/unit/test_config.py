"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from herald.config.loader import (
    build_config,
    extract_herald_config,
    find_pyproject_toml,
    load_config,
    load_pyproject_toml,
)
from herald.config.models import (
    ChangelogConfig,
    CommitsConfig,
    CommitTypeConfig,
    HeraldConfig,
    VersionConfig,
    default_config,
)
from herald.core.version import BumpType
from herald.exceptions import (
    ConfigNotFoundError,
    ConfigValidationError,
    UnknownSemverLevelError,
)

PYPROJECT_WITH_CONFIG = """\
[project]
name = "test-project"
version = "1.0.0"

[tool.herald.version]
initial_version = "1.0.0"
tag_prefix = "release-"

[tool.herald.commits.types.perf]
title = "Performance"
semver = "patch"

[tool.herald.changelog]
path = "docs/CHANGES.md"
include_all = true
"""


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    (tmp_path / "pyproject.toml").write_text(PYPROJECT_WITH_CONFIG)
    return tmp_path


class TestHeraldConfig:
    """Tests for HeraldConfig model."""

    def test_default_config(self):
        """Default configuration has sensible values."""
        config = HeraldConfig()

        assert config.version.initial_version == "0.1.0"
        assert config.effective_tag_prefix == "v"
        assert config.changelog_path == Path("CHANGELOG.md")
        assert config.changelog.include_all is False
        assert config.commits.breaking_change_keywords == ["BREAKING CHANGE", "BREAKING-CHANGE"]

    def test_default_types(self):
        types = HeraldConfig().commits.types

        assert list(types) == ["feat", "fix", "docs", "style", "refactor", "test", "chore"]
        assert types["feat"].semver == BumpType.MINOR
        assert types["fix"].semver == BumpType.PATCH
        assert types["docs"].semver == BumpType.NONE
        assert types["refactor"].title == "Code Refactoring"

    def test_default_config_is_fresh(self):
        """Each call returns an independent value."""
        first = default_config()
        second = default_config()

        assert first == second
        assert first is not second
        assert first.commits.types is not second.commits.types

    def test_frozen(self):
        config = default_config()

        with pytest.raises(Exception):  # noqa: B017
            config.version = VersionConfig()  # type: ignore[misc]

    def test_type_title(self):
        config = default_config()

        assert config.type_title("feat") == "Features"
        assert config.type_title("perf") == "Perf"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            HeraldConfig.model_validate({"ci": {"enabled": True}})


class TestCommitTypeConfig:
    """Tests for CommitTypeConfig model."""

    @pytest.mark.parametrize("level", ["major", "MINOR", "Patch", "none"])
    def test_valid_levels(self, level: str):
        assert CommitTypeConfig(title="X", semver=level).semver == BumpType[level.upper()]

    def test_unknown_level_raises(self):
        """Unknown levels fail when the configuration is built."""
        with pytest.raises(UnknownSemverLevelError):
            CommitTypeConfig(title="X", semver="huge")

    def test_empty_title_rejected(self):
        with pytest.raises(ValueError):
            CommitTypeConfig(title="", semver="none")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            CommitTypeConfig(title="X", semver="none", hidden=True)  # type: ignore[call-arg]


class TestVersionConfig:
    """Tests for VersionConfig model."""

    def test_invalid_initial_version(self):
        with pytest.raises(ValueError):
            VersionConfig(initial_version="one")

    def test_empty_initial_version(self):
        with pytest.raises(ValueError):
            VersionConfig(initial_version="")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            VersionConfig(tag_prefx="release-")  # type: ignore[call-arg]


class TestCommitsConfig:
    """Tests for CommitsConfig model."""

    def test_empty_types_rejected(self):
        with pytest.raises(ValueError):
            CommitsConfig(types={})

    def test_custom_keywords(self):
        config = CommitsConfig(breaking_change_keywords=["INCOMPATIBLE"])

        assert config.breaking_change_keywords == ["INCOMPATIBLE"]

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            CommitsConfig(breaking_keywords=["INCOMPATIBLE"])  # type: ignore[call-arg]


class TestChangelogConfig:
    def test_defaults(self):
        config = ChangelogConfig()

        assert config.path == Path("CHANGELOG.md")
        assert config.include_all is False

    @pytest.mark.parametrize("path", ["", "   "])
    def test_empty_path_rejected(self, path: str):
        with pytest.raises(ValueError, match="changelog.path cannot be empty"):
            ChangelogConfig(path=path)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            ChangelogConfig(file="NEWS.md")  # type: ignore[call-arg]


class TestLoadPyprojectToml:
    """Tests for load_pyproject_toml()."""

    def test_load_valid_toml(self, project_dir: Path):
        data = load_pyproject_toml(project_dir / "pyproject.toml")

        assert data["project"]["name"] == "test-project"

    def test_load_nonexistent_raises(self, tmp_path: Path):
        with pytest.raises(ConfigNotFoundError):
            load_pyproject_toml(tmp_path / "nonexistent.toml")

    def test_load_invalid_toml_raises(self, tmp_path: Path):
        path = tmp_path / "pyproject.toml"
        path.write_text("[project\nname = ")

        with pytest.raises(ConfigValidationError):
            load_pyproject_toml(path)


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml()."""

    def test_find_in_current_dir(self, project_dir: Path):
        assert find_pyproject_toml(project_dir).name == "pyproject.toml"

    def test_find_in_parent_dir(self, project_dir: Path):
        subdir = project_dir / "src" / "package"
        subdir.mkdir(parents=True)

        assert find_pyproject_toml(subdir) == (project_dir / "pyproject.toml").resolve()


class TestExtractHeraldConfig:
    """Tests for extract_herald_config()."""

    def test_extract_existing_config(self):
        pyproject = {"tool": {"herald": {"changelog": {"include_all": True}}}}

        assert extract_herald_config(pyproject) == {"changelog": {"include_all": True}}

    def test_extract_missing_config(self):
        assert extract_herald_config({"project": {"name": "test"}}) == {}


class TestBuildConfig:
    """Tests for build_config()."""

    def test_types_merged_over_defaults(self):
        config = build_config({"commits": {"types": {"perf": {"title": "Performance", "semver": "patch"}}}})

        assert config.commits.types["perf"].semver == BumpType.PATCH
        assert config.commits.types["feat"].title == "Features"

    def test_override_default_type(self):
        config = build_config({"commits": {"types": {"docs": {"title": "Docs", "semver": "patch"}}}})

        assert config.commits.types["docs"] == CommitTypeConfig(title="Docs", semver="patch")

    def test_validation_error_wrapped(self):
        with pytest.raises(ConfigValidationError):
            build_config({"changelog": {"include_all": "sometimes"}})

    def test_unknown_level_not_wrapped(self):
        with pytest.raises(UnknownSemverLevelError):
            build_config({"commits": {"types": {"feat": {"title": "Features", "semver": "big"}}}})

    def test_types_not_a_table(self):
        with pytest.raises(ConfigValidationError, match="commits.types must be a table"):
            build_config({"commits": {"types": ["abc"]}})

    def test_commits_not_a_table(self):
        with pytest.raises(ConfigValidationError, match="commits must be a table"):
            build_config({"commits": ["feat"]})

    def test_empty_changelog_path(self):
        with pytest.raises(ConfigValidationError):
            build_config({"changelog": {"path": ""}})

    @pytest.mark.parametrize(
        "data",
        [
            {"version": {"tag_prefx": "release-"}},
            {"commits": {"breaking_keywords": ["INCOMPATIBLE"]}},
            {"commits": {"types": {"perf": {"title": "Performance", "sevmer": "patch"}}}},
            {"changelog": {"include-all": True}},
        ],
    )
    def test_misspelled_key_rejected(self, data: dict):
        with pytest.raises(ConfigValidationError):
            build_config(data)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_with_config(self, project_dir: Path):
        config = load_config(project_dir)

        assert config.version.initial_version == "1.0.0"
        assert config.effective_tag_prefix == "release-"
        assert config.changelog_path == Path("docs/CHANGES.md")
        assert config.changelog.include_all is True
        assert config.commits.types["perf"].title == "Performance"

    def test_load_from_file_path(self, project_dir: Path):
        config = load_config(project_dir / "pyproject.toml")

        assert config.effective_tag_prefix == "release-"

    def test_load_defaults_when_no_config(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "test"\n')

        assert load_config(tmp_path) == default_config()

    def test_missing_pyproject_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(Path, "is_file", lambda self: False)

        with pytest.raises(ConfigNotFoundError):
            load_config(tmp_path)
