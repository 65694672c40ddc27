"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from release_chain.config.loader import (
    extract_release_chain_config,
    find_pyproject_toml,
    get_project_name,
    load_config,
    load_pyproject_toml,
)
from release_chain.config.models import (
    DEFAULT_COMMIT_MESSAGE_FORMAT,
    GitConfig,
    ProjectConfig,
    ReleaseChainConfig,
    TargetConfig,
)
from release_chain.exceptions import ConfigNotFoundError, ConfigValidationError


class TestReleaseChainConfig:
    """Tests for ReleaseChainConfig model."""

    def test_default_config(self):
        """Default configuration has sensible values."""
        config = ReleaseChainConfig()

        assert config.project_name is None
        assert config.tag_prefix == "${projectName}-"
        assert config.commit_message_format == DEFAULT_COMMIT_MESSAGE_FORMAT
        assert DEFAULT_COMMIT_MESSAGE_FORMAT == "chore(${projectName}): release ${version}"
        assert config.dry_run is False
        assert config.post_targets == []
        assert config.projects == {}

    def test_nested_defaults(self):
        """Nested configurations have defaults."""
        config = ReleaseChainConfig()

        assert config.git.remote is None
        assert config.git.branch is None
        assert config.git.push is False
        assert config.git.add_paths == []

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValueError):
            ReleaseChainConfig.model_validate({"not_an_option": True})


class TestGitConfig:
    def test_custom(self):
        config = GitConfig(remote="upstream", branch="release", push=True)

        assert config.remote == "upstream"
        assert config.push is True


class TestTargetConfig:
    """Tests for TargetConfig model."""

    def test_defaults(self):
        config = TargetConfig()

        assert config.command == []
        assert config.options == {}
        assert config.configurations == {}

    def test_structured_options_kept(self):
        config = TargetConfig(options={"env": {"A": "1"}, "args": ["x"]})

        assert config.options["env"] == {"A": "1"}
        assert config.options["args"] == ["x"]

    def test_project_targets(self):
        project = ProjectConfig(targets={"publish": TargetConfig(command=["twine", "upload"])})

        assert project.root == "."
        assert project.targets["publish"].command == ["twine", "upload"]


class TestLoadPyprojectToml:
    """Tests for load_pyproject_toml()."""

    def test_load_valid_toml(self, temp_project_with_pyproject: Path):
        data = load_pyproject_toml(temp_project_with_pyproject / "pyproject.toml")

        assert data["project"]["name"] == "test-project"

    def test_load_nonexistent_raises(self, tmp_path: Path):
        with pytest.raises(ConfigNotFoundError):
            load_pyproject_toml(tmp_path / "nonexistent.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        path = tmp_path / "pyproject.toml"
        path.write_text("[project\nname = ")

        with pytest.raises(ConfigValidationError):
            load_pyproject_toml(path)


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml()."""

    def test_find_in_current_dir(self, temp_project_with_pyproject: Path):
        found = find_pyproject_toml(temp_project_with_pyproject)
        assert found.name == "pyproject.toml"

    def test_find_in_parent_dir(self, temp_project_with_pyproject: Path):
        subdir = temp_project_with_pyproject / "src" / "package"
        subdir.mkdir(parents=True)

        found = find_pyproject_toml(subdir)
        assert found.parent == temp_project_with_pyproject.resolve()

    def test_not_found_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Raises ConfigNotFoundError when no parent has one."""
        monkeypatch.setattr(Path, "is_file", lambda self: False)

        with pytest.raises(ConfigNotFoundError):
            find_pyproject_toml(tmp_path)


class TestExtractReleaseChainConfig:
    def test_extract_existing_config(self):
        pyproject = {"tool": {"release-chain": {"dry_run": True}}}

        assert extract_release_chain_config(pyproject) == {"dry_run": True}

    def test_extract_missing_config(self):
        assert extract_release_chain_config({"project": {"name": "test"}}) == {}


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_with_config(self, temp_project_with_pyproject: Path):
        config = load_config(temp_project_with_pyproject)

        assert isinstance(config, ReleaseChainConfig)
        assert config.project_name == "test-project"
        assert config.git.remote == "origin"
        assert config.git.push is True
        assert config.post_targets == ["docs:deploy:production"]

        deploy = config.projects["docs"].targets["deploy"]
        assert deploy.command == ["./deploy.sh"]
        assert deploy.options["matrix"] == ["a", "b"]
        assert deploy.configurations["production"]["url"] == "https://docs.example.com"

    def test_load_defaults_when_no_config(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "test"\nversion = "1.0.0"\n')

        config = load_config(tmp_path)

        assert config.project_name == "test"
        assert config.git.push is False

    def test_explicit_project_name_wins(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "dist-name"\n\n[tool.release-chain]\nproject_name = "lib"\n'
        )

        assert load_config(tmp_path).project_name == "lib"

    def test_invalid_config_raises(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "test"\n\n[tool.release-chain.git]\npush = "sometimes"\n'
        )

        with pytest.raises(ConfigValidationError, match="tool.release-chain"):
            load_config(tmp_path)


class TestGetProjectName:
    def test_get_project_name(self, temp_project_with_pyproject: Path):
        assert get_project_name(temp_project_with_pyproject) == "test-project"

    def test_missing_name_raises(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text("[project]\nversion = '1.0.0'\n")

        with pytest.raises(ConfigValidationError):
            get_project_name(tmp_path)
