"""Unit tests for the clone registrar."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest
from unittest.mock import MagicMock

from bluekit.clones import CloneRegistrar, clone_id_for
from bluekit.errors import (
    AlreadyExistsError,
    GitCommandError,
    NotFoundError,
    NotVersionControlledError,
    PreconditionError,
)
from bluekit.git import GitClient
from bluekit.models import GitInfo
from bluekit.paths import git_sources_dir
from bluekit.registry import ProjectRegistry


@pytest.fixture
def git_project(project_dir):
    (project_dir / ".git").mkdir()
    ProjectRegistry().upsert(str(project_dir))
    return project_dir


@pytest.fixture
def fake_git():
    git = MagicMock(spec=GitClient)
    git.info.return_value = GitInfo(url="https://example.com/app.git", commit="abc123", branch="main")
    return git


def test_clone_id_for():
    """Test ids are the slugged name plus the UTC date."""
    when = datetime(2024, 1, 5, 23, 0, tzinfo=timezone.utc)
    assert clone_id_for("My Cool App!", when) == "my-cool-app-20240105"


class TestRegister:
    """Test cases for CloneRegistrar.register."""

    def test_register(self, git_project, fake_git):
        """Test the clone is stored with its git provenance."""
        clone = CloneRegistrar(git=fake_git).register(str(git_project), "My App", tags=["starter"])

        assert clone.id == clone_id_for("My App")
        assert clone.git_commit == "abc123"
        assert clone.git_branch == "main"
        assert clone.git_tag is None
        saved = json.loads((git_project / ".bluekit" / "clones.json").read_text(encoding="utf-8"))
        assert saved[0]["gitUrl"] == "https://example.com/app.git"
        assert saved[0]["tags"] == ["starter"]

    def test_register_twice_same_day_updates(self, git_project, fake_git):
        """Test re-registering the same name keeps a single entry."""
        registrar = CloneRegistrar(git=fake_git)
        registrar.register(str(git_project), "My App")
        fake_git.info.return_value = GitInfo(url="https://example.com/app.git", commit="def456")

        registrar.register(str(git_project), "My App")

        saved = json.loads((git_project / ".bluekit" / "clones.json").read_text(encoding="utf-8"))
        assert len(saved) == 1
        assert saved[0]["gitCommit"] == "def456"

    def test_missing_project(self, tmp_path, fake_git):
        """Test a nonexistent path raises NotFoundError."""
        with pytest.raises(NotFoundError, match="Project path does not exist"):
            CloneRegistrar(git=fake_git).register(str(tmp_path / "nope"), "x")

    def test_not_a_repository(self, project_dir, fake_git):
        """Test a directory without .git is rejected before git runs."""
        with pytest.raises(NotVersionControlledError):
            CloneRegistrar(git=fake_git).register(str(project_dir), "x")
        fake_git.info.assert_not_called()

    def test_unregistered_project(self, project_dir, fake_git):
        """Test the project must be linked to the store first."""
        (project_dir / ".git").mkdir()

        with pytest.raises(PreconditionError):
            CloneRegistrar(git=fake_git).register(str(project_dir), "x")

    def test_git_failure_propagates(self, git_project, fake_git):
        """Test a failing git query surfaces unchanged and nothing is stored."""
        fake_git.info.side_effect = GitCommandError(["rev-parse", "HEAD"], 128, "bad")

        with pytest.raises(GitCommandError):
            CloneRegistrar(git=fake_git).register(str(git_project), "x")
        assert not (git_project / ".bluekit" / "clones.json").exists()


class TestCreateProject:
    """Test cases for CloneRegistrar.create_project."""

    @staticmethod
    def fake_clone(url, destination):
        destination = Path(destination)
        destination.mkdir(parents=True)
        (destination / "README.md").write_text("# App\n", encoding="utf-8")
        (destination / "src").mkdir()
        (destination / "src" / "main.py").write_text("print('hi')\n", encoding="utf-8")
        (destination / ".git").mkdir()
        (destination / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")

    def test_create_project(self, git_project, fake_git, tmp_path):
        """Test the checkout is copied without .git and the scratch is removed."""
        registrar = CloneRegistrar(git=fake_git)
        clone = registrar.register(str(git_project), "My App")
        fake_git.clone.side_effect = self.fake_clone
        target = tmp_path / "new-app"

        result = registrar.create_project(clone.id, str(target))

        assert result == target
        assert (target / "README.md").exists()
        assert (target / "src" / "main.py").exists()
        assert not (target / ".git").exists()
        fake_git.checkout.assert_called_once()
        assert fake_git.checkout.call_args[0][1] == "abc123"
        assert list(git_sources_dir().iterdir()) == []

    def test_target_exists(self, git_project, fake_git):
        """Test an existing target is rejected before any git call."""
        with pytest.raises(AlreadyExistsError):
            CloneRegistrar(git=fake_git).create_project("any", str(git_project))
        fake_git.clone.assert_not_called()

    def test_unknown_clone(self, git_project, fake_git, tmp_path):
        """Test an unknown clone id raises NotFoundError."""
        with pytest.raises(NotFoundError, match="Clone not found: nope"):
            CloneRegistrar(git=fake_git).create_project("nope", str(tmp_path / "target"))

    def test_checkout_failure_cleans_up(self, git_project, fake_git, tmp_path):
        """Test a failed checkout leaves no target and no scratch directory."""
        registrar = CloneRegistrar(git=fake_git)
        clone = registrar.register(str(git_project), "My App")
        fake_git.clone.side_effect = self.fake_clone
        fake_git.checkout.side_effect = GitCommandError(["checkout"], 1, "bad commit")
        target = tmp_path / "new-app"

        with pytest.raises(GitCommandError):
            registrar.create_project(clone.id, str(target))

        assert not target.exists()
        assert list(git_sources_dir().iterdir()) == []
