"""Unit tests for the git command wrapper."""

import subprocess

import pytest
from unittest.mock import MagicMock, patch

from bluekit.errors import GitCommandError, StorageIOError
from bluekit.git import GitClient


def completed(stdout="", returncode=0, stderr=""):
    return MagicMock(stdout=stdout, returncode=returncode, stderr=stderr)


class TestGitRun:
    """Test cases for GitClient.run."""

    def test_returns_stripped_stdout(self, tmp_path):
        """Test successful runs return stdout without trailing whitespace."""
        with patch("bluekit.git.subprocess.run", return_value=completed("abc123\n")) as mock_run:
            assert GitClient().run(["rev-parse", "HEAD"], cwd=tmp_path) == "abc123"

        args, kwargs = mock_run.call_args
        assert args[0] == ["git", "rev-parse", "HEAD"]
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["capture_output"] is True

    def test_non_zero_exit(self):
        """Test failures carry git's stderr."""
        with patch("bluekit.git.subprocess.run", return_value=completed(returncode=128, stderr="fatal: nope\n")):
            with pytest.raises(GitCommandError) as exc_info:
                GitClient().run(["status"])

        assert exc_info.value.returncode == 128
        assert "fatal: nope" in str(exc_info.value)

    def test_missing_executable(self):
        """Test a missing git binary is a storage error."""
        with patch("bluekit.git.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(StorageIOError, match="git executable not found"):
                GitClient().run(["status"])

    def test_timeout(self):
        """Test a hung git call is reported as a command failure."""
        with patch("bluekit.git.subprocess.run", side_effect=subprocess.TimeoutExpired("git", 1)):
            with pytest.raises(GitCommandError, match="timed out"):
                GitClient(timeout=1).run(["fetch"])


class TestGitInfo:
    """Test cases for provenance queries."""

    @staticmethod
    def fake_git(responses):
        def run(command, **kwargs):
            key = " ".join(command[1:])
            stdout, returncode = responses.get(key, ("", 1))
            return completed(stdout, returncode, "" if returncode == 0 else "error")
        return run

    def test_info_on_branch_with_tag(self, tmp_path):
        """Test url, commit, branch and tag are all collected."""
        responses = {
            "config --get remote.origin.url": ("git@example.com:app.git\n", 0),
            "rev-parse HEAD": ("abc123\n", 0),
            "rev-parse --abbrev-ref HEAD": ("main\n", 0),
            "describe --exact-match --tags HEAD": ("v1.0\n", 0),
        }
        with patch("bluekit.git.subprocess.run", side_effect=self.fake_git(responses)):
            info = GitClient().info(tmp_path)

        assert info.url == "git@example.com:app.git"
        assert info.commit == "abc123"
        assert info.branch == "main"
        assert info.tag == "v1.0"

    def test_detached_head_without_tag(self, tmp_path):
        """Test a detached HEAD has no branch and a missing tag is None."""
        responses = {
            "config --get remote.origin.url": ("https://example.com/app.git", 0),
            "rev-parse HEAD": ("abc123", 0),
            "rev-parse --abbrev-ref HEAD": ("HEAD", 0),
        }
        with patch("bluekit.git.subprocess.run", side_effect=self.fake_git(responses)):
            info = GitClient().info(tmp_path)

        assert info.branch is None
        assert info.tag is None

    def test_missing_remote_fails(self, tmp_path):
        """Test a repository without an origin remote raises."""
        with patch("bluekit.git.subprocess.run", side_effect=self.fake_git({})):
            with pytest.raises(GitCommandError):
                GitClient().info(tmp_path)
