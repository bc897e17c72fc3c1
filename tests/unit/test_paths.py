"""Unit tests for BlueKit path and naming helpers."""

from pathlib import Path

from bluekit.paths import (
    format_alias,
    git_sources_dir,
    home_dir,
    is_plain_segment,
    metadata_dir,
    normalize_path,
    slugify,
    store_dir,
)


class TestHomeResolution:
    """Test cases for home and store directories."""

    def test_home_from_env(self, isolated_home):
        """Test HOME is used for the store."""
        assert home_dir() == isolated_home
        assert store_dir() == isolated_home / ".bluekit"
        assert git_sources_dir() == isolated_home / ".bluekit" / "tmp" / "git-sources"

    def test_userprofile_fallback(self, tmp_path, monkeypatch):
        """Test USERPROFILE is used when HOME is unset."""
        monkeypatch.delenv("HOME")
        monkeypatch.setenv("USERPROFILE", str(tmp_path / "profile"))

        assert home_dir() == tmp_path / "profile"


class TestNormalizePath:
    """Test cases for registry path keys."""

    def test_relative_and_trailing_forms_agree(self, tmp_path, monkeypatch):
        """Test different spellings of one directory normalize alike."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "proj").mkdir()

        assert normalize_path("proj") == normalize_path(str(tmp_path / "proj") + "/")
        assert normalize_path("./proj/../proj") == normalize_path("proj")

    def test_metadata_dir(self, tmp_path):
        """Test the per-project metadata directory."""
        assert metadata_dir(tmp_path) == tmp_path / ".bluekit"


class TestNaming:
    """Test cases for slugs and aliases."""

    def test_slugify(self):
        """Test slugs are lowercase and hyphen separated."""
        assert slugify("My Cool App!") == "my-cool-app"
        assert slugify("  spaced__out  ") == "spaced-out"

    def test_format_alias(self):
        """Test alias title-cases hyphen, underscore and space separated words."""
        assert format_alias("my-cool_kit") == "My Cool Kit"
        assert format_alias("API gateway") == "Api Gateway"

    def test_is_plain_segment(self):
        """Test names that would escape their directory are rejected."""
        assert is_plain_segment("setup-project.md")
        assert not is_plain_segment("")
        assert not is_plain_segment("..")
        assert not is_plain_segment("../evil")
        assert not is_plain_segment("a\\b")
