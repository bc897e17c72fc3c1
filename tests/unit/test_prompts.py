"""Unit tests for packaged prompt resources."""

import pytest

from bluekit.errors import NotFoundError, ValidationError
from bluekit.prompts import list_prompt_resources, load_prompt, read_prompt_resource, resolve_prompt_uri


class TestPromptResources:
    """Test cases for prompt listing and reading."""

    def test_lists_packaged_prompts(self):
        """Test every definition document is advertised."""
        resources = list_prompt_resources()

        assert [resource.uri for resource in resources] == [
            "bluekit://prompts/get-agent-definition.md",
            "bluekit://prompts/get-blueprint-definition.md",
            "bluekit://prompts/get-kit-definition.md",
            "bluekit://prompts/get-walkthrough-definition.md",
        ]
        assert resources[2].name == "Get Kit Definition"
        assert resources[2].description == "BlueKit Get Kit Definition reference documentation"
        assert all(resource.mime_type == "text/markdown" for resource in resources)

    def test_read_matches_load(self):
        """Test reading a resource returns the prompt text."""
        assert read_prompt_resource("bluekit://prompts/get-kit-definition.md") == load_prompt("get-kit-definition.md")

    def test_escape_rejected(self):
        """Test URIs resolving outside the prompts directory are denied."""
        with pytest.raises(ValidationError, match="Access denied"):
            resolve_prompt_uri("bluekit://prompts/../server.py")

    def test_unknown_scheme(self):
        """Test foreign URIs are rejected."""
        with pytest.raises(ValidationError, match="Unknown resource URI"):
            resolve_prompt_uri("file:///etc/passwd")

    def test_missing_resource(self):
        """Test a missing document raises NotFoundError."""
        with pytest.raises(NotFoundError, match="Resource not found"):
            resolve_prompt_uri("bluekit://prompts/nope.md")

    def test_custom_directory(self, tmp_path):
        """Test listing honours an alternate prompts directory."""
        (tmp_path / "my-guide.md").write_text("guide", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("skip", encoding="utf-8")

        resources = list_prompt_resources(tmp_path)

        assert [resource.name for resource in resources] == ["My Guide"]
        assert load_prompt("my-guide.md", tmp_path) == "guide"
        with pytest.raises(NotFoundError):
            load_prompt("missing.md", tmp_path)
