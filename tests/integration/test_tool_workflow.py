"""
Integration tests for the BlueKit tool workflow.

These tests drive the full tool catalog through the dispatcher, the same way
the MCP server does, against a scratch home directory.
"""

import asyncio
import json

import pytest

from bluekit.dispatch import ToolDispatcher
from bluekit.errors import MissingTaskContentError, ToolNotFoundError
from bluekit.frontmatter import split_front_matter
from bluekit.paths import store_dir
from bluekit.tools import default_tool_sets


@pytest.fixture
def dispatcher():
    return ToolDispatcher(default_tool_sets())


def call(_dispatcher, _tool, /, **arguments):
    result = asyncio.run(_dispatcher.call(_tool, arguments))
    return result[0]["text"]


class TestArtifactWorkflow:
    """Integration tests for writing artifacts through the dispatcher."""

    def test_init_then_generate_artifacts(self, dispatcher, project_dir):
        """Test linking a project and saving every artifact kind."""
        prompt = call(dispatcher, "bluekit_init_project", projectPath=str(project_dir))
        assert "confirm: true" in prompt

        linked = call(dispatcher, "bluekit_init_project", projectPath=str(project_dir), confirm=True)
        assert linked.startswith("✅ Project added to BlueKit store!")
        registry = json.loads((store_dir() / "projectRegistry.json").read_text(encoding="utf-8"))
        assert registry[0]["path"] == str(project_dir)

        call(dispatcher, "bluekit_kit_generateKit", name="auth", content="# Auth", projectPath=str(project_dir))
        call(dispatcher, "bluekit.generateKit", name="legacy", content="# Legacy", projectPath=str(project_dir))
        call(dispatcher, "bluekit_walkthrough_generateWalkthrough", name="tour", content="Steps", projectPath=str(project_dir))
        call(dispatcher, "bluekit_agent_generateAgent", name="helper", content="Body", projectPath=str(project_dir))
        call(
            dispatcher,
            "bluekit_diagram_generateDiagram",
            name="flow",
            content="```mermaid\ngraph TD\n  A --> B\n```\n",
            projectPath=str(project_dir),
        )

        base = project_dir / ".bluekit"
        for relative in ("kits/auth.md", "kits/legacy.md", "tour.md", "agents/helper.md", "diagrams/flow.mmd"):
            content = (base / relative).read_text(encoding="utf-8")
            header, _, _ = split_front_matter(content)
            assert header is not None, relative

    def test_unknown_tool(self, dispatcher):
        """Test unknown names fail with ToolNotFoundError."""
        with pytest.raises(ToolNotFoundError):
            call(dispatcher, "bluekit_nothing")


class TestBlueprintWorkflow:
    """Integration tests for blueprint generation and task execution."""

    def test_generate_list_execute(self, dispatcher, project_dir, sample_blueprint, sample_task_contents):
        """Test a blueprint can be generated, found globally and executed."""
        generated = call(
            dispatcher,
            "bluekit_blueprint_generateBlueprint",
            projectPath=str(project_dir),
            blueprint=sample_blueprint,
            taskContents=sample_task_contents,
            saveToGlobal=True,
        )
        assert "Registered in the global blueprint registry" in generated

        listed = call(dispatcher, "bluekit_blueprint_listBlueprints")
        assert "Source: global" in listed

        document = json.loads(call(dispatcher, "bluekit_blueprint_getBlueprint", id="saas-starter", fromGlobal=True))
        assert document["metadata"]["id"] == "saas-starter"
        assert document["source"] == "global"

        briefing = call(
            dispatcher,
            "bluekit_task_executeTask",
            projectPath=str(project_dir),
            blueprintId="saas-starter",
            taskFile="add-auth.md",
        )
        assert "Layer: 2/2 - Features" in briefing

    def test_missing_content_writes_nothing(self, dispatcher, project_dir, sample_blueprint, sample_task_contents):
        """Test a blueprint with a missing task file leaves the project untouched."""
        del sample_task_contents["configure-lint.md"]

        with pytest.raises(MissingTaskContentError):
            call(
                dispatcher,
                "bluekit_blueprint_generateBlueprint",
                projectPath=str(project_dir),
                blueprint=sample_blueprint,
                taskContents=sample_task_contents,
            )
        assert not (project_dir / ".bluekit").exists()

    def test_batch(self, dispatcher, project_dir):
        """Test a batch mixes successes and failures."""
        text = call(
            dispatcher,
            "bluekit_batchExecute",
            tasks=[
                {"name": "bluekit_ping", "params": {}},
                {"name": "bluekit_kit_generateKit", "params": {"name": "k", "content": "x", "projectPath": str(project_dir)}},
                {"name": "bluekit_kit_generateKit", "params": {"name": "k"}},
            ],
        )

        assert text.startswith("✅ Batch: 2 succeeded, 1 failed")
        assert (project_dir / ".bluekit" / "kits" / "k.md").exists()
