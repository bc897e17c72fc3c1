"""
Contract tests for the advertised BlueKit tool catalog.

Clients discover tools by name and call them by either the dotted or the
underscore spelling; these names and schemas must stay stable.
"""

import pytest

from bluekit.dispatch import ToolDispatcher
from bluekit.tools import default_tool_sets

EXPECTED_TOOLS = [
    "bluekit.kit.getKitDefinition",
    "bluekit.getKitDefinition",
    "bluekit.kit.createKit",
    "bluekit.createKit",
    "bluekit.kit.generateKit",
    "bluekit.generateKit",
    "bluekit.blueprint.getBlueprintDefinition",
    "bluekit.blueprint.generateBlueprint",
    "bluekit.blueprint.listBlueprints",
    "bluekit.blueprint.getBlueprint",
    "bluekit_task_executeTask",
    "bluekit.walkthrough.getWalkthroughDefinition",
    "bluekit.getWalkthroughDefinition",
    "bluekit.walkthrough.createWalkthrough",
    "bluekit.createWalkthrough",
    "bluekit.walkthrough.generateWalkthrough",
    "bluekit.generateWalkthrough",
    "bluekit_agent_getAgentDefinition",
    "bluekit_agent_createAgent",
    "bluekit_agent_generateAgent",
    "bluekit_ping",
    "bluekit_batchExecute",
    "bluekit.init_project",
    "bluekit_diagram_createDiagram",
    "bluekit_diagram_generateDiagram",
    "bluekit_clone_register",
    "bluekit_clone_createProject",
]


@pytest.fixture
def dispatcher():
    return ToolDispatcher(default_tool_sets())


class TestToolCatalog:
    """Contract tests for tool names and input schemas."""

    def test_catalog_order(self, dispatcher):
        """Test the catalog lists every tool in dispatch order."""
        assert [definition.name for definition in dispatcher.definitions()] == EXPECTED_TOOLS

    @pytest.mark.parametrize("name", EXPECTED_TOOLS)
    def test_both_spellings_resolve(self, dispatcher, name):
        """Test each tool is reachable by its dotted and underscore names."""
        assert dispatcher.resolve(name) is not None
        assert dispatcher.resolve(name.replace(".", "_")) is not None
        assert dispatcher.resolve(name.replace("_", ".")) is not None

    def test_schemas_are_objects(self, dispatcher):
        """Test every schema is an object schema listing declared properties as required."""
        for definition in dispatcher.definitions():
            schema = definition.to_dict()["inputSchema"]
            assert schema["type"] == "object", definition.name
            assert set(schema["required"]) <= set(schema["properties"]), definition.name

    @pytest.mark.parametrize(
        "name,required",
        [
            ("bluekit.kit.generateKit", ["name", "content", "projectPath"]),
            ("bluekit.blueprint.generateBlueprint", ["projectPath", "blueprint", "taskContents"]),
            ("bluekit.blueprint.getBlueprint", ["id"]),
            ("bluekit_task_executeTask", ["projectPath", "blueprintId", "taskFile"]),
            ("bluekit_clone_register", ["projectPath", "name"]),
            ("bluekit_clone_createProject", ["cloneId", "targetPath"]),
            ("bluekit_batchExecute", ["tasks"]),
            ("bluekit.init_project", ["projectPath"]),
            ("bluekit_ping", []),
        ],
    )
    def test_required_arguments(self, dispatcher, name, required):
        """Test the required arguments of key tools."""
        definition = next(d for d in dispatcher.definitions() if d.name == name)
        assert definition.input_schema["required"] == required
