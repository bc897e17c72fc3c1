"""BlueKit tool sets."""

from .agent_tools import AgentTools
from .base import ToolSet, normalize_tool_name, text_result
from .blueprint_tools import BlueprintTools
from .clone_tools import CloneTools
from .common_tools import CommonTools
from .diagram_tools import DiagramTools
from .kit_tools import KitTools
from .task_tools import TaskTools
from .walkthrough_tools import WalkthroughTools


def default_tool_sets():
    """Every tool set, in dispatch order."""
    return [
        KitTools(),
        BlueprintTools(),
        TaskTools(),
        WalkthroughTools(),
        AgentTools(),
        CommonTools(),
        DiagramTools(),
        CloneTools(),
    ]


__all__ = [
    "AgentTools",
    "BlueprintTools",
    "CloneTools",
    "CommonTools",
    "DiagramTools",
    "KitTools",
    "TaskTools",
    "ToolSet",
    "WalkthroughTools",
    "default_tool_sets",
    "normalize_tool_name",
    "text_result",
]
