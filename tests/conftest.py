"""Shared fixtures for BlueKit tests."""

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at a scratch directory so ~/.bluekit never touches the real one."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("USERPROFILE", raising=False)
    monkeypatch.setenv("ENABLE_MERMAID_MCP_VALIDATION", "false")
    return home


@pytest.fixture
def project_dir(tmp_path):
    """An empty project directory."""
    project = tmp_path / "my-project"
    project.mkdir()
    return project


@pytest.fixture
def sample_blueprint():
    """A two-layer blueprint whose tasks share one task file."""
    return {
        "id": "saas-starter",
        "name": "SaaS Starter",
        "version": 1,
        "description": "Authentication and billing",
        "layers": [
            {
                "id": "layer-1",
                "order": 1,
                "name": "Foundation",
                "tasks": [
                    {"id": "setup", "taskFile": "setup-project.md", "description": "Scaffold the project"},
                    {"id": "lint", "taskFile": "configure-lint.md", "description": "Configure linting"},
                ],
            },
            {
                "id": "layer-2",
                "order": 2,
                "name": "Features",
                "tasks": [
                    {"id": "auth", "taskFile": "add-auth.md", "description": "Add authentication"},
                    {"id": "auth-again", "taskFile": "setup-project.md", "description": "Re-run setup"},
                ],
            },
        ],
    }


@pytest.fixture
def sample_task_contents():
    """Content for every task file referenced by ``sample_blueprint``."""
    return {
        "setup-project.md": "# Setup\n\n1. Run npm init\n",
        "configure-lint.md": "---\nid: custom\n---\n# Lint\n",
        "add-auth.md": "# Auth\n\nAdd login.\n",
    }
