"""Pytest configuration and fixtures for zena-mcp tests."""

from datetime import date

import pytest

from zena_mcp.cache import MemoryCache
from zena_mcp.enums import ProjectStatus
from zena_mcp.models.task import ComponentModel, ProjectModel, TaskModel
from zena_mcp.server import reset_workspace
from zena_mcp.settings import Settings
from zena_mcp.workspace import Workspace


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def workspace(settings, clock):
    """A fresh workspace with a hand-driven cache clock."""
    return Workspace(settings, cache=MemoryCache(clock=clock))


@pytest.fixture
def project(workspace):
    """An empty project in the planning phase."""
    return workspace.projects.create_project(
        ProjectModel(
            id="p1",
            name="Riverside Tower",
            status=ProjectStatus.PLANNING,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 4, 1),
        )
    )


@pytest.fixture
def other_project(workspace):
    return workspace.projects.create_project(ProjectModel(id="p2", name="Harbour Depot"))


@pytest.fixture
def add_task(workspace, project):
    """Factory creating a task in project p1 (or the given project)."""

    def _add(name: str, dependencies: list[str] | None = None, **fields) -> TaskModel:
        fields.setdefault("project_id", project.id)
        task = TaskModel(id=fields.pop("id", name.lower().replace(" ", "_")), name=name, **fields)
        task.dependencies = dependencies or []
        return workspace.tasks.create_task(task)

    return _add


@pytest.fixture
def add_component(workspace, project):
    """Factory creating a component in project p1."""

    def _add(component_id: str, parent_id: str | None = None, **fields) -> ComponentModel:
        fields.setdefault("project_id", project.id)
        return workspace.components.create_component(
            ComponentModel(id=component_id, name=fields.pop("name", component_id.title()), parent_id=parent_id, **fields)
        )

    return _add


@pytest.fixture
def recorded_events(workspace):
    """Every event published on the workspace bus, in order."""
    events = []
    workspace.events.subscribe(events.append)
    return events


@pytest.fixture
def tool_workspace(workspace, project):
    """Install the workspace as the server's process-wide workspace."""
    reset_workspace(workspace)
    yield workspace
    reset_workspace(None)
