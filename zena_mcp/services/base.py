"""Shared plumbing for the planning services."""

from __future__ import annotations

import math
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager

from zena_mcp.events import EventPublisher
from zena_mcp.exceptions import (
    ComponentNotFoundError,
    InvalidProgressRangeError,
    ProjectNotFoundError,
    TaskNotFoundError,
)
from zena_mcp.models.events import DomainEvent
from zena_mcp.models.task import ComponentModel, ProjectModel, TaskModel
from zena_mcp.store import ProjectStore


def validate_progress(value: float) -> float:
    if value is None or math.isnan(value) or value < 0 or value > 100:
        raise InvalidProgressRangeError(value)
    return float(value)


def same_value(a: float | None, b: float | None) -> bool:
    if a is None or b is None:
        return a is b
    return math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-9)


class ServiceBase:
    def __init__(self, store: ProjectStore, events: EventPublisher):
        self.store = store
        self.events = events

    @contextmanager
    def unit_of_work(self, *project_ids: str) -> Iterator[list[DomainEvent]]:
        """
        Open a transaction on each project (in sorted order) and yield an
        event buffer. Buffered events are published only after every
        transaction committed.
        """
        pending: list[DomainEvent] = []
        with ExitStack() as stack:
            for project_id in sorted(set(project_ids)):
                stack.enter_context(self.store.transaction(project_id))
            yield pending
        for event in pending:
            self.events.publish(event)

    def _project(self, project_id: str) -> ProjectModel:
        project = self.store.get_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def _task(self, task_id: str) -> TaskModel:
        task = self.store.get_task(task_id)
        if task is None or task.is_deleted:
            raise TaskNotFoundError(task_id)
        return task

    def _component(self, component_id: str) -> ComponentModel:
        component = self.store.get_component(component_id)
        if component is None or component.is_deleted:
            raise ComponentNotFoundError(component_id)
        return component
