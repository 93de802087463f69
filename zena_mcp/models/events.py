"""Domain events published after a unit of work commits."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from zena_mcp.enums import EventType


class DomainEvent(BaseModel):
    """Base event: what happened, to which record, and who did it."""

    event_type: EventType
    project_id: str
    entity_id: str
    actor: str = "system"
    occurred_at: datetime = Field(default_factory=datetime.now)


class TaskChanged(DomainEvent):
    """task.created / task.updated / task.deleted.

    `changes` maps each changed field to its [before, after] pair.
    """

    changes: dict[str, list[Any]] = Field(default_factory=dict)


class ComponentChanged(DomainEvent):
    """component.created / component.deleted / component.progress_changed."""

    old_progress: float | None = None
    new_progress: float | None = None
    old_actual_cost: float | None = None
    new_actual_cost: float | None = None
    changed_fields: list[str] = Field(default_factory=list)


class ProjectChanged(DomainEvent):
    """project.progress_changed / project.status_changed."""

    old_progress: float | None = None
    new_progress: float | None = None
    old_actual_cost: float | None = None
    new_actual_cost: float | None = None
    old_status: str | None = None
    new_status: str | None = None
    changed_fields: list[str] = Field(default_factory=list)


class BaselineCreated(DomainEvent):
    baseline_type: str
    version: int


class TemplateApplied(DomainEvent):
    template_id: str
    tasks_created: int = 0
    dependencies_created: int = 0
    skipped: list[str] = Field(default_factory=list)
