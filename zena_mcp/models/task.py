"""Core record models: tasks, components, projects and baselines."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from zena_mcp.enums import BaselineType, ProjectStatus, TaskPriority, TaskStatus


def generate_id() -> str:
    return uuid.uuid4().hex


def _dedupe(ids: list[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


class TaskModel(BaseModel):
    """A unit of work inside a project."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=generate_id)
    project_id: str
    component_id: str | None = None
    name: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    dependencies: list[str] = Field(default_factory=list)
    conditional_tag: str | None = None
    is_hidden: bool = False
    progress_percent: float = 0.0
    estimated_hours: float | None = None
    actual_hours: float | None = None
    start_date: date | None = None
    end_date: date | None = None
    deleted_at: datetime | None = None

    @field_validator("dependencies")
    @classmethod
    def dedupe_dependencies(cls, v: list[str]) -> list[str]:
        return _dedupe(v)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class TaskUpdate(BaseModel):
    """Partial task update; only explicitly passed fields are applied."""

    name: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    component_id: str | None = None
    dependencies: list[str] | None = None
    conditional_tag: str | None = None
    progress_percent: float | None = None
    estimated_hours: float | None = None
    actual_hours: float | None = None
    start_date: date | None = None
    end_date: date | None = None


class ComponentModel(BaseModel):
    """A node of the project's work-breakdown tree."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=generate_id)
    project_id: str
    parent_id: str | None = None
    name: str
    progress_percent: float = 0.0
    planned_cost: float = 0.0
    actual_cost: float = 0.0
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class ProjectModel(BaseModel):
    """Aggregate root. Progress and actual cost are derived from root components."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=generate_id)
    name: str
    status: ProjectStatus = ProjectStatus.PLANNING
    actual_cost: float = 0.0
    progress_percent: float = 0.0
    start_date: date | None = None
    end_date: date | None = None
    tags: list[str] = Field(default_factory=list)


class BaselineModel(BaseModel):
    """Immutable snapshot of a project's planned schedule and cost."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_id)
    project_id: str
    baseline_type: BaselineType = BaselineType.EXECUTION
    version: int = Field(default=1, ge=1)
    name: str = ""
    start_date: date
    end_date: date
    planned_cost: float = Field(default=0.0, ge=0)
    created_at: datetime = Field(default_factory=datetime.now)
    created_by: str = "system"

    @property
    def planned_duration_days(self) -> int:
        return (self.end_date - self.start_date).days
