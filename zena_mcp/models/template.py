"""Template sets applied to projects to create tasks in bulk."""

from __future__ import annotations

from pydantic import BaseModel, Field

from zena_mcp.enums import ConflictBehavior, TaskPriority


class TemplateTask(BaseModel):
    """A task blueprint. Dependencies refer to other template task codes."""

    code: str
    name: str
    description: str = ""
    phase: str | None = None
    discipline: str | None = None
    est_duration_days: float | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    conditional_tag: str | None = None
    depends_on: list[str] = Field(default_factory=list)


class TemplateSet(BaseModel):
    id: str
    name: str
    tasks: list[TemplateTask] = Field(default_factory=list)


class TemplateSelections(BaseModel):
    """Filters narrowing which template tasks get applied. Empty means all."""

    phases: list[str] = Field(default_factory=list)
    disciplines: list[str] = Field(default_factory=list)
    tasks: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)


class TemplateApplyOptions(BaseModel):
    conflict_behavior: ConflictBehavior = ConflictBehavior.SKIP
    include_dependencies: bool = True
    component_id: str | None = None


class TemplatePreview(BaseModel):
    total_tasks: int
    total_dependencies: int
    estimated_duration_days: float
    phase_breakdown: dict[str, int] = Field(default_factory=dict)
    discipline_breakdown: dict[str, int] = Field(default_factory=dict)


class TemplateApplyResult(BaseModel):
    project_id: str
    template_id: str
    tasks_created: int = 0
    dependencies_created: int = 0
    task_mapping: dict[str, str] = Field(default_factory=dict)  # template code -> task id
    skipped: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    duration_ms: int = 0
