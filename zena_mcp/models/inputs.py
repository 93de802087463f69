"""Input models for ZenaManage MCP tools."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from zena_mcp.enums import BaselineType, ProjectStatus, ResponseFormat

# ============================================================================
# Dependency Graph Input Models
# ============================================================================


class ProjectQueryInput(BaseModel):
    """Input model for read-only queries scoped to one project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project ID", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable, 'concise' for minimal, or 'json' for machine-readable",
    )


class DelayImpactInput(BaseModel):
    """Input model for projecting the effect of a task slipping."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="ID of the task that slips", min_length=1)
    delay_days: int = Field(..., description="Number of days the task slips", ge=0, le=3650)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable, 'concise' for minimal, or 'json' for machine-readable",
    )


class AddDependencyInput(BaseModel):
    """Input model for adding a dependency edge between two tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task that must wait", min_length=1)
    depends_on_task_id: str = Field(..., description="Task that must finish first", min_length=1)
    user_id: str | None = Field(default=None, description="User performing the change (omit for system)")


class RemoveDependencyInput(BaseModel):
    """Input model for removing a dependency edge."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task that currently waits", min_length=1)
    depends_on_task_id: str = Field(..., description="Dependency to drop", min_length=1)
    user_id: str | None = Field(default=None, description="User performing the change (omit for system)")


# ============================================================================
# Component Roll-up Input Models
# ============================================================================


class ComponentTreeInput(BaseModel):
    """Input model for rendering a project's component tree."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project ID", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable, 'concise' for minimal, or 'json' for machine-readable",
    )


class UpdateComponentInput(BaseModel):
    """Input model for updating a single component."""

    model_config = ConfigDict(str_strip_whitespace=True)

    component_id: str = Field(..., description="Component ID", min_length=1)
    progress_percent: float | None = Field(default=None, description="New progress (0-100)")
    actual_cost: float | None = Field(default=None, description="New actual cost", ge=0)
    planned_cost: float | None = Field(default=None, description="New planned cost", ge=0)
    name: str | None = Field(default=None, description="New component name", max_length=255)
    user_id: str | None = Field(default=None, description="User performing the change (omit for system)")


class BulkProgressInput(BaseModel):
    """Input model for updating the progress of many components at once."""

    model_config = ConfigDict(str_strip_whitespace=True)

    updates: dict[str, float] = Field(
        ...,
        description="Mapping of component ID to new progress (0-100); applied atomically",
    )
    user_id: str | None = Field(default=None, description="User performing the change (omit for system)")

    @field_validator("updates")
    @classmethod
    def validate_updates(cls, v: dict[str, float]) -> dict[str, float]:
        if not v:
            raise ValueError("At least one component update is required")
        if len(v) > 500:
            raise ValueError("At most 500 components can be updated at once")
        return {k.strip(): value for k, value in v.items()}


class DeleteComponentInput(BaseModel):
    """Input model for soft-deleting a component."""

    model_config = ConfigDict(str_strip_whitespace=True)

    component_id: str = Field(..., description="Component ID", min_length=1)
    user_id: str | None = Field(default=None, description="User performing the change (omit for system)")


# ============================================================================
# Conditional Visibility Input Models
# ============================================================================


class TagStatusInput(BaseModel):
    """Input model for checking which conditional tags are active."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project ID", min_length=1)
    tags: list[str] | None = Field(
        default=None,
        description="Tags to check (e.g., 'design_phase', 'budget_high', 'has_hvac'). "
        "Defaults to every tag used by the project's tasks.",
        max_length=100,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable, 'concise' for minimal, or 'json' for machine-readable",
    )


class SyncVisibilityInput(BaseModel):
    """Input model for re-evaluating task visibility in a project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project ID", min_length=1)
    user_id: str | None = Field(default=None, description="User performing the change (omit for system)")


class SetProjectStatusInput(BaseModel):
    """Input model for changing a project's status."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project ID", min_length=1)
    status: ProjectStatus = Field(..., description="New project status")
    user_id: str | None = Field(default=None, description="User performing the change (omit for system)")


# ============================================================================
# Baseline Input Models
# ============================================================================


class CreateBaselineInput(BaseModel):
    """Input model for recording a new baseline version."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project ID", min_length=1)
    baseline_type: BaselineType = Field(default=BaselineType.EXECUTION, description="contract or execution")
    start_date: date = Field(..., description="Planned start date (YYYY-MM-DD)")
    end_date: date = Field(..., description="Planned end date (YYYY-MM-DD)")
    planned_cost: float = Field(..., description="Total planned cost")
    name: str | None = Field(default=None, description="Optional baseline name", max_length=255)
    user_id: str | None = Field(default=None, description="User performing the change (omit for system)")


class BaselineVarianceInput(BaseModel):
    """Input model for comparing a project with its current baseline."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project ID", min_length=1)
    baseline_type: BaselineType = Field(default=BaselineType.EXECUTION, description="contract or execution")
    as_of: date | None = Field(default=None, description="Evaluation date (defaults to today)")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable, 'concise' for minimal, or 'json' for machine-readable",
    )
