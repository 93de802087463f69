"""Pydantic models for the ZenaManage planning core."""

from zena_mcp.models.actor import SYSTEM, Actor, SystemActor, UserActor, user
from zena_mcp.models.events import (
    BaselineCreated,
    ComponentChanged,
    DomainEvent,
    ProjectChanged,
    TaskChanged,
    TemplateApplied,
)
from zena_mcp.models.inputs import (
    AddDependencyInput,
    BaselineVarianceInput,
    BulkProgressInput,
    ComponentTreeInput,
    CreateBaselineInput,
    DelayImpactInput,
    DeleteComponentInput,
    ProjectQueryInput,
    RemoveDependencyInput,
    SetProjectStatusInput,
    SyncVisibilityInput,
    TagStatusInput,
    UpdateComponentInput,
)
from zena_mcp.models.reports import (
    ComponentNode,
    CostVariance,
    DelayImpact,
    DependencyGraph,
    EvmMetrics,
    GraphNode,
    ScheduleVariance,
    VarianceReport,
)
from zena_mcp.models.task import (
    BaselineModel,
    ComponentModel,
    ProjectModel,
    TaskModel,
    TaskUpdate,
    generate_id,
)
from zena_mcp.models.template import (
    TemplateApplyOptions,
    TemplateApplyResult,
    TemplatePreview,
    TemplateSelections,
    TemplateSet,
    TemplateTask,
)

__all__ = [
    # Records
    "TaskModel",
    "TaskUpdate",
    "ComponentModel",
    "ProjectModel",
    "BaselineModel",
    "generate_id",
    # Actors
    "Actor",
    "UserActor",
    "SystemActor",
    "SYSTEM",
    "user",
    # Events
    "DomainEvent",
    "TaskChanged",
    "ComponentChanged",
    "ProjectChanged",
    "BaselineCreated",
    "TemplateApplied",
    # Reports
    "GraphNode",
    "DependencyGraph",
    "DelayImpact",
    "ComponentNode",
    "EvmMetrics",
    "ScheduleVariance",
    "CostVariance",
    "VarianceReport",
    # Templates
    "TemplateTask",
    "TemplateSet",
    "TemplateSelections",
    "TemplateApplyOptions",
    "TemplatePreview",
    "TemplateApplyResult",
    # Tool input models
    "ProjectQueryInput",
    "DelayImpactInput",
    "AddDependencyInput",
    "RemoveDependencyInput",
    "ComponentTreeInput",
    "UpdateComponentInput",
    "BulkProgressInput",
    "DeleteComponentInput",
    "TagStatusInput",
    "SyncVisibilityInput",
    "SetProjectStatusInput",
    "CreateBaselineInput",
    "BaselineVarianceInput",
]
