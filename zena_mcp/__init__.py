"""
MCP Server for the ZenaManage planning core.

This server exposes the project planning engines: the task dependency graph,
the component progress and cost roll-up, conditional task visibility, and
baseline variance with earned value metrics.
"""

# Re-export enums
from zena_mcp.enums import (
    BaselineType,
    ConflictBehavior,
    CostStatus,
    EventType,
    HealthBand,
    ProjectStatus,
    ResponseFormat,
    ScheduleStatus,
    TaskPriority,
    TaskStatus,
)

# Re-export errors
from zena_mcp.exceptions import (
    BaselineNotFoundError,
    CircularDependencyError,
    ComponentCycleError,
    ComponentHasChildrenError,
    ComponentHasTasksError,
    ComponentNotFoundError,
    CycleDetectedError,
    DuplicateIdError,
    InvalidBaselineError,
    InvalidProgressRangeError,
    MissingDependencyTargetError,
    NotFoundError,
    ProjectNotFoundError,
    TaskNotFoundError,
    TemplateError,
    ZenaError,
)

# Re-export models
from zena_mcp.models import (
    SYSTEM,
    BaselineModel,
    ComponentModel,
    ComponentNode,
    DependencyGraph,
    ProjectModel,
    TaskModel,
    TaskUpdate,
    TemplateSet,
    TemplateTask,
    VarianceReport,
    user,
)

# Re-export MCP server instance
from zena_mcp.server import get_workspace, mcp, reset_workspace
from zena_mcp.settings import Settings

# Re-export tools
from zena_mcp.tools import (
    zena_add_dependency,
    zena_available_tasks,
    zena_baseline_variance,
    zena_bulk_progress,
    zena_component_tree,
    zena_create_baseline,
    zena_delay_impact,
    zena_delete_component,
    zena_dependency_graph,
    zena_execution_order,
    zena_remove_dependency,
    zena_set_project_status,
    zena_sync_visibility,
    zena_tag_status,
    zena_update_component,
)
from zena_mcp.workspace import Workspace

__all__ = [
    # Enums
    "ResponseFormat",
    "TaskStatus",
    "TaskPriority",
    "ProjectStatus",
    "BaselineType",
    "ConflictBehavior",
    "ScheduleStatus",
    "CostStatus",
    "HealthBand",
    "EventType",
    # Errors
    "ZenaError",
    "NotFoundError",
    "TaskNotFoundError",
    "ComponentNotFoundError",
    "ProjectNotFoundError",
    "CircularDependencyError",
    "CycleDetectedError",
    "DuplicateIdError",
    "MissingDependencyTargetError",
    "InvalidProgressRangeError",
    "ComponentHasChildrenError",
    "ComponentHasTasksError",
    "ComponentCycleError",
    "InvalidBaselineError",
    "BaselineNotFoundError",
    "TemplateError",
    # Models
    "TaskModel",
    "TaskUpdate",
    "ComponentModel",
    "ProjectModel",
    "BaselineModel",
    "TemplateSet",
    "TemplateTask",
    "DependencyGraph",
    "ComponentNode",
    "VarianceReport",
    "SYSTEM",
    "user",
    # Wiring
    "Settings",
    "Workspace",
    "get_workspace",
    "reset_workspace",
    # Dependency graph tools
    "zena_dependency_graph",
    "zena_execution_order",
    "zena_available_tasks",
    "zena_delay_impact",
    "zena_add_dependency",
    "zena_remove_dependency",
    # Component roll-up tools
    "zena_component_tree",
    "zena_update_component",
    "zena_bulk_progress",
    "zena_delete_component",
    # Visibility tools
    "zena_tag_status",
    "zena_sync_visibility",
    "zena_set_project_status",
    # Baseline tools
    "zena_create_baseline",
    "zena_baseline_variance",
    # MCP server instance
    "mcp",
]
