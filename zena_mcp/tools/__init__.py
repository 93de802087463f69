"""MCP tool definitions for the ZenaManage planning core."""

# Import all tools to register them with the MCP server
from zena_mcp.tools.baselines import zena_baseline_variance, zena_create_baseline
from zena_mcp.tools.components import (
    zena_bulk_progress,
    zena_component_tree,
    zena_delete_component,
    zena_update_component,
)
from zena_mcp.tools.graph import (
    zena_add_dependency,
    zena_available_tasks,
    zena_delay_impact,
    zena_dependency_graph,
    zena_execution_order,
    zena_remove_dependency,
)
from zena_mcp.tools.visibility import zena_set_project_status, zena_sync_visibility, zena_tag_status

__all__ = [
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
]
