"""Component roll-up MCP tools."""

import json

from mcp.types import ToolAnnotations

from zena_mcp.enums import ResponseFormat
from zena_mcp.exceptions import (
    ComponentHasChildrenError,
    ComponentHasTasksError,
    InvalidProgressRangeError,
    NotFoundError,
    ZenaError,
)
from zena_mcp.models.inputs import (
    BulkProgressInput,
    ComponentTreeInput,
    DeleteComponentInput,
    UpdateComponentInput,
)
from zena_mcp.server import get_workspace, mcp
from zena_mcp.utils.formatters import _format_component_tree, _format_component_tree_concise, _format_error
from zena_mcp.utils.parsers import _parse_actor

NOT_FOUND_TIP = "Use zena_component_tree to find valid component IDs for a project."


@mcp.tool(
    name="zena_component_tree",
    annotations=ToolAnnotations(
        title="Component Tree",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_component_tree(params: ComponentTreeInput) -> str:
    """
    Show a project's component hierarchy with rolled-up progress and cost.

    A parent's progress is the mean of its children's progress; its actual
    cost is the sum of theirs.

    Args:
        params: ComponentTreeInput containing project_id and response_format

    Returns:
        The component forest, any depth
    """
    workspace = get_workspace()
    try:
        roots = workspace.components.get_component_tree(params.project_id)
        project = workspace.projects.get_project(params.project_id)
    except ZenaError as e:
        return _format_error(e)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "project_id": project.id,
                "progress_percent": project.progress_percent,
                "actual_cost": project.actual_cost,
                "components": [r.model_dump(mode="json") for r in roots],
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        return _format_component_tree_concise(roots)

    summary = f"\n\n**Project**: {project.progress_percent:.1f}% complete, actual cost {project.actual_cost:,.2f}"
    return _format_component_tree(params.project_id, roots) + summary


@mcp.tool(
    name="zena_update_component",
    annotations=ToolAnnotations(
        title="Update Component",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_update_component(params: UpdateComponentInput) -> str:
    """
    Update a component's progress, costs or name and roll the change up.

    Ancestors and the project are recalculated in the same transaction.
    Progress and actual cost of a component with children are derived from
    them, so writing those fields on a parent has no lasting effect.

    Args:
        params: UpdateComponentInput containing component_id and the fields to change

    Returns:
        Confirmation with the component's and project's resulting progress
    """
    workspace = get_workspace()
    try:
        component = workspace.components.update_component(
            params.component_id,
            progress_percent=params.progress_percent,
            actual_cost=params.actual_cost,
            planned_cost=params.planned_cost,
            name=params.name,
            actor=_parse_actor(params.user_id),
        )
        project = workspace.projects.get_project(component.project_id)
    except InvalidProgressRangeError as e:
        return _format_error(e, "Progress is a percentage between 0 and 100.")
    except NotFoundError as e:
        return _format_error(e, NOT_FOUND_TIP)
    except ZenaError as e:
        return _format_error(e)

    return (
        f"Component '{component.name}' updated: {component.progress_percent:.1f}% complete, "
        f"actual cost {component.actual_cost:,.2f}.\n"
        f"Project {project.id}: {project.progress_percent:.1f}% complete."
    )


@mcp.tool(
    name="zena_bulk_progress",
    annotations=ToolAnnotations(
        title="Bulk Update Progress",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_bulk_progress(params: BulkProgressInput) -> str:
    """
    Set the progress of many components in one atomic operation.

    Either every update is applied and rolled up, or none is.

    Args:
        params: BulkProgressInput containing a component_id -> progress mapping

    Returns:
        Number of components whose progress changed
    """
    try:
        updated = get_workspace().components.bulk_update_progress(params.updates, _parse_actor(params.user_id))
    except InvalidProgressRangeError as e:
        return _format_error(e, "No component was updated. Progress is a percentage between 0 and 100.")
    except NotFoundError as e:
        return _format_error(e, f"No component was updated. {NOT_FOUND_TIP}")
    except ZenaError as e:
        return _format_error(e)

    unchanged = len(params.updates) - len(updated)
    lines = [f"Updated progress on {len(updated)} component(s); {unchanged} already at the requested value."]
    lines.extend(f"- {c.name}: {c.progress_percent:.1f}%" for c in updated)
    return "\n".join(lines)


@mcp.tool(
    name="zena_delete_component",
    annotations=ToolAnnotations(
        title="Delete Component",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def zena_delete_component(params: DeleteComponentInput) -> str:
    """
    Soft-delete a component and roll the change up to its ancestors.

    Refused while the component has live children or linked tasks.

    Args:
        params: DeleteComponentInput containing component_id and user_id

    Returns:
        Confirmation message, or the reason the delete was refused
    """
    try:
        component = get_workspace().components.delete_component(params.component_id, _parse_actor(params.user_id))
    except ComponentHasChildrenError as e:
        return _format_error(e, "Delete child components first, leaf to root.")
    except ComponentHasTasksError as e:
        return _format_error(e, "Move the tasks to another component or delete them.")
    except NotFoundError as e:
        return _format_error(e, NOT_FOUND_TIP)
    except ZenaError as e:
        return _format_error(e)

    return f"Component '{component.name}' deleted."
