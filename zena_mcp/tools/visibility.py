"""Conditional visibility and project status MCP tools."""

import json

from mcp.types import ToolAnnotations

from zena_mcp.enums import ResponseFormat
from zena_mcp.exceptions import ZenaError
from zena_mcp.models.inputs import SetProjectStatusInput, SyncVisibilityInput, TagStatusInput
from zena_mcp.server import get_workspace, mcp
from zena_mcp.utils.formatters import _format_error
from zena_mcp.utils.parsers import _parse_actor


@mcp.tool(
    name="zena_tag_status",
    annotations=ToolAnnotations(
        title="Conditional Tag Status",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_tag_status(params: TagStatusInput) -> str:
    """
    Report which conditional tags are active for a project.

    SUPPORTED TAGS:
    - Phase: design_phase, construction_phase, closeout_phase (from project status)
    - Budget: budget_low, budget_medium, budget_high (from total planned cost)
    - Feature: has_<feature> (a component name contains the feature)
    - Category: category_<name> (the project carries the category tag)

    Unknown tags are reported as inactive. Tasks carrying an inactive tag
    are hidden from graph queries.

    Args:
        params: TagStatusInput containing project_id, optional tags and response_format

    Returns:
        Each tag with its activity and the number of tasks carrying it
    """
    workspace = get_workspace()
    try:
        workspace.projects.get_project(params.project_id)
        tasks = workspace.tasks.list_tasks(params.project_id)
        tags = params.tags or sorted({t.conditional_tag for t in tasks if t.conditional_tag})
        status = {tag: workspace.visibility.is_tag_active(tag, params.project_id) for tag in tags}
    except ZenaError as e:
        return _format_error(e)

    usage = {tag: sum(1 for t in tasks if t.conditional_tag == tag) for tag in tags}

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "project_id": params.project_id,
                "tags": [{"tag": tag, "active": status[tag], "tasks": usage[tag]} for tag in tags],
            },
            indent=2,
        )

    if not tags:
        return f"Project {params.project_id} has no conditional tags in use."

    if params.response_format == ResponseFormat.CONCISE:
        return "\n".join(f"{tag}: {'active' if status[tag] else 'inactive'}" for tag in tags)

    lines = [
        f"# Conditional Tags: {params.project_id}",
        "",
        "| Tag | Active | Tasks |",
        "|-----|--------|-------|",
    ]
    for tag in tags:
        lines.append(f"| {tag} | {'yes' if status[tag] else 'no'} | {usage[tag]} |")
    return "\n".join(lines)


@mcp.tool(
    name="zena_sync_visibility",
    annotations=ToolAnnotations(
        title="Sync Task Visibility",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_sync_visibility(params: SyncVisibilityInput) -> str:
    """
    Re-evaluate every conditional task of a project and update its hidden flag.

    Cached tag results are dropped first, so the evaluation reflects the
    project's current state.

    Args:
        params: SyncVisibilityInput containing project_id and user_id

    Returns:
        Number of tasks whose visibility changed
    """
    workspace = get_workspace()
    try:
        workspace.visibility.invalidate(params.project_id)
        changed = workspace.visibility.update_task_visibility_for_project(
            params.project_id, _parse_actor(params.user_id)
        )
    except ZenaError as e:
        return _format_error(e)

    return f"Visibility synced for project {params.project_id}: {changed} task(s) changed."


@mcp.tool(
    name="zena_set_project_status",
    annotations=ToolAnnotations(
        title="Set Project Status",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_set_project_status(params: SetProjectStatusInput) -> str:
    """
    Change a project's status.

    Phase tags follow the status, so tasks tagged for a phase the project has
    left are hidden and those tagged for the new phase are revealed.

    Args:
        params: SetProjectStatusInput containing project_id, status and user_id

    Returns:
        Confirmation with the number of currently hidden tasks
    """
    workspace = get_workspace()
    try:
        project = workspace.projects.set_status(params.project_id, params.status, _parse_actor(params.user_id))
        hidden = sum(1 for t in workspace.tasks.list_tasks(project.id) if t.is_hidden)
    except ZenaError as e:
        return _format_error(e)

    return f"Project {project.id} is now '{project.status.value}'. {hidden} task(s) hidden."
