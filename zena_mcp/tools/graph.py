"""Dependency graph MCP tools."""

import json

from mcp.types import ToolAnnotations

from zena_mcp.enums import ResponseFormat
from zena_mcp.exceptions import CircularDependencyError, CycleDetectedError, NotFoundError, ZenaError
from zena_mcp.models.inputs import (
    AddDependencyInput,
    DelayImpactInput,
    ProjectQueryInput,
    RemoveDependencyInput,
)
from zena_mcp.server import get_workspace, mcp
from zena_mcp.utils.formatters import (
    _format_delay_impact,
    _format_error,
    _format_graph_concise,
    _format_graph_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
)
from zena_mcp.utils.parsers import _parse_actor

NOT_FOUND_TIP = "Use zena_dependency_graph to find valid task IDs for a project."


@mcp.tool(
    name="zena_dependency_graph",
    annotations=ToolAnnotations(
        title="Dependency Graph",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_dependency_graph(params: ProjectQueryInput) -> str:
    """
    Show the dependency graph of a project's visible tasks.

    USE THIS WHEN:
    - Exploring which tasks block which
    - Looking up task IDs before adding or removing dependencies

    DO NOT USE WHEN:
    - You need a valid work order → use zena_execution_order instead
    - You want tasks that can start now → use zena_available_tasks instead

    Args:
        params: ProjectQueryInput containing project_id and response_format

    Returns:
        Each task with its dependencies and dependents
    """
    try:
        graph = get_workspace().dependencies.get_dependency_graph(params.project_id)
    except ZenaError as e:
        return _format_error(e)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"edges": graph.edge_count, **graph.model_dump(mode="json")},
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        return _format_graph_concise(graph)

    return _format_graph_markdown(graph)


@mcp.tool(
    name="zena_execution_order",
    annotations=ToolAnnotations(
        title="Execution Order",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_execution_order(params: ProjectQueryInput) -> str:
    """
    List a project's visible tasks in an order that respects every dependency.

    Every task appears after all of its dependencies. Fails when the stored
    graph contains a cycle, naming the tasks that could not be ordered.

    Args:
        params: ProjectQueryInput containing project_id and response_format

    Returns:
        Tasks in execution order
    """
    try:
        tasks = get_workspace().dependencies.get_execution_order(params.project_id)
    except CycleDetectedError as e:
        return _format_error(e, "Remove one dependency on the listed tasks with zena_remove_dependency.")
    except ZenaError as e:
        return _format_error(e)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"count": len(tasks), "order": [t.id for t in tasks], "tasks": [t.model_dump(mode="json") for t in tasks]},
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(tasks, "execution order")

    return _format_tasks_markdown(tasks, f"Execution Order: {params.project_id}")


@mcp.tool(
    name="zena_available_tasks",
    annotations=ToolAnnotations(
        title="Available Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_available_tasks(params: ProjectQueryInput) -> str:
    """
    List pending, visible tasks whose dependencies are all completed.

    Args:
        params: ProjectQueryInput containing project_id and response_format

    Returns:
        Tasks that can start now
    """
    try:
        tasks = get_workspace().dependencies.get_available_tasks(params.project_id)
    except ZenaError as e:
        return _format_error(e)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({"count": len(tasks), "tasks": [t.model_dump(mode="json") for t in tasks]}, indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(tasks, "available")

    return _format_tasks_markdown(tasks, "Available Tasks")


@mcp.tool(
    name="zena_delay_impact",
    annotations=ToolAnnotations(
        title="Delay Impact",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_delay_impact(params: DelayImpactInput) -> str:
    """
    Show every task pushed back, directly or transitively, if a task slips.

    Each affected task is listed once, at the depth it is first reached.

    Args:
        params: DelayImpactInput containing task_id, delay_days and response_format

    Returns:
        Affected tasks with current and projected start dates
    """
    workspace = get_workspace()
    try:
        task = workspace.tasks.get_task(params.task_id)
        impacts = workspace.dependencies.get_delay_impact(params.task_id, params.delay_days)
    except NotFoundError as e:
        return _format_error(e, NOT_FOUND_TIP)
    except ZenaError as e:
        return _format_error(e)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "task_id": task.id,
                "delay_days": params.delay_days,
                "impacted": [i.model_dump(mode="json") for i in impacts],
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        if not impacts:
            return "0 tasks impacted"
        lines = [f"{len(impacts)} task(s) impacted by +{params.delay_days}d"]
        lines.extend(f"{'  ' * (i.depth - 1)}{i.task_id[:8]}: {i.name}" for i in impacts)
        return "\n".join(lines)

    return _format_delay_impact(task, params.delay_days, impacts)


@mcp.tool(
    name="zena_add_dependency",
    annotations=ToolAnnotations(
        title="Add Dependency",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_add_dependency(params: AddDependencyInput) -> str:
    """
    Make a task wait for another task of the same project.

    The edge is rejected, and nothing is written, if it would create a
    circular dependency or if the target is not a live task of the project.

    Args:
        params: AddDependencyInput containing task_id, depends_on_task_id and user_id

    Returns:
        Confirmation message, or the reason the edge was rejected
    """
    try:
        task = get_workspace().dependencies.add_dependency(
            params.task_id, params.depends_on_task_id, _parse_actor(params.user_id)
        )
    except CircularDependencyError as e:
        return _format_error(e, "Use zena_execution_order to inspect the current ordering.")
    except NotFoundError as e:
        return _format_error(e, NOT_FOUND_TIP)
    except ZenaError as e:
        return _format_error(e)

    return f"Dependency added: '{task.name}' now waits on {params.depends_on_task_id} ({len(task.dependencies)} total)."


@mcp.tool(
    name="zena_remove_dependency",
    annotations=ToolAnnotations(
        title="Remove Dependency",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_remove_dependency(params: RemoveDependencyInput) -> str:
    """
    Remove a dependency edge. Removing an edge that does not exist is a no-op.

    Args:
        params: RemoveDependencyInput containing task_id, depends_on_task_id and user_id

    Returns:
        Confirmation message
    """
    try:
        task = get_workspace().dependencies.remove_dependency(
            params.task_id, params.depends_on_task_id, _parse_actor(params.user_id)
        )
    except NotFoundError as e:
        return _format_error(e, NOT_FOUND_TIP)
    except ZenaError as e:
        return _format_error(e)

    return f"Dependency removed: '{task.name}' has {len(task.dependencies)} remaining dependency(ies)."
