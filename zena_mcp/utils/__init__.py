"""Utility functions for the ZenaManage planning core."""

from zena_mcp.utils.formatters import (
    _format_component_tree,
    _format_error,
    _format_graph_markdown,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
    _format_variance_markdown,
)
from zena_mcp.utils.parsers import _parse_actor, _parse_task, _parse_tasks, _parse_template, _read_snapshot

__all__ = [
    "_parse_actor",
    "_parse_task",
    "_parse_tasks",
    "_parse_template",
    "_read_snapshot",
    "_format_task_concise",
    "_format_task_markdown",
    "_format_tasks_concise",
    "_format_tasks_markdown",
    "_format_graph_markdown",
    "_format_component_tree",
    "_format_variance_markdown",
    "_format_error",
]
