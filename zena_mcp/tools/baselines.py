"""Baseline and variance MCP tools."""

import json

from mcp.types import ToolAnnotations

from zena_mcp.enums import ResponseFormat
from zena_mcp.exceptions import BaselineNotFoundError, ZenaError
from zena_mcp.models.inputs import BaselineVarianceInput, CreateBaselineInput
from zena_mcp.server import get_workspace, mcp
from zena_mcp.utils.formatters import _format_error, _format_variance_concise, _format_variance_markdown
from zena_mcp.utils.parsers import _parse_actor


@mcp.tool(
    name="zena_create_baseline",
    annotations=ToolAnnotations(
        title="Create Baseline",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def zena_create_baseline(params: CreateBaselineInput) -> str:
    """
    Record a new baseline version for a project.

    Baselines are immutable; each call adds the next version of its type
    (contract or execution) and variance is measured against the latest.

    Args:
        params: CreateBaselineInput containing project_id, type, dates and planned cost

    Returns:
        Confirmation with the new version number
    """
    try:
        baseline = get_workspace().baselines.create_baseline(
            params.project_id,
            params.baseline_type,
            params.start_date,
            params.end_date,
            params.planned_cost,
            actor=_parse_actor(params.user_id),
            name=params.name,
        )
    except ZenaError as e:
        return _format_error(e)

    return (
        f"Baseline '{baseline.name}' created: {baseline.baseline_type.value} v{baseline.version}, "
        f"{baseline.planned_duration_days} days, planned cost {baseline.planned_cost:,.2f}."
    )


@mcp.tool(
    name="zena_baseline_variance",
    annotations=ToolAnnotations(
        title="Baseline Variance",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def zena_baseline_variance(params: BaselineVarianceInput) -> str:
    """
    Compare a project's progress and cost with its current baseline.

    Reports earned value metrics (PV, EV, AC, CPI, SPI, EAC, ETC, VAC),
    schedule and cost variance with their status, an overall health band and
    recommendations.

    Args:
        params: BaselineVarianceInput containing project_id, baseline_type, as_of and response_format

    Returns:
        The variance report
    """
    try:
        report = get_workspace().baselines.compare(params.project_id, params.baseline_type, params.as_of)
    except BaselineNotFoundError as e:
        return _format_error(e, "Create one with zena_create_baseline.")
    except ZenaError as e:
        return _format_error(e)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(report.model_dump(mode="json"), indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        return _format_variance_concise(report)

    return _format_variance_markdown(report)
