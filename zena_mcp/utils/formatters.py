"""Formatting utilities for tool output."""

from zena_mcp.models.reports import ComponentNode, DelayImpact, DependencyGraph, VarianceReport
from zena_mcp.models.task import TaskModel

STATUS_ICONS = {"pending": "[ ]", "in_progress": "[~]", "completed": "[x]", "cancelled": "[-]"}


def _format_task_concise(task: TaskModel) -> str:
    """
    Format a single task in concise format for token efficiency.

    Output: "a1b2c3d4: Pour foundations (high, deps:2, 40%)"
    """
    meta = [task.priority.value]
    if task.dependencies:
        meta.append(f"deps:{len(task.dependencies)}")
    if task.progress_percent:
        meta.append(f"{task.progress_percent:.0f}%")
    if task.is_hidden:
        meta.append("hidden")
    return f"{task.id[:8]}: {task.name[:60]} ({', '.join(meta)})"


def _format_tasks_concise(tasks: list[TaskModel], title: str | None = None) -> str:
    """
    Format a list of tasks in concise format.

    Output:
    3 task(s) | execution order
    1. a1b2c3d4: Survey site (medium)
    2. e5f6a7b8: Pour foundations (high, deps:1)
    """
    if not tasks:
        return "0 tasks"

    header = f"{len(tasks)} task(s)"
    if title:
        header = f"{header} | {title}"
    lines = [header]
    for i, task in enumerate(tasks, 1):
        lines.append(f"{i}. {_format_task_concise(task)}")
    return "\n".join(lines)


def _format_task_markdown(task: TaskModel) -> str:
    """Format a single task as markdown."""
    icon = STATUS_ICONS.get(task.status.value, "")
    lines = [f"### {icon} {task.name}", f"`{task.id}`"]

    details = [f"**Status**: {task.status.value}", f"**Priority**: {task.priority.value}"]
    if task.progress_percent:
        details.append(f"**Progress**: {task.progress_percent:.0f}%")
    if task.start_date:
        details.append(f"**Start**: {task.start_date.isoformat()}")
    if task.end_date:
        details.append(f"**End**: {task.end_date.isoformat()}")
    if task.conditional_tag:
        details.append(f"**Tag**: {task.conditional_tag}")
    lines.append(" | ".join(details))

    if task.dependencies:
        lines.append(f"**Depends on**: {', '.join(d[:8] for d in task.dependencies)}")

    return "\n".join(lines)


def _format_tasks_markdown(tasks: list[TaskModel], title: str = "Tasks") -> str:
    """Format a list of tasks as markdown."""
    if not tasks:
        return f"# {title}\n\nNo tasks found."

    lines = [f"# {title}", f"*{len(tasks)} task(s)*", ""]
    for task in tasks:
        lines.append(_format_task_markdown(task))
        lines.append("")
    return "\n".join(lines)


def _format_graph_markdown(graph: DependencyGraph) -> str:
    """Format a dependency graph as markdown, one section per task."""
    if not graph.nodes:
        return f"# Dependency Graph: {graph.project_id}\n\nNo visible tasks."

    lines = [
        f"# Dependency Graph: {graph.project_id}",
        f"*{len(graph.nodes)} task(s), {graph.edge_count} dependency edge(s)*",
        "",
    ]
    names = {n.task_id: n.name for n in graph.nodes}
    for node in graph.nodes:
        lines.append(f"### {node.name} ({node.status.value})")
        if node.dependencies:
            lines.append(f"- **Depends on**: {', '.join(names.get(d, d) for d in node.dependencies)}")
        if node.dependents:
            lines.append(f"- **Blocks**: {', '.join(names.get(d, d) for d in node.dependents)}")
        if not node.dependencies and not node.dependents:
            lines.append("- Independent")
        lines.append("")
    return "\n".join(lines)


def _format_graph_concise(graph: DependencyGraph) -> str:
    """
    Format a dependency graph as one edge list line per task.

    Output:
    4 tasks, 3 edges
    a1b2c3d4 <- e5f6a7b8, c9d0e1f2
    """
    lines = [f"{len(graph.nodes)} tasks, {graph.edge_count} edges"]
    for node in graph.nodes:
        if node.dependencies:
            lines.append(f"{node.task_id[:8]} <- {', '.join(d[:8] for d in node.dependencies)}")
        else:
            lines.append(f"{node.task_id[:8]} (root)")
    return "\n".join(lines)


def _format_delay_impact(task: TaskModel, delay_days: int, impacts: list[DelayImpact]) -> str:
    if not impacts:
        return f"# Delay Impact: {task.name}\n\nA {delay_days}-day slip affects no other tasks."

    lines = [
        f"# Delay Impact: {task.name}",
        f"*A {delay_days}-day slip affects {len(impacts)} task(s)*",
        "",
        "| Task | Depth | Current start | Projected start |",
        "|------|-------|---------------|-----------------|",
    ]
    for impact in impacts:
        current = impact.current_start.isoformat() if impact.current_start else "-"
        projected = impact.projected_start.isoformat() if impact.projected_start else "-"
        lines.append(f"| {impact.name} | {impact.depth} | {current} | {projected} |")
    return "\n".join(lines)


def _format_component_node(node: ComponentNode, lines: list[str]) -> None:
    indent = "  " * node.depth
    lines.append(
        f"{indent}- **{node.name}** {node.progress_percent:.1f}% "
        f"(planned {node.planned_cost:,.2f}, actual {node.actual_cost:,.2f})"
    )
    for child in node.children:
        _format_component_node(child, lines)


def _format_component_tree(project_id: str, roots: list[ComponentNode]) -> str:
    """Format a component forest as a nested markdown list."""
    if not roots:
        return f"# Components: {project_id}\n\nNo components found."

    lines = [f"# Components: {project_id}", ""]
    for root in roots:
        _format_component_node(root, lines)
    return "\n".join(lines)


def _format_component_tree_concise(roots: list[ComponentNode]) -> str:
    """Output: "Structure 55.0% > Frame 60.0%" style paths, one leaf per line."""
    lines: list[str] = []

    def walk(node: ComponentNode, trail: list[str]) -> None:
        trail = trail + [f"{node.name} {node.progress_percent:.1f}%"]
        if node.is_leaf:
            lines.append(" > ".join(trail))
        for child in node.children:
            walk(child, trail)

    for root in roots:
        walk(root, [])
    return "\n".join(lines) if lines else "0 components"


def _format_money(value: float) -> str:
    return f"{value:,.2f}"


def _format_index(value: float | None) -> str:
    return f"{value:.3f}" if value is not None else "n/a"


def _format_variance_markdown(report: VarianceReport) -> str:
    """Format a variance report as markdown."""
    evm = report.evm
    earned = report.cost.earned_variance_percent
    earned = "n/a" if earned is None else f"{earned:+.1f}%"
    lines = [
        f"# Baseline Variance: {report.project_id}",
        f"*{report.baseline_type} baseline v{report.baseline_version}, as of {report.as_of.isoformat()}*",
        "",
        f"**Health**: {report.health.value} | **Cost health**: {report.cost_health.value} | "
        f"**Progress**: {report.progress_percent:.1f}%",
        "",
        "## Earned Value",
        f"- PV: {_format_money(evm.planned_value)}",
        f"- EV: {_format_money(evm.earned_value)}",
        f"- AC: {_format_money(evm.actual_cost)}",
        f"- CPI: {_format_index(evm.cpi)} | SPI: {_format_index(evm.spi)}",
        f"- EAC: {_format_money(evm.eac)} | ETC: {_format_money(evm.etc)} | VAC: {_format_money(evm.vac)}",
        "",
        "## Schedule",
        f"- {report.schedule.status.value}: {report.schedule.variance_days:+.1f} days "
        f"({report.schedule.elapsed_days} elapsed vs {report.schedule.expected_days:.1f} expected "
        f"of {report.schedule.planned_duration_days})",
        "",
        "## Cost",
        f"- {report.cost.status.value}: {report.cost.variance_percent:+.1f}% "
        f"({_format_money(report.cost.variance_amount)} against {_format_money(report.cost.planned_cost)} planned)",
        f"- Against earned value: {earned}",
        "",
        "## Recommendations",
    ]
    lines.extend(f"- {note}" for note in report.recommendations)
    return "\n".join(lines)


def _format_variance_concise(report: VarianceReport) -> str:
    """Output: "Fair | CPI 0.833 SPI 1.000 | Behind Schedule +14.5d | Under Budget -40.0%"."""
    return (
        f"{report.health.value} | CPI {_format_index(report.evm.cpi)} SPI {_format_index(report.evm.spi)} | "
        f"{report.schedule.status.value} {report.schedule.variance_days:+.1f}d | "
        f"{report.cost.status.value} {report.cost.variance_percent:+.1f}%"
    )


def _format_error(exc: Exception, tip: str | None = None) -> str:
    """Render a domain error the way tools report failures."""
    message = f"Error: {exc}"
    if tip:
        message += f"\nTip: {tip}"
    return message
