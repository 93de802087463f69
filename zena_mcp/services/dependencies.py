"""Dependency graph engine: edge validation, ordering and impact queries."""

from __future__ import annotations

import logging
from datetime import timedelta

from zena_mcp.enums import EventType, TaskStatus
from zena_mcp.exceptions import CircularDependencyError, CycleDetectedError, MissingDependencyTargetError
from zena_mcp.models.actor import SYSTEM, Actor
from zena_mcp.models.events import TaskChanged
from zena_mcp.models.reports import DelayImpact, DependencyGraph, GraphNode
from zena_mcp.models.task import TaskModel
from zena_mcp.services.base import ServiceBase
from zena_mcp.services.graph import collect_dependents, find_cycle, reverse_adjacency, topological_order
from zena_mcp.store import ProjectStore

logger = logging.getLogger(__name__)


def check_dependencies(
    store: ProjectStore,
    project_id: str,
    task_id: str,
    dependencies: list[str],
) -> None:
    """
    Validate that `task_id` may depend on exactly `dependencies`.

    Every target must be a live task of the same project, and the project
    graph with the task's edges replaced by `dependencies` must stay acyclic.
    Hidden tasks take part in the check.

    Raises:
        MissingDependencyTargetError: a target is unknown, deleted or in another project
        CircularDependencyError: the edges would close a cycle
    """
    for dep_id in dependencies:
        if dep_id == task_id:
            raise CircularDependencyError(task_id, dep_id, [task_id, task_id])
        target = store.get_task(dep_id)
        if target is None or target.is_deleted or target.project_id != project_id:
            raise MissingDependencyTargetError(task_id, dep_id, project_id)

    adjacency = {t.id: list(t.dependencies) for t in store.list_tasks(project_id)}
    adjacency[task_id] = list(dependencies)

    cycle = find_cycle(adjacency)
    if cycle is None:
        return

    if task_id in cycle:
        offender = cycle[cycle.index(task_id) + 1]
    else:
        offender = dependencies[-1] if dependencies else task_id
    logger.warning("Rejected dependency %s -> %s: cycle %s", task_id, offender, " -> ".join(cycle))
    raise CircularDependencyError(task_id, offender, cycle)


class DependencyService(ServiceBase):
    """Maintains the per-project task DAG and answers ordering queries."""

    def add_dependency(self, task_id: str, depends_on_task_id: str, actor: Actor = SYSTEM) -> TaskModel:
        project_id = self._task(task_id).project_id

        with self.unit_of_work(project_id) as pending:
            task = self._task(task_id)
            if depends_on_task_id in task.dependencies:
                return task

            before = list(task.dependencies)
            after = before + [depends_on_task_id]
            check_dependencies(self.store, project_id, task_id, after)

            task.dependencies = after
            self.store.save_task(task)
            pending.append(
                TaskChanged(
                    event_type=EventType.TASK_UPDATED,
                    project_id=project_id,
                    entity_id=task_id,
                    actor=actor.identity,
                    changes={"dependencies": [before, after]},
                )
            )

        logger.info("Added dependency %s -> %s", task_id, depends_on_task_id)
        return task

    def remove_dependency(self, task_id: str, depends_on_task_id: str, actor: Actor = SYSTEM) -> TaskModel:
        project_id = self._task(task_id).project_id

        with self.unit_of_work(project_id) as pending:
            task = self._task(task_id)
            if depends_on_task_id not in task.dependencies:
                return task

            before = list(task.dependencies)
            task.dependencies = [d for d in before if d != depends_on_task_id]
            self.store.save_task(task)
            pending.append(
                TaskChanged(
                    event_type=EventType.TASK_UPDATED,
                    project_id=project_id,
                    entity_id=task_id,
                    actor=actor.identity,
                    changes={"dependencies": [before, list(task.dependencies)]},
                )
            )

        logger.info("Removed dependency %s -> %s", task_id, depends_on_task_id)
        return task

    def _visible_tasks(self, project_id: str) -> list[TaskModel]:
        self._project(project_id)
        return [t for t in self.store.list_tasks(project_id) if not t.is_hidden]

    def get_dependency_graph(self, project_id: str) -> DependencyGraph:
        """Adjacency of visible tasks with computed reverse edges."""
        tasks = self._visible_tasks(project_id)
        members = {t.id for t in tasks}
        adjacency = {t.id: [d for d in t.dependencies if d in members] for t in tasks}
        reverse = reverse_adjacency(adjacency)

        nodes = [
            GraphNode(
                task_id=t.id,
                name=t.name,
                status=t.status,
                dependencies=adjacency[t.id],
                dependents=reverse.get(t.id, []),
            )
            for t in tasks
        ]
        return DependencyGraph(project_id=project_id, nodes=nodes)

    def get_execution_order(self, project_id: str) -> list[TaskModel]:
        """
        Topological order of visible tasks.

        Raises:
            CycleDetectedError: the stored graph is not a DAG
        """
        tasks = self._visible_tasks(project_id)
        by_id = {t.id: t for t in tasks}
        ordered, leftover = topological_order(
            [t.id for t in tasks],
            {t.id: t.dependencies for t in tasks},
        )

        if leftover:
            logger.error("Project %s has a dependency cycle among %s", project_id, leftover)
            raise CycleDetectedError(project_id, leftover)

        return [by_id[task_id] for task_id in ordered]

    def get_available_tasks(self, project_id: str) -> list[TaskModel]:
        """Pending visible tasks whose every dependency is completed."""
        self._project(project_id)
        all_tasks = {t.id: t for t in self.store.list_tasks(project_id)}

        available: list[TaskModel] = []
        for task in all_tasks.values():
            if task.is_hidden or task.status != TaskStatus.PENDING:
                continue
            deps = [all_tasks.get(d) for d in task.dependencies]
            if all(dep is not None and dep.status == TaskStatus.COMPLETED for dep in deps):
                available.append(task)

        return available

    def get_delay_impact(self, task_id: str, delay_days: int) -> list[DelayImpact]:
        """Every task transitively waiting on `task_id`, with shifted start dates."""
        task = self._task(task_id)
        tasks = {t.id: t for t in self.store.list_tasks(task.project_id)}
        reverse = reverse_adjacency({t.id: t.dependencies for t in tasks.values()})

        impacts: list[DelayImpact] = []
        for impacted_id, depth in collect_dependents(task_id, reverse):
            impacted = tasks.get(impacted_id)
            if impacted is None:
                continue
            start = impacted.start_date
            impacts.append(
                DelayImpact(
                    task_id=impacted.id,
                    name=impacted.name,
                    depth=depth,
                    current_start=start,
                    projected_start=start + timedelta(days=delay_days) if start else None,
                )
            )

        logger.debug("Delay of %s day(s) on %s impacts %d task(s)", delay_days, task_id, len(impacts))
        return impacts
