"""Template application: create a project's tasks and dependencies from a template set."""

from __future__ import annotations

import logging
import time
from collections import Counter

from zena_mcp.enums import ConflictBehavior, EventType
from zena_mcp.events import EventPublisher
from zena_mcp.exceptions import MissingDependencyTargetError, TemplateError, ZenaError
from zena_mcp.models.actor import SYSTEM, Actor
from zena_mcp.models.events import TaskChanged, TemplateApplied
from zena_mcp.models.task import TaskModel
from zena_mcp.models.template import (
    TemplateApplyOptions,
    TemplateApplyResult,
    TemplatePreview,
    TemplateSelections,
    TemplateSet,
    TemplateTask,
)
from zena_mcp.services.base import ServiceBase
from zena_mcp.services.dependencies import check_dependencies
from zena_mcp.services.graph import topological_order
from zena_mcp.services.tasks import TaskService
from zena_mcp.settings import Settings
from zena_mcp.store import ProjectStore

logger = logging.getLogger(__name__)


def resolve_tasks(template: TemplateSet, selections: TemplateSelections | None = None) -> list[TemplateTask]:
    """Template tasks matching every non-empty selection filter."""
    selections = selections or TemplateSelections()
    selected: list[TemplateTask] = []
    for task in template.tasks:
        if selections.phases and task.phase not in selections.phases:
            continue
        if selections.disciplines and task.discipline not in selections.disciplines:
            continue
        if selections.tasks and task.code not in selections.tasks:
            continue
        if task.code in selections.exclude:
            continue
        selected.append(task)
    return selected


class TemplateService(ServiceBase):
    def __init__(
        self,
        store: ProjectStore,
        events: EventPublisher,
        tasks: TaskService,
        settings: Settings | None = None,
    ):
        super().__init__(store, events)
        self.tasks = tasks
        self.settings = settings or Settings()

    def preview(self, template: TemplateSet, selections: TemplateSelections | None = None) -> TemplatePreview:
        selected = resolve_tasks(template, selections)
        codes = {t.code for t in selected}
        return TemplatePreview(
            total_tasks=len(selected),
            total_dependencies=sum(1 for t in selected for dep in t.depends_on if dep in codes),
            estimated_duration_days=sum(t.est_duration_days or 0 for t in selected),
            phase_breakdown=dict(Counter(t.phase or "unassigned" for t in selected)),
            discipline_breakdown=dict(Counter(t.discipline or "unassigned" for t in selected)),
        )

    def apply(
        self,
        project_id: str,
        template: TemplateSet,
        actor: Actor = SYSTEM,
        selections: TemplateSelections | None = None,
        options: TemplateApplyOptions | None = None,
    ) -> TemplateApplyResult:
        """
        Create the selected template tasks in dependency order, then wire
        their dependencies.

        A task that cannot be created is listed in `skipped` and `errors`; a
        dependency that cannot be wired is listed in `warnings`. Neither
        aborts the rest of the batch.
        """
        started = time.perf_counter()
        options = options or TemplateApplyOptions()
        self._project(project_id)

        selected = resolve_tasks(template, selections)
        if not selected:
            raise TemplateError(f"Template '{template.id}' has no tasks matching the selection")
        if len(selected) > self.settings.template_queue_threshold:
            logger.warning(
                "Template %s selects %d tasks, above the queue threshold of %d",
                template.id,
                len(selected),
                self.settings.template_queue_threshold,
            )

        by_code = {t.code: t for t in selected}
        ordered, leftover = topological_order(list(by_code), {t.code: t.depends_on for t in selected})
        result = TemplateApplyResult(project_id=project_id, template_id=template.id)
        if leftover:
            result.warnings.append(f"Template dependencies form a cycle among: {', '.join(leftover)}")

        with self.unit_of_work(project_id) as pending:
            existing_names = {t.name for t in self.store.list_tasks(project_id)}

            for code in ordered + leftover:
                template_task = by_code[code]
                name = template_task.name
                if name in existing_names:
                    if options.conflict_behavior == ConflictBehavior.SKIP:
                        result.skipped.append(code)
                        result.warnings.append(f"Task '{code}' already exists, skipped")
                        continue
                    name = f"{name} (Copy)"

                days = template_task.est_duration_days
                task = TaskModel(
                    project_id=project_id,
                    component_id=options.component_id,
                    name=name,
                    description=template_task.description,
                    priority=template_task.priority,
                    conditional_tag=template_task.conditional_tag,
                    estimated_hours=days * self.settings.hours_per_day if days else None,
                )
                try:
                    self.tasks._insert(task, pending, actor)
                except ZenaError as exc:
                    result.skipped.append(code)
                    result.errors.append(f"Failed to create task '{code}': {exc}")
                    logger.error("Template task %s could not be created: %s", code, exc)
                    continue

                existing_names.add(name)
                result.task_mapping[code] = task.id
                result.tasks_created += 1

            if options.include_dependencies:
                result.dependencies_created = self._wire_dependencies(
                    project_id, ordered + leftover, by_code, result, pending, actor
                )

            pending.append(
                TemplateApplied(
                    event_type=EventType.TEMPLATE_APPLIED,
                    project_id=project_id,
                    entity_id=project_id,
                    actor=actor.identity,
                    template_id=template.id,
                    tasks_created=result.tasks_created,
                    dependencies_created=result.dependencies_created,
                    skipped=list(result.skipped),
                )
            )

        result.duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "Applied template %s to project %s: %d task(s), %d dependency(ies), %d skipped",
            template.id,
            project_id,
            result.tasks_created,
            result.dependencies_created,
            len(result.skipped),
        )
        return result

    def _wire_dependencies(
        self,
        project_id: str,
        codes: list[str],
        by_code: dict[str, TemplateTask],
        result: TemplateApplyResult,
        pending: list,
        actor: Actor,
    ) -> int:
        created = 0
        for code in codes:
            task_id = result.task_mapping.get(code)
            if task_id is None:
                continue

            task = self.store.get_task(task_id)
            before = list(task.dependencies)
            for dep_code in by_code[code].depends_on:
                dep_id = result.task_mapping.get(dep_code)
                if dep_id is None:
                    warning = MissingDependencyTargetError(code, dep_code, project_id)
                    result.warnings.append(str(warning))
                    logger.warning("Template dependency skipped: %s", warning)
                    continue
                try:
                    check_dependencies(self.store, project_id, task_id, task.dependencies + [dep_id])
                except ZenaError as exc:
                    result.warnings.append(f"Failed to create dependency for task '{code}': {exc}")
                    continue
                task.dependencies = task.dependencies + [dep_id]
                self.store.save_task(task)
                created += 1

            if task.dependencies != before:
                pending.append(
                    TaskChanged(
                        event_type=EventType.TASK_UPDATED,
                        project_id=project_id,
                        entity_id=task_id,
                        actor=actor.identity,
                        changes={"dependencies": [before, list(task.dependencies)]},
                    )
                )
        return created
