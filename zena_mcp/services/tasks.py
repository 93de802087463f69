"""Task lifecycle: create, update and soft-delete with change events."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from zena_mcp.enums import EventType
from zena_mcp.events import EventPublisher
from zena_mcp.exceptions import ComponentNotFoundError, DuplicateIdError
from zena_mcp.models.actor import SYSTEM, Actor
from zena_mcp.models.events import DomainEvent, TaskChanged
from zena_mcp.models.task import TaskModel, TaskUpdate
from zena_mcp.services.base import ServiceBase, validate_progress
from zena_mcp.services.dependencies import check_dependencies
from zena_mcp.store import ProjectStore

logger = logging.getLogger(__name__)

# Fields a TaskUpdate may clear by passing None explicitly
NULLABLE_FIELDS = {
    "component_id",
    "conditional_tag",
    "estimated_hours",
    "actual_hours",
    "start_date",
    "end_date",
}


class TaskService(ServiceBase):
    def __init__(
        self,
        store: ProjectStore,
        events: EventPublisher,
        tag_checker: Callable[[str, str], bool] | None = None,
    ):
        super().__init__(store, events)
        # (tag, project_id) -> active; decides is_hidden for tagged tasks
        self.tag_checker = tag_checker

    def _hidden(self, task: TaskModel) -> bool:
        if not task.conditional_tag:
            return False
        if self.tag_checker is None:
            return task.is_hidden
        return not self.tag_checker(task.conditional_tag, task.project_id)

    def _check_component(self, project_id: str, component_id: str | None) -> None:
        if component_id is None:
            return
        component = self.store.get_component(component_id)
        if component is None or component.is_deleted or component.project_id != project_id:
            raise ComponentNotFoundError(component_id)

    def _insert(self, task: TaskModel, pending: list[DomainEvent], actor: Actor) -> TaskModel:
        """Validate and persist a new task inside an open unit of work."""
        if self.store.get_task(task.id) is not None:
            raise DuplicateIdError("Task", task.id)
        validate_progress(task.progress_percent)
        self._check_component(task.project_id, task.component_id)
        check_dependencies(self.store, task.project_id, task.id, task.dependencies)
        task.is_hidden = self._hidden(task)

        self.store.save_task(task)
        record = task.model_dump(mode="json", exclude={"id", "deleted_at"})
        pending.append(
            TaskChanged(
                event_type=EventType.TASK_CREATED,
                project_id=task.project_id,
                entity_id=task.id,
                actor=actor.identity,
                changes={field: [None, value] for field, value in record.items()},
            )
        )
        return task

    def create_task(self, task: TaskModel, actor: Actor = SYSTEM) -> TaskModel:
        """
        Persist a new task.

        Raises:
            ProjectNotFoundError: unknown project
            DuplicateIdError: id already used by a live or deleted task
            InvalidProgressRangeError: progress outside 0-100
            ComponentNotFoundError: component not in the project
            MissingDependencyTargetError: a dependency is not a live task of the project
        """
        self._project(task.project_id)
        with self.unit_of_work(task.project_id) as pending:
            self._insert(task, pending, actor)

        logger.info("Created task %s (%s) in project %s", task.id, task.name, task.project_id)
        return task

    def update_task(self, task_id: str, changes: TaskUpdate, actor: Actor = SYSTEM) -> TaskModel:
        """
        Apply the explicitly set fields of `changes`.

        Only fields whose value actually differs are written and reported.
        """
        fields = changes.model_dump(exclude_unset=True)
        project_id = self._task(task_id).project_id

        with self.unit_of_work(project_id) as pending:
            task = self._task(task_id)

            updates: dict[str, Any] = {}
            for name, value in fields.items():
                if value is None and name not in NULLABLE_FIELDS:
                    continue
                updates[name] = value

            if "progress_percent" in updates:
                updates["progress_percent"] = validate_progress(updates["progress_percent"])
            if "component_id" in updates:
                self._check_component(project_id, updates["component_id"])
            if "dependencies" in updates:
                deps = list(dict.fromkeys(updates["dependencies"]))
                check_dependencies(self.store, project_id, task_id, deps)
                updates["dependencies"] = deps

            diff: dict[str, list[Any]] = {}
            for name, value in updates.items():
                old = getattr(task, name)
                if old != value:
                    diff[name] = [old, value]
                    setattr(task, name, value)

            if "conditional_tag" in diff:
                hidden = self._hidden(task)
                if hidden != task.is_hidden:
                    diff["is_hidden"] = [task.is_hidden, hidden]
                    task.is_hidden = hidden

            if not diff:
                return task

            self.store.save_task(task)
            pending.append(
                TaskChanged(
                    event_type=EventType.TASK_UPDATED,
                    project_id=project_id,
                    entity_id=task_id,
                    actor=actor.identity,
                    changes=diff,
                )
            )

        logger.info("Updated task %s: %s", task_id, ", ".join(diff))
        return task

    def delete_task(self, task_id: str, actor: Actor = SYSTEM) -> TaskModel:
        """
        Soft-delete a task and drop it from every sibling's dependency list.

        The id is never reused; deleted tasks vanish from all queries.
        """
        project_id = self._task(task_id).project_id

        with self.unit_of_work(project_id) as pending:
            task = self._task(task_id)
            task.deleted_at = datetime.now()
            self.store.save_task(task)

            touched = 0
            for sibling in self.store.list_tasks(project_id):
                if task_id not in sibling.dependencies:
                    continue
                before = list(sibling.dependencies)
                sibling.dependencies = [d for d in before if d != task_id]
                self.store.save_task(sibling)
                touched += 1
                pending.append(
                    TaskChanged(
                        event_type=EventType.TASK_UPDATED,
                        project_id=project_id,
                        entity_id=sibling.id,
                        actor=actor.identity,
                        changes={"dependencies": [before, list(sibling.dependencies)]},
                    )
                )

            pending.append(
                TaskChanged(
                    event_type=EventType.TASK_DELETED,
                    project_id=project_id,
                    entity_id=task_id,
                    actor=actor.identity,
                )
            )

        logger.info("Deleted task %s; detached it from %d dependent task(s)", task_id, touched)
        return task

    def get_task(self, task_id: str) -> TaskModel:
        return self._task(task_id)

    def list_tasks(self, project_id: str, include_hidden: bool = True) -> list[TaskModel]:
        self._project(project_id)
        tasks = self.store.list_tasks(project_id)
        if not include_hidden:
            tasks = [t for t in tasks if not t.is_hidden]
        return tasks
