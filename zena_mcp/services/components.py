"""Component roll-up engine: keeps the work-breakdown tree consistent with its leaves."""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from datetime import datetime

from zena_mcp.enums import EventType
from zena_mcp.exceptions import (
    ComponentCycleError,
    ComponentHasChildrenError,
    ComponentHasTasksError,
    ComponentNotFoundError,
    DuplicateIdError,
)
from zena_mcp.models.actor import SYSTEM, Actor
from zena_mcp.models.events import ComponentChanged, DomainEvent, ProjectChanged
from zena_mcp.models.reports import ComponentNode
from zena_mcp.models.task import ComponentModel
from zena_mcp.services.base import ServiceBase, same_value, validate_progress

logger = logging.getLogger(__name__)


class ComponentService(ServiceBase):
    """
    Non-leaf components hold the mean progress and the summed actual cost of
    their live children. Every mutation walks the ancestor chain in a loop,
    stopping at the first ancestor that did not change, and finishes at the
    project when a root changed.
    """

    def _children(self, component: ComponentModel) -> list[ComponentModel]:
        return [c for c in self.store.list_components(component.project_id) if c.parent_id == component.id]

    def _changed_event(
        self,
        event_type: EventType,
        component: ComponentModel,
        old_progress: float | None,
        old_cost: float | None,
        changed_fields: list[str],
        actor: Actor,
    ) -> ComponentChanged:
        return ComponentChanged(
            event_type=event_type,
            project_id=component.project_id,
            entity_id=component.id,
            actor=actor.identity,
            old_progress=old_progress,
            new_progress=component.progress_percent,
            old_actual_cost=old_cost,
            new_actual_cost=component.actual_cost,
            changed_fields=changed_fields,
        )

    def _recalculate(self, component: ComponentModel, pending: list[DomainEvent], actor: Actor) -> bool:
        children = self._children(component)
        if not children:
            return False

        progress = sum(c.progress_percent for c in children) / len(children)
        cost = sum(c.actual_cost for c in children)

        changed: list[str] = []
        if not same_value(component.progress_percent, progress):
            changed.append("progress_percent")
        if not same_value(component.actual_cost, cost):
            changed.append("actual_cost")
        if not changed:
            return False

        old_progress, old_cost = component.progress_percent, component.actual_cost
        component.progress_percent = progress
        component.actual_cost = cost
        self.store.save_component(component)
        pending.append(
            self._changed_event(
                EventType.COMPONENT_PROGRESS_CHANGED, component, old_progress, old_cost, changed, actor
            )
        )
        logger.debug("Rolled up %s: %s", component.id, ", ".join(changed))
        return True

    def _recalculate_project(self, project_id: str, pending: list[DomainEvent], actor: Actor) -> bool:
        project = self._project(project_id)
        components = self.store.list_components(project_id)
        live = {c.id for c in components}
        roots = [c for c in components if c.parent_id is None or c.parent_id not in live]
        if not roots:
            return False

        progress = sum(c.progress_percent for c in roots) / len(roots)
        cost = sum(c.actual_cost for c in roots)

        changed: list[str] = []
        if not same_value(project.progress_percent, progress):
            changed.append("progress_percent")
        if not same_value(project.actual_cost, cost):
            changed.append("actual_cost")
        if not changed:
            return False

        old_progress, old_cost = project.progress_percent, project.actual_cost
        project.progress_percent = progress
        project.actual_cost = cost
        self.store.save_project(project)
        pending.append(
            ProjectChanged(
                event_type=EventType.PROJECT_PROGRESS_CHANGED,
                project_id=project_id,
                entity_id=project_id,
                actor=actor.identity,
                old_progress=old_progress,
                new_progress=progress,
                old_actual_cost=old_cost,
                new_actual_cost=cost,
                changed_fields=changed,
            )
        )
        return True

    def _propagate(
        self,
        project_id: str,
        origin_id: str,
        parent_id: str | None,
        pending: list[DomainEvent],
        actor: Actor,
    ) -> None:
        """Walk from `parent_id` to the root, then to the project."""
        seen = {origin_id}
        node_id = parent_id

        while node_id is not None:
            if node_id in seen:
                raise ComponentCycleError(node_id)
            seen.add(node_id)

            parent = self.store.get_component(node_id)
            if parent is None or parent.is_deleted:
                break
            if not self._recalculate(parent, pending, actor):
                return
            node_id = parent.parent_id

        self._recalculate_project(project_id, pending, actor)

    def recalculate_from_children(self, component_id: str, actor: Actor = SYSTEM) -> bool:
        """
        Recompute a component from its children and, if it changed, its ancestors.

        Returns:
            True when the component's own values changed; leaves always return False
        """
        component = self._component(component_id)
        with self.unit_of_work(component.project_id) as pending:
            component = self._component(component_id)
            changed = self._recalculate(component, pending, actor)
            if changed:
                self._propagate(component.project_id, component.id, component.parent_id, pending, actor)
        return changed

    def create_component(self, component: ComponentModel, actor: Actor = SYSTEM) -> ComponentModel:
        project_id = component.project_id
        self._project(project_id)
        validate_progress(component.progress_percent)

        with self.unit_of_work(project_id) as pending:
            if self.store.get_component(component.id) is not None:
                raise DuplicateIdError("Component", component.id)
            if component.parent_id is not None:
                parent = self._component(component.parent_id)
                if parent.project_id != project_id:
                    raise ComponentNotFoundError(component.parent_id)

            self.store.save_component(component)
            pending.append(
                self._changed_event(EventType.COMPONENT_CREATED, component, None, None, [], actor)
            )
            self._propagate(project_id, component.id, component.parent_id, pending, actor)

        logger.info("Created component %s (%s) in project %s", component.id, component.name, project_id)
        return component

    def update_component(
        self,
        component_id: str,
        *,
        progress_percent: float | None = None,
        actual_cost: float | None = None,
        planned_cost: float | None = None,
        name: str | None = None,
        actor: Actor = SYSTEM,
    ) -> ComponentModel:
        """
        Update a component's own values and roll the change up.

        Progress and actual cost of a component with children are derived,
        so values written to such a component are recomputed immediately.
        """
        if progress_percent is not None:
            validate_progress(progress_percent)
        project_id = self._component(component_id).project_id

        with self.unit_of_work(project_id) as pending:
            component = self._component(component_id)
            old_progress, old_cost = component.progress_percent, component.actual_cost

            changed: list[str] = []
            if progress_percent is not None and not same_value(component.progress_percent, progress_percent):
                component.progress_percent = progress_percent
                changed.append("progress_percent")
            if actual_cost is not None and not same_value(component.actual_cost, actual_cost):
                component.actual_cost = actual_cost
                changed.append("actual_cost")
            if planned_cost is not None and not same_value(component.planned_cost, planned_cost):
                component.planned_cost = planned_cost
                changed.append("planned_cost")
            if name is not None and name != component.name:
                component.name = name
                changed.append("name")

            if not changed:
                return component

            self.store.save_component(component)
            pending.append(
                self._changed_event(
                    EventType.COMPONENT_PROGRESS_CHANGED, component, old_progress, old_cost, changed, actor
                )
            )

            if {"progress_percent", "actual_cost"} & set(changed) and self._children(component):
                logger.warning("Component %s has children; its progress and cost are derived", component_id)
                self._recalculate(component, pending, actor)

            self._propagate(project_id, component.id, component.parent_id, pending, actor)

        return component

    def bulk_update_progress(self, updates: dict[str, float], actor: Actor = SYSTEM) -> list[ComponentModel]:
        """
        Apply many progress updates atomically.

        All values and ids are validated before anything is written; one event
        is emitted per component whose progress changed.
        """
        for value in updates.values():
            validate_progress(value)
        project_ids = {self._component(component_id).project_id for component_id in updates}

        updated: list[ComponentModel] = []
        with self.unit_of_work(*project_ids) as pending:
            for component_id, progress in updates.items():
                component = self._component(component_id)
                if same_value(component.progress_percent, progress):
                    continue
                old_progress = component.progress_percent
                component.progress_percent = progress
                self.store.save_component(component)
                pending.append(
                    self._changed_event(
                        EventType.COMPONENT_PROGRESS_CHANGED,
                        component,
                        old_progress,
                        component.actual_cost,
                        ["progress_percent"],
                        actor,
                    )
                )
                if self._children(component):
                    logger.warning("Component %s has children; its progress is derived", component_id)
                    self._recalculate(component, pending, actor)
                updated.append(component)

            for component in updated:
                self._propagate(component.project_id, component.id, component.parent_id, pending, actor)

        logger.info("Bulk progress update touched %d of %d component(s)", len(updated), len(updates))
        return [self._component(c.id) for c in updated]

    def delete_component(self, component_id: str, actor: Actor = SYSTEM) -> ComponentModel:
        """
        Soft-delete a component. Structural cleanup must happen leaf-first.

        Raises:
            ComponentHasChildrenError: live child components exist
            ComponentHasTasksError: live tasks reference the component
        """
        project_id = self._component(component_id).project_id

        with self.unit_of_work(project_id) as pending:
            component = self._component(component_id)

            children = self._children(component)
            if children:
                raise ComponentHasChildrenError(component_id, len(children))
            tasks = [t for t in self.store.list_tasks(project_id) if t.component_id == component_id]
            if tasks:
                raise ComponentHasTasksError(component_id, len(tasks))

            component.deleted_at = datetime.now()
            self.store.save_component(component)
            pending.append(
                self._changed_event(
                    EventType.COMPONENT_DELETED,
                    component,
                    component.progress_percent,
                    component.actual_cost,
                    [],
                    actor,
                )
            )
            self._propagate(project_id, component.id, component.parent_id, pending, actor)

        logger.info("Deleted component %s", component_id)
        return component

    def get_component(self, component_id: str) -> ComponentModel:
        return self._component(component_id)

    def get_component_tree(self, project_id: str) -> list[ComponentNode]:
        """
        Forest of live components, any depth, built breadth-first.

        Components whose parent is missing or deleted are treated as roots.
        """
        self._project(project_id)
        components = self.store.list_components(project_id)
        by_id = {c.id: c for c in components}

        children: dict[str, list[ComponentModel]] = defaultdict(list)
        roots: list[ComponentModel] = []
        for component in components:
            if component.parent_id is not None and component.parent_id in by_id:
                children[component.parent_id].append(component)
            else:
                roots.append(component)

        forest: list[ComponentNode] = []
        nodes: dict[str, ComponentNode] = {}
        queue = deque((root, 0) for root in roots)

        while queue:
            component, depth = queue.popleft()
            node = ComponentNode(
                id=component.id,
                name=component.name,
                depth=depth,
                progress_percent=component.progress_percent,
                planned_cost=component.planned_cost,
                actual_cost=component.actual_cost,
            )
            nodes[component.id] = node
            if depth == 0:
                forest.append(node)
            else:
                nodes[component.parent_id].children.append(node)
            for child in children[component.id]:
                if child.id not in nodes:
                    queue.append((child, depth + 1))

        unreachable = [c.id for c in components if c.id not in nodes]
        if unreachable:
            logger.warning("Components unreachable from any root in project %s: %s", project_id, unreachable)

        return forest
