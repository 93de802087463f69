"""Conditional visibility engine: tags evaluated against live project state."""

from __future__ import annotations

import logging

from zena_mcp.cache import Cache, NullCache
from zena_mcp.enums import EventType, ProjectStatus
from zena_mcp.events import EventPublisher
from zena_mcp.models.actor import SYSTEM, Actor
from zena_mcp.models.events import DomainEvent, TaskChanged
from zena_mcp.services.base import ServiceBase
from zena_mcp.settings import Settings
from zena_mcp.store import ProjectStore

logger = logging.getLogger(__name__)

PHASE_TAGS: dict[str, set[ProjectStatus]] = {
    "design_phase": {ProjectStatus.PLANNING, ProjectStatus.DESIGN, ProjectStatus.IN_PROGRESS},
    "construction_phase": {ProjectStatus.IN_PROGRESS, ProjectStatus.ACTIVE},
    "closeout_phase": {ProjectStatus.COMPLETED},
}
BUDGET_TAGS = {"budget_low", "budget_medium", "budget_high"}
FEATURE_PREFIX = "has_"
CATEGORY_PREFIX = "category_"

# Events that can flip a tag's activity
INVALIDATING_EVENTS = {
    EventType.PROJECT_STATUS_CHANGED,
    EventType.PROJECT_UPDATED,
    EventType.PROJECT_PROGRESS_CHANGED,
    EventType.COMPONENT_CREATED,
    EventType.COMPONENT_DELETED,
    EventType.COMPONENT_PROGRESS_CHANGED,
}


def _normalize(text: str) -> str:
    return text.strip().lower().replace("_", " ")


class ConditionalTagService(ServiceBase):
    """
    Decides tag activity per project and keeps task hidden flags in sync.

    Results are cached per (project, tag) with a TTL, and the cache is
    dropped for a project as soon as an event that feeds tag evaluation is
    published, so the TTL only bounds memory, not freshness.
    """

    def __init__(
        self,
        store: ProjectStore,
        events: EventPublisher,
        cache: Cache | None = None,
        settings: Settings | None = None,
    ):
        super().__init__(store, events)
        self.settings = settings or Settings()
        self.cache = cache if cache is not None and self.settings.cache_enabled else NullCache()

    @staticmethod
    def _key(project_id: str, tag: str) -> str:
        return f"conditional_tag:{project_id}:{tag}"

    def budget_band(self, total_planned: float) -> str:
        if total_planned < self.settings.budget_low_threshold:
            return "low"
        if total_planned >= self.settings.budget_high_threshold:
            return "high"
        return "medium"

    def evaluate_tag(self, tag: str, project_id: str) -> bool:
        """Uncached evaluation of one tag against the project's current state."""
        project = self._project(project_id)
        tag = tag.strip().lower()

        if tag in PHASE_TAGS:
            return project.status in PHASE_TAGS[tag]

        if tag in BUDGET_TAGS:
            components = self.store.list_components(project_id)
            live = {c.id for c in components}
            total = sum(c.planned_cost for c in components if c.parent_id is None or c.parent_id not in live)
            return tag == f"budget_{self.budget_band(total)}"

        if tag.startswith(FEATURE_PREFIX) and len(tag) > len(FEATURE_PREFIX):
            feature = _normalize(tag[len(FEATURE_PREFIX):])
            return any(feature in _normalize(c.name) for c in self.store.list_components(project_id))

        if tag.startswith(CATEGORY_PREFIX) and len(tag) > len(CATEGORY_PREFIX):
            category = tag[len(CATEGORY_PREFIX):]
            return category in {t.strip().lower() for t in project.tags}

        logger.warning("Unknown conditional tag %r on project %s; treating it as inactive", tag, project_id)
        return False

    def is_tag_active(self, tag: str, project_id: str) -> bool:
        key = self._key(project_id, tag.strip().lower())
        cached = self.cache.get(key)
        if cached is not None:
            return bool(cached)

        active = self.evaluate_tag(tag, project_id)
        self.cache.set(key, active, self.settings.tag_cache_ttl_seconds)
        return active

    def invalidate(self, project_id: str) -> int:
        dropped = self.cache.delete_prefix(f"conditional_tag:{project_id}:")
        if dropped:
            logger.debug("Dropped %d cached tag(s) for project %s", dropped, project_id)
        return dropped

    def handle_event(self, event: DomainEvent) -> None:
        """Event bus subscriber: invalidate, then resync when configured to."""
        if event.event_type not in INVALIDATING_EVENTS:
            return
        self.invalidate(event.project_id)
        if self.settings.auto_sync_visibility:
            self.update_task_visibility_for_project(event.project_id)

    def update_task_visibility_for_project(self, project_id: str, actor: Actor = SYSTEM) -> int:
        """
        Hide tasks whose tag is inactive and reveal those whose tag is active.

        Returns:
            Number of tasks whose hidden flag flipped
        """
        self._project(project_id)
        changed = 0

        with self.unit_of_work(project_id) as pending:
            for task in self.store.list_tasks(project_id):
                if not task.conditional_tag:
                    continue
                hidden = not self.is_tag_active(task.conditional_tag, project_id)
                if task.is_hidden == hidden:
                    continue

                before = task.is_hidden
                task.is_hidden = hidden
                self.store.save_task(task)
                changed += 1
                pending.append(
                    TaskChanged(
                        event_type=EventType.TASK_UPDATED,
                        project_id=project_id,
                        entity_id=task.id,
                        actor=actor.identity,
                        changes={"is_hidden": [before, hidden]},
                    )
                )

        if changed:
            logger.info("Visibility sync flipped %d task(s) in project %s", changed, project_id)
        return changed
