"""Wiring of store, event bus, cache and the planning services."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from zena_mcp.cache import Cache, MemoryCache, NullCache
from zena_mcp.events import EventBus
from zena_mcp.services import (
    BaselineService,
    ComponentService,
    ConditionalTagService,
    DependencyService,
    ProjectService,
    TaskService,
    TemplateService,
)
from zena_mcp.settings import Settings
from zena_mcp.store import MemoryStore, ProjectStore
from zena_mcp.utils.parsers import (
    _parse_baselines,
    _parse_components,
    _parse_projects,
    _parse_tasks,
    _read_snapshot,
)

logger = logging.getLogger(__name__)


class Workspace:
    """
    One planning core instance.

    The conditional tag service subscribes to the event bus, so tag caches
    are dropped (and task visibility resynced when enabled) whenever a
    committed change can affect tag activity.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: ProjectStore | None = None,
        cache: Cache | None = None,
    ):
        self.settings = settings or Settings()
        self.store = store or MemoryStore()
        self.events = EventBus(history_size=self.settings.event_history_size)
        if cache is None:
            cache = MemoryCache() if self.settings.cache_enabled else NullCache()
        self.cache = cache

        self.projects = ProjectService(self.store, self.events)
        self.visibility = ConditionalTagService(self.store, self.events, self.cache, self.settings)
        self.tasks = TaskService(self.store, self.events, self.visibility.is_tag_active)
        self.dependencies = DependencyService(self.store, self.events)
        self.components = ComponentService(self.store, self.events)
        self.baselines = BaselineService(self.store, self.events)
        self.templates = TemplateService(self.store, self.events, self.tasks, self.settings)

        self.events.subscribe(self.visibility.handle_event)

    def load_snapshot(self, source: str | Path | dict[str, Any]) -> dict[str, int]:
        """
        Seed the store from a snapshot document.

        Records are stored as given; derived values are not recomputed.
        Task visibility is synced afterwards for every loaded project.

        Args:
            source: Path to a JSON file, or the decoded document

        Returns:
            Count of loaded records per section
        """
        sections = _read_snapshot(source)
        projects = _parse_projects(sections["projects"])
        components = _parse_components(sections["components"])
        tasks = _parse_tasks(sections["tasks"])
        baselines = _parse_baselines(sections["baselines"])

        for project in projects:
            self.store.save_project(project)
        for component in components:
            self.store.save_component(component)
        for task in tasks:
            self.store.save_task(task)
        for baseline in baselines:
            self.store.add_baseline(baseline)

        for project in projects:
            self.visibility.invalidate(project.id)
            if self.settings.auto_sync_visibility:
                self.visibility.update_task_visibility_for_project(project.id)

        counts = {
            "projects": len(projects),
            "components": len(components),
            "tasks": len(tasks),
            "baselines": len(baselines),
        }
        logger.info("Loaded snapshot: %s", counts)
        return counts
