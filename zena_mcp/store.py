"""Persistence collaborator: the store port and its in-memory implementation."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from zena_mcp.models.task import BaselineModel, ComponentModel, ProjectModel, TaskModel

logger = logging.getLogger(__name__)


class ProjectStore(ABC):
    """Loads and saves planning records by id and by project scope."""

    @abstractmethod
    def get_project(self, project_id: str) -> ProjectModel | None:
        pass

    @abstractmethod
    def save_project(self, project: ProjectModel) -> ProjectModel:
        pass

    @abstractmethod
    def list_projects(self) -> list[ProjectModel]:
        pass

    @abstractmethod
    def get_task(self, task_id: str) -> TaskModel | None:
        """Returns the task even when soft-deleted; callers check `is_deleted`."""
        pass

    @abstractmethod
    def save_task(self, task: TaskModel) -> TaskModel:
        pass

    @abstractmethod
    def list_tasks(self, project_id: str, include_deleted: bool = False) -> list[TaskModel]:
        pass

    @abstractmethod
    def get_component(self, component_id: str) -> ComponentModel | None:
        pass

    @abstractmethod
    def save_component(self, component: ComponentModel) -> ComponentModel:
        pass

    @abstractmethod
    def list_components(self, project_id: str, include_deleted: bool = False) -> list[ComponentModel]:
        pass

    @abstractmethod
    def add_baseline(self, baseline: BaselineModel) -> BaselineModel:
        """Baselines are insert-only."""
        pass

    @abstractmethod
    def list_baselines(self, project_id: str) -> list[BaselineModel]:
        pass

    @abstractmethod
    def transaction(self, project_id: str):
        """
        Context manager scoping one logical write to a project.

        Writers on the same project are serialised, and every write made
        inside the block is rolled back if the block raises.
        """
        pass


class MemoryStore(ProjectStore):
    """In-process store. Records are copied on the way in and out."""

    def __init__(self) -> None:
        self._projects: dict[str, ProjectModel] = {}
        self._tasks: dict[str, TaskModel] = {}
        self._components: dict[str, ComponentModel] = {}
        self._baselines: dict[str, BaselineModel] = {}
        self._data_lock = threading.RLock()
        self._locks: dict[str, threading.RLock] = {}
        self._depth: dict[str, int] = {}

    # Projects

    def get_project(self, project_id: str) -> ProjectModel | None:
        with self._data_lock:
            project = self._projects.get(project_id)
        return project.model_copy(deep=True) if project else None

    def save_project(self, project: ProjectModel) -> ProjectModel:
        with self._data_lock:
            self._projects[project.id] = project.model_copy(deep=True)
        return project

    def list_projects(self) -> list[ProjectModel]:
        with self._data_lock:
            return [p.model_copy(deep=True) for p in self._projects.values()]

    # Tasks

    def get_task(self, task_id: str) -> TaskModel | None:
        with self._data_lock:
            task = self._tasks.get(task_id)
        return task.model_copy(deep=True) if task else None

    def save_task(self, task: TaskModel) -> TaskModel:
        with self._data_lock:
            self._tasks[task.id] = task.model_copy(deep=True)
        return task

    def list_tasks(self, project_id: str, include_deleted: bool = False) -> list[TaskModel]:
        with self._data_lock:
            return [
                t.model_copy(deep=True)
                for t in self._tasks.values()
                if t.project_id == project_id and (include_deleted or not t.is_deleted)
            ]

    # Components

    def get_component(self, component_id: str) -> ComponentModel | None:
        with self._data_lock:
            component = self._components.get(component_id)
        return component.model_copy(deep=True) if component else None

    def save_component(self, component: ComponentModel) -> ComponentModel:
        with self._data_lock:
            self._components[component.id] = component.model_copy(deep=True)
        return component

    def list_components(self, project_id: str, include_deleted: bool = False) -> list[ComponentModel]:
        with self._data_lock:
            return [
                c.model_copy(deep=True)
                for c in self._components.values()
                if c.project_id == project_id and (include_deleted or not c.is_deleted)
            ]

    # Baselines

    def add_baseline(self, baseline: BaselineModel) -> BaselineModel:
        with self._data_lock:
            if baseline.id in self._baselines:
                raise ValueError(f"Baseline '{baseline.id}' already exists and cannot be replaced")
            self._baselines[baseline.id] = baseline
        return baseline

    def list_baselines(self, project_id: str) -> list[BaselineModel]:
        with self._data_lock:
            return [b for b in self._baselines.values() if b.project_id == project_id]

    # Transactions

    def _lock_for(self, project_id: str) -> threading.RLock:
        with self._data_lock:
            lock = self._locks.get(project_id)
            if lock is None:
                lock = self._locks[project_id] = threading.RLock()
            return lock

    def _snapshot(self, project_id: str) -> tuple[dict, dict, dict, dict]:
        with self._data_lock:
            return (
                {k: v for k, v in self._projects.items() if k == project_id},
                {k: v for k, v in self._tasks.items() if v.project_id == project_id},
                {k: v for k, v in self._components.items() if v.project_id == project_id},
                {k: v for k, v in self._baselines.items() if v.project_id == project_id},
            )

    def _restore(self, project_id: str, snapshot: tuple[dict, dict, dict, dict]) -> None:
        projects, tasks, components, baselines = snapshot
        with self._data_lock:
            self._projects.pop(project_id, None)
            self._projects.update(projects)
            for table, saved in (
                (self._tasks, tasks),
                (self._components, components),
                (self._baselines, baselines),
            ):
                for key in [k for k, v in table.items() if v.project_id == project_id]:
                    del table[key]
                table.update(saved)

    @contextmanager
    def transaction(self, project_id: str) -> Iterator[None]:
        lock = self._lock_for(project_id)
        with lock:
            depth = self._depth.get(project_id, 0)
            # Nested blocks join the outermost one
            snapshot = self._snapshot(project_id) if depth == 0 else None
            self._depth[project_id] = depth + 1
            try:
                yield
            except BaseException:
                if snapshot is not None:
                    self._restore(project_id, snapshot)
                    logger.debug("Rolled back transaction on project %s", project_id)
                raise
            finally:
                self._depth[project_id] = depth
