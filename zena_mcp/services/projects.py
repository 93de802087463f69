"""Project records and status transitions."""

from __future__ import annotations

import logging

from zena_mcp.enums import EventType, ProjectStatus
from zena_mcp.exceptions import DuplicateIdError
from zena_mcp.models.actor import SYSTEM, Actor
from zena_mcp.models.events import ProjectChanged
from zena_mcp.models.task import ProjectModel
from zena_mcp.services.base import ServiceBase

logger = logging.getLogger(__name__)


class ProjectService(ServiceBase):
    def create_project(self, project: ProjectModel) -> ProjectModel:
        if self.store.get_project(project.id) is not None:
            raise DuplicateIdError("Project", project.id)
        self.store.save_project(project)
        logger.info("Created project %s (%s)", project.id, project.name)
        return project

    def get_project(self, project_id: str) -> ProjectModel:
        return self._project(project_id)

    def list_projects(self) -> list[ProjectModel]:
        return self.store.list_projects()

    def set_status(self, project_id: str, status: ProjectStatus, actor: Actor = SYSTEM) -> ProjectModel:
        """Change the project status; subscribers re-evaluate phase tags."""
        with self.unit_of_work(project_id) as pending:
            project = self._project(project_id)
            old = project.status
            if old == status:
                return project

            project.status = status
            self.store.save_project(project)
            pending.append(
                ProjectChanged(
                    event_type=EventType.PROJECT_STATUS_CHANGED,
                    project_id=project_id,
                    entity_id=project_id,
                    actor=actor.identity,
                    old_status=old.value,
                    new_status=status.value,
                    changed_fields=["status"],
                )
            )

        logger.info("Project %s status %s -> %s", project_id, old.value, status.value)
        return project

    def set_tags(self, project_id: str, tags: list[str], actor: Actor = SYSTEM) -> ProjectModel:
        """Replace the project's category tag set."""
        with self.unit_of_work(project_id) as pending:
            project = self._project(project_id)
            cleaned = list(dict.fromkeys(t.strip() for t in tags if t.strip()))
            if cleaned == project.tags:
                return project

            project.tags = cleaned
            self.store.save_project(project)
            pending.append(
                ProjectChanged(
                    event_type=EventType.PROJECT_UPDATED,
                    project_id=project_id,
                    entity_id=project_id,
                    actor=actor.identity,
                    changed_fields=["tags"],
                )
            )

        return project
