"""Baseline registry: immutable, versioned snapshots per project and type."""

from __future__ import annotations

import logging
from datetime import date

from zena_mcp.enums import BaselineType, EventType
from zena_mcp.exceptions import BaselineNotFoundError, InvalidBaselineError
from zena_mcp.models.actor import SYSTEM, Actor
from zena_mcp.models.events import BaselineCreated
from zena_mcp.models.reports import VarianceReport
from zena_mcp.models.task import BaselineModel
from zena_mcp.services.base import ServiceBase
from zena_mcp.services.variance import calculate_variance

logger = logging.getLogger(__name__)


class BaselineService(ServiceBase):
    def create_baseline(
        self,
        project_id: str,
        baseline_type: BaselineType,
        start_date: date,
        end_date: date,
        planned_cost: float,
        actor: Actor = SYSTEM,
        name: str | None = None,
    ) -> BaselineModel:
        """Record a new baseline version; earlier versions stay untouched."""
        if end_date < start_date:
            raise InvalidBaselineError(f"Baseline end {end_date} precedes its start {start_date}")
        if planned_cost < 0:
            raise InvalidBaselineError(f"Planned cost cannot be negative, got {planned_cost}")
        self._project(project_id)

        with self.unit_of_work(project_id) as pending:
            existing = self.list_baselines(project_id, baseline_type)
            version = max((b.version for b in existing), default=0) + 1
            baseline = BaselineModel(
                project_id=project_id,
                baseline_type=baseline_type,
                version=version,
                name=name or f"{baseline_type.value.title()} baseline v{version}",
                start_date=start_date,
                end_date=end_date,
                planned_cost=planned_cost,
                created_by=actor.identity,
            )
            self.store.add_baseline(baseline)
            pending.append(
                BaselineCreated(
                    event_type=EventType.BASELINE_CREATED,
                    project_id=project_id,
                    entity_id=baseline.id,
                    actor=actor.identity,
                    baseline_type=baseline_type.value,
                    version=version,
                )
            )

        logger.info("Created %s baseline v%d for project %s", baseline_type.value, version, project_id)
        return baseline

    def list_baselines(self, project_id: str, baseline_type: BaselineType | None = None) -> list[BaselineModel]:
        baselines = self.store.list_baselines(project_id)
        if baseline_type is not None:
            baselines = [b for b in baselines if b.baseline_type == baseline_type]
        return sorted(baselines, key=lambda b: (b.baseline_type.value, b.version))

    def get_current_baseline(self, project_id: str, baseline_type: BaselineType = BaselineType.EXECUTION) -> BaselineModel:
        baselines = self.list_baselines(project_id, baseline_type)
        if not baselines:
            raise BaselineNotFoundError(project_id, baseline_type.value)
        return baselines[-1]

    def compare(
        self,
        project_id: str,
        baseline_type: BaselineType = BaselineType.EXECUTION,
        as_of: date | None = None,
    ) -> VarianceReport:
        """Variance of the project against its latest baseline of the given type."""
        project = self._project(project_id)
        baseline = self.get_current_baseline(project_id, baseline_type)
        return calculate_variance(baseline, project, as_of)
