"""Output models for graph, roll-up and variance queries."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from zena_mcp.enums import CostStatus, HealthBand, ScheduleStatus, TaskStatus


class GraphNode(BaseModel):
    """One task of the dependency graph with edges in both directions."""

    task_id: str
    name: str
    status: TaskStatus
    dependencies: list[str] = Field(default_factory=list)
    dependents: list[str] = Field(default_factory=list)


class DependencyGraph(BaseModel):
    project_id: str
    nodes: list[GraphNode] = Field(default_factory=list)

    @property
    def edge_count(self) -> int:
        return sum(len(n.dependencies) for n in self.nodes)

    def adjacency(self) -> dict[str, list[str]]:
        return {n.task_id: list(n.dependencies) for n in self.nodes}


class DelayImpact(BaseModel):
    """A task pushed back by an upstream slip."""

    task_id: str
    name: str
    depth: int
    current_start: date | None = None
    projected_start: date | None = None


class ComponentNode(BaseModel):
    """A component with its children, for tree rendering."""

    id: str
    name: str
    depth: int = 0
    progress_percent: float = 0.0
    planned_cost: float = 0.0
    actual_cost: float = 0.0
    children: list[ComponentNode] = Field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


class EvmMetrics(BaseModel):
    planned_value: float
    earned_value: float
    actual_cost: float
    cpi: float | None = None
    spi: float | None = None
    eac: float
    etc: float
    vac: float


class ScheduleVariance(BaseModel):
    planned_duration_days: int
    elapsed_days: int
    expected_days: float
    variance_days: float
    status: ScheduleStatus


class CostVariance(BaseModel):
    planned_cost: float
    actual_cost: float
    variance_amount: float
    variance_percent: float
    earned_variance_percent: float | None = None  # AC against PV
    status: CostStatus


class VarianceReport(BaseModel):
    project_id: str
    baseline_id: str
    baseline_type: str
    baseline_version: int
    as_of: date
    progress_percent: float
    evm: EvmMetrics
    schedule: ScheduleVariance
    cost: CostVariance
    health: HealthBand
    cost_health: HealthBand
    recommendations: list[str] = Field(default_factory=list)


ComponentNode.model_rebuild()
