"""Tests for the baseline registry and the variance calculator."""

from datetime import date

import pytest
from pydantic import ValidationError

from zena_mcp.enums import BaselineType, CostStatus, EventType, HealthBand, ScheduleStatus
from zena_mcp.exceptions import BaselineNotFoundError, InvalidBaselineError
from zena_mcp.models.actor import user
from zena_mcp.models.task import BaselineModel, ProjectModel
from zena_mcp.services.variance import (
    calculate_evm,
    calculate_variance,
    classify_cost,
    classify_health,
    classify_schedule,
)


@pytest.fixture
def baseline():
    return BaselineModel(
        project_id="p1",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 4, 1),
        planned_cost=100_000,
    )


class TestEarnedValue:
    """Tests for the EVM metrics."""

    def test_overspent_project(self):
        evm = calculate_evm(planned_cost=100_000, progress_percent=50, actual_cost=60_000)
        assert evm.planned_value == pytest.approx(50_000)
        assert evm.earned_value == pytest.approx(50_000)
        assert evm.cpi == pytest.approx(0.8333, abs=1e-4)
        assert evm.spi == pytest.approx(1.0)
        assert evm.eac == pytest.approx(120_000)
        assert evm.etc == pytest.approx(60_000)
        assert evm.vac == pytest.approx(-20_000)

    def test_nothing_spent_or_earned(self):
        evm = calculate_evm(planned_cost=100_000, progress_percent=0, actual_cost=0)
        assert evm.cpi is None
        assert evm.spi is None
        assert evm.eac == pytest.approx(100_000)

    def test_spending_without_progress(self):
        evm = calculate_evm(planned_cost=100_000, progress_percent=0, actual_cost=5_000)
        assert evm.cpi == 0
        assert evm.eac == pytest.approx(100_000)


class TestClassification:
    """Tests for the status and health bands."""

    @pytest.mark.parametrize(
        "days, status",
        [
            (-8, ScheduleStatus.AHEAD),
            (-7, ScheduleStatus.AHEAD),
            (0, ScheduleStatus.ON_SCHEDULE),
            (7, ScheduleStatus.ON_SCHEDULE),
            (7.5, ScheduleStatus.BEHIND),
            (30, ScheduleStatus.BEHIND),
            (31, ScheduleStatus.SIGNIFICANTLY_BEHIND),
        ],
    )
    def test_schedule(self, days, status):
        assert classify_schedule(days) == status

    @pytest.mark.parametrize(
        "percent, status",
        [
            (-10, CostStatus.UNDER_BUDGET),
            (-9.9, CostStatus.ON_BUDGET),
            (10, CostStatus.ON_BUDGET),
            (20, CostStatus.OVER_BUDGET),
            (25, CostStatus.OVER_BUDGET),
            (25.1, CostStatus.SIGNIFICANTLY_OVER),
        ],
    )
    def test_cost(self, percent, status):
        assert classify_cost(percent) == status

    @pytest.mark.parametrize(
        "score, band",
        [(1.2, HealthBand.EXCELLENT), (1.0, HealthBand.GOOD), (0.9, HealthBand.FAIR), (0.8, HealthBand.POOR)],
    )
    def test_health(self, score, band):
        assert classify_health(score) == band


class TestVarianceReport:
    """Tests for the combined report."""

    def test_overspent_and_behind(self, baseline):
        project = ProjectModel(id="p1", name="Riverside Tower", progress_percent=50, actual_cost=60_000)
        report = calculate_variance(baseline, project, as_of=date(2024, 3, 1))

        # 2024 is a leap year: 91 planned days, 60 elapsed, 45.5 expected
        assert report.schedule.planned_duration_days == 91
        assert report.schedule.elapsed_days == 60
        assert report.schedule.variance_days == pytest.approx(14.5)
        assert report.schedule.status == ScheduleStatus.BEHIND

        # 60k spent of a 100k budget
        assert report.cost.variance_percent == pytest.approx(-40)
        assert report.cost.status == CostStatus.UNDER_BUDGET
        assert report.cost.earned_variance_percent == pytest.approx(20)

        assert report.health == HealthBand.FAIR
        assert report.cost_health == HealthBand.POOR
        assert any("Cost performance index is 0.83" in note for note in report.recommendations)

    def test_on_track(self, baseline):
        project = ProjectModel(id="p1", name="Riverside Tower", progress_percent=50, actual_cost=50_000)
        report = calculate_variance(baseline, project, as_of=date(2024, 2, 15))
        assert report.schedule.status == ScheduleStatus.ON_SCHEDULE
        assert report.cost.status == CostStatus.UNDER_BUDGET
        assert report.health == HealthBand.GOOD
        assert report.recommendations == ["Project is tracking within tolerance of its baseline."]

    def test_spend_above_budget(self, baseline):
        project = ProjectModel(id="p1", name="Riverside Tower", progress_percent=100, actual_cost=130_000)
        report = calculate_variance(baseline, project, as_of=date(2024, 4, 1))
        assert report.cost.variance_amount == pytest.approx(30_000)
        assert report.cost.variance_percent == pytest.approx(30)
        assert report.cost.status == CostStatus.SIGNIFICANTLY_OVER
        assert any("Costs are 30.0% over plan" in note for note in report.recommendations)

    def test_zero_planned_cost(self):
        baseline = BaselineModel(project_id="p1", start_date=date(2024, 1, 1), end_date=date(2024, 4, 1))
        project = ProjectModel(id="p1", name="Riverside Tower", progress_percent=50, actual_cost=1_000)
        report = calculate_variance(baseline, project, as_of=date(2024, 2, 1))
        assert report.cost.variance_percent == 0
        assert report.cost.earned_variance_percent is None

    def test_undefined_indices_count_as_on_plan(self, baseline):
        project = ProjectModel(id="p1", name="Riverside Tower")
        report = calculate_variance(baseline, project, as_of=date(2024, 1, 1))
        assert report.evm.cpi is None
        assert report.health == HealthBand.GOOD


class TestBaselineService:
    """Tests for the versioned baseline registry."""

    def test_versions_increase_per_type(self, workspace, project):
        service = workspace.baselines
        first = service.create_baseline("p1", BaselineType.EXECUTION, date(2024, 1, 1), date(2024, 4, 1), 100_000)
        second = service.create_baseline(
            "p1", BaselineType.EXECUTION, date(2024, 1, 1), date(2024, 5, 1), 120_000, actor=user("pm")
        )
        contract = service.create_baseline("p1", BaselineType.CONTRACT, date(2024, 1, 1), date(2024, 4, 1), 90_000)

        assert (first.version, second.version, contract.version) == (1, 2, 1)
        assert service.get_current_baseline("p1").id == second.id
        assert second.created_by == "pm"
        assert len(workspace.events.of_type(EventType.BASELINE_CREATED)) == 3

    def test_baselines_are_immutable(self, workspace, project):
        baseline = workspace.baselines.create_baseline(
            "p1", BaselineType.EXECUTION, date(2024, 1, 1), date(2024, 4, 1), 100_000
        )
        with pytest.raises(ValidationError):
            baseline.planned_cost = 1
        with pytest.raises(ValueError):
            workspace.store.add_baseline(baseline)

    def test_end_before_start(self, workspace, project):
        with pytest.raises(InvalidBaselineError):
            workspace.baselines.create_baseline(
                "p1", BaselineType.EXECUTION, date(2024, 4, 1), date(2024, 1, 1), 100_000
            )

    def test_negative_cost(self, workspace, project):
        with pytest.raises(InvalidBaselineError):
            workspace.baselines.create_baseline("p1", BaselineType.EXECUTION, date(2024, 1, 1), date(2024, 4, 1), -1)

    def test_compare_without_baseline(self, workspace, project):
        with pytest.raises(BaselineNotFoundError):
            workspace.baselines.compare("p1")

    def test_compare_uses_rolled_up_project(self, workspace, project, add_component):
        add_component("works", progress_percent=50, actual_cost=60_000)
        workspace.baselines.create_baseline("p1", BaselineType.EXECUTION, date(2024, 1, 1), date(2024, 4, 1), 100_000)

        report = workspace.baselines.compare("p1", as_of=date(2024, 3, 1))
        assert report.progress_percent == pytest.approx(50)
        assert report.evm.actual_cost == pytest.approx(60_000)
        assert report.cost_health == HealthBand.POOR
