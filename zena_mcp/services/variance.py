"""
Earned Value Management variance calculator.

Pure functions of (baseline, project snapshot, as-of date); nothing here
reads or writes the store.
"""

from __future__ import annotations

from datetime import date

from zena_mcp.enums import CostStatus, HealthBand, ScheduleStatus
from zena_mcp.models.reports import CostVariance, EvmMetrics, ScheduleVariance, VarianceReport
from zena_mcp.models.task import BaselineModel, ProjectModel

AHEAD_DAYS = -7
BEHIND_DAYS = 7
SIGNIFICANTLY_BEHIND_DAYS = 30

UNDER_BUDGET_PCT = -10
OVER_BUDGET_PCT = 10
SIGNIFICANTLY_OVER_PCT = 25

HEALTH_BANDS = [
    (1.10, HealthBand.EXCELLENT),
    (0.95, HealthBand.GOOD),
    (0.85, HealthBand.FAIR),
]

INDEX_WARNING = 0.9
INDEX_STRONG = 1.1


def _ratio(numerator: float, denominator: float) -> float | None:
    if denominator == 0:
        return None
    return numerator / denominator


def calculate_evm(planned_cost: float, progress_percent: float, actual_cost: float) -> EvmMetrics:
    """
    PV, EV, AC and the derived indices.

    EV equals PV because progress is taken as earned completion. CPI and SPI
    are None when their denominator is zero; EAC falls back to the planned
    cost when CPI is undefined or zero.
    """
    pv = planned_cost * (progress_percent / 100)
    ev = pv
    cpi = _ratio(ev, actual_cost)
    spi = _ratio(ev, pv)
    eac = planned_cost / cpi if cpi else planned_cost
    return EvmMetrics(
        planned_value=pv,
        earned_value=ev,
        actual_cost=actual_cost,
        cpi=cpi,
        spi=spi,
        eac=eac,
        etc=eac - actual_cost,
        vac=planned_cost - eac,
    )


def classify_schedule(variance_days: float) -> ScheduleStatus:
    if variance_days <= AHEAD_DAYS:
        return ScheduleStatus.AHEAD
    if variance_days <= BEHIND_DAYS:
        return ScheduleStatus.ON_SCHEDULE
    if variance_days <= SIGNIFICANTLY_BEHIND_DAYS:
        return ScheduleStatus.BEHIND
    return ScheduleStatus.SIGNIFICANTLY_BEHIND


def classify_cost(variance_percent: float) -> CostStatus:
    if variance_percent <= UNDER_BUDGET_PCT:
        return CostStatus.UNDER_BUDGET
    if variance_percent <= OVER_BUDGET_PCT:
        return CostStatus.ON_BUDGET
    if variance_percent <= SIGNIFICANTLY_OVER_PCT:
        return CostStatus.OVER_BUDGET
    return CostStatus.SIGNIFICANTLY_OVER


def classify_health(score: float) -> HealthBand:
    for threshold, band in HEALTH_BANDS:
        if score >= threshold:
            return band
    return HealthBand.POOR


def schedule_variance(baseline: BaselineModel, progress_percent: float, as_of: date) -> ScheduleVariance:
    planned = baseline.planned_duration_days
    elapsed = (as_of - baseline.start_date).days
    expected = planned * (progress_percent / 100)
    variance = elapsed - expected
    return ScheduleVariance(
        planned_duration_days=planned,
        elapsed_days=elapsed,
        expected_days=expected,
        variance_days=variance,
        status=classify_schedule(variance),
    )


def cost_variance(planned_cost: float, planned_value: float, actual_cost: float) -> CostVariance:
    # Status follows spend against the whole baseline budget
    amount = actual_cost - planned_cost
    percent = (amount / planned_cost * 100) if planned_cost else 0.0
    earned = ((actual_cost - planned_value) / planned_value * 100) if planned_value else None
    return CostVariance(
        planned_cost=planned_cost,
        actual_cost=actual_cost,
        variance_amount=amount,
        variance_percent=percent,
        earned_variance_percent=earned,
        status=classify_cost(percent),
    )


def recommendations(evm: EvmMetrics, schedule: ScheduleVariance, cost: CostVariance) -> list[str]:
    notes: list[str] = []
    cpi_low = evm.cpi is not None and evm.cpi < INDEX_WARNING
    spi_low = evm.spi is not None and evm.spi < INDEX_WARNING

    if cpi_low and spi_low:
        notes.append(
            "Cost and schedule performance are both below 0.9: re-plan the remaining work "
            "and re-baseline the project."
        )
    elif cpi_low:
        notes.append(
            f"Cost performance index is {evm.cpi:.2f}: spending runs ahead of earned value; "
            "review budget allocation and cost controls."
        )
    elif spi_low:
        notes.append(
            f"Schedule performance index is {evm.spi:.2f}: fast-track or add resources "
            "to tasks on the critical path."
        )

    if schedule.status == ScheduleStatus.SIGNIFICANTLY_BEHIND:
        notes.append(
            f"Project is {schedule.variance_days:.0f} days behind its baseline; escalate to stakeholders."
        )
    if cost.status == CostStatus.SIGNIFICANTLY_OVER:
        notes.append(f"Costs are {cost.variance_percent:.1f}% over plan; a change request may be required.")
    if evm.cpi is not None and evm.cpi > INDEX_STRONG:
        notes.append("Cost performance is well ahead of plan; consider releasing contingency budget.")

    if not notes:
        notes.append("Project is tracking within tolerance of its baseline.")
    return notes


def calculate_variance(baseline: BaselineModel, project: ProjectModel, as_of: date | None = None) -> VarianceReport:
    """
    Compare a project's current state with a baseline.

    Health is the band of mean(CPI, SPI); an undefined index counts as 1.0
    (on plan). `cost_health` is the band of CPI on its own.
    """
    as_of = as_of or date.today()
    progress = project.progress_percent

    evm = calculate_evm(baseline.planned_cost, progress, project.actual_cost)
    schedule = schedule_variance(baseline, progress, as_of)
    cost = cost_variance(baseline.planned_cost, evm.planned_value, project.actual_cost)

    cpi = evm.cpi if evm.cpi is not None else 1.0
    spi = evm.spi if evm.spi is not None else 1.0

    return VarianceReport(
        project_id=project.id,
        baseline_id=baseline.id,
        baseline_type=baseline.baseline_type.value,
        baseline_version=baseline.version,
        as_of=as_of,
        progress_percent=progress,
        evm=evm,
        schedule=schedule,
        cost=cost,
        health=classify_health((cpi + spi) / 2),
        cost_health=classify_health(cpi),
        recommendations=recommendations(evm, schedule, cost),
    )
