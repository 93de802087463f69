"""Enums for the ZenaManage planning core."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # Minimal output for chaining
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class TaskStatus(str, Enum):
    """Task lifecycle states."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ProjectStatus(str, Enum):
    """Project lifecycle states."""

    PLANNING = "planning"
    DESIGN = "design"
    IN_PROGRESS = "in_progress"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BaselineType(str, Enum):
    """Baseline kinds, versioned independently per project."""

    CONTRACT = "contract"
    EXECUTION = "execution"


class ConflictBehavior(str, Enum):
    """What template application does when a task name already exists."""

    SKIP = "skip"
    RENAME = "rename"


class ScheduleStatus(str, Enum):
    AHEAD = "Ahead of Schedule"
    ON_SCHEDULE = "On Schedule"
    BEHIND = "Behind Schedule"
    SIGNIFICANTLY_BEHIND = "Significantly Behind"


class CostStatus(str, Enum):
    UNDER_BUDGET = "Under Budget"
    ON_BUDGET = "On Budget"
    OVER_BUDGET = "Over Budget"
    SIGNIFICANTLY_OVER = "Significantly Over Budget"


class HealthBand(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class EventType(str, Enum):
    """Names of the domain events published by the services."""

    TASK_CREATED = "task.created"
    TASK_UPDATED = "task.updated"
    TASK_DELETED = "task.deleted"
    COMPONENT_CREATED = "component.created"
    COMPONENT_DELETED = "component.deleted"
    COMPONENT_PROGRESS_CHANGED = "component.progress_changed"
    PROJECT_PROGRESS_CHANGED = "project.progress_changed"
    PROJECT_STATUS_CHANGED = "project.status_changed"
    PROJECT_UPDATED = "project.updated"
    BASELINE_CREATED = "baseline.created"
    TEMPLATE_APPLIED = "template.applied"
