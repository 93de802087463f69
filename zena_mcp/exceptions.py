"""Exceptions for the ZenaManage planning core.

Every error here is raised before any write is committed, so callers can
correct their input and retry.
"""


class ZenaError(Exception):
    """Base exception for planning core errors."""

    pass


class NotFoundError(ZenaError):
    """Raised when a referenced record does not exist or was soft-deleted."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")


class TaskNotFoundError(NotFoundError):
    def __init__(self, task_id: str):
        super().__init__("Task", task_id)


class ComponentNotFoundError(NotFoundError):
    def __init__(self, component_id: str):
        super().__init__("Component", component_id)


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: str):
        super().__init__("Project", project_id)


class DuplicateIdError(ZenaError):
    """Raised when a new record reuses an id, including one of a soft-deleted record."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} id '{record_id}' is already in use")


class CircularDependencyError(ZenaError):
    """Raised when a new dependency edge would close a cycle. The edge is not persisted."""

    def __init__(self, task_id: str, depends_on_id: str, cycle: list[str] | None = None):
        self.task_id = task_id
        self.depends_on_id = depends_on_id
        self.cycle = cycle or []
        message = f"Dependency {task_id} -> {depends_on_id} would create a circular dependency"
        if self.cycle:
            message += f" ({' -> '.join(self.cycle)})"
        super().__init__(message)


class CycleDetectedError(ZenaError):
    """Raised when a stored dependency graph turns out to contain a cycle."""

    def __init__(self, project_id: str, unordered: list[str]):
        self.project_id = project_id
        self.unordered = unordered
        super().__init__(
            f"Dependency graph of project '{project_id}' contains a cycle; "
            f"{len(unordered)} task(s) cannot be ordered: {', '.join(unordered)}"
        )


class MissingDependencyTargetError(ZenaError):
    """Raised when a dependency references a task that is not in the project."""

    def __init__(self, task_id: str, depends_on_id: str, project_id: str | None = None):
        self.task_id = task_id
        self.depends_on_id = depends_on_id
        self.project_id = project_id
        where = f" in project '{project_id}'" if project_id else ""
        super().__init__(f"Task '{task_id}' depends on '{depends_on_id}', which was not found{where}")


class InvalidProgressRangeError(ZenaError):
    """Raised when a progress percent falls outside 0-100."""

    def __init__(self, value: float):
        self.value = value
        super().__init__(f"Progress must be between 0 and 100, got {value}")


class ComponentHasChildrenError(ZenaError):
    def __init__(self, component_id: str, child_count: int):
        self.component_id = component_id
        self.child_count = child_count
        super().__init__(f"Component '{component_id}' has {child_count} child component(s); delete them first")


class ComponentHasTasksError(ZenaError):
    def __init__(self, component_id: str, task_count: int):
        self.component_id = component_id
        self.task_count = task_count
        super().__init__(f"Component '{component_id}' has {task_count} linked task(s); move or delete them first")


class ComponentCycleError(ZenaError):
    """Raised when parent pointers loop back on themselves."""

    def __init__(self, component_id: str):
        self.component_id = component_id
        super().__init__(f"Component '{component_id}' is part of a parent-pointer loop")


class InvalidBaselineError(ZenaError):
    pass


class BaselineNotFoundError(ZenaError):
    def __init__(self, project_id: str, baseline_type: str):
        self.project_id = project_id
        self.baseline_type = baseline_type
        super().__init__(f"No {baseline_type} baseline exists for project '{project_id}'")


class TemplateError(ZenaError):
    """Raised when a template cannot be applied at all."""

    pass
