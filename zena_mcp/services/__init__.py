"""Planning services for the ZenaManage core."""

from zena_mcp.services.baselines import BaselineService
from zena_mcp.services.components import ComponentService
from zena_mcp.services.dependencies import DependencyService, check_dependencies
from zena_mcp.services.projects import ProjectService
from zena_mcp.services.tasks import TaskService
from zena_mcp.services.templates import TemplateService, resolve_tasks
from zena_mcp.services.variance import calculate_evm, calculate_variance
from zena_mcp.services.visibility import ConditionalTagService

__all__ = [
    "BaselineService",
    "ComponentService",
    "ConditionalTagService",
    "DependencyService",
    "ProjectService",
    "TaskService",
    "TemplateService",
    "calculate_evm",
    "calculate_variance",
    "check_dependencies",
    "resolve_tasks",
]
