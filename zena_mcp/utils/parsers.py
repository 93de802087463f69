"""Parser helpers for workspace snapshots and templates."""

import json
from pathlib import Path
from typing import Any

from zena_mcp.models.actor import SYSTEM, Actor, user
from zena_mcp.models.task import BaselineModel, ComponentModel, ProjectModel, TaskModel
from zena_mcp.models.template import TemplateSet

SNAPSHOT_SECTIONS = ("projects", "components", "tasks", "baselines")


def _parse_task(task_dict: dict[str, Any]) -> TaskModel:
    """
    Parse a task dictionary into a TaskModel.

    Args:
        task_dict: Dictionary from a snapshot document

    Returns:
        TaskModel instance with validated data
    """
    return TaskModel.model_validate(task_dict)


def _parse_tasks(tasks: list[dict[str, Any]]) -> list[TaskModel]:
    return [_parse_task(t) for t in tasks]


def _parse_components(components: list[dict[str, Any]]) -> list[ComponentModel]:
    return [ComponentModel.model_validate(c) for c in components]


def _parse_projects(projects: list[dict[str, Any]]) -> list[ProjectModel]:
    return [ProjectModel.model_validate(p) for p in projects]


def _parse_baselines(baselines: list[dict[str, Any]]) -> list[BaselineModel]:
    return [BaselineModel.model_validate(b) for b in baselines]


def _parse_template(template_dict: dict[str, Any]) -> TemplateSet:
    return TemplateSet.model_validate(template_dict)


def _read_snapshot(source: str | Path | dict[str, Any]) -> dict[str, list[dict[str, Any]]]:
    """
    Load a snapshot document from a path or an already-decoded dict.

    Missing sections are treated as empty; unknown top-level keys are
    ignored.

    Args:
        source: Path to a JSON file, or the decoded document

    Returns:
        Mapping of section name to its list of raw records

    Raises:
        ValueError: if the document is not a JSON object or a section is not a list
    """
    if isinstance(source, dict):
        document = source
    else:
        with open(source, encoding="utf-8") as fh:
            document = json.load(fh)

    if not isinstance(document, dict):
        raise ValueError("Snapshot must be a JSON object")

    sections: dict[str, list[dict[str, Any]]] = {}
    for name in SNAPSHOT_SECTIONS:
        records = document.get(name) or []
        if not isinstance(records, list):
            raise ValueError(f"Snapshot section '{name}' must be a list")
        sections[name] = records
    return sections


def _parse_actor(user_id: str | None) -> Actor:
    """Tool callers pass an optional user id; none means the system acted."""
    return user(user_id) if user_id else SYSTEM
