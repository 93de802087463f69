"""Tests for the task lifecycle."""

import pytest

from zena_mcp.enums import EventType, TaskPriority
from zena_mcp.exceptions import (
    CircularDependencyError,
    ComponentNotFoundError,
    DuplicateIdError,
    InvalidProgressRangeError,
    MissingDependencyTargetError,
    ProjectNotFoundError,
    TaskNotFoundError,
)
from zena_mcp.models.task import ComponentModel, TaskModel, TaskUpdate


class TestCreateTask:
    """Tests for task creation."""

    def test_create_emits_created_event(self, workspace, project, recorded_events):
        task = workspace.tasks.create_task(TaskModel(project_id="p1", name="Survey"))
        assert workspace.tasks.get_task(task.id).name == "Survey"

        event = recorded_events[-1]
        assert event.event_type == EventType.TASK_CREATED
        assert event.entity_id == task.id
        assert event.changes["name"] == [None, "Survey"]

    def test_unknown_project(self, workspace):
        with pytest.raises(ProjectNotFoundError):
            workspace.tasks.create_task(TaskModel(project_id="nope", name="Orphan"))

    def test_unknown_dependency(self, workspace, project):
        with pytest.raises(MissingDependencyTargetError):
            workspace.tasks.create_task(TaskModel(project_id="p1", name="Late", dependencies=["ghost"]))
        assert workspace.tasks.list_tasks("p1") == []

    def test_component_from_other_project(self, workspace, project, other_project):
        workspace.components.create_component(ComponentModel(id="c2", project_id="p2", name="Yard"))
        with pytest.raises(ComponentNotFoundError):
            workspace.tasks.create_task(TaskModel(project_id="p1", name="Pave", component_id="c2"))

    def test_progress_out_of_range(self, workspace, project):
        with pytest.raises(InvalidProgressRangeError):
            workspace.tasks.create_task(TaskModel(project_id="p1", name="Odd", progress_percent=120))

    def test_duplicate_dependencies_are_collapsed(self, workspace, add_task):
        add_task("A")
        task = add_task("B", ["a", "a"])
        assert task.dependencies == ["a"]


class TestDuplicateIds:
    """Tests for id reuse on creation."""

    def test_live_task_id(self, workspace, add_task, recorded_events):
        add_task("Survey")
        recorded_events.clear()

        with pytest.raises(DuplicateIdError) as exc_info:
            add_task("Other", id="survey")

        assert exc_info.value.record_id == "survey"
        assert workspace.tasks.get_task("survey").name == "Survey"
        assert recorded_events == []

    def test_deleted_task_id(self, workspace, add_task):
        add_task("Survey")
        workspace.tasks.delete_task("survey")

        with pytest.raises(DuplicateIdError):
            add_task("Survey")
        assert workspace.store.get_task("survey").is_deleted

    def test_id_used_in_other_project(self, workspace, add_task, other_project):
        add_task("A")
        add_task("B", ["a"])

        with pytest.raises(DuplicateIdError):
            workspace.tasks.create_task(TaskModel(id="a", project_id="p2", name="Elsewhere"))

        stored = workspace.store.get_task("a")
        assert stored.project_id == "p1"
        assert stored.name == "A"
        assert workspace.tasks.get_task("b").dependencies == ["a"]
        assert workspace.tasks.list_tasks("p2") == []


class TestCreationVisibility:
    """Tests for hidden state of tagged tasks."""

    def test_inactive_tag_starts_hidden(self, workspace, add_task, recorded_events):
        add_task("Snag list", conditional_tag="closeout_phase")

        assert workspace.tasks.get_task("snag_list").is_hidden
        assert workspace.tasks.list_tasks("p1", include_hidden=False) == []
        created = recorded_events[-1]
        assert created.event_type == EventType.TASK_CREATED
        assert created.changes["is_hidden"] == [None, True]

    def test_active_tag_starts_visible(self, workspace, add_task):
        add_task("Concept sketches", conditional_tag="design_phase", is_hidden=True)
        assert not workspace.tasks.get_task("concept_sketches").is_hidden

    def test_retagging_flips_hidden(self, workspace, add_task, recorded_events):
        add_task("Concept sketches", conditional_tag="design_phase")
        recorded_events.clear()

        task = workspace.tasks.update_task("concept_sketches", TaskUpdate(conditional_tag="closeout_phase"))
        assert task.is_hidden
        assert recorded_events[-1].changes == {
            "conditional_tag": ["design_phase", "closeout_phase"],
            "is_hidden": [False, True],
        }

        task = workspace.tasks.update_task("concept_sketches", TaskUpdate(conditional_tag=None))
        assert not task.is_hidden


class TestUpdateTask:
    """Tests for partial updates."""

    def test_only_changed_fields_are_reported(self, workspace, add_task, recorded_events):
        add_task("Pour slab")
        workspace.tasks.update_task("pour_slab", TaskUpdate(priority=TaskPriority.HIGH, name="Pour slab"))

        event = recorded_events[-1]
        assert event.event_type == EventType.TASK_UPDATED
        assert event.changes == {"priority": [TaskPriority.MEDIUM, TaskPriority.HIGH]}

    def test_noop_update_emits_nothing(self, workspace, add_task, recorded_events):
        add_task("Pour slab")
        recorded_events.clear()
        workspace.tasks.update_task("pour_slab", TaskUpdate(name="Pour slab"))
        assert recorded_events == []

    def test_explicit_none_clears_nullable_field(self, workspace, add_task):
        add_task("Pour slab", conditional_tag="design_phase")
        task = workspace.tasks.update_task("pour_slab", TaskUpdate(conditional_tag=None))
        assert task.conditional_tag is None

    def test_none_is_ignored_for_required_field(self, workspace, add_task):
        add_task("Pour slab")
        task = workspace.tasks.update_task("pour_slab", TaskUpdate(name=None))
        assert task.name == "Pour slab"

    def test_dependency_update_is_validated(self, workspace, add_task):
        add_task("A")
        add_task("B", ["a"])

        with pytest.raises(CircularDependencyError):
            workspace.tasks.update_task("a", TaskUpdate(dependencies=["b"]))
        assert workspace.tasks.get_task("a").dependencies == []


class TestDeleteTask:
    """Tests for soft delete."""

    def test_delete_detaches_dependents(self, workspace, add_task, recorded_events):
        add_task("A")
        add_task("B", ["a"])
        workspace.tasks.delete_task("a")

        assert workspace.tasks.get_task("b").dependencies == []
        with pytest.raises(TaskNotFoundError):
            workspace.tasks.get_task("a")
        assert [e.event_type for e in recorded_events[-2:]] == [EventType.TASK_UPDATED, EventType.TASK_DELETED]

    def test_deleted_task_is_kept_in_store(self, workspace, add_task):
        add_task("A")
        workspace.tasks.delete_task("a")
        stored = workspace.store.get_task("a")
        assert stored is not None and stored.is_deleted
        assert [t.id for t in workspace.store.list_tasks("p1", include_deleted=True)] == ["a"]
