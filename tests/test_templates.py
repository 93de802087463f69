"""Tests for template preview and application."""

import pytest

from zena_mcp.enums import ConflictBehavior, EventType, TaskPriority
from zena_mcp.exceptions import TemplateError
from zena_mcp.models.template import TemplateApplyOptions, TemplateSelections
from zena_mcp.utils.parsers import _parse_template


@pytest.fixture
def template():
    """T1 <- T2 <- T3, with T3 also naming a code outside the template."""
    return _parse_template(
        {
            "id": "tpl-fitout",
            "name": "Fit-out",
            "tasks": [
                {
                    "code": "T3",
                    "name": "Install joinery",
                    "phase": "construction",
                    "discipline": "interiors",
                    "est_duration_days": 4,
                    "depends_on": ["T2", "X9"],
                },
                {
                    "code": "T1",
                    "name": "Measure survey",
                    "phase": "design",
                    "discipline": "interiors",
                    "est_duration_days": 5,
                    "priority": "high",
                },
                {
                    "code": "T2",
                    "name": "Shop drawings",
                    "phase": "design",
                    "discipline": "drafting",
                    "est_duration_days": 3,
                    "depends_on": ["T1"],
                },
            ],
        }
    )


class TestPreview:
    """Tests for the dry-run summary."""

    def test_totals(self, workspace, template):
        preview = workspace.templates.preview(template)
        assert preview.total_tasks == 3
        assert preview.total_dependencies == 2
        assert preview.estimated_duration_days == 12
        assert preview.phase_breakdown == {"construction": 1, "design": 2}
        assert preview.discipline_breakdown == {"interiors": 2, "drafting": 1}

    def test_selection_filters(self, workspace, template):
        preview = workspace.templates.preview(template, TemplateSelections(phases=["design"], exclude=["T1"]))
        assert preview.total_tasks == 1
        assert preview.total_dependencies == 0


class TestApply:
    """Tests for creating tasks from a template."""

    def test_creates_tasks_and_dependencies(self, workspace, project, template):
        result = workspace.templates.apply("p1", template)

        assert result.tasks_created == 3
        assert result.dependencies_created == 2
        assert result.skipped == []
        assert any("X9" in w for w in result.warnings)

        t1 = workspace.tasks.get_task(result.task_mapping["T1"])
        t2 = workspace.tasks.get_task(result.task_mapping["T2"])
        t3 = workspace.tasks.get_task(result.task_mapping["T3"])
        assert t1.estimated_hours == pytest.approx(40)
        assert t1.priority == TaskPriority.HIGH
        assert t2.dependencies == [t1.id]
        assert t3.dependencies == [t2.id]

        order = [t.id for t in workspace.dependencies.get_execution_order("p1")]
        assert order == [t1.id, t2.id, t3.id]

    def test_emits_applied_event(self, workspace, project, template, recorded_events):
        workspace.templates.apply("p1", template)
        applied = recorded_events[-1]
        assert applied.event_type == EventType.TEMPLATE_APPLIED
        assert applied.template_id == "tpl-fitout"
        assert applied.tasks_created == 3

    def test_existing_names_are_skipped(self, workspace, add_task, template):
        add_task("Shop drawings")
        result = workspace.templates.apply("p1", template)

        assert result.tasks_created == 2
        assert result.skipped == ["T2"]
        assert "Task 'T2' already exists, skipped" in result.warnings
        # T3 lost its only resolvable dependency
        assert workspace.tasks.get_task(result.task_mapping["T3"]).dependencies == []

    def test_existing_names_are_renamed(self, workspace, add_task, template):
        add_task("Shop drawings")
        options = TemplateApplyOptions(conflict_behavior=ConflictBehavior.RENAME)
        result = workspace.templates.apply("p1", template, options=options)

        assert result.tasks_created == 3
        assert workspace.tasks.get_task(result.task_mapping["T2"]).name == "Shop drawings (Copy)"

    def test_without_dependencies(self, workspace, project, template):
        options = TemplateApplyOptions(include_dependencies=False)
        result = workspace.templates.apply("p1", template, options=options)
        assert result.dependencies_created == 0
        assert all(not t.dependencies for t in workspace.tasks.list_tasks("p1"))

    def test_cyclic_template_still_applies(self, workspace, project, template):
        template.tasks[1].depends_on = ["T3"]
        result = workspace.templates.apply("p1", template)

        assert result.tasks_created == 3
        assert any("form a cycle" in w for w in result.warnings)
        assert any("Failed to create dependency" in w for w in result.warnings)
        assert result.dependencies_created == 2
        # The stored graph stays acyclic
        assert len(workspace.dependencies.get_execution_order("p1")) == 3

    def test_empty_selection(self, workspace, project, template):
        with pytest.raises(TemplateError):
            workspace.templates.apply("p1", template, selections=TemplateSelections(tasks=["nope"]))
        assert workspace.tasks.list_tasks("p1") == []

    def test_inactive_tag_starts_hidden(self, workspace, project, template):
        template.tasks[0].conditional_tag = "closeout_phase"
        template.tasks[1].conditional_tag = "design_phase"
        result = workspace.templates.apply("p1", template)

        assert workspace.store.get_task(result.task_mapping["T3"]).is_hidden
        assert not workspace.store.get_task(result.task_mapping["T1"]).is_hidden
        visible = {t.id for t in workspace.tasks.list_tasks("p1", include_hidden=False)}
        assert result.task_mapping["T3"] not in visible
