"""Tests for the store, event bus and cache collaborators."""

import logging
from datetime import date, datetime

import pytest

from zena_mcp.cache import MemoryCache, NullCache
from zena_mcp.enums import EventType
from zena_mcp.events import EventBus
from zena_mcp.models.events import DomainEvent
from zena_mcp.models.task import BaselineModel, ProjectModel, TaskModel
from zena_mcp.store import MemoryStore


def _event(event_type=EventType.TASK_UPDATED, entity_id="t1"):
    return DomainEvent(event_type=event_type, project_id="p1", entity_id=entity_id)


class TestMemoryStore:
    """Tests for the in-memory store."""

    @pytest.fixture
    def store(self):
        store = MemoryStore()
        store.save_project(ProjectModel(id="p1", name="One"))
        store.save_project(ProjectModel(id="p2", name="Two"))
        return store

    def test_records_are_copied(self, store):
        task = TaskModel(id="t1", project_id="p1", name="Survey")
        store.save_task(task)
        task.name = "Changed"
        assert store.get_task("t1").name == "Survey"

        loaded = store.get_task("t1")
        loaded.dependencies.append("x")
        assert store.get_task("t1").dependencies == []

    def test_rollback_restores_project_scope(self, store):
        store.save_task(TaskModel(id="t1", project_id="p1", name="Survey"))

        with pytest.raises(RuntimeError):
            with store.transaction("p1"):
                task = store.get_task("t1")
                task.name = "Renamed"
                store.save_task(task)
                store.save_task(TaskModel(id="t2", project_id="p1", name="New"))
                raise RuntimeError("boom")

        assert store.get_task("t1").name == "Survey"
        assert store.get_task("t2") is None

    def test_rollback_leaves_other_projects(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction("p1"):
                store.save_task(TaskModel(id="t9", project_id="p2", name="Elsewhere"))
                raise RuntimeError("boom")
        assert store.get_task("t9") is not None

    def test_nested_transaction_joins_outer(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction("p1"):
                with store.transaction("p1"):
                    store.save_task(TaskModel(id="t1", project_id="p1", name="Inner"))
                raise RuntimeError("boom")
        assert store.get_task("t1") is None

    def test_deleted_tasks_filtered(self, store):
        store.save_task(TaskModel(id="t1", project_id="p1", name="Gone", deleted_at=datetime(2024, 1, 1)))
        assert store.list_tasks("p1") == []
        assert len(store.list_tasks("p1", include_deleted=True)) == 1

    def test_baselines_are_insert_only(self, store):
        baseline = BaselineModel(project_id="p1", start_date=date(2024, 1, 1), end_date=date(2024, 2, 1))
        store.add_baseline(baseline)
        with pytest.raises(ValueError):
            store.add_baseline(baseline)
        assert store.list_baselines("p1") == [baseline]
        assert store.list_baselines("p2") == []


class TestEventBus:
    """Tests for synchronous event delivery."""

    def test_delivers_in_order(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append)
        bus.publish(_event(entity_id="a"))
        bus.publish(_event(entity_id="b"))
        assert [e.entity_id for e in received] == ["a", "b"]

    def test_failing_subscriber_is_logged(self, caplog):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("subscriber down")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        with caplog.at_level(logging.ERROR, logger="zena_mcp.events"):
            bus.publish(_event())

        assert len(received) == 1
        assert "Event handler" in caplog.text

    def test_history_is_bounded(self):
        bus = EventBus(history_size=2)
        for entity_id in ("a", "b", "c"):
            bus.publish(_event(entity_id=entity_id))
        assert [e.entity_id for e in bus.history] == ["b", "c"]

    def test_of_type(self):
        bus = EventBus()
        bus.publish(_event(EventType.TASK_CREATED))
        bus.publish(_event(EventType.TASK_DELETED))
        assert len(bus.of_type(EventType.TASK_DELETED)) == 1

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append)
        bus.unsubscribe(received.append)
        bus.publish(_event())
        assert received == []


class TestCache:
    """Tests for the cache implementations."""

    def test_entry_expires(self, clock):
        cache = MemoryCache(clock=clock)
        cache.set("tag:p1:design_phase", True, ttl_seconds=5)
        clock.advance(4)
        assert cache.get("tag:p1:design_phase") is True
        clock.advance(1)
        assert cache.get("tag:p1:design_phase") is None
        assert len(cache) == 0

    def test_falsy_values_are_cached(self, clock):
        cache = MemoryCache(clock=clock)
        cache.set("k", False, ttl_seconds=5)
        assert cache.get("k") is False

    def test_delete_prefix(self, clock):
        cache = MemoryCache(clock=clock)
        cache.set("tag:p1:a", True, 10)
        cache.set("tag:p1:b", False, 10)
        cache.set("tag:p10:a", True, 10)
        assert cache.delete_prefix("tag:p1:") == 2
        assert len(cache) == 1

    def test_null_cache(self):
        cache = NullCache()
        cache.set("k", True, 10)
        assert cache.get("k") is None
        assert cache.delete_prefix("") == 0
