"""Tests for the client-side job registry."""

from unittest.mock import Mock

from sync_client.data.services.job_registry import JobRegistry

from conftest import make_status


class TestJobRegistry:
    """Test registry bookkeeping."""

    def test_register_is_idempotent(self):
        registry = JobRegistry(Mock())
        first = registry.register("a")
        first.last_snapshot = make_status("a")

        assert registry.register("a") is first
        assert len(registry) == 1

    def test_update_last_write_wins(self):
        registry = JobRegistry(Mock())
        registry.update(make_status("a", status="Running", progress=10))
        registry.update(make_status("a", status="Running", progress=20))

        assert registry.get("a").last_snapshot.progress_percent == 20

    def test_update_registers_unknown_job(self):
        registry = JobRegistry(Mock())
        registry.update(make_status("new"))
        assert "new" in registry

    def test_handles(self):
        registry = JobRegistry(Mock())
        handle = object()
        registry.attach_handle("a", handle)
        assert registry.get("a").poll_handle is handle

        registry.detach_handle("a")
        registry.detach_handle("missing")
        assert registry.get("a").poll_handle is None

    def test_remove_and_listing(self):
        registry = JobRegistry(Mock())
        registry.update(make_status("a"))
        registry.register("b")

        assert registry.job_ids() == ["a", "b"]
        assert [s.id for s in registry.snapshots()] == ["a"]

        registry.remove("a")
        assert registry.remove("a") is None
        assert registry.job_ids() == ["b"]
