# tests/conftest.py
import os
import sys
from typing import Any, Dict, List, Optional

import pytest
from unittest.mock import AsyncMock, Mock

# Make sure `src/` is on the import path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
sys.path.insert(0, os.path.join(ROOT, "src"))

from sync_client.data.models import DirectoryEntry, JobStatus  # noqa: E402
from sync_client.data.storage.kv_store import InMemoryStore  # noqa: E402
from sync_client.ui.notifications import NotificationCenter  # noqa: E402
from sync_client.ui.state.session_state import SessionContext  # noqa: E402


class FakeClock:
    """Manually advanced clock for TTL and elapsed-time tests."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_entry(name: str, parent: str = "/", is_directory: bool = True, size: Optional[int] = None) -> DirectoryEntry:
    path = f"{parent.rstrip('/')}/{name}"
    return DirectoryEntry(name=name, path=path, is_directory=is_directory, size=size)


def make_status(job_id: str = "job-1", status: str = "Running", **overrides: Any) -> JobStatus:
    payload: Dict[str, Any] = {
        "id": job_id,
        "status": status,
        "progress": 0.0,
        "transferred": 0,
        "total": 0,
        "source_name": "/data/file.bin",
        "start_time": None,
        "end_time": None,
    }
    payload.update(overrides)
    return JobStatus.from_dict(payload)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def session() -> SessionContext:
    return SessionContext()


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter(Mock())


@pytest.fixture
def backend() -> Mock:
    """Backend client double whose async methods are AsyncMocks."""
    client = Mock()
    for name in (
        "list_local_files",
        "list_remote_files",
        "submit_sync",
        "get_job_status",
        "list_jobs",
        "delete_job",
        "get_job_log",
        "list_configs",
        "create_config",
        "delete_config",
        "persist_configs",
        "close",
    ):
        setattr(client, name, AsyncMock())
    return client


@pytest.fixture
def sample_entries() -> List[DirectoryEntry]:
    return [
        make_entry("photos"),
        make_entry("notes.txt", is_directory=False, size=120),
        make_entry("videos"),
    ]
