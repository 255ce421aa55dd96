"""Client-side registry of known transfer jobs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sync_client.data.models import JobStatus


@dataclass
class JobRegistryEntry:
    """Last known snapshot of one job plus its poll handle, if any."""

    job_id: str
    last_snapshot: Optional[JobStatus] = None
    poll_handle: Optional[Any] = None


class JobRegistry:
    """One entry per active or recently viewed job."""

    def __init__(self, logger_obj: Optional[logging.Logger] = None):
        self.logger = logger_obj or logging.getLogger(__name__)
        self._entries: Dict[str, JobRegistryEntry] = {}

    def register(self, job_id: str) -> JobRegistryEntry:
        """Register a job id; an existing entry is returned unchanged."""
        entry = self._entries.get(job_id)
        if entry is None:
            entry = JobRegistryEntry(job_id=job_id)
            self._entries[job_id] = entry
            self.logger.debug(f"Registered job {job_id}")
        return entry

    def get(self, job_id: str) -> Optional[JobRegistryEntry]:
        return self._entries.get(job_id)

    def update(self, snapshot: JobStatus) -> JobRegistryEntry:
        """Store a snapshot, replacing the previous one (last write wins)."""
        entry = self.register(snapshot.id)
        entry.last_snapshot = snapshot
        return entry

    def attach_handle(self, job_id: str, handle: Any) -> None:
        self.register(job_id).poll_handle = handle

    def detach_handle(self, job_id: str) -> None:
        entry = self._entries.get(job_id)
        if entry is not None:
            entry.poll_handle = None

    def remove(self, job_id: str) -> Optional[JobRegistryEntry]:
        return self._entries.pop(job_id, None)

    def job_ids(self) -> List[str]:
        return list(self._entries)

    def snapshots(self) -> List[JobStatus]:
        return [entry.last_snapshot for entry in self._entries.values() if entry.last_snapshot is not None]

    def __contains__(self, job_id: str) -> bool:
        return job_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
