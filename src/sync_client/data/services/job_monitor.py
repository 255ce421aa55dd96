"""Polling loops for transfer-job progress."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from sync_client.api.backend_client import BackendClient
from sync_client.api.error_handling import BackendError
from sync_client.config.client import ClientConfig
from sync_client.data.models import JobStatus
from sync_client.data.services.job_metrics import JobMetrics, derive_metrics
from sync_client.data.services.job_registry import JobRegistry

JobUpdateCallback = Callable[[JobStatus, JobMetrics], None]
JobListCallback = Callable[[List[JobStatus]], None]


async def _wait_or_stop(stop_event: asyncio.Event, delay: float) -> bool:
    """Sleep for ``delay`` seconds; return True if a stop was requested meanwhile."""
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=delay)
        return True
    except asyncio.TimeoutError:
        return False


@dataclass
class PollHandle:
    """Handle of one job's poll loop."""

    job_id: str
    task: Optional[asyncio.Task] = None
    stop_event: asyncio.Event = field(default_factory=asyncio.Event)
    polls: int = 0
    listeners: List[JobUpdateCallback] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return self.task is not None and not self.task.done()

    def stop(self) -> None:
        self.stop_event.set()

    def add_listener(self, on_update: Optional[JobUpdateCallback]) -> None:
        if on_update is not None and on_update not in self.listeners:
            self.listeners.append(on_update)

    def notify(self, status: JobStatus, metrics: JobMetrics) -> None:
        for listener in list(self.listeners):
            listener(status, metrics)


class JobMonitor:
    """
    Per-job polling state machine.

    Each poll fetches the job status, stores it in the registry (last write
    wins), derives metrics and reports the update. Polling continues every
    ``poll_interval`` seconds while the job is ``Starting``/``Running`` and
    stops for good once the server reports a terminal state.

    A failed poll is logged and retried on the next tick. Stopping a loop
    means not scheduling another poll; a request already sent is allowed to
    complete and its snapshot is still recorded, unless the job was removed
    from the registry meanwhile.
    """

    def __init__(
        self,
        backend: BackendClient,
        registry: JobRegistry,
        poll_interval: float = ClientConfig.JOB_POLL_INTERVAL,
        clock: Callable[[], float] = time.time,
        logger_obj: Optional[logging.Logger] = None,
    ):
        self.backend = backend
        self.registry = registry
        self.poll_interval = poll_interval
        self.clock = clock
        self.logger = logger_obj or logging.getLogger(__name__)

    def start(self, job_id: str, on_update: Optional[JobUpdateCallback] = None) -> PollHandle:
        """
        Start polling ``job_id`` now.

        An already running loop is reused and ``on_update`` joins its
        listeners, so every caller watching the job sees each poll.
        """
        entry = self.registry.register(job_id)
        handle = entry.poll_handle
        if isinstance(handle, PollHandle) and handle.active:
            handle.add_listener(on_update)
            return handle

        handle = PollHandle(job_id=job_id)
        handle.add_listener(on_update)
        self.registry.attach_handle(job_id, handle)
        handle.task = asyncio.create_task(self._poll_loop(handle))
        self.logger.info(f"Monitoring job {job_id}")
        return handle

    async def poll_once(self, job_id: str, on_update: Optional[JobUpdateCallback] = None) -> Optional[JobStatus]:
        """Fetch and record one status snapshot. Returns None if the poll failed."""
        try:
            snapshot = await self.backend.get_job_status(job_id)
        except BackendError as e:
            self.logger.warning(f"Poll for job {job_id} failed with {e.category.value} error: {e}. Retrying next tick.")
            return None

        # A job deleted while this request was in flight stays deleted
        if job_id not in self.registry:
            self.logger.debug(f"Discarding status of removed job {job_id}")
            return snapshot

        self.registry.update(snapshot)
        metrics = derive_metrics(snapshot, self.clock())
        if on_update:
            on_update(snapshot, metrics)
        return snapshot

    async def _poll_loop(self, handle: PollHandle) -> None:
        try:
            while True:
                snapshot = await self.poll_once(handle.job_id, handle.notify)
                handle.polls += 1

                if snapshot is not None and snapshot.is_terminal:
                    self.logger.info(f"Job {handle.job_id} finished with status '{snapshot.status_label}'")
                    break
                if handle.stop_event.is_set():
                    break
                if await _wait_or_stop(handle.stop_event, self.poll_interval):
                    break
        finally:
            entry = self.registry.get(handle.job_id)
            if entry is not None and entry.poll_handle is handle:
                self.registry.detach_handle(handle.job_id)

    def stop(self, job_id: str) -> None:
        """Stop scheduling polls for ``job_id``."""
        entry = self.registry.get(job_id)
        if entry is not None and isinstance(entry.poll_handle, PollHandle):
            entry.poll_handle.stop()
            self.logger.debug(f"Stopped monitoring job {job_id}")

    def stop_all(self) -> None:
        for job_id in self.registry.job_ids():
            self.stop(job_id)

    def is_active(self, job_id: str) -> bool:
        entry = self.registry.get(job_id)
        return entry is not None and isinstance(entry.poll_handle, PollHandle) and entry.poll_handle.active

    async def wait(self, handle: PollHandle) -> None:
        """Wait until a poll loop has ended."""
        if handle.task is not None:
            await handle.task


class JobListPoller:
    """
    Lower-frequency poller for the aggregate job list.

    Every successful poll replaces the whole displayed set, so jobs that
    appear or disappear between polls need no special handling.
    """

    def __init__(
        self,
        backend: BackendClient,
        interval: float = ClientConfig.JOB_LIST_POLL_INTERVAL,
        on_update: Optional[JobListCallback] = None,
        logger_obj: Optional[logging.Logger] = None,
    ):
        self.backend = backend
        self.interval = interval
        self.on_update = on_update
        self.logger = logger_obj or logging.getLogger(__name__)
        self.jobs: List[JobStatus] = []
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()

    async def poll_once(self) -> bool:
        try:
            jobs = await self.backend.list_jobs()
        except BackendError as e:
            self.logger.warning(f"Error loading sync jobs: {e}")
            return False

        self.jobs = list(jobs)
        if self.on_update:
            self.on_update(self.jobs)
        return True

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._stop_event = asyncio.Event()
            self._task = asyncio.create_task(self._run())
        return self._task

    async def _run(self) -> None:
        while True:
            await self.poll_once()
            if await _wait_or_stop(self._stop_event, self.interval):
                break

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    async def wait(self) -> None:
        if self._task is not None:
            await self._task
