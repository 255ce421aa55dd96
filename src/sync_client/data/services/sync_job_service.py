"""Service for launching, deleting and inspecting transfer jobs."""

import logging
from typing import Optional, Tuple

from sync_client.api.backend_client import BackendClient
from sync_client.api.error_handling import BackendError, ResourceNotFoundError
from sync_client.config.client import ClientConfig
from sync_client.data.models import SyncRequest
from sync_client.data.services.job_monitor import JobMonitor, JobUpdateCallback, PollHandle
from sync_client.data.services.job_registry import JobRegistry
from sync_client.ui.notifications import NotificationCenter
from sync_client.ui.state.session_state import SessionContext

SYNC_CHANNEL = "sync"
JOBS_CHANNEL = "jobs"


def suggest_chunk_size(source_path: str) -> Tuple[str, Optional[str]]:
    """
    Suggest a chunk size from the name of the source.

    Returns the chunk size and a hint to show the user, or None when the
    default applies.
    """
    file_name = source_path.rstrip("/").split("/")[-1].lower()
    for markers, chunk_size, hint in ClientConfig.CHUNK_SIZE_RULES:
        if any(marker in file_name for marker in markers):
            return chunk_size, hint
    return ClientConfig.DEFAULT_CHUNK_SIZE, None


class SyncJobService:
    """Coordinates job submission with the registry and the progress monitor."""

    def __init__(
        self,
        session: SessionContext,
        backend: BackendClient,
        registry: JobRegistry,
        monitor: JobMonitor,
        notifications: Optional[NotificationCenter] = None,
        logger_obj: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.backend = backend
        self.registry = registry
        self.monitor = monitor
        self.notifications = notifications or NotificationCenter()
        self.logger = logger_obj or logging.getLogger(__name__)

    async def start_sync(
        self,
        source_path: str,
        remote_name: str,
        remote_path: str,
        use_parallelism: bool = False,
        chunk_size: Optional[str] = None,
        on_update: Optional[JobUpdateCallback] = None,
    ) -> Optional[str]:
        """
        Submit a transfer and start monitoring it.

        Returns the new job id, or None when the submission failed (the
        failure is reported as a notification).
        """
        if not remote_name:
            self.notifications.error("Please select a remote", channel=SYNC_CHANNEL)
            return None

        if use_parallelism and chunk_size is None:
            chunk_size, _ = suggest_chunk_size(source_path)

        request = SyncRequest(
            source_path=source_path,
            remote_name=remote_name,
            remote_path=remote_path,
            use_chunking=use_parallelism,
            chunk_size=chunk_size if use_parallelism else None,
        )

        try:
            job_id = await self.backend.submit_sync(request)
        except BackendError as e:
            self.logger.error(f"Error starting sync for {source_path}: {e}")
            self.notifications.error(f"Error starting sync: {e.message}", channel=SYNC_CHANNEL)
            return None

        self.logger.info(f"Started sync job {job_id}")
        self.registry.register(job_id)
        self.session.current_job_id = job_id
        self.session.close_destination()
        self.monitor.start(job_id, on_update)
        return job_id

    def monitor_handle(self, job_id: str) -> Optional[PollHandle]:
        entry = self.registry.get(job_id)
        if entry is not None and isinstance(entry.poll_handle, PollHandle):
            return entry.poll_handle
        return None

    def close_progress(self) -> None:
        """Stop watching the current job (the job itself keeps running)."""
        if self.session.current_job_id:
            self.monitor.stop(self.session.current_job_id)
        self.session.current_job_id = None

    async def delete_job(self, job_id: str) -> bool:
        """Delete a job record and its log on the server."""
        self.monitor.stop(job_id)
        try:
            await self.backend.delete_job(job_id)
        except BackendError as e:
            self.logger.error(f"Error deleting job {job_id}: {e}")
            self.notifications.error(f"Error deleting job: {e.message}", channel=JOBS_CHANNEL)
            return False

        self.registry.remove(job_id)
        if self.session.current_job_id == job_id:
            self.session.current_job_id = None
        self.notifications.success("Job deleted successfully", channel=JOBS_CHANNEL)
        return True

    async def fetch_log(self, job_id: str) -> Optional[str]:
        """Return a job's log, or None when it is unavailable."""
        try:
            return await self.backend.get_job_log(job_id)
        except ResourceNotFoundError:
            self.logger.info(f"No log available for job {job_id}")
            self.notifications.info(f"No log available for job {job_id}", channel=JOBS_CHANNEL)
            return None
        except BackendError as e:
            self.logger.error(f"Error loading log for job {job_id}: {e}")
            self.notifications.error(f"Error loading log: {e.message}", channel=JOBS_CHANNEL)
            return None
