"""Service layer for job tracking and remote configuration."""

from .job_metrics import JobMetrics, derive_metrics
from .job_monitor import JobListPoller, JobMonitor, PollHandle
from .job_registry import JobRegistry, JobRegistryEntry
from .remote_config_service import RemoteConfigService
from .sync_job_service import SyncJobService, suggest_chunk_size

__all__ = [
    "JobListPoller",
    "JobMetrics",
    "JobMonitor",
    "JobRegistry",
    "JobRegistryEntry",
    "PollHandle",
    "RemoteConfigService",
    "SyncJobService",
    "derive_metrics",
    "suggest_chunk_size",
]
