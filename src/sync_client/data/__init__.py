"""Data layer: models, listing cache, persistence and services."""

from .directory_cache import CacheRecord, DirectoryCache
from .models import DirectoryEntry, JobState, JobStatus, RemoteConfig, SyncRequest

__all__ = [
    "CacheRecord",
    "DirectoryCache",
    "DirectoryEntry",
    "JobState",
    "JobStatus",
    "RemoteConfig",
    "SyncRequest",
]
