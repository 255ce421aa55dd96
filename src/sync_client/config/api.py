"""API configuration for the sync backend."""

import os
from typing import Optional


class APIConfig:
    """API configuration and settings."""

    # Backend endpoint
    BASE_URL = os.environ.get("SYNC_CLIENT_BASE_URL", "http://127.0.0.1:8080")

    # Request settings
    MAX_RETRIES = 3
    REQUEST_TIMEOUT = 30

    # Retry settings
    RETRY_BASE_DELAY = 2
    RETRY_MAX_DELAY = 10

    # Routes
    CONFIGS_PATH = "/api/configs"
    CONFIGS_PERSIST_PATH = "/api/configs/persist"
    LOCAL_FILES_PATH = "/api/files/local"
    REMOTE_FILES_PATH = "/api/files/remote"
    SYNC_PATH = "/api/sync"

    @classmethod
    def get_url(cls, route: str, base_url: Optional[str] = None) -> str:
        """Get the full URL for a backend route."""
        return f"{(base_url or cls.BASE_URL).rstrip('/')}{route}"

    @classmethod
    def get_job_route(cls, job_id: str) -> str:
        """Get the route of a single sync job."""
        return f"{cls.SYNC_PATH}/{job_id}"

    @classmethod
    def get_job_log_route(cls, job_id: str) -> str:
        """Get the route of a sync job's log."""
        return f"{cls.SYNC_PATH}/{job_id}/log"

    @classmethod
    def get_config_route(cls, name: str) -> str:
        """Get the route of a single remote configuration."""
        return f"{cls.CONFIGS_PATH}/{name}"
