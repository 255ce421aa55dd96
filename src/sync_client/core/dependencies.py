"""Dependency injection container for the sync client."""

import logging
from pathlib import Path
from typing import Optional

from sync_client.api.backend_client import BackendClient
from sync_client.config.settings import Settings
from sync_client.data.directory_cache import DirectoryCache
from sync_client.data.services.job_monitor import JobListPoller, JobMonitor
from sync_client.data.services.job_registry import JobRegistry
from sync_client.data.services.remote_config_service import RemoteConfigService
from sync_client.data.services.sync_job_service import SyncJobService
from sync_client.data.storage.kv_store import InMemoryStore, JsonFileStore, KeyValueStore
from sync_client.ui.local_browser import LocalBrowser
from sync_client.ui.notifications import NotificationCenter
from sync_client.ui.remote_browser import RemoteBrowserController
from sync_client.ui.state.session_state import SessionContext
from sync_client.utils.logger_setup import setup_logging


class DependencyContainer:
    """
    Builds one session's worth of collaborators.

    Everything shares a single ``SessionContext`` instead of module-level
    globals; services are created lazily on first access.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        state_file: Optional[Path] = None,
        persistent: bool = True,
        store: Optional[KeyValueStore] = None,
        backend: Optional[BackendClient] = None,
        logger_name: str = "sync_client",
        log_level: int = logging.INFO,
        configure_logging: bool = True,
    ):
        if configure_logging:
            Settings.ensure_directories()
            self.logger = setup_logging(logger_name, log_level=log_level)
        else:
            self.logger = logging.getLogger(logger_name)

        if store is not None:
            self.store = store
        elif persistent:
            self.store = JsonFileStore(state_file, logger_obj=self.logger)
        else:
            self.store = InMemoryStore()

        self.session = SessionContext(local_path=Settings.DEFAULT_LOCAL_PATH)
        self.notifications = NotificationCenter(self.logger)
        self.backend = backend or BackendClient(base_url, logger_obj=self.logger)
        self.cache = DirectoryCache(store=self.store, logger_obj=self.logger)
        self.registry = JobRegistry(self.logger)

        self._remote_browser = None
        self._local_browser = None
        self._job_monitor = None
        self._sync_jobs = None
        self._remote_configs = None

    @property
    def remote_browser(self) -> RemoteBrowserController:
        if self._remote_browser is None:
            self._remote_browser = RemoteBrowserController(
                self.session, self.cache, self.backend, self.notifications, self.store, logger_obj=self.logger
            )
        return self._remote_browser

    @property
    def local_browser(self) -> LocalBrowser:
        if self._local_browser is None:
            self._local_browser = LocalBrowser(self.session, self.backend, self.notifications, logger_obj=self.logger)
        return self._local_browser

    @property
    def job_monitor(self) -> JobMonitor:
        if self._job_monitor is None:
            self._job_monitor = JobMonitor(self.backend, self.registry, logger_obj=self.logger)
        return self._job_monitor

    @property
    def sync_jobs(self) -> SyncJobService:
        if self._sync_jobs is None:
            self._sync_jobs = SyncJobService(
                self.session, self.backend, self.registry, self.job_monitor, self.notifications, self.logger
            )
        return self._sync_jobs

    @property
    def remote_configs(self) -> RemoteConfigService:
        if self._remote_configs is None:
            self._remote_configs = RemoteConfigService(
                self.session, self.backend, self.remote_browser, self.notifications, self.logger
            )
        return self._remote_configs

    def job_list_poller(self, on_update=None) -> JobListPoller:
        return JobListPoller(self.backend, on_update=on_update, logger_obj=self.logger)

    async def aclose(self) -> None:
        """Stop polling and release the HTTP session."""
        if self._job_monitor is not None:
            self._job_monitor.stop_all()
        await self.backend.close()
