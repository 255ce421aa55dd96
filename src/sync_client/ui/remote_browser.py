"""Remote directory browser with stale-while-revalidate listing cache."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from sync_client.api.backend_client import BackendClient
from sync_client.api.error_handling import BackendError
from sync_client.config.client import ClientConfig
from sync_client.data.directory_cache import CacheKey, DirectoryCache
from sync_client.data.models import DirectoryEntry, RemoteConfig
from sync_client.data.storage.kv_store import KeyValueStore
from sync_client.ui.notifications import NotificationCenter
from sync_client.ui.state.session_state import SessionContext
from sync_client.utils import path_utils

NOTIFICATION_CHANNEL = "sync"


class ListingOutcome(str, Enum):
    """How a navigation request was served."""

    FRESH_HIT = "fresh_hit"
    STALE_HIT = "stale_hit"
    LOADED = "loaded"
    FAILED = "failed"
    NO_REMOTE = "no_remote"


@dataclass(frozen=True)
class RenderedListing:
    """What the remote browser currently shows."""

    remote_id: str
    path: str
    entries: Tuple[DirectoryEntry, ...] = ()
    stale: bool = False
    loading: bool = False
    error: Optional[str] = None


RenderCallback = Callable[[RenderedListing], None]


class RemoteBrowserController:
    """
    Orchestrates navigation of a remote tree.

    Navigation to ``(remote, path)`` is served from the directory cache:
    a fresh record renders with no network call, a stale record renders
    immediately while a background fetch revalidates it, and a miss shows a
    loading state while a blocking fetch runs.

    A completed fetch always updates the cache. It only updates the rendered
    listing when the navigation state still refers to the same key and the
    fetch is the latest one issued for that key, so a late response can never
    overwrite what the user is looking at now.
    """

    def __init__(
        self,
        session: SessionContext,
        cache: DirectoryCache,
        backend: BackendClient,
        notifications: Optional[NotificationCenter] = None,
        store: Optional[KeyValueStore] = None,
        on_render: Optional[RenderCallback] = None,
        logger_obj: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.cache = cache
        self.backend = backend
        self.notifications = notifications or NotificationCenter()
        self.store = store
        self.on_render = on_render
        self.logger = logger_obj or logging.getLogger(__name__)

        self.rendered: Optional[RenderedListing] = None
        self._generation = 0
        self._latest_fetch: Dict[CacheKey, int] = {}
        self._background: Set[asyncio.Task] = set()

    @property
    def navigation(self):
        return self.session.navigation

    async def navigate(self, path: str) -> ListingOutcome:
        """Show the listing of ``path`` under the selected remote."""
        remote_id = self.navigation.remote_id
        if not remote_id:
            self.logger.debug("Ignoring navigation without a selected remote")
            return ListingOutcome.NO_REMOTE

        path = path_utils.normalize_path(path)
        self.navigation.current_path = path
        self.navigation.selected_path = path
        self._remember(ClientConfig.LAST_REMOTE_PATH_KEY, path)

        record = self.cache.peek(remote_id, path)
        if record is not None and self.cache.is_fresh(record):
            self._render(RenderedListing(remote_id, path, record.entries))
            return ListingOutcome.FRESH_HIT

        generation = self._issue_fetch((remote_id, path))

        if record is not None:
            self._render(RenderedListing(remote_id, path, record.entries, stale=True))
            self._spawn(self._fetch(remote_id, path, generation))
            return ListingOutcome.STALE_HIT

        self._render(RenderedListing(remote_id, path, loading=True))
        loaded = await self._fetch(remote_id, path, generation)
        return ListingOutcome.LOADED if loaded else ListingOutcome.FAILED

    async def navigate_into(self, entry: DirectoryEntry) -> Optional[ListingOutcome]:
        """Open a folder (double activation). Files are not navigable."""
        if not entry.is_directory:
            return None
        return await self.navigate(entry.path)

    async def navigate_up(self) -> ListingOutcome:
        return await self.navigate(path_utils.parent_of(self.navigation.current_path))

    async def navigate_to_breadcrumb(self, crumb_path: str) -> ListingOutcome:
        return await self.navigate(crumb_path)

    def select_folder(self, path: str) -> None:
        """Mark a folder as the sync destination without opening it."""
        self.navigation.selected_path = path_utils.normalize_path(path)

    async def refresh(self) -> ListingOutcome:
        """Refetch the current listing regardless of freshness."""
        remote_id = self.navigation.remote_id
        if not remote_id:
            return ListingOutcome.NO_REMOTE
        path = self.navigation.current_path
        generation = self._issue_fetch((remote_id, path))
        loaded = await self._fetch(remote_id, path, generation)
        return ListingOutcome.LOADED if loaded else ListingOutcome.FAILED

    async def select_remote(self, remote_id: str, path: str = path_utils.ROOT) -> ListingOutcome:
        """Switch to another remote and load ``path`` (root by default)."""
        self.navigation.remote_id = remote_id
        self._remember(ClientConfig.LAST_REMOTE_KEY, remote_id)
        return await self.navigate(path)

    async def initialize_remote_selection(
        self, configs: Optional[Sequence[RemoteConfig]] = None
    ) -> Optional[ListingOutcome]:
        """
        Pick the initial remote when the destination browser opens.

        A single configured remote is loaded at ``/``. With several remotes
        the remembered remote and path are restored; a remembered remote that
        is no longer configured is dropped silently.
        """
        configs = list(configs) if configs is not None else self.session.remote_configs
        names = [config.name for config in configs]

        if len(names) == 1:
            return await self.select_remote(names[0])

        remembered = self.store.get(ClientConfig.LAST_REMOTE_KEY) if self.store else None
        if len(names) > 1 and remembered:
            if remembered in names:
                remembered_path = self.store.get(ClientConfig.LAST_REMOTE_PATH_KEY) or path_utils.ROOT
                self.logger.debug(f"Restoring remembered remote {remembered}:{remembered_path}")
                return await self.select_remote(remembered, remembered_path)
            self._forget_selection()

        return None

    def forget_remote(self, remote_id: str) -> None:
        """Drop everything known about a remote whose configuration was deleted."""
        self.cache.invalidate_all(remote_id)
        if self.store and self.store.get(ClientConfig.LAST_REMOTE_KEY) == remote_id:
            self._forget_selection()
        if self.navigation.remote_id == remote_id:
            self.navigation.reset()
            self.rendered = None

    def close_session(self) -> None:
        """Reset navigation when the destination chooser closes."""
        self.session.close_destination()
        self.rendered = None

    def breadcrumbs(self) -> List[Tuple[str, str]]:
        return path_utils.breadcrumbs(self.navigation.current_path)

    async def wait_idle(self) -> None:
        """Wait for all background revalidations to finish."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def _issue_fetch(self, key: CacheKey) -> int:
        self._generation += 1
        self._latest_fetch[key] = self._generation
        return self._generation

    def _is_current(self, remote_id: str, path: str, generation: int) -> bool:
        return (
            self.navigation.refers_to(remote_id, path)
            and self._latest_fetch.get((remote_id, path)) == generation
        )

    async def _fetch(self, remote_id: str, path: str, generation: int) -> bool:
        try:
            entries = await self.backend.list_remote_files(remote_id, path)
        except BackendError as e:
            self.logger.error(f"Error loading {remote_id}:{path}: {e}")
            self.notifications.error(f"Error loading remote files: {e.message}", channel=NOTIFICATION_CHANNEL)
            if self._is_current(remote_id, path, generation) and self.rendered is not None and self.rendered.loading:
                self._render(RenderedListing(remote_id, path, error=e.message))
            return False

        directories = [entry for entry in entries if entry.is_directory]
        record = self.cache.put(remote_id, path, directories)

        if self._is_current(remote_id, path, generation):
            self._render(RenderedListing(remote_id, path, record.entries))
        else:
            self.logger.debug(f"Listing for {remote_id}:{path} arrived after navigation moved on; cache updated only")
        return True

    def _spawn(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exception = task.exception()
        if exception is not None:
            self.logger.error(f"Background revalidation crashed: {exception}", exc_info=exception)

    def _render(self, listing: RenderedListing) -> None:
        self.rendered = listing
        if self.on_render:
            self.on_render(listing)

    def _remember(self, key: str, value: str) -> None:
        if self.store is not None:
            self.store.set(key, value)

    def _forget_selection(self) -> None:
        if self.store is not None:
            self.store.remove(ClientConfig.LAST_REMOTE_KEY)
            self.store.remove(ClientConfig.LAST_REMOTE_PATH_KEY)
