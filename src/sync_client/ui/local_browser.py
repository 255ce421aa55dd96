"""Browser for the backend host's local tree (sync sources)."""

import logging
from typing import Callable, List, Optional, Tuple

from sync_client.api.backend_client import BackendClient
from sync_client.api.error_handling import BackendError
from sync_client.data.models import DirectoryEntry
from sync_client.ui.notifications import NotificationCenter
from sync_client.ui.state.session_state import SessionContext
from sync_client.utils import path_utils

NOTIFICATION_CHANNEL = "files"


class LocalBrowser:
    """Uncached listing of local directories; both files and folders are shown."""

    def __init__(
        self,
        session: SessionContext,
        backend: BackendClient,
        notifications: Optional[NotificationCenter] = None,
        on_render: Optional[Callable[[str, List[DirectoryEntry]], None]] = None,
        logger_obj: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.backend = backend
        self.notifications = notifications or NotificationCenter()
        self.on_render = on_render
        self.logger = logger_obj or logging.getLogger(__name__)
        self.entries: List[DirectoryEntry] = []

    async def navigate(self, path: Optional[str] = None) -> Optional[List[DirectoryEntry]]:
        path = path_utils.normalize_path(path or self.session.local_path)
        self.session.local_path = path

        try:
            entries = await self.backend.list_local_files(path)
        except BackendError as e:
            self.logger.error(f"Error loading local files for {path}: {e}")
            self.notifications.error(f"Error loading files: {e.message}", channel=NOTIFICATION_CHANNEL)
            return None

        # Folders first, then by name
        self.entries = sorted(entries, key=lambda entry: (not entry.is_directory, entry.name))
        if self.on_render:
            self.on_render(path, self.entries)
        return self.entries

    async def navigate_up(self) -> Optional[List[DirectoryEntry]]:
        return await self.navigate(path_utils.parent_of(self.session.local_path))

    def breadcrumbs(self) -> List[Tuple[str, str]]:
        return path_utils.breadcrumbs(self.session.local_path)
