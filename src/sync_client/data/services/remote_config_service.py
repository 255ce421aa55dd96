"""Service for the remote configurations listed in the remote selector."""

import logging
from typing import Dict, List, Optional

from sync_client.api.backend_client import BackendClient
from sync_client.api.error_handling import BackendError
from sync_client.data.models import RemoteConfig
from sync_client.ui.notifications import NotificationCenter
from sync_client.ui.remote_browser import RemoteBrowserController
from sync_client.ui.state.session_state import SessionContext

CONFIG_CHANNEL = "config"


class RemoteConfigService:
    """Keeps the session's remote list in step with the backend."""

    def __init__(
        self,
        session: SessionContext,
        backend: BackendClient,
        browser: Optional[RemoteBrowserController] = None,
        notifications: Optional[NotificationCenter] = None,
        logger_obj: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.backend = backend
        self.browser = browser
        self.notifications = notifications or NotificationCenter()
        self.logger = logger_obj or logging.getLogger(__name__)

    async def refresh(self) -> List[RemoteConfig]:
        try:
            configs = await self.backend.list_configs()
        except BackendError as e:
            self.logger.error(f"Error loading configurations: {e}")
            self.notifications.error(f"Error loading configurations: {e.message}", channel=CONFIG_CHANNEL)
            return self.session.remote_configs

        self.session.remote_configs = configs
        return configs

    async def create(
        self,
        name: str,
        config_type: str,
        url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        additional_fields: Optional[Dict[str, str]] = None,
    ) -> bool:
        payload = {
            "name": name,
            "config_type": config_type,
            "url": url or None,
            "username": username or None,
            "password": password or None,
            "additional_fields": additional_fields or None,
        }
        try:
            await self.backend.create_config(payload)
        except BackendError as e:
            self.logger.error(f"Error saving configuration {name}: {e}")
            self.notifications.error(f"Error: {e.message}", channel=CONFIG_CHANNEL)
            return False

        self.notifications.success("Configuration saved successfully!", channel=CONFIG_CHANNEL)
        await self.refresh()
        return True

    async def delete(self, name: str) -> bool:
        """Delete a remote; its cached listings and remembered selection go with it."""
        try:
            await self.backend.delete_config(name)
        except BackendError as e:
            self.logger.error(f"Error deleting configuration {name}: {e}")
            self.notifications.error(f"Error deleting configuration: {e.message}", channel=CONFIG_CHANNEL)
            return False

        if self.browser is not None:
            self.browser.forget_remote(name)
        self.notifications.success("Configuration deleted successfully!", channel=CONFIG_CHANNEL)
        await self.refresh()
        return True

    async def persist(self) -> bool:
        """Ask the backend to write in-memory configurations to its config file."""
        try:
            await self.backend.persist_configs()
        except BackendError as e:
            self.logger.error(f"Error persisting configurations: {e}")
            self.notifications.error(f"Error saving configurations: {e.message}", channel=CONFIG_CHANNEL)
            return False

        self.notifications.success("Configurations saved to file successfully!", channel=CONFIG_CHANNEL)
        return True
