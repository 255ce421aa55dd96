"""Tests for the local tree browser."""

from unittest.mock import Mock

import pytest

from sync_client.api.error_handling import BackendError
from sync_client.ui.local_browser import LocalBrowser
from sync_client.ui.notifications import AlertLevel

from conftest import make_entry


@pytest.fixture
def local_browser(session, backend, notifications):
    session.local_path = "/mnt/home"
    return LocalBrowser(session, backend, notifications, logger_obj=Mock())


class TestLocalBrowser:
    """Test local navigation."""

    @pytest.mark.asyncio
    async def test_defaults_to_session_path(self, local_browser, backend):
        backend.list_local_files.return_value = []

        await local_browser.navigate()

        backend.list_local_files.assert_awaited_once_with("/mnt/home")

    @pytest.mark.asyncio
    async def test_folders_first_then_name(self, local_browser, backend):
        backend.list_local_files.return_value = [
            make_entry("b.txt", is_directory=False),
            make_entry("z-dir"),
            make_entry("a.txt", is_directory=False),
            make_entry("c-dir"),
        ]

        entries = await local_browser.navigate("/")

        assert [e.name for e in entries] == ["c-dir", "z-dir", "a.txt", "b.txt"]

    @pytest.mark.asyncio
    async def test_navigate_up(self, local_browser, backend, session):
        backend.list_local_files.return_value = []

        await local_browser.navigate_up()

        assert session.local_path == "/mnt"
        assert local_browser.breadcrumbs() == [("Root", "/"), ("mnt", "/mnt")]

    @pytest.mark.asyncio
    async def test_error_is_notified(self, local_browser, backend, notifications):
        backend.list_local_files.side_effect = BackendError("Permission denied")

        assert await local_browser.navigate("/root") is None

        error = notifications.by_level(AlertLevel.ERROR)[0]
        assert error.channel == "files"
        assert "Permission denied" in error.message
