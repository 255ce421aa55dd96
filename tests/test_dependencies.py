"""Tests for the dependency container and logging setup."""

import logging
import uuid
from logging.handlers import RotatingFileHandler
from unittest.mock import AsyncMock, Mock

import pytest

from sync_client.core.dependencies import DependencyContainer
from sync_client.data.storage.kv_store import InMemoryStore, JsonFileStore
from sync_client.utils.logger_setup import setup_logging


class TestDependencyContainer:
    """Test container wiring."""

    def test_non_persistent_uses_memory_store(self):
        container = DependencyContainer(persistent=False, backend=Mock(), configure_logging=False)
        assert isinstance(container.store, InMemoryStore)

    def test_persistent_uses_state_file(self, tmp_path):
        state_file = tmp_path / "state.json"
        container = DependencyContainer(state_file=state_file, backend=Mock(), configure_logging=False)

        assert isinstance(container.store, JsonFileStore)
        assert container.store.state_file == state_file
        assert container.cache.store is container.store

    def test_services_share_session(self):
        container = DependencyContainer(persistent=False, backend=Mock(), configure_logging=False)

        assert container.remote_browser is container.remote_browser
        assert container.remote_browser.session is container.session
        assert container.sync_jobs.monitor is container.job_monitor
        assert container.remote_configs.browser is container.remote_browser
        assert container.local_browser.session is container.session

    @pytest.mark.asyncio
    async def test_aclose(self):
        backend = Mock()
        backend.close = AsyncMock()
        container = DependencyContainer(persistent=False, backend=backend, configure_logging=False)
        container.job_monitor

        await container.aclose()

        backend.close.assert_awaited_once()


class TestSetupLogging:
    """Test logger configuration."""

    def test_file_and_console_handlers(self, tmp_path):
        name = f"sync_client_test_{uuid.uuid4().hex}"
        logger = setup_logging(name, log_level=logging.DEBUG, log_dir=tmp_path)

        assert logger.level == logging.DEBUG
        assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
        assert (tmp_path / f"{name}.log").exists()

        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path):
        name = f"sync_client_test_{uuid.uuid4().hex}"
        first = setup_logging(name, log_dir=tmp_path, file_output=False)
        second = setup_logging(name, log_level=logging.WARNING, log_dir=tmp_path, file_output=False)

        assert first is second
        assert len(second.handlers) == 1
        assert second.level == logging.WARNING
        second.removeHandler(second.handlers[0])

    def test_no_output_gets_null_handler(self):
        logger = setup_logging(f"sync_client_test_{uuid.uuid4().hex}", console_output=False, file_output=False)
        assert isinstance(logger.handlers[0], logging.NullHandler)
