"""Tests for configuration classes."""

from pathlib import Path

from sync_client.config import APIConfig, ClientConfig, Settings


class TestAPIConfig:
    """Test backend route helpers."""

    def test_get_url_uses_default_base(self):
        assert APIConfig.get_url(APIConfig.SYNC_PATH) == f"{APIConfig.BASE_URL.rstrip('/')}/api/sync"

    def test_get_url_strips_trailing_slash(self):
        assert APIConfig.get_url("/api/configs", "http://backend:9000/") == "http://backend:9000/api/configs"

    def test_job_routes(self):
        assert APIConfig.get_job_route("abc") == "/api/sync/abc"
        assert APIConfig.get_job_log_route("abc") == "/api/sync/abc/log"

    def test_config_route(self):
        assert APIConfig.get_config_route("nas") == "/api/configs/nas"


class TestClientConfig:
    """Test client timing defaults."""

    def test_cache_ttl_is_five_minutes(self):
        assert ClientConfig.DIRECTORY_CACHE_TTL == 300

    def test_poll_intervals(self):
        assert ClientConfig.JOB_POLL_INTERVAL == 1.0
        assert ClientConfig.JOB_LIST_POLL_INTERVAL == 2.0

    def test_chunk_sizes(self):
        assert ClientConfig.get_chunk_sizes() == ["8M", "16M", "32M", "64M", "128M"]
        assert ClientConfig.DEFAULT_CHUNK_SIZE in ClientConfig.get_chunk_sizes()


class TestSettings:
    """Test settings path resolution."""

    def test_custom_state_file_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SYNC_CLIENT_STATE_FILE", str(tmp_path / "env.json"))
        custom = tmp_path / "custom.json"
        assert Settings.get_state_file(custom) == custom

    def test_state_file_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SYNC_CLIENT_STATE_FILE", str(tmp_path / "env.json"))
        assert Settings.get_state_file() == Path(tmp_path / "env.json")

    def test_default_state_file(self, monkeypatch):
        monkeypatch.delenv("SYNC_CLIENT_STATE_FILE", raising=False)
        assert Settings.get_state_file() == Settings.DEFAULT_STATE_FILE
