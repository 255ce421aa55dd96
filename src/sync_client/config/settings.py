"""Application-wide settings and configuration."""

import os
from pathlib import Path
from typing import Optional


class Settings:
    """Centralized application settings."""

    # Project paths
    DATA_DIR = Path(os.environ.get("SYNC_CLIENT_DATA_DIR", Path.home() / ".sync_client"))
    LOGS_DIR = DATA_DIR / "logs"

    # Client-side persistent state (remembered remote, cached listings)
    DEFAULT_STATE_FILE = DATA_DIR / "client_state.json"

    # Local tree shown when no path is given
    DEFAULT_LOCAL_PATH = os.environ.get("SYNC_CLIENT_DEFAULT_PATH", "/mnt/home")

    @classmethod
    def ensure_directories(cls) -> None:
        """Ensure all required directories exist."""
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOGS_DIR.mkdir(parents=True, exist_ok=True)

    @classmethod
    def get_state_file(cls, custom_path: Optional[Path] = None) -> Path:
        """Get the persistent state file path, with optional override."""
        if custom_path:
            return custom_path
        env_path = os.environ.get("SYNC_CLIENT_STATE_FILE")
        return Path(env_path) if env_path else cls.DEFAULT_STATE_FILE
