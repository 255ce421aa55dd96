"""Client-side timing and caching configuration."""

from typing import Tuple


class ClientConfig:
    """Configuration for the directory cache and job polling."""

    # Directory cache
    DIRECTORY_CACHE_TTL = 5 * 60  # seconds
    DIRECTORY_CACHE_STORE_KEY = "directory_cache"

    # Remembered remote selection
    LAST_REMOTE_KEY = "last_remote"
    LAST_REMOTE_PATH_KEY = "last_remote_path"

    # Polling
    JOB_POLL_INTERVAL = 1.0  # seconds
    JOB_LIST_POLL_INTERVAL = 2.0  # seconds

    # Chunk size suggestions: (name markers, chunk size, hint)
    CHUNK_SIZE_RULES: Tuple[Tuple[Tuple[str, ...], str, str], ...] = (
        (("video", ".mp4", ".avi", ".mkv"), "32M", "Video file detected: 32MB chunks recommended"),
        (("iso", ".zip", ".tar"), "64M", "Large archive detected: 64MB chunks recommended"),
    )
    DEFAULT_CHUNK_SIZE = "8M"

    # Chunk sizes accepted by the backend
    CHUNK_SIZES: Tuple[str, ...] = ("8M", "16M", "32M", "64M", "128M")

    @classmethod
    def get_chunk_sizes(cls) -> list:
        """Chunk sizes accepted by the backend."""
        return list(cls.CHUNK_SIZES)
