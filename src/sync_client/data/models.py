"""Typed contracts for backend payloads and client-side records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

# Substrings that mark a server status label as an error
ERROR_MARKERS = ("error",)


class JobState(str, Enum):
    """Lifecycle state of a transfer job as reported by the server."""

    STARTING = "Starting"
    RUNNING = "Running"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED)

    @classmethod
    def from_label(cls, label: str) -> JobState:
        """
        Map a raw status label onto a state.

        The server reports spawn and I/O problems as free-form labels
        (``"Error: ..."``, ``"Failed to spawn rclone process: ..."``); any
        label outside the four known names ends the lifecycle.
        """
        for state in cls:
            if label == state.value:
                return state
        return cls.FAILED


def _parse_timestamp(value: Any) -> Optional[float]:
    """Accept epoch seconds (int/float/numeric string) or ISO-8601 text."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        pass
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).timestamp()
    except ValueError:
        return None


@dataclass(frozen=True)
class DirectoryEntry:
    """One entry of a directory listing."""

    name: str
    path: str
    is_directory: bool
    size: Optional[int] = None
    modified: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DirectoryEntry:
        size = data.get("size")
        return cls(
            name=str(data.get("name", "")),
            path=str(data.get("path", "")),
            is_directory=bool(data.get("is_dir", data.get("is_directory", False))),
            size=int(size) if size is not None else None,
            modified=data.get("modified"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "is_dir": self.is_directory,
            "size": self.size,
            "modified": self.modified,
        }


@dataclass(frozen=True)
class JobStatus:
    """Read-only snapshot of a transfer job."""

    id: str
    state: JobState
    status_label: str
    progress_percent: float = 0.0
    transferred_bytes: int = 0
    total_bytes: int = 0
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    source_name: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal or any(marker in self.status_label.lower() for marker in ERROR_MARKERS)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JobStatus:
        label = str(data.get("status", ""))
        progress = float(data.get("progress") or 0.0)
        return cls(
            id=str(data["id"]),
            state=JobState.from_label(label),
            status_label=label,
            progress_percent=min(100.0, max(0.0, progress)),
            transferred_bytes=int(data.get("transferred") or 0),
            total_bytes=int(data.get("total") or 0),
            start_time=_parse_timestamp(data.get("start_time")),
            end_time=_parse_timestamp(data.get("end_time")),
            source_name=str(data.get("source_name") or ""),
        )


@dataclass(frozen=True)
class RemoteConfig:
    """A storage remote as listed by the backend (credentials are never kept)."""

    name: str
    config_type: str
    url: Optional[str] = None
    username: Optional[str] = None
    additional_fields: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RemoteConfig:
        return cls(
            name=str(data["name"]),
            config_type=str(data.get("config_type", "")),
            url=data.get("url"),
            username=data.get("username"),
            additional_fields=dict(data.get("additional_fields") or {}),
        )


@dataclass(frozen=True)
class SyncRequest:
    """Request body for launching a transfer job."""

    source_path: str
    remote_name: str
    remote_path: str
    use_chunking: bool = False
    chunk_size: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "source_path": self.source_path,
            "remote_name": self.remote_name,
            "remote_path": self.remote_path,
            "use_chunking": self.use_chunking,
            "chunk_size": self.chunk_size if self.use_chunking else None,
        }
