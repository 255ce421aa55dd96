"""Explicit session context shared by the browser controllers and job services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from sync_client.data.models import RemoteConfig
from sync_client.utils.path_utils import ROOT


@dataclass
class NavigationState:
    """Where the remote browser is and which folder is chosen as destination."""

    remote_id: str = ""
    current_path: str = ROOT
    selected_path: str = ROOT

    def reset(self) -> None:
        self.remote_id = ""
        self.current_path = ROOT
        self.selected_path = ROOT

    def refers_to(self, remote_id: str, path: str) -> bool:
        return self.remote_id == remote_id and self.current_path == path


@dataclass
class SessionContext:
    """Per-user session state passed to every component that needs it."""

    navigation: NavigationState = field(default_factory=NavigationState)
    remote_configs: list[RemoteConfig] = field(default_factory=list)
    local_path: str = ROOT
    sync_source: str = ""
    current_job_id: Optional[str] = None

    def remote_names(self) -> list[str]:
        return [config.name for config in self.remote_configs]

    def close_destination(self) -> None:
        """End the destination-choosing session."""
        self.navigation.reset()
        self.sync_source = ""
