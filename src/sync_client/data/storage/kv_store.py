"""Key-value persistence for client state (remembered selection, cached listings)."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from sync_client.config.settings import Settings


class KeyValueStore(ABC):
    """Minimal get/set/remove persistence capability."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass


class InMemoryStore(KeyValueStore):
    """Store that lives only as long as the process."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON document on disk."""

    def __init__(self, state_file: Optional[Path] = None, logger_obj: Optional[logging.Logger] = None):
        self.state_file = Settings.get_state_file(state_file)
        self.logger = logger_obj or logging.getLogger(__name__)
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        """Load state from the JSON file."""
        if not self.state_file.exists():
            return {}

        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            self.logger.warning(f"Could not decode state file {self.state_file}. Starting fresh.")
            return {}
        except OSError as e:
            self.logger.warning(f"Error loading state file: {e}. Starting fresh.")
            return {}

        if not isinstance(data, dict):
            self.logger.warning(f"Unexpected content in state file {self.state_file}. Starting fresh.")
            return {}
        return data

    def _save(self) -> None:
        """Write current state to the JSON file."""
        try:
            self.state_file.parent.mkdir(parents=True, exist_ok=True)
            tmp_file = self.state_file.with_suffix(self.state_file.suffix + ".tmp")
            tmp_file.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
            tmp_file.replace(self.state_file)
            self.logger.debug(f"State saved with {len(self._data)} keys")
        except OSError as e:
            self.logger.warning(f"Could not save state file: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._save()

    def __contains__(self, key: str) -> bool:
        return key in self._data
