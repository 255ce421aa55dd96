"""Client-side persistence backends."""

from .kv_store import InMemoryStore, JsonFileStore, KeyValueStore

__all__ = ["KeyValueStore", "InMemoryStore", "JsonFileStore"]
