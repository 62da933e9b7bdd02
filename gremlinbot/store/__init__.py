"""External store adapters."""

from .base import KeyValueStore, join_path
from .firebase import FirebaseRealtimeStore
from .memory import MemoryStore

__all__ = ["KeyValueStore", "FirebaseRealtimeStore", "MemoryStore", "join_path"]
