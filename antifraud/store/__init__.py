"""History stores for evaluated transactions."""

from antifraud.store.base import HistoryStore
from antifraud.store.memory import InMemoryHistoryStore

__all__ = ["HistoryStore", "InMemoryHistoryStore"]
