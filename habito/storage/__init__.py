"""Persistence adapters for timer snapshots."""

from .adapter import PersistenceAdapter, MemoryStore
from .json_store import JsonFileStore
from .sql_store import SqlStore

__all__ = ["PersistenceAdapter", "MemoryStore", "JsonFileStore", "SqlStore"]
