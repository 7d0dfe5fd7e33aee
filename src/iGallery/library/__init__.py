"""Durable album collection and helpers that feed it."""

from .backends import JsonFileBackend, MemoryBackend, StorageBackend
from .store import AlbumStore

__all__ = ["AlbumStore", "JsonFileBackend", "MemoryBackend", "StorageBackend"]
