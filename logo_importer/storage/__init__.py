"""
Storage layer exports.
"""

from logo_importer.storage.base import FailureLogStore, SnapshotStore
from logo_importer.storage.json_storage import JsonCacheStore, JsonFailureLogStore

__all__ = ["FailureLogStore", "JsonCacheStore", "JsonFailureLogStore", "SnapshotStore"]
