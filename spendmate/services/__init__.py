"""
Services Package

External boundaries of the app. Currently only storage;
the AI service is wrapped by spendmate.agents.
"""

from spendmate.services.storage import (
    DuplicateError,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
    NotFoundError,
    StorageError,
)

__all__ = [
    "DuplicateError",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorageInterface",
    "NotFoundError",
    "StorageError",
]
