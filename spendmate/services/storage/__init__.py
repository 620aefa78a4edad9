"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
The app uses a JSON file; tests use memory.
"""

from spendmate.services.storage.interface import (
    DuplicateError,
    KeyValueStorageInterface,
    NotFoundError,
    StorageError,
)
from spendmate.services.storage.json_file import JsonFileStorage
from spendmate.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "KeyValueStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
