"""
Abstract Storage Interface

DESIGN DECISION: Persistence is a plain string key-value store,
the same shape as browser local storage. This allows us to:
1. Keep state in a local JSON file for the app
2. Use in-memory storage for testing
3. Swap in another backend later without touching the record store

Values are opaque strings. Serializing and parsing them is the
record store's job, not the backend's.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for key-value storage.

    Any storage implementation (JSON file, memory, etc.)
    must implement these methods.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored string, or None if the key was never written

        Raises:
            StorageError: If the backend itself cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Write a value, replacing whatever was stored under the key.

        Args:
            key: The storage key
            value: The serialized value

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Remove a key. Removing a missing key is a no-op.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List every stored key."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
