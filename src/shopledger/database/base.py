"""Abstract key-value slot interface."""

from abc import ABC, abstractmethod
from typing import Optional


class DocumentSlot(ABC):
    """Abstract persistent key-value slot for serialized documents."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the backing storage."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the backing storage."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage schema (create tables)."""
        pass

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the raw payload stored under key, or None if absent."""
        pass

    @abstractmethod
    def write(self, key: str, payload: str, schema_version: int) -> None:
        """Store payload under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the value stored under key. Missing keys are ignored."""
        pass
