from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class Storage(ABC):
    """Durable key-value storage the workspace writes through to."""

    @abstractmethod
    def load(self, key: str) -> str | None:
        """Return the stored value for key, or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        raise NotImplementedError


@dataclass
class MemoryStorage(Storage):
    _data: dict[str, str] = field(default_factory=dict)

    def load(self, key: str) -> str | None:
        return self._data.get(key)

    def save(self, key: str, value: str) -> None:
        self._data[key] = value

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)
