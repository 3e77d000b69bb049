from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[Any]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Any) -> None:  # pragma: no cover - interface
        raise NotImplementedError
