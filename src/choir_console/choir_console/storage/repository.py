from __future__ import annotations

from typing import Optional, Protocol, Sequence


class KeyValueStore(Protocol):
    """Durable text store keyed by string.

    Implementations raise `StorageQuotaExceeded` when a write does not fit and
    `StoreUnavailable` when the backend cannot be reached.
    """

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> Sequence[str]:
        raise NotImplementedError
