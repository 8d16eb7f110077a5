from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_STORAGE_QUOTA_BYTES
from ..core.exceptions import StorageQuotaExceeded
from .repository import KeyValueStore


def entry_size(key: str, value: str) -> int:
    return len(key) + len(value)


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store with a total-size quota.

    Several gateways sharing one instance behave like tabs sharing one
    browser profile.
    """

    def __init__(self, *, quota_bytes: int = DEFAULT_STORAGE_QUOTA_BYTES):
        self._data: dict[str, str] = {}
        self._quota = int(quota_bytes)

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        used = sum(entry_size(k, v) for k, v in self._data.items() if k != key)
        if used + entry_size(key, value) > self._quota:
            raise StorageQuotaExceeded(f"Storing {key!r} would exceed {self._quota} bytes")
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Sequence[str]:
        return list(self._data)
