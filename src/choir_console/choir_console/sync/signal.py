from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional

from ..core.constants import STORAGE_PREFIX, SYNC_CHANNEL_KEY
from ..core.exceptions import StorageError
from ..storage.repository import KeyValueStore

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class SyncSignal:
    """Content-free "store changed" broadcast between instances sharing a store.

    `announce()` stamps the channel key with a fresh token; other instances
    notice the new token on `poll()` and call their listeners, which are
    expected to reload from the persistence gateway. Advisory only.
    """

    def __init__(self, store: KeyValueStore, *, channel_key: str = STORAGE_PREFIX + SYNC_CHANNEL_KEY):
        self._store = store
        self._channel_key = channel_key
        self._listeners: list[Listener] = []
        self._last_seen: Optional[str] = self._read_token()

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def announce(self) -> None:
        token = uuid.uuid4().hex
        try:
            self._store.set(self._channel_key, token)
        except StorageError as e:
            logger.warning("sync announce failed: %s", e)
            return
        self._last_seen = token

    def poll(self) -> bool:
        """Notify listeners if another instance announced since the last poll."""
        token = self._read_token()
        if token is None or token == self._last_seen:
            return False

        self._last_seen = token
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("sync listener failed")
        return True

    def _read_token(self) -> Optional[str]:
        try:
            return self._store.get(self._channel_key)
        except StorageError as e:
            logger.warning("sync poll failed: %s", e)
            return None
