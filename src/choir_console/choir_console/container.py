from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .core.constants import DEFAULT_ATTENDANCE_DAYS, DEFAULT_STORAGE_QUOTA_BYTES, STORAGE_PREFIX, SYNC_CHANNEL_KEY
from .database.bootstrap import apply_schema
from .database.connection import DatabaseConnection, DBConfig
from .remote.mirror import MySQLSiteMirror, SiteMirror
from .state.app_state import AppState
from .storage.gateway import PersistenceGateway
from .storage.memory_store import InMemoryKeyValueStore
from .storage.mysql_store import MySQLKeyValueStore
from .storage.repository import KeyValueStore
from .sync.signal import SyncSignal


@dataclass(frozen=True)
class Container:
    store: KeyValueStore
    gateway: PersistenceGateway
    sync: SyncSignal
    mirror: Optional[SiteMirror]
    state: AppState


def build_container(settings: Any, *, store: Optional[KeyValueStore] = None) -> Container:
    """Wire store, gateway, sync signal and session state from a settings module."""
    prefix = getattr(settings, "STORAGE_PREFIX", STORAGE_PREFIX)
    quota = int(getattr(settings, "STORAGE_QUOTA_BYTES", DEFAULT_STORAGE_QUOTA_BYTES))
    backend = getattr(settings, "STORAGE_BACKEND", "memory")
    mirror_enabled = bool(getattr(settings, "REMOTE_MIRROR_ENABLED", False))

    conn = None
    if backend == "mysql" or mirror_enabled:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(conn)

    if store is None:
        if backend == "mysql":
            store = MySQLKeyValueStore(conn, quota_bytes=quota)
        elif backend == "memory":
            store = InMemoryKeyValueStore(quota_bytes=quota)
        else:
            raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")

    gateway = PersistenceGateway(store, prefix=prefix)
    sync = SyncSignal(store, channel_key=prefix + SYNC_CHANNEL_KEY)
    mirror = MySQLSiteMirror(conn) if mirror_enabled else None

    state = AppState.load(
        gateway,
        sync=sync,
        mirror=mirror,
        attendance_days=getattr(settings, "ATTENDANCE_DAYS", DEFAULT_ATTENDANCE_DAYS),
        autosave_delay=float(getattr(settings, "AUTOSAVE_DELAY", 0.0)),
    )

    return Container(store=store, gateway=gateway, sync=sync, mirror=mirror, state=state)
