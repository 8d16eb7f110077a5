from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import DEFAULT_STORAGE_QUOTA_BYTES
from ..core.exceptions import StorageQuotaExceeded, StoreUnavailable
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .memory_store import entry_size
from .repository import KeyValueStore

_QUOTA_ERRNOS = {errorcode.ER_DATA_TOO_LONG, errorcode.ER_NET_PACKET_TOO_LARGE}


class MySQLKeyValueStore(KeyValueStore):
    """Key/value store backed by the `app_storage` table."""

    def __init__(self, conn_factory: DatabaseConnection, *, quota_bytes: int = DEFAULT_STORAGE_QUOTA_BYTES):
        self._conn_factory = conn_factory
        self._quota = int(quota_bytes)

    def get(self, key: str) -> Optional[str]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT storage_value FROM app_storage WHERE storage_key=%s", (key,))
                row = fetchone(cur)
        except mysql.connector.Error as e:
            raise StoreUnavailable(str(e)) from e
        return row["storage_value"] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT COALESCE(SUM(CHAR_LENGTH(storage_key) + CHAR_LENGTH(storage_value)), 0) AS used
                    FROM app_storage
                    WHERE storage_key<>%s
                    """,
                    (key,),
                )
                used = int(fetchone(cur)["used"])
                if used + entry_size(key, value) > self._quota:
                    raise StorageQuotaExceeded(f"Storing {key!r} would exceed {self._quota} bytes")

                cur.execute(
                    """
                    INSERT INTO app_storage(storage_key, storage_value)
                    VALUES(%s,%s)
                    ON DUPLICATE KEY UPDATE storage_value=VALUES(storage_value)
                    """,
                    (key, value),
                )
        except mysql.connector.Error as e:
            if e.errno in _QUOTA_ERRNOS:
                raise StorageQuotaExceeded(str(e)) from e
            raise StoreUnavailable(str(e)) from e

    def delete(self, key: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM app_storage WHERE storage_key=%s", (key,))
        except mysql.connector.Error as e:
            raise StoreUnavailable(str(e)) from e

    def keys(self) -> Sequence[str]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT storage_key FROM app_storage ORDER BY storage_key")
                return [r["storage_key"] for r in fetchall(cur)]
        except mysql.connector.Error as e:
            raise StoreUnavailable(str(e)) from e
