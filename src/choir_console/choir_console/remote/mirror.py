from __future__ import annotations

import logging
from typing import Optional, Protocol

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from ..sites.model import Site

logger = logging.getLogger(__name__)


class SiteMirror(Protocol):
    """Best-effort remote copy of site rows (upsert by primary key)."""

    def upsert_site(self, site: Site) -> None:
        raise NotImplementedError


class MySQLSiteMirror(SiteMirror):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_site(self, site: Site) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO choirs(id, name, image_url)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE name=VALUES(name), image_url=VALUES(image_url)
                """,
                (site.site_id, site.name, site.image_url),
            )


def push_site(mirror: Optional[SiteMirror], site: Site) -> bool:
    """Push after the local commit; a failing mirror only logs."""
    if mirror is None:
        return False
    try:
        mirror.upsert_site(site)
    except Exception:
        logger.exception("remote mirror upsert for site %s failed", site.site_id)
        return False
    return True
