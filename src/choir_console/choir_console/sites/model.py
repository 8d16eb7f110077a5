from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import SiteStatus


@dataclass(frozen=True)
class Site:
    """Domain entity: a choir site (chapter).

    `attendance` and `streak` are display-only seed figures; derived ratios
    always come from the attendance ledger.
    """

    site_id: str
    name: str
    initials: str
    attendance: float
    streak: int
    status: SiteStatus
    image_url: Optional[str] = None
