from __future__ import annotations

from ..core.enums import SiteStatus
from .model import Site

SEED_SITES: tuple[Site, ...] = (
    Site("1", "Bicentenario", "BI", 95.5, 8, SiteStatus.ACTIVE),
    Site("2", "Bucerias", "BU", 92.1, 5, SiteStatus.ACTIVE),
    Site("3", "El Guamuchil", "EG", 88.4, 3, SiteStatus.UNDER_REVIEW),
    Site("4", "El Porvenir", "EP", 94.2, 10, SiteStatus.ACTIVE),
    Site("5", "La Peñita", "LP", 85.0, 2, SiteStatus.UNDER_REVIEW),
    Site("6", "Mezcales", "ME", 97.8, 15, SiteStatus.ACTIVE),
    Site("7", "Mezcalitos", "MT", 91.0, 4, SiteStatus.ACTIVE),
    Site("8", "Monte Sinai", "MS", 93.4, 7, SiteStatus.ACTIVE),
    Site("9", "Punta de Mita", "PM", 89.9, 6, SiteStatus.ACTIVE),
    Site("10", "San Ignacio", "SI", 96.2, 12, SiteStatus.ACTIVE),
    Site("11", "San Jose", "SJ", 94.5, 9, SiteStatus.ACTIVE),
)


def seed_sites() -> list[Site]:
    return list(SEED_SITES)
