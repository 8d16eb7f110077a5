from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Event:
    """Domain entity: a rehearsal or institutional event.

    `date` is a local YYYY-MM-DD string, `time` an HH:MM string.
    """

    event_id: str
    name: str
    date: str
    time: str
    location: str
    image_url: Optional[str] = None
    description: Optional[str] = None
