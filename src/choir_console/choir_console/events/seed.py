from __future__ import annotations

from datetime import date

from ..common.datetime_utils import iter_days
from ..core.constants import SERIES_END, SERIES_START
from .model import Event

_SATURDAY = 5
_SUNDAY = 6


def seed_events(start: date = SERIES_START, end: date = SERIES_END) -> list[Event]:
    """One general rehearsal per Saturday and Sunday in the season."""
    events: list[Event] = []
    for day in iter_days(start, end):
        weekday = day.weekday()
        if weekday not in (_SATURDAY, _SUNDAY):
            continue
        date_str = day.isoformat()
        events.append(
            Event(
                event_id=f"auto-{date_str}",
                name="Ensayo General Sabatino" if weekday == _SATURDAY else "Ensayo General Dominical",
                date=date_str,
                time="10:00",
                location="Sede Principal",
            )
        )
    return events
