from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one member's presence at one event.

    `date` duplicates the parent event's date at write time so the
    time-bucketed queries need no join against events.
    """

    record_id: str
    event_id: str
    member_id: str
    present: bool
    date: str
