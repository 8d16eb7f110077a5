"""Derived figures over the flat member/event/attendance tables.

Every function here is pure: it reads table snapshots and never mutates
them, so callers recompute on every view. Lookups that fail (a record
whose member was deleted, a member whose site is gone) drop the row from
the bucket or label it with `MISSING_LABEL`; nothing raises.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Iterator, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import iter_days, try_parse_iso_date
from ..core.constants import (
    DEFAULT_ATTENDANCE_DAYS,
    FOLLOW_UP_THRESHOLD,
    MISSING_LABEL,
    SERIES_END,
    SERIES_START,
)
from ..core.enums import Gender, Role, VoicePart
from ..events.model import Event
from ..members.model import Member
from ..sites.model import Site
from ..users.model import User
from .model import (
    DashboardSummary,
    EventBreakdown,
    HistoryEntry,
    MemberStats,
    RawRow,
    SeriesPoint,
    SiteCount,
    SiteProfile,
    SiteRank,
)

VOICE_PARTS = (VoicePart.SOPRANO, VoicePart.CONTRALTO, VoicePart.TENOR, VoicePart.BASS)

_SHORT_DAY = {5: "Sáb", 6: "Dom"}
_MONTHS = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def ratio(records: Iterable[AttendanceRecord]) -> int:
    """Integer percentage of present records; 0 for an empty set."""
    total = 0
    present = 0
    for r in records:
        total += 1
        if r.present:
            present += 1
    if total == 0:
        return 0
    return round(100 * present / total)


def members_of_site(site_id: Optional[str], members: Sequence[Member]) -> list[Member]:
    if site_id is None:
        return list(members)
    return [m for m in members if m.site_id == site_id]


def records_of_site(site_id: str, records: Sequence[AttendanceRecord], members: Sequence[Member]) -> list[AttendanceRecord]:
    member_ids = {m.member_id for m in members_of_site(site_id, members)}
    return [r for r in records if r.member_id in member_ids]


def site_attendance_ratio(site_id: str, records: Sequence[AttendanceRecord], members: Sequence[Member]) -> int:
    return ratio(records_of_site(site_id, records, members))


def global_attendance_ratio(records: Sequence[AttendanceRecord]) -> int:
    return ratio(records)


def has_submitted(site_id: str, event_id: str, records: Sequence[AttendanceRecord], members: Sequence[Member]) -> bool:
    """True once any record for the event belongs to a member of the site."""
    return any(r.event_id == event_id for r in records_of_site(site_id, records, members))


def site_ranking(sites: Sequence[Site], records: Sequence[AttendanceRecord], members: Sequence[Member]) -> list[SiteRank]:
    ranks = []
    for site in sites:
        site_records = records_of_site(site.site_id, records, members)
        ranks.append(SiteRank(site=site, ratio=ratio(site_records), has_reports=bool(site_records)))
    # sorted() is stable, ties keep seed order
    return sorted(ranks, key=lambda r: r.ratio, reverse=True)


def site_report_status(sites: Sequence[Site], records: Sequence[AttendanceRecord], members: Sequence[Member]) -> list[tuple[Site, bool]]:
    """Whether each site has sent any report, in site order."""
    return [(s, bool(records_of_site(s.site_id, records, members))) for s in sites]


def event_breakdown(
    event_id: str,
    records: Sequence[AttendanceRecord],
    members: Sequence[Member],
    sites: Sequence[Site],
) -> EventBreakdown:
    by_id = {m.member_id: m for m in members}
    present = [
        by_id[r.member_id]
        for r in records
        if r.event_id == event_id and r.present and r.member_id in by_id
    ]

    voices = {v: sum(1 for m in present if m.voice == v) for v in VOICE_PARTS}
    genders = {g: sum(1 for m in present if m.gender == g) for g in Gender}

    by_site = []
    for site in sites:
        count = sum(1 for m in present if m.site_id == site.site_id)
        if count > 0:
            by_site.append(SiteCount(site_id=site.site_id, name=site.name, count=count))

    return EventBreakdown(event_id=event_id, total=len(present), voices=voices, genders=genders, by_site=by_site)


def member_records(member_id: str, records: Sequence[AttendanceRecord]) -> list[AttendanceRecord]:
    """A member's records, most recent first."""
    mine = [r for r in records if r.member_id == member_id]
    return sorted(mine, key=lambda r: r.date, reverse=True)


def absence_streak(member_id: str, records: Sequence[AttendanceRecord]) -> int:
    """Consecutive recorded absences counted back from the most recent record."""
    streak = 0
    for r in member_records(member_id, records):
        if r.present:
            break
        streak += 1
    return streak


def needs_follow_up(member_id: str, records: Sequence[AttendanceRecord], *, threshold: int = FOLLOW_UP_THRESHOLD) -> bool:
    return absence_streak(member_id, records) >= threshold


def member_stats(
    member_id: str,
    records: Sequence[AttendanceRecord],
    events: Sequence[Event],
    *,
    threshold: int = FOLLOW_UP_THRESHOLD,
) -> MemberStats:
    mine = member_records(member_id, records)
    events_by_id = {e.event_id: e for e in events}

    history = []
    for r in mine:
        event = events_by_id.get(r.event_id)
        history.append(
            HistoryEntry(
                record_id=r.record_id,
                date=r.date or (event.date if event else MISSING_LABEL),
                event_name=event.name if event else MISSING_LABEL,
                location=event.location if event else MISSING_LABEL,
                present=r.present,
            )
        )

    present = sum(1 for r in mine if r.present)
    streak = absence_streak(member_id, mine)
    return MemberStats(
        member_id=member_id,
        present=present,
        absent=len(mine) - present,
        ratio=ratio(mine),
        streak=streak,
        needs_follow_up=streak >= threshold,
        history=history,
    )


def members_needing_follow_up(
    members: Sequence[Member],
    records: Sequence[AttendanceRecord],
    *,
    threshold: int = FOLLOW_UP_THRESHOLD,
) -> list[Member]:
    return [m for m in members if needs_follow_up(m.member_id, records, threshold=threshold)]


def _series_labels(day: date) -> tuple[str, str]:
    short = f"{_SHORT_DAY.get(day.weekday(), '')} {day.day}/{day.month}".strip()
    full = f"Fin de semana - {day.day:02d} de {_MONTHS[day.month - 1]} de {day.year}"
    return short, full


def weekend_series(
    records: Sequence[AttendanceRecord],
    *,
    start: date = SERIES_START,
    end: date = SERIES_END,
    weekdays: Iterable[int] = DEFAULT_ATTENDANCE_DAYS,
) -> Iterator[SeriesPoint]:
    """Attendance ratio per weekend day of the season, in date order.

    Records are matched on their denormalized date string. The whole range is
    walked on every call.
    """
    allowed = set(weekdays)
    for day in iter_days(start, end):
        if day.weekday() not in allowed:
            continue
        key = day.isoformat()
        short, full = _series_labels(day)
        yield SeriesPoint(date=day, ratio=ratio(r for r in records if r.date == key), label=short, full_label=full)


def site_profile(site_id: str, members: Sequence[Member], records: Sequence[AttendanceRecord]) -> SiteProfile:
    site_members = members_of_site(site_id, members)
    return SiteProfile(
        site_id=site_id,
        total_members=len(site_members),
        ratio=site_attendance_ratio(site_id, records, members),
        voices={v: sum(1 for m in site_members if m.voice == v) for v in VOICE_PARTS},
    )


def dashboard_summary(records: Sequence[AttendanceRecord], members: Sequence[Member], sites: Sequence[Site]) -> DashboardSummary:
    return DashboardSummary(presence=global_attendance_ratio(records), member_count=len(members), site_count=len(sites))


def director_for_site(site_id: Optional[str], users: Sequence[User]) -> Optional[User]:
    """The last-created director of a site; duplicates are tolerated."""
    found = None
    for u in users:
        if u.role == Role.DIRECTOR and site_id is not None and u.site_id == site_id:
            found = u
    return found


def raw_rows(
    records: Sequence[AttendanceRecord],
    members: Sequence[Member],
    sites: Sequence[Site],
    events: Sequence[Event],
    users: Sequence[User],
) -> list[RawRow]:
    members_by_id = {m.member_id: m for m in members}
    sites_by_id = {s.site_id: s for s in sites}
    events_by_id = {e.event_id: e for e in events}

    rows = []
    for r in records:
        member = members_by_id.get(r.member_id)
        event = events_by_id.get(r.event_id)
        site = sites_by_id.get(member.site_id) if member else None
        director = director_for_site(site.site_id, users) if site else None

        rows.append(
            RawRow(
                record_id=r.record_id,
                member_id=member.member_id if member else None,
                date=(event.date if event else "") or r.date or MISSING_LABEL,
                site=site.name if site else MISSING_LABEL,
                name=member.full_name if member else MISSING_LABEL,
                gender=member.gender.value if member else MISSING_LABEL,
                voice=member.voice.value if member else MISSING_LABEL,
                status="ASISTIÓ" if r.present else "FALTA",
                location=event.location if event else MISSING_LABEL,
                director=director.name if director else "S/D",
            )
        )

    return sorted(rows, key=lambda row: row.date, reverse=True)


def filter_raw_rows(rows: Sequence[RawRow], query: str = "", **columns: str) -> list[RawRow]:
    """Case-insensitive substring filter, globally and per column."""
    query = (query or "").lower()
    wanted = {k: (v or "").lower() for k, v in columns.items() if v}

    out = []
    for row in rows:
        values = row.searchable()
        if query and not any(query in v.lower() for v in values.values()):
            continue
        if any(needle not in values.get(col, "").lower() for col, needle in wanted.items()):
            continue
        out.append(row)
    return out


def events_by_date(events: Sequence[Event], *, descending: bool = False) -> list[Event]:
    return sorted(events, key=lambda e: e.date, reverse=descending)


def days_until(event: Event, today: date) -> Optional[int]:
    event_date = try_parse_iso_date(event.date)
    if event_date is None:
        return None
    return (event_date - today).days
