from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import Gender, VoicePart
from ..sites.model import Site


@dataclass(frozen=True)
class SiteRank:
    site: Site
    ratio: int
    has_reports: bool


@dataclass(frozen=True)
class SiteCount:
    site_id: str
    name: str
    count: int


@dataclass(frozen=True)
class EventBreakdown:
    """Who showed up to one event, by voice, gender and site."""

    event_id: str
    total: int
    voices: dict[VoicePart, int]
    genders: dict[Gender, int]
    by_site: list[SiteCount] = field(default_factory=list)


@dataclass(frozen=True)
class SeriesPoint:
    date: date
    ratio: int
    label: str
    full_label: str


@dataclass(frozen=True)
class HistoryEntry:
    record_id: str
    date: str
    event_name: str
    location: str
    present: bool


@dataclass(frozen=True)
class MemberStats:
    member_id: str
    present: int
    absent: int
    ratio: int
    streak: int
    needs_follow_up: bool
    history: list[HistoryEntry] = field(default_factory=list)


@dataclass(frozen=True)
class SiteProfile:
    site_id: str
    total_members: int
    ratio: int
    voices: dict[VoicePart, int]


@dataclass(frozen=True)
class DashboardSummary:
    presence: int
    member_count: int
    site_count: int


@dataclass(frozen=True)
class RawRow:
    """Denormalized read-model of one attendance record."""

    record_id: str
    member_id: Optional[str]
    date: str
    site: str
    name: str
    gender: str
    voice: str
    status: str
    location: str
    director: str

    def searchable(self) -> dict[str, str]:
        return {
            "date": self.date,
            "choir": self.site,
            "name": self.name,
            "gender": self.gender,
            "voice": self.voice,
            "status": self.status,
            "location": self.location,
            "director": self.director,
        }
