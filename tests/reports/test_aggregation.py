from __future__ import annotations

from datetime import date

from src.choir_console.choir_console.attendance.model import AttendanceRecord
from src.choir_console.choir_console.core.enums import Gender, Role, SiteStatus, VoicePart
from src.choir_console.choir_console.events.model import Event
from src.choir_console.choir_console.members.model import Member
from src.choir_console.choir_console.reports import service
from src.choir_console.choir_console.sites.model import Site
from src.choir_console.choir_console.users.model import User

SITES = [
    Site("a", "Alpha", "AL", 90.0, 3, SiteStatus.ACTIVE),
    Site("b", "Beta", "BE", 80.0, 1, SiteStatus.ACTIVE),
    Site("c", "Gamma", "GA", 70.0, 0, SiteStatus.INACTIVE),
]

MEMBERS = [
    Member("m1", "Ana", "Ruiz", "", "a", VoicePart.SOPRANO, Gender.FEMALE),
    Member("m2", "Luis", "Mora", "", "a", VoicePart.BASS, Gender.MALE),
    Member("m3", "Eva", "Soto", "", "b", VoicePart.CONTRALTO, Gender.FEMALE),
    Member("m4", "Raúl", "Paz", "", "b", VoicePart.TENOR, Gender.MALE),
]


def rec(rid, member_id, present, day, event_id="e1"):
    return AttendanceRecord(record_id=rid, event_id=event_id, member_id=member_id, present=present, date=day)


def test_site_with_members_but_no_records_reports_zero():
    assert service.site_attendance_ratio("a", [], MEMBERS) == 0
    assert service.global_attendance_ratio([]) == 0


def test_site_ratio_three_of_four_is_75():
    records = [
        rec("r1", "m1", True, "2026-02-07"),
        rec("r2", "m2", True, "2026-02-07"),
        rec("r3", "m1", True, "2026-02-08"),
        rec("r4", "m2", False, "2026-02-08"),
        rec("r5", "m3", False, "2026-02-08"),
    ]

    assert service.site_attendance_ratio("a", records, MEMBERS) == 75
    assert service.site_attendance_ratio("b", records, MEMBERS) == 0
    assert service.global_attendance_ratio(records) == 60


def test_aggregations_are_repeatable():
    records = [rec("r1", "m1", True, "2026-02-07"), rec("r2", "m3", False, "2026-02-07")]

    first = service.site_ranking(SITES, records, MEMBERS)
    second = service.site_ranking(SITES, records, MEMBERS)

    assert first == second
    assert service.event_breakdown("e1", records, MEMBERS, SITES) == service.event_breakdown("e1", records, MEMBERS, SITES)


def test_site_ranking_sorts_desc_and_keeps_seed_order_on_ties():
    records = [rec("r1", "m3", True, "2026-02-07"), rec("r2", "m1", False, "2026-02-07")]

    ranking = service.site_ranking(SITES, records, MEMBERS)

    assert [r.site.site_id for r in ranking] == ["b", "a", "c"]
    assert [r.ratio for r in ranking] == [100, 0, 0]
    assert [r.has_reports for r in ranking] == [True, True, False]


def test_site_report_status_keeps_site_order():
    records = [rec("r1", "m3", True, "2026-02-07")]

    status = service.site_report_status(SITES, records, MEMBERS)

    assert [(s.site_id, sent) for s, sent in status] == [("a", False), ("b", True), ("c", False)]


def test_event_breakdown_counts_only_present_members():
    records = [
        rec("r1", "m1", True, "2026-02-07"),
        rec("r2", "m2", False, "2026-02-07"),
        rec("r3", "m3", True, "2026-02-07"),
        rec("r4", "m4", True, "2026-02-08", event_id="e2"),
        rec("r5", "ghost", True, "2026-02-07"),
    ]

    b = service.event_breakdown("e1", records, MEMBERS, SITES)

    assert b.total == 2
    assert b.voices == {
        VoicePart.SOPRANO: 1,
        VoicePart.CONTRALTO: 1,
        VoicePart.TENOR: 0,
        VoicePart.BASS: 0,
    }
    assert b.genders == {Gender.MALE: 0, Gender.FEMALE: 2}
    assert [(s.site_id, s.count) for s in b.by_site] == [("a", 1), ("b", 1)]


def test_event_breakdown_skips_sites_with_no_one_present():
    records = [rec("r1", "m1", True, "2026-02-07")]

    b = service.event_breakdown("e1", records, MEMBERS, SITES)

    assert [s.name for s in b.by_site] == ["Alpha"]


def test_absence_streak_stops_at_most_recent_present():
    # most recent first: absent, absent, present, absent
    records = [
        rec("r4", "m1", False, "2026-02-01"),
        rec("r3", "m1", True, "2026-02-07"),
        rec("r2", "m1", False, "2026-02-08"),
        rec("r1", "m1", False, "2026-02-14"),
    ]

    assert service.absence_streak("m1", records) == 2
    assert not service.needs_follow_up("m1", records)


def test_absence_streak_sorts_before_walking():
    records = [
        rec("r1", "m1", False, "2026-02-14"),
        rec("r2", "m1", True, "2026-01-31"),
        rec("r3", "m1", False, "2026-02-07"),
        rec("r4", "m1", False, "2026-02-08"),
    ]

    assert service.absence_streak("m1", records) == 3
    assert service.needs_follow_up("m1", records)
    assert service.members_needing_follow_up(MEMBERS, records) == [MEMBERS[0]]


def test_absence_streak_without_records_is_zero():
    assert service.absence_streak("m1", []) == 0


def test_member_stats_history_resolves_events():
    events = [Event("e1", "Ensayo", "2026-02-07", "10:00", "Sede Principal")]
    records = [
        rec("r1", "m1", True, "2026-02-07"),
        rec("r2", "m1", False, "2026-02-08", event_id="deleted"),
    ]

    stats = service.member_stats("m1", records, events)

    assert (stats.present, stats.absent, stats.ratio, stats.streak) == (1, 1, 50, 1)
    assert stats.needs_follow_up is False
    assert [h.event_name for h in stats.history] == ["---", "Ensayo"]
    assert stats.history[1].location == "Sede Principal"


def test_weekend_series_only_contains_weekend_days():
    records = [
        rec("r1", "m1", True, "2026-01-31"),
        rec("r2", "m2", False, "2026-01-31"),
        rec("r3", "m1", True, "2026-02-01"),
    ]

    points = list(service.weekend_series(records, start=date(2026, 1, 30), end=date(2026, 2, 8)))

    assert [p.date for p in points] == [date(2026, 1, 31), date(2026, 2, 1), date(2026, 2, 7), date(2026, 2, 8)]
    assert [p.ratio for p in points] == [50, 100, 0, 0]
    assert points[0].label == "Sáb 31/1"
    assert points[1].label == "Dom 1/2"
    assert points[0].full_label == "Fin de semana - 31 de enero de 2026"


def test_weekend_series_default_range_is_the_season():
    points = list(service.weekend_series([]))

    assert points[0].date == date(2026, 1, 31)
    assert points[-1].date == date(2026, 4, 5)
    assert len(points) == 20


def test_site_profile_counts_voices_of_members():
    records = [rec("r1", "m1", True, "2026-02-07"), rec("r2", "m2", False, "2026-02-07")]

    profile = service.site_profile("a", MEMBERS, records)

    assert profile.total_members == 2
    assert profile.ratio == 50
    assert profile.voices[VoicePart.SOPRANO] == 1
    assert profile.voices[VoicePart.BASS] == 1


def test_director_for_site_takes_last_created():
    users = [
        User("u1", "First", "f@x.com", Role.DIRECTOR, "a"),
        User("admin", "Admin", "a@x.com", Role.ADMIN),
        User("u2", "Second", "s@x.com", Role.DIRECTOR, "a"),
        User("u3", "Other", "o@x.com", Role.DIRECTOR, "b"),
    ]

    assert service.director_for_site("a", users).user_id == "u2"
    assert service.director_for_site("c", users) is None


def test_has_submitted_is_scoped_to_site_members():
    records = [rec("r1", "m1", True, "2026-02-07")]

    assert service.has_submitted("a", "e1", records, MEMBERS)
    assert not service.has_submitted("b", "e1", records, MEMBERS)
    assert not service.has_submitted("a", "e2", records, MEMBERS)


def test_days_until_and_event_ordering():
    events = [
        Event("late", "Late", "2026-04-04", "10:00", "X"),
        Event("early", "Early", "2026-02-01", "10:00", "X"),
    ]

    assert [e.event_id for e in service.events_by_date(events)] == ["early", "late"]
    assert [e.event_id for e in service.events_by_date(events, descending=True)] == ["late", "early"]
    assert service.days_until(events[1], date(2026, 1, 30)) == 2
    assert service.days_until(Event("x", "X", "not-a-date", "", ""), date(2026, 1, 30)) is None
