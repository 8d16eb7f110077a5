from __future__ import annotations

from flask import Flask, request, send_file

from ..common.web import admin_required, login_required, ok
from ..container import Container
from ..storage.codec import site_to_dict
from . import service
from .export_xlsx import XLSX_MIMETYPE, export_raw_rows_xlsx
from .model import EventBreakdown, MemberStats, RawRow


def _breakdown_to_dict(b: EventBreakdown) -> dict:
    return {
        "eventId": b.event_id,
        "total": b.total,
        "voices": {v.value: n for v, n in b.voices.items()},
        "genders": {g.value: n for g, n in b.genders.items()},
        "bySite": [{"choirId": s.site_id, "name": s.name, "count": s.count} for s in b.by_site],
    }


def _stats_to_dict(s: MemberStats) -> dict:
    return {
        "memberId": s.member_id,
        "present": s.present,
        "absent": s.absent,
        "ratio": s.ratio,
        "streak": s.streak,
        "needsFollowUp": s.needs_follow_up,
        "history": [
            {"id": h.record_id, "date": h.date, "event": h.event_name, "location": h.location, "present": h.present}
            for h in s.history
        ],
    }


def _row_to_dict(r: RawRow) -> dict:
    data = r.searchable()
    data["id"] = r.record_id
    data["memberId"] = r.member_id
    return data


def register(app: Flask, container: Container) -> None:
    state = container.state

    def scoped_members():
        return state.visible_members(request.args.get("choirId") or None)

    def scoped_records():
        site_id = state.scope(request.args.get("choirId") or None)
        if site_id is None:
            return state.records
        return service.records_of_site(site_id, state.records, state.members)

    @app.route("/api/dashboard", endpoint="dashboard")
    @login_required(container)
    def dashboard():
        site_id = state.scope(request.args.get("choirId") or None)
        sites = state.sites if site_id is None else [s for s in state.sites if s.site_id == site_id]
        records = scoped_records()
        summary = service.dashboard_summary(records, scoped_members(), sites)
        status = service.site_report_status(sites, records, state.members)
        return ok(
            {
                "presence": summary.presence,
                "memberCount": summary.member_count,
                "siteCount": summary.site_count,
                "choirs": [dict(site_to_dict(s), sent=sent) for s, sent in status],
                "series": [
                    {"date": p.date.isoformat(), "ratio": p.ratio, "label": p.label, "fullLabel": p.full_label}
                    for p in service.weekend_series(records, weekdays=state.attendance_days)
                ],
            }
        )

    @app.route("/api/reports/ranking", endpoint="site_ranking")
    @admin_required(container)
    def site_ranking():
        ranking = service.site_ranking(state.sites, state.records, state.members)
        return ok([dict(site_to_dict(r.site), ratio=r.ratio, hasReports=r.has_reports) for r in ranking])

    @app.route("/api/reports/choirs/<site_id>", endpoint="site_profile")
    @login_required(container)
    def site_profile(site_id: str):
        site_id = state.scope(site_id)
        profile = service.site_profile(site_id, state.members, state.records)
        director = service.director_for_site(site_id, state.users)
        return ok(
            {
                "choirId": profile.site_id,
                "totalMembers": profile.total_members,
                "attendance": profile.ratio,
                "voices": {v.value: n for v, n in profile.voices.items()},
                "director": director.name if director else None,
            }
        )

    @app.route("/api/reports/events/<event_id>", endpoint="event_breakdown")
    @login_required(container)
    def event_breakdown(event_id: str):
        members = scoped_members()
        return ok(_breakdown_to_dict(service.event_breakdown(event_id, state.records, members, state.sites)))

    @app.route("/api/reports/members/<member_id>", endpoint="member_stats")
    @login_required(container)
    def member_stats(member_id: str):
        visible = {m.member_id for m in scoped_members()}
        if member_id not in visible:
            return {"success": False, "message": "Miembro no encontrado"}, 404
        return ok(_stats_to_dict(service.member_stats(member_id, state.records, state.events)))

    @app.route("/api/reports/follow-up", endpoint="follow_up")
    @login_required(container)
    def follow_up():
        flagged = service.members_needing_follow_up(scoped_members(), state.records)
        return ok([{"id": m.member_id, "name": m.full_name, "choirId": m.site_id} for m in flagged])

    def _filtered_rows():
        rows = service.raw_rows(scoped_records(), state.members, state.sites, state.events, state.users)
        columns = {k: v for k, v in request.args.items() if k not in ("q", "choirId")}
        return service.filter_raw_rows(rows, request.args.get("q", ""), **columns)

    @app.route("/api/reports/raw", endpoint="raw_data")
    @login_required(container)
    def raw_data():
        return ok([_row_to_dict(r) for r in _filtered_rows()])

    @app.route("/api/reports/raw.xlsx", endpoint="raw_data_xlsx")
    @login_required(container)
    def raw_data_xlsx():
        return send_file(
            export_raw_rows_xlsx(_filtered_rows()),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name="asistencia.xlsx",
        )
