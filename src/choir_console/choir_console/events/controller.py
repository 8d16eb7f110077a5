from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.web import admin_required, login_required, ok
from ..container import Container
from ..reports.service import days_until, events_by_date
from ..storage.codec import event_to_dict

_FIELDS = {
    "name": "name",
    "date": "date",
    "time": "time",
    "location": "location",
    "imageUrl": "image_url",
    "description": "description",
}


def _changes(body: dict) -> dict:
    return {attr: body[key] for key, attr in _FIELDS.items() if key in body}


def register(app: Flask, container: Container) -> None:
    state = container.state

    @app.route("/api/events", endpoint="list_events")
    @login_required(container)
    def list_events():
        descending = request.args.get("order") == "desc"
        today = date.today()
        out = []
        for e in events_by_date(state.events, descending=descending):
            data = event_to_dict(e)
            data["daysUntil"] = days_until(e, today)
            out.append(data)
        return ok(out)

    @app.route("/api/events", methods=["POST"], endpoint="add_event")
    @admin_required(container)
    def add_event():
        body = request.get_json(silent=True) or {}
        changes = _changes(body)
        changes.setdefault("name", "")
        changes.setdefault("date", "")
        event = state.add_event(**changes)
        return ok(event_to_dict(event)), 201

    @app.route("/api/events/<event_id>", methods=["PUT"], endpoint="update_event")
    @admin_required(container)
    def update_event(event_id: str):
        body = request.get_json(silent=True) or {}
        return ok(event_to_dict(state.update_event(event_id, **_changes(body))))

    @app.route("/api/events/<event_id>", methods=["DELETE"], endpoint="delete_event")
    @admin_required(container)
    def delete_event(event_id: str):
        state.delete_event(event_id)
        return ok()
