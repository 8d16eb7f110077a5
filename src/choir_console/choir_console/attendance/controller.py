from __future__ import annotations

from flask import Flask, request

from ..common.web import login_required, ok
from ..container import Container
from ..storage.codec import record_to_dict


def register(app: Flask, container: Container) -> None:
    state = container.state

    @app.route("/api/events/<event_id>/roster", methods=["GET"], endpoint="roster_status")
    @login_required(container)
    def roster_status(event_id: str):
        site_id = request.args.get("choirId") or None
        return ok(canSubmit=state.can_submit(event_id, site_id), choirId=state.scope(site_id))

    @app.route("/api/events/<event_id>/roster", methods=["POST"], endpoint="submit_roster")
    @login_required(container)
    def submit_roster(event_id: str):
        body = request.get_json(silent=True) or {}
        presence = {str(k): bool(v) for k, v in (body.get("presence") or {}).items()}
        batch = state.submit_roster(event_id, presence, site_id=body.get("choirId") or None)
        return ok([record_to_dict(r) for r in batch]), 201
