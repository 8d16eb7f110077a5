from __future__ import annotations

from flask import Flask, request

from ..common.web import login_required, ok
from ..container import Container
from ..storage.codec import member_to_dict, site_to_dict


def register(app: Flask, container: Container) -> None:
    state = container.state

    @app.route("/api/members", endpoint="list_members")
    @login_required(container)
    def list_members():
        members = state.visible_members(request.args.get("choirId") or None)
        return ok([member_to_dict(m) for m in members])

    @app.route("/api/members", methods=["POST"], endpoint="add_member")
    @login_required(container)
    def add_member():
        body = request.get_json(silent=True) or {}
        member = state.add_member(
            first_name=str(body.get("firstName", "")),
            last_name=str(body.get("lastName", "")),
            email=str(body.get("email", "")),
            voice=body.get("voiceType", ""),
            gender=body.get("gender", ""),
            site_id=body.get("choirId") or None,
        )
        return ok(member_to_dict(member)), 201

    @app.route("/api/members/<member_id>", methods=["DELETE"], endpoint="delete_member")
    @login_required(container)
    def delete_member(member_id: str):
        state.delete_member(member_id)
        return ok()

    @app.route("/api/choirs", endpoint="list_choirs")
    @login_required(container)
    def list_choirs():
        return ok([site_to_dict(s) for s in state.sites])

    @app.route("/api/choirs/<site_id>/photo", methods=["POST"], endpoint="update_choir_photo")
    @login_required(container)
    def update_choir_photo(site_id: str):
        file = request.files.get("image")
        if file is None:
            return {"success": False, "message": "Falta el archivo de imagen"}, 400
        site = state.update_site_photo(site_id, file.read())
        return ok(site_to_dict(site))
