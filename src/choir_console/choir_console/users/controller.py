from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, login_required, ok
from ..container import Container
from ..storage.codec import user_to_dict
from ..users.service import SessionUser


def session_to_dict(s: SessionUser) -> dict:
    return {"id": s.user_id, "name": s.name, "email": s.email, "role": s.role.value, "choirId": s.site_id}


def register(app: Flask, container: Container) -> None:
    state = container.state

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        body = request.get_json(silent=True) or {}
        s_user = state.login(str(body.get("username", "")))
        return ok(session_to_dict(s_user))

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        state.logout()
        return ok()

    @app.route("/api/session", endpoint="current_session")
    @login_required(container)
    def current_session():
        return ok(session_to_dict(state.session), siteFilter=state.site_filter)

    @app.route("/api/session/site-filter", methods=["POST"], endpoint="set_site_filter")
    @login_required(container)
    def set_site_filter():
        body = request.get_json(silent=True) or {}
        state.set_site_filter(body.get("choirId") or None)
        return ok(siteFilter=state.site_filter)

    @app.route("/api/directors", endpoint="list_directors")
    @admin_required(container)
    def list_directors():
        return ok([user_to_dict(u) for u in state.directors()])

    @app.route("/api/directors", methods=["POST"], endpoint="create_director")
    @admin_required(container)
    def create_director():
        form = request.form if request.form else (request.get_json(silent=True) or {})
        avatar = request.files.get("avatar")
        site_id = str(form.get("choirId", ""))
        existed = state.director_exists_for_site(site_id)
        user = state.create_director(
            name=str(form.get("name", "")),
            site_id=site_id,
            email=str(form.get("email", "")),
            avatar=avatar.read() if avatar else None,
        )
        return ok(user_to_dict(user), replacedDirector=existed), 201

    @app.route("/api/directors/<user_id>", methods=["PUT"], endpoint="update_director")
    @admin_required(container)
    def update_director(user_id: str):
        form = request.form if request.form else (request.get_json(silent=True) or {})
        avatar = request.files.get("avatar")
        user = state.update_director(
            user_id,
            name=form.get("name"),
            email=form.get("email"),
            site_id=form.get("choirId"),
            avatar=avatar.read() if avatar else None,
        )
        return ok(user_to_dict(user))

    @app.route("/api/directors/<user_id>", methods=["DELETE"], endpoint="delete_director")
    @admin_required(container)
    def delete_director(user_id: str):
        state.delete_director(user_id)
        return ok()

    @app.route("/api/profile/avatar", methods=["POST"], endpoint="update_avatar")
    @login_required(container)
    def update_avatar():
        file = request.files.get("image")
        if file is None:
            return {"success": False, "message": "Falta el archivo de imagen"}, 400
        return ok(user_to_dict(state.update_avatar(file.read())))
