from __future__ import annotations

from functools import wraps

from flask import jsonify

from ..container import Container


def login_required(container: Container):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if container.state.session is None:
                return jsonify({"success": False, "message": "Inicie sesión para continuar"}), 401
            return view(*args, **kwargs)

        return wrapper

    return decorator


def admin_required(container: Container):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            session = container.state.session
            if session is None:
                return jsonify({"success": False, "message": "Inicie sesión para continuar"}), 401
            if not session.is_admin:
                return jsonify({"success": False, "message": "Solo el administrador puede realizar esta acción"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def ok(payload=None, **extra):
    body = {"success": True}
    if payload is not None:
        body["data"] = payload
    body.update(extra)
    return jsonify(body)
