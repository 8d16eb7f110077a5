from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .core.exceptions import (
    AlreadySubmittedError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
)
from .events.controller import register as register_events
from .members.controller import register as register_members
from .reports.controller import register as register_reports
from .storage.controller import register as register_storage
from .storage.repository import KeyValueStore
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _status_for(error: DomainError) -> int:
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, AlreadySubmittedError):
        return 409
    return 400


def create_app(settings_module: Optional[str] = None, *, store: Optional[KeyValueStore] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s storage=%s",
        settings_module,
        getattr(settings, "STORAGE_BACKEND", "memory"),
    )

    container = build_container(settings, store=store)
    app.extensions["choir_console"] = container

    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        return jsonify({"success": False, "message": str(error)}), _status_for(error)

    register_users(app, container)
    register_members(app, container)
    register_events(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_storage(app, container)

    return app
