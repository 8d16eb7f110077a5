from __future__ import annotations

from flask import Flask, Response, request

from ..common.web import login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    state = container.state

    @app.route("/api/export", endpoint="export_data")
    @login_required(container)
    def export_data():
        export = state.export_document()
        # dropped saves mean the file may lag the in-memory tables; messages stay queued for /api/sync
        dropped = len(container.gateway.warnings)
        return Response(
            export.content,
            mimetype="application/json",
            headers={
                "Content-Disposition": f'attachment; filename="{export.filename}"',
                "X-Storage-Warnings": str(dropped),
            },
        )

    @app.route("/api/import", methods=["POST"], endpoint="import_data")
    @login_required(container)
    def import_data():
        file = request.files.get("file")
        document = file.read() if file else request.get_data()
        replaced = state.import_document(document)
        return ok(replaced=replaced)

    @app.route("/api/sync", endpoint="sync_poll")
    @login_required(container)
    def sync_poll():
        return ok(reloaded=container.sync.poll(), warnings=state.drain_warnings())
