from __future__ import annotations

import io
import json

import pytest

from src.choir_console.choir_console.main import create_app
from src.choir_console.choir_console.storage.memory_store import InMemoryKeyValueStore


@pytest.fixture
def app():
    return create_app("config.testing", store=InMemoryKeyValueStore())


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, username):
    return client.post("/api/login", json={"username": username})


def test_requests_without_session_are_rejected(client):
    res = client.get("/api/members")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_unknown_login_is_rejected(client):
    res = login(client, "AtlantisDr")

    assert res.status_code == 401
    assert res.get_json()["message"] == "Usuario no registrado"


def test_director_roster_flow(client):
    res = login(client, "MezcalesDr")
    assert res.status_code == 200
    assert res.get_json()["data"]["choirId"] == "6"

    members = client.get("/api/members").get_json()["data"]
    assert [m["id"] for m in members] == ["1", "4"]

    status = client.get("/api/events/auto-2026-01-31/roster").get_json()
    assert status["canSubmit"] is True

    res = client.post("/api/events/auto-2026-01-31/roster", json={"presence": {"1": True, "4": False}})
    assert res.status_code == 201
    assert len(res.get_json()["data"]) == 2

    again = client.post("/api/events/auto-2026-01-31/roster", json={"presence": {"1": True}})
    assert again.status_code == 409

    profile = client.get("/api/reports/choirs/6").get_json()["data"]
    assert profile["attendance"] == 50
    assert profile["totalMembers"] == 2

    dashboard = client.get("/api/dashboard").get_json()["data"]
    assert dashboard["presence"] == 50
    assert dashboard["memberCount"] == 2
    assert len(dashboard["series"]) == 20
    assert dashboard["series"][0]["ratio"] == 50


def test_director_cannot_read_other_site_or_manage_events(client):
    login(client, "MezcalesDr")

    assert client.get("/api/reports/choirs/1").status_code == 403
    assert client.get("/api/members?choirId=1").status_code == 403
    assert client.post("/api/events", json={"name": "X", "date": "2026-03-14"}).status_code == 403


def test_admin_manages_events_and_directors(client):
    login(client, "Admin")

    res = client.post("/api/events", json={"name": "Concierto", "date": "2026-03-14", "location": "Plaza"})
    assert res.status_code == 201
    event_id = res.get_json()["data"]["id"]

    res = client.put(f"/api/events/{event_id}", json={"location": "Templo"})
    assert res.get_json()["data"]["location"] == "Templo"

    assert client.post("/api/events", json={"name": "Sin fecha"}).status_code == 400

    res = client.post("/api/directors", json={"name": "Nueva Directora", "choirId": "7"})
    assert res.status_code == 201
    body = res.get_json()
    assert body["replacedDirector"] is False
    assert body["data"]["email"] == "nuevadirectora@esperanza.com"

    assert client.delete(f"/api/events/{event_id}").status_code == 200


def test_raw_report_downloads_as_xlsx(client):
    login(client, "MezcalesDr")
    client.post("/api/events/auto-2026-01-31/roster", json={"presence": {"1": True}})

    rows = client.get("/api/reports/raw?status=falta").get_json()["data"]
    assert [r["name"] for r in rows] == ["Marta Elena Ramírez"]

    res = client.get("/api/reports/raw.xlsx")
    assert res.status_code == 200
    assert res.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def test_export_and_import(client):
    login(client, "Admin")

    res = client.get("/api/export")
    assert res.status_code == 200
    assert "umbral_backup_" in res.headers["Content-Disposition"]
    assert res.headers["X-Storage-Warnings"] == "0"
    document = json.loads(res.data)
    assert len(document["choirs"]) == 11

    upload = {"file": (io.BytesIO(json.dumps({"members": []}).encode()), "backup.json")}
    res = client.post("/api/import", data=upload, content_type="multipart/form-data")
    assert res.get_json()["replaced"] == ["members"]
    assert client.get("/api/members").get_json()["data"] == []

    res = client.post("/api/import", data=b"{broken", content_type="application/json")
    assert res.status_code == 400


def test_sync_poll_reports_warnings(client):
    login(client, "Admin")

    body = client.get("/api/sync").get_json()

    assert body["reloaded"] is False
    assert body["warnings"] == []


def test_director_cannot_see_the_cross_site_ranking(client):
    login(client, "BicentenarioDr")
    client.post("/api/events/auto-2026-01-31/roster", json={"presence": {"3": True}})
    client.post("/api/logout")

    login(client, "MezcalesDr")

    assert client.get("/api/reports/ranking").status_code == 403

    dashboard = client.get("/api/dashboard").get_json()["data"]
    assert [(c["id"], c["sent"]) for c in dashboard["choirs"]] == [("6", False)]
    assert dashboard["presence"] == 0
    assert client.get("/api/dashboard?choirId=1").status_code == 403


def test_admin_sees_every_site_in_ranking_and_dashboard(client):
    login(client, "BicentenarioDr")
    client.post("/api/events/auto-2026-01-31/roster", json={"presence": {"3": True}})
    client.post("/api/logout")

    login(client, "Admin")

    ranking = client.get("/api/reports/ranking").get_json()["data"]
    assert ranking[0]["id"] == "1"
    assert ranking[0]["ratio"] == 100
    assert len(ranking) == 11

    dashboard = client.get("/api/dashboard").get_json()["data"]
    assert len(dashboard["choirs"]) == 11
    assert dashboard["choirs"][0]["sent"] is True


def test_export_reports_dropped_saves():
    app = create_app("config.testing", store=InMemoryKeyValueStore(quota_bytes=300))
    client = app.test_client()
    login(client, "Admin")

    res = client.get("/api/export")

    assert res.status_code == 200
    assert int(res.headers["X-Storage-Warnings"]) > 0
    assert client.get("/api/sync").get_json()["warnings"]
