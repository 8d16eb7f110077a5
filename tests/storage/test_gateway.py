from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from src.choir_console.choir_console.core.constants import TABLE_KEYS
from src.choir_console.choir_console.core.exceptions import ImportFormatError
from src.choir_console.choir_console.storage.gateway import QUOTA_WARNING, PersistenceGateway
from src.choir_console.choir_console.storage.memory_store import InMemoryKeyValueStore
from src.choir_console.choir_console.users.seed import seed_users


def test_save_then_load_uses_prefixed_key(gateway, store):
    assert gateway.save("members", [{"id": "m1"}]) is True

    assert store.keys() == ["umbral_members"]
    assert gateway.load("members") == [{"id": "m1"}]


def test_load_missing_key_returns_default(gateway):
    assert gateway.load("events", []) == []
    assert gateway.load("events") is None


def test_load_malformed_value_returns_default(gateway, store):
    store.set("umbral_choirs", "{not json")

    assert gateway.load("choirs", ["fallback"]) == ["fallback"]
    assert gateway.load_table("choirs", ["fallback"]) == ["fallback"]


def test_load_table_with_bad_rows_returns_default(gateway, store):
    store.set("umbral_members", json.dumps([{"id": "m1"}]))

    assert gateway.load_table("members", []) == []


def test_save_none_is_a_no_op(gateway, store):
    assert gateway.save("users", None) is False
    assert store.keys() == []


def test_quota_exceeded_drops_write_and_warns():
    gateway = PersistenceGateway(InMemoryKeyValueStore(quota_bytes=64))

    assert gateway.save("choirs", ["x" * 100]) is False
    assert gateway.warnings == [QUOTA_WARNING]
    assert gateway.load("choirs", []) == []


def test_save_table_and_load_table_round_trip(gateway):
    users = seed_users()

    assert gateway.save_table("users", users)
    assert gateway.load_table("users", []) == users


def test_export_all_contains_every_table(gateway):
    gateway.save("members", [{"id": "m1"}])
    now = datetime(2026, 1, 31, 12, 0, tzinfo=timezone.utc)

    export = gateway.export_all(now=now)

    assert export.filename == f"umbral_backup_{int(now.timestamp())}.json"
    assert set(export.document) == set(TABLE_KEYS)
    assert export.document["members"] == [{"id": "m1"}]
    assert export.document["events"] == []
    assert json.loads(export.content) == export.document


def test_parse_import_marks_absent_tables(gateway):
    payload = gateway.parse_import(
        json.dumps(
            {
                "members": [
                    {
                        "id": "m1",
                        "firstName": "Ana",
                        "lastName": "Ruiz",
                        "choirId": "1",
                        "voiceType": "Soprano",
                        "gender": "Mujer",
                    }
                ]
            }
        )
    )

    assert list(payload.present()) == ["members"]
    assert payload.tables["users"] is None
    assert payload.present()["members"][0].full_name == "Ana Ruiz"


def test_parse_import_accepts_legacy_record_without_id(gateway):
    payload = gateway.parse_import({"reports": [{"eventId": "e1", "memberId": "m1", "present": True, "date": "2026-02-07"}]})

    (record,) = payload.present()["reports"]
    assert record.record_id == "e1:m1"
    assert record.present is True


@pytest.mark.parametrize(
    "document",
    [
        "not json at all",
        "[1, 2, 3]",
        {"members": {"id": "m1"}},
        {"members": [{"id": "m1"}]},
        {"users": [{"id": "u1", "name": "X", "role": "ROOT"}]},
        {"events": [{"id": "e1", "name": "Ensayo"}]},
    ],
)
def test_parse_import_rejects_malformed_documents(gateway, document):
    with pytest.raises(ImportFormatError):
        gateway.parse_import(document)
