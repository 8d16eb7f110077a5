"""JSON shapes of the persisted tables.

Keys follow the exported document format (camelCase, `choirId`), so backups
produced by earlier versions of the console keep importing.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import Gender, Role, SiteStatus, VoicePart
from ..core.exceptions import ImportFormatError
from ..events.model import Event
from ..members.model import Member
from ..sites.model import Site
from ..users.model import User


def _compact(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


def _opt(raw: dict, key: str) -> Optional[str]:
    value = raw.get(key)
    return None if value in (None, "") else str(value)


def user_to_dict(u: User) -> dict:
    return _compact(
        {"id": u.user_id, "name": u.name, "email": u.email, "role": u.role.value, "choirId": u.site_id, "avatar": u.avatar}
    )


def user_from_dict(raw: dict) -> User:
    return User(
        user_id=str(raw["id"]),
        name=str(raw["name"]),
        email=str(raw.get("email") or ""),
        role=Role(raw["role"]),
        site_id=_opt(raw, "choirId"),
        avatar=_opt(raw, "avatar"),
    )


def site_to_dict(s: Site) -> dict:
    return _compact(
        {
            "id": s.site_id,
            "name": s.name,
            "initials": s.initials,
            "attendance": s.attendance,
            "streak": s.streak,
            "status": s.status.value,
            "imageUrl": s.image_url,
        }
    )


def site_from_dict(raw: dict) -> Site:
    return Site(
        site_id=str(raw["id"]),
        name=str(raw["name"]),
        initials=str(raw.get("initials") or ""),
        attendance=float(raw.get("attendance") or 0),
        streak=int(raw.get("streak") or 0),
        status=SiteStatus(raw.get("status") or SiteStatus.ACTIVE.value),
        image_url=_opt(raw, "imageUrl"),
    )


def member_to_dict(m: Member) -> dict:
    return {
        "id": m.member_id,
        "firstName": m.first_name,
        "lastName": m.last_name,
        "email": m.email,
        "choirId": m.site_id,
        "voiceType": m.voice.value,
        "gender": m.gender.value,
    }


def member_from_dict(raw: dict) -> Member:
    return Member(
        member_id=str(raw["id"]),
        first_name=str(raw["firstName"]),
        last_name=str(raw["lastName"]),
        email=str(raw.get("email") or ""),
        site_id=str(raw["choirId"]),
        voice=VoicePart.parse(raw.get("voiceType")),
        gender=Gender(raw["gender"]),
    )


def record_to_dict(r: AttendanceRecord) -> dict:
    return {"id": r.record_id, "eventId": r.event_id, "memberId": r.member_id, "present": r.present, "date": r.date}


def record_from_dict(raw: dict) -> AttendanceRecord:
    event_id = str(raw["eventId"])
    member_id = str(raw["memberId"])
    return AttendanceRecord(
        record_id=str(raw.get("id") or f"{event_id}:{member_id}"),
        event_id=event_id,
        member_id=member_id,
        present=bool(raw.get("present", False)),
        date=str(raw.get("date") or ""),
    )


def event_to_dict(e: Event) -> dict:
    return _compact(
        {
            "id": e.event_id,
            "name": e.name,
            "date": e.date,
            "time": e.time,
            "location": e.location,
            "imageUrl": e.image_url,
            "description": e.description,
        }
    )


def event_from_dict(raw: dict) -> Event:
    if not raw.get("date"):
        raise KeyError("date")
    return Event(
        event_id=str(raw["id"]),
        name=str(raw["name"]),
        date=str(raw["date"]),
        time=str(raw.get("time") or ""),
        location=str(raw.get("location") or ""),
        image_url=_opt(raw, "imageUrl"),
        description=_opt(raw, "description"),
    )


TABLE_CODECS: dict[str, tuple[Callable[[Any], dict], Callable[[dict], Any]]] = {
    "users": (user_to_dict, user_from_dict),
    "choirs": (site_to_dict, site_from_dict),
    "members": (member_to_dict, member_from_dict),
    "reports": (record_to_dict, record_from_dict),
    "events": (event_to_dict, event_from_dict),
}


def encode_table(name: str, rows) -> list[dict]:
    to_dict, _ = TABLE_CODECS[name]
    return [to_dict(r) for r in rows]


def decode_table(name: str, raw_rows) -> list:
    """Decode a whole table or raise `ImportFormatError` naming the bad row."""
    _, from_dict = TABLE_CODECS[name]
    if not isinstance(raw_rows, list):
        raise ImportFormatError(f"'{name}' debe ser una lista")

    out = []
    for idx, raw in enumerate(raw_rows):
        if not isinstance(raw, dict):
            raise ImportFormatError(f"'{name}'[{idx}] no es un objeto")
        try:
            out.append(from_dict(raw))
        except KeyError as e:
            raise ImportFormatError(f"'{name}'[{idx}] sin campo {e.args[0]!r}") from e
        except (TypeError, ValueError) as e:
            raise ImportFormatError(f"'{name}'[{idx}] inválido: {e}") from e
    return out
