from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from typing import Iterable, Mapping, Optional, Union

from ..attendance.model import AttendanceRecord
from ..common.validators import require_attendance_day, require_iso_date, require_non_empty
from ..core.constants import DEFAULT_ATTENDANCE_DAYS, SESSION_KEY, TABLE_KEYS
from ..core.enums import Gender, Role, VoicePart
from ..core.exceptions import AlreadySubmittedError, AuthenticationError, AuthorizationError, ValidationError
from ..events.model import Event
from ..events.seed import seed_events
from ..media.images import compress_image
from ..members.model import Member
from ..members.seed import seed_members
from ..remote.mirror import SiteMirror, push_site
from ..reports.service import director_for_site, has_submitted, members_of_site
from ..sites.model import Site
from ..sites.seed import seed_sites
from ..storage.gateway import ExportFile, PersistenceGateway
from ..sync.signal import SyncSignal
from ..users.model import User
from ..users.seed import seed_users
from ..users.service import AuthService, SessionUser, new_director

logger = logging.getLogger(__name__)


class AppState:
    """All session tables of one console instance and the intents that change them.

    Every mutation goes through a named intent. Intents mark the tables they
    touched as dirty; `commit()` mirrors dirty tables to the persistence
    gateway and announces the change to sibling instances. With
    `autosave_delay` > 0 commits are debounced on a timer, otherwise each
    intent commits before returning.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        sync: Optional[SyncSignal] = None,
        mirror: Optional[SiteMirror] = None,
        attendance_days: Iterable[int] = DEFAULT_ATTENDANCE_DAYS,
        autosave_delay: float = 0.0,
    ):
        self._gateway = gateway
        self._sync = sync
        self._mirror = mirror
        self.attendance_days = tuple(attendance_days)
        self._autosave_delay = float(autosave_delay)

        self.users: list[User] = seed_users()
        self.sites: list[Site] = seed_sites()
        self.members: list[Member] = seed_members()
        self.records: list[AttendanceRecord] = []
        self.events: list[Event] = seed_events()

        self.session: Optional[SessionUser] = None
        self.site_filter: Optional[str] = None

        self._auth = AuthService(lambda: self.sites)
        self._dirty: set[str] = set()
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None

        if sync is not None:
            sync.subscribe(self.reload)

    @classmethod
    def load(cls, gateway: PersistenceGateway, **kwargs) -> "AppState":
        state = cls(gateway, **kwargs)
        state.reload()
        return state

    # ------------------------------------------------------------------ tables

    def _get_table(self, name: str) -> list:
        return {
            "users": self.users,
            "choirs": self.sites,
            "members": self.members,
            "reports": self.records,
            "events": self.events,
        }[name]

    def _set_table(self, name: str, rows: list) -> None:
        if name == "users":
            self.users = rows
        elif name == "choirs":
            self.sites = rows
        elif name == "members":
            self.members = rows
        elif name == "reports":
            self.records = rows
        elif name == "events":
            self.events = rows
        else:
            raise KeyError(name)

    def reload(self) -> None:
        """Replace every table with what the gateway holds (last save wins)."""
        for name in TABLE_KEYS:
            self._set_table(name, self._gateway.load_table(name, self._get_table(name)))

        raw_session = self._gateway.load(SESSION_KEY, None)
        if isinstance(raw_session, dict):
            try:
                self.session = SessionUser(
                    user_id=str(raw_session["id"]),
                    name=str(raw_session["name"]),
                    email=str(raw_session.get("email") or ""),
                    role=Role(raw_session["role"]),
                    site_id=raw_session.get("choirId"),
                )
            except (KeyError, ValueError):
                logger.warning("stored session is malformed, ignoring it")

    def _touch(self, *names: str) -> None:
        with self._lock:
            self._dirty.update(names)
            if self._autosave_delay > 0:
                if self._timer is not None:
                    self._timer.cancel()
                self._timer = threading.Timer(self._autosave_delay, self.commit)
                self._timer.daemon = True
                self._timer.start()
                return
        self.commit()

    def commit(self) -> bool:
        """Save dirty tables now. False if any save was dropped."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            dirty, self._dirty = self._dirty, set()
            snapshot = {name: list(self._get_table(name)) for name in TABLE_KEYS if name in dirty}

        if not snapshot:
            return True

        results = [self._gateway.save_table(name, rows) for name, rows in snapshot.items()]
        if self._sync is not None:
            self._sync.announce()
        return all(results)

    def drain_warnings(self) -> list[str]:
        warnings = list(self._gateway.warnings)
        self._gateway.warnings.clear()
        return warnings

    # ----------------------------------------------------------------- session

    def _require_session(self) -> SessionUser:
        if self.session is None:
            raise AuthenticationError("Inicie sesión para continuar")
        return self.session

    def login(self, token: str) -> SessionUser:
        resolved = self._auth.resolve_identity(token)

        known = next((u for u in self.users if u.user_id == resolved.user_id), None)
        if known is None and resolved.role == Role.DIRECTOR:
            known = director_for_site(resolved.site_id, self.users)

        if known is not None:
            resolved = SessionUser.from_user(known)
        else:
            self.users = [*self.users, resolved.to_user()]
            self._touch("users")

        self.session = resolved
        self.site_filter = None
        self._gateway.save(SESSION_KEY, self._session_dict(resolved))
        logger.info("login as %s (%s)", resolved.name, resolved.role.value)
        return resolved

    def logout(self) -> None:
        self.session = None
        self.site_filter = None
        self._gateway.remove(SESSION_KEY)

    @staticmethod
    def _session_dict(s: SessionUser) -> dict:
        data = {"id": s.user_id, "name": s.name, "email": s.email, "role": s.role.value}
        if s.site_id is not None:
            data["choirId"] = s.site_id
        return data

    def set_site_filter(self, site_id: Optional[str]) -> None:
        session = self._require_session()
        if site_id is not None and not any(s.site_id == site_id for s in self.sites):
            raise ValidationError("Sede no encontrada")
        session.effective_site_id(site_id)
        self.site_filter = site_id if session.is_admin else None

    def scope(self, requested: Optional[str] = None) -> Optional[str]:
        """Effective site of the current caller; admins fall back to their filter."""
        session = self._require_session()
        if session.is_admin and requested is None:
            requested = self.site_filter
        return session.effective_site_id(requested)

    def visible_members(self, requested: Optional[str] = None) -> list[Member]:
        return members_of_site(self.scope(requested), self.members)

    # ----------------------------------------------------------------- members

    def add_member(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str = "",
        voice: Union[VoicePart, str] = VoicePart.UNASSIGNED,
        gender: Union[Gender, str],
        site_id: Optional[str] = None,
    ) -> Member:
        site = self.scope(site_id)
        if site is None:
            raise ValidationError("Seleccione una sede")

        try:
            gender = Gender(gender)
        except ValueError as e:
            raise ValidationError("Género no válido") from e

        member = Member(
            member_id=str(uuid.uuid4()),
            first_name=require_non_empty(first_name, "Nombres"),
            last_name=require_non_empty(last_name, "Apellidos"),
            email=(email or "").strip(),
            site_id=site,
            voice=VoicePart.parse(voice),
            gender=gender,
        )
        self.members = [*self.members, member]
        self._touch("members")
        return member

    def delete_member(self, member_id: str) -> None:
        session = self._require_session()
        member = next((m for m in self.members if m.member_id == member_id), None)
        if member is None:
            raise ValidationError("Miembro no encontrado")
        session.require_site(member.site_id)

        self.members = [m for m in self.members if m.member_id != member_id]
        self._touch("members")

    # ------------------------------------------------------------------ events

    def add_event(
        self,
        *,
        name: str,
        date: str,
        time: str = "",
        location: str = "",
        image_url: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Event:
        self._require_session().require_admin()
        event = Event(
            event_id=str(uuid.uuid4()),
            name=require_non_empty(name, "Nombre"),
            date=require_iso_date(date, "Fecha").isoformat(),
            time=time or "",
            location=location or "",
            image_url=image_url or None,
            description=description or None,
        )
        self.events = [*self.events, event]
        self._touch("events")
        return event

    def update_event(self, event_id: str, **changes) -> Event:
        self._require_session().require_admin()
        current = self.get_event(event_id)
        if current is None:
            raise ValidationError("Evento no encontrado")

        allowed = {"name", "date", "time", "location", "image_url", "description"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Campos no válidos: {', '.join(sorted(unknown))}")
        if "name" in changes:
            changes["name"] = require_non_empty(changes["name"], "Nombre")
        if "date" in changes:
            changes["date"] = require_iso_date(changes["date"], "Fecha").isoformat()
        for key in ("image_url", "description"):
            if key in changes:
                changes[key] = changes[key] or None

        updated = replace(current, **changes)
        self.events = [updated if e.event_id == event_id else e for e in self.events]
        self._touch("events")
        return updated

    def delete_event(self, event_id: str) -> None:
        self._require_session().require_admin()
        if self.get_event(event_id) is None:
            raise ValidationError("Evento no encontrado")
        self.events = [e for e in self.events if e.event_id != event_id]
        self._touch("events")

    def get_event(self, event_id: str) -> Optional[Event]:
        return next((e for e in self.events if e.event_id == event_id), None)

    # -------------------------------------------------------------- attendance

    def submit_roster(
        self,
        event_id: str,
        presence: Mapping[str, bool],
        *,
        site_id: Optional[str] = None,
    ) -> list[AttendanceRecord]:
        """Record one attendance row per member of the site for an event.

        This is the only place attendance records are created; each record
        copies the event's date.
        """
        site = self.scope(site_id)
        if site is None:
            raise ValidationError("Seleccione una sede")

        event = self.get_event(event_id)
        if event is None:
            raise ValidationError("Evento no encontrado")
        require_attendance_day(event.date, self.attendance_days)

        if has_submitted(site, event_id, self.records, self.members):
            raise AlreadySubmittedError("La sede ya envió la asistencia de este evento")

        roster = members_of_site(site, self.members)
        if not roster:
            raise ValidationError("La sede no tiene miembros registrados")

        batch = [
            AttendanceRecord(
                record_id=str(uuid.uuid4()),
                event_id=event.event_id,
                member_id=m.member_id,
                present=bool(presence.get(m.member_id, False)),
                date=event.date,
            )
            for m in roster
        ]
        self.records = [*self.records, *batch]
        self._touch("reports")
        logger.info("roster for site %s / event %s: %d records", site, event_id, len(batch))
        return batch

    def can_submit(self, event_id: str, site_id: Optional[str] = None) -> bool:
        site = self.scope(site_id)
        return site is not None and not has_submitted(site, event_id, self.records, self.members)

    # ------------------------------------------------------------------- sites

    def update_site_photo(self, site_id: str, image: bytes) -> Site:
        self._require_session().require_site(site_id)
        site = next((s for s in self.sites if s.site_id == site_id), None)
        if site is None:
            raise ValidationError("Sede no encontrada")

        updated = replace(site, image_url=compress_image(image))
        self.sites = [updated if s.site_id == site_id else s for s in self.sites]
        self._touch("choirs")
        self.commit()
        push_site(self._mirror, updated)
        return updated

    # ------------------------------------------------------------------- users

    def directors(self) -> list[User]:
        return [u for u in self.users if u.role == Role.DIRECTOR]

    def director_exists_for_site(self, site_id: str) -> bool:
        return director_for_site(site_id, self.users) is not None

    def create_director(self, *, name: str, site_id: str, email: str = "", avatar: Optional[bytes] = None) -> User:
        self._require_session().require_admin()
        if not any(s.site_id == site_id for s in self.sites):
            raise ValidationError("Sede no encontrada")

        user = new_director(
            name=name,
            site_id=site_id,
            email=email,
            avatar=compress_image(avatar) if avatar else None,
        )
        self.users = [*self.users, user]
        self._touch("users")
        return user

    def update_director(
        self,
        user_id: str,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        site_id: Optional[str] = None,
        avatar: Optional[bytes] = None,
    ) -> User:
        self._require_session().require_admin()
        current = self._get_director(user_id)
        if site_id and not any(s.site_id == site_id for s in self.sites):
            raise ValidationError("Sede no encontrada")

        updated = replace(
            current,
            name=require_non_empty(name, "Nombre") if name is not None else current.name,
            email=(email or "").strip() or current.email,
            site_id=site_id or current.site_id,
            avatar=compress_image(avatar) if avatar else current.avatar,
        )
        self.users = [updated if u.user_id == user_id else u for u in self.users]
        self._touch("users")
        return updated

    def delete_director(self, user_id: str) -> None:
        self._require_session().require_admin()
        self._get_director(user_id)
        self.users = [u for u in self.users if u.user_id != user_id]
        self._touch("users")

    def update_avatar(self, image: bytes) -> User:
        """Change the logged-in user's own avatar."""
        session = self._require_session()
        avatar = compress_image(image)

        current = next((u for u in self.users if u.user_id == session.user_id), None)
        if current is None:
            raise AuthorizationError("Usuario no registrado")
        updated = replace(current, avatar=avatar)
        self.users = [updated if u.user_id == current.user_id else u for u in self.users]
        self._touch("users")
        return updated

    def _get_director(self, user_id: str) -> User:
        user = next((u for u in self.users if u.user_id == user_id), None)
        if user is None:
            raise ValidationError("Director no encontrado")
        if user.role != Role.DIRECTOR:
            raise ValidationError("No se puede modificar la cuenta del administrador")
        return user

    # ---------------------------------------------------------- export/import

    def export_document(self) -> ExportFile:
        self._require_session()
        with self._lock:
            self._dirty.update(TABLE_KEYS)
        self.commit()
        return self._gateway.export_all()

    def import_document(self, document) -> list[str]:
        """Replace every table present in the document; returns the replaced names.

        The whole document is validated first, so a bad table leaves all
        tables untouched.
        """
        self._require_session()
        payload = self._gateway.parse_import(document)
        present = payload.present()
        for name, rows in present.items():
            self._set_table(name, rows)
        if present:
            self._touch(*present)
        logger.info("imported tables: %s", ", ".join(present) or "none")
        return list(present)
