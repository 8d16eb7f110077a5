from __future__ import annotations

import re
import unicodedata
import uuid
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import ADMIN_LOGIN, DIRECTOR_SUFFIX
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..sites.model import Site
from .model import User
from .seed import ADMIN_USER


def normalize_name(value: str) -> str:
    """Lowercase, drop whitespace and diacritics ("La Peñita" -> "lapenita")."""
    value = re.sub(r"\s", "", value.lower())
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def default_director_email(name: str) -> str:
    local_part = re.sub(r"\s", "", name.lower())
    return f"{local_part}@esperanza.com"


@dataclass(frozen=True)
class SessionUser:
    """The resolved identity of the current caller plus its query scope."""

    user_id: str
    name: str
    email: str
    role: Role
    site_id: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(user_id=user.user_id, name=user.name, email=user.email, role=user.role, site_id=user.site_id)

    def to_user(self) -> User:
        return User(user_id=self.user_id, name=self.name, email=self.email, role=self.role, site_id=self.site_id)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def effective_site_id(self, requested: Optional[str] = None) -> Optional[str]:
        """Site every query and mutation of this caller is scoped to.

        Admins may narrow to any site (None = all sites). Directors are pinned
        to their own site and may not ask for another one.
        """
        if self.is_admin:
            return requested
        if requested is not None and requested != self.site_id:
            raise AuthorizationError("No tiene permiso sobre otra sede")
        return self.site_id

    def require_admin(self) -> None:
        if not self.is_admin:
            raise AuthorizationError("Solo el administrador puede realizar esta acción")

    def require_site(self, site_id: str) -> None:
        if not self.is_admin and site_id != self.site_id:
            raise AuthorizationError("No tiene permiso sobre otra sede")


class AuthService:
    """Use case: resolve a typed login token to an identity.

    Note: this is a namespace lookup, not authentication. Anyone who knows a
    site name can log in as its director.
    """

    def __init__(self, sites: Callable[[], Sequence[Site]]):
        self._sites = sites

    def resolve_identity(self, token: str) -> SessionUser:
        token = (token or "").strip()
        if token == ADMIN_LOGIN:
            return SessionUser.from_user(ADMIN_USER)

        if token.endswith(DIRECTOR_SUFFIX) and len(token) > len(DIRECTOR_SUFFIX):
            wanted = normalize_name(token[: -len(DIRECTOR_SUFFIX)])
            for site in self._sites():
                if normalize_name(site.name) == wanted:
                    return SessionUser(
                        user_id=f"u-{site.site_id}",
                        name=f"Director {site.name}",
                        email=f"{site.site_id}@director.com",
                        role=Role.DIRECTOR,
                        site_id=site.site_id,
                    )

        raise AuthenticationError("Usuario no registrado")


def new_director(*, name: str, site_id: str, email: str = "", avatar: Optional[str] = None) -> User:
    name = require_non_empty(name, "Nombre")
    return User(
        user_id=str(uuid.uuid4()),
        name=name,
        email=email.strip() or default_director_email(name),
        role=Role.DIRECTOR,
        site_id=require_non_empty(site_id, "Sede"),
        avatar=avatar or None,
    )
