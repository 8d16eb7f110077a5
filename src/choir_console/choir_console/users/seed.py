from __future__ import annotations

from ..core.enums import Role
from .model import User

ADMIN_USER = User("u-admin", "Administrador", "admin@esperanza.com", Role.ADMIN)

SEED_USERS: tuple[User, ...] = (
    ADMIN_USER,
    User("u1", "Julio Peña", "bicentenario@director.com", Role.DIRECTOR, "1"),
    User("u2", "Director Bucerias", "bucerias@director.com", Role.DIRECTOR, "2"),
    User("u3", "Director El Guamuchil", "guamuchil@director.com", Role.DIRECTOR, "3"),
    User("u4", "Director El Porvenir", "porvenir@director.com", Role.DIRECTOR, "4"),
    User("u5", "Director La Peñita", "penita@director.com", Role.DIRECTOR, "5"),
    User("u6", "Director Mezcales", "mezcales@director.com", Role.DIRECTOR, "6"),
)


def seed_users() -> list[User]:
    return list(SEED_USERS)
