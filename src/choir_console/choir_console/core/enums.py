from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for scoping queries and mutations."""

    ADMIN = "ADMIN"
    DIRECTOR = "DIRECTOR"


class VoicePart(str, Enum):
    """Voice part of a member. Values match the exported JSON."""

    SOPRANO = "Soprano"
    CONTRALTO = "Contralto"
    TENOR = "Tenor"
    BASS = "Bajo"
    UNASSIGNED = "Sin asignar"

    @classmethod
    def parse(cls, value) -> "VoicePart":
        try:
            return cls(value)
        except ValueError:
            return cls.UNASSIGNED


class Gender(str, Enum):
    MALE = "Hombre"
    FEMALE = "Mujer"


class SiteStatus(str, Enum):
    """Lifecycle status of a site (chapter)."""

    ACTIVE = "Activo"
    UNDER_REVIEW = "Revisión"
    INACTIVE = "Inactivo"
