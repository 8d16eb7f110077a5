from __future__ import annotations

from ..core.enums import Gender, VoicePart
from .model import Member

SEED_MEMBERS: tuple[Member, ...] = (
    Member("1", "Juan Pablo", "Gómez", "juan@monumental.com", "6", VoicePart.TENOR, Gender.MALE),
    Member("2", "Ana María", "Pérez", "ana@monumental.com", "10", VoicePart.SOPRANO, Gender.FEMALE),
    Member("3", "Luis Eduardo", "López", "luis@monumental.com", "1", VoicePart.BASS, Gender.MALE),
    Member("4", "Marta Elena", "Ramírez", "marta@monumental.com", "6", VoicePart.CONTRALTO, Gender.FEMALE),
    Member("5", "Ricardo", "Sánchez", "ricardo@monumental.com", "2", VoicePart.BASS, Gender.MALE),
    Member("6", "Isabella", "Torres", "isabella@monumental.com", "4", VoicePart.SOPRANO, Gender.FEMALE),
    Member("7", "Fernando", "Ruiz", "fernando@monumental.com", "11", VoicePart.TENOR, Gender.MALE),
    Member("8", "Sofía", "Castro", "sofia@monumental.com", "8", VoicePart.CONTRALTO, Gender.FEMALE),
)


def seed_members() -> list[Member]:
    return list(SEED_MEMBERS)
