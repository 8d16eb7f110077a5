from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Gender, VoicePart


@dataclass(frozen=True)
class Member:
    """Domain entity: a choir member enrolled at one site."""

    member_id: str
    first_name: str
    last_name: str
    email: str
    site_id: str
    voice: VoicePart
    gender: Gender

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
