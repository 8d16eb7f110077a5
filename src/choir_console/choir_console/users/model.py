from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an admin or a site director account.

    Note: `site_id` is only meaningful for directors.
    """

    user_id: str
    name: str
    email: str
    role: Role
    site_id: Optional[str] = None
    avatar: Optional[str] = None
