from __future__ import annotations

from datetime import date
from typing import Iterable

from ..core.exceptions import ValidationError
from .datetime_utils import is_allowed_day, try_parse_iso_date

_WEEKDAY_NAMES = ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábados", "Domingos")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} no es válido")
    return value.strip()


def require_iso_date(value: str, field_name: str) -> date:
    parsed = try_parse_iso_date(value)
    if parsed is None:
        raise ValidationError(f"{field_name} debe tener formato AAAA-MM-DD")
    return parsed


def require_attendance_day(value: str, allowed_weekdays: Iterable[int]) -> date:
    allowed = sorted(set(allowed_weekdays))
    parsed = require_iso_date(value, "Fecha")
    if not is_allowed_day(parsed, allowed):
        names = " y ".join(_WEEKDAY_NAMES[d] for d in allowed)
        raise ValidationError(f"La asistencia solo se puede reportar {names}.")
    return parsed
