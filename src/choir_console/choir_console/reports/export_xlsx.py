from __future__ import annotations

import io
from typing import Sequence

import pandas as pd

from .model import RawRow

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_COLUMNS = {
    "date": "Fecha",
    "site": "Sede",
    "name": "Nombre",
    "gender": "Género",
    "voice": "Voz",
    "status": "Estado",
    "location": "Ubicación",
    "director": "Director",
}


def raw_rows_frame(rows: Sequence[RawRow]) -> pd.DataFrame:
    data = [{label: getattr(r, attr) for attr, label in _COLUMNS.items()} for r in rows]
    return pd.DataFrame(data, columns=list(_COLUMNS.values()))


def export_raw_rows_xlsx(rows: Sequence[RawRow]) -> io.BytesIO:
    """Write the raw attendance table into an in-memory workbook."""
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        raw_rows_frame(rows).to_excel(writer, index=False, sheet_name="Asistencia")
    out.seek(0)
    return out
