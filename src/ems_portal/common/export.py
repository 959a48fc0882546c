from __future__ import annotations

import io
import re
from typing import Any, Callable, Optional, Sequence

import pandas as pd
from flask import send_file

from .table import Column

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._ -]+")


def safe_filename(name: Optional[str], default: str) -> str:
    cleaned = _UNSAFE_FILENAME.sub("", (name or "").strip()).strip(" .")
    return f"{cleaned or default}.xlsx"


def build_workbook(
    rows: Sequence[Any],
    columns: Sequence[Column],
    *,
    sheet_name: str,
    cell: Callable[[str, Any, int], Any],
) -> io.BytesIO:
    """Write the rows into an in-memory .xlsx using the visible exportable columns."""
    export_cols = [c for c in columns if c.exportable]
    data = [[cell(c.key, row, idx) for c in export_cols] for idx, row in enumerate(rows)]
    df = pd.DataFrame(data, columns=[c.label for c in export_cols])

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name[:31])
    out.seek(0)
    return out


def send_workbook(buffer: io.BytesIO, filename: str):
    return send_file(buffer, mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=filename)
