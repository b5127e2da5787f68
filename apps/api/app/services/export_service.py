from __future__ import annotations

from datetime import datetime
from io import BytesIO
from typing import Iterable
from zoneinfo import ZoneInfo

import pandas as pd
from openpyxl.utils import get_column_letter

from ..core.config import settings
from ..core.settings import settings as app_settings
from .lifecycle import TicketRecord, as_utc, newest_first

EXPORT_COLUMNS: tuple[str, ...] = (
    "Room",
    "Category",
    "Urgency",
    "Description",
    "DateReported",
    "Status",
    "ResolvedBy",
    "ResolvedAt",
)
COLUMN_WIDTHS: tuple[int, ...] = (10, 20, 15, 40, 20, 15, 25, 20)
MISSING = "N/A"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def format_timestamp(dt: datetime | None, tz_name: str | None = None) -> str:
    if dt is None:
        return MISSING
    return as_utc(dt).astimezone(ZoneInfo(tz_name or settings.report_timezone)).strftime("%Y-%m-%d %H:%M")


def build_export_rows(tickets: Iterable[TicketRecord], tz_name: str | None = None) -> list[dict[str, str]]:
    rows = []
    for t in newest_first(tickets):
        rows.append(
            {
                "Room": t.room_number or MISSING,
                "Category": t.issue_type or MISSING,
                "Urgency": t.urgency.value if t.urgency else "Standard",
                "Description": t.description or MISSING,
                "DateReported": format_timestamp(t.date_reported, tz_name),
                "Status": t.status.value,
                "ResolvedBy": t.resolved_by or MISSING,
                "ResolvedAt": format_timestamp(t.resolved_at, tz_name),
            }
        )
    return rows


def render_workbook(tickets: Iterable[TicketRecord], tz_name: str | None = None) -> bytes:
    frame = pd.DataFrame(build_export_rows(tickets, tz_name), columns=list(EXPORT_COLUMNS))
    sheet_name = app_settings.EXPORT_SHEET_NAME

    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=sheet_name, index=False)
        worksheet = writer.sheets[sheet_name]
        for idx, width in enumerate(COLUMN_WIDTHS, start=1):
            worksheet.column_dimensions[get_column_letter(idx)].width = width
    return buf.getvalue()
