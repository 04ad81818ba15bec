# excel_io.py
"""
Workbook export / import.

Exports write one sheet per month named ``<Month> <YYYY>``; the import side
reads the same layout back, so an "all months" export round-trips into the
document store.
"""
from __future__ import annotations
import io
import re
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
import numpy as np
import pandas as pd
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

import data_io
from constants import CURRENCY_FORMAT, EXCEL_COLUMNS, FIELD_MAP, MONTHS, YEAR_OPTIONS
from errors import WorkbookFormatError
from features import derive_features, parse_charge
from logger import get_logger
from summaries import YtdMatrix, city_summary, client_summary, company_summary

log = get_logger("excel_io")

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXCEL_EPOCH = datetime(1899, 12, 30)
_SHEET_NAME = re.compile(r"^([A-Za-z]+)\s+(\d{4})$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_HEADER_TO_COL = {h.lower(): c for h, c in EXCEL_COLUMNS}
_COL_TO_KEY = {v: k for k, v in FIELD_MAP.items()}
_HEADER_FILL = PatternFill("solid", fgColor="FFE2E8F0")
_TOTAL_FILL = PatternFill("solid", fgColor="FFFDE68A")


# ---------- export ----------
def rows_for_excel(records: List[Dict[str, Any]]) -> pd.DataFrame:
    """Stored shipment dicts -> frame with workbook headers, charges as numbers."""
    data = {
        header: [
            parse_charge(r.get(_COL_TO_KEY[col])) if col == "shipping_charge"
            else ("" if r.get(_COL_TO_KEY[col]) is None else r.get(_COL_TO_KEY[col]))
            for r in records
        ]
        for header, col in EXCEL_COLUMNS
    }
    return pd.DataFrame(data, columns=[h for h, _ in EXCEL_COLUMNS])


def autosize_columns(ws, min_width: int = 8, max_width: int = 42, buffer: int = 2) -> None:
    for idx, column in enumerate(ws.iter_cols(), start=1):
        longest = 0
        numeric = False
        for cell in column:
            if cell.value is None:
                continue
            longest = max(longest, len(str(cell.value)))
            numeric = numeric or ("0" in (cell.number_format or "") and isinstance(cell.value, (int, float)))
        if numeric:
            longest += 2
        ws.column_dimensions[get_column_letter(idx)].width = min(max(longest + buffer, min_width), max_width)


def _style_data_sheet(ws, charge_col: int, fill: Optional[PatternFill] = None) -> None:
    ws.freeze_panes = "A2"
    for cell in ws[1]:
        cell.font = Font(bold=True)
        if fill is not None:
            cell.fill = fill
    for row in ws.iter_rows(min_row=2, min_col=charge_col, max_col=charge_col):
        for cell in row:
            cell.number_format = CURRENCY_FORMAT
    autosize_columns(ws, min_width=10, max_width=40)


def _write_data_sheet(writer: pd.ExcelWriter, title: str, frame: pd.DataFrame,
                      fill: Optional[PatternFill] = None) -> str:
    name = title[:31]
    frame.to_excel(writer, sheet_name=name, index=False)
    charge_col = list(frame.columns).index("Charges") + 1
    _style_data_sheet(writer.sheets[name], charge_col, fill)
    return name


def _write_ytd_sheet(writer: pd.ExcelWriter, matrix: YtdMatrix) -> None:
    frame = matrix.rows.rename(columns={"company": "Company", "total": "Total"})
    totals_row = {"Company": "TOTAL", **matrix.monthly_totals.to_dict(), "Total": matrix.grand_total}
    frame = pd.concat([frame, pd.DataFrame([totals_row])], ignore_index=True)
    frame.to_excel(writer, sheet_name="YTD Summary", index=False)

    ws = writer.sheets["YTD Summary"]
    ws.freeze_panes = "A2"
    ws.auto_filter.ref = f"A1:{get_column_letter(len(frame.columns))}1"
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.fill = PatternFill("solid", fgColor="FFEFF6FF")
    for cell in ws[ws.max_row]:
        cell.font = Font(bold=True)
        cell.fill = _TOTAL_FILL
    for row in ws.iter_rows(min_row=2, min_col=2, max_col=len(frame.columns)):
        for cell in row:
            cell.number_format = CURRENCY_FORMAT
    autosize_columns(ws, min_width=10, max_width=32)


def _write_summary_sheet(writer: pd.ExcelWriter, df: pd.DataFrame) -> None:
    """Company / client / city summaries stacked on one sheet."""
    start = 0
    for title, table in (
        ("Cost per Company", company_summary(df)),
        ("Client Stats", client_summary(df)),
        ("City Stats", city_summary(df)),
    ):
        pd.DataFrame({title: []}).to_excel(writer, sheet_name="Summary", index=False, startrow=start)
        table.to_excel(writer, sheet_name="Summary", index=False, startrow=start + 1)
        start += len(table) + 4
    ws = writer.sheets["Summary"]
    for row in ws.iter_rows():
        for cell in row:
            if isinstance(cell.value, float):
                cell.number_format = CURRENCY_FORMAT
    autosize_columns(ws, min_width=10, max_width=40)


def build_month_workbook(title: str, records: List[Dict[str, Any]],
                         ytd: Optional[YtdMatrix] = None) -> bytes:
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        _write_data_sheet(writer, title, rows_for_excel(records))
        if ytd is not None:
            _write_ytd_sheet(writer, ytd)
        _write_summary_sheet(writer, derive_features(data_io.records_to_frame(records)))
    log.info("month workbook built", extra={"extra_data": {"title": title, "rows": len(records)}})
    return out.getvalue()


def build_all_months_workbook(year: int, month_to_records: Dict[str, List[Dict[str, Any]]]) -> bytes:
    out = io.BytesIO()
    all_rows = []
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        for month in MONTHS:
            frame = rows_for_excel(month_to_records.get(month) or [])
            _write_data_sheet(writer, f"{month} {year}", frame)
            all_rows.append(frame.assign(Year=year, Month=month))
        combined = pd.concat(all_rows, ignore_index=True)
        combined = combined[["Year", "Month", *[h for h, _ in EXCEL_COLUMNS]]]
        _write_data_sheet(writer, "All Rows", combined, fill=_HEADER_FILL)
    log.info("all-months workbook built", extra={"extra_data": {"year": year, "rows": len(combined)}})
    return out.getvalue()


# ---------- import ----------
def excel_serial_to_date(serial: float) -> date:
    return (EXCEL_EPOCH + timedelta(milliseconds=round(float(serial) * 86400000))).date()


def parse_date_cell(value: Any) -> str:
    if value is None or (isinstance(value, float) and np.isnan(value)) or value is pd.NaT or value == "":
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, (int, float, np.number)):
        return excel_serial_to_date(value).isoformat()
    text = str(value).strip()
    if _ISO_DATE.match(text):
        return text
    parsed = pd.to_datetime(text, errors="coerce")
    return text if pd.isna(parsed) else parsed.strftime("%Y-%m-%d")


def _text_cell(value: Any) -> str:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_sheet(frame: pd.DataFrame, first_id: int = 0) -> List[Dict[str, Any]]:
    """Rows of one month sheet -> stored shipment dicts; rows with no ref, company or charge are dropped."""
    columns = {c: _HEADER_TO_COL[str(c).strip().lower()] for c in frame.columns
               if str(c).strip().lower() in _HEADER_TO_COL}
    out = []
    for offset, row in enumerate(frame.to_dict(orient="records"), start=2):
        rec = {"id": first_id + offset, **{k: "" for k in FIELD_MAP if k != "id"}, "shippingCharge": 0.0}
        for header, col in columns.items():
            key = _COL_TO_KEY[col]
            val = row.get(header)
            if col == "shipping_charge":
                rec[key] = parse_charge(val)
            elif col in ("ship_date", "return_date"):
                rec[key] = parse_date_cell(val)
            else:
                rec[key] = _text_cell(val)
        if rec["refNum"] or rec["company"] or rec["shippingCharge"] > 0:
            out.append(rec)
    return out


def parse_workbook(data: bytes, fallback_year: int) -> Dict[Tuple[str, int], List[Dict[str, Any]]]:
    sheets = pd.read_excel(io.BytesIO(data), sheet_name=None, dtype=object, engine="openpyxl")
    base_id = int(datetime.now().timestamp() * 1000)
    out: Dict[Tuple[str, int], List[Dict[str, Any]]] = {}
    for name, frame in sheets.items():
        m = _SHEET_NAME.match(str(name).strip())
        if not m or m.group(1) not in MONTHS:
            continue
        year = int(m.group(2))
        year = year if year in YEAR_OPTIONS else fallback_year
        out[(m.group(1), year)] = parse_sheet(frame, first_id=base_id + len(out) * 100000)
    if not out:
        raise WorkbookFormatError(
            'No month sheets found (expecting tabs like "January 2025"). Nothing imported.'
        )
    return out


def import_workbook(store, data: bytes, fallback_year: int) -> List[Tuple[str, int, int]]:
    """Overwrite every month found in the workbook; returns (month, year, rows) in calendar order."""
    parsed = parse_workbook(data, fallback_year)
    changed = []
    for (month, year), rows in parsed.items():
        data_io.save_month(store, year, month, rows)
        changed.append((month, year, len(rows)))
    changed.sort(key=lambda c: (c[1], MONTHS.index(c[0])))
    log.info("workbook imported", extra={"extra_data": {"months": len(changed)}})
    return changed
