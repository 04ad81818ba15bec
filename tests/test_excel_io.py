import io
from datetime import date, datetime

import pandas as pd
import pytest
from openpyxl import load_workbook

import data_io
import excel_io
from constants import MONTHS
from errors import WorkbookFormatError
from features import derive_features
from store import MemoryStore
from summaries import ytd_matrix


def test_excel_serial_dates():
    assert excel_io.excel_serial_to_date(45658) == date(2025, 1, 1)
    assert excel_io.parse_date_cell(45658.0) == "2025-01-01"
    assert excel_io.parse_date_cell(datetime(2025, 2, 3, 10, 0)) == "2025-02-03"
    assert excel_io.parse_date_cell("2025-03-04") == "2025-03-04"
    assert excel_io.parse_date_cell("03/04/2025") == "2025-03-04"
    assert excel_io.parse_date_cell(None) == ""
    assert excel_io.parse_date_cell(float("nan")) == ""


def test_rows_for_excel_uses_workbook_headers(records):
    frame = excel_io.rows_for_excel(records)
    assert list(frame.columns)[0] == "Reference #"
    assert "Charges" in frame.columns
    assert frame["Charges"].tolist() == [1000.0, 300.0, 200.0, 500.0, 100.0]


def test_month_workbook_sheets(records):
    ytd = ytd_matrix({"January": derive_features(data_io.records_to_frame(records))})
    data = excel_io.build_month_workbook("YTD 2025", records, ytd=ytd)
    wb = load_workbook(io.BytesIO(data))
    assert wb.sheetnames == ["YTD 2025", "YTD Summary", "Summary"]
    ws = wb["YTD 2025"]
    assert ws["A1"].value == "Reference #"
    assert ws["A1"].font.bold
    assert ws.freeze_panes == "A2"
    assert ws["L2"].number_format == "$#,##0.00"
    summary = wb["YTD Summary"]
    assert summary.cell(row=summary.max_row, column=1).value == "TOTAL"


def test_all_months_workbook_round_trip(records):
    data = excel_io.build_all_months_workbook(2025, {"January": records[:4], "March": records[4:]})
    wb = load_workbook(io.BytesIO(data))
    assert wb.sheetnames == [f"{m} 2025" for m in MONTHS] + ["All Rows"]

    parsed = excel_io.parse_workbook(data, fallback_year=2025)
    assert len(parsed) == 12
    january = parsed[("January", 2025)]
    assert [r["refNum"] for r in january] == ["R1", "R2", "R3", "R4"]
    assert january[0]["shipDate"] == "2025-01-05"
    assert january[3]["shippingCharge"] == 500.0
    assert january[0]["company"] == "KOL"
    assert [r["state"] for r in january] == ["IL", "NY", "MA", "IL"]
    assert parsed[("February", 2025)] == []
    # blank ref + company but a positive charge is kept
    assert len(parsed[("March", 2025)]) == 1


def test_parse_sheet_drops_empty_rows():
    frame = pd.DataFrame({
        "Reference #": ["R9", None, None],
        "Client": ["Acme", "Only client", None],
        "Company": ["KOL", None, None],
        "Charges": [10.0, 0.0, 25.0],
    })
    rows = excel_io.parse_sheet(frame)
    assert [r["refNum"] for r in rows] == ["R9", ""]
    assert rows[1]["shippingCharge"] == 25.0


def test_parse_workbook_without_month_sheets():
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        pd.DataFrame({"a": [1]}).to_excel(writer, sheet_name="Notes", index=False)
    with pytest.raises(WorkbookFormatError):
        excel_io.parse_workbook(out.getvalue(), fallback_year=2025)


def test_import_workbook_overwrites_months(records):
    store = MemoryStore()
    data_io.save_month(store, 2025, "February", records)
    data = excel_io.build_all_months_workbook(2025, {"January": records[:2]})
    changed = excel_io.import_workbook(store, data, fallback_year=2025)
    assert changed[0] == ("January", 2025, 2)
    assert [c[0] for c in changed] == MONTHS
    assert data_io.load_month(store, 2025, "February") == []
    assert len(data_io.load_month(store, 2025, "January")) == 2


def test_import_keeps_state(records):
    store = MemoryStore()
    data = excel_io.build_all_months_workbook(2025, {"January": records[:4]})
    excel_io.import_workbook(store, data, fallback_year=2025)
    assert [r["state"] for r in data_io.load_month(store, 2025, "January")] == ["IL", "NY", "MA", "IL"]
