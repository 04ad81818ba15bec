# data_io.py
from __future__ import annotations
import itertools
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import numpy as np
import pandas as pd
import streamlit as st

from constants import (
    CONFIG_DOC, DATA_COLLECTION, DEFAULT_REFERENCES, FIELD_MAP, MONTHS,
    SHIP_METHODS, SHIPMENT_COLS, TEXT_COLS, VEHICLE_TYPES, YTD,
)
from errors import ReadOnlyPeriodError
from features import parse_charge
from logger import get_logger
from store import MemoryStore

log = get_logger("data_io")

SAMPLE_PATH = Path(__file__).parent / "sample_shipments.csv"
_COLUMN_TO_KEY = {v: k for k, v in FIELD_MAP.items()}
_ID_SEQ = itertools.count()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def month_path(year: int, month: str) -> str:
    return f"{DATA_COLLECTION}/{year}/months/{month}"


# ---------- record <-> frame ----------
def records_to_frame(records: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    rows = [{FIELD_MAP[k]: v for k, v in (r or {}).items() if k in FIELD_MAP} for r in records]
    df = pd.DataFrame(rows)
    for col in SHIPMENT_COLS:
        if col not in df.columns:
            df[col] = "" if col in TEXT_COLS else 0
    return df[SHIPMENT_COLS]


def frame_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    out = []
    for row in df.to_dict(orient="records"):
        rec: Dict[str, Any] = {}
        for col, key in _COLUMN_TO_KEY.items():
            val = row.get(col)
            if col == "shipping_charge":
                rec[key] = parse_charge(val)
            elif col == "id":
                rec[key] = _coerce_id(val)
            else:
                rec[key] = "" if val is None or (isinstance(val, float) and np.isnan(val)) else str(val)
        out.append(rec)
    return out


def _new_id() -> int:
    # ms timestamp, bumped so rows created in one pass stay distinct
    return int(time.time() * 1000) + next(_ID_SEQ)


def _coerce_id(val) -> int:
    try:
        return int(float(val))
    except (TypeError, ValueError):
        return _new_id()


def default_shipment(references: Dict[str, List[str]]) -> Dict[str, Any]:
    def first(kind: str) -> str:
        values = references.get(kind) or []
        return values[0] if values else ""

    return {
        "id": _new_id(),
        "refNum": "",
        "client": "",
        "shipDate": "",
        "returnDate": "",
        "location": first("locations"),
        "returnLocation": "",
        "city": "",
        "state": "",
        "company": first("companies"),
        "shipMethod": SHIP_METHODS[0],
        "vehicleType": VEHICLE_TYPES[0],
        "shippingCharge": 0,
        "po": "",
        "agent": first("agents"),
    }


# ---------- months ----------
def load_month(store, year: int, month: str) -> List[Dict[str, Any]]:
    doc = store.get(month_path(year, month))
    return list((doc or {}).get("shipments") or [])


def load_all_months(store, year: int) -> Dict[str, List[Dict[str, Any]]]:
    return {m: load_month(store, year, m) for m in MONTHS}


def load_ytd(store, year: int) -> List[Dict[str, Any]]:
    by_month = load_all_months(store, year)
    return [s for m in MONTHS for s in by_month[m]]


def load_period(store, year: int, month: str) -> List[Dict[str, Any]]:
    return load_ytd(store, year) if month == YTD else load_month(store, year, month)


def save_month(store, year: int, month: str, shipments: List[Dict[str, Any]]) -> None:
    if month == YTD:
        raise ReadOnlyPeriodError(
            'In YTD view, existing rows are read-only. Use "+ Add Row" to add to your target month.'
        )
    if month not in MONTHS:
        raise ValueError(f"Unknown month: {month}")
    store.set(month_path(year, month), {
        "shipments": shipments,
        "lastModified": _now_iso(),
        "month": month,
        "year": year,
    })
    log.info("month saved", extra={"extra_data": {"year": year, "month": month, "rows": len(shipments)}})


def ensure_month(store, year: int, month: str, references: Dict[str, List[str]]) -> bool:
    """Seed one default row into a missing or empty month. Returns True when seeded."""
    if month == YTD:
        return False
    if load_month(store, year, month):
        return False
    save_month(store, year, month, [default_shipment(references)])
    return True


def add_row(store, year: int, month: str, references: Dict[str, List[str]]) -> List[Dict[str, Any]]:
    rows = load_month(store, year, month) + [default_shipment(references)]
    save_month(store, year, month, rows)
    return rows


# ---------- reference lists ----------
def load_references(store) -> Dict[str, List[str]]:
    """Read freight-config/global, writing defaults for any list that is missing."""
    doc = store.get(CONFIG_DOC)
    if doc is None:
        store.set(CONFIG_DOC, {**DEFAULT_REFERENCES, "createdAt": _now_iso(), "updatedAt": _now_iso()})
        return {k: list(v) for k, v in DEFAULT_REFERENCES.items()}

    missing = {k: v for k, v in DEFAULT_REFERENCES.items() if not isinstance(doc.get(k), list)}
    if missing:
        store.set(CONFIG_DOC, {**missing, "updatedAt": _now_iso()}, merge=True)

    return {
        k: list(doc[k]) if isinstance(doc.get(k), list) and doc[k] else list(default)
        for k, default in DEFAULT_REFERENCES.items()
    }


def save_reference_list(store, kind: str, values: List[str]) -> None:
    store.set(CONFIG_DOC, {kind: values, "updatedAt": _now_iso()}, merge=True)
    log.info("reference list saved", extra={"extra_data": {"kind": kind, "size": len(values)}})


# ---------- sample mode ----------
@st.cache_data
def _read_sample(path: str) -> pd.DataFrame:
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def load_sample(path: Optional[Path] = None) -> MemoryStore:
    """A MemoryStore seeded from the sample CSV (``year`` and ``month`` columns pick the document)."""
    df = _read_sample(str(path or SAMPLE_PATH))
    err = validate_columns(df, ["year", "month"])
    if err:
        raise ValueError(err)
    store = MemoryStore()
    for (year, month), chunk in df.groupby(["year", "month"], sort=False):
        records = frame_to_records(chunk.drop(columns=["year", "month"]))
        save_month(store, int(year), month, records)
    return store


def validate_columns(df: pd.DataFrame, expected: Iterable[str]) -> Optional[str]:
    missing = [c for c in expected if c not in df.columns]
    return f"Missing required columns: {', '.join(missing)}" if missing else None
