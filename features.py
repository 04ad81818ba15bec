from __future__ import annotations
import pandas as pd
import numpy as np

from constants import SHIPMENT_COLS, TEXT_COLS


def parse_charge(value) -> float:
    """Charges may arrive as numbers, '$1,250.00' strings or blanks."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float, np.number)):
        return 0.0 if pd.isna(value) else float(value)
    cleaned = "".join(ch for ch in str(value) if ch.isdigit() or ch in ".-")
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def derive_features(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    for col in SHIPMENT_COLS:
        if col not in df.columns:
            df[col] = "" if col in TEXT_COLS else 0
    for col in TEXT_COLS:
        df[col] = df[col].fillna("").astype(str).str.strip()
    df["shipping_charge"] = df["shipping_charge"].map(parse_charge).astype(float)
    if "ship_date_dt" not in df.columns:
        df["ship_date_dt"] = pd.to_datetime(df["ship_date"].replace("", np.nan), errors="coerce")
    if "ship_month" not in df.columns:
        df["ship_month"] = df["ship_date_dt"].dt.strftime("%b").fillna("Unknown")
    return df
