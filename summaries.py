from __future__ import annotations
from dataclasses import dataclass
from typing import Dict
import numpy as np
import pandas as pd

from aggregations import group_keys
from constants import DATE_COLS, MONTHS


def company_summary(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=["company", "count", "total"])
    g = (
        df.assign(company=group_keys(df, "company"))
        .groupby("company", sort=False)["shipping_charge"]
        .agg(count="size", total="sum")
        .reset_index()
    )
    return g.sort_values("total", ascending=False, kind="stable").reset_index(drop=True)


def _named_summary(df: pd.DataFrame, col: str) -> pd.DataFrame:
    """Blank keys are skipped rather than bucketed; sorted by name."""
    if df.empty or col not in df.columns:
        return pd.DataFrame(columns=[col, "count", "total"])
    keys = df[col].fillna("").astype(str)
    rows = df[keys.str.strip() != ""]
    if rows.empty:
        return pd.DataFrame(columns=[col, "count", "total"])
    g = rows.groupby(col)["shipping_charge"].agg(count="size", total="sum").reset_index()
    order = g[col].str.lower().argsort(kind="stable").to_numpy()
    return g.iloc[order].reset_index(drop=True)


def client_summary(df: pd.DataFrame) -> pd.DataFrame:
    return _named_summary(df, "client")


def city_summary(df: pd.DataFrame) -> pd.DataFrame:
    return _named_summary(df, "city")


@dataclass
class YtdMatrix:
    rows: pd.DataFrame  # company, <month>..., total
    monthly_totals: pd.Series
    grand_total: float


def ytd_matrix(month_frames: Dict[str, pd.DataFrame]) -> YtdMatrix:
    """Company x month revenue for a whole year; companies sorted by yearly total."""
    frames = []
    for month in MONTHS:
        df = month_frames.get(month)
        if df is None or df.empty:
            continue
        frames.append(pd.DataFrame({
            "company": group_keys(df, "company").to_numpy(),
            "month": month,
            "shipping_charge": df["shipping_charge"].to_numpy(),
        }))
    if not frames:
        empty = pd.DataFrame(columns=["company", *MONTHS, "total"])
        return YtdMatrix(empty, pd.Series(0.0, index=MONTHS), 0.0)

    long = pd.concat(frames, ignore_index=True)
    wide = long.pivot_table(
        index="company", columns="month", values="shipping_charge", aggfunc="sum", fill_value=0.0
    ).reindex(columns=MONTHS, fill_value=0.0)
    wide["total"] = wide[MONTHS].sum(axis=1)
    wide = wide.sort_values("total", ascending=False, kind="stable")
    wide.columns.name = None
    rows = wide.reset_index()

    monthly_totals = wide[MONTHS].sum(axis=0)
    return YtdMatrix(rows, monthly_totals, float(monthly_totals.sum()))


def sort_shipments(df: pd.DataFrame, key: str | None, direction: str = "asc") -> pd.DataFrame:
    """Table sort: charges numerically, dates chronologically, everything else case-insensitively."""
    if not key or key not in df.columns:
        return df
    ascending = direction != "desc"
    if key == "shipping_charge":
        sort_key = lambda s: pd.to_numeric(s, errors="coerce").fillna(0.0)
    elif key in DATE_COLS:
        # blank dates sort as the epoch
        sort_key = lambda s: pd.to_datetime(s.replace("", np.nan), errors="coerce").fillna(pd.Timestamp(0))
    else:
        sort_key = lambda s: s.fillna("").astype(str).str.lower()
    return df.sort_values(key, ascending=ascending, key=sort_key, kind="stable")
