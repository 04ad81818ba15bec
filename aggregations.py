# aggregations.py
"""
Group-by / ranking passes over the shipment frame.

Every function takes the frame produced by ``features.derive_features`` (or a
stats frame produced by ``group_stats``) and returns a new DataFrame; nothing
is mutated in place.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List
import numpy as np
import pandas as pd

from constants import COLORS, DIMENSIONS, MAX_COMPARE, OTHERS, UNASSIGNED

STAT_COLS = ["name", "count", "revenue", "avg_per_shipment"]
RANK_METRICS = {"revenue", "count", "avg_per_shipment"}
_QUICK_PCT = {"top10": 0.10, "top25": 0.25, "bottom25": 0.25}
_MONTH_ORDER = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec", "Unknown"]


def group_keys(df: pd.DataFrame, dimension: str) -> pd.Series:
    """Dimension values with blanks folded into the '(Unassigned)' bucket."""
    if dimension not in df.columns:
        return pd.Series(UNASSIGNED, index=df.index, dtype=object)
    keys = df[dimension].fillna("").astype(str).str.strip()
    return keys.mask(keys == "", UNASSIGNED)


def group_stats(df: pd.DataFrame, dimension: str) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=STAT_COLS).astype(
            {"count": int, "revenue": float, "avg_per_shipment": float}
        )
    g = (
        df.assign(_key=group_keys(df, dimension))
        .groupby("_key", sort=False)["shipping_charge"]
        .agg(count="size", revenue="sum")
        .reset_index()
        .rename(columns={"_key": "name"})
    )
    g["revenue"] = g["revenue"].astype(float)
    g["avg_per_shipment"] = np.where(g["count"] > 0, g["revenue"] / g["count"].clip(lower=1), 0.0)
    return g[STAT_COLS]


def dimension_stats(
    df: pd.DataFrame,
    min_revenue: float = 0.0,
    max_revenue: float = math.inf,
) -> Dict[str, pd.DataFrame]:
    return {dim: revenue_range(group_stats(df, dim), min_revenue, max_revenue) for dim in DIMENSIONS}


def revenue_range(stats: pd.DataFrame, min_revenue: float = 0.0, max_revenue: float = math.inf) -> pd.DataFrame:
    """Groups whose revenue lies in [min, max]; group order is kept."""
    keep = (stats["revenue"] >= min_revenue) & (stats["revenue"] <= max_revenue)
    return stats[keep].reset_index(drop=True)


def select_entities(stats: pd.DataFrame, names: Iterable[str]) -> pd.DataFrame:
    names = list(names or [])
    if not names:
        return stats
    return stats[stats["name"].isin(names)].reset_index(drop=True)


def apply_quick_filter(stats: pd.DataFrame, mode: str) -> pd.DataFrame:
    if mode not in _QUICK_PCT:
        return stats
    ranked = rank_by(stats, "revenue")
    n = math.ceil(len(ranked) * _QUICK_PCT[mode])
    if n == 0:
        return ranked.iloc[0:0]
    picked = ranked.tail(n) if mode.startswith("bottom") else ranked.head(n)
    return picked.reset_index(drop=True)


def rank_by(stats: pd.DataFrame, metric: str) -> pd.DataFrame:
    if metric not in RANK_METRICS:
        raise ValueError(f"Cannot rank by {metric!r}")
    return stats.sort_values(metric, ascending=False, kind="stable").reset_index(drop=True)


def totals(df: pd.DataFrame) -> Dict[str, float]:
    total_revenue = float(df["shipping_charge"].sum()) if not df.empty else 0.0
    total_shipments = int(len(df))
    avg = total_revenue / total_shipments if total_shipments else 0.0
    return dict(
        total_revenue=total_revenue,
        total_shipments=total_shipments,
        avg_per_shipment=avg,
    )


def share(value: float, total: float) -> float:
    return value / total * 100.0 if total > 0 else 0.0


def _truncate(name: str, width: int, suffix: str = "") -> str:
    return name[:width] + suffix if len(name) > width else name


# ---------- chart-ready series ----------
def chart_series(ranked: pd.DataFrame, top_n: int = 10) -> pd.DataFrame:
    top = ranked.head(top_n).reset_index(drop=True)
    return pd.DataFrame({
        "label": [_truncate(n, 15, "...") for n in top["name"]],
        "full_name": top["name"],
        "revenue": top["revenue"].round(2),
        "shipments": top["count"].astype(int),
        "avg_value": top["avg_per_shipment"].round(2),
        "fill": [COLORS[i % len(COLORS)] for i in range(len(top))],
    })


def pie_series(ranked: pd.DataFrame, total_revenue: float, top_n: int = 8) -> pd.DataFrame:
    top = ranked.head(top_n)
    rows = [
        {"name": r.name, "value": round(r.revenue, 2), "percentage": round(share(r.revenue, total_revenue), 1)}
        for r in top.itertuples(index=False)
    ]
    other = float(ranked["revenue"].iloc[top_n:].sum())
    if other > 0:
        rows.append({"name": OTHERS, "value": round(other, 2), "percentage": round(share(other, total_revenue), 1)})
    return pd.DataFrame(rows, columns=["name", "value", "percentage"])


def radar_series(ranked: pd.DataFrame, top_n: int = 5) -> pd.DataFrame:
    """Top entities scored 0-100 against the best of the group on each metric."""
    top = ranked.head(top_n)
    cols = ["entity", "revenue", "volume", "avg_value"]
    if top.empty:
        return pd.DataFrame(columns=cols)

    def _scale(s: pd.Series) -> pd.Series:
        peak = s.max()
        return s / peak * 100.0 if peak > 0 else s * 0.0

    return pd.DataFrame({
        "entity": [n[:10] for n in top["name"]],
        "revenue": _scale(top["revenue"]).to_numpy(),
        "volume": _scale(top["count"].astype(float)).to_numpy(),
        "avg_value": _scale(top["avg_per_shipment"]).to_numpy(),
    })[cols]


def geographic_stats(state_stats: pd.DataFrame, total_revenue: float) -> pd.DataFrame:
    """State groups (already range-filtered) with their share of total revenue."""
    stats = state_stats.copy()
    stats["intensity"] = stats["revenue"] / (total_revenue or 1) * 100.0
    return rank_by(stats, "revenue")


# ---------- comparison / breakdown / individual ----------
def comparison_table(stats: pd.DataFrame, names: List[str], total_revenue: float) -> pd.DataFrame:
    """Metric rows by entity columns; at most MAX_COMPARE entities."""
    picked = list(dict.fromkeys(names))[:MAX_COMPARE]
    by_name = stats.set_index("name")
    data = {}
    for name in picked:
        if name in by_name.index:
            row = by_name.loc[name]
            revenue, count, avg = float(row["revenue"]), int(row["count"]), float(row["avg_per_shipment"])
        else:
            revenue, count, avg = 0.0, 0, 0.0
        data[name] = [revenue, count, avg, share(revenue, total_revenue)]
    return pd.DataFrame(
        data,
        index=["Total Revenue", "Shipments", "Avg per Shipment", "Market Share"],
        columns=picked,
    )


def breakdown_matrix(
    df: pd.DataFrame,
    row_dim: str = "company",
    col_dim: str = "state",
    rows: int = 10,
    cols: int = 5,
    row_stats: pd.DataFrame | None = None,
    col_stats: pd.DataFrame | None = None,
) -> pd.DataFrame:
    """
    Revenue cross-tab of the first ``rows`` row groups by the first ``cols`` column groups.

    Pass ``row_stats`` / ``col_stats`` (e.g. revenue-filtered group stats) to
    restrict which groups appear; otherwise every group of ``df`` is a candidate.
    """
    row_stats = (group_stats(df, row_dim) if row_stats is None else row_stats).head(rows)
    col_names = list((group_stats(df, col_dim) if col_stats is None else col_stats)["name"].head(cols))
    if row_stats.empty:
        return pd.DataFrame(columns=["name", *col_names, "Total"])

    keyed = df.assign(_row=group_keys(df, row_dim), _col=group_keys(df, col_dim))
    pivot = keyed.pivot_table(
        index="_row", columns="_col", values="shipping_charge", aggfunc="sum", fill_value=0.0
    )
    pivot = pivot.reindex(index=list(row_stats["name"]), columns=col_names, fill_value=0.0)
    pivot.index.name = "name"
    pivot.columns.name = None
    out = pivot.reset_index()
    out["Total"] = row_stats["revenue"].to_numpy()
    return out


@dataclass
class EntityDetail:
    name: str
    shipments: pd.DataFrame
    revenue: float
    count: int
    avg_per_shipment: float
    market_share: float


def entity_detail(df: pd.DataFrame, dimension: str, name: str, total_revenue: float | None = None) -> EntityDetail | None:
    rows = df[group_keys(df, dimension) == name]
    if rows.empty:
        return None
    if total_revenue is None:
        total_revenue = totals(df)["total_revenue"]
    revenue = float(rows["shipping_charge"].sum())
    count = int(len(rows))
    return EntityDetail(
        name=name,
        shipments=rows,
        revenue=revenue,
        count=count,
        avg_per_shipment=revenue / count,
        market_share=share(revenue, total_revenue),
    )


def monthly_breakdown(shipments: pd.DataFrame) -> pd.DataFrame:
    """Count / revenue per short ship-date month; unparsable dates land in 'Unknown'."""
    if shipments.empty:
        return pd.DataFrame(columns=["month", "count", "revenue"])
    if "ship_month" in shipments.columns:
        months = shipments["ship_month"]
    else:
        dates = pd.to_datetime(shipments["ship_date"].replace("", np.nan), errors="coerce")
        months = dates.dt.strftime("%b").fillna("Unknown")
    g = (
        shipments.assign(month=months)
        .groupby("month")["shipping_charge"]
        .agg(count="size", revenue="sum")
        .reset_index()
    )
    g["_order"] = g["month"].map({m: i for i, m in enumerate(_MONTH_ORDER)})
    return g.sort_values("_order").drop(columns="_order").reset_index(drop=True)
