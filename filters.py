# filters.py
from __future__ import annotations
import datetime as _dt
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple
import streamlit as st
import pandas as pd

from aggregations import (
    apply_quick_filter, dimension_stats, group_stats, rank_by, revenue_range, select_entities, totals,
)
from constants import CHART_TYPES, DIMENSIONS, MONTHS, MONTHS_WITH_YTD, QUICK_FILTERS, YEAR_OPTIONS


@dataclass
class FilterState:
    year: int
    month: str
    dimension: str = "company"
    min_revenue: float = 0.0
    max_revenue: float = math.inf
    quick_filter: str = "all"
    entities: List[str] = field(default_factory=list)
    chart_type: str = "bar"


@dataclass
class DashboardView:
    """Everything the tabs render, derived once per rerun."""
    df: pd.DataFrame
    stats: Dict[str, pd.DataFrame]  # every dimension, revenue range applied
    current: pd.DataFrame           # selected dimension after entities + quick filter
    by_revenue: pd.DataFrame
    by_volume: pd.DataFrame
    by_avg: pd.DataFrame
    totals: Dict[str, float]
    state: FilterState


# ---------- helpers ----------
def default_year(today: _dt.date | None = None) -> int:
    year = (today or _dt.date.today()).year
    return year if year in YEAR_OPTIONS else YEAR_OPTIONS[0]


def current_month_name(today: _dt.date | None = None) -> str:
    return MONTHS[(today or _dt.date.today()).month - 1]


def _defaults() -> Dict[str, Any]:
    return {
        "dimension": "company",
        "min_revenue": 0.0,
        "max_revenue": 0.0,  # 0 = no upper bound
        "quick_filter": "all",
        "entities": [],
        "chart_type": "bar",
    }


def _ensure_model() -> None:
    if "filters_model" not in st.session_state:
        st.session_state["filters_model"] = _defaults()
    if "_pending_clear" not in st.session_state:
        st.session_state["_pending_clear"] = False


def _consume_pending_clear() -> None:
    if st.session_state.get("_pending_clear", False):
        st.session_state["filters_model"] = _defaults()
        st.session_state["_pending_clear"] = False  # consume trigger


def _idx(options, value) -> int:
    try:
        return list(options).index(value)
    except ValueError:
        return 0


def coerce_revenue_range(min_val: float | None, max_val: float | None) -> Tuple[float, float]:
    """Blank/zero max means unbounded; a reversed range is swapped."""
    lo = float(min_val or 0.0)
    hi = float(max_val) if max_val else math.inf
    if hi < lo:
        lo, hi = hi, lo
    return max(lo, 0.0), hi


def focus_options(df: pd.DataFrame, dimension: str, lo: float, hi: float, limit: int = 30) -> List[str]:
    """Top groups by revenue inside the revenue range; the 'Focus on' choices."""
    ranked = rank_by(revenue_range(group_stats(df, dimension), lo, hi), "revenue")
    return list(ranked["name"].head(limit))


# ---------- public API ----------
def period_picker() -> Tuple[int, str]:
    st.sidebar.header("Period")
    year = st.sidebar.selectbox("Year", YEAR_OPTIONS, index=_idx(YEAR_OPTIONS, default_year()), key="period_year")
    month = st.sidebar.selectbox(
        "Month", MONTHS_WITH_YTD, index=_idx(MONTHS_WITH_YTD, current_month_name()), key="period_month"
    )
    return int(year), month


def sidebar_filters(df: pd.DataFrame, year: int, month: str) -> FilterState:
    st.sidebar.header("Filters")

    _ensure_model()
    _consume_pending_clear()
    model: Dict[str, Any] = st.session_state["filters_model"]

    dims = list(DIMENSIONS)
    dimension = st.sidebar.selectbox(
        "Analyze by", dims, index=_idx(dims, model["dimension"]), format_func=DIMENSIONS.get
    )
    min_val = st.sidebar.number_input("Min revenue", min_value=0.0, value=float(model["min_revenue"]), step=100.0)
    max_val = st.sidebar.number_input(
        "Max revenue (0 = no limit)", min_value=0.0, value=float(model["max_revenue"]), step=100.0
    )
    quick = list(QUICK_FILTERS)
    quick_val = st.sidebar.radio(
        "Quick filter", quick, index=_idx(quick, model["quick_filter"]), format_func=QUICK_FILTERS.get
    )

    # entity options follow the dimension and revenue range; drop selections that no longer exist
    lo, hi = coerce_revenue_range(min_val, max_val)
    options = focus_options(df, dimension, lo, hi)
    kept = [e for e in model["entities"] if e in options] if dimension == model["dimension"] else []
    entities = st.sidebar.multiselect("Focus on", options, default=kept)

    chart_type = st.sidebar.selectbox("Chart type", CHART_TYPES, index=_idx(CHART_TYPES, model["chart_type"]))

    st.sidebar.markdown("---")
    if st.sidebar.button("Remove filters", use_container_width=True):
        st.session_state["_pending_clear"] = True
        st.toast("Filters reset")

    st.session_state["filters_model"] = {
        "dimension": dimension,
        "min_revenue": min_val,
        "max_revenue": max_val,
        "quick_filter": quick_val,
        "entities": entities,
        "chart_type": chart_type,
    }

    return FilterState(
        year=year,
        month=month,
        dimension=dimension,
        min_revenue=lo,
        max_revenue=hi,
        quick_filter=quick_val,
        entities=entities,
        chart_type=chart_type,
    )


def apply_filters(df: pd.DataFrame, f: FilterState) -> DashboardView:
    """Revenue range on every dimension, then entity focus and quick filter on the selected one."""
    stats = dimension_stats(df, f.min_revenue, f.max_revenue)
    current = select_entities(stats[f.dimension], f.entities)
    current = apply_quick_filter(current, f.quick_filter)
    return DashboardView(
        df=df,
        stats=stats,
        current=current,
        by_revenue=rank_by(current, "revenue"),
        by_volume=rank_by(current, "count"),
        by_avg=rank_by(current, "avg_per_shipment"),
        totals=totals(df),
        state=f,
    )
