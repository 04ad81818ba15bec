import math
from datetime import date

from aggregations import breakdown_matrix, geographic_stats
from constants import UNASSIGNED
from filters import (
    FilterState, apply_filters, coerce_revenue_range, current_month_name, default_year, focus_options,
)
from kpis import compute_kpis


def test_coerce_revenue_range():
    assert coerce_revenue_range(0, 0) == (0.0, math.inf)
    assert coerce_revenue_range(None, None) == (0.0, math.inf)
    assert coerce_revenue_range(500, 100) == (100.0, 500.0)
    assert coerce_revenue_range(50, 200) == (50.0, 200.0)


def test_period_defaults():
    assert default_year(date(2027, 6, 1)) == 2027
    assert default_year(date(2024, 6, 1)) == 2025
    assert current_month_name(date(2025, 3, 2)) == "March"


def test_apply_filters_quick_filter(shipments):
    view = apply_filters(shipments, FilterState(year=2025, month="January", quick_filter="top25"))
    assert list(view.current["name"]) == ["KOL"]
    # totals always describe the whole period
    assert view.totals["total_revenue"] == 2100.0


def test_apply_filters_entities_and_range(shipments):
    state = FilterState(year=2025, month="YTD", entities=["CRANE", UNASSIGNED], min_revenue=150.0)
    view = apply_filters(shipments, state)
    assert list(view.by_revenue["name"]) == ["CRANE"]
    assert set(view.stats["state"]["name"]) == {"IL", "NY", "MA"}


def test_compute_kpis(shipments):
    view = apply_filters(shipments, FilterState(year=2025, month="January", dimension="state"))
    kpis = compute_kpis(view)
    assert kpis["total_shipments"] == 5
    assert kpis["avg_per_shipment"] == 420.0
    assert kpis["active_entities"] == 4
    assert kpis["total_entities"] == 4


def test_state_and_breakdown_follow_revenue_range(shipments):
    view = apply_filters(shipments, FilterState(year=2025, month="January", min_revenue=250.0))
    geo = geographic_stats(view.stats["state"], view.totals["total_revenue"])
    assert list(geo["name"]) == ["IL", "NY"]
    matrix = breakdown_matrix(view.df, row_stats=view.stats["company"], col_stats=view.stats["state"])
    assert list(matrix["name"]) == ["KOL", "CRANE"]
    assert list(matrix.columns) == ["name", "IL", "NY", "Total"]
    assert matrix.set_index("name").loc["CRANE", "NY"] == 300.0


def test_focus_options_respect_revenue_range(shipments):
    assert focus_options(shipments, "company", 0.0, math.inf) == ["KOL", "CRANE", "COWBOYS", UNASSIGNED]
    assert focus_options(shipments, "company", 250.0, math.inf) == ["KOL", "CRANE"]
    assert focus_options(shipments, "company", 0.0, 250.0, limit=1) == ["COWBOYS"]
