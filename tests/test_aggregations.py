import math

import pandas as pd
import pytest

from aggregations import (
    apply_quick_filter, breakdown_matrix, chart_series, comparison_table, dimension_stats,
    entity_detail, geographic_stats, group_stats, monthly_breakdown, pie_series, radar_series,
    rank_by, select_entities, share, totals,
)
from constants import OTHERS, UNASSIGNED


def _stats(revenues):
    return pd.DataFrame({
        "name": [f"E{i}" for i in range(len(revenues))],
        "count": [1] * len(revenues),
        "revenue": [float(r) for r in revenues],
        "avg_per_shipment": [float(r) for r in revenues],
    })


def test_group_stats_folds_blanks_into_unassigned(shipments):
    stats = group_stats(shipments, "company")
    assert list(stats["name"]) == ["KOL", "CRANE", "COWBOYS", UNASSIGNED]
    kol = stats.set_index("name").loc["KOL"]
    assert kol["count"] == 2
    assert kol["revenue"] == 1500.0
    assert kol["avg_per_shipment"] == 750.0


def test_group_stats_empty_frame():
    stats = group_stats(pd.DataFrame(columns=["company", "shipping_charge"]), "company")
    assert stats.empty
    assert list(stats.columns) == ["name", "count", "revenue", "avg_per_shipment"]


def test_totals(shipments):
    t = totals(shipments)
    assert t["total_revenue"] == 2100.0
    assert t["total_shipments"] == 5
    assert t["avg_per_shipment"] == 420.0


def test_share_guards_zero_total():
    assert share(50, 200) == 25.0
    assert share(50, 0) == 0.0


def test_dimension_stats_applies_revenue_range(shipments):
    stats = dimension_stats(shipments, min_revenue=250, max_revenue=math.inf)
    assert set(stats["company"]["name"]) == {"KOL", "CRANE"}
    assert set(stats) == {"company", "agent", "client", "city", "state", "location", "ship_method", "vehicle_type"}


def test_select_entities_empty_selection_keeps_all(shipments):
    stats = group_stats(shipments, "company")
    assert len(select_entities(stats, [])) == 4
    assert list(select_entities(stats, ["CRANE"])["name"]) == ["CRANE"]


@pytest.mark.parametrize("mode, expected", [
    ("all", ["KOL", "CRANE", "COWBOYS", UNASSIGNED]),
    ("top10", ["KOL"]),
    ("top25", ["KOL"]),
    ("bottom25", [UNASSIGNED]),
])
def test_apply_quick_filter(shipments, mode, expected):
    stats = group_stats(shipments, "company")
    assert list(rank_by(apply_quick_filter(stats, mode), "revenue")["name"]) == expected


def test_rank_by_is_stable_and_validates_metric():
    stats = pd.DataFrame({
        "name": ["a", "b", "c"], "count": [1, 3, 3],
        "revenue": [5.0, 5.0, 9.0], "avg_per_shipment": [5.0, 1.7, 3.0],
    })
    assert list(rank_by(stats, "revenue")["name"]) == ["c", "a", "b"]
    assert list(rank_by(stats, "count")["name"]) == ["b", "c", "a"]
    with pytest.raises(ValueError):
        rank_by(stats, "margin")


def test_chart_series_truncates_labels():
    stats = _stats([100])
    stats.loc[0, "name"] = "A VERY LONG COMPANY NAME"
    series = chart_series(stats)
    assert series.loc[0, "label"] == "A VERY LONG COM..."
    assert series.loc[0, "full_name"] == "A VERY LONG COMPANY NAME"


def test_pie_series_groups_the_tail_into_others():
    ranked = _stats([10, 9, 8, 7, 6, 5, 4, 3, 2, 1])
    pie = pie_series(ranked, total_revenue=55.0)
    assert len(pie) == 9
    assert pie.iloc[-1]["name"] == OTHERS
    assert pie.iloc[-1]["value"] == 3.0
    assert pie.iloc[0]["percentage"] == 18.2


def test_radar_series_scales_to_best(shipments):
    ranked = rank_by(group_stats(shipments, "company"), "revenue")
    radar = radar_series(ranked)
    assert radar.loc[0, "revenue"] == 100.0
    assert radar.loc[1, "revenue"] == pytest.approx(20.0)
    assert radar.loc[0, "volume"] == 100.0


def test_geographic_stats_intensity(shipments):
    geo = geographic_stats(group_stats(shipments, "state"), 2100.0)
    assert geo.loc[0, "name"] == "IL"
    assert geo.loc[0, "intensity"] == pytest.approx(1500 / 2100 * 100)


def test_comparison_table_caps_and_zero_fills(shipments):
    stats = group_stats(shipments, "company")
    table = comparison_table(stats, ["KOL", "NOPE", "KOL"], 2100.0)
    assert list(table.columns) == ["KOL", "NOPE"]
    assert table.loc["Total Revenue", "KOL"] == 1500.0
    assert table.loc["Shipments", "NOPE"] == 0
    names = [f"E{i}" for i in range(8)]
    assert len(comparison_table(_stats(range(8)), names, 10.0).columns) == 5


def test_breakdown_matrix(shipments):
    matrix = breakdown_matrix(shipments)
    assert list(matrix.columns) == ["name", "IL", "NY", "MA", UNASSIGNED, "Total"]
    kol = matrix.set_index("name").loc["KOL"]
    assert kol["IL"] == 1500.0
    assert kol["NY"] == 0.0
    assert kol["Total"] == 1500.0
    assert matrix.set_index("name").loc[UNASSIGNED, UNASSIGNED] == 100.0


def test_entity_detail(shipments):
    detail = entity_detail(shipments, "company", "KOL", 2100.0)
    assert detail.count == 2
    assert detail.avg_per_shipment == 750.0
    assert detail.market_share == pytest.approx(71.428, rel=1e-3)
    assert entity_detail(shipments, "company", "NOPE") is None
    assert entity_detail(shipments, "company", UNASSIGNED).revenue == 100.0


def test_monthly_breakdown_calendar_order(shipments):
    months = monthly_breakdown(shipments)
    assert list(months["month"]) == ["Jan", "Feb", "Unknown"]
    assert list(months["count"]) == [3, 1, 1]
    assert months.loc[1, "revenue"] == 500.0
