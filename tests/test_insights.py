import pandas as pd

from aggregations import group_stats, rank_by
from insights import generate_insights


def test_insights_in_order(shipments):
    stats = group_stats(shipments, "company")
    found = generate_insights(stats, rank_by(stats, "revenue"), 2100.0, 420.0, "company")
    assert [i.title for i in found] == [
        "Top Performer", "Concentration Risk", "High-Value Opportunities", "Underperformers",
    ]
    assert found[0].message == "KOL leads with $1,500.00 (71.4% market share)"
    assert "95.2%" in found[1].message
    assert found[2].message.startswith("1 company(s)")
    assert found[3].message.startswith("3 company(s)")


def test_no_concentration_warning_when_spread_out():
    stats = pd.DataFrame({
        "name": list("abcdef"), "count": [5] * 6,
        "revenue": [100.0] * 6, "avg_per_shipment": [20.0] * 6,
    })
    found = generate_insights(stats, stats, 600.0, 20.0, "agent")
    assert [i.title for i in found] == ["Top Performer"]


def test_empty_stats_yield_nothing():
    empty = pd.DataFrame(columns=["name", "count", "revenue", "avg_per_shipment"])
    assert generate_insights(empty, empty, 0.0, 0.0, "company") == []


def _spread(revenues):
    return pd.DataFrame({
        "name": [f"G{i}" for i in range(len(revenues))],
        "count": [5] * len(revenues),
        "revenue": [float(r) for r in revenues],
        "avg_per_shipment": [r / 5 for r in revenues],
    })


def test_concentration_uses_one_decimal_share():
    # top three hold 60.04% which shows as 60.0%: not above the threshold
    stats = _spread([3000, 2000, 1004, 1000, 1000, 1000, 996])
    titles = [i.title for i in generate_insights(stats, stats, 10000.0, 10000.0 / 35, "company")]
    assert "Concentration Risk" not in titles

    stats = _spread([3000, 2000, 1020, 1000, 1000, 1000, 980])
    found = generate_insights(stats, stats, 10000.0, 10000.0 / 35, "company")
    risk = [i for i in found if i.title == "Concentration Risk"]
    assert risk and "60.2%" in risk[0].message
