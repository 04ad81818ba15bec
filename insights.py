from __future__ import annotations
from dataclasses import dataclass
from typing import List
import pandas as pd

from aggregations import share
from constants import DIMENSIONS

CONCENTRATION_THRESHOLD = 60.0
HIGH_VALUE_FACTOR = 1.5
LOW_ACTIVITY_COUNT = 3


@dataclass(frozen=True)
class Insight:
    kind: str  # success | warning | info
    icon: str
    title: str
    message: str


def _money(v: float) -> str:
    return f"${v:,.2f}"


def generate_insights(
    stats: pd.DataFrame,
    ranked: pd.DataFrame,
    total_revenue: float,
    avg_per_shipment: float,
    dimension: str,
) -> List[Insight]:
    """
    Rule-based observations about the current dimension view.

    ``stats`` is the filtered group view, ``ranked`` the same view sorted by
    revenue. Thresholds compare against the overall (unfiltered) totals.
    """
    if stats.empty:
        return []

    label = DIMENSIONS.get(dimension, dimension).lower()
    out: List[Insight] = []

    top = ranked.iloc[0]
    out.append(Insight(
        "success", "🏆", "Top Performer",
        f"{top['name']} leads with {_money(top['revenue'])} "
        f"({share(top['revenue'], total_revenue):.1f}% market share)",
    ))

    top3_share = share(float(ranked["revenue"].head(3).sum()), total_revenue)
    if round(top3_share, 1) > CONCENTRATION_THRESHOLD:
        out.append(Insight(
            "warning", "⚠️", "Concentration Risk",
            f"Top 3 {label}s account for {top3_share:.1f}% of revenue - consider diversification",
        ))

    high_value = stats[stats["avg_per_shipment"] > avg_per_shipment * HIGH_VALUE_FACTOR]
    if len(high_value):
        out.append(Insight(
            "info", "💎", "High-Value Opportunities",
            f"{len(high_value)} {label}(s) have 50%+ higher average shipment value",
        ))

    low = stats[(stats["count"] < LOW_ACTIVITY_COUNT) & (stats["revenue"] < avg_per_shipment * 3)]
    if len(low):
        out.append(Insight(
            "warning", "📉", "Underperformers",
            f"{len(low)} {label}(s) with low activity - review or optimize",
        ))

    return out
