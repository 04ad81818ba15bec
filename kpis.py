from __future__ import annotations
from typing import Dict
import streamlit as st

from constants import KPI_FORMATS
from filters import DashboardView


def compute_kpis(view: DashboardView) -> Dict[str, float]:
    t = view.totals
    return dict(
        total_revenue=t["total_revenue"],
        total_shipments=int(t["total_shipments"]),
        avg_per_shipment=t["avg_per_shipment"],
        active_entities=int(len(view.current)),
        total_entities=int(len(view.stats[view.state.dimension])),
    )


def render_kpis(kpis: Dict[str, float]) -> None:
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Revenue", KPI_FORMATS["total_revenue"].format(kpis["total_revenue"]))
    c2.metric("Total Shipments", KPI_FORMATS["total_shipments"].format(kpis["total_shipments"]))
    c3.metric("Avg per Shipment", KPI_FORMATS["avg_per_shipment"].format(kpis["avg_per_shipment"]))
    c4.metric(
        "Active Entities",
        KPI_FORMATS["active_entities"].format(kpis["active_entities"]),
        help=f"of {kpis['total_entities']} total",
    )
