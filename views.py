# views.py
"""One render function per dashboard tab; each takes the DashboardView built in app.py."""
from __future__ import annotations
from typing import Dict, List
import streamlit as st
import pandas as pd

import data_io
from aggregations import (
    breakdown_matrix, chart_series, comparison_table, entity_detail, geographic_stats,
    monthly_breakdown, pie_series, radar_series,
)
from charts import (
    geographic_chart, monthly_chart, performance_profile_chart, revenue_chart,
    revenue_distribution_chart, revenue_vs_volume_chart, show_chart, summary_bar_chart,
)
from constants import DIMENSIONS, EXCEL_COLUMNS, MAX_COMPARE, MONTHS, YTD
from errors import ReadOnlyPeriodError, StoreError
from features import derive_features
from filters import DashboardView
from insights import generate_insights
from logger import get_logger
from summaries import city_summary, client_summary, company_summary, sort_shipments, ytd_matrix
from tables import (
    breakdown_view, comparison_view, entity_shipments_table, money, ranking_table,
    shipments_editor, ytd_table,
)

log = get_logger("views")

TABS = [
    ("overview", "📊 Overview"),
    ("charts", "📈 Visual Charts"),
    ("rankings", "🏆 Rankings"),
    ("insights", "💡 Insights"),
    ("comparison", "⚖️ Compare"),
    ("breakdown", "🔍 Breakdown"),
    ("individual", "👤 Individual"),
    ("geographic", "🗺️ Geographic"),
    ("monthly", "📅 Monthly"),
    ("shipments", "🚚 Shipments"),
]

_INSIGHT_BOX = {"success": st.success, "warning": st.warning, "info": st.info}


def _label(view: DashboardView) -> str:
    return DIMENSIONS[view.state.dimension]


def render_overview(view: DashboardView) -> None:
    st.subheader(f"Top 10 by {_label(view)}")
    top = view.by_revenue.head(10)
    if top.empty:
        st.info("No shipments match the current filters.")
        return
    total = view.totals["total_revenue"]
    for i, row in enumerate(top.itertuples(index=False)):
        pct = row.revenue / total * 100 if total else 0.0
        c1, c2, c3 = st.columns([1, 6, 3])
        c1.markdown(f"**{i + 1}**")
        c2.markdown(f"**{row.name}**  \n{row.count} shipments")
        c2.progress(min(max(pct / 100, 0.0), 1.0))
        c3.markdown(f"**{money(row.revenue)}**  \n{money(row.avg_per_shipment)} avg")

    df = view.df
    l, r = st.columns(2)
    with l:
        show_chart(summary_bar_chart(company_summary(df), "company"), "Cost per Company", "cost_per_company")
        show_chart(summary_bar_chart(client_summary(df), "client"), "Client Stats", "client_stats")
    with r:
        show_chart(summary_bar_chart(company_summary(df), "company", value="count"), "Shipment Count", "shipment_count")
        show_chart(revenue_distribution_chart(company_summary(df)), "Revenue Distribution", "revenue_distribution")
    show_chart(summary_bar_chart(city_summary(df), "city"), "City Stats", "city_stats")


def render_visual_charts(view: DashboardView) -> None:
    series = chart_series(view.by_revenue)
    if series.empty:
        st.info("No shipments match the current filters.")
        return
    pie = pie_series(view.by_revenue, view.totals["total_revenue"])
    chart_type = view.state.chart_type
    show_chart(revenue_chart(series, chart_type, pie=pie), f"Visual Analytics - {_label(view)}", f"revenue_{chart_type}")
    show_chart(revenue_vs_volume_chart(series), "Revenue vs Volume Analysis", "revenue_vs_volume")
    show_chart(performance_profile_chart(radar_series(view.by_revenue)), "Performance Profile (Top 5)", "performance")


def render_rankings(view: DashboardView) -> None:
    c1, c2, c3 = st.columns(3)
    with c1:
        ranking_table(view.by_revenue, "revenue", "💰 Top by Revenue")
    with c2:
        ranking_table(view.by_volume, "count", "📦 Top by Volume")
    with c3:
        ranking_table(view.by_avg, "avg_per_shipment", "📊 Top by Avg Value")


def render_insights(view: DashboardView) -> None:
    found = generate_insights(
        view.current, view.by_revenue, view.totals["total_revenue"],
        view.totals["avg_per_shipment"], view.state.dimension,
    )
    if not found:
        st.info("No insights for the current selection.")
    for ins in found:
        _INSIGHT_BOX[ins.kind](f"**{ins.title}**: {ins.message}", icon=ins.icon)


def render_comparison(view: DashboardView) -> None:
    options = list(view.current["name"])
    default = [e for e in view.state.entities if e in options][:MAX_COMPARE]
    picked = st.multiselect(
        f"Select entities to compare (up to {MAX_COMPARE})", options,
        default=default, max_selections=MAX_COMPARE, key="compare_entities",
    )
    st.caption(f"{len(picked)}/{MAX_COMPARE} selected")
    comparison_view(comparison_table(view.current, picked, view.totals["total_revenue"]))


def render_breakdown(view: DashboardView) -> None:
    breakdown_view(breakdown_matrix(view.df, row_stats=view.stats["company"], col_stats=view.stats["state"]))


def render_individual(view: DashboardView) -> None:
    names = list(view.current["name"])
    if not names:
        st.info("No data available. Please select a dimension with data.")
        return
    preferred = view.state.entities[0] if view.state.entities and view.state.entities[0] in names else names[0]
    name = st.selectbox("Select Entity", names, index=names.index(preferred), key="individual_entity")
    detail = entity_detail(view.df, view.state.dimension, name, view.totals["total_revenue"])
    if detail is None:
        st.info("No shipments for this entity.")
        return
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Revenue", money(detail.revenue))
    c2.metric("Total Shipments", f"{detail.count:,}")
    c3.metric("Avg per Shipment", money(detail.avg_per_shipment))
    c4.metric("Market Share", f"{detail.market_share:.1f}%")

    months = monthly_breakdown(detail.shipments)
    if not months.empty:
        st.subheader("Monthly Breakdown")
        st.dataframe(months.style.format({"revenue": money}), hide_index=True, use_container_width=True)
    entity_shipments_table(detail)


def render_geographic(view: DashboardView) -> None:
    geo = geographic_stats(view.stats["state"], view.totals["total_revenue"])
    if geo.empty:
        st.info("No shipments match the current filters.")
        return
    show_chart(geographic_chart(geo), "Revenue by State", "geographic")
    st.dataframe(
        geo.head(20).rename(columns={"name": "State", "count": "Shipments", "revenue": "Revenue",
                                     "avg_per_shipment": "Avg", "intensity": "% of Revenue"})
        .style.format({"Revenue": money, "Avg": money, "% of Revenue": "{:.1f}%"}),
        hide_index=True,
        use_container_width=True,
    )


def render_monthly(store, year: int) -> None:
    try:
        by_month = data_io.load_all_months(store, year)
    except StoreError as e:
        st.error(str(e))
        return
    matrix = ytd_matrix({m: derive_features(data_io.records_to_frame(r)) for m, r in by_month.items()})
    show_chart(monthly_chart(matrix.monthly_totals), f"Monthly Revenue {year}", f"monthly_{year}")
    ytd_table(matrix.rows, matrix.monthly_totals, matrix.grand_total)


def render_shipments(store, year: int, month: str, df: pd.DataFrame, references: Dict[str, List[str]]) -> None:
    read_only = month == YTD
    sort_options = ["(none)", *[c for _, c in EXCEL_COLUMNS]]
    headers = {c: h for h, c in EXCEL_COLUMNS}
    s1, s2, s3 = st.columns([3, 2, 3])
    sort_key = s1.selectbox("Sort by", sort_options, format_func=lambda c: headers.get(c, c), key="sort_key")
    direction = s2.radio("Direction", ["asc", "desc"], horizontal=True, key="sort_dir")
    shown = sort_shipments(df, None if sort_key == "(none)" else sort_key, direction)

    if read_only:
        st.caption("YTD rows are read-only. Add new rows to a target month.")
        target = s3.selectbox("Target month", MONTHS, key="edit_target_month")
    edited = shipments_editor(shown, references, read_only=read_only, key=f"editor_{year}_{month}")

    b1, b2, _ = st.columns([2, 2, 6])
    if read_only:
        if b1.button("+ Add Row", key="add_row_ytd"):
            try:
                data_io.add_row(store, year, target, references)
            except StoreError:
                log.exception("add row failed")
                st.error("Failed to add row to target month.")
            else:
                st.success(f"Row added to {target} {year}.")
        return

    if b1.button("+ Add Row", key="add_row"):
        try:
            data_io.add_row(store, year, month, references)
        except StoreError:
            log.exception("add row failed")
            st.error("Failed to save. Please check your connection.")
        else:
            st.rerun()
    if b2.button("💾 Save changes", type="primary", key="save_rows"):
        try:
            data_io.save_month(store, year, month, data_io.frame_to_records(edited))
        except (StoreError, ReadOnlyPeriodError) as e:
            log.exception("save failed")
            st.error(f"Failed to save. {e}")
        else:
            st.toast(f"Saved {month} {year}")
            st.rerun()
