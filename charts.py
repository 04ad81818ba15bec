from __future__ import annotations
import pandas as pd
import altair as alt
import streamlit as st

from constants import COLORS, DIMENSIONS, MONTHS

_PALETTE = alt.Scale(range=COLORS)


def revenue_chart(series: pd.DataFrame, chart_type: str = "bar", pie: pd.DataFrame | None = None) -> alt.Chart:
    """Top entities by revenue as bar / line / area, or a revenue-share pie."""
    if chart_type == "pie":
        data = pie if pie is not None else series.rename(columns={"full_name": "name", "revenue": "value"})
        return (
            alt.Chart(data)
            .mark_arc(outerRadius=140)
            .encode(
                theta=alt.Theta("value:Q", stack=True),
                color=alt.Color("name:N", scale=_PALETTE, sort=None, title=None),
                tooltip=["name", alt.Tooltip("value:Q", format="$,.2f", title="Revenue"), "percentage"],
            )
        )

    base = alt.Chart(series).encode(
        x=alt.X("label:N", sort=None, title=None, axis=alt.Axis(labelAngle=-45)),
        y=alt.Y("revenue:Q", title="Revenue"),
        tooltip=[
            alt.Tooltip("full_name:N", title="Name"),
            alt.Tooltip("revenue:Q", format="$,.2f", title="Revenue"),
            alt.Tooltip("shipments:Q", title="Shipments"),
            alt.Tooltip("avg_value:Q", format="$,.2f", title="Avg Value"),
        ],
    )
    if chart_type == "line":
        return base.mark_line(point=alt.OverlayMarkDef(size=80), strokeWidth=3, color=COLORS[0])
    if chart_type == "area":
        return base.mark_area(
            line={"color": COLORS[0]},
            color=alt.Gradient(
                gradient="linear",
                stops=[alt.GradientStop(color="white", offset=0), alt.GradientStop(color=COLORS[0], offset=1)],
                x1=1, x2=1, y1=1, y2=0,
            ),
        )
    return base.mark_bar(cornerRadiusTopLeft=8, cornerRadiusTopRight=8).encode(
        color=alt.Color("fill:N", scale=None)
    )


def revenue_vs_volume_chart(series: pd.DataFrame) -> alt.LayerChart:
    base = alt.Chart(series).encode(x=alt.X("label:N", sort=None, title=None, axis=alt.Axis(labelAngle=-45)))
    revenue = base.mark_bar(color=COLORS[0], opacity=0.85).encode(
        y=alt.Y("revenue:Q", title="Revenue"),
        tooltip=["full_name", alt.Tooltip("revenue:Q", format="$,.2f")],
    )
    volume = base.mark_line(color=COLORS[4], point=True, strokeWidth=3).encode(
        y=alt.Y("shipments:Q", title="Shipments"),
        tooltip=["full_name", "shipments"],
    )
    return alt.layer(revenue, volume).resolve_scale(y="independent")


def performance_profile_chart(radar: pd.DataFrame) -> alt.Chart:
    """Radar-style scores (0-100) drawn as grouped bars."""
    return (
        alt.Chart(radar)
        .transform_fold(["revenue", "volume", "avg_value"], as_=["metric", "score"])
        .mark_bar()
        .encode(
            x=alt.X("entity:N", sort=None, title=None),
            xOffset="metric:N",
            y=alt.Y("score:Q", title="Score (% of best)", scale=alt.Scale(domain=[0, 100])),
            color=alt.Color("metric:N", scale=_PALETTE, title="Metric"),
            tooltip=["entity:N", "metric:N", alt.Tooltip("score:Q", format=".1f")],
        )
    )


def geographic_chart(geo: pd.DataFrame, top_n: int = 20) -> alt.Chart:
    return (
        alt.Chart(geo.head(top_n))
        .mark_bar()
        .encode(
            x=alt.X("revenue:Q", title="Revenue"),
            y=alt.Y("name:N", sort="-x", title="State"),
            color=alt.Color("intensity:Q", scale=alt.Scale(scheme="blues"), title="% of revenue"),
            tooltip=["name", alt.Tooltip("revenue:Q", format="$,.2f"), "count", alt.Tooltip("intensity:Q", format=".1f")],
        )
    )


def monthly_chart(monthly_totals: pd.Series) -> alt.Chart:
    data = pd.DataFrame({"month": MONTHS, "revenue": [float(monthly_totals.get(m, 0.0)) for m in MONTHS]})
    return (
        alt.Chart(data)
        .mark_line(point=True, strokeWidth=3, color=COLORS[0])
        .encode(
            x=alt.X("month:N", sort=MONTHS, title=None),
            y=alt.Y("revenue:Q", title="Revenue"),
            tooltip=["month", alt.Tooltip("revenue:Q", format="$,.2f")],
        )
    )


def summary_bar_chart(summary: pd.DataFrame, key: str, value: str = "total", title: str | None = None) -> alt.Chart:
    """Horizontal bars for the company / client / city summary tables."""
    fmt = "$,.2f" if value == "total" else ","
    return (
        alt.Chart(summary)
        .mark_bar()
        .encode(
            x=alt.X(f"{value}:Q", title=title or ("Revenue" if value == "total" else "Shipments")),
            y=alt.Y(f"{key}:N", sort="-x", title=DIMENSIONS.get(key, key.title())),
            color=alt.Color(f"{key}:N", scale=_PALETTE, legend=None),
            tooltip=[key, alt.Tooltip(f"{value}:Q", format=fmt)],
        )
    )


def revenue_distribution_chart(summary: pd.DataFrame) -> alt.Chart:
    return (
        alt.Chart(summary)
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("total:Q", stack=True),
            color=alt.Color("company:N", scale=_PALETTE, sort=None, title="Company"),
            tooltip=["company", alt.Tooltip("total:Q", format="$,.2f"), "count"],
        )
    )


def chart_html(chart: alt.TopLevelMixin) -> str:
    return chart.to_html()


def show_chart(chart: alt.TopLevelMixin, title: str, key: str) -> None:
    """Render with the Vega action menu (PNG/SVG export) plus an HTML download."""
    st.subheader(title)
    st.altair_chart(chart, use_container_width=True)
    st.download_button(
        "Download chart (HTML)",
        chart_html(chart).encode("utf-8"),
        f"{key}.html",
        "text/html",
        key=f"dl_{key}",
    )
