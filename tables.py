from __future__ import annotations
from typing import Dict, List
import streamlit as st
import pandas as pd

from aggregations import EntityDetail
from constants import DIMENSIONS, MONTHS, SHIP_METHODS, VEHICLE_TYPES

_MEDALS = {0: "🥇", 1: "🥈", 2: "🥉"}

EDITOR_COLS = [
    "ref_num", "client", "ship_date", "return_date", "location", "return_location",
    "city", "state", "company", "ship_method", "vehicle_type", "shipping_charge", "po", "agent",
]


def money(v: float) -> str:
    return f"${v:,.2f}"


def ranking_table(ranked: pd.DataFrame, value_col: str, title: str, top_n: int = 10) -> None:
    st.subheader(title)
    if ranked.empty:
        st.info("No data for the current filters.")
        return
    view = ranked.head(top_n).reset_index(drop=True)
    fmt = money if value_col in ("revenue", "avg_per_shipment") else "{:,}".format
    st.dataframe(
        pd.DataFrame({
            "#": [_MEDALS.get(i, str(i + 1)) for i in range(len(view))],
            "Name": view["name"],
            "Value": [fmt(v) for v in view[value_col]],
            "Shipments": view["count"],
        }),
        hide_index=True,
        use_container_width=True,
    )


def comparison_view(table: pd.DataFrame) -> None:
    if table.empty or not len(table.columns):
        st.info("Select up to 5 entities to compare.")
        return
    shown = table.copy().astype(object)
    for col in shown.columns:
        shown.loc["Total Revenue", col] = money(table.loc["Total Revenue", col])
        shown.loc["Shipments", col] = f"{int(table.loc['Shipments', col]):,}"
        shown.loc["Avg per Shipment", col] = money(table.loc["Avg per Shipment", col])
        shown.loc["Market Share", col] = f"{table.loc['Market Share', col]:.1f}%"
    st.subheader("Side-by-Side Comparison")
    st.dataframe(shown, use_container_width=True)


def breakdown_view(matrix: pd.DataFrame, row_label: str = "Company") -> None:
    st.subheader(f"Revenue Breakdown: {row_label} × State")
    if matrix.empty:
        st.info("No data for the current filters.")
        return
    money_cols = [c for c in matrix.columns if c != "name"]
    st.dataframe(
        matrix.rename(columns={"name": row_label}).style.format({c: money for c in money_cols}),
        hide_index=True,
        use_container_width=True,
    )


def entity_shipments_table(detail: EntityDetail) -> None:
    st.subheader(f"All Shipments for {detail.name}")
    cols = {"ref_num": "Ref #", "client": "Client", "ship_date": "Ship Date",
            "city": "City", "state": "State", "shipping_charge": "Charge"}
    view = detail.shipments[list(cols)].rename(columns=cols)
    st.dataframe(view.style.format({"Charge": money}), hide_index=True, use_container_width=True)


def ytd_table(rows: pd.DataFrame, monthly_totals: pd.Series, grand_total: float) -> None:
    st.subheader("Company × Month (YTD)")
    if rows.empty:
        st.info("No shipments recorded for this year.")
        return
    totals_row = pd.DataFrame([{"company": "TOTAL", **monthly_totals.to_dict(), "total": grand_total}])
    full = pd.concat([rows, totals_row], ignore_index=True)
    st.dataframe(
        full.style.format({c: money for c in [*MONTHS, "total"]}),
        hide_index=True,
        use_container_width=True,
    )


def shipments_editor(df: pd.DataFrame, references: Dict[str, List[str]], read_only: bool, key: str) -> pd.DataFrame:
    """Data-entry grid; dropdown columns use the reference lists. Returns the edited frame."""
    config = {
        "ref_num": st.column_config.TextColumn("Reference #"),
        "client": st.column_config.TextColumn("Client"),
        "ship_date": st.column_config.TextColumn("Ship Date", help="YYYY-MM-DD"),
        "return_date": st.column_config.TextColumn("Return Date", help="YYYY-MM-DD"),
        "location": st.column_config.SelectboxColumn("Location", options=references.get("locations", [])),
        "return_location": st.column_config.SelectboxColumn("Return Location", options=references.get("locations", [])),
        "city": st.column_config.SelectboxColumn("City", options=references.get("cities", [])),
        "state": st.column_config.TextColumn("State"),
        "company": st.column_config.SelectboxColumn("Company", options=references.get("companies", [])),
        "ship_method": st.column_config.SelectboxColumn("Ship Method", options=SHIP_METHODS),
        "vehicle_type": st.column_config.SelectboxColumn("Vehicle Type", options=VEHICLE_TYPES),
        "shipping_charge": st.column_config.NumberColumn("Charges", format="$%.2f", min_value=0.0),
        "po": st.column_config.TextColumn("PO"),
        "agent": st.column_config.SelectboxColumn("Agent", options=references.get("agents", [])),
    }
    return st.data_editor(
        df[["id", *EDITOR_COLS]],
        column_config=config,
        column_order=EDITOR_COLS,
        disabled=read_only,
        num_rows="fixed" if read_only else "dynamic",
        hide_index=True,
        use_container_width=True,
        key=key,
    )


def download_filtered(df: pd.DataFrame, filename: str = "filtered_shipments.csv") -> None:
    cols = [c for c in ["id", *EDITOR_COLS] if c in df.columns]
    csv = df[cols].to_csv(index=False).encode("utf-8")
    st.download_button("Download filtered data (CSV)", csv, filename, "text/csv")


def data_dictionary_expander() -> None:
    dims = ", ".join(DIMENSIONS.values())
    with st.expander("Data Dictionary"):
        st.markdown(
            f'''
- **revenue** = sum of shipping charges in the group
- **count** = number of shipments in the group
- **avg per shipment** = revenue ÷ count
- **market share** = group revenue ÷ total revenue for the period
- **(Unassigned)** = shipments with a blank value for the dimension
- **dimensions**: {dims}
- **YTD** = every month of the selected year (read-only)
'''
        )
