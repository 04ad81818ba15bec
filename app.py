# app.py
from __future__ import annotations
import streamlit as st

from app_secrets import load_settings
from constants import APP_TITLE
from data_io import ensure_month, load_period, load_references, records_to_frame
from errors import StoreError
from features import derive_features
from filters import sidebar_filters, apply_filters, period_picker
from kpis import compute_kpis, render_kpis
from logger import get_logger, setup_logger
from tables import download_filtered, data_dictionary_expander
from ui import header, data_source_picker, export_panel, footer_description, import_panel, references_manager
import views


def main() -> None:
    settings = load_settings()
    setup_logger(settings.log_level, settings.log_dir)
    log = get_logger("app")

    header(APP_TITLE)

    # Data source + period
    store = data_source_picker(settings)
    year, month = period_picker()

    try:
        references = load_references(store)
        if ensure_month(store, year, month, references):
            log.info("month seeded", extra={"extra_data": {"year": year, "month": month}})
        records = load_period(store, year, month)
    except StoreError as e:
        log.exception("initial load failed")
        st.error(f"Could not load data: {e}")
        st.stop()

    data = derive_features(records_to_frame(records))
    filters = sidebar_filters(data, year, month)
    view = apply_filters(data, filters)
    references_manager(store, references)

    st.caption(f"Showing **{month} {year}** · {len(data):,} shipments")

    # KPIs
    st.divider()
    render_kpis(compute_kpis(view))

    # Tabs
    st.divider()
    tabs = st.tabs([label for _, label in views.TABS])
    with tabs[0]:
        views.render_overview(view)
    with tabs[1]:
        views.render_visual_charts(view)
    with tabs[2]:
        views.render_rankings(view)
    with tabs[3]:
        views.render_insights(view)
    with tabs[4]:
        views.render_comparison(view)
    with tabs[5]:
        views.render_breakdown(view)
    with tabs[6]:
        views.render_individual(view)
    with tabs[7]:
        views.render_geographic(view)
    with tabs[8]:
        views.render_monthly(store, year)
    with tabs[9]:
        views.render_shipments(store, year, month, data, references)
        download_filtered(data, f"freight-{year}-{month}.csv")
        st.divider()
        export_panel(store, year, month, records)
        import_panel(store, year)

    # Data dictionary + footer
    st.divider()
    data_dictionary_expander()
    footer_description()


if __name__ == "__main__":
    main()
