from __future__ import annotations
from datetime import date
from typing import Dict, List
import streamlit as st

import auth
import data_io
import excel_io
from app_secrets import Settings
from constants import YTD
from errors import AuthError, StoreError, WorkbookFormatError
from logger import get_logger
from references import REFERENCE_KINDS, add_reference
from store import FirestoreStore, MemoryStore
from summaries import ytd_matrix
from features import derive_features

log = get_logger("ui")


def header(app_title: str) -> None:
    st.set_page_config(page_title=app_title, page_icon="🚚", layout="wide")
    st.title(app_title)


def login_form(settings: Settings) -> None:
    st.subheader("🔐 Sign in")
    with st.form("login", clear_on_submit=False):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", use_container_width=True)
    if not submitted:
        return
    try:
        session = auth.sign_in(email, password, settings)
    except AuthError as e:
        st.error(auth.auth_error_message(e.code))
        return
    auth.remember(session)
    st.rerun()


def data_source_picker(settings: Settings):
    """Firestore when configured (after sign-in), otherwise the in-memory sample store."""
    st.sidebar.header("Data")
    if settings.firebase_enabled:
        session = auth.current_session(settings)
        if session is None:
            login_form(settings)
            st.stop()
        st.sidebar.caption(f"Signed in as {session.email}")
        if st.sidebar.button("Log out", use_container_width=True):
            auth.sign_out()
            st.rerun()
        return FirestoreStore(settings.firebase_project_id, session.id_token, timeout=settings.http_timeout)

    st.sidebar.info(
        "Firebase is not configured; using sample data for January-June 2025 (changes last for this session)."
    )
    if "sample_store" not in st.session_state:
        st.session_state["sample_store"] = data_io.load_sample()
    store: MemoryStore = st.session_state["sample_store"]
    return store


def references_manager(store, references: Dict[str, List[str]]) -> None:
    labels = {"companies": "Company", "agents": "Agent", "locations": "Location", "cities": "City"}
    with st.sidebar.expander("Manage lists"):
        for kind in REFERENCE_KINDS:
            raw = st.text_input(f"New {labels[kind].lower()}", key=f"new_{kind}")
            if st.button(f"Add {labels[kind]}", key=f"add_{kind}"):
                try:
                    updated = add_reference(references[kind], raw, kind)
                    data_io.save_reference_list(store, kind, updated)
                except ValueError as e:
                    st.warning(str(e))
                except StoreError:
                    log.exception("reference update failed")
                    st.error(f"Failed to add {labels[kind].lower()}. Check your permissions/rules.")
                else:
                    st.toast(f"Added to {kind}")
                    st.rerun()


def export_panel(store, year: int, month: str, records: List[Dict]) -> None:
    st.subheader("📤 Export")
    today = date.today().isoformat()
    c1, c2 = st.columns(2)
    try:
        by_month = data_io.load_all_months(store, year)
        ytd = None
        if month == YTD:
            ytd = ytd_matrix({m: derive_features(data_io.records_to_frame(r)) for m, r in by_month.items()})
        month_bytes = excel_io.build_month_workbook(f"{month} {year}", records, ytd=ytd)
        all_bytes = excel_io.build_all_months_workbook(year, by_month)
    except Exception as e:
        log.exception("export failed")
        st.error(f"Export failed: {e}")
        return
    c1.download_button(
        f"Export {month} (Excel)", month_bytes, f"freight-{year}-{month}-{today}.xlsx", excel_io.XLSX_MIME,
        use_container_width=True,
    )
    c2.download_button(
        "Export All (Excel)", all_bytes, f"freight-{year}-all-months-{today}.xlsx", excel_io.XLSX_MIME,
        use_container_width=True,
    )


IMPORT_NOTICE = "import_notice"


def import_panel(store, year: int) -> None:
    st.subheader("📥 Import")
    notice = st.session_state.pop(IMPORT_NOTICE, None)
    if notice:
        st.success(notice)
    uploaded = st.file_uploader("Workbook from “Export All (Excel)”", type=["xlsx"], key="import_file")
    confirm = st.checkbox("Import will OVERWRITE each month sheet found in this file", key="import_confirm")
    if not (uploaded and st.button("Import", disabled=not confirm)):
        return
    try:
        changed = excel_io.import_workbook(store, uploaded.getvalue(), fallback_year=year)
    except WorkbookFormatError as e:
        st.warning(str(e))
        return
    except Exception:
        log.exception("import failed")
        st.error('Failed to import Excel. Make sure you selected the "Export All (Excel)" file.')
        return
    # rerun so every tab reloads the overwritten months
    st.session_state[IMPORT_NOTICE] = "Import complete:\n" + "\n".join(f"- {m} {y}: {n} rows" for m, y, n in changed)
    st.rerun()


def footer_description() -> None:
    with st.expander("ℹ️ Note: About this app and expected data format", expanded=False):
        st.markdown(
            """
            **Freight analytics** by company, agent, client, city, state, location, ship method and vehicle type.
            Shipments are stored per month; pick **YTD** to analyse the whole year.

            **Workbook columns:**
            `Reference #, Client, Ship Date, Return Date, Location, Return Location, City,
            State, Company, Ship Method, Vehicle Type, Charges, PO, Agent`
            """
        )
