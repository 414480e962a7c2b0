import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

import pandas as pd
import streamlit as st

from casedash.charts import AGE_MOUNT, GENDER_MOUNT, TREND_MOUNT
from casedash.dashboard import Dashboard, FileUploaded, RegionSelected, Startup
from casedash.data import export_csv, upload_signature
from casedash.filters import REGION_PLACEHOLDER, filter_records
from casedash.metrics_overview import STAT_CARDS
from casedash.store import RecordStore

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(view: Dict[str, Any], last_updated: Optional[str]) -> str:
    region = view["filters"].get("selected_region") or "All"
    counts = view["row_counts"]
    chips = [
        f"State: {region}",
        f"Records: {counts['filtered']:,} of {counts['total']:,}",
        f"Cached: {last_updated}" if last_updated else "Cached: no",
    ]
    return "".join([f"<span class='chip'>{txt}</span> " for txt in chips])


def get_dashboard() -> Dashboard:
    dashboard = st.session_state.get("dashboard")
    if dashboard is None:
        dashboard = Dashboard(RecordStore())
        dashboard.dispatch(Startup())
        st.session_state["dashboard"] = dashboard
    return dashboard


# ---------- UI setup ----------
st.set_page_config(page_title="COVID-19 Case Dashboard", layout="wide")
inject_base_styles()
st.title("COVID-19 Case Dashboard")
st.caption("Upload a case CSV (State, Date, Confirmed, Active, Recovered, Deaths, Gender, Age) and filter by state.")

dashboard = get_dashboard()

with st.sidebar:
    st.markdown("### Data")
    uploaded = st.file_uploader("Case data (CSV)", type=["csv"], key="dataInput")
    if uploaded is not None:
        signature = upload_signature(uploaded)
        if st.session_state.get("_upload_signature") != signature:
            st.session_state["_upload_signature"] = signature
            before = dashboard.records
            dashboard.dispatch(FileUploaded(uploaded.getvalue(), uploaded.name))
            if dashboard.records is before:
                st.error(f"Could not read {uploaded.name} as CSV. The previous data is still shown.")
            else:
                st.session_state["regionFilter"] = REGION_PLACEHOLDER

    if st.button("Clear cached data"):
        dashboard.store.clear()
        st.session_state.pop("dashboard", None)
        st.session_state.pop("_upload_signature", None)
        st.rerun()

    st.markdown("---")
    st.markdown("### Quick filters")
    selected = st.selectbox(
        "Region",
        options=[REGION_PLACEHOLDER] + dashboard.regions,
        key="regionFilter",
        disabled=not dashboard.ready,
    )

if not dashboard.ready:
    st.info("No data loaded yet. Upload a CSV file to get started.")
    st.stop()

placeholders: Dict[str, Any] = {}
stat_cols = st.columns(4)
chart_top = st.container()
chart_cols = st.columns(2)
placeholders[TREND_MOUNT] = chart_top.empty()
placeholders[GENDER_MOUNT] = chart_cols[0].empty()
placeholders[AGE_MOUNT] = chart_cols[1].empty()


def draw_chart(mount: str, spec: Dict[str, Any]) -> None:
    placeholders[mount].vega_lite_chart(spec, use_container_width=True)


dashboard.draw = draw_chart
view = dashboard.dispatch(RegionSelected(selected))
dashboard.draw = None

labels = {"Confirmed": "Confirmed Cases", "Active": "Active Cases", "Recovered": "Recovered", "Deaths": "Deaths"}
for col, field in zip(stat_cols, STAT_CARDS):
    col.metric(labels[field], view["kpis"][field], help="Value from the most recent record in the current view.")

st.markdown(format_filter_summary(view, dashboard.store.last_updated), unsafe_allow_html=True)

filtered = filter_records(dashboard.records, dashboard.filters.selected_region)
with card("Records"):
    st.dataframe(pd.DataFrame.from_records(filtered), hide_index=True, use_container_width=True)
    st.download_button(
        "Export CSV",
        data=export_csv(filtered),
        file_name="case_records.csv",
        mime="text/csv",
        disabled=not filtered,
    )
