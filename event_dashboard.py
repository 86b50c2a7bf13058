import html
import logging

import streamlit as st
from pydantic import ValidationError

from event_client import build_client
from event_rows import SEARCH_COLUMN, count_label, filter_table, placeholder_frame, rows_frame
from viewer_config import load_config
from viewer_state import ViewerSession, ViewerStatus, load_event

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("event_dashboard")

# ============================================================
# CONFIG
# ============================================================

try:
    config = load_config(st.secrets)
except FileNotFoundError:
    config = load_config()
except ValidationError as exc:
    st.set_page_config(page_title="Event Registration Viewer", page_icon="📋", layout="wide")
    st.error(f"Invalid [event_viewer] settings in secrets.toml:\n\n{exc}")
    st.stop()

st.set_page_config(page_title=config.page_title, page_icon="📋", layout="wide")

st.markdown(
    f"<h1 style='text-align:center;'>📋 {html.escape(config.page_title)}</h1>",
    unsafe_allow_html=True,
)

hide_streamlit_style = """
    <style>
        #MainMenu {visibility: hidden !important;}
        footer {visibility: hidden !important;}
        div[data-testid="stToolbar"] { display: none !important; }
    </style>
"""
st.markdown(hide_streamlit_style, unsafe_allow_html=True)

# ============================================================
# SESSION STATE
# ============================================================

if "viewer" not in st.session_state:
    st.session_state["viewer"] = ViewerSession()
    logger.info("Event Registration Viewer loaded, API base URL: %s", config.api_base_url)

viewer = st.session_state["viewer"]
client = build_client(config)


def card(icon, title, value):
    return f"""
        <div style="background-color:#111827;padding:10px 15px;border-radius:10px;
                    text-align:center;border:1px solid #374151;">
            <div style="font-size:24px;">{icon}</div>
            <div style="font-size:13px;color:#9CA3AF;">{title}</div>
            <div style="font-size:18px;font-weight:bold;color:white;">{html.escape(str(value))}</div>
        </div>
    """


# ============================================================
# EVENT SELECTION
# ============================================================

col_sel, col_btn = st.columns([4, 1])
with col_sel:
    if config.events:
        selected = st.selectbox(
            "Select an event",
            options=[""] + list(config.events),
            format_func=lambda eid: "— Choose an event —" if not eid else config.events.get(eid, f"Event {eid}"),
            key="event_select",
        )
    else:
        selected = st.text_input("Event ID", key="event_select", placeholder="e.g. 12").strip()
with col_btn:
    st.write("")
    reload_clicked = st.button("🔄 Reload", disabled=not selected)

if selected != (viewer.event_id or "") or reload_clicked:
    st.session_state["search_query"] = ""
    with st.spinner("Loading event data..."):
        load_event(viewer, client, selected)

st.markdown("---")

# ============================================================
# RESULTS
# ============================================================

if viewer.status == ViewerStatus.IDLE:
    st.info("👆 Select an event to view its registrations.")

elif viewer.status == ViewerStatus.ERROR:
    st.error(viewer.error)

elif viewer.status == ViewerStatus.SUCCESS:
    view = viewer.view
    ev = view.card

    st.markdown(
        f"<h2 style='margin-top:0;'>🎯 {html.escape(ev.name)}</h2>",
        unsafe_allow_html=True,
    )

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.markdown(card("📅", "Date", ev.date), unsafe_allow_html=True)
    with col2:
        st.markdown(card("🕒", "Time", ev.time), unsafe_allow_html=True)
    with col3:
        st.markdown(card("📍", "Venue", ev.venue), unsafe_allow_html=True)
    with col4:
        count_slot = st.empty()

    st.markdown(
        f"""
        <div style="background-color:#111827;padding:16px 18px;border-radius:12px;
                    border:1px solid #374151;margin-top:12px;color:#D1D5DB;">
            {html.escape(ev.description)}
        </div>
        """,
        unsafe_allow_html=True,
    )

    st.markdown("---")
    st.subheader(f"👥 {view.noun}")

    query = st.text_input(
        "🔍 Search",
        key="search_query",
        placeholder="Search by name, department, roll no or email...",
    )

    if not view.rows:
        count_slot.markdown(card("👥", view.noun, count_label(view, 0, query)), unsafe_allow_html=True)
        st.dataframe(placeholder_frame(view), hide_index=True, width="stretch")
    else:
        table = filter_table(rows_frame(view), query)
        count_slot.markdown(
            card("👥", view.noun, count_label(view, len(table), query)),
            unsafe_allow_html=True,
        )
        if table.empty:
            st.info("No registrations match your search.")
        else:
            st.dataframe(table.drop(columns=[SEARCH_COLUMN]), hide_index=True, width="stretch")
