import logging

import streamlit as st
from streamlit_folium import st_folium

from accident_tracker.board import apply_interactions, cancel_dialog, new_board, submit_accident
from accident_tracker.events import RETURNED_OBJECTS, MapEventTracker, read_map_events
from accident_tracker.map_sync import render_accident_map, token_fingerprint
from accident_tracker.models import DraftForm, Severity
from accident_tracker.notifications import notify, queue_notice
from accident_tracker.token_gate import set_token

logger = logging.getLogger(__name__)

BOARD_KEY = "board"
EVENTS_KEY = "map_events"
ANNOUNCED_KEY = "announced_token"
MAP_HEIGHT = 600


# ============================================
# Session state helpers
# ============================================
def get_board(settings):
    if BOARD_KEY not in st.session_state:
        st.session_state[BOARD_KEY] = new_board(settings)
    return st.session_state[BOARD_KEY]


def save_board(state):
    st.session_state[BOARD_KEY] = state


def _event_tracker(fingerprint):
    # a new token means a new widget instance, so its click history starts over
    owner, tracker = st.session_state.get(EVENTS_KEY, (None, None))
    if owner != fingerprint:
        return MapEventTracker()
    return tracker


# ============================================
# Add-accident dialog
# ============================================
def dismiss_dialog(session):
    """Closing the dialog without a button press counts as Cancel."""
    session[BOARD_KEY] = cancel_dialog(session[BOARD_KEY])
    logger.info("add-accident dialog dismissed")


def _on_dialog_dismiss():
    dismiss_dialog(st.session_state)


@st.dialog("Record New Accident", on_dismiss=_on_dialog_dismiss)
def record_accident_dialog():
    state = st.session_state[BOARD_KEY]
    pending = state.pending_click
    if pending is not None:
        st.caption(f"📍 {pending.lat:.5f}, {pending.lng:.5f}")

    severities = list(Severity)
    severity = st.selectbox(
        "Severity Level",
        severities,
        index=severities.index(state.draft.severity),
        format_func=lambda s: s.label,
    )
    injuries = st.number_input("Number of Injuries", min_value=0, step=1, value=state.draft.injuries)
    description = st.text_area("Description", value=state.draft.description, placeholder="Describe what happened...")

    draft = DraftForm.from_inputs(severity, injuries, description)

    col_cancel, col_submit = st.columns(2)
    if col_cancel.button("Cancel"):
        save_board(cancel_dialog(state))
        st.rerun()

    if col_submit.button("Record Accident", type="primary", disabled=not draft.is_submittable):
        new_state, record = submit_accident(state, draft)
        save_board(new_state)
        if record is not None:
            queue_notice("Accident recorded successfully!")
            st.rerun()


# ============================================
# Statistics cards
# ============================================
def render_statistics(stats):
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("📍 Total Accidents", stats.total)
    c2.metric("📅 Today", stats.today_count)
    c3.metric("⚠️ Severe Cases", stats.severe_count)
    c4.metric("👥 Total Injuries", stats.total_injuries)


# ============================================
# Board page
# ============================================
def render_board(token, settings):
    state = get_board(settings)
    fingerprint = token_fingerprint(token)

    with st.sidebar:
        st.header("Map")
        st.caption("🔴 Severe | 🟠 Moderate | 🟡 Minor | numbered badge = cluster")
        if st.button("Change Mapbox token"):
            set_token(None)
            st.rerun()

    st.title("⚠️ Accident Tracking Dashboard")
    st.caption("Monitor and analyze traffic incidents")

    render_statistics(state.statistics)

    st.subheader("Accident Locations")
    st.caption("Click anywhere on the map to mark a new accident location")

    fmap = render_accident_map(
        token,
        settings.map_style,
        state.view,
        state.records,
        cluster_radius=settings.cluster_radius,
        cluster_max_zoom=settings.cluster_max_zoom,
        selected_record_id=state.selected_record_id,
    )
    output = st_folium(
        fmap,
        key=f"accident-map-{fingerprint}",
        height=MAP_HEIGHT,
        use_container_width=True,
        returned_objects=RETURNED_OBJECTS,
    )

    if st.session_state.get(ANNOUNCED_KEY) != fingerprint:
        st.session_state[ANNOUNCED_KEY] = fingerprint
        notify("Map loaded! Click anywhere to mark an accident location.", icon="📍")

    interactions, tracker = read_map_events(output, _event_tracker(fingerprint), state.records)
    st.session_state[EVENTS_KEY] = (fingerprint, tracker)

    if interactions:
        new_state = apply_interactions(state, interactions)
        if new_state != state:
            save_board(new_state)
            st.rerun()

    if state.dialog_open:
        record_accident_dialog()
