import streamlit as st

_QUEUE_KEY = "pending_notices"


def notify(message, icon="✅"):
    st.toast(message, icon=icon)


def queue_notice(message, icon="✅"):
    """Toast shown on the next script run, survives st.rerun()."""
    st.session_state.setdefault(_QUEUE_KEY, []).append((message, icon))


def flush_notices():
    for message, icon in st.session_state.pop(_QUEUE_KEY, []):
        notify(message, icon)
