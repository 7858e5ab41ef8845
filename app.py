import streamlit as st

from accident_tracker.board_view import render_board
from accident_tracker.logging_setup import setup_logging
from accident_tracker.notifications import flush_notices
from accident_tracker.settings import load_settings
from accident_tracker.token_gate import current_token, render_token_gate

st.set_page_config(page_title='Accident Tracking Dashboard', page_icon='⚠️', layout='wide')

settings = load_settings()
setup_logging(settings.log_level, settings.json_logs)

flush_notices()

# ============================================
# Token gate -> accident board
# ============================================
token = current_token()

if token is None:
    render_token_gate(default_token=settings.mapbox_token)
else:
    render_board(token, settings)
