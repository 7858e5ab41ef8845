import logging

import streamlit as st

logger = logging.getLogger(__name__)

TOKEN_KEY = "mapbox_token"
MAPBOX_TOKENS_URL = "https://account.mapbox.com/access-tokens/"


def normalize_token(raw):
    """Trimmed token, or None when the input is blank."""
    if raw is None:
        return None
    token = str(raw).strip()
    return token or None


def current_token():
    return normalize_token(st.session_state.get(TOKEN_KEY))


def set_token(token):
    previous = current_token()
    st.session_state[TOKEN_KEY] = token
    if previous != token:
        logger.info("map token %s", "set" if token else "cleared")


def render_token_gate(default_token=""):
    """
    Setup screen asking for a Mapbox public token.
    Only stores the token; whether Mapbox accepts it shows up when tiles load.
    """
    _, center, _ = st.columns([1, 2, 1])

    with center:
        st.header("📍 Setup Mapbox Token")
        st.write("Enter your Mapbox public token to start tracking accidents.")

        with st.container(border=True):
            st.markdown("""
**How to get your token:**

1. Visit Mapbox.com and create a free account
2. Go to your Account → Tokens section
3. Copy your Default Public Token
4. Paste it below
""")
            st.link_button("Open Mapbox Tokens", MAPBOX_TOKENS_URL)

        raw = st.text_input(
            "Mapbox Public Token",
            value=default_token,
            type="password",
            placeholder="pk.eyJ1IjoiZXhhbXBsZSIsImEiOiJja...",
            help='Your token starts with "pk." and is safe to use in frontend applications',
            key="token_input",
        )
        token = normalize_token(raw)

        if st.button("Start Tracking Accidents", disabled=token is None, type="primary"):
            set_token(token)
            st.rerun()

        st.caption("For production deployment, set MAPBOX_TOKEN in .streamlit/secrets.toml or the environment.")
