import streamlit as st
import pandas as pd
import altair as alt
from datetime import datetime

from accident_tracker.models import SEVERITY_COLORS, Severity
from accident_tracker.stats import records_frame

st.title("Accident Log")

# ============================================
# Load records from the current session
# ============================================
board = st.session_state.get("board")
records = board.records if board is not None else ()

if not records:
    st.info("No accidents recorded in this session yet. Open the dashboard and click the map to add one.")
    st.stop()

df = records_frame(records)
df["local_time"] = df["timestamp"].dt.tz_convert(datetime.now().astimezone().tzinfo)

# ============================================
# Record table
# ============================================
st.subheader(f"{len(df)} recorded accidents")

table = df[["local_time", "severity", "injuries", "description", "latitude", "longitude"]].rename(columns={
    "local_time": "Time",
    "severity": "Severity",
    "injuries": "Injuries",
    "description": "Description",
    "latitude": "Latitude",
    "longitude": "Longitude",
})
st.dataframe(table, hide_index=True)

# ============================================
# Charts
# ============================================
col1, col2 = st.columns([1, 1])

with col1:
    st.subheader("Accidents by severity")

    severity_order = [s.value for s in Severity]
    severity_counts = (
        df["severity"]
        .value_counts()
        .reindex(severity_order, fill_value=0)
    )
    severity_df = pd.DataFrame({
        "Severity": severity_order,
        "Count": severity_counts.values,
    })

    severity_chart = (
        alt.Chart(severity_df)
        .mark_bar()
        .encode(
            x=alt.X("Severity:N", sort=severity_order, title=None),
            y=alt.Y("Count:Q", title="number of accidents"),
            color=alt.Color(
                "Severity:N",
                scale=alt.Scale(domain=severity_order, range=[SEVERITY_COLORS[s] for s in Severity]),
                legend=None,
            ),
            tooltip=["Severity", "Count"],
        )
    )
    st.altair_chart(severity_chart)

with col2:
    st.subheader("Accidents by hour")

    hour_counts = (
        df["local_time"].dt.hour
        .value_counts()
        .reindex(range(0, 24), fill_value=0)
        .sort_index()
    )
    hour_df = pd.DataFrame({
        "Hour": list(range(0, 24)),
        "Count": hour_counts.values,
    })

    hour_chart = (
        alt.Chart(hour_df)
        .mark_bar()
        .encode(
            x=alt.X("Hour:O", title="hour of day (0-23)"),
            y=alt.Y("Count:Q", title="number of accidents"),
            color=alt.Color(
                "Count:Q",
                scale=alt.Scale(range=["#ffff66", "#ff0000"]),
                legend=None,
            ),
            tooltip=["Hour", "Count"],
        )
    )
    st.altair_chart(hour_chart)
