import pandas as pd
from datetime import datetime

from accident_tracker.models import Severity, Statistics

RECORD_COLUMNS = ["id", "latitude", "longitude", "timestamp", "severity", "description", "injuries"]


# ==============================
# Records -> DataFrame
# ==============================
def records_frame(records):
    """
    Flatten accident records into a DataFrame.
    `timestamp` is parsed to tz-aware UTC, `severity` holds the plain string value.
    """
    rows = [
        {
            "id": r.id,
            "latitude": r.latitude,
            "longitude": r.longitude,
            "timestamp": r.timestamp,
            "severity": r.severity.value,
            "description": r.description,
            "injuries": r.injuries,
        }
        for r in records
    ]
    df = pd.DataFrame(rows, columns=RECORD_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    df["injuries"] = df["injuries"].astype(int)
    return df


# ==============================
# Summary statistics
# ==============================
def compute_statistics(records, now=None):
    """
    Recomputed from the full record list on every call, nothing is cached.
    "Today" is the calendar date of `now` in its own timezone; a naive `now` is read as local time.
    """
    now = now or datetime.now().astimezone()
    if now.tzinfo is None:
        now = now.astimezone()
    df = records_frame(records)
    if df.empty:
        return Statistics()

    local_dates = df["timestamp"].dt.tz_convert(now.tzinfo).dt.date

    return Statistics(
        total=len(df),
        today_count=int((local_dates == now.date()).sum()),
        severe_count=int((df["severity"] == Severity.SEVERE.value).sum()),
        total_injuries=int(df["injuries"].sum()),
    )
