from datetime import datetime, timezone

import pytest

from accident_tracker.board import BoardState, MapView
from accident_tracker.models import AccidentRecord, Severity

NOW = datetime(2026, 10, 19, 15, 30, tzinfo=timezone.utc)


def make_record(record_id="1", lat=40.7128, lng=-74.006, severity=Severity.MINOR,
                injuries=0, timestamp=NOW.isoformat(), description="Fender bender"):
    return AccidentRecord(
        id=record_id,
        latitude=lat,
        longitude=lng,
        timestamp=timestamp,
        severity=severity,
        description=description,
        injuries=injuries,
    )


@pytest.fixture
def board() -> BoardState:
    return BoardState(view=MapView(center=(40.7128, -74.006), zoom=14))
