"""
Domain types for the accident dashboard.
Records are created only through the add-accident workflow and live in session memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class Severity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"

    @classmethod
    def parse(cls, value) -> "Severity":
        """Accept a member or its string value; None falls back to MINOR."""
        if value is None:
            return cls.MINOR
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())

    @property
    def label(self) -> str:
        return self.value.capitalize()


SEVERITY_COLORS = {
    Severity.SEVERE: "#ef4444",
    Severity.MODERATE: "#f97316",
    Severity.MINOR: "#eab308",
}


@dataclass(frozen=True)
class AccidentRecord:
    id: str
    latitude: float
    longitude: float
    timestamp: str
    severity: Severity
    description: str
    injuries: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "severity", Severity.parse(self.severity))
        if not self.description or not self.description.strip():
            raise ValueError("description must not be empty")
        if self.injuries < 0:
            raise ValueError(f"injuries must be non-negative, got {self.injuries}")

    @property
    def occurred_at(self) -> datetime:
        return datetime.fromisoformat(self.timestamp)

    @property
    def color(self) -> str:
        return SEVERITY_COLORS[self.severity]


@dataclass(frozen=True)
class PendingClick:
    lat: float
    lng: float


@dataclass(frozen=True)
class DraftForm:
    severity: Severity = Severity.MINOR
    description: str = ""
    injuries: int = 0

    @classmethod
    def from_inputs(cls, severity, injuries, description) -> "DraftForm":
        """Build a draft from raw widget values."""
        return cls(
            severity=Severity.parse(severity),
            description=description or "",
            injuries=_parse_injuries(injuries),
        )

    @property
    def is_submittable(self) -> bool:
        return bool(self.description.strip())


def _parse_injuries(raw) -> int:
    # same as parseInt(value) || 0, negatives clamp to 0
    try:
        value = int(float(raw))
    except (TypeError, ValueError):
        return 0
    return max(value, 0)


def new_record_id(now: datetime, existing_ids=()) -> str:
    """Millisecond timestamp id, suffixed when it collides with an existing id."""
    base = str(int(now.timestamp() * 1000))
    taken = set(existing_ids)
    candidate = base
    suffix = 0
    while candidate in taken:
        suffix += 1
        candidate = f"{base}-{suffix}"
    return candidate


def build_record(pending: PendingClick, draft: DraftForm, now: datetime | None = None,
                 existing_ids=()) -> AccidentRecord:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return AccidentRecord(
        id=new_record_id(now, existing_ids),
        latitude=float(pending.lat),
        longitude=float(pending.lng),
        timestamp=now.astimezone(timezone.utc).isoformat(),
        severity=draft.severity,
        description=draft.description.strip(),
        injuries=draft.injuries,
    )


@dataclass(frozen=True)
class Statistics:
    total: int = 0
    today_count: int = 0
    severe_count: int = 0
    total_injuries: int = 0

