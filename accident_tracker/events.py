"""
Translate the map widget's return value into board interactions.

st_folium returns its last click on every rerun, so the tracker remembers what
was already handled and only new values are turned into interactions. Cluster
clicks never reach Python: the cluster layer zooms in by itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Leaflet reports marker positions back as floats; allow for rounding.
COORD_TOLERANCE = 1e-7

RETURNED_OBJECTS = ["last_clicked", "last_object_clicked", "last_object_clicked_count"]


class InteractionKind(str, Enum):
    MAP_CLICK = "map_click"
    POINT_CLICK = "point_click"


@dataclass(frozen=True)
class Interaction:
    kind: InteractionKind
    lat: float | None = None
    lng: float | None = None
    record_id: str | None = None


@dataclass(frozen=True)
class MapEventTracker:
    last_clicked: tuple | None = None
    # (click count, coordinates); the count changes on every object click
    last_object_click: tuple | None = None


def _latlng(value) -> tuple | None:
    if not value:
        return None
    return (float(value["lat"]), float(value["lng"]))


def find_record(records, lat: float, lng: float):
    for record in records:
        if abs(record.latitude - lat) <= COORD_TOLERANCE and abs(record.longitude - lng) <= COORD_TOLERANCE:
            return record
    return None


def read_map_events(output, tracker: MapEventTracker, records) -> tuple[list[Interaction], MapEventTracker]:
    """
    Compare widget output with the tracker.

    `records` are the accidents drawn on the run that produced `output`;
    object clicks that match none of them (cluster badges) are dropped.
    """
    if not output:
        return [], tracker

    interactions = []

    clicked = _latlng(output.get("last_clicked"))
    if clicked is not None and clicked != tracker.last_clicked:
        interactions.append(Interaction(InteractionKind.MAP_CLICK, lat=clicked[0], lng=clicked[1]))

    object_clicked = _latlng(output.get("last_object_clicked"))
    object_click = None
    if object_clicked is not None:
        object_click = (output.get("last_object_clicked_count"), object_clicked)
        if object_click != tracker.last_object_click:
            record = find_record(records, *object_clicked)
            if record is not None:
                interactions.append(
                    Interaction(InteractionKind.POINT_CLICK, lat=record.latitude, lng=record.longitude,
                                record_id=record.id)
                )

    new_tracker = MapEventTracker(
        last_clicked=clicked if clicked is not None else tracker.last_clicked,
        last_object_click=object_click if object_click is not None else tracker.last_object_click,
    )
    return interactions, new_tracker
