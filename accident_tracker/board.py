"""
Accident board state and its transitions.

Every transition takes a BoardState and returns a new one; the Streamlit view
keeps the current state in st.session_state and never mutates it in place.
Dialog lifecycle: closed -> open (map click) -> closed (cancel, dismiss or successful submit).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime

from accident_tracker.events import Interaction, InteractionKind
from accident_tracker.models import AccidentRecord, DraftForm, PendingClick, build_record
from accident_tracker.stats import compute_statistics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MapView:
    center: tuple
    zoom: float


@dataclass(frozen=True)
class BoardState:
    view: MapView
    records: tuple = ()
    dialog_open: bool = False
    pending_click: PendingClick | None = None
    draft: DraftForm = DraftForm()
    selected_record_id: str | None = None

    @property
    def statistics(self):
        return compute_statistics(self.records)


def new_board(settings) -> BoardState:
    return BoardState(view=MapView(center=tuple(settings.default_center), zoom=settings.default_zoom))


# ============================================
# Transitions
# ============================================
def handle_map_click(state: BoardState, lat: float, lng: float) -> BoardState:
    """Remember the clicked point and open the dialog; no record yet."""
    logger.debug("map clicked", extra={"lat": lat, "lng": lng})
    return replace(state, pending_click=PendingClick(lat, lng), dialog_open=True)


def submit_accident(state: BoardState, draft: DraftForm | None = None,
                    now: datetime | None = None) -> tuple[BoardState, AccidentRecord | None]:
    """
    Append a record built from the pending click and the draft.

    Without a pending click, or with a blank description, the state is returned
    unchanged and no record is created. The map is centered on the new record
    so rebuilding it does not jump back to the default view.
    """
    draft = draft if draft is not None else state.draft
    if state.pending_click is None:
        return state, None
    if not draft.is_submittable:
        logger.warning("accident rejected: empty description")
        return replace(state, draft=draft), None

    record = build_record(
        state.pending_click,
        draft,
        now=now,
        existing_ids=[r.id for r in state.records],
    )
    logger.info(
        "accident recorded",
        extra={"record_id": record.id, "severity": record.severity.value, "injuries": record.injuries},
    )
    new_state = replace(
        state,
        records=state.records + (record,),
        dialog_open=False,
        draft=DraftForm(),
        pending_click=None,
        view=replace(state.view, center=(record.latitude, record.longitude)),
    )
    return new_state, record


def cancel_dialog(state: BoardState) -> BoardState:
    return replace(state, dialog_open=False, draft=DraftForm(), pending_click=None)


def open_popup(state: BoardState, record_id: str) -> BoardState:
    return replace(state, selected_record_id=record_id)


# ============================================
# Interaction dispatch
# ============================================
def _on_map_click(state, interaction):
    return handle_map_click(state, interaction.lat, interaction.lng)


def _on_point_click(state, interaction):
    return open_popup(state, interaction.record_id)


HANDLERS = {
    InteractionKind.MAP_CLICK: _on_map_click,
    InteractionKind.POINT_CLICK: _on_point_click,
}


def dispatch(state: BoardState, interaction: Interaction) -> BoardState:
    return HANDLERS[interaction.kind](state, interaction)


def apply_interactions(state: BoardState, interactions) -> BoardState:
    for interaction in interactions:
        state = dispatch(state, interaction)
    return state
