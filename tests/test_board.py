from dataclasses import replace
from datetime import datetime, timezone

from accident_tracker.board import (
    HANDLERS,
    BoardState,
    apply_interactions,
    cancel_dialog,
    dispatch,
    handle_map_click,
    new_board,
    submit_accident,
)
from accident_tracker.events import Interaction, InteractionKind, MapEventTracker, read_map_events
from accident_tracker.map_sync import render_accident_map
from accident_tracker.models import DraftForm, PendingClick, Severity
from accident_tracker.settings import Settings

from conftest import NOW


def _settings() -> Settings:
    return Settings.from_sources({}, {})


def test_new_board_uses_default_view() -> None:
    state = new_board(_settings())
    assert state.view.center == (40.7128, -74.006)
    assert state.view.zoom == 14
    assert state.records == ()
    assert not state.dialog_open


def test_map_click_opens_dialog_without_record(board: BoardState) -> None:
    state = handle_map_click(board, 40.7128, -74.006)

    assert state.dialog_open
    assert state.pending_click == PendingClick(40.7128, -74.006)
    assert state.records == ()


def test_submit_scenario(board: BoardState) -> None:
    state = handle_map_click(board, 40.7128, -74.006)
    draft = DraftForm(severity=Severity.SEVERE, injuries=3, description="Multi-car pileup")

    before = datetime.now(timezone.utc)
    state, record = submit_accident(state, draft)
    after = datetime.now(timezone.utc)

    assert len(state.records) == 1
    assert state.records[0] == record
    assert (record.latitude, record.longitude) == (40.7128, -74.006)
    assert record.severity is Severity.SEVERE
    assert record.injuries == 3
    assert record.description == "Multi-car pileup"
    assert before.replace(microsecond=0) <= record.occurred_at <= after

    assert not state.dialog_open
    assert state.pending_click is None
    assert state.draft == DraftForm()


def test_submit_centers_view_on_new_record(board: BoardState) -> None:
    state = handle_map_click(board, 40.8, -73.95)
    state, _ = submit_accident(state, DraftForm(description="Cyclist hit"), now=NOW)

    assert state.view.center == (40.8, -73.95)
    assert state.view.zoom == board.view.zoom


def test_submit_uses_stored_draft(board: BoardState) -> None:
    state = replace(handle_map_click(board, 1.0, 2.0), draft=DraftForm(description="Scooter fall"))
    state, record = submit_accident(state, now=NOW)
    assert record.description == "Scooter fall"


def test_submit_without_pending_click_is_noop(board: BoardState) -> None:
    state, record = submit_accident(board, DraftForm(description="Nothing here"))
    assert record is None
    assert state == board


def test_blank_description_is_rejected(board: BoardState) -> None:
    state = handle_map_click(board, 1.0, 2.0)
    state, record = submit_accident(state, DraftForm(description="   "))

    assert record is None
    assert state.records == ()
    assert state.dialog_open
    assert state.pending_click == PendingClick(1.0, 2.0)


def test_cancel_never_changes_records(board: BoardState) -> None:
    state = handle_map_click(board, 1.0, 2.0)
    state, _ = submit_accident(state, DraftForm(description="First"), now=NOW)
    state = handle_map_click(state, 3.0, 4.0)
    state = replace(state, draft=DraftForm(Severity.MODERATE, "Draft text", 2))

    cancelled = cancel_dialog(state)

    assert cancelled.records == state.records
    assert not cancelled.dialog_open
    assert cancelled.pending_click is None
    assert cancelled.draft == DraftForm()


def test_statistics_hold_after_every_add(board: BoardState) -> None:
    state = board
    entries = [(Severity.SEVERE, 3), (Severity.MINOR, 0), (Severity.MODERATE, 1), (Severity.SEVERE, 5)]

    for i, (severity, injuries) in enumerate(entries):
        state = handle_map_click(state, 40.0 + i, -74.0)
        state, _ = submit_accident(state, DraftForm(severity, f"accident {i}", injuries), now=NOW)
        stats = state.statistics

        assert stats.total == len(state.records)
        assert stats.total_injuries == sum(r.injuries for r in state.records)
        assert stats.severe_count == sum(1 for r in state.records if r.severity is Severity.SEVERE)


def test_ids_unique_for_same_instant(board: BoardState) -> None:
    state = board
    for _ in range(3):
        state = handle_map_click(state, 1.0, 2.0)
        state, _ = submit_accident(state, DraftForm(description="same ms"), now=NOW)

    ids = [r.id for r in state.records]
    assert len(set(ids)) == 3


def test_dispatch_table_covers_every_kind() -> None:
    assert set(HANDLERS) == set(InteractionKind)


def test_point_click_selects_record_only(board: BoardState) -> None:
    state = handle_map_click(board, 40.75, -73.9)
    state, record = submit_accident(state, DraftForm(description="x"), now=NOW)

    selected = dispatch(state, Interaction(InteractionKind.POINT_CLICK, record_id=record.id))

    assert selected.selected_record_id == record.id
    assert selected.records == state.records
    assert not selected.dialog_open
    assert selected.pending_click is None


def test_point_click_does_not_open_dialog(board: BoardState) -> None:
    state = handle_map_click(board, 40.75, -73.9)
    state, record = submit_accident(state, DraftForm(description="Truck rollover"), now=NOW)

    # points are drawn without mouse-event bubbling, so the widget reports only the object click
    html = render_accident_map("pk.x", "mapbox/light-v11", state.view, state.records).get_root().render()
    assert '"bubblingMouseEvents": false' in html

    output = {"last_object_clicked": {"lat": 40.75, "lng": -73.9}, "last_object_clicked_count": 1}
    interactions, _ = read_map_events(output, MapEventTracker(), state.records)
    after = apply_interactions(state, interactions)

    assert not after.dialog_open
    assert after.pending_click is None
    assert after.selected_record_id == record.id


def test_apply_interactions_in_order(board: BoardState) -> None:
    state = apply_interactions(board, [
        Interaction(InteractionKind.MAP_CLICK, lat=41.0, lng=-73.0),
        Interaction(InteractionKind.MAP_CLICK, lat=41.1, lng=-73.1),
    ])

    assert state.pending_click == PendingClick(41.1, -73.1)
    assert state.dialog_open
