"""Tests for the drag/resize controller."""
import pytest
from unittest.mock import Mock
from shared.enums import ViewerMode
from src.floorplan_app.engine.coordinates import Rect, PointerEvent, Point
from src.floorplan_app.engine.interaction import (
    DragResizeController, ManualFrameScheduler, ImmediateFrameScheduler, SessionKind
)
from src.floorplan_app.engine.marker_store import MarkerStore
from src.floorplan_app.errors import LayoutNotReady, TransportError

RECT = Rect(left=0, top=0, width=200, height=100)


@pytest.fixture
def store(mock_api, make_record):
    mock_api.call.return_value = [
        make_record(1, position_x=10.0, position_y=10.0),
        make_record(2, position_x=80.0, position_y=80.0),
        make_record(3, marker_type='note', equipment_id=-1, label='Pipes', width=150, height=40),
    ]
    store = MarkerStore(mock_api)
    store.load(1)
    mock_api.call.reset_mock()

    def put(method, endpoint, json=None):
        return {**json, 'id': int(endpoint.rsplit('/', 1)[1])}
    mock_api.call.side_effect = put
    return store


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


@pytest.fixture
def previews():
    return Mock()


@pytest.fixture
def controller(store, scheduler, previews):
    return DragResizeController(store, scheduler=scheduler, on_preview=previews)


def test_drag_commits_final_position(controller, store, mock_api, scheduler):
    assert controller.begin_drag(1, PointerEvent(20, 10), RECT)
    controller.pointer_move(PointerEvent(60, 30))
    scheduler.run_pending()

    marker = controller.pointer_up(PointerEvent(100, 50))

    mock_api.call.assert_called_once()
    body = mock_api.call.call_args.kwargs['json']
    assert (body['position_x'], body['position_y']) == (50, 50)
    assert body['floorplan_id'] == 1 and body['page'] == 1
    assert (marker.position_x, marker.position_y) == (50, 50)
    assert store.get(1).position_x == 50
    assert not controller.active


def test_drag_only_starts_in_select_mode(controller):
    for mode in (ViewerMode.PAN, ViewerMode.ADD_MARKER, ViewerMode.DRAW):
        assert not controller.begin_drag(1, PointerEvent(20, 10), RECT, mode)
    assert not controller.active
    assert controller.begin_drag(1, PointerEvent(20, 10), RECT, 'select')


def test_drag_needs_laid_out_container(controller):
    with pytest.raises(LayoutNotReady):
        controller.begin_drag(1, PointerEvent(20, 10), Rect(0, 0, 0, 0))
    assert not controller.active


def test_second_session_is_ignored(controller, store, scheduler):
    assert controller.begin_drag(1, PointerEvent(20, 10), RECT)
    assert not controller.begin_drag(2, PointerEvent(160, 80), RECT)
    assert not controller.begin_resize(3, PointerEvent(160, 80), (150, 40))

    assert controller.session.marker_id == 1
    controller.pointer_move(PointerEvent(40, 20))
    scheduler.run_pending()
    assert controller.rendered_position(store.get(1)) == Point(20, 20)
    assert controller.rendered_position(store.get(2)) == Point(80, 80)

    controller.pointer_up()
    assert controller.begin_drag(2, PointerEvent(160, 80), RECT)


def test_moves_are_throttled_to_one_preview_per_frame(controller, store, scheduler, previews):
    controller.begin_drag(1, PointerEvent(20, 10), RECT)
    for x in range(30, 100, 10):
        controller.pointer_move(PointerEvent(x, 10))

    assert len(scheduler.pending) == 1
    previews.assert_not_called()

    assert scheduler.run_pending() == 1
    previews.assert_called_once_with(1)
    assert controller.rendered_position(store.get(1)) == Point(45, 10)

    controller.pointer_move(PointerEvent(120, 10))
    assert len(scheduler.pending) == 1


def test_commit_uses_up_event_not_throttled_preview(controller, mock_api, scheduler):
    controller.begin_drag(1, PointerEvent(20, 10), RECT)
    controller.pointer_move(PointerEvent(40, 10))
    scheduler.run_pending()
    controller.pointer_move(PointerEvent(150, 90))

    controller.pointer_up(PointerEvent(190, 95))

    body = mock_api.call.call_args.kwargs['json']
    assert (body['position_x'], body['position_y']) == (95, 95)


def test_stale_frame_after_pointer_up_does_not_repaint(controller, store, scheduler, previews):
    controller.begin_drag(1, PointerEvent(20, 10), RECT)
    controller.pointer_move(PointerEvent(40, 10))
    controller.pointer_up(PointerEvent(60, 10))
    previews.reset_mock()

    scheduler.run_pending()
    previews.assert_not_called()
    assert controller.rendered_position(store.get(1)) == Point(30, 10)


def test_pointer_up_without_movement_skips_commit(controller, mock_api):
    controller.begin_drag(1, PointerEvent(20, 10), RECT)
    assert controller.pointer_up(PointerEvent(20, 10)) is None
    assert mock_api.call.call_count == 0
    assert not controller.active


def test_drag_within_same_percent_cell_skips_commit(controller, store, mock_api):
    controller.begin_drag(1, PointerEvent(20, 10), RECT)
    assert controller.pointer_up(PointerEvent(20.4, 10.2)) is None
    assert mock_api.call.call_count == 0
    assert controller.rendered_position(store.get(1)) == Point(10, 10)


def test_resize_held_at_minimum_skips_commit(controller, store, mock_api):
    controller.begin_resize(1, PointerEvent(50, 50), (20, 20))
    assert controller.pointer_up(PointerEvent(40, 40)) is None
    assert mock_api.call.call_count == 0
    assert not controller.active


def test_pointer_up_without_event_uses_last_move(controller, mock_api):
    controller.begin_drag(1, PointerEvent(20, 10), RECT)
    controller.pointer_move(PointerEvent(100, 50))
    controller.pointer_up()
    body = mock_api.call.call_args.kwargs['json']
    assert (body['position_x'], body['position_y']) == (50, 50)


def test_unconditional_commit_policy(store, mock_api):
    controller = DragResizeController(store, skip_unchanged_commits=False)
    controller.begin_drag(1, PointerEvent(20, 10), RECT)
    controller.pointer_up(PointerEvent(20, 10))
    assert mock_api.call.call_count == 1


def test_pointer_up_outside_container_still_ends_session(controller, mock_api):
    controller.begin_drag(1, PointerEvent(20, 10), RECT)
    controller.pointer_up(PointerEvent(-50, 400))

    body = mock_api.call.call_args.kwargs['json']
    assert (body['position_x'], body['position_y']) == (0, 100)
    assert not controller.active


def test_failed_commit_reverts_preview(controller, store, mock_api, scheduler, previews):
    controller.begin_drag(1, PointerEvent(20, 10), RECT)
    controller.pointer_move(PointerEvent(100, 50))
    scheduler.run_pending()
    assert controller.rendered_position(store.get(1)) == Point(50, 50)

    mock_api.call.side_effect = TransportError("PUT failed", status_code=500)
    with pytest.raises(TransportError):
        controller.pointer_up(PointerEvent(100, 50))

    assert not controller.active
    assert controller.rendered_position(store.get(1)) == Point(10, 10)
    assert store.get(1).position_x == 10
    assert previews.call_args.args == (1,)


def test_resize_tracks_delta_from_pointer_down(controller, mock_api, scheduler, store):
    assert controller.begin_resize(3, PointerEvent(100, 100), (150, 40))
    assert controller.session.kind == SessionKind.RESIZE
    controller.pointer_move(PointerEvent(130, 110))
    scheduler.run_pending()
    assert controller.rendered_size(store.get(3), (150, 40)) == (180, 50)

    controller.pointer_up(PointerEvent(125, 90))

    body = mock_api.call.call_args.kwargs['json']
    assert (body['width'], body['height']) == (175, 30)
    assert store.get(3).width == 175


def test_resize_has_minimum_size(controller, mock_api):
    controller.begin_resize(3, PointerEvent(100, 100), (150, 40))
    controller.pointer_up(PointerEvent(-400, -400))

    body = mock_api.call.call_args.kwargs['json']
    assert (body['width'], body['height']) == (20, 20)


def test_resize_ignored_while_placing_marker(controller):
    assert not controller.begin_resize(3, PointerEvent(100, 100), (150, 40), ViewerMode.ADD_MARKER)


def test_unknown_marker_is_ignored(controller):
    assert not controller.begin_drag(99, PointerEvent(20, 10), RECT)
    assert not controller.active


def test_pointer_events_without_session_are_noops(controller, scheduler, mock_api):
    controller.pointer_move(PointerEvent(10, 10))
    assert controller.pointer_up(PointerEvent(10, 10)) is None
    assert scheduler.pending == []
    assert mock_api.call.call_count == 0


def test_immediate_scheduler_previews_every_move(store, previews):
    controller = DragResizeController(store, scheduler=ImmediateFrameScheduler(), on_preview=previews)
    controller.begin_drag(1, PointerEvent(20, 10), RECT)
    controller.pointer_move(PointerEvent(40, 10))
    controller.pointer_move(PointerEvent(60, 10))
    assert previews.call_count == 2
    assert controller.rendered_position(store.get(1)) == Point(30, 10)
