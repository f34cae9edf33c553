"""Tests for the marker interaction handler and the app composition root."""
import pytest
from unittest.mock import Mock
from shared.enums import ViewerMode
from src.floorplan_app.app import FloorplanApp
from src.floorplan_app.config_manager import ConfigManager
from src.floorplan_app.engine.coordinates import Rect, PointerEvent, Point
from src.floorplan_app.engine.interaction import ManualFrameScheduler
from src.floorplan_app.errors import FetchError, TransportError

RECT = Rect(left=0, top=0, width=400, height=200)
FLOORPLAN = {'id': 1, 'project_id': 3, 'name': 'Ground floor', 'page_count': 2}


@pytest.fixture
def app(make_record):
    """FloorplanApp whose REST client is replaced by a Mock."""
    floorplan_app = FloorplanApp(config=ConfigManager(), scheduler=ManualFrameScheduler(), configure_logging=False)
    floorplan_app.api_service.call = Mock(return_value=[
        make_record(1, position_x=50.0, position_y=50.0),
        make_record(2, page=2),
    ])
    return floorplan_app


@pytest.fixture
def handler(app):
    assert app.marker_handler.select_floorplan(FLOORPLAN)
    app.api_service.call.reset_mock()
    return app.marker_handler


def echo(method, endpoint, json=None):
    if method == 'DELETE':
        return None
    marker_id = 40 if method == 'POST' else int(endpoint.rsplit('/', 1)[1])
    return {**json, 'id': marker_id}


def test_app_wires_services_from_config(app):
    assert app.marker_store.api is app.api_service
    assert app.marker_store.equipment_service is app.equipment_service
    assert app.controller.store is app.marker_store
    assert app.controller.min_size == 20
    assert app.state.marker_scale == 1.0


def test_select_floorplan_loads_markers(handler, app):
    assert app.state.current_floorplan_id == 1
    assert app.state.page_count == 2
    assert app.marker_store.project_id == 3
    assert [m.id for m in app.marker_store.markers] == [1, 2]


def test_select_floorplan_reports_fetch_error(app):
    app.api_service.call.side_effect = FetchError("GET /api/floorplans/1/markers failed: timeout")
    assert not app.marker_handler.select_floorplan(FLOORPLAN)
    assert app.state.current_floorplan_id is None
    assert 'timeout' in app.state.notifications[-1]


def test_change_page_is_bounded(handler, app):
    assert handler.change_page(2) == 2
    assert handler.change_page(5) == 2
    assert handler.change_page(0) == 1


def test_click_only_places_in_add_marker_mode(handler, app):
    assert handler.handle_container_click(PointerEvent(100, 50), RECT) is None
    assert app.state.pending_placement is None

    handler.set_mode(ViewerMode.ADD_MARKER)
    assert handler.handle_container_click(PointerEvent(100, 50), RECT) == Point(25, 25)
    assert app.state.pending_placement == Point(25, 25)


def test_click_before_layout_notifies(handler, app):
    handler.set_mode('add_marker')
    assert handler.handle_container_click(PointerEvent(100, 50), Rect(0, 0, 0, 0)) is None
    assert app.state.pending_placement is None
    assert app.state.notifications


def test_submit_note_placement(handler, app):
    handler.set_mode(ViewerMode.ADD_MARKER)
    handler.handle_container_click(PointerEvent(100, 50), RECT)
    app.api_service.call.side_effect = echo

    marker = handler.submit_placement('note')

    body = app.api_service.call.call_args.kwargs['json']
    assert body['label'] == 'Note'
    assert body['equipment_id'] == -1
    assert (body['position_x'], body['position_y']) == (25, 25)
    assert marker.id == 40
    assert app.state.pending_placement is None
    assert app.state.mode == ViewerMode.SELECT


def test_submit_equipment_placement_provisions_equipment(handler, app):
    handler.set_mode(ViewerMode.ADD_MARKER)
    handler.handle_container_click(PointerEvent(100, 50), RECT)

    def api(method, endpoint, json=None):
        if endpoint == '/api/cameras':
            return {**json, 'id': 88}
        return echo(method, endpoint, json)
    app.api_service.call.side_effect = api

    marker = handler.submit_placement('camera', label='Dock cam', location='Loading dock')

    equipment_body = app.api_service.call.call_args_list[0].kwargs['json']
    assert equipment_body == {'project_id': 3, 'location': 'Loading dock', 'camera_type': 'Standard'}
    assert marker.equipment_id == 88


def test_submit_failure_keeps_pending_placement(handler, app):
    handler.set_mode(ViewerMode.ADD_MARKER)
    handler.handle_container_click(PointerEvent(100, 50), RECT)
    app.api_service.call.side_effect = TransportError("POST /api/floorplan-markers failed: boom")

    assert handler.submit_placement('note', label='Check') is None
    assert app.state.pending_placement == Point(25, 25)
    assert 'boom' in app.state.notifications[-1]


def test_submit_without_click_notifies(handler, app):
    assert handler.submit_placement('note') is None
    assert app.api_service.call.call_count == 0
    assert app.state.notifications


def test_cancel_placement(handler, app):
    handler.set_mode(ViewerMode.ADD_MARKER)
    handler.handle_container_click(PointerEvent(100, 50), RECT)
    handler.cancel_placement()
    assert app.state.pending_placement is None
    assert app.state.mode == ViewerMode.SELECT


def test_duplicate_delete_and_relabel(handler, app):
    app.api_service.call.side_effect = echo
    assert handler.update_label(1, 'Door 4').label == 'Door 4'
    assert handler.delete_marker(2)
    assert [m.id for m in app.marker_store.markers] == [1]

    app.api_service.call.side_effect = TransportError("DELETE failed")
    assert not handler.delete_marker(1)
    assert app.state.notifications[-1].startswith('Failed to delete marker 1')


def test_duplicate_unknown_marker(handler, app):
    assert handler.duplicate_marker(99) is None
    assert app.api_service.call.call_count == 0


def test_drag_through_handler(handler, app):
    app.api_service.call.side_effect = echo
    assert handler.pointer_down(PointerEvent(200, 100), RECT)
    handler.pointer_move(PointerEvent(300, 150))
    marker = handler.pointer_up(PointerEvent(300, 150))
    assert (marker.position_x, marker.position_y) == (75, 75)


def test_pointer_down_on_empty_space(handler):
    assert not handler.pointer_down(PointerEvent(10, 10), RECT)


def test_failed_drag_commit_notifies_and_reverts(handler, app):
    handler.pointer_down(PointerEvent(200, 100), RECT, marker_id=1)
    handler.pointer_move(PointerEvent(300, 150))
    app.controller.scheduler.run_pending()
    app.api_service.call.side_effect = TransportError("PUT failed", status_code=503)

    assert handler.pointer_up(PointerEvent(300, 150)) is None

    assert 'save marker 1' in app.state.notifications[-1]
    item = next(i for i in handler.render(RECT) if i.marker_id == 1)
    assert item.position == (200, 100)


def test_resize_through_handler(handler, app, make_record):
    app.api_service.call.return_value = [make_record(5, marker_type='note', equipment_id=-1, label='Pipes')]
    handler.select_floorplan(FLOORPLAN)
    app.api_service.call.side_effect = echo

    assert handler.resize_handle_down(5, PointerEvent(100, 100))
    marker = handler.pointer_up(PointerEvent(110, 130))
    assert (marker.width, marker.height) == (160, 70)


def test_render_current_page_only(handler):
    assert [item.marker_id for item in handler.render(RECT)] == [1]
    handler.change_page(2)
    assert [item.marker_id for item in handler.render(RECT)] == [2]
    assert handler.render(Rect(0, 0, 0, 0)) == []


def test_open_project_sets_project_for_provisioning(app):
    app.api_service.call.return_value = [FLOORPLAN]
    assert app.open_project(3) == [FLOORPLAN]
    app.api_service.call.assert_called_with('GET', '/api/projects/3/floorplans')
    assert app.state.current_project_id == 3
    assert app.marker_store.project_id == 3
