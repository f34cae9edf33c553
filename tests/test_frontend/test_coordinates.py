"""Tests for pointer/percentage coordinate mapping."""
import pytest
from src.floorplan_app.engine.coordinates import (
    Rect, PointerEvent, Point, to_percent, to_pixels, round_half_up
)
from src.floorplan_app.errors import LayoutNotReady

RECT = Rect(left=100, top=50, width=200, height=400)


def test_to_percent_maps_relative_to_container():
    assert to_percent(PointerEvent(200, 250), RECT) == Point(50, 50)
    assert to_percent(PointerEvent(100, 50), RECT) == Point(0, 0)
    assert to_percent(PointerEvent(300, 450), RECT) == Point(100, 100)


def test_to_percent_rounds_to_nearest_integer():
    # 101 px into a 200 px container is 50.5%
    assert to_percent(PointerEvent(201, 50), RECT).x == 51
    assert to_percent(PointerEvent(200.8, 50), RECT).x == 50
    assert to_percent(PointerEvent(201, 50), RECT, rounded=False).x == pytest.approx(50.5)


@pytest.mark.parametrize('client_x,client_y', [
    (100, 50), (299, 449), (150, 300), (-500, -500), (5000, 90), (180, 10000),
])
def test_to_percent_is_clamped(client_x, client_y):
    point = to_percent(PointerEvent(client_x, client_y), RECT)
    assert 0 <= point.x <= 100
    assert 0 <= point.y <= 100


def test_to_percent_clamps_outside_points_to_edges():
    assert to_percent(PointerEvent(-20, 2000), RECT) == Point(0, 100)


@pytest.mark.parametrize('rect', [Rect(0, 0, 0, 300), Rect(0, 0, 300, 0), Rect(10, 10, -5, 100)])
def test_unmeasured_container_raises_layout_not_ready(rect):
    with pytest.raises(LayoutNotReady):
        to_percent(PointerEvent(10, 10), rect)
    with pytest.raises(LayoutNotReady):
        to_pixels(Point(10, 10), rect)


def test_to_pixels_is_relative_unless_absolute():
    assert to_pixels(Point(50, 25), RECT) == (100, 100)
    assert to_pixels(Point(50, 25), RECT, absolute=True) == (200, 150)


@pytest.mark.parametrize('client_x,client_y', [(100, 50), (137, 311), (299.4, 449.9), (250.5, 60.2)])
def test_round_trip_within_one_pixel(client_x, client_y):
    rect = Rect(left=100, top=50, width=200, height=200)
    event = PointerEvent(client_x, min(client_y, 250))
    left, top = to_pixels(to_percent(event, rect), rect, absolute=True)
    assert abs(left - event.client_x) <= 1
    assert abs(top - event.client_y) <= 1


def test_mapping_is_deterministic():
    event = PointerEvent(173.3, 91.7)
    assert {to_percent(event, RECT) for _ in range(5)} == {to_percent(event, RECT)}


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2
