import math

import numpy as np
import pytest

from mandelview import (
    ComplexPoint,
    InvalidViewport,
    OutOfBoundsPixel,
    ViewportState,
    map_pixel_to_plane,
    pan_by,
    plane_coordinate,
    plane_grid,
    zoom_at,
)


def test_complex_point_arithmetic_returns_new_values():
    z = ComplexPoint(1.0, 2.0)
    squared = z.square()
    assert squared == ComplexPoint(-3.0, 4.0)
    assert z == ComplexPoint(1.0, 2.0)
    assert z.add(ComplexPoint(0.5, -1.0)) == ComplexPoint(1.5, 1.0)
    assert ComplexPoint(3.0, 4.0).modulus() == 5.0


def test_viewport_defaults():
    viewport = ViewportState()
    assert viewport.snapshot() == (0.5, 0.0, 0.0)


@pytest.mark.parametrize("zoom", [0.0, -1.0, math.inf, math.nan])
def test_viewport_rejects_degenerate_zoom(zoom):
    with pytest.raises(InvalidViewport):
        ViewportState(zoom=zoom)


def test_rejected_update_keeps_previous_state():
    viewport = ViewportState(2.0, 1.0, -1.0)
    with pytest.raises(InvalidViewport):
        viewport.update(0.0, 5.0, 5.0)
    with pytest.raises(InvalidViewport):
        viewport.set_offset(math.nan, 0.0)
    assert viewport.snapshot() == (2.0, 1.0, -1.0)


def test_mapping_formula():
    viewport = ViewportState(0.5, 0.0, 0.0)
    assert map_pixel_to_plane(0, 0, viewport, 800, 800) == ComplexPoint(-2.0, -2.0)
    assert map_pixel_to_plane(400, 400, viewport, 800, 800) == ComplexPoint(0.0, 0.0)
    shifted = ViewportState(2.0, -0.75, 0.25)
    point = map_pixel_to_plane(300, 100, shifted, 400, 200)
    assert point.real == pytest.approx((300 - 200) / 400 - 0.75)
    assert point.imaginary == pytest.approx((100 - 100) / 200 + 0.25)


def test_mapping_is_deterministic():
    viewport = ViewportState(1.37, -0.123, 0.456)
    first = map_pixel_to_plane(17, 91, viewport, 640, 480)
    second = map_pixel_to_plane(17, 91, viewport, 640, 480)
    assert first.real == second.real
    assert first.imaginary == second.imaginary


@pytest.mark.parametrize("pixel", [(-1, 0), (0, -1), (10, 0), (0, 5)])
def test_out_of_bounds_pixels_are_rejected(pixel):
    with pytest.raises(OutOfBoundsPixel):
        map_pixel_to_plane(pixel[0], pixel[1], ViewportState(), 10, 5)


def test_plane_grid_matches_scalar_mapping_exactly():
    viewport = ViewportState(0.83, -0.5, 0.1)
    reals, imaginaries = plane_grid(viewport, 7, 5)
    assert reals.shape == (5, 7)
    for y in range(5):
        for x in range(7):
            point = map_pixel_to_plane(x, y, viewport, 7, 5)
            assert reals[y, x] == point.real
            assert imaginaries[y, x] == point.imaginary


def test_pan_shifts_plane_points_by_offset_change():
    viewport = ViewportState(0.8, 0.1, -0.2)
    before = map_pixel_to_plane(12, 34, viewport, 100, 80)
    shifted = ViewportState(0.8, 0.1 + 0.3, -0.2 - 0.05)
    after = map_pixel_to_plane(12, 34, shifted, 100, 80)
    assert after.real == pytest.approx(before.real + 0.3)
    assert after.imaginary == pytest.approx(before.imaginary - 0.05)


def test_pan_by_scales_movement_by_inverse_zoom():
    viewport = ViewportState(0.5, 0.0, 0.0)
    pan_by(viewport, 3.0, -1.0)
    assert viewport.snapshot() == (0.5, -6.0, 2.0)


@pytest.mark.parametrize("factor", [1.1, 1 / 1.1, 3.0, 0.25])
@pytest.mark.parametrize("cursor", [(0.0, 0.0), (123.0, 456.0), (799.0, 10.5)])
def test_zoom_keeps_point_under_cursor(factor, cursor):
    viewport = ViewportState(0.7, -0.4, 0.3)
    before = plane_coordinate(cursor[0], cursor[1], viewport, 800, 600)
    zoom_at(viewport, cursor[0], cursor[1], factor, 800, 600)
    after = plane_coordinate(cursor[0], cursor[1], viewport, 800, 600)
    assert viewport.zoom == pytest.approx(0.7 * factor)
    assert after.real == pytest.approx(before.real, abs=1e-12)
    assert after.imaginary == pytest.approx(before.imaginary, abs=1e-12)


@pytest.mark.parametrize("factor", [0.0, -2.0, math.nan, math.inf])
def test_zoom_rejects_degenerate_factor(factor):
    viewport = ViewportState(0.5, 0.1, 0.2)
    with pytest.raises(InvalidViewport):
        zoom_at(viewport, 10, 10, factor, 100, 100)
    assert viewport.snapshot() == (0.5, 0.1, 0.2)


def test_plane_grid_rejects_empty_surface():
    with pytest.raises(ValueError):
        plane_grid(ViewportState(), 0, 10)
    assert np.float64(plane_grid(ViewportState(), 1, 1)[0][0, 0]) == -2.0


def test_zoom_on_empty_surface_is_degenerate():
    from mandelview import DegenerateGesture

    viewport = ViewportState(0.5, 0.1, 0.2)
    with pytest.raises(DegenerateGesture):
        zoom_at(viewport, 0, 0, 1.1, 0, 4)
    assert viewport.snapshot() == (0.5, 0.1, 0.2)
