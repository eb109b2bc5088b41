"""Tests for geometry.py - output size of rendered pages."""

import pytest

from pdflens.geometry import RenderGeometry, compute_geometry


def test_landscape_width_controls():
    geometry = compute_geometry(1000, 500, 750)
    assert (geometry.width, geometry.height) == (750, 375)
    assert geometry.scale_x == pytest.approx(0.75)
    assert geometry.scale_y == pytest.approx(0.75)


def test_portrait_height_controls():
    geometry = compute_geometry(500, 1000, 750)
    assert (geometry.width, geometry.height) == (375, 750)


def test_unit_page():
    assert compute_geometry(1, 1, 1) == RenderGeometry(1, 1, 1.0, 1.0)


def test_square_page_uses_width():
    geometry = compute_geometry(300, 300, 100)
    assert (geometry.width, geometry.height) == (100, 100)


def test_letter_page():
    geometry = compute_geometry(612, 792, 1024)
    assert geometry.height == 1024
    assert geometry.width == 791  # 612 * 1024 / 792 = 791.27
    assert geometry.scale_x == pytest.approx(791 / 612)
    assert geometry.scale_y == pytest.approx(1024 / 792)


def test_rounds_half_up():
    # 1 * 5 / 2 = 2.5
    geometry = compute_geometry(2, 1, 5)
    assert (geometry.width, geometry.height) == (5, 3)


def test_short_side_at_least_one_pixel():
    geometry = compute_geometry(10000, 1, 100)
    assert (geometry.width, geometry.height) == (100, 1)


def test_zero_dimension_clamped_to_one():
    geometry = compute_geometry(200, 100, 0)
    assert (geometry.width, geometry.height) == (1, 1)


def test_longer_side_matches_request():
    for source in [(595, 842), (842, 595), (100, 101), (7, 3)]:
        for dimension in [1, 17, 512, 2048]:
            geometry = compute_geometry(*source, dimension)
            assert max(geometry.width, geometry.height) == dimension


def test_rejects_empty_page():
    with pytest.raises(ValueError):
        compute_geometry(0, 100, 10)
