import pytest

from tintiles.overviews import (
    PIXEL_SIZE_Z0,
    guess_max_zoom_level,
    guess_min_zoom_level,
    zoom_range,
)


@pytest.mark.parametrize("zoom", [0, 3, 10, 17])
def test_max_zoom_matches_exact_resolution(zoom):
    assert guess_max_zoom_level(PIXEL_SIZE_Z0 / 2**zoom) == zoom


def test_max_zoom_decreases_with_coarser_resolution():
    assert guess_max_zoom_level(1.0) > guess_max_zoom_level(100.0)


def test_max_zoom_invalid_resolution():
    with pytest.raises((ValueError, ZeroDivisionError)):
        guess_max_zoom_level(0.0)


@pytest.mark.parametrize("zoom", [0, 5, 12])
def test_min_zoom_for_minimal_raster(zoom):
    assert guess_min_zoom_level(zoom, 128, 128) == zoom


def test_min_zoom_never_negative():
    assert guess_min_zoom_level(0, 100000, 100000) == 0


def test_min_zoom_uses_larger_side():
    assert guess_min_zoom_level(10, 128, 128 * 4) < guess_min_zoom_level(10, 128, 128)


def test_zoom_range_unbounded_max_uses_estimate():
    cell = PIXEL_SIZE_Z0 / 2**12
    low, high = zoom_range(cell, 128 * 2**12, 128 * 2**12, 0, -1)
    assert high == 12
    assert low == 0


def test_zoom_range_caps_requested_max():
    cell = PIXEL_SIZE_Z0 / 2**12
    assert zoom_range(cell, 128 * 2**12, 128 * 2**12, 0, 20)[1] == 12
    assert zoom_range(cell, 128 * 2**12, 128 * 2**12, 0, 7)[1] == 7


def test_zoom_range_swaps_inverted_range():
    cell = PIXEL_SIZE_Z0 / 2**5
    low, high = zoom_range(cell, 4096, 4096, 8, -1)
    assert (low, high) == (5, 8)
    assert low <= high