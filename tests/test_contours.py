"""
Marching-squares contour extraction and level parsing tests.
"""

import numpy as np
import pytest

from diffractx.contours import (
    ContourSegment,
    contour_segments,
    label_anchors,
    marching_squares,
    parse_levels,
    segments_to_physical,
)


def _endpoints(seg):
    return sorted([tuple(seg.start), tuple(seg.end)])


def test_single_cell_horizontal_crossing():
    """v00 = v10 = 0, v01 = v11 = 1: one segment from left-edge to right-edge midpoint."""
    field = np.array([[0.0, 0.0], [1.0, 1.0]])
    segs = marching_squares(field, 0.5)

    assert len(segs) == 1
    (x0, y0), (x1, y1) = _endpoints(segs[0])
    assert (x0, y0) == pytest.approx((0.0, 0.5))
    assert (x1, y1) == pytest.approx((1.0, 0.5))


def test_vertical_crossing_interpolates_linearly():
    field = np.array([[0.0, 1.0], [0.0, 1.0]])
    segs = marching_squares(field, 0.25)

    assert len(segs) == 1
    (x0, y0), (x1, y1) = _endpoints(segs[0])
    assert (x0, y0) == pytest.approx((0.25, 0.0))
    assert (x1, y1) == pytest.approx((0.25, 1.0))


def test_corner_case_cuts_one_corner():
    # only the top-right corner is above the level
    field = np.array([[0.0, 0.0], [0.0, 1.0]])
    segs = marching_squares(field, 0.5)

    assert len(segs) == 1
    (x0, y0), (x1, y1) = _endpoints(segs[0])
    assert (x0, y0) == pytest.approx((0.5, 1.0))
    assert (x1, y1) == pytest.approx((1.0, 0.5))


@pytest.mark.parametrize("value", [0.0, 1.0])
def test_uniform_cells_produce_nothing(value):
    field = np.full((4, 5), value)
    assert marching_squares(field, 0.5) == []


@pytest.mark.parametrize(
    "field",
    [
        np.array([[1.0, 0.0], [0.0, 1.0]]),   # case 5
        np.array([[0.0, 1.0], [1.0, 0.0]]),   # case 10
    ],
)
def test_saddles_emit_two_segments(field):
    segs = marching_squares(field, 0.5)
    assert len(segs) == 2

    # the denominator guard shifts crossings by ~1e-15, so round before ordering
    points = sorted((round(x, 9), round(y, 9)) for seg in segs for x, y in (seg.start, seg.end))
    expected = sorted([(0.5, 0.0), (1.0, 0.5), (0.5, 1.0), (0.0, 0.5)])
    assert points == expected


def test_level_equal_to_corner_counts_as_above():
    field = np.array([[0.5, 0.0], [0.0, 0.0]])
    segs = marching_squares(field, 0.5)
    assert len(segs) == 1
    (x0, y0), (x1, y1) = _endpoints(segs[0])
    assert (x0, y0) == pytest.approx((0.0, 0.0))
    assert (x1, y1) == pytest.approx((0.0, 0.0))


def test_cells_with_nan_corner_are_skipped():
    field = np.array([
        [0.0, 0.0, 0.0],
        [1.0, np.nan, 1.0],
    ])
    assert marching_squares(field, 0.5) == []


def test_radial_field_segments_lie_on_cell_edges():
    j, i = np.mgrid[0:21, 0:21]
    field = np.hypot(i - 10.0, j - 10.0)
    segs = marching_squares(field, 6.3)

    assert len(segs) > 20
    for seg in segs:
        for px, py in (seg.start, seg.end):
            on_edge = abs(px - round(px)) < 1e-12 or abs(py - round(py)) < 1e-12
            assert on_edge
            # linear interpolation keeps points close to the true circle
            assert np.hypot(px - 10.0, py - 10.0) == pytest.approx(6.3, abs=0.1)


def test_segments_follow_row_major_cell_order():
    # row 0 is case 12, row 1 is case 3; output follows the rows, not the case index
    field = np.array([[0.0, 0.0], [1.0, 1.0], [0.0, 0.0]])
    segs = marching_squares(field, 0.5)

    assert [seg.midpoint[1] for seg in segs] == pytest.approx([0.5, 1.5])


def test_degenerate_fields():
    assert marching_squares(np.zeros((1, 5)), 0.5) == []
    assert marching_squares(np.zeros(4), 0.5) == []


def test_contour_segments_per_level():
    field = np.array([[0.0, 0.0], [1.0, 1.0]])
    out = contour_segments(field, [0.25, 0.5, 2.0])

    assert list(out) == [0.25, 0.5, 2.0]
    assert len(out[0.25]) == 1
    assert len(out[0.5]) == 1
    assert out[2.0] == []


def test_parse_levels_range():
    assert parse_levels("0.2:0.1:0.5") == [0.2, 0.3, 0.4, 0.5]
    assert parse_levels(" 0 : 0.25 : 1 ") == [0.0, 0.25, 0.5, 0.75, 1.0]


def test_parse_levels_list():
    assert parse_levels("0.2, 0.5,abc, 0.8") == [0.2, 0.5, 0.8]
    assert parse_levels("0.7") == [0.7]


@pytest.mark.parametrize("text", [None, "", "   ", "1:0:2", "1:-1:2", "1:2", "a:b:c", "5:1:1", "x, y", "nan"])
def test_parse_levels_invalid(text):
    assert parse_levels(text) is None


def test_label_anchors_are_sparse_and_skip_near_strip():
    segs = [ContourSegment((float(k), 0.0), (float(k) + 1.0, 0.0)) for k in range(12)]

    # every fourth midpoint is a candidate; the first one falls inside the strip
    anchors = label_anchors(segs, desired=3, min_x=3.0)
    assert anchors == [(4.5, 0.0), (8.5, 0.0)]

    assert len(label_anchors(segs, desired=3)) == 3
    assert len(label_anchors(segs, desired=50)) == 12


def test_label_anchors_empty():
    assert label_anchors([], desired=6) == []


def test_segment_midpoint_and_physical_mapping():
    seg = ContourSegment((1.0, 2.0), (3.0, 4.0))
    assert seg.midpoint == (2.0, 3.0)

    (mapped,) = segments_to_physical([seg], dx=0.5, dy=2.0)
    assert mapped.start == (0.5, 4.0)
    assert mapped.end == (1.5, 8.0)

    (nondim,) = segments_to_physical([seg], dx=0.5, dy=2.0, scale=2.0)
    assert nondim.start == (0.25, 2.0)
