"""
contours.py

Iso-level contour extraction (marching squares) over a computed Kd field,
plus helpers for level parsing, label placement and coordinate mapping.

Segments are produced in grid-index space: x is the column index, y the row
index of ``field[row, col]``. Callers map them to physical units with
``segments_to_physical``.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

DEFAULT_LEVELS = (0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8)

# Cell edges: 0 bottom, 1 right, 2 top, 3 left.
# Corner bits: bottom-left 1, bottom-right 2, top-right 4, top-left 8.
# Saddles (5, 10) are resolved by emitting both diagonal pairs.
CASE_TABLE = (
    (),
    ((3, 0),),
    ((0, 1),),
    ((3, 1),),
    ((1, 2),),
    ((3, 2), (0, 1)),
    ((0, 2),),
    ((3, 2),),
    ((2, 3),),
    ((0, 2),),
    ((0, 3), (1, 2)),
    ((1, 2),),
    ((1, 3),),
    ((0, 1),),
    ((3, 0),),
    (),
)

_DENOM_EPS = 1e-15


class ContourSegment(NamedTuple):
    start: tuple[float, float]
    end: tuple[float, float]

    @property
    def midpoint(self) -> tuple[float, float]:
        return (0.5 * (self.start[0] + self.end[0]), 0.5 * (self.start[1] + self.end[1]))


def marching_squares(field: np.ndarray, level: float) -> list[ContourSegment]:
    """Iso-level line segments of a 2-D field for one level.

    Parameters
    ----------
    field : np.ndarray
        (ny x nx) scalar field indexed [row][col].
    level : float
        Iso-value.

    Returns
    -------
    segments : list of ContourSegment
        Independent, unordered segments in grid-index coordinates. Cells with a
        non-finite corner produce no segments.
    """
    f = np.asarray(field, dtype=float)
    if f.ndim != 2 or f.shape[0] < 2 or f.shape[1] < 2:
        return []
    level = float(level)

    v00 = f[:-1, :-1]
    v10 = f[:-1, 1:]
    v01 = f[1:, :-1]
    v11 = f[1:, 1:]

    idx = (
        (v00 >= level).astype(np.int8)
        | ((v10 >= level).astype(np.int8) << 1)
        | ((v11 >= level).astype(np.int8) << 2)
        | ((v01 >= level).astype(np.int8) << 3)
    )
    finite = np.isfinite(v00) & np.isfinite(v10) & np.isfinite(v01) & np.isfinite(v11)
    idx[~finite] = 0

    jj, ii = np.indices(idx.shape, dtype=float)

    def _t(a, b):
        return (level - a) / (b - a + _DENOM_EPS)

    with np.errstate(invalid="ignore", divide="ignore"):
        edges = (
            (ii + _t(v00, v10), jj),            # bottom
            (ii + 1.0, jj + _t(v10, v11)),      # right
            (ii + _t(v01, v11), jj + 1.0),      # top
            (ii, jj + _t(v00, v01)),            # left
        )

    flat = idx.ravel()
    ex = [np.ravel(e[0]) for e in edges]
    ey = [np.ravel(e[1]) for e in edges]

    # row-major cell order, so label_anchors samples along the field
    segments = []
    for c in np.flatnonzero((flat > 0) & (flat < 15)):
        for a, b in CASE_TABLE[flat[c]]:
            segments.append(
                ContourSegment((float(ex[a][c]), float(ey[a][c])), (float(ex[b][c]), float(ey[b][c])))
            )
    return segments


def contour_segments(field: np.ndarray, levels) -> dict[float, list[ContourSegment]]:
    """Run marching squares for every requested level."""
    return {float(level): marching_squares(field, level) for level in levels}


def parse_levels(text: str | None) -> list[float] | None:
    """Parse a contour-level string.

    Accepts "start:step:end" (inclusive range) or a comma list "0.2, 0.5, 0.8".
    Returns None when the string is empty or invalid, so the caller default applies.
    """
    s = (text or "").strip()
    if not s:
        return None

    if ":" in s:
        try:
            parts = [float(p.strip()) for p in s.split(":")]
        except ValueError:
            return None
        if len(parts) != 3 or not all(np.isfinite(parts)):
            return None
        start, step, end = parts
        if step <= 0:
            return None

        out = []
        v = start
        while v <= end + 1e-12:
            out.append(round(v, 12))
            v += step
        return out or None

    out = []
    for part in s.split(","):
        try:
            v = float(part.strip())
        except ValueError:
            continue
        if np.isfinite(v):
            out.append(v)
    return out or None


def label_anchors(
    segments: list[ContourSegment],
    desired: int = 6,
    min_x: float = 0.0,
) -> list[tuple[float, float]]:
    """Pick up to `desired` sparse segment midpoints as label positions.

    Midpoints with x below `min_x` (the strip next to the breakwater) are skipped.
    """
    if not segments or desired <= 0:
        return []

    step = max(1, len(segments) // desired)
    anchors = []
    for s in range(0, len(segments), step):
        if len(anchors) >= desired:
            break
        mid = segments[s].midpoint
        if mid[0] < min_x:
            continue
        anchors.append(mid)
    return anchors


def segments_to_physical(
    segments: list[ContourSegment],
    dx: float,
    dy: float,
    scale: float = 1.0,
) -> list[ContourSegment]:
    """Map index-space segments to physical units (divided by `scale`, e.g. L for x/L)."""
    sx = dx / scale
    sy = dy / scale
    return [
        ContourSegment((seg.start[0] * sx, seg.start[1] * sy), (seg.end[0] * sx, seg.end[1] * sy))
        for seg in segments
    ]
