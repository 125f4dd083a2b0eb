"""
grid.py

Chunked, cancellable evaluation of the diffraction coefficient over a
rectangular grid behind the breakwater.

x is the distance behind the structure (0..x_max), y the position along it
(0..y_max). The breakwater tip sits at the origin; a finite breakwater of
length B adds a second tip at (0, B) and the two tip contributions are
combined coherently.

``iter_grid`` validates its inputs eagerly and returns a lazy generator of
``GridEvent``s: one RUNNING event per chunk of rows, then a single terminal
DONE (carrying the ``GridResult``) or STOPPED event. Cancellation is polled
between chunks only.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator

import numpy as np

from .contours import ContourSegment, contour_segments, segments_to_physical
from .core import WaveCondition
from .errors import (
    ComputationStopped,
    DiffractXError,
    GridTooLargeError,
    InvalidParameterError,
    TableError,
)
from .interference import combine_two_tips
from .semi_infinite import kd_semi_infinite
from .wiegel import WiegelTable, kd_wiegel

logger = logging.getLogger(__name__)

MAX_GRID_POINTS = 1_200_000     # allows 1001 x 1001
LARGE_GRID_POINTS = 600_000
CHUNK_ROWS_LARGE = 2
CHUNK_ROWS = 6
COORD_EPS = 1e-9

MODELS = ("semi_infinite", "wiegel")


class ComputeStatus(str, Enum):
    RUNNING = "running"
    DONE = "done"
    STOPPED = "stopped"
    ERROR = "error"


class CancellationToken:
    """Cooperative cancellation flag shared between a host and a grid run."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass(frozen=True)
class GridConfig:
    """Grid extents, wave condition and breakwater geometry for one computation.

    Parameters
    ----------
    dx, dy : float
        Grid steps [m], > 0.
    x_max, y_max : float
        Grid extents [m], >= 0.
    period : float
        Wave period T [s].
    depth : float
        Water depth h [m].
    theta_inc : float
        Incidence angle [deg].
    breakwater_length : float or None
        Length B [m] of a finite breakwater (tips at (0, 0) and (0, B)).
        None models a single semi-infinite tip at the origin.
    model : str
        "semi_infinite" (closed form) or "wiegel" (table interpolation).
    wavelength : float or None
        Wavelength override [m] for the semi-infinite model; by default L
        follows from the dispersion relation.
    chunk_rows : int or None
        Rows per chunk; by default 2 for very large grids, 6 otherwise.
    """

    dx: float
    dy: float
    x_max: float
    y_max: float
    period: float
    depth: float
    theta_inc: float
    breakwater_length: float | None = None
    model: str = "semi_infinite"
    wavelength: float | None = None
    chunk_rows: int | None = None

    def validate(self) -> None:
        numbers = {
            "dx": self.dx,
            "dy": self.dy,
            "x_max": self.x_max,
            "y_max": self.y_max,
            "period": self.period,
            "depth": self.depth,
            "theta_inc": self.theta_inc,
        }
        if self.breakwater_length is not None:
            numbers["breakwater_length"] = self.breakwater_length
        if self.wavelength is not None:
            numbers["wavelength"] = self.wavelength
        if self.chunk_rows is not None:
            numbers["chunk_rows"] = self.chunk_rows

        for name, value in numbers.items():
            try:
                ok = np.isfinite(float(value))
            except (TypeError, ValueError):
                ok = False
            if not ok:
                raise InvalidParameterError(f"{name} must be a finite number (got {value!r}).")
        numbers = {name: float(value) for name, value in numbers.items()}

        for name in ("dx", "dy", "period", "depth"):
            if numbers[name] <= 0:
                raise InvalidParameterError(f"{name} must be > 0 (got {numbers[name]!r}).")
        for name in ("x_max", "y_max"):
            if numbers[name] < 0:
                raise InvalidParameterError(f"{name} must be >= 0 (got {numbers[name]!r}).")
        if numbers.get("breakwater_length", 0.0) < 0:
            raise InvalidParameterError(f"breakwater_length must be >= 0 (got {self.breakwater_length!r}).")
        if numbers.get("wavelength", 1.0) <= 0:
            raise InvalidParameterError(f"wavelength must be > 0 (got {self.wavelength!r}).")

        if self.model not in MODELS:
            raise InvalidParameterError(f"Unknown model {self.model!r}; expected one of {MODELS}.")
        if self.model == "wiegel" and self.wavelength is not None:
            raise InvalidParameterError("A wavelength override is only supported by the semi-infinite model.")
        chunk_rows = numbers.get("chunk_rows", 1.0)
        if chunk_rows != int(chunk_rows) or chunk_rows < 1:
            raise InvalidParameterError(f"chunk_rows must be a positive integer (got {self.chunk_rows!r}).")

    @property
    def shape(self) -> tuple[int, int]:
        """(ny, nx) point counts."""
        return grid_size(self.y_max, self.dy), grid_size(self.x_max, self.dx)


def grid_size(max_value: float, step: float) -> int:
    """Number of points from 0 to max_value (inclusive) at the given step.

    Returns ``math.inf`` when max_value / step overflows.
    """
    n = max_value / step + COORD_EPS
    if not np.isfinite(n):
        return math.inf
    return int(np.floor(n)) + 1


def grid_coordinates(max_value: float, step: float) -> np.ndarray:
    """Coordinates 0, step, 2·step, ... up to max_value (inclusive, with tolerance)."""
    n = grid_size(max_value, step)
    return np.round(np.arange(n) * step, 10)


@dataclass(frozen=True, eq=False)
class GridResult:
    """Completed Kd field. Arrays are read-only snapshots."""

    x: np.ndarray
    y: np.ndarray
    kd: np.ndarray
    wave: WaveCondition
    wavelength: float
    config: GridConfig

    @property
    def shape(self) -> tuple[int, int]:
        return self.kd.shape

    def centerline(self) -> tuple[np.ndarray, np.ndarray]:
        """Kd along the row nearest y = 0, as (x, kd)."""
        iy = int(np.argmin(np.abs(self.y)))
        return self.x, self.kd[iy]

    def finite_stats(self) -> dict:
        """Counts and range of the finite cells: {n, n_finite, kd_min, kd_max}."""
        finite = np.isfinite(self.kd)
        n_finite = int(finite.sum())
        if n_finite == 0:
            return {"n": int(self.kd.size), "n_finite": 0, "kd_min": np.nan, "kd_max": np.nan}
        vals = self.kd[finite]
        return {
            "n": int(self.kd.size),
            "n_finite": n_finite,
            "kd_min": float(vals.min()),
            "kd_max": float(vals.max()),
        }

    def contours(
        self,
        levels,
        nondimensional: bool = False,
    ) -> dict[float, list[ContourSegment]]:
        """Contour segments per level in physical units (or x/L, y/L)."""
        scale = self.wavelength if nondimensional else 1.0
        return {
            level: segments_to_physical(segs, self.config.dx, self.config.dy, scale=scale)
            for level, segs in contour_segments(self.kd, levels).items()
        }


@dataclass(frozen=True)
class GridEvent:
    """Progress or terminal status of a grid computation."""

    status: ComputeStatus
    rows_done: int
    rows_total: int
    result: GridResult | None = None
    reason: str | None = None

    @property
    def fraction(self) -> float:
        if self.rows_total <= 0:
            return 0.0
        return self.rows_done / self.rows_total

    @property
    def terminal(self) -> bool:
        return self.status is not ComputeStatus.RUNNING

    @property
    def message(self) -> str:
        if self.status is ComputeStatus.RUNNING:
            return f"Computing… ({round(100 * self.fraction)}%)"
        if self.status is ComputeStatus.DONE:
            ny, nx = self.result.shape
            return f"Done. Grid: {nx} × {ny}."
        if self.status is ComputeStatus.STOPPED:
            return "Stopped."
        return f"Error: {self.reason}"


def _evaluate_rows(
    config: GridConfig,
    x: np.ndarray,
    y_rows: np.ndarray,
    wavelength: float,
    k: float,
    table: WiegelTable | None,
) -> np.ndarray:
    X, Y = np.meshgrid(x, y_rows)

    def tip_kd(r, angle):
        if config.model == "semi_infinite":
            theta = np.mod(angle, 2.0 * np.pi)
            return kd_semi_infinite(r, theta, wavelength, np.radians(config.theta_inc))
        return kd_wiegel(table, config.period, config.depth, config.theta_inc, r, np.degrees(angle))

    r1 = np.hypot(X, Y)
    K1 = tip_kd(r1, np.arctan2(Y, X))
    if config.breakwater_length is None:
        return np.clip(K1, 0.0, 1.0)

    # second tip at (0, B); mirrored so the angle stays in [0, 180] deg
    Y2 = Y - config.breakwater_length
    r2 = np.hypot(X, Y2)
    K2 = tip_kd(r2, np.arctan2(np.abs(Y2), X))
    return combine_two_tips(K1, r1, K2, r2, k)


def iter_grid(
    config: GridConfig,
    table: WiegelTable | None = None,
    token: CancellationToken | None = None,
) -> Iterator[GridEvent]:
    """Validate a grid request and return the lazy event stream computing it.

    Raises
    ------
    InvalidParameterError
        Non-finite or out-of-range inputs.
    GridTooLargeError
        More than MAX_GRID_POINTS points; nothing is computed.
    TableError
        Wiegel model requested without a valid table.
    DivergenceError
        The dispersion solve failed.
    """
    config.validate()

    ny, nx = config.shape
    if nx * ny > MAX_GRID_POINTS:
        raise GridTooLargeError(nx, ny, MAX_GRID_POINTS)

    if config.model == "wiegel":
        if table is None:
            raise TableError("Wiegel tables are not loaded.")
        if not isinstance(table, WiegelTable):
            table = WiegelTable.from_mapping(table)

    wave = WaveCondition(period=float(config.period), depth=float(config.depth))
    wavelength = float(config.wavelength) if config.wavelength is not None else wave.wavelength
    k = 2.0 * np.pi / wavelength

    x = grid_coordinates(config.x_max, config.dx)
    y = grid_coordinates(config.y_max, config.dy)

    chunk = config.chunk_rows or (CHUNK_ROWS_LARGE if nx * ny > LARGE_GRID_POINTS else CHUNK_ROWS)

    return _grid_events(config, x, y, wave, wavelength, k, table, token, int(chunk))


def _grid_events(config, x, y, wave, wavelength, k, table, token, chunk) -> Iterator[GridEvent]:
    ny, nx = len(y), len(x)
    kd = np.empty((ny, nx), dtype=float)

    logger.info(
        "Computing %s Kd grid %d × %d (T=%g s, h=%g m, L=%.4f m, theta=%g deg)",
        config.model, nx, ny, config.period, config.depth, wavelength, config.theta_inc,
    )

    for start in range(0, ny, chunk):
        if token is not None and token.cancelled:
            logger.info("Grid computation stopped at row %d of %d", start, ny)
            yield GridEvent(ComputeStatus.STOPPED, start, ny)
            return

        end = min(ny, start + chunk)
        kd[start:end] = _evaluate_rows(config, x, y[start:end], wavelength, k, table)
        yield GridEvent(ComputeStatus.RUNNING, end, ny)

    if token is not None and token.cancelled:
        logger.info("Grid computation stopped after the last row")
        yield GridEvent(ComputeStatus.STOPPED, ny, ny)
        return

    n_bad = int(np.count_nonzero(~np.isfinite(kd)))
    if n_bad:
        logger.warning("Kd grid has %d non-finite cells out of %d", n_bad, kd.size)

    for arr in (x, y, kd):
        arr.setflags(write=False)

    result = GridResult(x=x, y=y, kd=kd, wave=wave, wavelength=wavelength, config=config)
    logger.info("Grid computation done (%d × %d)", nx, ny)
    yield GridEvent(ComputeStatus.DONE, ny, ny, result=result)


def compute_grid(
    config: GridConfig,
    table: WiegelTable | None = None,
    token: CancellationToken | None = None,
    progress: Callable[[GridEvent], None] | None = None,
) -> GridResult:
    """Drive a grid computation to completion.

    `progress` is called with every event. Raises ComputationStopped if the
    token is cancelled before the run completes.
    """
    for event in iter_grid(config, table=table, token=token):
        if progress is not None:
            progress(event)
        if event.status is ComputeStatus.DONE:
            return event.result
        if event.status is ComputeStatus.STOPPED:
            raise ComputationStopped("Grid computation stopped.")
    raise ComputationStopped("Grid computation ended without a result.")


def run_grid(
    config: GridConfig,
    table: WiegelTable | None = None,
    token: CancellationToken | None = None,
    progress: Callable[[GridEvent], None] | None = None,
) -> GridEvent:
    """Host-facing runner: returns the terminal event (DONE, STOPPED or ERROR).

    Package errors are reported as an ERROR event with the reason instead of
    being raised. A completed field with no finite cell is also an ERROR.
    """

    def emit(ev: GridEvent) -> GridEvent:
        if progress is not None:
            progress(ev)
        return ev

    try:
        events = iter_grid(config, table=table, token=token)
        for event in events:
            if event.terminal:
                break
            emit(event)
    except DiffractXError as exc:
        logger.error("Grid computation failed: %s", exc)
        return emit(GridEvent(ComputeStatus.ERROR, 0, 0, reason=str(exc)))

    if event.status is ComputeStatus.DONE and event.result.finite_stats()["n_finite"] == 0:
        return emit(
            GridEvent(
                ComputeStatus.ERROR,
                event.rows_done,
                event.rows_total,
                reason="Kd grid is all NaN (tables or interpolation issue).",
            )
        )
    return emit(event)
