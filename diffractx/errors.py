"""
errors.py

Exception types raised by DiffractX.

Pure numeric routines (Fresnel, diffraction factor, point models) do not raise;
they return NaN for undefined results. These exceptions are raised at the
boundaries: parameter validation, table loading and the grid engine.
"""

import math


class DiffractXError(Exception):
    """Base class for all DiffractX errors."""


class InvalidParameterError(DiffractXError, ValueError):
    """A numeric input is non-finite or violates its sign convention."""


class GridTooLargeError(DiffractXError):
    """The requested grid exceeds the point-count cap."""

    def __init__(self, nx: int, ny: int, max_points: int):
        # counts are math.inf when extent / step overflows
        self.nx = nx if math.isinf(nx) else int(nx)
        self.ny = ny if math.isinf(ny) else int(ny)
        self.max_points = int(max_points)
        super().__init__(
            f"Grid too large ({self.nx}×{self.ny} = {self.nx * self.ny} points, "
            f"limit {self.max_points}). Increase dx, dy or reduce x_max, y_max."
        )


class DivergenceError(DiffractXError):
    """The dispersion solve did not reach a finite positive wavenumber."""


class TableError(DiffractXError):
    """The Wiegel lookup table is missing or malformed."""


class ComputationStopped(DiffractXError):
    """A grid computation was cancelled by the caller (not a failure)."""
