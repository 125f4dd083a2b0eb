"""
wiegel.py

Table-driven (Wiegel) diffraction coefficients for one breakwater tip.

The table is a read-only resource indexed by incidence angle θ (12 values,
15°..180°), relative distance r/L (0, 0.5, 1, 2, 5, 10) and angle from the
tip β (13 values, 0°..180°). Kd at an arbitrary point is obtained by
piecewise-linear interpolation along β, then r/L, then θ, clamping to the
table edges (no extrapolation).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
import pandas as pd
from scipy.interpolate import RegularGridInterpolator

from .core import solve_wavenumber
from .errors import DivergenceError, InvalidParameterError, TableError
from .semi_infinite import kd_semi_infinite

logger = logging.getLogger(__name__)

THETA_KNOTS = np.arange(15.0, 181.0, 15.0)                 # incidence angle [deg]
RL_KNOTS = np.array([0.0, 0.5, 1.0, 2.0, 5.0, 10.0])       # r / L
BETA_KNOTS = np.arange(0.0, 181.0, 15.0)                   # angle from tip [deg]

TABLE_SHAPE = (len(THETA_KNOTS), len(RL_KNOTS), len(BETA_KNOTS))
CSV_COLUMNS = ("theta", "r_over_L", "beta", "kd")


def interp1(xs, ys, x0):
    """Piecewise-linear interpolation clamped to the end values.

    Knots may be given in decreasing order. Returns NaN when x0 is non-finite
    or the knot arrays are too short or of different lengths.
    """
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    if x.ndim != 1 or y.ndim != 1 or len(x) < 2 or len(x) != len(y):
        return np.nan

    if x[1] - x[0] < 0:
        x = x[::-1]
        y = y[::-1]

    x0 = np.asarray(x0, dtype=float)
    ok = np.isfinite(x0)
    out = np.where(ok, np.interp(np.where(ok, x0, x[0]), x, y), np.nan)

    if out.ndim == 0:
        return float(out)
    return out


@dataclass(frozen=True, eq=False)
class WiegelTable:
    """Validated, immutable Wiegel diffraction table of shape (12, 6, 13)."""

    values: np.ndarray
    _interp: RegularGridInterpolator = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        arr = np.array(self.values, dtype=float)
        if arr.shape != TABLE_SHAPE:
            raise TableError(f"Wiegel table must have shape {TABLE_SHAPE} (got {arr.shape}).")
        if not np.all(np.isfinite(arr)):
            raise TableError("Wiegel table contains non-finite values.")
        arr.setflags(write=False)
        object.__setattr__(self, "values", arr)
        object.__setattr__(
            self,
            "_interp",
            RegularGridInterpolator((THETA_KNOTS, RL_KNOTS, BETA_KNOTS), arr, method="linear"),
        )

    @classmethod
    def from_mapping(cls, tables) -> WiegelTable:
        """Build from a mapping {θ: 6×13 matrix}; keys may be ints or strings."""
        if tables is None:
            raise TableError("Wiegel tables are not loaded.")

        by_angle = {}
        for key, matrix in tables.items():
            try:
                by_angle[int(float(key))] = matrix
            except (TypeError, ValueError):
                raise TableError(f"Invalid table key {key!r}.") from None

        rows = []
        for th in THETA_KNOTS.astype(int):
            M = by_angle.get(int(th))
            if M is None:
                raise TableError(f"Missing table at theta={th}.")
            try:
                M = np.asarray(M, dtype=float)
            except (TypeError, ValueError):
                raise TableError(f"Invalid table at theta={th}.") from None
            if M.shape != TABLE_SHAPE[1:]:
                raise TableError(f"Invalid table size at theta={th} (expected 6x13, got {M.shape}).")
            rows.append(M)

        return cls(np.stack(rows))

    @classmethod
    def from_closed_form(cls) -> WiegelTable:
        """Tabulate Kd from the semi-infinite closed-form solution at the table knots."""
        logger.info("Synthesising Wiegel table from the semi-infinite breakwater solution")
        th, rl, be = np.meshgrid(THETA_KNOTS, RL_KNOTS, BETA_KNOTS, indexing="ij")
        values = kd_semi_infinite(rl, np.radians(be), 1.0, np.radians(th))
        return cls(values)

    def to_mapping(self) -> dict:
        return {int(th): self.values[i].tolist() for i, th in enumerate(THETA_KNOTS)}

    def to_frame(self) -> pd.DataFrame:
        """Long-format frame with columns theta, r_over_L, beta, kd."""
        index = pd.MultiIndex.from_product(
            [THETA_KNOTS, RL_KNOTS, BETA_KNOTS], names=list(CSV_COLUMNS[:3])
        )
        return pd.Series(self.values.ravel(), index=index, name="kd").reset_index()

    def lookup(self, theta, r_over_L, beta):
        """Interpolated Kd at (θ [deg], r/L, β [deg]); inputs are clamped to the table."""
        theta, r_over_L, beta = np.broadcast_arrays(
            np.asarray(theta, dtype=float),
            np.asarray(r_over_L, dtype=float),
            np.asarray(beta, dtype=float),
        )
        pts = np.stack(
            [
                np.clip(theta, THETA_KNOTS[0], THETA_KNOTS[-1]),
                np.clip(r_over_L, RL_KNOTS[0], RL_KNOTS[-1]),
                np.clip(beta, BETA_KNOTS[0], BETA_KNOTS[-1]),
            ],
            axis=-1,
        )
        flat = pts.reshape(-1, 3)
        ok = np.all(np.isfinite(flat), axis=1)
        out = np.full(len(flat), np.nan)
        if np.any(ok):
            out[ok] = self._interp(flat[ok])
        return out.reshape(theta.shape)


def table_from_frame(df: pd.DataFrame) -> WiegelTable:
    """Build a WiegelTable from a long-format frame (theta, r_over_L, beta, kd)."""
    missing = [c for c in CSV_COLUMNS if c not in df.columns]
    if missing:
        raise TableError(f"Wiegel table frame is missing columns: {missing}")

    series = df.set_index(list(CSV_COLUMNS[:3]))["kd"]
    if series.index.duplicated().any():
        raise TableError("Wiegel table frame has duplicate (theta, r_over_L, beta) entries.")

    full = pd.MultiIndex.from_product([THETA_KNOTS, RL_KNOTS, BETA_KNOTS])
    series = series.reindex(full)
    if series.isna().any():
        th, rl, be = series[series.isna()].index[0]
        raise TableError(f"Wiegel table entry missing at theta={th:g}, r/L={rl:g}, beta={be:g}.")

    return WiegelTable(series.to_numpy(dtype=float).reshape(TABLE_SHAPE))


def load_wiegel_table(path) -> WiegelTable:
    """Load a Wiegel table from a JSON mapping {θ: 6×13} or a long-format CSV file."""
    path = Path(path)
    if not path.exists():
        raise TableError(f"Wiegel table file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        with path.open("r", encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except json.JSONDecodeError as exc:
                raise TableError(f"Invalid JSON in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise TableError(f"{path} must contain a mapping keyed by incidence angle.")
        table = WiegelTable.from_mapping(data)
    elif suffix == ".csv":
        table = table_from_frame(pd.read_csv(path))
    else:
        raise TableError(f"Unsupported Wiegel table format: {path.suffix!r}")

    logger.info("Loaded Wiegel table from %s", path)
    return table


def kd_wiegel(table: WiegelTable, period: float, depth: float, theta_inc, r, beta):
    """Wiegel-table diffraction coefficient for one breakwater tip.

    Parameters
    ----------
    table : WiegelTable
        Validated lookup table.
    period, depth : float
        Wave period [s] and water depth [m]; the wavelength follows from the
        dispersion relation.
    theta_inc : float
        Incidence angle [deg], clamped to [15, 180].
    r : float or array-like
        Distance from the tip [m]; negative or non-finite values give NaN.
    beta : float or array-like
        Angle from the tip to the field point [deg], clamped to [0, 180].

    Returns
    -------
    Kd : float or np.ndarray
        Interpolated coefficient, NaN for invalid inputs.

    Raises
    ------
    TableError
        If no table is supplied.
    """
    if table is None:
        raise TableError("Wiegel tables are not loaded.")
    if not isinstance(table, WiegelTable):
        table = WiegelTable.from_mapping(table)

    r = np.asarray(r, dtype=float)
    beta = np.asarray(beta, dtype=float)

    try:
        k = solve_wavenumber(period, depth)
    except (InvalidParameterError, DivergenceError):
        kd = np.full(np.broadcast(r, beta).shape, np.nan)
    else:
        wl = 2.0 * np.pi / k
        r_valid = np.where(np.isfinite(r) & (r >= 0.0), r, np.nan)
        kd = table.lookup(theta_inc, r_valid / wl, beta)

    if np.ndim(kd) == 0:
        return float(kd)
    return kd
