"""
core.py

Shared constants and linear wave dispersion utilities for DiffractX.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from .errors import DivergenceError, InvalidParameterError

logger = logging.getLogger(__name__)

GRAVITY = 9.81

# Newton-Raphson settings for the dispersion solve
MAX_ITER = 60
REL_TOL = 1e-12
SEED_FALLBACK = 1e-3
K_FLOOR = 1e-8


def _check_positive(name: str, value: float) -> float:
    value = float(value)
    if not np.isfinite(value) or value <= 0.0:
        raise InvalidParameterError(f"{name} must be a finite positive number (got {value!r}).")
    return value


def solve_wavenumber(T: float, h: float, g: float = GRAVITY) -> float:
    """Solve the linear dispersion relation for the wavenumber k.

        ω² = g k tanh(k h),   where ω = 2π / T

    Newton-Raphson iteration from the deep-water estimate k0 = ω²/g.

    Parameters
    ----------
    T : float
        Wave period [s].
    h : float
        Water depth [m].
    g : float, optional
        Gravitational acceleration [m/s²].

    Returns
    -------
    k : float
        Wavenumber [rad/m], always > 0.

    Raises
    ------
    InvalidParameterError
        If T or h is non-finite or non-positive.
    DivergenceError
        If the iteration leaves the finite numbers.
    """
    T = _check_positive("period T", T)
    h = _check_positive("depth h", h)

    w = 2.0 * np.pi / T
    target = w * w

    # Deep-water estimate as initial guess
    k = target / g
    if not np.isfinite(k) or k <= 0.0:
        k = SEED_FALLBACK

    for it in range(MAX_ITER):
        kh = k * h
        th = np.tanh(kh)
        with np.errstate(over="ignore"):
            sech2 = 1.0 / np.cosh(kh) ** 2
        f = g * k * th - target
        dfdk = g * (th + kh * sech2)
        if not np.isfinite(dfdk) or dfdk == 0.0:
            break

        dk = f / dfdk
        k -= dk

        if not np.isfinite(k):
            raise DivergenceError(f"Dispersion solve diverged for T={T}, h={h}.")
        if abs(dk) / max(1.0, k) < REL_TOL:
            logger.debug("Dispersion converged in %d iterations (T=%g, h=%g, k=%.12g)", it + 1, T, h, k)
            break
        if k <= 0.0:
            k = K_FLOOR

    if not np.isfinite(k) or k <= 0.0:
        raise DivergenceError(f"Dispersion solve did not reach a positive wavenumber for T={T}, h={h}.")

    return float(k)


def compute_wavelength(h: float, T: float) -> float:
    """Compute linear wave length L = 2π / k for water depth h and period T."""
    return float(2.0 * np.pi / solve_wavenumber(T, h))


def depth_regime(h: float, L: float) -> str:
    """Classify relative depth h/L as shallow, intermediate or deep water."""
    ratio = h / L
    if ratio < 1.0 / 20.0:
        return "shallow"
    if ratio < 0.5:
        return "intermediate"
    return "deep"


@dataclass(frozen=True)
class WaveCondition:
    """Monochromatic wave state (period, depth) with derived dispersion quantities."""

    period: float   # s
    depth: float    # m
    wavenumber: float = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "wavenumber", solve_wavenumber(self.period, self.depth))

    @property
    def omega(self) -> float:
        """Angular frequency ω = 2π/T [rad/s]."""
        return 2.0 * np.pi / self.period

    @property
    def wavelength(self) -> float:
        return 2.0 * np.pi / self.wavenumber

    @property
    def kh(self) -> float:
        return self.wavenumber * self.depth

    @property
    def deep_water_wavelength(self) -> float:
        """L0 = g T² / 2π [m]."""
        return GRAVITY * self.period**2 / (2.0 * np.pi)

    @property
    def deep_water_wavenumber(self) -> float:
        return 2.0 * np.pi / self.deep_water_wavelength

    @property
    def regime(self) -> str:
        return depth_regime(self.depth, self.wavelength)


def dispersion_outputs(T: float, h: float) -> dict:
    """Return the dispersion summary {omega, k, L, k0, L0, kh} for (T, h).

    Invalid inputs or a failed solve give NaN for every entry.
    """
    try:
        wave = WaveCondition(period=T, depth=h)
    except (InvalidParameterError, DivergenceError) as exc:
        logger.warning("Dispersion outputs unavailable: %s", exc)
        return {key: np.nan for key in ("omega", "k", "L", "k0", "L0", "kh")}

    return {
        "omega": wave.omega,
        "k": wave.wavenumber,
        "L": wave.wavelength,
        "k0": wave.deep_water_wavenumber,
        "L0": wave.deep_water_wavelength,
        "kh": wave.kh,
    }
