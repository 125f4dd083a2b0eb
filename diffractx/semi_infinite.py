"""
semi_infinite.py

Diffraction coefficient behind a single semi-infinite breakwater
(Sommerfeld / Penney-Price closed-form solution).
"""

from __future__ import annotations

import numpy as np

from .fresnel import diffraction_factor

# Floor on the radial distance; avoids the r = 0 singularity while keeping Kd continuous
R_FLOOR = 1e-6


def kd_semi_infinite(r, theta, L, theta0):
    """Diffraction coefficient Kd at polar position (r, θ) from the breakwater tip.

    Parameters
    ----------
    r : float or array-like
        Radial distance from the tip [m].
    theta : float or array-like
        Polar angle of the field point [rad], normalised by the caller to [0, 2π).
    L : float
        Wavelength [m].
    theta0 : float
        Incident wave direction [rad].

    Returns
    -------
    Kd : float or np.ndarray
        |F(σ₁) e^{iφ₁} + F(σ₂) e^{iφ₂}| clamped to [0, 1]. NaN inputs give NaN.
    """
    r = np.asarray(r, dtype=float)
    theta = np.asarray(theta, dtype=float)

    with np.errstate(invalid="ignore", divide="ignore"):
        k = 2.0 * np.pi / L
        r_safe = np.maximum(r, R_FLOOR)
        fac = 2.0 * np.sqrt(k * r_safe / np.pi)

        s1 = fac * np.sin(0.5 * (theta - theta0))
        s2 = -fac * np.sin(0.5 * (theta + theta0))

        ph1 = -k * r_safe * np.cos(theta - theta0)
        ph2 = -k * r_safe * np.cos(theta + theta0)

        total = diffraction_factor(s1) * np.exp(1j * ph1) + diffraction_factor(s2) * np.exp(1j * ph2)
        kd = np.clip(np.abs(total), 0.0, 1.0)

    if np.ndim(kd) == 0:
        return float(kd)
    return kd
