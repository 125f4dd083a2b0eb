"""
interference.py

Coherent combination of the diffracted waves from the two tips of a finite
breakwater (ends at (0, 0) and (0, B)).
"""

from __future__ import annotations

import numpy as np


def combine_two_tips(K1, r1, K2, r2, k):
    """Interference magnitude of two coherent point diffractors.

        K = clamp( sqrt(K1² + K2² + 2 K1 K2 cos(k (r2 − r1))), 0, 1 )

    Parameters
    ----------
    K1, K2 : float or array-like
        Diffraction coefficients from tip 1 and tip 2.
    r1, r2 : float or array-like
        Distances [m] from the field point to tip 1 and tip 2.
    k : float
        Propagation wavenumber [rad/m].

    Returns
    -------
    K : float or np.ndarray
        Combined coefficient; NaN wherever any input is non-finite.
    """
    K1, r1, K2, r2, k = np.broadcast_arrays(
        *(np.asarray(v, dtype=float) for v in (K1, r1, K2, r2, k))
    )
    ok = np.isfinite(K1) & np.isfinite(K2) & np.isfinite(r1) & np.isfinite(r2) & np.isfinite(k)

    with np.errstate(invalid="ignore"):
        # rounding can push fully destructive interference slightly below zero
        K = np.sqrt(np.maximum(K1 * K1 + K2 * K2 + 2.0 * K1 * K2 * np.cos(k * (r2 - r1)), 0.0))
    K = np.where(ok & np.isfinite(K), np.clip(K, 0.0, 1.0), np.nan)

    if K.ndim == 0:
        return float(K)
    return K
