"""validation.py

Utilities to *quantify* the accuracy of the DiffractX numerical kernels
against trusted references:

  - Fresnel integrals against SciPy's ``scipy.special.fresnel``,
  - dispersion-relation residuals over a sweep of periods and depths.

Notes
-----
* These are research/validation utilities, not required for routine use.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd
from scipy import special

from .core import GRAVITY, solve_wavenumber
from .fresnel import fresnel


def fresnel_agreement(x: Iterable[float] | None = None) -> dict:
    """Compare `fresnel` with SciPy's reference implementation.

    Parameters
    ----------
    x:
        Arguments to test. If None, a default sweep over [-10, 10] is used
        that straddles the |x| = 1.6 regime boundary.

    Returns
    -------
    dict with:
      - 'x', 'C', 'S', 'C_ref', 'S_ref'
      - 'max_abs_err_C', 'max_abs_err_S'
    """
    if x is None:
        x = np.concatenate([np.linspace(-10.0, 10.0, 2001), [-1.6, 1.6, 1e-9, -1e-9]])
    x = np.asarray(list(x), dtype=float)

    C, S = fresnel(x)
    # scipy returns (S, C)
    S_ref, C_ref = special.fresnel(x)

    return {
        "x": x,
        "C": C,
        "S": S,
        "C_ref": C_ref,
        "S_ref": S_ref,
        "max_abs_err_C": float(np.max(np.abs(C - C_ref))),
        "max_abs_err_S": float(np.max(np.abs(S - S_ref))),
    }


def dispersion_residuals(
    periods: Iterable[float] | None = None,
    depths: Iterable[float] | None = None,
) -> pd.DataFrame:
    """Residual |g k tanh(kh) − ω²| of the dispersion solve over a (T, h) sweep.

    Returns a frame with columns period, depth, k, residual, rel_residual,
    where rel_residual is the residual divided by max(1, ω²).
    """
    if periods is None:
        periods = [0.5, 1.0, 2.0, 5.0, 8.0, 12.0, 20.0]
    if depths is None:
        depths = [0.05, 0.25, 1.0, 5.0, 20.0, 100.0, 4000.0]

    rows = []
    for T in periods:
        w2 = (2.0 * np.pi / T) ** 2
        for h in depths:
            k = solve_wavenumber(T, h)
            residual = abs(GRAVITY * k * np.tanh(k * h) - w2)
            rows.append(
                {
                    "period": float(T),
                    "depth": float(h),
                    "k": k,
                    "residual": residual,
                    "rel_residual": residual / max(1.0, w2),
                }
            )
    return pd.DataFrame(rows)
