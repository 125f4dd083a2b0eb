"""
fresnel.py

Fresnel integrals C(x), S(x) and the Sommerfeld / Penney-Price diffraction
factor built from them.

The evaluation follows the Cephes ``fresnl`` scheme:

- |x| < 1e-8     : leading Taylor terms C ≈ x, S ≈ πx³/6
- |x| <= 1.6     : rational (minimax) approximations in x⁴
- |x| >  1.6     : asymptotic auxiliary functions f, g (rational in 1/(πx²)²)
- |x| >  36974   : C = S = 1/2 (sin/cos of πx²/2 carry no precision)

Both functions accept scalars or arrays and are odd in x.
"""

from __future__ import annotations

import numpy as np

TINY_X = 1e-8
SERIES_LIMIT = 1.6
HUGE_X = 36974.0

# S(x) for |x| <= 1.6
_SN = np.array([
    -2.99181919401019853726e3,
    7.08840045257738576863e5,
    -6.29741486205862506537e7,
    2.54890880573376359104e9,
    -4.42979518059697779103e10,
    3.18016297876567817986e11,
])
_SD = np.array([
    2.81376268889994315696e2,
    4.55847810806532581675e4,
    5.17343888770096400730e6,
    4.19320245898111231129e8,
    2.24411795645340920940e10,
    6.07366389490084639049e11,
])

# C(x) for |x| <= 1.6
_CN = np.array([
    -4.98843114573573548651e-8,
    9.50428062829859605134e-6,
    -6.45191435683965050962e-4,
    1.88843319396703850064e-2,
    -2.05525900955013891793e-1,
    9.99999999999999998822e-1,
])
_CD = np.array([
    3.99982968972495980367e-12,
    9.15439215774657478799e-10,
    1.25001862479598821474e-7,
    1.22262789024179030997e-5,
    8.68029542941784300606e-4,
    4.12142090722199792936e-2,
    1.00000000000000000118e0,
])

# Auxiliary function f for |x| > 1.6
_FN = np.array([
    4.21543555043677546506e-1,
    1.43407919780758885261e-1,
    1.15220955073585758835e-2,
    3.45017939782574027900e-4,
    4.63613749287867322088e-6,
    3.05568983790257605827e-8,
    1.02304514164907233465e-10,
    1.72010743268161828879e-13,
    1.34283276233062758925e-16,
    3.76329711269987889006e-20,
])
_FD = np.array([
    7.51586398353378947175e-1,
    1.16888925859191382142e-1,
    6.44051526508858611005e-3,
    1.55934409164153020873e-4,
    1.84627567348930545870e-6,
    1.12699224763999035261e-8,
    3.60140029589371370404e-11,
    5.88754533621578410010e-14,
    4.52001434074129701496e-17,
    1.25443237090011264384e-20,
])

# Auxiliary function g for |x| > 1.6
_GN = np.array([
    5.04442073643383265887e-1,
    1.97102833525523411709e-1,
    1.87648584092575249293e-2,
    6.84079380915393090172e-4,
    1.15138826111884280931e-5,
    9.82852443688422223854e-8,
    4.45344415861750144738e-10,
    1.08268041139020870318e-12,
    1.37555460633261799868e-15,
    8.36354435630677421531e-19,
    1.86958710162783235106e-22,
])
_GD = np.array([
    1.47495759925128324529e0,
    3.37748989120019970451e-1,
    2.53603741420338795122e-2,
    8.14679107184306179049e-4,
    1.27545075667729118702e-5,
    1.04314589657571990585e-7,
    4.60680728146520428211e-10,
    1.10273215066240270757e-12,
    1.38796531259578871258e-15,
    8.39158816283118707363e-19,
    1.86958710162783236342e-22,
])


def _p1evl(x: np.ndarray, coef: np.ndarray) -> np.ndarray:
    """Evaluate a polynomial whose leading coefficient is 1 (not stored)."""
    return np.polyval(np.concatenate(([1.0], coef)), x)


def fresnel(x):
    """Fresnel integrals C(x) = ∫₀ˣ cos(πt²/2) dt and S(x) = ∫₀ˣ sin(πt²/2) dt.

    Parameters
    ----------
    x : float or array-like
        Argument(s). NaN propagates.

    Returns
    -------
    (C, S) : tuple
        Floats for scalar input, arrays of the input shape otherwise.
    """
    xa = np.asarray(x, dtype=float)
    ax = np.abs(xa)

    C = np.full_like(ax, np.nan)
    S = np.full_like(ax, np.nan)

    tiny = ax < TINY_X
    small = (ax >= TINY_X) & (ax <= SERIES_LIMIT)
    large = (ax > SERIES_LIMIT) & (ax <= HUGE_X)
    huge = ax > HUGE_X

    if np.any(tiny):
        xt = ax[tiny]
        C[tiny] = xt
        S[tiny] = np.pi * xt**3 / 6.0

    if np.any(small):
        xs = ax[small]
        x2 = xs * xs
        t = x2 * x2
        C[small] = xs * np.polyval(_CN, t) / np.polyval(_CD, t)
        S[small] = xs * x2 * np.polyval(_SN, t) / _p1evl(t, _SD)

    if np.any(large):
        xl = ax[large]
        x2 = xl * xl
        t = 1.0 / (np.pi * x2)
        u = t * t
        f = 1.0 - u * np.polyval(_FN, u) / _p1evl(u, _FD)
        g = t * np.polyval(_GN, u) / _p1evl(u, _GD)

        arg = 0.5 * np.pi * x2
        c = np.cos(arg)
        s = np.sin(arg)
        px = np.pi * xl
        C[large] = 0.5 + (f * s - g * c) / px
        S[large] = 0.5 - (f * c + g * s) / px

    if np.any(huge):
        C[huge] = 0.5
        S[huge] = 0.5

    neg = xa < 0
    C = np.where(neg, -C, C)
    S = np.where(neg, -S, S)

    if C.ndim == 0:
        return float(C), float(S)
    return C, S


def diffraction_factor(sigma):
    """Sommerfeld / Penney-Price factor F(σ) = (1+i)/2 · [(1−i)/2 + C(σ) − i S(σ)].

    Returns a Python complex for scalar input, a complex array otherwise.
    """
    C, S = fresnel(sigma)
    inside = (0.5 + np.asarray(C)) - 1j * (0.5 + np.asarray(S))
    F = (0.5 + 0.5j) * inside
    if np.ndim(F) == 0:
        return complex(F)
    return F
