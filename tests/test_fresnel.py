"""
Fresnel integral and diffraction factor tests.
"""

import math

import numpy as np
import pytest
from scipy import special

from diffractx.fresnel import diffraction_factor, fresnel


def test_fresnel_at_zero():
    assert fresnel(0.0) == (0.0, 0.0)


def test_fresnel_reference_values():
    """Tabulated values C(1) = 0.7798934, S(1) = 0.4382591."""
    C, S = fresnel(1.0)
    assert C == pytest.approx(0.7798934, abs=1e-6)
    assert S == pytest.approx(0.4382591, abs=1e-6)


def test_fresnel_is_odd():
    x = np.linspace(0.0, 8.0, 161)
    C, S = fresnel(x)
    Cn, Sn = fresnel(-x)
    np.testing.assert_allclose(Cn, -C, atol=1e-12)
    np.testing.assert_allclose(Sn, -S, atol=1e-12)


@pytest.mark.parametrize("x", [1e-9, 0.3, 1.0, 1.59, 1.6, 1.61, 2.5, 7.3, 40.0, 1000.0])
def test_fresnel_matches_scipy(x):
    """Agreement with scipy.special.fresnel on both sides of the |x| = 1.6 boundary."""
    S_ref, C_ref = special.fresnel(x)
    C, S = fresnel(x)
    assert C == pytest.approx(C_ref, abs=1e-9)
    assert S == pytest.approx(S_ref, abs=1e-9)


def test_fresnel_tiny_argument_uses_taylor_terms():
    x = 1e-10
    C, S = fresnel(x)
    assert C == x
    assert S == pytest.approx(math.pi * x**3 / 6.0)


def test_fresnel_large_argument_tends_to_half():
    C, S = fresnel(1e5)
    assert (C, S) == (0.5, 0.5)

    C, S = fresnel(50.0)
    assert abs(C - 0.5) < 1.0 / (math.pi * 50.0) + 1e-12
    assert abs(S - 0.5) < 1.0 / (math.pi * 50.0) + 1e-12


def test_fresnel_array_shape_and_nan():
    x = np.array([[0.5, np.nan], [-2.0, 3.0]])
    C, S = fresnel(x)
    assert C.shape == x.shape
    assert S.shape == x.shape
    assert np.isnan(C[0, 1]) and np.isnan(S[0, 1])
    assert np.all(np.isfinite(C[~np.isnan(x)]))


def test_diffraction_factor_at_zero():
    """|F(0)| = 0.5: half amplitude on the geometric shadow boundary."""
    F = diffraction_factor(0.0)
    assert isinstance(F, complex)
    assert abs(F) == pytest.approx(0.5, abs=1e-15)


def test_diffraction_factor_limits():
    """F → 1 deep in the illuminated zone and → 0 deep in the shadow."""
    assert diffraction_factor(1e5) == pytest.approx(1.0 + 0.0j)
    assert abs(diffraction_factor(-1e5)) == pytest.approx(0.0, abs=1e-12)


def test_diffraction_factor_matches_definition():
    sigma = np.array([-3.0, -0.4, 0.7, 2.2])
    C, S = fresnel(sigma)
    expected = (1 + 1j) / 2 * ((1 - 1j) / 2 + C - 1j * S)
    np.testing.assert_allclose(diffraction_factor(sigma), expected, rtol=1e-14)
