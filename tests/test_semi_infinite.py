"""
Semi-infinite breakwater (Sommerfeld / Penney-Price) tests.
"""

import math

import numpy as np
import pytest

from diffractx.semi_infinite import kd_semi_infinite


def test_output_always_in_unit_interval():
    rng = np.random.default_rng(7)
    r = rng.uniform(0.0, 500.0, size=2000)
    theta = rng.uniform(0.0, 2.0 * math.pi, size=2000)
    L = rng.uniform(1.0, 200.0)
    theta0 = rng.uniform(0.0, math.pi)

    kd = kd_semi_infinite(r, theta, L, theta0)

    assert kd.shape == r.shape
    assert np.all(np.isfinite(kd))
    assert np.all((kd >= 0.0) & (kd <= 1.0))


def test_tip_is_not_singular():
    """r = 0 is floored; both Fresnel arguments vanish and Kd → 1."""
    kd = kd_semi_infinite(0.0, 1.0, 10.0, 0.5)
    assert math.isfinite(kd)
    assert kd == pytest.approx(1.0, abs=1e-3)


def test_illuminated_zone_tends_to_one():
    kd = kd_semi_infinite(1000.0, math.pi, 1.0, math.pi / 2)
    assert kd == pytest.approx(1.0, abs=0.02)


def test_shadow_boundary_is_half():
    """On the ray θ = θ0 through the tip the incident wave is halved."""
    kd = kd_semi_infinite(1000.0, math.pi / 2, 1.0, math.pi / 2)
    assert kd == pytest.approx(0.5, abs=0.02)


def test_deep_shadow_tends_to_zero():
    kd = kd_semi_infinite(1000.0, math.pi / 8, 1.0, math.pi / 2)
    assert kd < 0.02


def test_shadow_decays_with_distance():
    near = kd_semi_infinite(5.0, math.pi / 8, 1.0, math.pi / 2)
    far = kd_semi_infinite(500.0, math.pi / 8, 1.0, math.pi / 2)
    assert far < near


def test_nan_propagates():
    assert math.isnan(kd_semi_infinite(10.0, 1.0, float("nan"), 0.5))
    kd = kd_semi_infinite(np.array([1.0, np.nan]), 1.0, 10.0, 0.5)
    assert math.isfinite(kd[0]) and math.isnan(kd[1])


def test_scalar_input_returns_float():
    assert isinstance(kd_semi_infinite(3.0, 0.2, 12.0, 1.0), float)
