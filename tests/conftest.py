"""
Pytest configuration and shared fixtures.
"""

import matplotlib

# headless backend for the plotting tests
matplotlib.use("Agg")

import numpy as np
import pytest

from diffractx.wiegel import BETA_KNOTS, RL_KNOTS, THETA_KNOTS, WiegelTable


@pytest.fixture(scope="session")
def closed_form_table():
    """Wiegel table tabulated from the semi-infinite solution."""
    return WiegelTable.from_closed_form()


@pytest.fixture
def ramp_table():
    """Table linear in every axis, so interpolation is exact: 0.001θ + 0.01 r/L + 0.002β."""
    th, rl, be = np.meshgrid(THETA_KNOTS, RL_KNOTS, BETA_KNOTS, indexing="ij")
    return WiegelTable(0.001 * th + 0.01 * rl + 0.002 * be)
