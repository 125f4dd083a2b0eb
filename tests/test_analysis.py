"""
End-to-end workflow tests for diffraction_analysis.
"""

import matplotlib.pyplot as plt
import numpy as np
import pytest

from diffractx.analysis import diffraction_analysis
from diffractx.contours import DEFAULT_LEVELS
from diffractx.errors import GridTooLargeError, TableError


def test_semi_infinite_workflow():
    out = diffraction_analysis(T=8.0, h=10.0, theta_inc=60.0, dx=2.0, x_max=60.0, y_max=40.0)

    for key in ("dispersion", "regime", "levels", "grid", "x", "y", "kd", "centerline", "stats", "contours", "labels"):
        assert key in out
    assert "figures" not in out
    assert "warnings" not in out

    assert out["regime"] == "intermediate"
    assert out["levels"] == list(DEFAULT_LEVELS)
    assert out["kd"].shape == (21, 31)
    assert out["stats"]["n_finite"] == 21 * 31
    assert set(out["labels"]) == set(out["contours"])

    x, kd = out["centerline"]
    np.testing.assert_array_equal(x, out["x"])
    assert len(kd) == len(x)


def test_levels_from_string():
    out = diffraction_analysis(
        T=8.0, h=10.0, theta_inc=60.0, dx=2.0, x_max=40.0, y_max=20.0, levels="0.3:0.2:0.7",
    )
    assert out["levels"] == [0.3, 0.5, 0.7]
    assert list(out["contours"]) == [0.3, 0.5, 0.7]


def test_invalid_level_string_uses_defaults():
    out = diffraction_analysis(
        T=8.0, h=10.0, theta_inc=60.0, dx=2.0, x_max=20.0, y_max=10.0, levels="not levels",
    )
    assert out["levels"] == list(DEFAULT_LEVELS)


def test_two_tip_wiegel(closed_form_table):
    out = diffraction_analysis(
        T=6.0, h=8.0, theta_inc=90.0, dx=1.0, dy=2.0, x_max=30.0, y_max=40.0,
        breakwater_length=40.0, model="wiegel", table=closed_form_table,
    )
    kd = out["kd"]
    assert kd.shape == (21, 31)
    assert np.all((kd >= 0.0) & (kd <= 1.0))
    np.testing.assert_allclose(kd, kd[::-1, :], atol=1e-12)


def test_errors_propagate():
    with pytest.raises(TableError):
        diffraction_analysis(T=8.0, h=10.0, theta_inc=60.0, dx=1.0, x_max=10.0, y_max=10.0, model="wiegel")
    with pytest.raises(GridTooLargeError):
        diffraction_analysis(T=8.0, h=10.0, theta_inc=60.0, dx=0.01, x_max=2000.0, y_max=100.0)


def test_plots_written(tmp_path):
    out = diffraction_analysis(
        T=8.0, h=10.0, theta_inc=45.0, dx=2.0, x_max=40.0, y_max=30.0,
        plot=True, nondimensional=True, figures_dir=str(tmp_path), save_prefix="run",
    )
    assert set(out["figures"]) == {"map", "centerline", "contours"}
    for name in ("run_map.png", "run_centerline.png", "run_contours.png"):
        assert (tmp_path / name).exists()
    plt.close("all")
