"""
analysis.py

High-level helper that combines DiffractX modules into a practical workflow.
"""

from __future__ import annotations

import numpy as np

from .contours import DEFAULT_LEVELS, label_anchors, parse_levels
from .core import depth_regime, dispersion_outputs
from .grid import CancellationToken, GridConfig, compute_grid
from .wiegel import WiegelTable


def diffraction_analysis(
    T: float,
    h: float,
    theta_inc: float,
    dx: float,
    x_max: float,
    y_max: float,
    dy: float | None = None,
    breakwater_length: float | None = None,
    model: str = "semi_infinite",
    wavelength: float | None = None,
    levels=None,
    table: WiegelTable | None = None,
    token: CancellationToken | None = None,
    progress=None,
    plot: bool = False,
    nondimensional: bool = False,
    figures_dir: str = "figures",
    save_prefix: str = "diffraction",
) -> dict:
    """
    Diffraction analysis behind a breakwater (or breakwater gap).

    What this does:
      1) Solves the dispersion relation and reports ω, k, L, kh, L0, k0 and the
         depth regime.
      2) Computes the Kd grid with the chosen point model ("semi_infinite" or
         "wiegel"); two tips are combined coherently when `breakwater_length`
         is given.
      3) Extracts the centerline (y = 0) profile and field diagnostics.
      4) Extracts contour segments for the requested levels (a list, or a
         "start:step:end" / "a, b, c" string; defaults to 0.2..0.8) and picks
         label anchors.
      5) Optionally saves map, centerline and contour figures to `figures_dir`.

    Returns a dictionary with keys:
      - 'dispersion', 'regime'
      - 'x', 'y', 'kd', 'grid' (GridResult)
      - 'centerline' : (x, kd) at y = 0
      - 'stats'      : {n, n_finite, kd_min, kd_max}
      - 'levels', 'contours', 'labels'
      - 'warnings' (optional)
    """
    disp = dispersion_outputs(T, h)
    out = {"dispersion": disp}
    if np.isfinite(disp["L"]):
        out["regime"] = depth_regime(h, disp["L"])

    if isinstance(levels, str):
        levels = parse_levels(levels)
    if levels is None or len(levels) == 0:
        levels = list(DEFAULT_LEVELS)
    out["levels"] = [float(v) for v in levels]

    config = GridConfig(
        dx=dx,
        dy=dx if dy is None else dy,
        x_max=x_max,
        y_max=y_max,
        period=T,
        depth=h,
        theta_inc=theta_inc,
        breakwater_length=breakwater_length,
        model=model,
        wavelength=wavelength,
    )
    grid = compute_grid(config, table=table, token=token, progress=progress)

    out["grid"] = grid
    out["x"] = grid.x
    out["y"] = grid.y
    out["kd"] = grid.kd
    out["centerline"] = grid.centerline()

    stats = grid.finite_stats()
    out["stats"] = stats
    if stats["n_finite"] == 0:
        out["warnings"] = out.get("warnings", []) + ["Kd grid is all NaN (tables or interpolation issue)."]
    elif stats["n_finite"] < stats["n"]:
        out["warnings"] = out.get("warnings", []) + [
            f"Kd grid has {stats['n'] - stats['n_finite']} non-finite cells.",
        ]

    contours = grid.contours(out["levels"], nondimensional=nondimensional)
    x_extent = grid.x[-1] / (grid.wavelength if nondimensional else 1.0)
    out["contours"] = contours
    out["labels"] = {
        level: label_anchors(segs, min_x=0.06 * x_extent) for level, segs in contours.items()
    }

    if plot:
        # local import; matplotlib is only needed when figures are requested
        from .plotting import plot_centerline, plot_contours, plot_kd_map

        out["figures"] = {
            "map": plot_kd_map(grid, nondimensional=nondimensional, figures_dir=figures_dir, save_prefix=save_prefix),
            "centerline": plot_centerline(grid, figures_dir=figures_dir, save_prefix=save_prefix),
            "contours": plot_contours(
                grid,
                levels=out["levels"],
                nondimensional=nondimensional,
                figures_dir=figures_dir,
                save_prefix=save_prefix,
            ),
        }

    return out
