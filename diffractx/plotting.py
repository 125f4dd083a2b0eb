"""
plotting.py

Figures for a computed Kd grid: filled map, centerline profile and contour
map with level labels. Figures are returned and, when `figures_dir` is given,
saved there as PNG.
"""

from __future__ import annotations

import os

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection

from .contours import DEFAULT_LEVELS, label_anchors
from .grid import GridResult

_STYLE = {
    "font.size": 9,
    "axes.labelsize": 9,
    "axes.titlesize": 10,
    "legend.fontsize": 8,
    "xtick.labelsize": 8,
    "ytick.labelsize": 8,
    "figure.dpi": 150,
    "savefig.dpi": 300,
}


def _axes(ax):
    plt.rcParams.update(_STYLE)
    if ax is None:
        fig, ax = plt.subplots(figsize=(7.0, 4.5), constrained_layout=True)
    else:
        fig = ax.figure
    return fig, ax


def _axis_labels(ax, nondimensional: bool) -> None:
    if nondimensional:
        ax.set_xlabel("x/L")
        ax.set_ylabel("y/L")
    else:
        ax.set_xlabel("Distance behind structure, x [m]")
        ax.set_ylabel("Position along structure, y [m]")


def _draw_breakwater(ax, result: GridResult, scale: float) -> None:
    B = result.config.breakwater_length
    y_end = B if B is not None else result.y[-1]
    ax.plot([0.0, 0.0], [0.0, y_end / scale], color="black", linewidth=4, solid_capstyle="butt")


def _save(fig, figures_dir: str | None, name: str) -> None:
    if figures_dir is None:
        return
    os.makedirs(figures_dir, exist_ok=True)
    fig.savefig(os.path.join(figures_dir, name), bbox_inches="tight")


def plot_kd_map(
    result: GridResult,
    ax=None,
    nondimensional: bool = False,
    figures_dir: str | None = None,
    save_prefix: str = "diffraction",
):
    """Filled Kd map with the breakwater drawn along x = 0."""
    fig, ax = _axes(ax)
    scale = result.wavelength if nondimensional else 1.0

    mesh = ax.pcolormesh(
        result.x / scale,
        result.y / scale,
        result.kd,
        shading="nearest",
        cmap="viridis",
        vmin=0.0,
        vmax=1.0,
    )
    fig.colorbar(mesh, ax=ax, label=r"$K_d$")
    _draw_breakwater(ax, result, scale)

    ax.set_title(r"Diffraction Coefficient $K_d$")
    _axis_labels(ax, nondimensional)

    _save(fig, figures_dir, f"{save_prefix}_map.png")
    return fig


def plot_centerline(
    result: GridResult,
    ax=None,
    figures_dir: str | None = None,
    save_prefix: str = "diffraction",
):
    """Kd profile along the row nearest y = 0."""
    fig, ax = _axes(ax)
    x, kd = result.centerline()

    ax.plot(x, kd, linewidth=1.2)
    ax.set_title(r"Centerline $K_d$ (y = 0)")
    ax.set_xlabel("Distance behind structure, x [m]")
    ax.set_ylabel(r"$K_d$")
    ax.set_ylim(0.0, 1.05)
    ax.grid(alpha=0.3)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)

    _save(fig, figures_dir, f"{save_prefix}_centerline.png")
    return fig


def plot_contours(
    result: GridResult,
    levels=DEFAULT_LEVELS,
    ax=None,
    nondimensional: bool = False,
    labels_per_level: int = 6,
    figures_dir: str | None = None,
    save_prefix: str = "diffraction",
):
    """Iso-Kd lines from marching squares, with sparse level labels."""
    fig, ax = _axes(ax)
    scale = result.wavelength if nondimensional else 1.0
    x_max = result.x[-1] / scale

    contours = result.contours(levels, nondimensional=nondimensional)
    for level, segs in contours.items():
        if not segs:
            continue
        lines = LineCollection(
            [np.array([seg.start, seg.end]) for seg in segs],
            colors="black",
            linewidths=1.0,
        )
        ax.add_collection(lines)

        # keep labels off the strip next to the breakwater
        for xm, ym in label_anchors(segs, desired=labels_per_level, min_x=0.06 * x_max):
            ax.annotate(
                f"{level:.1f}",
                (xm, ym),
                xytext=(4, 4),
                textcoords="offset points",
                fontsize=7,
                bbox={"boxstyle": "round,pad=0.1", "fc": "white", "ec": "none", "alpha": 0.8},
            )

    _draw_breakwater(ax, result, scale)
    ax.set_xlim(result.x[0] / scale, x_max)
    ax.set_ylim(result.y[0] / scale, result.y[-1] / scale)
    ax.set_title(r"Diffraction Coefficient $K_d$ (Contour Map)")
    _axis_labels(ax, nondimensional)

    _save(fig, figures_dir, f"{save_prefix}_contours.png")
    return fig
