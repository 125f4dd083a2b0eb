"""
DiffractX: Wave diffraction toolkit for breakwaters and breakwater gaps

Public API:
- solve_wavenumber / compute_wavelength / WaveCondition
- fresnel / diffraction_factor
- kd_semi_infinite
- WiegelTable / load_wiegel_table / kd_wiegel
- combine_two_tips
- GridConfig / iter_grid / compute_grid / run_grid
- marching_squares / contour_segments / parse_levels
- diffraction_analysis
"""

from .core import (
    GRAVITY,
    WaveCondition,
    compute_wavelength,
    depth_regime,
    dispersion_outputs,
    solve_wavenumber,
)
from .errors import (
    ComputationStopped,
    DiffractXError,
    DivergenceError,
    GridTooLargeError,
    InvalidParameterError,
    TableError,
)
from .fresnel import diffraction_factor, fresnel
from .semi_infinite import kd_semi_infinite
from .wiegel import WiegelTable, interp1, kd_wiegel, load_wiegel_table
from .interference import combine_two_tips
from .grid import (
    CancellationToken,
    ComputeStatus,
    GridConfig,
    GridEvent,
    GridResult,
    compute_grid,
    grid_coordinates,
    iter_grid,
    run_grid,
)
from .contours import (
    ContourSegment,
    contour_segments,
    label_anchors,
    marching_squares,
    parse_levels,
    segments_to_physical,
)
from .analysis import diffraction_analysis

__all__ = [
    "GRAVITY",
    "WaveCondition",
    "compute_wavelength",
    "depth_regime",
    "dispersion_outputs",
    "solve_wavenumber",
    "ComputationStopped",
    "DiffractXError",
    "DivergenceError",
    "GridTooLargeError",
    "InvalidParameterError",
    "TableError",
    "diffraction_factor",
    "fresnel",
    "kd_semi_infinite",
    "WiegelTable",
    "interp1",
    "kd_wiegel",
    "load_wiegel_table",
    "combine_two_tips",
    "CancellationToken",
    "ComputeStatus",
    "GridConfig",
    "GridEvent",
    "GridResult",
    "compute_grid",
    "grid_coordinates",
    "iter_grid",
    "run_grid",
    "ContourSegment",
    "contour_segments",
    "label_anchors",
    "marching_squares",
    "parse_levels",
    "segments_to_physical",
    "diffraction_analysis",
]
