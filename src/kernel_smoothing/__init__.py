"""
kernel_smoothing
================

Kernel smoothing style for gridded data in pan/zoom map viewers.

Raw grid cells (fixed-resolution squares carrying a value) are noisy at
small scales. This package resamples them onto a denser grid with a
weighted 2D Gaussian kernel density estimate and hands the smoothed cells
to delegate styles that draw the pixels.

Components:
    - planning: Smoothed grid extent and dimensions
    - density: Weighted samples, density estimation, cell materialization
    - rendering: Delegate compositing, scoped context state, reference canvas
    - pipeline: One stateless smoothing pass
    - style: KernelSmoothingStyle, the host-facing entry point

Example:
    from kernel_smoothing import KernelSmoothingStyle, SquareColorStyle
    
    style = KernelSmoothingStyle(
        value=lambda c: c["population"],
        sigma=lambda r, zf: 2 * r,
        styles=[SquareColorStyle(colors=["#fee", "#f88", "#c00"], breaks=[0.001, 0.01])],
    )
    style.draw(cells, resolution=1000, canvas=canvas)
"""

__version__ = "0.1.0"

from kernel_smoothing.errors import (
    EmptyInputSkip,
    InvalidDataError,
    InvalidParameterError,
    KernelSmoothingError,
)
from kernel_smoothing.models import (
    ExtentPolicy,
    GridPlan,
    InvalidDataPolicy,
    SmoothingOptions,
    ViewState,
    make_options,
)
from kernel_smoothing.rendering import BlendMode, RasterCanvas, SquareColorStyle
from kernel_smoothing.pipeline import SmoothingResult, smooth_cells
from kernel_smoothing.style import KernelSmoothingStyle

__all__ = [
    "__version__",
    # Errors
    "KernelSmoothingError",
    "InvalidParameterError",
    "InvalidDataError",
    "EmptyInputSkip",
    # Models
    "ExtentPolicy",
    "GridPlan",
    "InvalidDataPolicy",
    "SmoothingOptions",
    "ViewState",
    "make_options",
    # Rendering
    "BlendMode",
    "RasterCanvas",
    "SquareColorStyle",
    # Pipeline
    "SmoothingResult",
    "smooth_cells",
    "KernelSmoothingStyle",
]
