"""
Data Models
===========

Models shared across the smoothing pipeline.

Models:
    View:
        - ViewState: Viewport extent, size and zoom factor
    
    Grid:
        - ExtentPolicy: Data-bound or viewport-bound extent
        - GridPlan: Geometry of the smoothed grid
    
    Options:
        - SmoothingOptions: Validated style configuration
        - InvalidDataPolicy: Handling of non-finite samples
"""

from kernel_smoothing.models.view import ViewState
from kernel_smoothing.models.grid import ExtentPolicy, GridPlan
from kernel_smoothing.models.options import (
    DEFAULT_SMOOTHED_PROPERTY,
    InvalidDataPolicy,
    SmoothingOptions,
    make_options,
)

__all__ = [
    # View
    "ViewState",
    # Grid
    "ExtentPolicy",
    "GridPlan",
    # Options
    "DEFAULT_SMOOTHED_PROPERTY",
    "InvalidDataPolicy",
    "SmoothingOptions",
    "make_options",
]
