"""
Planning Module
===============

Geometry of the smoothed grid: extent policies and grid dimensions.
"""

from kernel_smoothing.planning.extent import (
    check_positive,
    data_bounds,
    plan_grid,
    to_float,
    viewport_bounds,
)

__all__ = [
    "check_positive",
    "data_bounds",
    "plan_grid",
    "to_float",
    "viewport_bounds",
]
