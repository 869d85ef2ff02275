"""
Extent & Grid Planner
=====================

Derives the smoothed grid geometry for one draw.

Inputs:
    - Input cell resolution (geo units)
    - Current view (extent and zoom factor)
    - Input cells (only their x/y corners are read)
    - Smoothed resolution function (resolution, zoom_factor) -> cell size

Extent Policies:
    DATA:
        x_min/x_max/y_min/y_max are the min/max cell corners.
        Samples of the last row and column lie outside this extent.
        No cells means an empty 0x0 grid.
    VIEWPORT:
        The view bounding box snapped outward to multiples of the input
        resolution (floor for min, ceil for max).

Dimensions:
    count_x = ceil((x_max - x_min) / cell_size)
    count_y = ceil((y_max - y_min) / cell_size)

Pure function. No side effects.
"""

import logging
import math
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from kernel_smoothing.errors import InvalidParameterError
from kernel_smoothing.models.grid import ExtentPolicy, GridPlan
from kernel_smoothing.models.view import ViewState


logger = logging.getLogger(__name__)


Bounds = Tuple[float, float, float, float]


def to_float(value: Any) -> float:
    """Convert a cell coordinate or weight to float, NaN when it is not numeric."""
    if value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def check_positive(name: str, value: Any) -> float:
    """
    Ensure a derived parameter is a positive finite number.

    Raises:
        InvalidParameterError: If value is not a finite number > 0
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(number) or number <= 0:
        raise InvalidParameterError(f"{name} must be positive and finite, got {value!r}")
    return number


def data_bounds(cells: Sequence[Mapping[str, Any]]) -> Optional[Bounds]:
    """
    Bounding box of the cell corners.

    Corners with a missing, non-numeric or non-finite coordinate are
    ignored; the sample collector decides whether such cells are dropped
    or rejected.

    Returns:
        (x_min, x_max, y_min, y_max), or None if no corner is finite
    """
    corners = [
        (x, y) for x, y in ((to_float(c["x"]), to_float(c["y"])) for c in cells)
        if math.isfinite(x) and math.isfinite(y)
    ]
    if not corners:
        return None
    xs = [x for x, _ in corners]
    ys = [y for _, y in corners]
    return min(xs), max(xs), min(ys), max(ys)


def viewport_bounds(view: ViewState, resolution: float) -> Bounds:
    """
    View bounding box snapped outward to the input resolution.

    Returns:
        (x_min, x_max, y_min, y_max)
    """
    r = resolution
    return (
        math.floor(view.x_min / r) * r,
        math.ceil(view.x_max / r) * r,
        math.floor(view.y_min / r) * r,
        math.ceil(view.y_max / r) * r,
    )


def plan_grid(
    resolution: float,
    view: ViewState,
    cells: Sequence[Mapping[str, Any]],
    resolution_smoothed: Callable[[float, float], float],
    policy: ExtentPolicy = ExtentPolicy.DATA,
) -> GridPlan:
    """
    Plan the smoothed grid for a draw.

    Args:
        resolution: Input cell size in geo units
        view: Current view
        cells: Input cells (after filtering)
        resolution_smoothed: Smoothed cell size from (resolution, zoom_factor)
        policy: Extent policy

    Returns:
        GridPlan covering the data or the view

    Note:
        Under the DATA policy the extent stops at the largest corner, while
        samples sit at cell centers. The samples of the top row and right
        column therefore fall outside the extent and contribute nothing to
        the density; use VIEWPORT to keep them.

    Raises:
        InvalidParameterError: If resolution or smoothed resolution is not
            a positive finite number
    """
    policy = ExtentPolicy(policy)
    resolution = check_positive("resolution", resolution)
    cell_size = check_positive(
        "resolution_smoothed",
        resolution_smoothed(resolution, view.zoom_factor),
    )

    if policy == ExtentPolicy.VIEWPORT:
        bounds = viewport_bounds(view, resolution)
    else:
        bounds = data_bounds(cells)

    if bounds is None:
        # No cells: empty grid, the caller short-circuits
        return GridPlan(
            origin_x=0.0,
            origin_y=0.0,
            cell_size=cell_size,
            count_x=0,
            count_y=0,
        )

    x_min, x_max, y_min, y_max = bounds

    plan = GridPlan(
        origin_x=float(x_min),
        origin_y=float(y_min),
        cell_size=cell_size,
        count_x=int(math.ceil((x_max - x_min) / cell_size)),
        count_y=int(math.ceil((y_max - y_min) / cell_size)),
    )

    logger.debug(f"Planned grid ({policy.value}): {plan.to_dict()}")

    return plan
