"""
Cell Materializer
=================

Turns a flat density grid back into smoothed cell records.

For index i of the grid:
    row = i // count_x
    col = i %  count_x
    cell = {
        "x": origin_x + col * cell_size,
        "y": origin_y + row * cell_size,
        <smoothed_property>: grid[i],
    }

Cells failing the optional value filter are dropped, not replaced.
The output is a lazy, single-pass generator.
"""

from typing import Callable, Dict, Iterator, Optional

import numpy as np

from kernel_smoothing.errors import InvalidDataError
from kernel_smoothing.models.grid import GridPlan
from kernel_smoothing.models.options import DEFAULT_SMOOTHED_PROPERTY


def materialize(
    grid: np.ndarray,
    plan: GridPlan,
    smoothed_property: str = DEFAULT_SMOOTHED_PROPERTY,
    filter_smoothed: Optional[Callable[[float], bool]] = None,
) -> Iterator[Dict[str, float]]:
    """
    Generate smoothed cells from a density grid.
    
    The grid length is checked before the generator is returned, so a
    mismatched grid never yields a partial sequence.
    
    Args:
        grid: Flat row-major density values
        plan: Grid geometry the values were computed for
        smoothed_property: Key of the smoothed value in each cell
        filter_smoothed: Optional predicate on the value, True keeps the cell
        
    Returns:
        Iterator over smoothed cell dicts
        
    Raises:
        InvalidDataError: If the grid length differs from plan.size
    """
    if len(grid) != plan.size:
        raise InvalidDataError(
            f"Density grid has {len(grid)} values, plan expects {plan.size}"
        )
    return _iter_cells(grid, plan, smoothed_property, filter_smoothed)


def _iter_cells(
    grid: np.ndarray,
    plan: GridPlan,
    smoothed_property: str,
    filter_smoothed: Optional[Callable[[float], bool]],
) -> Iterator[Dict[str, float]]:
    count_x = plan.count_x
    size = plan.cell_size
    
    for index in range(plan.size):
        value = float(grid[index])
        if filter_smoothed is not None and not filter_smoothed(value):
            continue
        row, col = divmod(index, count_x)
        yield {
            "x": plan.origin_x + col * size,
            "y": plan.origin_y + row * size,
            smoothed_property: value,
        }
