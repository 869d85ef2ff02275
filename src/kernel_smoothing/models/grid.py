"""
Grid Models
===========

Geometry of the smoothed output grid.

A GridPlan is derived once per draw by the extent planner and consumed by
the density estimator and the cell materializer. It is never mutated.

Layout:
    Cells are addressed row-major, i = row * count_x + col.
    Row 0 is the southernmost row; rows grow with y.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from kernel_smoothing.errors import InvalidParameterError


class ExtentPolicy(str, Enum):
    """
    How the smoothed grid extent is derived.
    
    Attributes:
        DATA: Bounding box of the input cells (tightest, deterministic)
        VIEWPORT: View bounding box snapped outward to the input resolution
    """
    
    DATA = "data"
    VIEWPORT = "viewport"


@dataclass(frozen=True, slots=True)
class GridPlan:
    """
    Planned geometry of the smoothed grid.
    
    Attributes:
        origin_x: x of the lower-left corner of cell (0, 0)
        origin_y: y of the lower-left corner of cell (0, 0)
        cell_size: Smoothed cell size in geo units
        count_x: Number of columns
        count_y: Number of rows
    """
    
    origin_x: float
    origin_y: float
    cell_size: float
    count_x: int
    count_y: int
    
    def __post_init__(self) -> None:
        """Validate invariants."""
        if not math.isfinite(self.cell_size) or self.cell_size <= 0:
            raise InvalidParameterError(
                f"cell_size must be positive and finite, got {self.cell_size}"
            )
        for name in ("count_x", "count_y"):
            count = getattr(self, name)
            if not isinstance(count, int) or count < 0:
                raise InvalidParameterError(
                    f"{name} must be a non-negative integer, got {count!r}"
                )
    
    @property
    def x_max(self) -> float:
        return self.origin_x + self.count_x * self.cell_size
    
    @property
    def y_max(self) -> float:
        return self.origin_y + self.count_y * self.cell_size
    
    @property
    def extent(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """Geographic extent as ((x_min, x_max), (y_min, y_max))."""
        return (self.origin_x, self.x_max), (self.origin_y, self.y_max)
    
    @property
    def bins(self) -> Tuple[int, int]:
        return self.count_x, self.count_y
    
    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.count_x * self.count_y
    
    @property
    def is_empty(self) -> bool:
        return self.size == 0
    
    def to_dict(self) -> dict:
        """Export as dictionary for logging."""
        return {
            "origin": [self.origin_x, self.origin_y],
            "cell_size": self.cell_size,
            "bins": [self.count_x, self.count_y],
        }
