"""
Weighted Samples
================

Reduces input cells to weighted point samples for density estimation.

Each cell becomes one sample at its center:
    x = cell["x"] + resolution / 2
    y = cell["y"] + resolution / 2
    weight = value(cell)

Non-finite Handling (InvalidDataPolicy):
    COERCE: non-finite weights count as zero, samples with a non-finite
            position are dropped. A single warning reports the counts.
    RAISE:  the first non-finite weight or position raises InvalidDataError.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from kernel_smoothing.errors import InvalidDataError
from kernel_smoothing.models.options import InvalidDataPolicy
from kernel_smoothing.planning.extent import to_float


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeightedSamples:
    """
    Weighted point samples, one per input cell.
    
    Attributes:
        xs: Sample x positions (geo units)
        ys: Sample y positions (geo units)
        weights: Sample weights
    """
    
    xs: np.ndarray
    ys: np.ndarray
    weights: np.ndarray
    
    @property
    def count(self) -> int:
        return int(self.xs.shape[0])
    
    @property
    def total_weight(self) -> float:
        return float(np.sum(self.weights))


def collect_samples(
    cells: Sequence[Mapping[str, Any]],
    resolution: float,
    value: Callable[[Mapping[str, Any]], float],
    invalid_data: InvalidDataPolicy = InvalidDataPolicy.COERCE,
) -> WeightedSamples:
    """
    Build weighted samples at the cell centers.
    
    Args:
        cells: Input cells with "x"/"y" lower-left corners
        resolution: Input cell size in geo units
        value: Accessor returning the weight of a cell
        invalid_data: Non-finite handling policy
        
    Returns:
        WeightedSamples (possibly fewer than cells under COERCE)
        
    Raises:
        InvalidDataError: On non-finite data under the RAISE policy
    """
    n = len(cells)
    half = resolution / 2
    
    xs = np.fromiter((to_float(c["x"]) + half for c in cells), dtype=np.float64, count=n)
    ys = np.fromiter((to_float(c["y"]) + half for c in cells), dtype=np.float64, count=n)
    weights = np.fromiter((to_float(value(c)) for c in cells), dtype=np.float64, count=n)
    
    bad_weight = ~np.isfinite(weights)
    bad_position = ~(np.isfinite(xs) & np.isfinite(ys))
    
    n_bad_weight = int(np.count_nonzero(bad_weight))
    n_bad_position = int(np.count_nonzero(bad_position))
    
    if n_bad_weight == 0 and n_bad_position == 0:
        return WeightedSamples(xs=xs, ys=ys, weights=weights)
    
    if invalid_data == InvalidDataPolicy.RAISE:
        if n_bad_position:
            index = int(np.argmax(bad_position))
            raise InvalidDataError(f"Cell {index} has a non-finite position")
        index = int(np.argmax(bad_weight))
        raise InvalidDataError(f"Cell {index} has a non-finite weight")
    
    logger.warning(
        f"Coerced invalid samples: {n_bad_weight} non-finite weights set to 0, "
        f"{n_bad_position} non-finite positions dropped"
    )
    
    weights = np.where(bad_weight, 0.0, weights)
    keep = ~bad_position
    return WeightedSamples(xs=xs[keep], ys=ys[keep], weights=weights[keep])
