"""
Density Field Estimator
=======================

Weighted 2D kernel density estimation over a planned grid.

Contract (any DensityEstimator):
    - Input: weighted samples, a bandwidth in geo units, a GridPlan
    - Output: flat row-major array of plan.size values
    - Deterministic for identical inputs
    - Samples outside the plan extent contribute nothing (no wraparound)

Default Implementation (GaussianDensityEstimator):
    1. Linear binning: each sample's weight is split between the four bin
       centers around it. Bin centers sit at origin + (i + 0.5) * cell_size.
    2. Gaussian convolution with sigma = bandwidth / cell_size bins, zero
       padding outside the grid.
    3. Division by the bin area, so values are weight per unit area and
       stay comparable across zoom levels for the same data.
"""

import logging
from typing import Protocol

import numpy as np
from scipy.ndimage import gaussian_filter

from kernel_smoothing.density.samples import WeightedSamples
from kernel_smoothing.errors import EmptyInputSkip, InvalidDataError, InvalidParameterError
from kernel_smoothing.models.grid import GridPlan
from kernel_smoothing.planning.extent import check_positive


logger = logging.getLogger(__name__)


class DensityEstimator(Protocol):
    """
    Protocol for weighted density estimation backends.
    
    This abstraction allows swapping the Gaussian binned estimator for
    another kernel without changing the pipeline.
    """
    
    def estimate(
        self,
        samples: WeightedSamples,
        bandwidth: float,
        plan: GridPlan,
    ) -> np.ndarray:
        """
        Estimate the density on the planned grid.
        
        Args:
            samples: Weighted point samples
            bandwidth: Kernel bandwidth in geo units
            plan: Target grid geometry
            
        Returns:
            Array of plan.size values, row-major
        """
        ...


class GaussianDensityEstimator:
    """
    Binned Gaussian kernel density estimator.
    
    Attributes:
        truncate: Kernel radius in standard deviations
    """
    
    def __init__(self, truncate: float = 4.0) -> None:
        """
        Initialize Gaussian estimator.
        
        Args:
            truncate: Truncate the kernel at this many sigmas
        """
        if truncate <= 0:
            raise InvalidParameterError("truncate must be positive")
        self.truncate = truncate
        
        logger.info(f"GaussianDensityEstimator initialized: truncate={truncate}")
    
    def estimate(
        self,
        samples: WeightedSamples,
        bandwidth: float,
        plan: GridPlan,
    ) -> np.ndarray:
        """Bin, smooth and normalize the samples onto the grid."""
        grid = self._bin(samples, plan)
        
        smoothed = gaussian_filter(
            grid,
            sigma=bandwidth / plan.cell_size,
            mode="constant",
            cval=0.0,
            truncate=self.truncate,
        )
        
        smoothed /= plan.cell_size * plan.cell_size
        return smoothed.ravel()
    
    def _bin(self, samples: WeightedSamples, plan: GridPlan) -> np.ndarray:
        """
        Linear binning of the samples.
        
        Returns:
            (count_y, count_x) array of binned weights
        """
        nx, ny = plan.bins
        size = plan.cell_size
        (x0, x1), (y0, y1) = plan.extent
        
        grid = np.zeros((ny, nx), dtype=np.float64)
        
        xs, ys, weights = samples.xs, samples.ys, samples.weights
        inside = (xs >= x0) & (xs <= x1) & (ys >= y0) & (ys <= y1)
        if not np.any(inside):
            return grid
        
        # Fractional bin coordinates, clamped to the outer bin centers
        u = np.clip((xs[inside] - x0) / size - 0.5, 0, nx - 1)
        v = np.clip((ys[inside] - y0) / size - 0.5, 0, ny - 1)
        w = weights[inside]
        
        i0 = np.floor(u).astype(np.intp)
        j0 = np.floor(v).astype(np.intp)
        tu = u - i0
        tv = v - j0
        i1 = np.minimum(i0 + 1, nx - 1)
        j1 = np.minimum(j0 + 1, ny - 1)
        
        np.add.at(grid, (j0, i0), w * (1 - tu) * (1 - tv))
        np.add.at(grid, (j0, i1), w * tu * (1 - tv))
        np.add.at(grid, (j1, i0), w * (1 - tu) * tv)
        np.add.at(grid, (j1, i1), w * tu * tv)
        
        return grid


def estimate_density(
    estimator: DensityEstimator,
    samples: WeightedSamples,
    bandwidth: float,
    plan: GridPlan,
) -> np.ndarray:
    """
    Run an estimator and enforce its output contract.
    
    Args:
        estimator: Density backend
        samples: Weighted samples
        bandwidth: Kernel bandwidth in geo units
        plan: Target grid geometry
        
    Returns:
        Flat float64 array of plan.size values
        
    Raises:
        InvalidParameterError: If bandwidth is not positive and finite
        EmptyInputSkip: If the plan has no cells
        InvalidDataError: If the estimator returns the wrong number of values
    """
    bandwidth = check_positive("sigma", bandwidth)
    if plan.is_empty:
        raise EmptyInputSkip("empty grid plan")
    
    grid = np.asarray(estimator.estimate(samples, bandwidth, plan), dtype=np.float64).ravel()
    
    if grid.shape[0] != plan.size:
        raise InvalidDataError(
            f"Density estimator returned {grid.shape[0]} values, expected {plan.size}"
        )
    
    logger.debug(
        f"Density estimated: {samples.count} samples, bandwidth={bandwidth}, "
        f"bins={plan.bins}, max={float(grid.max()):.6g}"
    )
    
    return grid
