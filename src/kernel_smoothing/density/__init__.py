"""
Density Module
==============

Weighted kernel density estimation and smoothed cell materialization.

This module provides:
    - collect_samples: Input cells to weighted samples
    - DensityEstimator: Protocol for density backends
    - GaussianDensityEstimator: Binned Gaussian KDE (scipy)
    - estimate_density: Contract-checked estimator call
    - materialize: Density grid to smoothed cells
"""

from kernel_smoothing.density.samples import WeightedSamples, collect_samples
from kernel_smoothing.density.estimator import (
    DensityEstimator,
    GaussianDensityEstimator,
    estimate_density,
)
from kernel_smoothing.density.materializer import materialize

__all__ = [
    # Samples
    "WeightedSamples",
    "collect_samples",
    # Estimation
    "DensityEstimator",
    "GaussianDensityEstimator",
    "estimate_density",
    # Materialization
    "materialize",
]
