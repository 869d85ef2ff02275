"""
Smoothing Pipeline
==================

One stateless pass from input cells to smoothed cells:

    filter -> plan_grid -> collect_samples -> estimate_density -> materialize

Nothing is cached between calls: identical inputs give identical outputs.

Short-circuits (EmptyInputSkip):
    - no input cell left after filtering
    - the planned grid has no cells

Configuration errors (InvalidParameterError) are raised before any
density computation.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping

from kernel_smoothing.density.estimator import DensityEstimator, estimate_density
from kernel_smoothing.density.materializer import materialize
from kernel_smoothing.density.samples import collect_samples
from kernel_smoothing.errors import EmptyInputSkip
from kernel_smoothing.models.grid import GridPlan
from kernel_smoothing.models.options import SmoothingOptions
from kernel_smoothing.models.view import ViewState
from kernel_smoothing.planning.extent import check_positive, plan_grid


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmoothingResult:
    """
    Output of one pipeline pass.
    
    Attributes:
        plan: Smoothed grid geometry
        bandwidth: Kernel bandwidth used, in geo units
        cells: Materialized smoothed cells (row-major, filtered)
    """
    
    plan: GridPlan
    bandwidth: float
    cells: List[Dict[str, float]]
    
    @property
    def cell_size(self) -> float:
        return self.plan.cell_size


def smooth_cells(
    cells: Iterable[Mapping[str, Any]],
    resolution: float,
    view: ViewState,
    options: SmoothingOptions,
    estimator: DensityEstimator,
) -> SmoothingResult:
    """
    Run the smoothing pipeline for one draw.
    
    Args:
        cells: Input cells with "x"/"y" corners
        resolution: Input cell size in geo units
        view: Current view
        options: Smoothing options
        estimator: Density backend
        
    Returns:
        SmoothingResult with the plan and the smoothed cells
        
    Raises:
        EmptyInputSkip: If there is nothing to smooth
        InvalidParameterError: On non-positive resolution, smoothed
            resolution or bandwidth
        InvalidDataError: On non-finite data under the RAISE policy
    """
    if options.filter is not None:
        cells = [c for c in cells if options.filter(c)]
    else:
        cells = list(cells)
    
    if len(cells) == 0:
        raise EmptyInputSkip("no input cells")
    
    plan = plan_grid(
        resolution,
        view,
        cells,
        options.resolution_smoothed,
        options.extent_policy,
    )
    bandwidth = check_positive("sigma", options.sigma(resolution, view.zoom_factor))
    samples = collect_samples(cells, resolution, options.value, options.invalid_data)
    
    if plan.is_empty:
        raise EmptyInputSkip("planned grid has no cells")
    
    grid = estimate_density(estimator, samples, bandwidth, plan)
    
    smoothed = list(
        materialize(grid, plan, options.smoothed_property, options.filter_smoothed)
    )
    
    logger.debug(
        f"Smoothed {len(cells)} cells into {len(smoothed)}/{plan.size} "
        f"(bins={plan.bins}, bandwidth={bandwidth})"
    )
    
    return SmoothingResult(plan=plan, bandwidth=bandwidth, cells=smoothed)
