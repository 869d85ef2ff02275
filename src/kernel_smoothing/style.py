"""
Kernel Smoothing Style
======================

A style representing cells as a smoothed layer, to smooth local
variations and show the main trends across space.

Each draw:
    1. Smooths the input cells onto a denser grid (see pipeline)
    2. Composites the delegate styles over the smoothed cells

The style itself satisfies the DelegateStyle protocol, so it can be
nested inside another composite.

Example:
    style = KernelSmoothingStyle(
        value=lambda c: c["population"],
        sigma=lambda r, zf: r * 2,
        styles=[SquareColorStyle(colors=["#fdd", "#f66", "#900"], breaks=[0.01, 0.1])],
    )
    style.draw(cells, resolution=1000, canvas=canvas)
"""

import logging
import time
from typing import Any, Iterable, List, Mapping, Optional

from kernel_smoothing.density.estimator import DensityEstimator, GaussianDensityEstimator
from kernel_smoothing.errors import EmptyInputSkip, InvalidParameterError
from kernel_smoothing.models.options import SmoothingOptions, make_options
from kernel_smoothing.models.view import ViewState
from kernel_smoothing.pipeline import SmoothingResult, smooth_cells
from kernel_smoothing.rendering.composite import render_delegates
from kernel_smoothing.rendering.context import GeoCanvas


logger = logging.getLogger(__name__)


SLOW_DRAW_MS = 50


class KernelSmoothingStyle:
    """
    Smoothed-layer style delegating the drawing to other styles.
    
    Attributes:
        options: Validated smoothing options
        estimator: Density backend (Gaussian by default)
    """
    
    def __init__(
        self,
        options: Optional[SmoothingOptions] = None,
        estimator: Optional[DensityEstimator] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize kernel smoothing style.
        
        Args:
            options: Prebuilt options; mutually exclusive with kwargs
            estimator: Density backend; GaussianDensityEstimator if None
            **kwargs: Option fields (value, sigma, styles, ...)
            
        Raises:
            InvalidParameterError: On malformed options
        """
        if options is None:
            options = make_options(**kwargs)
        elif kwargs:
            raise InvalidParameterError(
                "Pass either an options object or keyword options, not both"
            )
        
        self.options = options
        self.estimator = estimator if estimator is not None else GaussianDensityEstimator()
        
        logger.info(
            f"KernelSmoothingStyle initialized: {len(options.styles)} styles, "
            f"extent={options.extent_policy.value}, property={options.smoothed_property}"
        )
    
    @property
    def styles(self) -> List[Any]:
        return self.options.styles
    
    def smooth(
        self,
        cells: Iterable[Mapping[str, Any]],
        resolution: float,
        view: ViewState,
    ) -> SmoothingResult:
        """
        Compute the smoothed cells without drawing them.
        
        Raises:
            EmptyInputSkip: If there is nothing to smooth
        """
        return smooth_cells(cells, resolution, view, self.options, self.estimator)
    
    def draw(
        self,
        cells: Iterable[Mapping[str, Any]],
        resolution: float,
        canvas: GeoCanvas,
    ) -> Optional[SmoothingResult]:
        """
        Smooth the cells and draw them with the delegate styles.
        
        Args:
            cells: Input cells
            resolution: Input cell size in geo units
            canvas: Target canvas
            
        Returns:
            The smoothing result, or None when there was nothing to draw
        """
        start_time = time.time()
        
        try:
            result = self.smooth(cells, resolution, canvas.view)
        except EmptyInputSkip as skip:
            logger.debug(f"Nothing to draw: {skip.reason}")
            return None
        
        render_delegates(result.cells, self.options.styles, result.cell_size, canvas)
        
        elapsed_ms = (time.time() - start_time) * 1000
        if elapsed_ms > SLOW_DRAW_MS:
            logger.warning(
                f"Smoothed draw took {elapsed_ms:.1f}ms (>{SLOW_DRAW_MS}ms threshold), "
                f"bins={result.plan.bins}"
            )
        
        return result
