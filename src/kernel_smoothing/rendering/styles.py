"""
Delegate Styles
===============

Drawing routines invoked against the smoothed cells.

A delegate style is any object with a draw(cells, resolution, canvas)
method. The following capabilities are optional; each is an attribute
holding a callable, and an absent or None attribute means "not declared":

    visible(zoom_factor) -> bool
    alpha(zoom_factor) -> float in [0, 1]
    blend_operation(zoom_factor) -> BlendMode or identifier
    filter_color(zoom_factor) -> color, together with draw_filter(canvas)

SquareColorStyle is the reference delegate shipped with the package.
"""

import bisect
import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Protocol, Sequence

from kernel_smoothing.errors import InvalidParameterError
from kernel_smoothing.models.options import DEFAULT_SMOOTHED_PROPERTY
from kernel_smoothing.rendering.context import IDENTITY, BlendMode, GeoCanvas
from kernel_smoothing.rendering.canvas import Color


logger = logging.getLogger(__name__)


class DelegateStyle(Protocol):
    """
    Protocol for delegate drawing styles.
    
    Only draw() is required. See the module docstring for the optional
    capability attributes.
    """
    
    def draw(
        self,
        cells: Sequence[Mapping[str, Any]],
        resolution: float,
        canvas: GeoCanvas,
    ) -> None:
        """
        Draw cells onto the canvas.
        
        Args:
            cells: Smoothed cells
            resolution: Smoothed cell size in geo units
            canvas: Target canvas; its context is already in geo space
        """
        ...


def capability(style: Any, name: str) -> Optional[Callable[..., Any]]:
    """Return an optional capability of a style, or None if not declared."""
    value = getattr(style, name, None)
    return value if callable(value) else None


class SquareColorStyle:
    """
    Draws each cell as a colored square.
    
    The cell value is classified against ascending breaks:
        value < breaks[0]             -> colors[0]
        breaks[i-1] <= value < breaks[i] -> colors[i]
        value >= breaks[-1]           -> colors[-1]
    
    Cells with a missing or non-positive value are not drawn.
    
    Attributes:
        colors: len(breaks) + 1 colors
        breaks: Ascending class boundaries
        property: Cell property holding the value
        size_factor: Square size relative to the cell size, in (0, 1]
    """
    
    def __init__(
        self,
        colors: Sequence[Color],
        breaks: Sequence[float] = (),
        property: str = DEFAULT_SMOOTHED_PROPERTY,
        size_factor: float = 1.0,
        visible: Optional[Callable[[float], bool]] = None,
        alpha: Optional[Callable[[float], float]] = None,
        blend_operation: Optional[Callable[[float], Any]] = None,
        filter_color: Optional[Callable[[float], Color]] = None,
    ) -> None:
        """
        Initialize square color style.
        
        Args:
            colors: One color per class
            breaks: Ascending class boundaries
            property: Name of the value property
            size_factor: Square size as a fraction of the cell size
            visible: Optional visibility by zoom factor
            alpha: Optional alpha by zoom factor
            blend_operation: Optional blend mode by zoom factor
            filter_color: Optional overlay color by zoom factor
        """
        if len(colors) != len(breaks) + 1:
            raise InvalidParameterError(
                f"Need {len(breaks) + 1} colors for {len(breaks)} breaks, got {len(colors)}"
            )
        if any(b1 >= b2 for b1, b2 in zip(breaks, breaks[1:])):
            raise InvalidParameterError("breaks must be strictly ascending")
        if not 0 < size_factor <= 1:
            raise InvalidParameterError("size_factor must be in (0, 1]")
        
        self.colors = list(colors)
        self.breaks = list(breaks)
        self.property = property
        self.size_factor = size_factor
        
        self.visible = visible
        self.alpha = alpha
        self.blend_operation = blend_operation
        self.filter_color = filter_color
    
    def class_index(self, value: float) -> int:
        """Index of the class holding a value."""
        return bisect.bisect_right(self.breaks, value)
    
    def classify(self, value: float) -> Color:
        """Color of a value."""
        return self.colors[self.class_index(value)]
    
    def draw(
        self,
        cells: Iterable[Mapping[str, Any]],
        resolution: float,
        canvas: GeoCanvas,
    ) -> None:
        ctx = canvas.ctx
        size = resolution * self.size_factor
        offset = (resolution - size) / 2
        
        # Group by color to set the fill style once per class
        by_class: Dict[int, list] = {}
        for cell in cells:
            value = cell.get(self.property)
            if value is None or not value > 0:
                continue
            by_class.setdefault(self.class_index(value), []).append(cell)
        
        for _, group in sorted(by_class.items()):
            ctx.fill_style = self.classify(group[0][self.property])
            for cell in group:
                ctx.fill_rect(cell["x"] + offset, cell["y"] + offset, size, size)
    
    def draw_filter(self, canvas: GeoCanvas) -> None:
        """Fill the whole canvas with the filter color, in pixel space."""
        if self.filter_color is None:
            return
        ctx = canvas.ctx
        ctx.set_transform(*IDENTITY)
        ctx.fill_style = self.filter_color(canvas.view.zoom_factor)
        ctx.fill_rect(0, 0, canvas.view.width, canvas.view.height)
