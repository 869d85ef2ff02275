"""
Composite Renderer
==================

Draws the smoothed cells with an ordered list of delegate styles.

For each delegate, in list order (list order is the z-order):
    1. Skip it entirely if visible(zoom_factor) is declared and false
    2. Scope the context: alpha/blend when declared, else the transform
    3. Re-apply the geo-to-screen transform
    4. draw(cells, cell_size, canvas)
    5. draw_filter(canvas) when filter_color and draw_filter are declared
    6. Leave the scope, restoring the context even if the delegate raised

Every delegate receives the same cell sequence.
"""

import logging
from typing import Any, Mapping, Sequence

from kernel_smoothing.rendering.context import (
    BlendMode,
    GeoCanvas,
    scoped_state,
    scoped_transform,
)
from kernel_smoothing.rendering.styles import DelegateStyle, capability


logger = logging.getLogger(__name__)


def resolve_alpha(value: Any) -> float:
    """Clamp a delegate alpha to [0, 1]."""
    alpha = float(value)
    if not 0.0 <= alpha <= 1.0:
        clamped = min(1.0, max(0.0, alpha))
        logger.warning(f"Delegate alpha {alpha} outside [0, 1], clamped to {clamped}")
        return clamped
    return alpha


def render_delegates(
    cells: Sequence[Mapping[str, Any]],
    delegates: Sequence[DelegateStyle],
    cell_size: float,
    canvas: GeoCanvas,
) -> int:
    """
    Composite delegate styles over the smoothed cells.
    
    Args:
        cells: Materialized smoothed cells
        delegates: Delegate styles in z-order
        cell_size: Smoothed cell size in geo units
        canvas: Target canvas
        
    Returns:
        Number of delegates drawn (invisible ones excluded)
        
    Raises:
        InvalidParameterError: If a delegate returns an unknown blend mode
    """
    ctx = canvas.ctx
    zoom_factor = canvas.view.zoom_factor
    transform = canvas.view.geo_transform()
    drawn = 0
    
    for style in delegates:
        visible = capability(style, "visible")
        if visible is not None and not visible(zoom_factor):
            continue
        
        alpha_fn = capability(style, "alpha")
        blend_fn = capability(style, "blend_operation")
        
        if alpha_fn is not None or blend_fn is not None:
            alpha = resolve_alpha(alpha_fn(zoom_factor)) if alpha_fn is not None else 1.0
            blend = BlendMode.parse(blend_fn(zoom_factor)) if blend_fn is not None else BlendMode.NORMAL
            scope = scoped_state(ctx, alpha, blend)
        else:
            scope = scoped_transform(ctx)
        
        with scope:
            ctx.set_transform(*transform)
            style.draw(cells, cell_size, canvas)
            
            draw_filter = capability(style, "draw_filter")
            if draw_filter is not None and capability(style, "filter_color") is not None:
                draw_filter(canvas)
        
        drawn += 1
    
    return drawn
