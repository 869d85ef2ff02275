"""
Render Context
==============

Narrow interface to the host drawing surface, and scoped state helpers.

The drawing context is a shared mutable resource owned by the host.
Anything this package changes on it (alpha, blend mode, transform) is
changed inside a scope that restores it on every exit path, including
exceptions raised by delegate styles.

Interfaces:
    - RenderContext: 2D context primitives (state stack, transform, fills)
    - GeoCanvas: a view plus its render context
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Protocol, Union

from kernel_smoothing.errors import InvalidParameterError
from kernel_smoothing.models.view import Transform, ViewState


logger = logging.getLogger(__name__)


IDENTITY: Transform = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


class BlendMode(str, Enum):
    """
    Compositing operations supported by render contexts.
    
    Values follow the canvas globalCompositeOperation names.
    """
    
    NORMAL = "normal"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    LIGHTER = "lighter"
    DARKEN = "darken"
    LIGHTEN = "lighten"
    
    @classmethod
    def parse(cls, value: Union["BlendMode", str]) -> "BlendMode":
        """
        Resolve a blend mode identifier.
        
        "source-over" is accepted as an alias of NORMAL.
        
        Raises:
            InvalidParameterError: If the identifier is unknown
        """
        if isinstance(value, cls):
            return value
        if value == "source-over":
            return cls.NORMAL
        try:
            return cls(value)
        except ValueError:
            raise InvalidParameterError(f"Unknown blend mode: {value!r}")


class RenderContext(Protocol):
    """
    Drawing context primitives used by the renderer and delegate styles.
    
    Attributes:
        global_alpha: Opacity applied to subsequent fills, in [0, 1]
        blend_mode: Compositing operation for subsequent fills
        fill_style: Fill color for subsequent fills
    """
    
    global_alpha: float
    blend_mode: BlendMode
    fill_style: Any
    
    def save(self) -> None:
        """Push the current state onto the state stack."""
        ...
    
    def restore(self) -> None:
        """Pop the last saved state."""
        ...
    
    def set_transform(
        self, a: float, b: float, c: float, d: float, e: float, f: float
    ) -> None:
        """Replace the current user-to-pixel transform."""
        ...
    
    def get_transform(self) -> Transform:
        """Current user-to-pixel transform."""
        ...
    
    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        """Fill a rectangle given in user space."""
        ...


class GeoCanvas(Protocol):
    """A drawing surface bound to a geographic view."""
    
    view: ViewState
    ctx: RenderContext


@contextmanager
def scoped_state(
    ctx: RenderContext,
    alpha: float = 1.0,
    blend_mode: BlendMode = BlendMode.NORMAL,
) -> Iterator[RenderContext]:
    """
    Save the context, set alpha and blend mode, restore on exit.
    
    Args:
        ctx: Render context
        alpha: Global alpha for the scope
        blend_mode: Blend mode for the scope
    """
    ctx.save()
    try:
        ctx.global_alpha = alpha
        ctx.blend_mode = blend_mode
        yield ctx
    finally:
        ctx.restore()


@contextmanager
def scoped_transform(ctx: RenderContext) -> Iterator[RenderContext]:
    """Snapshot the transform and restore it on exit."""
    saved = ctx.get_transform()
    try:
        yield ctx
    finally:
        ctx.set_transform(*saved)
