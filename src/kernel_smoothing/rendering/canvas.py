"""
Raster Canvas
=============

In-memory drawing surface implementing the RenderContext primitives.

The raster is an (H, W, 3) float64 RGB array in [0, 1]. Fills are
axis-aligned rectangles mapped through the current affine transform and
composited with the current global alpha and blend mode:

    out = dst * (1 - alpha) + blend(src, dst) * alpha

Used as the reference host for the pipeline and for PNG export.
"""

import logging
from typing import Callable, Dict, List, Sequence, Tuple, Union

import numpy as np

from kernel_smoothing.errors import InvalidParameterError
from kernel_smoothing.models.view import Transform, ViewState
from kernel_smoothing.rendering.context import IDENTITY, BlendMode


logger = logging.getLogger(__name__)


Color = Union[str, Sequence[int]]


_BLENDS: Dict[BlendMode, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    BlendMode.NORMAL: lambda src, dst: np.broadcast_to(src, dst.shape),
    BlendMode.MULTIPLY: lambda src, dst: src * dst,
    BlendMode.SCREEN: lambda src, dst: 1.0 - (1.0 - src) * (1.0 - dst),
    BlendMode.LIGHTER: lambda src, dst: np.minimum(1.0, src + dst),
    BlendMode.DARKEN: lambda src, dst: np.minimum(src, dst),
    BlendMode.LIGHTEN: lambda src, dst: np.maximum(src, dst),
}


def parse_color(color: Color) -> np.ndarray:
    """
    Parse a color into an RGB float array in [0, 1].
    
    Accepts "#rgb", "#rrggbb" or a sequence of three 0-255 ints.
    
    Raises:
        InvalidParameterError: If the color cannot be parsed
    """
    if isinstance(color, str):
        text = color.strip().lstrip("#")
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) != 6:
            raise InvalidParameterError(f"Invalid color: {color!r}")
        try:
            rgb = [int(text[i:i + 2], 16) for i in (0, 2, 4)]
        except ValueError:
            raise InvalidParameterError(f"Invalid color: {color!r}")
    else:
        rgb = list(color)
        if len(rgb) != 3 or any(not 0 <= v <= 255 for v in rgb):
            raise InvalidParameterError(f"Invalid color: {color!r}")
    return np.asarray(rgb, dtype=np.float64) / 255.0


class RasterContext:
    """
    Render context backed by a numpy RGB raster.
    
    Attributes:
        width: Raster width in pixels
        height: Raster height in pixels
        pixels: (height, width, 3) float array in [0, 1]
        global_alpha: Current global alpha
        blend_mode: Current blend mode
    """
    
    def __init__(self, width: int, height: int, background: Color = "#ffffff") -> None:
        if width <= 0 or height <= 0:
            raise InvalidParameterError("Canvas size must be positive")
        
        self.width = width
        self.height = height
        self.pixels = np.empty((height, width, 3), dtype=np.float64)
        self.pixels[:] = parse_color(background)
        
        self.global_alpha: float = 1.0
        self.blend_mode: BlendMode = BlendMode.NORMAL
        self._fill = parse_color("#000000")
        self._transform: Transform = IDENTITY
        self._stack: List[Tuple[Transform, float, BlendMode, np.ndarray]] = []
    
    @property
    def fill_style(self) -> np.ndarray:
        return self._fill
    
    @fill_style.setter
    def fill_style(self, color: Color) -> None:
        self._fill = parse_color(color)
    
    def save(self) -> None:
        self._stack.append(
            (self._transform, self.global_alpha, self.blend_mode, self._fill)
        )
    
    def restore(self) -> None:
        # Like a 2D canvas, restoring an empty stack is a no-op
        if not self._stack:
            return
        self._transform, self.global_alpha, self.blend_mode, self._fill = self._stack.pop()
    
    @property
    def depth(self) -> int:
        """Number of saved states."""
        return len(self._stack)
    
    def set_transform(
        self, a: float, b: float, c: float, d: float, e: float, f: float
    ) -> None:
        self._transform = (a, b, c, d, e, f)
    
    def get_transform(self) -> Transform:
        return self._transform
    
    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        """Fill the pixel bounding box of a user-space rectangle."""
        a, b, c, d, e, f = self._transform
        xs = []
        ys = []
        for ux, uy in ((x, y), (x + width, y + height)):
            xs.append(a * ux + c * uy + e)
            ys.append(b * ux + d * uy + f)
        
        px0 = max(0, int(round(min(xs))))
        px1 = min(self.width, int(round(max(xs))))
        py0 = max(0, int(round(min(ys))))
        py1 = min(self.height, int(round(max(ys))))
        if px1 <= px0 or py1 <= py0:
            return
        
        region = self.pixels[py0:py1, px0:px1]
        blended = _BLENDS[BlendMode.parse(self.blend_mode)](self._fill, region)
        alpha = self.global_alpha
        region[:] = region * (1.0 - alpha) + blended * alpha
    
    def to_uint8(self) -> np.ndarray:
        """Raster as (H, W, 3) uint8 RGB."""
        return np.clip(np.rint(self.pixels * 255.0), 0, 255).astype(np.uint8)


class RasterCanvas:
    """
    Geo canvas: a view and a raster context of the same pixel size.
    
    Example:
        view = ViewState.from_center(500, 500, zoom_factor=2, width=400, height=300)
        canvas = RasterCanvas(view)
        style.draw(cells, resolution=10, canvas=canvas)
        png = encode_png(canvas)
    """
    
    def __init__(self, view: ViewState, background: Color = "#ffffff") -> None:
        self.view = view
        self.ctx = RasterContext(view.width, view.height, background)
        
        logger.debug(f"RasterCanvas created: {view.width}x{view.height}px, zf={view.zoom_factor}")
    
    @property
    def zoom_factor(self) -> float:
        return self.view.zoom_factor
    
    def pixel(self, px: int, py: int) -> Tuple[int, int, int]:
        """RGB value of one pixel, 0-255."""
        r, g, b = self.ctx.to_uint8()[py, px]
        return int(r), int(g), int(b)
