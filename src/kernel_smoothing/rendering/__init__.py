"""
Rendering Module
================

Compositing of delegate styles over the smoothed layer.

This module provides:
    - RenderContext / GeoCanvas: Host drawing interfaces
    - BlendMode, scoped_state, scoped_transform: Scoped context state
    - render_delegates: Composite renderer
    - DelegateStyle / SquareColorStyle: Delegate protocol and reference style
    - RasterCanvas: numpy-backed reference canvas
    - image_encoder.encode_png: PNG export (OpenCV), imported on its own
"""

from kernel_smoothing.rendering.context import (
    BlendMode,
    GeoCanvas,
    RenderContext,
    scoped_state,
    scoped_transform,
)
from kernel_smoothing.rendering.canvas import RasterCanvas, RasterContext, parse_color
from kernel_smoothing.rendering.styles import DelegateStyle, SquareColorStyle, capability
from kernel_smoothing.rendering.composite import render_delegates

__all__ = [
    # Context
    "BlendMode",
    "GeoCanvas",
    "RenderContext",
    "scoped_state",
    "scoped_transform",
    # Canvas
    "RasterCanvas",
    "RasterContext",
    "parse_color",
    # Styles
    "DelegateStyle",
    "SquareColorStyle",
    "capability",
    # Compositing
    "render_delegates",
]
