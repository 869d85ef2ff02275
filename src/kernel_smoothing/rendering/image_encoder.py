"""
Image Encoder
=============

Encodes raster canvases to PNG with OpenCV.

Design Rules:
    - This is the ONLY place in the codebase that encodes images
    - Fails fast on empty or malformed rasters
    - The raster is RGB; OpenCV expects BGR, so channels are swapped here
"""

import base64
import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from kernel_smoothing.rendering.canvas import RasterCanvas


logger = logging.getLogger(__name__)


class ImageEncodeError(Exception):
    """Raised when image encoding fails."""
    pass


def encode_png(canvas: RasterCanvas) -> bytes:
    """
    Encode a canvas raster to PNG bytes.
    
    Args:
        canvas: Canvas to encode
        
    Returns:
        PNG file content
        
    Raises:
        ImageEncodeError: If the raster is invalid or encoding fails
    """
    rgb = canvas.ctx.to_uint8()
    
    if rgb.ndim != 3 or rgb.shape[2] != 3 or rgb.size == 0:
        raise ImageEncodeError(f"Invalid raster shape: {rgb.shape}")
    
    bgr = cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)
    ok, buffer = cv2.imencode(".png", bgr)
    if not ok:
        raise ImageEncodeError("cv2.imencode failed to encode PNG")
    
    return np.asarray(buffer).tobytes()


def encode_png_base64(canvas: RasterCanvas) -> str:
    """Encode a canvas raster to a base64 PNG string."""
    return base64.b64encode(encode_png(canvas)).decode("ascii")


def save_png(canvas: RasterCanvas, path: Union[str, Path]) -> Path:
    """
    Write a canvas raster to a PNG file.
    
    Returns:
        The written path
    """
    path = Path(path)
    data = encode_png(canvas)
    path.write_bytes(data)
    logger.info(f"Wrote {len(data)} bytes to {path}")
    return path
