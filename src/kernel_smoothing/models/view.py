"""
View Models
===========

The current viewport of the host map viewer.

Coordinate Spaces:
    - Geographic: x grows eastward, y grows northward (geo units, e.g. meters)
    - Screen: pixels, origin at top-left, y grows downward

The zoom factor is the size of one screen pixel in geo units. Larger
values mean the view is zoomed out.

Example:
    view = ViewState.from_center(
        center_x=4000000, center_y=2800000,
        zoom_factor=500, width=800, height=600,
    )
    a, b, c, d, e, f = view.geo_transform()
"""

from typing import Tuple

from pydantic import BaseModel, Field, model_validator


Transform = Tuple[float, float, float, float, float, float]


class ViewState(BaseModel):
    """
    Viewport state supplied fresh for each draw.
    
    Attributes:
        x_min: West edge of the view (geo units)
        x_max: East edge of the view (geo units)
        y_min: South edge of the view (geo units)
        y_max: North edge of the view (geo units)
        width: Viewport width in pixels
        height: Viewport height in pixels
        zoom_factor: Geo units per pixel
    """
    
    model_config = {"frozen": True}
    
    x_min: float = Field(..., description="West edge (geo units)")
    x_max: float = Field(..., description="East edge (geo units)")
    y_min: float = Field(..., description="South edge (geo units)")
    y_max: float = Field(..., description="North edge (geo units)")
    
    width: int = Field(..., gt=0, description="Viewport width in pixels")
    height: int = Field(..., gt=0, description="Viewport height in pixels")
    
    zoom_factor: float = Field(
        ...,
        gt=0,
        description="Size of one pixel in geo units",
    )
    
    @model_validator(mode="after")
    def validate_extent(self) -> "ViewState":
        """Ensure the bounding box is not inverted."""
        if self.x_max < self.x_min:
            raise ValueError("x_max must not be smaller than x_min")
        if self.y_max < self.y_min:
            raise ValueError("y_max must not be smaller than y_min")
        return self
    
    @classmethod
    def from_center(
        cls,
        center_x: float,
        center_y: float,
        zoom_factor: float,
        width: int,
        height: int,
    ) -> "ViewState":
        """
        Build a view from its geographic center and zoom factor.
        
        Args:
            center_x: Center x (geo units)
            center_y: Center y (geo units)
            zoom_factor: Geo units per pixel
            width: Viewport width in pixels
            height: Viewport height in pixels
        """
        half_w = width * zoom_factor / 2
        half_h = height * zoom_factor / 2
        return cls(
            x_min=center_x - half_w,
            x_max=center_x + half_w,
            y_min=center_y - half_h,
            y_max=center_y + half_h,
            width=width,
            height=height,
            zoom_factor=zoom_factor,
        )
    
    def geo_transform(self) -> Transform:
        """
        Affine geo-to-screen transform.
        
        Returns:
            (a, b, c, d, e, f) such that
                px = a*x + c*y + e
                py = b*x + d*y + f
        """
        zf = self.zoom_factor
        return (1.0 / zf, 0.0, 0.0, -1.0 / zf, -self.x_min / zf, self.y_max / zf)
    
    def geo_to_pixel(self, x: float, y: float) -> Tuple[float, float]:
        """Convert a geographic position to screen pixels."""
        a, b, c, d, e, f = self.geo_transform()
        return a * x + c * y + e, b * x + d * y + f
