"""
Smoothing Options
=================

Explicit configuration bundle for the kernel smoothing style.

Every draw reads its accessors and defaults from a SmoothingOptions
instance. Options are validated once, when the style is built.

Fields:
    value               (cell) -> float, the value to smooth (required)
    sigma               (resolution, zoom_factor) -> bandwidth in geo units (required)
    resolution_smoothed (resolution, zoom_factor) -> smoothed cell size
    filter              (cell) -> bool, applied to input cells before planning
    filter_smoothed     (value) -> bool, applied to smoothed values
    smoothed_property   name of the smoothed value in output cells
    styles              delegate styles drawing the smoothed cells, in z-order
    extent_policy       ExtentPolicy.DATA or ExtentPolicy.VIEWPORT
    invalid_data        what to do with non-finite samples

Example:
    options = make_options(
        value=lambda c: c["population"],
        sigma=lambda r, zf: r * 2,
        styles=[SquareColorStyle(breaks=[1, 10], colors=["#fee", "#f88", "#c00"])],
    )
"""

from enum import Enum
from typing import Any, Callable, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from kernel_smoothing.errors import InvalidParameterError
from kernel_smoothing.models.grid import ExtentPolicy


DEFAULT_SMOOTHED_PROPERTY = "ksmval"


class InvalidDataPolicy(str, Enum):
    """
    Handling of non-finite weights and positions.
    
    Attributes:
        COERCE: Non-finite weights count as zero, non-finite positions are dropped
        RAISE: Any non-finite value raises InvalidDataError
    """
    
    COERCE = "coerce"
    RAISE = "raise"


def half_resolution(resolution: float, zoom_factor: float) -> float:
    """Default smoothed resolution: half the input resolution."""
    return resolution / 2


class SmoothingOptions(BaseModel):
    """
    Validated options of a KernelSmoothingStyle.
    
    Use make_options() to get InvalidParameterError instead of a
    pydantic ValidationError on malformed input.
    """
    
    model_config = {"arbitrary_types_allowed": True, "frozen": True}
    
    value: Callable[[Mapping[str, Any]], float] = Field(
        ...,
        description="Accessor returning the value to smooth for a cell",
    )
    sigma: Callable[[float, float], float] = Field(
        ...,
        description="Bandwidth in geo units, from (resolution, zoom_factor)",
    )
    resolution_smoothed: Callable[[float, float], float] = Field(
        default=half_resolution,
        description="Smoothed cell size in geo units, from (resolution, zoom_factor)",
    )
    filter: Optional[Callable[[Mapping[str, Any]], bool]] = Field(
        default=None,
        description="Input cell filter, True keeps the cell",
    )
    filter_smoothed: Optional[Callable[[float], bool]] = Field(
        default=None,
        description="Smoothed value filter, True keeps the cell",
    )
    smoothed_property: str = Field(
        default=DEFAULT_SMOOTHED_PROPERTY,
        min_length=1,
        description="Property name of the smoothed value in output cells",
    )
    styles: List[Any] = Field(
        default_factory=list,
        description="Delegate styles, drawn in list order",
    )
    extent_policy: ExtentPolicy = Field(
        default=ExtentPolicy.DATA,
        description="How the smoothed grid extent is derived",
    )
    invalid_data: InvalidDataPolicy = Field(
        default=InvalidDataPolicy.COERCE,
        description="Handling of non-finite samples",
    )
    
    @field_validator("styles")
    @classmethod
    def validate_styles(cls, v: List[Any]) -> List[Any]:
        """Every delegate must at least be drawable."""
        for index, style in enumerate(v):
            if not callable(getattr(style, "draw", None)):
                raise ValueError(f"styles[{index}] has no callable draw()")
        return v
    
    @classmethod
    def from_settings(cls, defaults: Any, **overrides: Any) -> "SmoothingOptions":
        """
        Build options using the `smoothing` configuration section as defaults.
        
        Args:
            defaults: A SmoothingDefaults section (see kernel_smoothing.config)
            **overrides: Option values; value and sigma are required
            
        Raises:
            InvalidParameterError: If the resulting options are malformed
        """
        divisor = defaults.resolution_divisor
        
        def resolution_smoothed(resolution: float, zoom_factor: float) -> float:
            return resolution / divisor
        
        fields = {
            "smoothed_property": defaults.smoothed_property,
            "extent_policy": defaults.extent_policy,
            "invalid_data": defaults.invalid_data,
            "resolution_smoothed": resolution_smoothed,
        }
        fields.update(overrides)
        return make_options(**fields)


def make_options(**kwargs: Any) -> SmoothingOptions:
    """
    Validate keyword options into a SmoothingOptions.
    
    Raises:
        InvalidParameterError: If any option is missing or malformed
    """
    try:
        return SmoothingOptions(**kwargs)
    except ValidationError as e:
        raise InvalidParameterError(f"Invalid smoothing options: {e}") from e
