"""
Error Types
===========

Exceptions raised by the smoothing pipeline.

Error Kinds:
    - InvalidParameterError: bad configuration or derived parameters
      (non-positive resolution, bandwidth, unknown blend mode, ...)
    - InvalidDataError: non-finite samples under the strict policy,
      estimator output that breaks its contract
    - EmptyInputSkip: nothing to draw; a normal early return, not a failure

Configuration errors are raised before any numerical work is done.
"""


class KernelSmoothingError(Exception):
    """Base class for all kernel smoothing errors."""
    pass


class InvalidParameterError(KernelSmoothingError, ValueError):
    """Raised when a parameter or option is malformed or out of range."""
    pass


class InvalidDataError(KernelSmoothingError, ValueError):
    """Raised when input data cannot be turned into a valid density grid."""
    pass


class EmptyInputSkip(KernelSmoothingError):
    """
    Raised when a draw has nothing to render.
    
    Caught by KernelSmoothingStyle.draw, which returns without drawing.
    """
    
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
