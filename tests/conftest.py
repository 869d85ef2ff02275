"""
Test Configuration
==================

Pytest fixtures and recording fakes for the kernel smoothing tests.
"""

import numpy as np
import pytest

from kernel_smoothing.models.view import ViewState
from kernel_smoothing.rendering.context import IDENTITY


class RecordingContext:
    """Render context that records every call."""
    
    def __init__(self):
        self.calls = []
        self._alpha = 1.0
        self._blend = "normal"
        self._transform = IDENTITY
        self.fill_style = "#000000"
        self._stack = []
    
    @property
    def global_alpha(self):
        return self._alpha
    
    @global_alpha.setter
    def global_alpha(self, value):
        self.calls.append(("global_alpha", value))
        self._alpha = value
    
    @property
    def blend_mode(self):
        return self._blend
    
    @blend_mode.setter
    def blend_mode(self, value):
        self.calls.append(("blend_mode", value))
        self._blend = value
    
    def save(self):
        self.calls.append(("save",))
        self._stack.append((self._alpha, self._blend, self._transform))
    
    def restore(self):
        self.calls.append(("restore",))
        if self._stack:
            self._alpha, self._blend, self._transform = self._stack.pop()
    
    def set_transform(self, a, b, c, d, e, f):
        self.calls.append(("set_transform", (a, b, c, d, e, f)))
        self._transform = (a, b, c, d, e, f)
    
    def get_transform(self):
        self.calls.append(("get_transform",))
        return self._transform
    
    def fill_rect(self, x, y, width, height):
        self.calls.append(("fill_rect", (x, y, width, height)))
    
    def names(self):
        return [call[0] for call in self.calls]


class RecordingCanvas:
    """Geo canvas backed by a RecordingContext."""
    
    def __init__(self, view):
        self.view = view
        self.ctx = RecordingContext()


class RecordingStyle:
    """Delegate style recording its draw calls in a shared log."""
    
    def __init__(self, name, log, visible=None, alpha=None, blend_operation=None,
                 filter_color=None, fail=False):
        self.name = name
        self.log = log
        self.visible = visible
        self.alpha = alpha
        self.blend_operation = blend_operation
        self.filter_color = filter_color
        self.fail = fail
        self.received = []
    
    def draw(self, cells, resolution, canvas):
        self.log.append((self.name, "draw"))
        self.received.append((cells, resolution))
        if self.fail:
            raise RuntimeError(f"{self.name} failed")
    
    def draw_filter(self, canvas):
        self.log.append((self.name, "draw_filter"))


class RecordingEstimator:
    """Estimator returning a fixed ramp and recording its inputs."""
    
    def __init__(self):
        self.calls = []
    
    def estimate(self, samples, bandwidth, plan):
        self.calls.append((samples, bandwidth, plan))
        return np.arange(plan.size, dtype=np.float64)


@pytest.fixture
def four_cells():
    """The 2x2 reference dataset at resolution 10."""
    return [
        {"x": 0, "y": 0, "w": 10},
        {"x": 10, "y": 0, "w": 20},
        {"x": 0, "y": 10, "w": 30},
        {"x": 10, "y": 10, "w": 40},
    ]


@pytest.fixture
def view():
    """A 20x20 geo unit view at one geo unit per pixel."""
    return ViewState(
        x_min=0, x_max=20, y_min=0, y_max=20,
        width=20, height=20, zoom_factor=1.0,
    )


@pytest.fixture
def recording_canvas(view):
    return RecordingCanvas(view)


@pytest.fixture
def recording_estimator():
    return RecordingEstimator()


@pytest.fixture
def draw_log():
    return []


@pytest.fixture
def make_style(draw_log):
    """Factory for RecordingStyle delegates sharing the draw log."""
    def factory(name, **kwargs):
        return RecordingStyle(name, draw_log, **kwargs)
    return factory


@pytest.fixture
def make_canvas(view):
    """Factory for fresh RecordingCanvas instances on the default view."""
    def factory():
        return RecordingCanvas(view)
    return factory
