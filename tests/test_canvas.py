"""
Raster Canvas Tests
===================

Tests for the reference canvas, the square color style and PNG export.
"""

import cv2
import numpy as np
import pytest

from kernel_smoothing.errors import InvalidParameterError
from kernel_smoothing.models.view import ViewState
from kernel_smoothing.rendering import (
    BlendMode,
    RasterCanvas,
    RasterContext,
    SquareColorStyle,
    parse_color,
    render_delegates,
    scoped_state,
)
from kernel_smoothing.rendering.image_encoder import encode_png, encode_png_base64, save_png


@pytest.fixture
def small_view():
    return ViewState(x_min=0, x_max=10, y_min=0, y_max=10, width=10, height=10, zoom_factor=1.0)


class TestParseColor:
    """Tests for color parsing."""
    
    def test_hex(self):
        assert parse_color("#ff8000").tolist() == pytest.approx([1.0, 128 / 255, 0.0])
    
    def test_short_hex(self):
        assert parse_color("#f00").tolist() == [1.0, 0.0, 0.0]
    
    def test_tuple(self):
        assert parse_color((0, 255, 0)).tolist() == [0.0, 1.0, 0.0]
    
    @pytest.mark.parametrize("color", ["red", "#12345", "#gggggg", (0, 0), (0, 0, 300)])
    def test_invalid(self, color):
        with pytest.raises(InvalidParameterError):
            parse_color(color)


class TestRasterContext:
    """Tests for fills, blending and the state stack."""
    
    def test_fill_normal(self):
        ctx = RasterContext(4, 4, background="#000000")
        ctx.fill_style = "#ffffff"
        ctx.fill_rect(1, 1, 2, 2)
        raster = ctx.to_uint8()
        assert raster[1, 1].tolist() == [255, 255, 255]
        assert raster[0, 0].tolist() == [0, 0, 0]
        assert raster[3, 3].tolist() == [0, 0, 0]
    
    def test_global_alpha(self):
        ctx = RasterContext(2, 2, background="#000000")
        ctx.fill_style = "#ffffff"
        ctx.global_alpha = 0.5
        ctx.fill_rect(0, 0, 2, 2)
        assert ctx.pixels[0, 0].tolist() == pytest.approx([0.5, 0.5, 0.5])
    
    def test_multiply(self):
        ctx = RasterContext(2, 2, background="#808080")
        ctx.fill_style = "#ff0000"
        ctx.blend_mode = BlendMode.MULTIPLY
        ctx.fill_rect(0, 0, 2, 2)
        assert ctx.to_uint8()[0, 0].tolist() == [128, 0, 0]
    
    def test_screen_and_lighten(self):
        ctx = RasterContext(2, 1, background="#404040")
        ctx.fill_style = "#404040"
        ctx.blend_mode = BlendMode.SCREEN
        ctx.fill_rect(0, 0, 1, 1)
        ctx.blend_mode = BlendMode.DARKEN
        ctx.fill_style = "#ffffff"
        ctx.fill_rect(1, 0, 1, 1)
        assert ctx.pixels[0, 0, 0] > parse_color("#404040")[0]
        assert ctx.to_uint8()[0, 1].tolist() == [64, 64, 64]
    
    def test_blend_order_matters(self):
        def composite(modes):
            ctx = RasterContext(1, 1, background="#808080")
            for color, mode in modes:
                ctx.fill_style = color
                ctx.blend_mode = mode
                ctx.fill_rect(0, 0, 1, 1)
            return ctx.to_uint8()[0, 0].tolist()
        
        first = composite([("#ff0000", BlendMode.MULTIPLY), ("#0000ff", BlendMode.LIGHTER)])
        second = composite([("#0000ff", BlendMode.LIGHTER), ("#ff0000", BlendMode.MULTIPLY)])
        assert first != second
    
    def test_save_restore(self):
        ctx = RasterContext(2, 2)
        ctx.save()
        ctx.global_alpha = 0.2
        ctx.blend_mode = BlendMode.SCREEN
        ctx.set_transform(2, 0, 0, 2, 1, 1)
        ctx.fill_style = "#123456"
        ctx.restore()
        assert ctx.global_alpha == 1.0
        assert ctx.blend_mode is BlendMode.NORMAL
        assert ctx.get_transform() == (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)
        assert ctx.fill_style.tolist() == [0.0, 0.0, 0.0]
        assert ctx.depth == 0
    
    def test_restore_on_empty_stack_is_noop(self):
        ctx = RasterContext(2, 2)
        ctx.restore()
        assert ctx.depth == 0
    
    def test_scoped_state_restores_on_error(self):
        ctx = RasterContext(2, 2)
        with pytest.raises(ValueError):
            with scoped_state(ctx, 0.3, BlendMode.MULTIPLY):
                assert ctx.global_alpha == 0.3
                raise ValueError("boom")
        assert ctx.global_alpha == 1.0
        assert ctx.blend_mode is BlendMode.NORMAL
    
    def test_clipped_fill(self):
        ctx = RasterContext(3, 3, background="#000000")
        ctx.fill_style = "#ffffff"
        ctx.fill_rect(-5, -5, 6, 100)
        raster = ctx.to_uint8()
        assert raster[:, 0].tolist() == [[255, 255, 255]] * 3
        assert raster[:, 1].tolist() == [[0, 0, 0]] * 3
    
    def test_invalid_size(self):
        with pytest.raises(InvalidParameterError):
            RasterContext(0, 10)


class TestGeoCanvas:
    """Tests for geo-space drawing through the view transform."""
    
    def test_geo_rect_lands_bottom_left(self, small_view):
        canvas = RasterCanvas(small_view)
        canvas.ctx.set_transform(*small_view.geo_transform())
        canvas.ctx.fill_style = "#000000"
        canvas.ctx.fill_rect(0, 0, 5, 5)
        assert canvas.pixel(0, 9) == (0, 0, 0)
        assert canvas.pixel(4, 5) == (0, 0, 0)
        assert canvas.pixel(0, 4) == (255, 255, 255)
        assert canvas.pixel(9, 0) == (255, 255, 255)
    
    def test_view_from_center(self):
        view = ViewState.from_center(100, 50, zoom_factor=2, width=40, height=20)
        assert (view.x_min, view.x_max, view.y_min, view.y_max) == (60, 140, 30, 70)
        assert view.geo_to_pixel(60, 70) == (0.0, 0.0)
        assert view.geo_to_pixel(140, 30) == (40.0, 20.0)
    
    def test_inverted_view_rejected(self):
        with pytest.raises(ValueError):
            ViewState(x_min=10, x_max=0, y_min=0, y_max=10, width=10, height=10, zoom_factor=1)


class TestSquareColorStyle:
    """Tests for the reference delegate."""
    
    def test_classify(self):
        style = SquareColorStyle(colors=["#000", "#888", "#fff"], breaks=[1, 10])
        assert style.classify(0.5) == "#000"
        assert style.classify(1) == "#888"
        assert style.classify(9.9) == "#888"
        assert style.classify(10) == "#fff"
    
    def test_draw_colors_cells_by_class(self, small_view):
        canvas = RasterCanvas(small_view)
        style = SquareColorStyle(colors=["#ff0000", "#0000ff"], breaks=[2])
        cells = [
            {"x": 0.0, "y": 0.0, "ksmval": 1.0},
            {"x": 5.0, "y": 5.0, "ksmval": 3.0},
        ]
        render_delegates(cells, [style], 5.0, canvas)
        assert canvas.pixel(1, 8) == (255, 0, 0)
        assert canvas.pixel(8, 1) == (0, 0, 255)
    
    def test_draw_uses_classify(self, small_view):
        class Monochrome(SquareColorStyle):
            def classify(self, value):
                return "#000000"
        
        canvas = RasterCanvas(small_view)
        style = Monochrome(colors=["#ff0000"])
        render_delegates([{"x": 0.0, "y": 0.0, "ksmval": 1.0}], [style], 5.0, canvas)
        assert canvas.pixel(1, 8) == (0, 0, 0)
    
    def test_color_count_must_match(self):
        with pytest.raises(InvalidParameterError):
            SquareColorStyle(colors=["#000"], breaks=[1])
    
    def test_breaks_must_ascend(self):
        with pytest.raises(InvalidParameterError):
            SquareColorStyle(colors=["#000", "#111", "#222"], breaks=[5, 1])
    
    def test_skips_non_positive_cells(self, small_view):
        canvas = RasterCanvas(small_view)
        cells = [
            {"x": 0.0, "y": 0.0, "ksmval": 0.0},
            {"x": 5.0, "y": 5.0, "ksmval": 3.0},
        ]
        render_delegates(cells, [SquareColorStyle(colors=["#00ff00"])], 5.0, canvas)
        assert canvas.pixel(1, 8) == (255, 255, 255)
        assert canvas.pixel(8, 1) == (0, 255, 0)
    
    def test_size_factor_centers_square(self, small_view):
        canvas = RasterCanvas(small_view)
        cells = [{"x": 0.0, "y": 0.0, "ksmval": 1.0}]
        render_delegates(cells, [SquareColorStyle(colors=["#000000"], size_factor=0.2)], 10.0, canvas)
        assert canvas.pixel(5, 5) == (0, 0, 0)
        assert canvas.pixel(0, 0) == (255, 255, 255)
        assert canvas.pixel(3, 3) == (255, 255, 255)
    
    def test_filter_overlay_and_alpha(self, small_view):
        canvas = RasterCanvas(small_view, background="#000000")
        style = SquareColorStyle(
            colors=["#ffffff"],
            alpha=lambda zf: 0.5,
            filter_color=lambda zf: "#ffffff",
        )
        render_delegates([{"x": 0.0, "y": 0.0, "ksmval": 1.0}], [style], 5.0, canvas)
        # Square at half alpha, then the overlay over the whole canvas at half alpha
        assert canvas.pixel(0, 9) == (191, 191, 191)
        assert canvas.pixel(9, 0) == (128, 128, 128)
        assert canvas.ctx.global_alpha == 1.0
        assert canvas.ctx.get_transform() == (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


class TestImageEncoder:
    """Tests for PNG export."""
    
    def test_png_roundtrip_pixels(self, small_view):
        canvas = RasterCanvas(small_view, background=(10, 20, 30))
        data = encode_png(canvas)
        assert data[:8] == b"\x89PNG\r\n\x1a\n"
        bgr = cv2.imdecode(np.frombuffer(data, np.uint8), cv2.IMREAD_COLOR)
        assert bgr.shape == (10, 10, 3)
        assert bgr[0, 0].tolist() == [30, 20, 10]
    
    def test_base64(self, small_view):
        assert encode_png_base64(RasterCanvas(small_view)).startswith("iVBORw0KGgo")
    
    def test_save_png(self, small_view, tmp_path):
        path = save_png(RasterCanvas(small_view), tmp_path / "out.png")
        assert path.read_bytes()[:4] == b"\x89PNG"
