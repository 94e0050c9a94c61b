import io

import numpy as np
import pytest
from PIL import Image

from dye.config import settings
from dye.pipeline.downscale import cell_grid_size, downscale_area
from dye.pipeline.render import UPPER_HALF_BLOCK, load_image, render_image

RESET = "\x1b[0m"


class TestCellGrid:
    def test_square(self):
        assert cell_grid_size(100, 100, 10) == (10, 10)

    def test_keeps_aspect_ratio(self):
        assert cell_grid_size(100, 200, 20) == (10, 20)

    def test_rows_are_even(self):
        assert cell_grid_size(33, 10, 10) == (34, 10)

    def test_at_least_one_cell_row(self):
        assert cell_grid_size(10, 100, 5) == (2, 5)


class TestDownscale:
    def test_output_shape(self):
        img = np.random.randint(0, 256, (64, 64, 3), dtype=np.uint8)
        result = downscale_area(img, 16)
        assert result.shape == (16, 16, 3)
        assert result.dtype == np.uint8

    def test_upscaling_small_image(self):
        img = np.random.randint(0, 256, (2, 2, 3), dtype=np.uint8)
        result = downscale_area(img, 4)
        assert result.shape == (4, 4, 3)


class TestRenderImage:
    def _solid(self, color, size=4):
        return np.full((size, size, 3), color, dtype=np.uint8)

    def test_truecolor_cells(self):
        text = render_image(self._solid([255, 0, 0]), columns=4, mode="truecolor")
        lines = text.split("\n")
        assert len(lines) == 2
        cell = "\x1b[38;2;255;0;0m\x1b[48;2;255;0;0m" + UPPER_HALF_BLOCK
        assert lines[0] == cell * 4 + RESET

    def test_256_cells(self):
        text = render_image(self._solid([255, 0, 0]), columns=4, mode="256")
        cell = "\x1b[38;5;196m\x1b[48;5;196m" + UPPER_HALF_BLOCK
        assert text.split("\n")[0] == cell * 4 + RESET

    def test_upper_pixel_is_foreground(self):
        img = np.array([[[255, 0, 0]], [[0, 0, 255]]], dtype=np.uint8)
        text = render_image(img, columns=1, mode="truecolor")
        assert text == "\x1b[38;2;255;0;0m\x1b[48;2;0;0;255m" + UPPER_HALF_BLOCK + RESET

    def test_default_width_is_capped(self, monkeypatch):
        monkeypatch.setattr(settings, "max_render_width", 8)
        text = render_image(self._solid([0, 128, 0], size=16), mode="truecolor")
        for line in text.split("\n"):
            assert line.count(UPPER_HALF_BLOCK) == 8

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            render_image(self._solid([0, 0, 0]), columns=2, mode="16")


class TestLoadImage:
    def _encode(self, img: Image.Image) -> bytes:
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    def test_decodes_png(self):
        data = self._encode(Image.new("RGB", (5, 3), (10, 20, 30)))
        arr = load_image(data)
        assert arr.shape == (3, 5, 3)
        assert arr.dtype == np.uint8
        np.testing.assert_array_equal(arr[0, 0], [10, 20, 30])

    def test_drops_alpha(self):
        data = self._encode(Image.new("RGBA", (2, 2), (1, 2, 3, 128)))
        assert load_image(data).shape == (2, 2, 3)

    def test_rejects_garbage(self):
        with pytest.raises(Exception):
            load_image(b"not an image")
