from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from dye.config import ColorMode, settings
from dye.manipulators import Style, bg, fg
from dye.palettes.xterm256 import ecma48_from_rgb_image

logger = logging.getLogger(__name__)

# A colormap maps t in [0, 1] to an (r, g, b) triplet with channels in [0, 1].
Colormap = Callable[[float], tuple[float, float, float]]

_lut_cache: dict[tuple[Colormap, int], ColormapLUT] = {}


class ColormapLUT:
    """Precomputed samples of a colormap.

    ``size`` samples are taken evenly over [0, 1] when the table is built.
    Both tables are read-only afterwards, so a LUT can be shared freely
    between threads.
    """

    def __init__(self, colormap: Colormap, size: int | None = None):
        size = settings.lut_size if size is None else size
        assert size >= 2, f"colormap LUT needs at least 2 samples, got {size}"

        samples = np.array(
            [colormap(t) for t in np.linspace(0.0, 1.0, size)], dtype=np.float64
        )
        assert samples.shape == (size, 3), f"colormap must return RGB triplets, got {samples.shape}"
        assert samples.min() >= 0.0 and samples.max() <= 1.0, "colormap channels must lie in [0, 1]"

        self.size = size
        self.rgb = np.round(samples * 255.0).astype(np.uint8)
        self.ecma48 = ecma48_from_rgb_image(self.rgb)
        self.rgb.setflags(write=False)
        self.ecma48.setflags(write=False)
        logger.debug("Built %d-entry LUT for %r", size, colormap)

    def _index(self, x: float) -> int:
        x = min(1.0, max(0.0, x))
        return int(round(x * (self.size - 1)))

    def __len__(self) -> int:
        return self.size

    def __call__(self, x: float) -> tuple[int, int, int]:
        """RGB sample nearest to ``x``; values outside [0, 1] saturate."""
        r, g, b = self.rgb[self._index(x)]
        return int(r), int(g), int(b)

    def index(self, x: float) -> int:
        """Palette index of the sample nearest to ``x``."""
        return int(self.ecma48[self._index(x)])

    def fg(self, x: float, mode: ColorMode | None = None) -> Style:
        if (mode or settings.color_mode) == "256":
            return fg(self.index(x))
        return fg(*self(x), mode="truecolor")

    def bg(self, x: float, mode: ColorMode | None = None) -> Style:
        if (mode or settings.color_mode) == "256":
            return bg(self.index(x))
        return bg(*self(x), mode="truecolor")


def get_lut(colormap: Colormap, size: int | None = None) -> ColormapLUT:
    """Shared LUT for a colormap, built on first use."""
    size = settings.lut_size if size is None else size
    key = (colormap, size)
    lut = _lut_cache.get(key)
    if lut is None:
        lut = _lut_cache[key] = ColormapLUT(colormap, size)
    return lut


def gradient(
    start: tuple[float, float, float],
    stop: tuple[float, float, float],
) -> Colormap:
    """Colormap interpolating linearly between two [0, 1] RGB triplets."""

    def colormap(t: float) -> tuple[float, float, float]:
        return tuple(min(1.0, max(0.0, (1.0 - t) * a + t * b)) for a, b in zip(start, stop))

    return colormap
