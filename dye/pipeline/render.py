from __future__ import annotations

import io
import logging

import numpy as np
from PIL import Image

from dye import ecma48
from dye.config import ColorMode, settings
from dye.palettes.xterm256 import ecma48_from_rgb_image
from dye.pipeline.downscale import downscale_area

logger = logging.getLogger(__name__)

UPPER_HALF_BLOCK = "▀"


def load_image(data: bytes) -> np.ndarray:
    """Decode image bytes (any format Pillow reads) to H x W x 3 uint8 RGB."""
    return np.array(Image.open(io.BytesIO(data)).convert("RGB"))


def render_image(
    image: np.ndarray,
    columns: int | None = None,
    mode: ColorMode | None = None,
) -> str:
    """Render an image as half-block terminal art.

    Each cell prints an upper half block whose foreground is the upper pixel
    and whose background is the lower pixel. Every line ends with an SGR reset.

    Args:
        image: H x W x 3 uint8 RGB.
        columns: Output width in cells. Defaults to the image width, capped at
            ``settings.max_render_width``.
        mode: ``truecolor`` or ``256``. Defaults to ``settings.color_mode``.

    Returns:
        The rendered text, one line per two pixel rows.
    """
    mode = mode or settings.color_mode
    if mode not in ("truecolor", "256"):
        raise ValueError(f"unknown color mode: {mode!r}")
    if columns is None:
        columns = min(settings.max_render_width, image.shape[1])

    small = downscale_area(image, columns)
    logger.debug(
        "Rendering %dx%d image as %dx%d cells (%s)",
        image.shape[1], image.shape[0], small.shape[1], small.shape[0] // 2, mode,
    )

    upper, lower = small[0::2], small[1::2]
    if mode == "256":
        upper_idx = ecma48_from_rgb_image(upper)
        lower_idx = ecma48_from_rgb_image(lower)

    lines = []
    for y in range(upper.shape[0]):
        cells = []
        for x in range(upper.shape[1]):
            if mode == "256":
                fg = ecma48.foreground_256(int(upper_idx[y, x]))
                bg = ecma48.background_256(int(lower_idx[y, x]))
            else:
                fg = ecma48.foreground_24bit(*(int(c) for c in upper[y, x]))
                bg = ecma48.background_24bit(*(int(c) for c in lower[y, x]))
            cells.append(fg + bg + UPPER_HALF_BLOCK)
        lines.append("".join(cells) + ecma48.sgr("reset"))

    return "\n".join(lines)
