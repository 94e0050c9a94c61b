from __future__ import annotations

import math

import numpy as np

from dye.rgb import RGB, RGB_EXTENT, UNIT_CUBE_DIAGONAL

# Layout of the xterm 256-color table:
# - 0-15 are the standard colors (0-7 dim, 8-15 bright).
# - 16-231 form a 6x6x6 cube. Index 16 + 36*r + 6*g + b, each level mapping to
#   0, 95, 135, 175, 215 or 255 (a 95 step, then steps of 40).
# - 232-255 are 24 grays from 8 to 238 in steps of 10, leaving out black and
#   white.

STANDARD_START = 0
STANDARD_END = 15
STANDARD_DIM_START = 0
STANDARD_DIM_END = 7
STANDARD_BRIGHT_START = 8
STANDARD_BRIGHT_END = 15

EXTENDED_START = 16
EXTENDED_END = 231
EXTENDED_LEVELS = 6
EXTENDED_FIRST_STEP = 95.0
EXTENDED_STEP = 40.0
EXTENDED_VALUES = (0, 95, 135, 175, 215, 255)

GREY_START = 232
GREY_END = 255
GREY_LEVELS = GREY_END - GREY_START + 1
GREY_FIRST_VALUE = 8.0
GREY_STEP = 10.0

# xterm defaults for the standard colors, see XTerm-col.ad / 256colres.pl.
STANDARD_VALUES = (
    (0, 0, 0),
    (205, 0, 0),
    (0, 205, 0),
    (205, 205, 0),
    (0, 0, 238),
    (205, 0, 205),
    (0, 205, 205),
    (229, 229, 229),
    (127, 127, 127),
    (255, 0, 0),
    (0, 255, 0),
    (255, 255, 0),
    (92, 92, 255),
    (255, 0, 255),
    (0, 255, 255),
    (255, 255, 255),
)


def _round_half_down(x: float) -> int:
    return math.ceil(x - 0.5)


def _quantize_extended(x: float) -> int:
    """Nearest cube level (0-5) for a channel value, ties going to the lower level."""
    assert 0.0 <= x <= RGB_EXTENT, f"channel out of range: {x}"
    if x <= EXTENDED_FIRST_STEP / 2:
        return 0
    if x <= EXTENDED_FIRST_STEP + EXTENDED_STEP / 2:
        return 1
    return min(EXTENDED_LEVELS - 1, 1 + _round_half_down((x - EXTENDED_FIRST_STEP) / EXTENDED_STEP))


def _quantize_grey(x: float) -> int:
    """Nearest gray level (0-23) for a gray value; values past either end saturate."""
    level = _round_half_down((x - GREY_FIRST_VALUE) / GREY_STEP)
    return max(0, min(GREY_LEVELS - 1, level))


def rgb_from_grey_level(level: int) -> RGB:
    assert 0 <= level < GREY_LEVELS, f"grey level out of range: {level}"
    v = GREY_FIRST_VALUE + level * GREY_STEP
    return RGB(v, v, v)


def rgb_from_extended_levels(rl: int, gl: int, bl: int) -> RGB:
    for level in (rl, gl, bl):
        assert 0 <= level < EXTENDED_LEVELS, f"extended level out of range: {level}"
    return RGB(EXTENDED_VALUES[rl], EXTENDED_VALUES[gl], EXTENDED_VALUES[bl])


def ecma48_from_grey_level(level: int) -> int:
    assert 0 <= level < GREY_LEVELS, f"grey level out of range: {level}"
    return GREY_START + level


def ecma48_from_extended_levels(rl: int, gl: int, bl: int) -> int:
    for level in (rl, gl, bl):
        assert 0 <= level < EXTENDED_LEVELS, f"extended level out of range: {level}"
    return EXTENDED_START + rl * 36 + gl * 6 + bl


def grey_level_from_ecma48(index: int) -> int:
    assert GREY_START <= index <= GREY_END, f"not a grey index: {index}"
    return index - GREY_START


def extended_levels_from_ecma48(index: int) -> tuple[int, int, int]:
    assert EXTENDED_START <= index <= EXTENDED_END, f"not an extended index: {index}"
    offset = index - EXTENDED_START
    return offset // 36, (offset // 6) % 6, offset % 6


def region(index: int) -> str:
    """Name of the palette region holding ``index``: standard, extended or grey."""
    assert 0 <= index <= GREY_END, f"palette index out of range: {index}"
    if index <= STANDARD_END:
        return "standard"
    if index <= EXTENDED_END:
        return "extended"
    return "grey"


def rgb_from_ecma48(index: int) -> RGB:
    """Representative color of any palette index (xterm defaults for 0-15)."""
    kind = region(index)
    if kind == "standard":
        return RGB(*STANDARD_VALUES[index])
    if kind == "extended":
        return rgb_from_extended_levels(*extended_levels_from_ecma48(index))
    return rgb_from_grey_level(grey_level_from_ecma48(index))


def palette() -> list[RGB]:
    """All 256 palette entries, in index order."""
    return [rgb_from_ecma48(i) for i in range(GREY_END + 1)]


def ecma48_from_rgb(r: float, g: float, b: float) -> int:
    """Index of the palette color closest to an RGB triplet.

    Two candidates are compared by Euclidean distance to the input: the cube
    color with each channel quantized independently, and the gray ramp entry
    nearest to the input's projection onto the r=g=b axis. The gray candidate
    wins ties, and a cube candidate lying on the gray axis always gives way to
    the ramp, so achromatic inputs resolve to 232-255.

    Args:
        r, g, b: Channel values in [0, 255].

    Returns:
        Palette index in [16, 255].
    """
    rgb = RGB(r, g, b)

    rl = _quantize_extended(rgb.r)
    gl = _quantize_extended(rgb.g)
    bl = _quantize_extended(rgb.b)
    closest_extended = rgb_from_extended_levels(rl, gl, bl)

    grey_level = _quantize_grey(rgb.projection_on_identity_line().r)
    closest_grey = rgb_from_grey_level(grey_level)

    d_to_closest_grey = rgb.distance(closest_grey)
    d_to_closest_extended = rgb.distance(closest_extended)

    if rl == gl == bl or d_to_closest_grey <= d_to_closest_extended:
        return ecma48_from_grey_level(grey_level)
    return ecma48_from_extended_levels(rl, gl, bl)


def _quantize_extended_array(x: np.ndarray) -> np.ndarray:
    upper = 1 + np.ceil((x - EXTENDED_FIRST_STEP) / EXTENDED_STEP - 0.5)
    levels = np.where(
        x <= EXTENDED_FIRST_STEP / 2,
        0,
        np.where(x <= EXTENDED_FIRST_STEP + EXTENDED_STEP / 2, 1, upper),
    )
    return np.minimum(levels, EXTENDED_LEVELS - 1).astype(np.int64)


def ecma48_from_rgb_image(image: np.ndarray) -> np.ndarray:
    """Vectorized ``ecma48_from_rgb`` over an image.

    Args:
        image: H x W x 3 (or N x 3) uint8 RGB.

    Returns:
        Array of palette indices with the image's leading shape, dtype uint8.
    """
    assert image.shape[-1] == 3, f"expected RGB channels, got shape {image.shape}"
    pixels = image.astype(np.float64)
    assert pixels.min(initial=0.0) >= 0.0 and pixels.max(initial=0.0) <= RGB_EXTENT

    r, g, b = pixels[..., 0], pixels[..., 1], pixels[..., 2]

    # Cube candidate
    rl = _quantize_extended_array(r)
    gl = _quantize_extended_array(g)
    bl = _quantize_extended_array(b)
    values = np.array(EXTENDED_VALUES, dtype=np.float64)
    dr, dg, db = values[rl] - r, values[gl] - g, values[bl] - b
    d_to_closest_extended = np.sqrt(dr * dr + dg * dg + db * db)

    # Gray candidate, same arithmetic as RGB.projection_on_identity_line
    n = np.sqrt(r * r + g * g + b * b)
    bg_, br_, gr_ = b - g, b - r, g - r
    d = np.sqrt(bg_ * bg_ + br_ * br_ + gr_ * gr_) / UNIT_CUBE_DIAGONAL
    along = np.sqrt(np.maximum(0.0, n * n - d * d))
    projection = np.minimum(RGB_EXTENT, along / UNIT_CUBE_DIAGONAL)
    grey_level = np.clip(
        np.ceil((projection - GREY_FIRST_VALUE) / GREY_STEP - 0.5), 0, GREY_LEVELS - 1
    ).astype(np.int64)
    grey_value = GREY_FIRST_VALUE + grey_level * GREY_STEP
    dr, dg, db = grey_value - r, grey_value - g, grey_value - b
    d_to_closest_grey = np.sqrt(dr * dr + dg * dg + db * db)

    use_grey = ((rl == gl) & (gl == bl)) | (d_to_closest_grey <= d_to_closest_extended)
    indices = np.where(
        use_grey,
        GREY_START + grey_level,
        EXTENDED_START + rl * 36 + gl * 6 + bl,
    )
    return indices.astype(np.uint8)
