"""ECMA-48 control sequences for graphic rendition and color selection.

The standard is available at
https://www.ecma-international.org/publications-and-standards/standards/ecma-48/
Section references below point into it.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

ESC = "\x1b"  # Escape, C0 set (§5.2)
CSI = ESC + "["  # Control Sequence Introducer, 7-bit C1 representation (§5.3)


def _sequence(params: tuple[int, ...], final: str) -> str:
    for p in params:
        assert p >= 0, f"negative control sequence parameter: {p}"
    return CSI + ";".join(str(p) for p in params) + final


@dataclass(frozen=True)
class Psx:
    """Control sequence with any number of selective parameters (§8.1.i).

    Called with zero, one, two or more parameters. Without parameters it emits
    the default parameter, or a bare sequence when there is none.
    """

    final: str
    default: int | None = None

    def __call__(self, *params: int) -> str:
        if not params and self.default is not None:
            params = (self.default,)
        return _sequence(params, self.final)


SGR = Psx("m", 0)  # Select Graphic Rendition §8.3.117

# Parameter values of SGR, by attribute name.
SGR_CODES = MappingProxyType({
    "reset": 0,
    "bold": 1,
    "faint": 2,
    "italic": 3,
    "underlined": 4,
    "slow_blinking": 5,
    "rapid_blinking": 6,
    "negative": 7,
    "concealed": 8,
    "crossed": 9,
    "font0": 10,
    "font1": 11,
    "font2": 12,
    "font3": 13,
    "font4": 14,
    "font5": 15,
    "font6": 16,
    "font7": 17,
    "font8": 18,
    "font9": 19,
    "fraktur": 20,
    "doubly_underlined": 21,
    "not_bold_not_faint": 22,
    "not_italic_not_fraktur": 23,
    "not_underlined": 24,
    "not_blinking": 25,
    "positive_image": 27,
    "revealed": 28,
    "not_crossed": 29,
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
    "default_color": 39,
    "black_background": 40,
    "red_background": 41,
    "green_background": 42,
    "yellow_background": 43,
    "blue_background": 44,
    "magenta_background": 45,
    "cyan_background": 46,
    "white_background": 47,
    "default_background": 49,
    "framed": 51,
    "encircled": 52,
    "overlined": 53,
    "not_framed_not_encircled": 54,
    "not_overlined": 55,
    "ideogram_underline": 60,
    "ideogram_double_underline": 61,
    "ideogram_overline": 62,
    "ideogram_double_overline": 63,
    "ideogram_stress_marking": 64,
    "not_ideogram": 65,
    # Aliases from the vertical writing interpretation of 60-65
    "right_side_line": 60,
    "double_right_side_line": 61,
    "left_side_line": 62,
    "double_left_side_line": 63,
    "not_side_line": 65,
})

SGR_SEQUENCES = MappingProxyType({name: SGR(code) for name, code in SGR_CODES.items()})

COLOR_NAMES = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")


def sgr(name: str) -> str:
    """Sequence for a named rendition attribute. Raises KeyError if unknown."""
    return SGR_SEQUENCES[name]


def _check_index(index: int) -> None:
    assert 0 <= index <= 255, f"palette index out of range: {index}"


def _check_rgb(r: int, g: int, b: int) -> None:
    for c in (r, g, b):
        assert 0 <= c <= 255, f"channel out of range: {c}"


def foreground_256(index: int) -> str:
    _check_index(index)
    return SGR(38, 5, index)


def background_256(index: int) -> str:
    _check_index(index)
    return SGR(48, 5, index)


def foreground_24bit(r: int, g: int, b: int) -> str:
    _check_rgb(r, g, b)
    return SGR(38, 2, r, g, b)


def background_24bit(r: int, g: int, b: int) -> str:
    _check_rgb(r, g, b)
    return SGR(48, 2, r, g, b)
