from __future__ import annotations

from dataclasses import dataclass

from dye import ecma48
from dye.config import ColorMode, settings
from dye.palettes.xterm256 import ecma48_from_rgb


@dataclass(frozen=True)
class Style:
    """A control sequence that can be printed as is or wrapped around text.

    ``str(style)`` is the bare sequence. ``style(obj)`` returns the sequence,
    ``obj`` and the sequences restoring the default foreground and background.
    Styles concatenate with ``+``.
    """

    control_sequence: str

    def __str__(self) -> str:
        return self.control_sequence

    def __add__(self, other: Style) -> Style:
        return Style(self.control_sequence + other.control_sequence)

    def __call__(self, obj: object) -> str:
        return (
            self.control_sequence
            + str(obj)
            + ecma48.sgr("default_color")
            + ecma48.sgr("default_background")
        )


black = Style(ecma48.sgr("black"))
red = Style(ecma48.sgr("red"))
green = Style(ecma48.sgr("green"))
yellow = Style(ecma48.sgr("yellow"))
blue = Style(ecma48.sgr("blue"))
magenta = Style(ecma48.sgr("magenta"))
cyan = Style(ecma48.sgr("cyan"))
white = Style(ecma48.sgr("white"))
reset = Style(ecma48.sgr("default_color"))

black_bg = Style(ecma48.sgr("black_background"))
red_bg = Style(ecma48.sgr("red_background"))
green_bg = Style(ecma48.sgr("green_background"))
yellow_bg = Style(ecma48.sgr("yellow_background"))
blue_bg = Style(ecma48.sgr("blue_background"))
magenta_bg = Style(ecma48.sgr("magenta_background"))
cyan_bg = Style(ecma48.sgr("cyan_background"))
white_bg = Style(ecma48.sgr("white_background"))
reset_bg = Style(ecma48.sgr("default_background"))


def _color(
    args: tuple[int, ...],
    mode: ColorMode | None,
    indexed,
    truecolor,
) -> Style:
    if len(args) == 1:
        return Style(indexed(args[0]))
    if len(args) != 3:
        raise ValueError(f"expected a palette index or an (r, g, b) triplet, got {args!r}")

    mode = mode or settings.color_mode
    if mode == "truecolor":
        return Style(truecolor(*args))
    if mode == "256":
        return Style(indexed(ecma48_from_rgb(*args)))
    raise ValueError(f"unknown color mode: {mode!r}")


def fg(*args: int, mode: ColorMode | None = None) -> Style:
    """Foreground color from a palette index ``fg(i)`` or a triplet ``fg(r, g, b)``.

    Triplets emit 24-bit sequences in ``truecolor`` mode and the closest
    palette entry in ``256`` mode. The mode defaults to ``settings.color_mode``.
    """
    return _color(args, mode, ecma48.foreground_256, ecma48.foreground_24bit)


def bg(*args: int, mode: ColorMode | None = None) -> Style:
    """Background counterpart of :func:`fg`."""
    return _color(args, mode, ecma48.background_256, ecma48.background_24bit)
