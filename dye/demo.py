from __future__ import annotations

import argparse
import logging
import sys

from dye import ecma48
from dye import manipulators as dye
from dye.colormap import get_lut, gradient
from dye.config import settings
from dye.palettes import xterm256
from dye.pipeline.render import load_image, render_image

logger = logging.getLogger(__name__)

RAMP = gradient((0.0, 0.0, 0.5), (1.0, 0.8, 0.0))


def basic_colors() -> str:
    return " ".join(getattr(dye, name)(name) for name in ecma48.COLOR_NAMES) + "\n"


def _swatches(start: int, end: int, cell: str, width: int) -> list[str]:
    blocks = "".join(dye.bg(i)(cell) for i in range(start, end + 1))
    labels = "".join(f"{i:<{width}}" for i in range(start, end + 1))
    return [blocks, labels]


def standard_colors() -> str:
    dim = _swatches(xterm256.STANDARD_DIM_START, xterm256.STANDARD_DIM_END, "     ", 5)
    bright = _swatches(xterm256.STANDARD_BRIGHT_START, xterm256.STANDARD_BRIGHT_END, "     ", 5)
    return (
        f"Dim colors:    {dim[0]}\n               {dim[1]}\n"
        f"Bright colors: {bright[0]}\n               {bright[1]}\n"
    )


def extended_colors() -> str:
    lines = ["Extended colors:", ""]
    for rl in range(xterm256.EXTENDED_LEVELS):
        row_start = xterm256.ecma48_from_extended_levels(rl, 0, 0)
        cells = "".join(
            dye.bg(row_start + offset)("   ")
            for offset in range(xterm256.EXTENDED_LEVELS ** 2)
        )
        lines.append(f"{row_start:>3}  {cells}")
    offsets = "".join(f"{offset:>3}" for offset in range(xterm256.EXTENDED_LEVELS ** 2))
    lines.append(f"   + {offsets}")
    return "\n".join(lines) + "\n"


def grey_colors() -> str:
    blocks, labels = _swatches(xterm256.GREY_START, xterm256.GREY_END, "    ", 4)
    return f"Gray colors:\n\n{blocks}\n{labels}\n"


def rgb_triplets(mode: str) -> str:
    lines = [f"RGB triplets ({mode})", ""]
    for r in range(0, 256, 15):
        lines.append("".join(
            dye.bg(r, g, b, mode=mode)(" ")
            for g in range(0, 256, 24)
            for b in range(0, 256, 24)
        ))
    return "\n".join(lines) + "\n"


def colormap_ramp(mode: str, columns: int = 64) -> str:
    lut = get_lut(RAMP)
    return "".join(lut.bg(x / (columns - 1), mode=mode)(" ") for x in range(columns)) + "\n"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="dye-demo", description="Show the terminal palette.")
    parser.add_argument("--mode", choices=("truecolor", "256"), default=settings.color_mode)
    parser.add_argument("--image", help="render an image file instead of the palette")
    parser.add_argument("--width", type=int, default=80, help="image width in cells")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    if args.image:
        try:
            with open(args.image, "rb") as f:
                image = load_image(f.read())
        except OSError as e:
            logger.error("Could not read image %s: %s", args.image, e)
            return 1
        sys.stdout.write(render_image(image, columns=args.width, mode=args.mode) + "\n")
        return 0

    sys.stdout.write(basic_colors() + "\n")
    sys.stdout.write(standard_colors() + "\n")
    sys.stdout.write(extended_colors() + "\n")
    sys.stdout.write(grey_colors() + "\n")
    sys.stdout.write(rgb_triplets(args.mode) + "\n")
    sys.stdout.write(colormap_ramp(args.mode))
    return 0


if __name__ == "__main__":
    sys.exit(main())
