from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from dye import ecma48
from dye.config import settings
from dye.palettes.xterm256 import (
    GREY_START,
    ecma48_from_rgb,
    extended_levels_from_ecma48,
    grey_level_from_ecma48,
    palette as xterm256_palette,
    region,
    rgb_from_ecma48,
)
from dye.pipeline.render import load_image, render_image

logger = logging.getLogger(__name__)

VERSION = "0.3.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle handler."""
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.info("dye palette service ready (color mode %s)", settings.color_mode)

    yield

    logger.info("Shutting down")


app = FastAPI(
    title="dye",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
origins = settings.cors_origins.split(",") if settings.cors_origins != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

VALID_COLOR_MODES = {"truecolor", "256"}
MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10MB


def _invalid_parameter(message: str) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"error": "invalid_parameter", "message": message},
    )


@app.get("/api/health")
async def health():
    return {
        "status": "healthy",
        "color_mode": settings.color_mode,
        "version": VERSION,
    }


@app.get("/api/palette")
async def palette():
    return {
        "palette": [
            {"index": i, "hex": rgb.hex, "region": region(i)}
            for i, rgb in enumerate(xterm256_palette())
        ]
    }


@app.get("/api/quantize")
async def quantize(r: int, g: int, b: int):
    for name, value in (("r", r), ("g", g), ("b", b)):
        if not 0 <= value <= 255:
            raise _invalid_parameter(f"{name} must be between 0 and 255")

    index = ecma48_from_rgb(r, g, b)
    rgb = rgb_from_ecma48(index)
    if index >= GREY_START:
        levels = [grey_level_from_ecma48(index)]
    else:
        levels = list(extended_levels_from_ecma48(index))

    return {
        "index": index,
        "region": region(index),
        "levels": levels,
        "rgb": [int(c) for c in rgb.as_tuple()],
        "hex": rgb.hex,
        "foreground": ecma48.foreground_256(index),
        "background": ecma48.background_256(index),
    }


@app.post("/api/render")
async def render(
    image: UploadFile = File(...),
    width: int = Form(80),
    mode: str = Form("truecolor"),
):
    if width < 1 or width > settings.max_render_width:
        raise _invalid_parameter(f"width must be between 1 and {settings.max_render_width}")

    if mode not in VALID_COLOR_MODES:
        raise _invalid_parameter(f"mode must be one of {sorted(VALID_COLOR_MODES)}")

    image_data = await image.read()
    if len(image_data) > MAX_IMAGE_SIZE:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "image_too_large",
                "message": "Image exceeds 10MB limit.",
            },
        )

    try:
        input_array = load_image(image_data)
    except Exception:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "invalid_format",
                "message": "Could not decode image.",
            },
        )

    try:
        text = render_image(input_array, columns=width, mode=mode)
    except Exception as e:
        logger.error("Render failed: %s", e, exc_info=True)
        raise HTTPException(
            status_code=500,
            detail={
                "error": "render_failed",
                "message": f"Render error: {str(e)}",
            },
        )

    return PlainTextResponse(
        text,
        headers={"X-Dye-Columns": str(width), "X-Dye-Mode": mode},
    )
