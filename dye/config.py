from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

ColorMode = Literal["truecolor", "256"]


class Settings(BaseSettings):
    color_mode: ColorMode = Field(default="truecolor", alias="DYE_COLOR_MODE")
    lut_size: int = Field(default=256, alias="DYE_LUT_SIZE", ge=2)
    max_render_width: int = Field(default=200, alias="DYE_MAX_RENDER_WIDTH", ge=1)
    port: int = Field(default=8000, alias="PORT")
    log_level: str = Field(default="info", alias="LOG_LEVEL")
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
