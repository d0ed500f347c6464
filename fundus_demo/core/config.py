"""
Configuration for the demo client using Pydantic Settings.
Every field can be overridden from the environment with a ``FUNDUS_`` prefix,
e.g. ``FUNDUS_API_URL`` or ``FUNDUS_TIMEOUT``.
"""
from __future__ import annotations

import os
from typing import Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CLASSES: Tuple[str, ...] = ("Normal", "Glaucoma", "Myopia", "Diabetes")

DEFAULT_API_URL = "http://13.211.167.122:8080"
DEFAULT_MANIFEST = os.path.join("public", "test_split_preproc.json")
DEFAULT_ASSETS_DIR = "public"

# Seconds. The health probe fails fast, inference waits for the model.
DEFAULT_TIMEOUT = 60.0
HEALTH_TIMEOUT = 5.0

DISPLAY_SIZE = 224


class DemoConfig(BaseSettings):
    """Demo client settings"""

    api_url: str = Field(default=DEFAULT_API_URL, description="Inference server base URL")
    manifest: str = Field(default=DEFAULT_MANIFEST, description="Sample manifest path or URL")
    assets_dir: str = Field(default=DEFAULT_ASSETS_DIR, description="Directory holding the original images")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Inference timeout in seconds")
    health_timeout: float = Field(default=HEALTH_TIMEOUT, gt=0, description="Health probe timeout in seconds")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="FUNDUS_",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
        frozen=True,
    )
