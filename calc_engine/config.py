"""
Runtime settings for the CLI and HTTP service.

Values come from ``CALC_ENGINE_*`` environment variables, optionally loaded
from a ``.env`` file in the working directory.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

ENV_PREFIX = "CALC_ENGINE_"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseModel):
    tools_path: Optional[str] = None  # None → bundled tools.json
    log_level: str = "INFO"
    strict: bool = False
    default_language: str = "en"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level


def load_settings(env_file: str | None = None) -> Settings:
    """Build Settings from the environment (after reading `.env`, if any).

    Raises:
        pydantic.ValidationError: A variable has an unusable value.
    """
    load_dotenv(env_file)
    values = {
        field: os.environ[ENV_PREFIX + field.upper()]
        for field in Settings.model_fields
        if ENV_PREFIX + field.upper() in os.environ
    }
    return Settings.model_validate(values)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
