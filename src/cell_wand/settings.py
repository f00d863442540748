"""Application settings loaded from the environment or .env via pydantic-settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.outline import DEFAULT_MAX_DEPTH
from .core.polar_pixel import EPSILON


logger = logging.getLogger(__name__)


class WandSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CELL_WAND_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    epsilon: float = Field(
        default=EPSILON, gt=0, allow_inf_nan=False, description="Tolerance for the diagonal-step rule"
    )
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, gt=0, description="Bisection limit per gap")
    output_root: Path = Field(default=Path("outputs"), validate_default=True)

    @field_validator("output_root", mode="before")
    @classmethod
    def _expand_root(cls, value: Path) -> Path:
        return Path(value).expanduser().resolve()


_settings: Optional[WandSettings] = None


def get_settings() -> WandSettings:
    global _settings
    if _settings is None:
        env_path = Path.cwd() / ".env"
        if not env_path.exists():
            logger.debug("No .env file found at %s; using environment and defaults.", env_path)
        _settings = WandSettings()
    return _settings


def output_root() -> Path:
    return get_settings().output_root


def reset_settings_cache() -> None:
    global _settings
    _settings = None
