"""
Configuration models and loader for outline tracing.

A trace is described by a YAML file holding the image size, the sweep center
and the sampled radii.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
import yaml
from pydantic import BaseModel, Field, conint, confloat, field_validator, model_validator

from .core.outline import sweep_angles
from .settings import get_settings


PositiveInt = conint(gt=0)
NonNegativeInt = conint(ge=0)
NonNegativeFloat = confloat(ge=0, allow_inf_nan=False)


class ImageConfig(BaseModel):
    """Size of the image the outline is traced in."""

    width: PositiveInt = Field(..., description="Image width in pixels")
    height: PositiveInt = Field(..., description="Image height in pixels")

    @property
    def max_x(self) -> int:
        return self.width - 1

    @property
    def max_y(self) -> int:
        return self.height - 1


class SweepConfig(BaseModel):
    """
    Radii sampled around the center.

    When ``angles`` is omitted the radii are spread evenly over one turn,
    starting at ``start_angle_rad``.
    """

    radii: List[NonNegativeFloat] = Field(..., description="Radius in pixels for each sample")
    angles: Optional[List[confloat(allow_inf_nan=False)]] = Field(
        default=None, description="Angle in radians for each sample"
    )
    start_angle_rad: confloat(allow_inf_nan=False) = Field(
        default=0.0, description="First angle of an evenly spaced sweep"
    )

    @field_validator("radii")
    @classmethod
    def _validate_radii(cls, value: List[float]) -> List[float]:
        if not value:
            raise ValueError("A sweep must contain at least one radius")
        return value

    @model_validator(mode="after")
    def _validate_angles(self) -> "SweepConfig":
        if self.angles is not None and len(self.angles) != len(self.radii):
            raise ValueError(
                f"angles ({len(self.angles)}) must match radii ({len(self.radii)}) in length"
            )
        return self

    def resolved_angles(self) -> np.ndarray:
        if self.angles is not None:
            return np.mod(np.asarray(self.angles, dtype=np.float64), 2.0 * math.pi)
        return sweep_angles(len(self.radii), start=self.start_angle_rad)


class TraceConfig(BaseModel):
    """Top-level configuration for tracing one outline."""

    image: ImageConfig
    center: Tuple[NonNegativeInt, NonNegativeInt] = Field(..., description="(x, y) sweep center")
    sweep: SweepConfig
    epsilon: Optional[confloat(gt=0, allow_inf_nan=False)] = Field(
        default=None, description="Diagonal-step tolerance (defaults to CELL_WAND_EPSILON)"
    )
    max_depth: Optional[PositiveInt] = Field(
        default=None, description="Bisection limit per gap (defaults to CELL_WAND_MAX_DEPTH)"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description="Optional metadata for bookkeeping"
    )

    @model_validator(mode="after")
    def _validate_center(self) -> "TraceConfig":
        cx, cy = self.center
        if cx > self.image.max_x or cy > self.image.max_y:
            raise ValueError(
                f"Center {self.center} lies outside a {self.image.width}x{self.image.height} image"
            )
        return self

    def resolved_epsilon(self) -> float:
        if self.epsilon is not None:
            return float(self.epsilon)
        return get_settings().epsilon

    def resolved_max_depth(self) -> int:
        if self.max_depth is not None:
            return int(self.max_depth)
        return get_settings().max_depth


def load_trace_config(path: Union[str, Path]) -> TraceConfig:
    """
    Load and validate a trace description from a YAML file.

    Parameters
    ----------
    path:
        Path to the YAML configuration file.

    Returns
    -------
    TraceConfig
        Parsed and validated configuration object.
    """

    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        raw_data = yaml.safe_load(handle) or {}

    return TraceConfig.model_validate(raw_data)
