"""
Polar sample to pixel conversion and outline tracing for cell selections.

A region-growing wand samples one radius per angle around a seed point; this
package maps those samples onto clamped pixel coordinates and stitches them
into a closed 4-connected outline and region mask.
"""

from .core.polar_pixel import (
    EPSILON,
    RADIUS_OFFSET,
    InvalidInputError,
    PolarPixel,
    circular_mean,
    combine,
    convert,
)
from .core.outline import is_four_connected, outline_coordinates, sweep_angles, trace_outline
from .core.mask import equivalent_radius_px, mask_area, outline_to_mask
from .config import ImageConfig, SweepConfig, TraceConfig, load_trace_config
from .settings import get_settings, output_root, reset_settings_cache
from .exporters import (
    determine_outline_name,
    prepare_output_directory,
    export_outline_csv,
    export_outline_json,
    export_mask_png,
    export_trace_outputs,
)

__all__ = [
    "EPSILON",
    "RADIUS_OFFSET",
    "InvalidInputError",
    "PolarPixel",
    "circular_mean",
    "combine",
    "convert",
    "is_four_connected",
    "outline_coordinates",
    "sweep_angles",
    "trace_outline",
    "equivalent_radius_px",
    "mask_area",
    "outline_to_mask",
    "ImageConfig",
    "SweepConfig",
    "TraceConfig",
    "load_trace_config",
    "get_settings",
    "output_root",
    "reset_settings_cache",
    "determine_outline_name",
    "prepare_output_directory",
    "export_outline_csv",
    "export_outline_json",
    "export_mask_png",
    "export_trace_outputs",
]
