"""
Output exporters for traced outlines.

Provides helpers for writing outline tables, JSON manifests, and mask images.
"""

from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import cv2
import numpy as np

from .config import TraceConfig
from .core.mask import equivalent_radius_px, mask_area
from .core.polar_pixel import PolarPixel
from .settings import output_root as default_output_root


def determine_outline_name(config: TraceConfig, fallback: str = "outline") -> str:
    """
    Determine a filesystem-friendly outline name.

    Preference order:
    1. `config.metadata["name"]`
    2. `config.metadata["cell"]`
    3. Provided fallback string
    """
    for key in ("name", "cell"):
        value = config.metadata.get(key)
        if isinstance(value, str) and value.strip():
            return _sanitize_name(value)
    return _sanitize_name(fallback)


def _sanitize_name(name: str) -> str:
    safe = "".join(ch if ch.isalnum() or ch in ("-", "_") else "_" for ch in name.strip().lower())
    return safe or "outline"


def prepare_output_directory(output_root: Path, timestamp: Optional[str] = None) -> Path:
    """
    Create the directory where all artefacts for a trace run will be stored.
    """
    if timestamp is None:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    else:
        ts = timestamp

    output_dir = output_root / "outlines" / ts
    counter = 1
    while output_dir.exists():
        output_dir = output_root / "outlines" / f"{ts}_{counter}"
        counter += 1

    output_dir.mkdir(parents=True, exist_ok=False)
    return output_dir


def export_outline_csv(outline: Sequence[PolarPixel], output_path: Path) -> None:
    """
    Write the outline to a CSV file with one row per pixel in tracing order.
    """
    fieldnames = ["index", "x_px", "y_px", "r_px", "theta_rad"]
    with output_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        for idx, pixel in enumerate(outline):
            writer.writerow(
                {
                    "index": idx,
                    "x_px": pixel.x,
                    "y_px": pixel.y,
                    "r_px": float(pixel.r),
                    "theta_rad": float(pixel.theta),
                }
            )


def export_outline_json(
    outline: Sequence[PolarPixel],
    output_path: Path,
    config: TraceConfig,
    mask: Optional[np.ndarray] = None,
) -> None:
    """
    Write a JSON manifest describing the trace (no per-pixel data).
    """
    manifest = {
        "image": {"width": config.image.width, "height": config.image.height},
        "center": list(config.center),
        "samples": len(config.sweep.radii),
        "outline_pixels": len(outline),
        "epsilon": config.resolved_epsilon(),
        "max_depth": config.resolved_max_depth(),
        "metadata": config.metadata,
    }
    if mask is not None:
        area = mask_area(mask)
        manifest["mask"] = {
            "area_px": area,
            "equivalent_radius_px": equivalent_radius_px(mask) if area else 0.0,
        }

    with output_path.open("w", encoding="utf-8") as handle:
        json.dump(manifest, handle, indent=2)


def export_mask_png(mask: np.ndarray, output_path: Path) -> None:
    """Write a boolean mask as an 8-bit PNG (foreground 255)."""
    image = np.where(mask, 255, 0).astype(np.uint8)
    if not cv2.imwrite(str(output_path), image):
        raise IOError(f"Failed to write mask image at {output_path}")


def export_trace_outputs(
    outline: Sequence[PolarPixel],
    config: TraceConfig,
    mask: Optional[np.ndarray] = None,
    output_root: Optional[Path] = None,
    timestamp: Optional[str] = None,
) -> Path:
    """
    Export the outline table, manifest and optional mask.

    Returns
    -------
    Path
        Directory containing the exported artefacts.
    """
    root = Path(output_root) if output_root is not None else default_output_root()
    output_dir = prepare_output_directory(root, timestamp)
    name = determine_outline_name(config)

    export_outline_csv(outline, output_dir / f"{name}_outline.csv")
    export_outline_json(outline, output_dir / f"{name}.json", config, mask=mask)
    if mask is not None:
        export_mask_png(mask, output_dir / f"{name}_mask.png")
    return output_dir
