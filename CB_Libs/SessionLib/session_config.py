"""
Coloring session configuration and persistence.

This module defines the tunable settings of a coloring session and reads
and writes them as JSON files in the .cbconfig format:

    {
        "schema_version": 1,
        "settings": { ...ColoringConfig fields... }
    }

Classes:
    ColoringConfig: Tolerance, fill budget, stroke and export defaults

Functions:
    load_config: Load settings from a file (defaults when the file is missing)
    save_config: Save settings to a file
"""

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from CB_Libs.constants import (
    CONFIG_EXTENSION,
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_FILL_COLOR,
    DEFAULT_MAX_PIXELS,
    DEFAULT_RESAMPLE,
    DEFAULT_STROKE_COLOR,
    DEFAULT_STROKE_WIDTH,
    DEFAULT_TOLERANCE,
    FIELD_SCHEMA_VERSION,
    FIELD_SETTINGS,
    MAX_STROKE_WIDTH,
    PAPER_COLOR,
    RESAMPLE_FILTERS,
    SCHEMA_VERSION,
)
from CB_Libs.CompositeLib.export_ops import normalize_export_format
from CB_Libs.RasterLib.raster_models import FillBudget, ToleranceSpec, normalize_rgb

logger = logging.getLogger(__name__)

ColorSetting = Union[str, Sequence[int]]


@dataclass
class ColoringConfig:
    """Settings shared by every operation of a coloring session.

    Attributes:
        tolerance: Per-channel fill tolerance (1-256)
        max_pixels: Fill budget per click, or None for unbounded
        fill_color: Default fill color
        stroke_color: Default stroke color
        stroke_width: Default stroke width in buffer pixels
        paper_color: Plain paper color for erasers and transparent art
        resample: Resampling filter used when exporting at another size
        export_format: Lossless format for export_composite
    """
    tolerance: int = DEFAULT_TOLERANCE
    max_pixels: Optional[int] = DEFAULT_MAX_PIXELS
    fill_color: ColorSetting = DEFAULT_FILL_COLOR
    stroke_color: ColorSetting = DEFAULT_STROKE_COLOR
    stroke_width: float = DEFAULT_STROKE_WIDTH
    paper_color: ColorSetting = PAPER_COLOR
    resample: str = DEFAULT_RESAMPLE
    export_format: str = DEFAULT_EXPORT_FORMAT

    def __post_init__(self):
        """Validate settings."""
        ToleranceSpec(self.tolerance)
        FillBudget(self.max_pixels)

        for name in ("fill_color", "stroke_color", "paper_color"):
            normalize_rgb(getattr(self, name))

        if not (0 < self.stroke_width <= MAX_STROKE_WIDTH):
            raise ValueError(
                f"stroke_width must be 0-{MAX_STROKE_WIDTH}, got {self.stroke_width}"
            )

        self.resample = str(self.resample).strip().lower()
        if self.resample not in RESAMPLE_FILTERS:
            raise ValueError(f"Unknown resample filter: {self.resample}")

        self.export_format = normalize_export_format(self.export_format)

    @property
    def tolerance_spec(self) -> ToleranceSpec:
        return ToleranceSpec(self.tolerance)

    @property
    def fill_budget(self) -> FillBudget:
        return FillBudget(self.max_pixels)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = asdict(self)
        for name in ("fill_color", "stroke_color", "paper_color"):
            if not isinstance(data[name], str):
                data[name] = list(data[name])
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColoringConfig":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        for name in ("fill_color", "stroke_color", "paper_color"):
            if isinstance(filtered.get(name), list):
                filtered[name] = tuple(filtered[name])
        return cls(**filtered)


def _config_path(file_path: Path) -> Path:
    file_path = Path(file_path)
    if not file_path.suffix:
        file_path = file_path.with_suffix(CONFIG_EXTENSION)
    return file_path


def load_config(file_path: Path) -> ColoringConfig:
    """
    Load settings from a config file.

    Args:
        file_path: Path to the config file (.cbconfig added if no suffix)

    Returns:
        The loaded ColoringConfig, or defaults if the file does not exist

    Raises:
        ValueError: If the file is not valid JSON, has a newer schema
                    version, or holds invalid settings
    """
    file_path = _config_path(file_path)
    if not file_path.exists():
        logger.debug(f"Config file {file_path} not found, using defaults")
        return ColoringConfig()

    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Config file {file_path} is not valid JSON: {str(e)}")

    if not isinstance(payload, dict):
        raise ValueError(f"Config file {file_path} must contain a JSON object")

    version = int(payload.get(FIELD_SCHEMA_VERSION, SCHEMA_VERSION))
    if version > SCHEMA_VERSION:
        raise ValueError(
            f"Config file {file_path} has schema version {version}; "
            f"this library supports up to {SCHEMA_VERSION}"
        )

    settings = payload.get(FIELD_SETTINGS, {})
    if not isinstance(settings, dict):
        raise ValueError(f"Config file {file_path} has malformed '{FIELD_SETTINGS}'")

    return ColoringConfig.from_dict(settings)


def save_config(file_path: Path, config: ColoringConfig) -> Path:
    """
    Save settings to a config file.

    Args:
        file_path: Destination path (.cbconfig added if no suffix)
        config: Settings to write

    Returns:
        The path written
    """
    file_path = _config_path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        FIELD_SCHEMA_VERSION: SCHEMA_VERSION,
        FIELD_SETTINGS: config.to_dict(),
    }
    file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return file_path
