#!/usr/bin/env python3
"""Runtime settings for pdfworks.

Settings come from three places, later ones winning:

1. Built-in defaults (pdfworks.types)
2. An optional JSON file, given explicitly or through PDFWORKS_CONFIG
3. PDFWORKS_* environment variables

Example JSON file::

    {
        "margin": 36,
        "document_backend": "pypdf2",
        "quality": {"low": 0.25, "medium": 0.55, "high": 0.9}
    }
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pdfworks.types import (
    DEFAULT_FONT_SIZE,
    DEFAULT_MARGIN,
    DEFAULT_QUALITY_TABLE,
    ESTIMATE_CORRECTION,
    RASTER_SCALE,
    CompressionLevel,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "PDFWORKS_"
CONFIG_ENV = "PDFWORKS_CONFIG"


@dataclass(frozen=True)
class Settings:
    margin: float = DEFAULT_MARGIN
    font_size: int = DEFAULT_FONT_SIZE
    raster_scale: float = RASTER_SCALE
    estimate_correction: float = ESTIMATE_CORRECTION
    quality: Dict[CompressionLevel, float] = field(
        default_factory=lambda: dict(DEFAULT_QUALITY_TABLE)
    )
    document_backend: str = "pymupdf"
    raster_backend: str = "pymupdf"
    archive_backend: str = "zip"


def _validate_quality(table: Dict[CompressionLevel, float]) -> None:
    for level, factor in table.items():
        if not 0 < factor <= 1:
            raise ValueError(f"Quality for '{level.value}' must be in (0, 1], got {factor}")
    ordered = [table[level] for level in CompressionLevel]
    if ordered != sorted(ordered):
        raise ValueError("Quality factors must not decrease from low to high")


def _apply(settings: Settings, values: Mapping[str, Any]) -> Settings:
    changes: Dict[str, Any] = {}
    for key in ("margin", "raster_scale", "estimate_correction"):
        if key in values:
            changes[key] = float(values[key])
    if "font_size" in values:
        changes["font_size"] = int(values["font_size"])
    for key in ("document_backend", "raster_backend", "archive_backend"):
        if key in values:
            changes[key] = str(values[key])
    if "quality" in values:
        table = dict(settings.quality)
        for name, factor in dict(values["quality"]).items():
            table[CompressionLevel.parse(name)] = float(factor)
        _validate_quality(table)
        changes["quality"] = table
    return replace(settings, **changes)


def _from_env(env: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key in (
        "margin",
        "font_size",
        "raster_scale",
        "estimate_correction",
        "document_backend",
        "raster_backend",
        "archive_backend",
    ):
        raw = env.get(ENV_PREFIX + key.upper())
        if raw:
            values[key] = raw
    return values


def load_settings(
    path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None
) -> Settings:
    """Build Settings from defaults, a JSON file and the environment.

    Args:
        path: JSON config file. Defaults to $PDFWORKS_CONFIG when unset.
        env: Environment mapping, os.environ by default.

    Raises:
        ValueError: If a value cannot be converted or the quality table is
            out of range.
    """
    env = os.environ if env is None else env
    settings = Settings()

    if path is None and env.get(CONFIG_ENV):
        path = Path(env[CONFIG_ENV])

    if path is not None:
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
        else:
            with open(path, "r", encoding="utf-8") as config_file:
                values = json.load(config_file) or {}
            settings = _apply(settings, values)
            logger.debug(f"Loaded settings from {path}")

    return _apply(settings, _from_env(env))
