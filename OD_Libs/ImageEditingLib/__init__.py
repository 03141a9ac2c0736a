"""
ImageEditingLib - Core image editing functionality

This module provides the settings model, geometry resolution, filter
stages, the render pipeline, histograms and presets for Open Darkroom.
"""

from OD_Libs.ImageEditingLib.image_models import (
    DEFAULT_SETTINGS,
    DownloadSettings,
    FilterPreset,
    HistoryEntry,
    ImageSettings,
    RenderedSurface,
    SourceImage,
)
from OD_Libs.ImageEditingLib.geometry import (
    calculate_aspect_ratio,
    resolve_output_size,
    round_half_up,
)
from OD_Libs.ImageEditingLib.filter_pipeline import (
    build_filter_chain,
    render,
    transform_image,
)
from OD_Libs.ImageEditingLib.histogram import Histogram, compute_histogram
from OD_Libs.ImageEditingLib.presets import (
    FILTER_PRESETS,
    apply_preset,
    get_filter_presets,
    get_preset,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "DownloadSettings",
    "FilterPreset",
    "HistoryEntry",
    "ImageSettings",
    "RenderedSurface",
    "SourceImage",
    "calculate_aspect_ratio",
    "resolve_output_size",
    "round_half_up",
    "build_filter_chain",
    "render",
    "transform_image",
    "Histogram",
    "compute_histogram",
    "FILTER_PRESETS",
    "apply_preset",
    "get_filter_presets",
    "get_preset",
]
