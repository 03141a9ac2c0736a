"""
Color histogram of a rendered surface.

Classes:
    Histogram: Per-channel and luminance frequency counts (256 bins each)

Functions:
    compute_histogram: Count every pixel of a surface exactly once
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

import numpy as np

from OD_Libs.constants import LUMA_WEIGHTS

logger = logging.getLogger(__name__)

BIN_COUNT = 256


@dataclass(frozen=True)
class Histogram:
    red: List[int]
    green: List[int]
    blue: List[int]
    luminance: List[int]

    def total(self) -> int:
        """Number of pixels counted (identical for every channel)."""
        return sum(self.red)

    def to_dict(self) -> Dict[str, List[int]]:
        """Convert to dictionary."""
        return asdict(self)


def _bincount(values: np.ndarray) -> List[int]:
    return np.bincount(values.ravel(), minlength=BIN_COUNT).astype(np.int64).tolist()


def compute_histogram(surface: Any) -> Histogram:
    """
    Compute red, green, blue and luminance histograms.

    Luminance is round(0.299 R + 0.587 G + 0.114 B), rounded half up and
    clamped to 0-255. Counts are not normalized; alpha is ignored.

    Args:
        surface: RenderedSurface (or anything exposing pixels())

    Returns:
        Histogram with four 256-bin count lists
    """
    pixels = surface.pixels()
    rgb = pixels[..., :3].astype(np.int64)

    weights = np.asarray(LUMA_WEIGHTS, dtype=np.float64)
    luma = np.floor(rgb @ weights + 0.5)
    luma = np.clip(luma, 0, BIN_COUNT - 1).astype(np.int64)

    histogram = Histogram(
        red=_bincount(rgb[..., 0]),
        green=_bincount(rgb[..., 1]),
        blue=_bincount(rgb[..., 2]),
        luminance=_bincount(luma),
    )
    logger.debug(f"Histogram computed over {histogram.total()} pixels")
    return histogram
