"""
Tone mapping stages: white balance, exposure, highlights/shadows, vibrance.

These run after the color chain and share its buffer conventions (float32
RGBA, 0-255, alpha untouched).
"""

import numpy as np

from OD_Libs.constants import (
    CHANNEL_MAX,
    EXPOSURE_STOPS_PER_UNIT,
    HIGHLIGHTS_FALLOFF,
    HIGHLIGHTS_MAX_SHIFT,
    HIGHLIGHTS_THRESHOLD,
    IDENTITY_PERCENT,
    REC709_WEIGHTS,
    SHADOWS_FALLOFF,
    SHADOWS_MAX_SHIFT,
    SHADOWS_THRESHOLD,
    WHITE_BALANCE_GAIN_PER_UNIT,
)
from OD_Libs.ImageEditingLib.color_filters import FilterStage, with_rgb


def _luminance(rgb: np.ndarray) -> np.ndarray:
    """Rec.709 luminance in the 0-1 scale."""
    return (rgb @ np.asarray(REC709_WEIGHTS, dtype=np.float32)) / CHANNEL_MAX


class WhiteBalanceStage(FilterStage):
    """
    Channel gains for temperature (blue <-> amber) and tint (green <-> magenta).

    Positive temperature warms (red up, blue down); positive tint shifts
    toward magenta (green down).
    """

    name = "white_balance"

    def __init__(self, temperature: float = 0.0, tint: float = 0.0):
        self.temperature = float(temperature)
        self.tint = float(tint)

    def is_identity(self) -> bool:
        return self.temperature == 0.0 and self.tint == 0.0

    def gains(self) -> np.ndarray:
        warm = self.temperature * WHITE_BALANCE_GAIN_PER_UNIT
        magenta = self.tint * WHITE_BALANCE_GAIN_PER_UNIT
        return np.array([1.0 + warm, 1.0 - magenta, 1.0 - warm], dtype=np.float32)

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        return with_rgb(pixels, pixels[..., :3] * self.gains())


class ExposureStage(FilterStage):
    """Exponential gain: 100 = +1 stop, -100 = -1 stop."""

    name = "exposure"

    def __init__(self, exposure: float = 0.0):
        self.exposure = float(exposure)

    def is_identity(self) -> bool:
        return self.exposure == 0.0

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        factor = 2.0 ** (self.exposure * EXPOSURE_STOPS_PER_UNIT)
        return with_rgb(pixels, pixels[..., :3] * factor)


class HighlightsShadowsStage(FilterStage):
    """
    Tone curve segments keyed on luminance.

    Highlights shift pixels brighter than HIGHLIGHTS_THRESHOLD, shadows
    shift pixels darker than SHADOWS_THRESHOLD; both with a smooth falloff
    so midtones are barely touched.
    """

    name = "highlights_shadows"

    def __init__(self, highlights: float = 0.0, shadows: float = 0.0):
        self.highlights = float(highlights)
        self.shadows = float(shadows)

    def is_identity(self) -> bool:
        return self.highlights == 0.0 and self.shadows == 0.0

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        rgb = pixels[..., :3]
        lum = _luminance(rgb)
        shift = np.zeros_like(lum)

        if self.highlights:
            mask = np.maximum(0.0, (lum - HIGHLIGHTS_THRESHOLD) / (1.0 - HIGHLIGHTS_THRESHOLD))
            shift += (self.highlights / 100.0) * HIGHLIGHTS_MAX_SHIFT * mask ** HIGHLIGHTS_FALLOFF

        if self.shadows:
            mask = np.maximum(0.0, (SHADOWS_THRESHOLD - lum) / SHADOWS_THRESHOLD)
            shift += (self.shadows / 100.0) * SHADOWS_MAX_SHIFT * mask ** SHADOWS_FALLOFF

        return with_rgb(pixels, rgb + (shift * CHANNEL_MAX)[..., None])


class VibranceStage(FilterStage):
    """Saturation change weighted toward pixels that are still desaturated."""

    name = "vibrance"

    def __init__(self, percent: float = IDENTITY_PERCENT):
        self.percent = float(percent)

    def is_identity(self) -> bool:
        return self.percent == IDENTITY_PERCENT

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        rgb = pixels[..., :3]
        maxc = rgb.max(axis=-1)
        minc = rgb.min(axis=-1)
        saturation = np.where(maxc > 0, (maxc - minc) / np.where(maxc > 0, maxc, 1.0), 0.0)

        amount = (self.percent - IDENTITY_PERCENT) / 100.0
        factor = 1.0 + amount * (1.0 - saturation)
        lum = (_luminance(rgb) * CHANNEL_MAX)[..., None]
        return with_rgb(pixels, lum + (rgb - lum) * factor[..., None])
