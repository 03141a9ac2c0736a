"""
Per-pixel color adjustment stages.

Every stage works on a float32 H x W x 4 RGBA buffer in the 0-255 scale and
returns a new buffer; the input is never modified and alpha is preserved.
RGB output is clamped to 0-255 after each stage.

Classes:
    FilterStage: Common base for all pipeline stages
    BrightnessStage: Linear RGB multiplier (percent, 100 = identity)
    ContrastStage: Scale around mid-gray (percent, 100 = identity)
    SaturationStage: Luminance-preserving chroma scale (percent, 100 = identity)
    HueRotateStage: Rotate the HSV hue angle (degrees)
    GrayscaleStage: Blend toward luminance (percent)
    SepiaStage: Blend toward the sepia tone matrix (percent)

Functions:
    to_float_pixels / to_uint8_pixels: Convert between Pillow images and buffers
    rgb_to_hsv / hsv_to_rgb: Vectorized color space conversion (0-1 scale)
"""

from typing import Any, Sequence

import numpy as np

from OD_Libs.constants import (
    CHANNEL_MAX,
    IDENTITY_PERCENT,
    MID_GRAY,
    REC709_WEIGHTS,
    SEPIA_MATRIX,
)
from OD_Libs.pillow_compat import Image


class FilterStage:
    """
    Base class for pipeline stages.

    Subclasses implement apply() and, when their parameters make them a
    no-op, report is_identity() so the pipeline can skip them.
    """

    name = "stage"

    def is_identity(self) -> bool:
        return False

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({params})"


def to_float_pixels(image: Any) -> np.ndarray:
    """Return an RGBA Pillow image as a float32 H x W x 4 buffer."""
    return np.asarray(image.convert("RGBA"), dtype=np.float32)


def to_uint8_pixels(pixels: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(pixels), 0, CHANNEL_MAX).astype(np.uint8)


def pixels_to_image(pixels: np.ndarray) -> Any:
    return Image.fromarray(to_uint8_pixels(pixels))


def with_rgb(pixels: np.ndarray, rgb: np.ndarray) -> np.ndarray:
    """Copy pixels, replacing the RGB channels with the clamped rgb array."""
    out = np.array(pixels, dtype=np.float32, copy=True)
    out[..., :3] = np.clip(rgb, 0.0, CHANNEL_MAX)
    return out


def apply_rgb_matrix(pixels: np.ndarray, matrix: Sequence[Sequence[float]]) -> np.ndarray:
    m = np.asarray(matrix, dtype=np.float32)
    return with_rgb(pixels, pixels[..., :3] @ m.T)


def luminance_matrix(weights: Sequence[float] = REC709_WEIGHTS) -> np.ndarray:
    """3x3 matrix mapping every channel to the weighted luminance."""
    return np.tile(np.asarray(weights, dtype=np.float32), (3, 1))


def rgb_to_hsv(rgb: np.ndarray) -> np.ndarray:
    """Convert a (..., 3) array with values 0-1 to HSV (all components 0-1)."""
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    maxc = rgb.max(axis=-1)
    minc = rgb.min(axis=-1)
    delta = maxc - minc

    s = np.where(maxc > 0, delta / np.where(maxc > 0, maxc, 1.0), 0.0)
    safe_delta = np.where(delta > 0, delta, 1.0)
    rc = (maxc - r) / safe_delta
    gc = (maxc - g) / safe_delta
    bc = (maxc - b) / safe_delta

    h = np.where(r == maxc, bc - gc, np.where(g == maxc, 2.0 + rc - bc, 4.0 + gc - rc))
    h = np.where(delta > 0, (h / 6.0) % 1.0, 0.0)
    return np.stack([h, s, maxc], axis=-1)


def hsv_to_rgb(hsv: np.ndarray) -> np.ndarray:
    """Inverse of rgb_to_hsv."""
    h, s, v = hsv[..., 0], hsv[..., 1], hsv[..., 2]
    sector = np.floor(h * 6.0)
    f = h * 6.0 - sector
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))
    i = sector.astype(np.int64) % 6

    r = np.choose(i, [v, q, p, p, t, v])
    g = np.choose(i, [t, v, v, q, p, p])
    b = np.choose(i, [p, p, t, v, v, q])
    return np.stack([r, g, b], axis=-1)


class BrightnessStage(FilterStage):
    name = "brightness"

    def __init__(self, percent: float = IDENTITY_PERCENT):
        self.percent = float(percent)

    def is_identity(self) -> bool:
        return self.percent == IDENTITY_PERCENT

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        return with_rgb(pixels, pixels[..., :3] * (self.percent / 100.0))


class ContrastStage(FilterStage):
    name = "contrast"

    def __init__(self, percent: float = IDENTITY_PERCENT):
        self.percent = float(percent)

    def is_identity(self) -> bool:
        return self.percent == IDENTITY_PERCENT

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        factor = self.percent / 100.0
        return with_rgb(pixels, (pixels[..., :3] - MID_GRAY) * factor + MID_GRAY)


class SaturationStage(FilterStage):
    """Scale chroma while keeping Rec.709 luminance (0 = grayscale)."""

    name = "saturation"

    def __init__(self, percent: float = IDENTITY_PERCENT):
        self.percent = float(percent)

    def is_identity(self) -> bool:
        return self.percent == IDENTITY_PERCENT

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        s = self.percent / 100.0
        matrix = s * np.eye(3, dtype=np.float32) + (1.0 - s) * luminance_matrix()
        return apply_rgb_matrix(pixels, matrix)


class HueRotateStage(FilterStage):
    name = "hue"

    def __init__(self, degrees: float = 0.0):
        self.degrees = float(degrees)

    def is_identity(self) -> bool:
        return self.degrees % 360.0 == 0.0

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        hsv = rgb_to_hsv(pixels[..., :3] / CHANNEL_MAX)
        hsv[..., 0] = (hsv[..., 0] + self.degrees / 360.0) % 1.0
        return with_rgb(pixels, hsv_to_rgb(hsv) * CHANNEL_MAX)


class GrayscaleStage(FilterStage):
    name = "grayscale"

    def __init__(self, percent: float = 0.0):
        self.percent = float(percent)

    def is_identity(self) -> bool:
        return self.percent == 0.0

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        amount = self.percent / 100.0
        matrix = amount * luminance_matrix() + (1.0 - amount) * np.eye(3, dtype=np.float32)
        return apply_rgb_matrix(pixels, matrix)


class SepiaStage(FilterStage):
    name = "sepia"

    def __init__(self, percent: float = 0.0):
        self.percent = float(percent)

    def is_identity(self) -> bool:
        return self.percent == 0.0

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        amount = self.percent / 100.0
        sepia = np.asarray(SEPIA_MATRIX, dtype=np.float32)
        matrix = amount * sepia + (1.0 - amount) * np.eye(3, dtype=np.float32)
        return apply_rgb_matrix(pixels, matrix)
