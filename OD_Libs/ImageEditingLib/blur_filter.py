"""
Blur-based filter stages.

Provides the Gaussian blur used by the color chain and the two stages that
derive detail from a blurred copy of the image:
- Gaussian blur: Natural smooth blur with circular falloff
- Clarity: Midtone-weighted local contrast from a wide unsharp mask
- Sharpness: Unsharp mask above 100 percent, softening below

Example:
    >>> from PIL import Image
    >>> img = Image.open("photo.jpg")
    >>> blurred = apply_gaussian_blur(img, radius=3)
"""

from typing import Any

import numpy as np

from OD_Libs.constants import (
    CHANNEL_MAX,
    CLARITY_MAX_AMOUNT,
    CLARITY_RADIUS,
    IDENTITY_PERCENT,
    REC709_WEIGHTS,
    SHARPNESS_PERCENT,
    SHARPNESS_RADIUS,
)
from OD_Libs.ImageEditingLib.color_filters import (
    FilterStage,
    pixels_to_image,
    to_float_pixels,
    with_rgb,
)
from OD_Libs.pillow_compat import ImageFilter


def apply_gaussian_blur(
    image: Any,
    radius: float = 5.0,
) -> Any:
    """
    Apply Gaussian blur to image.

    Args:
        image: PIL Image
        radius: Blur radius in pixels (0 < radius <= 100)

    RGBA images are blurred with premultiplied alpha, so transparent
    pixels do not darken the colors next to them.

    Returns:
        Blurred PIL Image (same mode as input, palette images become RGB)

    Raises:
        ValueError: If radius <= 0 or > 100
        TypeError: If image not PIL Image
    """
    if not hasattr(image, "filter"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    if not (0 < radius <= 100):
        raise ValueError(f"radius must be 0 < r <= 100, got {radius}")

    if image.mode == "P":
        image = image.convert("RGB")

    blur = ImageFilter.GaussianBlur(radius=radius)
    if image.mode == "RGBA":
        return image.convert("RGBa").filter(blur).convert("RGBA")
    return image.filter(blur)


def blur_pixels(pixels: np.ndarray, radius: float) -> np.ndarray:
    """Gaussian blur a float RGBA buffer (quantized through 8-bit)."""
    return to_float_pixels(apply_gaussian_blur(pixels_to_image(pixels), radius))


def _midtone_weight(rgb: np.ndarray) -> np.ndarray:
    """1 at mid-gray, falling to 0 at black and white."""
    lum = (rgb @ np.asarray(REC709_WEIGHTS, dtype=np.float32)) / CHANNEL_MAX
    return 1.0 - (2.0 * lum - 1.0) ** 2


class GaussianBlurStage(FilterStage):
    name = "blur"

    def __init__(self, radius: float = 0.0):
        self.radius = float(radius)

    def is_identity(self) -> bool:
        return self.radius <= 0.0

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        return blur_pixels(pixels, self.radius)


class ClarityStage(FilterStage):
    """Local contrast; positive values add midtone punch, negative soften it."""

    name = "clarity"

    def __init__(self, amount: float = 0.0, radius: float = CLARITY_RADIUS):
        self.amount = float(amount)
        self.radius = float(radius)

    def is_identity(self) -> bool:
        return self.amount == 0.0

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        rgb = pixels[..., :3]
        detail = rgb - blur_pixels(pixels, self.radius)[..., :3]
        strength = (self.amount / 100.0) * CLARITY_MAX_AMOUNT
        weight = _midtone_weight(rgb)[..., None]
        return with_rgb(pixels, rgb + detail * strength * weight)


class SharpnessStage(FilterStage):
    name = "sharpness"

    def __init__(self, percent: float = IDENTITY_PERCENT, radius: float = SHARPNESS_RADIUS):
        self.percent = float(percent)
        self.radius = float(radius)

    def is_identity(self) -> bool:
        return self.percent == IDENTITY_PERCENT

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        rgb = pixels[..., :3]
        blurred = blur_pixels(pixels, self.radius)[..., :3]
        if self.percent > IDENTITY_PERCENT:
            amount = (self.percent - IDENTITY_PERCENT) / 100.0 * (SHARPNESS_PERCENT / 100.0)
            return with_rgb(pixels, rgb + (rgb - blurred) * amount)

        softness = (IDENTITY_PERCENT - self.percent) / 100.0
        return with_rgb(pixels, rgb * (1.0 - softness) + blurred * softness)
