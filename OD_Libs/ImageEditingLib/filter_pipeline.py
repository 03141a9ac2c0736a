"""
Filter pipeline: renders a source image through an ImageSettings value.

Rendering order (each step works on the output of the previous one):
    1. Resolve the output geometry and resize the source to it
    2. Rotate (clockwise, degrees) then flip about the surface center
    3. Color chain: brightness, contrast, saturation, hue, grayscale,
       sepia, blur
    4. Tone chain: white balance, exposure, highlights/shadows, vibrance,
       clarity, sharpness
    5. Post effects: vignette

Stages whose parameters are at identity are skipped, so identity settings
reproduce the resized source exactly.

Functions:
    build_color_chain / build_tone_chain / build_post_chain: Stage groups
    build_filter_chain: Full ordered stage list for a settings value
    apply_stages: Run a stage list over a pixel buffer
    transform_image: Apply rotation and flips to a Pillow image
    render: Produce a RenderedSurface from a source and settings
"""

import logging
import math
from typing import Any, List, Sequence, Tuple

import numpy as np

from OD_Libs.constants import RESAMPLE_FILTER
from OD_Libs.errors import InvalidGeometry, MissingSourceImage
from OD_Libs.ImageEditingLib.blur_filter import ClarityStage, GaussianBlurStage, SharpnessStage
from OD_Libs.ImageEditingLib.color_filters import (
    BrightnessStage,
    ContrastStage,
    FilterStage,
    GrayscaleStage,
    HueRotateStage,
    SaturationStage,
    SepiaStage,
    to_float_pixels,
    to_uint8_pixels,
)
from OD_Libs.ImageEditingLib.geometry import resolve_output_size
from OD_Libs.ImageEditingLib.image_models import ImageSettings, RenderedSurface, SourceImage
from OD_Libs.ImageEditingLib.tone_filters import (
    ExposureStage,
    HighlightsShadowsStage,
    VibranceStage,
    WhiteBalanceStage,
)
from OD_Libs.ImageEditingLib.vignette_filter import VignetteStage
from OD_Libs.pillow_compat import Image, resample_filter

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


def build_color_chain(settings: ImageSettings) -> List[FilterStage]:
    return [
        BrightnessStage(settings.brightness),
        ContrastStage(settings.contrast),
        SaturationStage(settings.saturation),
        HueRotateStage(settings.hue),
        GrayscaleStage(settings.grayscale),
        SepiaStage(settings.sepia),
        GaussianBlurStage(settings.blur),
    ]


def build_tone_chain(settings: ImageSettings) -> List[FilterStage]:
    return [
        WhiteBalanceStage(settings.temperature, settings.tint),
        ExposureStage(settings.exposure),
        HighlightsShadowsStage(settings.highlights, settings.shadows),
        VibranceStage(settings.vibrance),
        ClarityStage(settings.clarity),
        SharpnessStage(settings.sharpness),
    ]


def build_post_chain(settings: ImageSettings) -> List[FilterStage]:
    return [VignetteStage(settings.vignette)]


def build_filter_chain(settings: ImageSettings) -> List[FilterStage]:
    """
    Build the full ordered list of pixel stages for settings.

    Identity stages are included; apply_stages skips them.
    """
    return build_color_chain(settings) + build_tone_chain(settings) + build_post_chain(settings)


def apply_stages(pixels: np.ndarray, stages: Sequence[FilterStage]) -> np.ndarray:
    """Run every non-identity stage in order, returning the final buffer."""
    for stage in stages:
        if stage.is_identity():
            continue
        logger.debug(f"Applying stage {stage!r}")
        pixels = stage.apply(pixels)
    return pixels


def transform_image(
    image: Any,
    rotation: float = 0.0,
    flip_horizontal: bool = False,
    flip_vertical: bool = False,
) -> Any:
    """
    Rotate and flip image about its center, keeping its size.

    The rotation (clockwise, degrees) is applied to the coordinate system
    first and the flips after it, as a -1 scale on each flipped axis.
    Areas uncovered by a rotation become transparent.

    Returns:
        A new PIL Image of the same size (or image itself when nothing changes)
    """
    if rotation % 360.0 == 0.0:
        result = image
        if flip_horizontal:
            result = result.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
        if flip_vertical:
            result = result.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        return result

    width, height = image.size
    cx, cy = width / 2.0, height / 2.0
    theta = math.radians(rotation)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    sx = -1.0 if flip_horizontal else 1.0
    sy = -1.0 if flip_vertical else 1.0

    # Inverse mapping from output coordinates back into the source:
    # source = S * R^-1 * (output - center) + center
    a, b = sx * cos_t, sx * sin_t
    d, e = -sy * sin_t, sy * cos_t
    c = cx - (a * cx + b * cy)
    f = cy - (d * cx + e * cy)

    return image.transform(
        (width, height),
        Image.Transform.AFFINE,
        (a, b, c, d, e, f),
        resample=Image.Resampling.BICUBIC,
        fillcolor=TRANSPARENT,
    )


def composite_source(image: Any, size: Tuple[int, int], settings: ImageSettings) -> Any:
    """Draw image at size with the geometric transform of settings."""
    if image.size != size:
        image = image.resize(size, resample_filter(RESAMPLE_FILTER))
    return transform_image(
        image,
        rotation=settings.rotation,
        flip_horizontal=settings.flip_horizontal,
        flip_vertical=settings.flip_vertical,
    )


def render(source: SourceImage, settings: ImageSettings) -> RenderedSurface:
    """
    Render source through settings.

    Out-of-range settings are clamped, never rejected. The returned surface
    is new on every call and the pipeline keeps no reference to it.

    Args:
        source: The session's source image
        settings: Adjustments to apply

    Returns:
        RenderedSurface sized to the resolved geometry

    Raises:
        MissingSourceImage: If source is None
        InvalidGeometry: If the requested or resolved size is not positive
    """
    if source is None:
        raise MissingSourceImage("Cannot render without a source image")

    settings = settings.clamped()

    if source.original_width <= 0 or source.original_height <= 0:
        raise InvalidGeometry(
            f"Source has no area: {source.original_width}x{source.original_height}"
        )
    if settings.width <= 0 or settings.height <= 0:
        raise InvalidGeometry(f"Requested size must be positive, got {settings.width}x{settings.height}")

    size = resolve_output_size(
        source.original_width,
        source.original_height,
        settings.width,
        settings.height,
        settings.maintain_aspect_ratio,
    )
    if size[0] <= 0 or size[1] <= 0:
        raise InvalidGeometry(f"Resolved size must be positive, got {size[0]}x{size[1]}")

    logger.debug(
        f"Rendering {source.original_width}x{source.original_height} -> {size[0]}x{size[1]}"
    )

    composited = composite_source(source.image, size, settings)
    stages = [stage for stage in build_filter_chain(settings) if not stage.is_identity()]

    if not stages:
        return RenderedSurface(image=composited.copy(), metadata=source.metadata)

    pixels = apply_stages(to_float_pixels(composited), stages)
    return RenderedSurface.from_pixels(to_uint8_pixels(pixels), metadata=source.metadata)
