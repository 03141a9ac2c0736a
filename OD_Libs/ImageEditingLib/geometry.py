"""
Output geometry resolution.

Functions:
    calculate_aspect_ratio: Fit requested dimensions to the original aspect ratio
    round_half_up: Round a real dimension to whole pixels
    resolve_output_size: Integral output canvas size for a render
"""

import math
from typing import Tuple


def calculate_aspect_ratio(
    original_width: float,
    original_height: float,
    new_width: float,
    new_height: float,
    maintain_ratio: bool,
) -> Tuple[float, float]:
    """
    Compute the output dimensions for a resize request.

    With maintain_ratio the result keeps original_width:original_height,
    fitting to the requested height when the request is wider than the
    original ratio and to the requested width otherwise. Without it the
    requested dimensions are returned verbatim, even if degenerate.

    original_height (and new_height, when maintain_ratio is set) must be
    greater than zero.

    Returns:
        (width, height) as real values
    """
    if not maintain_ratio:
        return new_width, new_height

    aspect_ratio = original_width / original_height

    if new_width / new_height > aspect_ratio:
        return new_height * aspect_ratio, new_height
    return new_width, new_width / aspect_ratio


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resolve_output_size(
    original_width: int,
    original_height: int,
    new_width: int,
    new_height: int,
    maintain_ratio: bool,
) -> Tuple[int, int]:
    """Resolve the geometry and round both dimensions half up."""
    width, height = calculate_aspect_ratio(
        original_width, original_height, new_width, new_height, maintain_ratio
    )
    return round_half_up(width), round_half_up(height)
