"""
Radial vignette post effect.

A black radial gradient, transparent at the surface center and reaching
alpha = strength/100 at half the longer side (held beyond it), is
composited over the surface with a multiply blend. Multiplying by black can
only darken.
"""

import numpy as np

from OD_Libs.constants import CHANNEL_MAX
from OD_Libs.ImageEditingLib.color_filters import FilterStage


def vignette_alpha(width: int, height: int, strength: float) -> np.ndarray:
    """
    Gradient alpha for every pixel center of a width x height surface.

    Returns:
        float32 array of shape (height, width), values 0..strength/100
    """
    radius = max(width, height) / 2.0
    ys = np.arange(height, dtype=np.float32) + 0.5 - height / 2.0
    xs = np.arange(width, dtype=np.float32) + 0.5 - width / 2.0
    distance = np.sqrt(xs[None, :] ** 2 + ys[:, None] ** 2)
    ramp = np.minimum(distance / radius, 1.0) if radius > 0 else np.ones_like(distance)
    return (ramp * (strength / 100.0)).astype(np.float32)


class VignetteStage(FilterStage):
    name = "vignette"

    def __init__(self, strength: float = 0.0):
        self.strength = float(strength)

    def is_identity(self) -> bool:
        return self.strength <= 0.0

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        height, width = pixels.shape[:2]
        src_alpha = vignette_alpha(width, height, self.strength)
        dst_alpha = pixels[..., 3] / CHANNEL_MAX

        # Multiply with a black source: premultiplied color keeps only the
        # destination's uncovered share.
        out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
        premultiplied = pixels[..., :3] * (dst_alpha * (1.0 - src_alpha))[..., None]
        safe_alpha = np.where(out_alpha > 0, out_alpha, 1.0)[..., None]

        out = np.empty_like(pixels, dtype=np.float32)
        out[..., :3] = np.clip(premultiplied / safe_alpha, 0.0, CHANNEL_MAX)
        out[..., 3] = np.clip(out_alpha * CHANNEL_MAX, 0.0, CHANNEL_MAX)
        return out
