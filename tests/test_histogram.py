"""
Unit tests for the histogram engine.
"""

from unittest.mock import Mock

import numpy as np
import pytest
from PIL import Image

from OD_Libs.ImageEditingLib.histogram import BIN_COUNT, compute_histogram
from OD_Libs.ImageEditingLib.image_models import RenderedSurface


def solid_surface(color, size=(4, 3)):
    return RenderedSurface(image=Image.new("RGBA", size, color))


class TestComputeHistogram:
    """Tests for compute_histogram function."""

    def test_every_pixel_counted_once(self, noise_image):
        surface = RenderedSurface(image=noise_image(17, 9, seed=2))
        histogram = compute_histogram(surface)

        for channel in (histogram.red, histogram.green, histogram.blue, histogram.luminance):
            assert len(channel) == BIN_COUNT
            assert sum(channel) == 17 * 9

        assert histogram.total() == 17 * 9

    def test_channel_bins(self):
        histogram = compute_histogram(solid_surface((10, 20, 30, 255)))

        assert histogram.red[10] == 12
        assert histogram.green[20] == 12
        assert histogram.blue[30] == 12

    def test_luminance_rounds_half_up(self):
        """0.299*10 + 0.587*20 + 0.114*30 = 18.15 lands in bin 18."""
        histogram = compute_histogram(solid_surface((10, 20, 30, 255)))
        assert histogram.luminance[18] == 12

    @pytest.mark.parametrize(
        "color, expected_bin",
        [((255, 255, 255, 255), 255), ((0, 0, 0, 255), 0), ((255, 0, 0, 255), 76)],
    )
    def test_luminance_extremes(self, color, expected_bin):
        histogram = compute_histogram(solid_surface(color))
        assert histogram.luminance[expected_bin] == 12

    def test_alpha_is_ignored(self):
        opaque = compute_histogram(solid_surface((40, 50, 60, 255)))
        transparent = compute_histogram(solid_surface((40, 50, 60, 0)))

        assert opaque == transparent

    def test_accepts_any_pixel_source(self):
        surface = Mock()
        surface.pixels.return_value = np.zeros((2, 2, 4), dtype=np.uint8)

        histogram = compute_histogram(surface)

        assert histogram.red[0] == 4
        surface.pixels.assert_called_once()

    def test_to_dict(self):
        data = compute_histogram(solid_surface((1, 2, 3, 255))).to_dict()
        assert set(data) == {"red", "green", "blue", "luminance"}
