"""
Pytest configuration and shared fixtures for Open Darkroom tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import numpy as np
import pytest
from PIL import Image

from OD_Libs.ImageEditingLib.image_models import SourceImage
from OD_Libs.IOLib.export_encoder import EncoderCapabilities, ExportEncoder


def make_noise_image(width, height, seed=0):
    """Deterministic opaque RGBA noise image."""
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    return Image.fromarray(pixels)


@pytest.fixture
def noise_image():
    """Factory for deterministic noise images: noise_image(width, height, seed=0)."""
    return make_noise_image


@pytest.fixture
def temp_output_dir(tmp_path):
    """
    Provide a temporary directory for exported files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def gray_source():
    """A 10x10 mid-gray (128, 128, 128) source image."""
    return SourceImage.from_image(Image.new("RGB", (10, 10), (128, 128, 128)), name="gray.png")


@pytest.fixture
def noise_source():
    """A 16x12 deterministic noise source image."""
    return SourceImage.from_image(make_noise_image(16, 12), name="noise.png")


@pytest.fixture
def wide_source():
    """A 100x50 source image (2:1 aspect ratio)."""
    return SourceImage.from_image(make_noise_image(100, 50, seed=3), name="holiday.jpg")


@pytest.fixture
def encoder():
    """An encoder that supports every format and progressive JPEG."""
    return ExportEncoder(
        EncoderCapabilities(
            formats=frozenset({"jpeg", "png", "webp", "bmp", "tiff"}),
            progressive_jpeg=True,
        )
    )


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]
