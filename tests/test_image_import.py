"""
Unit tests for source image import.
"""

import io

import pytest
from PIL import Image

from OD_Libs.errors import DecodeFailure, MissingSourceImage
from OD_Libs.IOLib.image_import import (
    get_supported_image_formats,
    is_supported_image,
    load_source_image,
)

ORIENTATION_TAG = 0x0112


def encode(image, fmt="PNG", **kwargs):
    buffer = io.BytesIO()
    image.save(buffer, format=fmt, **kwargs)
    return buffer.getvalue()


class TestSupportedFormats:
    def test_common_extensions(self):
        formats = get_supported_image_formats()

        assert ".png" in formats
        assert ".jpg" in formats
        assert formats == sorted(formats)

    def test_is_supported_image(self):
        assert is_supported_image("holiday.JPG")
        assert not is_supported_image("notes.txt")


class TestLoadSourceImage:
    """Tests for load_source_image function."""

    def test_load_from_file(self, temp_output_dir):
        path = temp_output_dir / "red.png"
        Image.new("RGB", (7, 5), "red").save(path)

        source = load_source_image(path)

        assert (source.original_width, source.original_height) == (7, 5)
        assert source.name == "red.png"
        assert source.image.mode == "RGBA"
        assert source.image.getpixel((0, 0)) == (255, 0, 0, 255)

    def test_load_from_bytes(self):
        data = encode(Image.new("RGBA", (3, 2), (1, 2, 3, 4)))

        source = load_source_image(data, name="upload.png")

        assert source.name == "upload.png"
        assert source.image.getpixel((2, 1)) == (1, 2, 3, 4)

    def test_exif_orientation_applied(self):
        exif = Image.Exif()
        exif[ORIENTATION_TAG] = 6
        data = encode(Image.new("RGB", (4, 2), "white"), "JPEG", exif=exif.tobytes())

        source = load_source_image(data, name="phone.jpg")

        assert (source.original_width, source.original_height) == (2, 4)
        assert "exif" in source.metadata

    def test_icc_profile_kept(self):
        data = encode(Image.new("RGB", (2, 2)), icc_profile=b"fake-icc-profile")

        source = load_source_image(data)

        assert source.metadata["icc_profile"] == b"fake-icc-profile"

    def test_garbage_bytes(self):
        with pytest.raises(DecodeFailure):
            load_source_image(b"definitely not an image")

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(DecodeFailure):
            load_source_image(temp_output_dir / "nope.png")

    def test_decode_failure_is_os_error(self):
        with pytest.raises(OSError):
            load_source_image(b"\x89PNG broken")

    @pytest.mark.parametrize("value", [None, b""])
    def test_nothing_to_load(self, value):
        with pytest.raises(MissingSourceImage):
            load_source_image(value)
