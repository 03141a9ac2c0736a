"""
IOLib - Image import and export

This module provides decoding of source images and encoding of rendered
surfaces for the Open Darkroom project.
"""

from OD_Libs.IOLib.image_import import (
    get_supported_image_formats,
    is_supported_image,
    load_source_image,
)
from OD_Libs.IOLib.export_encoder import (
    EncodedImage,
    EncoderCapabilities,
    ExportEncoder,
)

__all__ = [
    "get_supported_image_formats",
    "is_supported_image",
    "load_source_image",
    "EncodedImage",
    "EncoderCapabilities",
    "ExportEncoder",
]
