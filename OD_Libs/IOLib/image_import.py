"""
Source image import for Open Darkroom.

Decodes image files (or in-memory bytes) into the immutable SourceImage
handle used by an editing session.

Functions:
    get_supported_image_formats: List accepted file extensions
    is_supported_image: Check a path's extension
    load_source_image: Decode a file or bytes into a SourceImage
"""

import io
import logging
from pathlib import Path
from typing import List, Optional, Union

from OD_Libs.constants import SUPPORTED_STANDARD_IMAGES
from OD_Libs.errors import DecodeFailure, MissingSourceImage
from OD_Libs.ImageEditingLib.image_models import METADATA_KEYS, SourceImage
from OD_Libs.pillow_compat import Image, ImageOps

logger = logging.getLogger(__name__)

ImageInput = Union[str, Path, bytes, bytearray]


def get_supported_image_formats() -> List[str]:
    """
    Get list of supported standard image formats.

    Returns:
        List of file extensions (e.g., ['.bmp', '.jpeg', ...])
    """
    return sorted(SUPPORTED_STANDARD_IMAGES)


def is_supported_image(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_STANDARD_IMAGES


def load_source_image(source: ImageInput, name: Optional[str] = None) -> SourceImage:
    """
    Decode an image into a SourceImage.

    The EXIF orientation is applied so the natural width/height match what
    a viewer displays. EXIF and ICC payloads are kept for export.

    Args:
        source: File path or encoded image bytes
        name: File name to record; defaults to the path's name

    Returns:
        SourceImage in RGBA mode

    Raises:
        MissingSourceImage: If source is None or empty
        DecodeFailure: If the file cannot be read or decoded
    """
    if source is None or (isinstance(source, (bytes, bytearray)) and not source):
        raise MissingSourceImage("No image data was provided")

    if isinstance(source, (bytes, bytearray)):
        stream = io.BytesIO(source)
        label = name or "<memory>"
    else:
        stream = Path(source)
        label = name or stream.name

    try:
        with Image.open(stream) as opened:
            opened.load()
            image = ImageOps.exif_transpose(opened)
            metadata = {
                key: image.info.get(key) or opened.info.get(key)
                for key in METADATA_KEYS
                if image.info.get(key) or opened.info.get(key)
            }
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise DecodeFailure(f"Could not decode image '{label}': {exc}") from exc

    logger.info(f"Loaded source image {label} ({image.width}x{image.height}, mode {image.mode})")
    return SourceImage.from_image(image, name=label, metadata=metadata)
