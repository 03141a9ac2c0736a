"""
Error types raised by the Open Darkroom editing core.

All failures are scoped to a single render/encode call; none of them is
fatal to the process.

Classes:
    ImageEditError: Base class for all editing core errors
    InvalidGeometry: Requested or resolved output size is not positive
    UnsupportedEncodingOption: Encoder cannot satisfy a format/flag combination
    DecodeFailure: A source bitmap could not be decoded
    MissingSourceImage: An operation needed a source image but none was given
"""


class ImageEditError(Exception):
    """Base class for errors raised by the editing core."""


class InvalidGeometry(ImageEditError, ValueError):
    """Raised when the output canvas would have a non-positive dimension."""


class UnsupportedEncodingOption(ImageEditError, ValueError):
    """Raised when the encoder cannot honor the requested export options."""


class DecodeFailure(ImageEditError, OSError):
    """Raised when a source image cannot be loaded or decoded."""


class MissingSourceImage(DecodeFailure):
    """Raised when rendering or exporting without a source image."""
