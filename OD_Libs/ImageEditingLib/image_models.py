"""
Image editing data models for Open Darkroom.

This module defines the value types that flow through the editing core.

Classes:
    ImageSettings: Immutable record of every geometry/color/tone adjustment
    SourceImage: Immutable handle to the original decoded bitmap
    RenderedSurface: Output raster of the filter pipeline
    FilterPreset: Named, read-only partial settings bundle
    DownloadSettings: Export request (format, quality, progressive, metadata)
    HistoryEntry: Snapshot of settings stored in the edit history
"""

import logging
import math
import time
import uuid
from dataclasses import asdict, dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

from OD_Libs.constants import (
    DEFAULT_EXPORT_FILENAME,
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_HEIGHT,
    DEFAULT_QUALITY,
    DEFAULT_WIDTH,
    SETTINGS_RANGES,
)
from OD_Libs.errors import MissingSourceImage
from OD_Libs.pillow_compat import Image, ImageClass

logger = logging.getLogger(__name__)

METADATA_KEYS = ("exif", "icc_profile")


def _check_patch(cls, patch: Mapping[str, Any]) -> None:
    """Reject unknown field names and values of the wrong kind."""
    known = {f.name: f for f in fields(cls)}
    for name, value in patch.items():
        if name not in known:
            raise KeyError(f"Unknown {cls.__name__} field: {name}")
        default = known[name].default
        if isinstance(default, bool):
            if not isinstance(value, bool):
                raise TypeError(f"{name} must be a bool, got {type(value).__name__}")
        elif isinstance(default, (int, float)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{name} must be a number, got {type(value).__name__}")
        elif isinstance(default, str) and not isinstance(value, str):
            raise TypeError(f"{name} must be a string, got {type(value).__name__}")


@dataclass(frozen=True)
class ImageSettings:
    """Every adjustment applied by the filter pipeline.

    Percent fields use 100 as identity; signed fields use 0. Crop fields are
    carried for forward compatibility and are not consumed by the pipeline.
    """
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    maintain_aspect_ratio: bool = True
    rotation: float = 0.0
    flip_horizontal: bool = False
    flip_vertical: bool = False
    brightness: float = 100.0
    contrast: float = 100.0
    saturation: float = 100.0
    hue: float = 0.0
    grayscale: float = 0.0
    sepia: float = 0.0
    blur: float = 0.0
    sharpness: float = 100.0
    vignette: float = 0.0
    temperature: float = 0.0
    tint: float = 0.0
    exposure: float = 0.0
    highlights: float = 0.0
    shadows: float = 0.0
    vibrance: float = 100.0
    clarity: float = 0.0
    quality: int = DEFAULT_QUALITY
    crop_x: float = 0.0
    crop_y: float = 0.0
    crop_width: float = 100.0
    crop_height: float = 100.0

    def merge(self, patch: Optional[Mapping[str, Any]] = None, **changes: Any) -> "ImageSettings":
        """
        Return a copy with the given fields replaced.

        Args:
            patch: Mapping of field name to new value
            **changes: Additional field updates (take precedence over patch)

        Returns:
            A new ImageSettings; this instance is left untouched

        Raises:
            KeyError: If a field name is unknown
            TypeError: If a value has the wrong kind (bool vs number)
        """
        updates = dict(patch or {})
        updates.update(changes)
        _check_patch(type(self), updates)
        return replace(self, **updates)

    def clamped(self) -> "ImageSettings":
        """Return a copy with every numeric field clamped to its documented range."""
        updates = {}
        for f in fields(self):
            if isinstance(f.default, bool):
                continue
            value = getattr(self, f.name)
            if not math.isfinite(value):
                logger.warning(f"Non-finite value for {f.name} ({value}); using default {f.default}")
                value = f.default
            low, high = SETTINGS_RANGES.get(f.name, (None, None))
            if low is not None:
                value = max(low, value)
            if high is not None:
                value = min(high, value)
            if isinstance(f.default, int):
                value = int(math.floor(value + 0.5))
            updates[f.name] = value
        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ImageSettings":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


DEFAULT_SETTINGS = ImageSettings()


@dataclass(frozen=True)
class SourceImage:
    """The original bitmap of an editing session. Never mutated."""
    image: Any
    original_width: int
    original_height: int
    name: str = ""
    metadata: Mapping[str, bytes] = field(default_factory=dict)

    @classmethod
    def from_image(
        cls,
        image: Any,
        name: str = "",
        metadata: Optional[Mapping[str, bytes]] = None,
    ) -> "SourceImage":
        """
        Wrap an already decoded Pillow image.

        Args:
            image: PIL Image (any mode; normalized to RGBA)
            name: Original file name, used for the default export name
            metadata: EXIF/ICC payloads; read from image.info when omitted

        Raises:
            MissingSourceImage: If image is None
            TypeError: If image is not a PIL Image
        """
        if image is None:
            raise MissingSourceImage("No source image was provided")
        if not isinstance(image, ImageClass):
            raise TypeError(f"Expected PIL Image, got {type(image)}")

        if metadata is None:
            metadata = {k: image.info[k] for k in METADATA_KEYS if image.info.get(k)}

        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(
            image=rgba,
            original_width=rgba.width,
            original_height=rgba.height,
            name=name,
            metadata=MappingProxyType(dict(metadata)),
        )


@dataclass(frozen=True)
class RenderedSurface:
    """RGBA output raster of a render call."""
    image: Any
    metadata: Mapping[str, bytes] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def pixels(self) -> np.ndarray:
        """Return a fresh H x W x 4 uint8 copy of the surface."""
        return np.array(self.image, dtype=np.uint8)

    def tobytes(self) -> bytes:
        return self.image.tobytes()

    @classmethod
    def from_pixels(cls, pixels: np.ndarray, metadata: Optional[Mapping[str, bytes]] = None) -> "RenderedSurface":
        """Build a surface from an H x W x 4 uint8 array."""
        image = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
        return cls(image=image, metadata=MappingProxyType(dict(metadata or {})))


@dataclass(frozen=True)
class FilterPreset:
    id: str
    name: str
    description: str
    settings: Mapping[str, Any]

    def __post_init__(self):
        _check_patch(ImageSettings, self.settings)
        object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))


@dataclass(frozen=True)
class DownloadSettings:
    """Export request.

    Attributes:
        filename: Base name without extension (must be non-empty)
        format: One of jpeg, png, webp, bmp, tiff
        quality: 10-100, only used by lossy formats
        progressive: Request progressive JPEG layout
        metadata: Preserve EXIF/ICC metadata from the source
    """
    filename: str = DEFAULT_EXPORT_FILENAME
    format: str = DEFAULT_EXPORT_FORMAT
    quality: int = DEFAULT_QUALITY
    progressive: bool = False
    metadata: bool = True

    def merge(self, patch: Optional[Mapping[str, Any]] = None, **changes: Any) -> "DownloadSettings":
        """Return a copy with the given fields replaced."""
        updates = dict(patch or {})
        updates.update(changes)
        _check_patch(type(self), updates)
        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DownloadSettings":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    settings: ImageSettings
    timestamp: int
    description: str

    @classmethod
    def create(cls, settings: ImageSettings, description: str) -> "HistoryEntry":
        return cls(
            id=uuid.uuid4().hex,
            settings=settings,
            timestamp=int(time.time() * 1000),
            description=description,
        )
