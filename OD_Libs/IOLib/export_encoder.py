"""
Export encoder for Open Darkroom.

Converts a rendered surface into encoded image bytes following a
DownloadSettings request. Encoding itself is delegated to Pillow; this
module decides which options the request maps to and refuses combinations
the installed encoders cannot honor instead of silently dropping them.

Rules:
- quality (clamped to 10-100) only reaches lossy encoders (jpeg, webp)
- progressive is a JPEG layout option; any other format rejects it
- metadata=True embeds the source's EXIF/ICC payloads; a format that cannot
  carry the payloads present rejects the request
- formats without alpha (jpeg, bmp) are flattened onto black

Classes:
    EncoderCapabilities: What the installed Pillow build can write
    EncodedImage: Encoded bytes plus suggested filename and MIME type
    ExportEncoder: Builds save options and encodes surfaces
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional

from OD_Libs.constants import EXPORT_FORMATS, FORMAT_METADATA_SUPPORT, SETTINGS_RANGES
from OD_Libs.errors import MissingSourceImage, UnsupportedEncodingOption
from OD_Libs.ImageEditingLib.image_models import METADATA_KEYS, DownloadSettings
from OD_Libs.pillow_compat import Image, features

logger = logging.getLogger(__name__)

FORMAT_ALIASES = {"jpg": "jpeg", "tif": "tiff"}


@dataclass(frozen=True)
class EncoderCapabilities:
    """Formats and options the encoder backend supports.

    Attributes:
        formats: Export format names (jpeg, png, ...) that can be written
        progressive_jpeg: Whether the JPEG writer can emit progressive scans
        metadata: Per format, the metadata kinds ('exif', 'icc_profile') it can embed
    """
    formats: FrozenSet[str]
    progressive_jpeg: bool = True
    metadata: Optional[Mapping[str, FrozenSet[str]]] = None

    def __post_init__(self):
        if self.metadata is None:
            object.__setattr__(
                self,
                "metadata",
                {name: frozenset(kinds) for name, kinds in FORMAT_METADATA_SUPPORT.items()},
            )

    @classmethod
    def detect(cls) -> "EncoderCapabilities":
        """Probe the installed Pillow build."""
        Image.init()
        formats = set()
        for name, (pil_format, _mime, _lossy, _alpha) in EXPORT_FORMATS.items():
            if pil_format not in Image.SAVE:
                continue
            if name == "webp" and not features.check("webp"):
                continue
            formats.add(name)
        progressive = "jpeg" in formats and bool(features.check("jpg"))
        return cls(formats=frozenset(formats), progressive_jpeg=progressive)


@dataclass(frozen=True)
class EncodedImage:
    data: bytes
    filename: str
    format: str
    mime_type: str


def normalize_format(name: str) -> str:
    name = str(name).strip().lower()
    return FORMAT_ALIASES.get(name, name)


class ExportEncoder:
    """
    Encode rendered surfaces according to DownloadSettings.

    Example:
        >>> encoder = ExportEncoder()
        >>> encoded = encoder.encode(surface, DownloadSettings(format="png"))
        >>> Path(encoded.filename).write_bytes(encoded.data)
    """

    def __init__(self, capabilities: Optional[EncoderCapabilities] = None):
        self.capabilities = capabilities or EncoderCapabilities.detect()

    def suggested_filename(self, settings: DownloadSettings) -> str:
        """
        Build "{filename}.{format}".

        Raises:
            ValueError: If the filename is empty
        """
        filename = str(settings.filename).strip()
        if not filename:
            raise ValueError("filename must be a non-empty string")
        return f"{filename}.{normalize_format(settings.format)}"

    def get_save_kwargs(self, settings: DownloadSettings, metadata: Mapping[str, bytes]) -> Dict[str, Any]:
        """
        Get PIL Image.save() kwargs for a request.

        Raises:
            UnsupportedEncodingOption: If the format or a flag cannot be honored
        """
        fmt = normalize_format(settings.format)
        if fmt not in EXPORT_FORMATS:
            supported = ", ".join(sorted(EXPORT_FORMATS))
            raise UnsupportedEncodingOption(f"Unsupported format '{settings.format}'. Use one of: {supported}")
        if fmt not in self.capabilities.formats:
            raise UnsupportedEncodingOption(f"No {fmt} encoder is available in this Pillow build")

        pil_format, _mime, lossy, _alpha = EXPORT_FORMATS[fmt]
        kwargs: Dict[str, Any] = {"format": pil_format}

        if lossy:
            low, high = SETTINGS_RANGES["quality"]
            kwargs["quality"] = int(max(low, min(high, settings.quality)))

        if settings.progressive:
            if fmt != "jpeg":
                raise UnsupportedEncodingOption(f"Progressive encoding is not available for {fmt}")
            if not self.capabilities.progressive_jpeg:
                raise UnsupportedEncodingOption("The JPEG encoder does not support progressive output")
            kwargs["progressive"] = True

        if settings.metadata:
            present = {key for key in METADATA_KEYS if metadata.get(key)}
            unsupported = present - set(self.capabilities.metadata.get(fmt, ()))
            if unsupported:
                kinds = ", ".join(sorted(unsupported))
                raise UnsupportedEncodingOption(f"{fmt} cannot embed source metadata ({kinds})")
            for key in sorted(present):
                kwargs[key] = metadata[key]

        return kwargs

    def _prepare_image(self, image: Any, fmt: str) -> Any:
        """Copy the surface image without its info dict, flattening alpha if needed."""
        _pil, _mime, _lossy, supports_alpha = EXPORT_FORMATS[fmt]
        if supports_alpha:
            prepared = image.copy()
        else:
            prepared = Image.new("RGB", image.size, (0, 0, 0))
            prepared.paste(image.convert("RGB"), mask=image.getchannel("A"))
        prepared.info = {}
        return prepared

    def encode(self, surface: Any, settings: DownloadSettings) -> EncodedImage:
        """
        Encode surface.

        Args:
            surface: RenderedSurface to export
            settings: Export request

        Returns:
            EncodedImage with the bytes, suggested filename and MIME type

        Raises:
            MissingSourceImage: If there is no surface to encode
            UnsupportedEncodingOption: If the request cannot be honored
            ValueError: If the filename is empty
        """
        if surface is None:
            raise MissingSourceImage("Nothing has been rendered yet")

        filename = self.suggested_filename(settings)
        kwargs = self.get_save_kwargs(settings, surface.metadata)
        fmt = normalize_format(settings.format)
        image = self._prepare_image(surface.image, fmt)

        logger.debug(
            f"Encoding {surface.width}x{surface.height} as {fmt} "
            f"(options: {sorted(k for k in kwargs if k != 'format')})"
        )

        buffer = io.BytesIO()
        try:
            image.save(buffer, **kwargs)
        except (OSError, KeyError, ValueError) as exc:
            raise UnsupportedEncodingOption(f"Encoder rejected {fmt} export: {exc}") from exc

        return EncodedImage(
            data=buffer.getvalue(),
            filename=filename,
            format=fmt,
            mime_type=EXPORT_FORMATS[fmt][1],
        )

    def save_export(self, surface: Any, settings: DownloadSettings, output_dir: Path) -> Path:
        """
        Encode surface and write it to output_dir.

        Returns:
            Path of the written file

        Raises:
            OSError: If output_dir is missing or not a directory
        """
        output_dir = Path(output_dir)
        if not output_dir.exists():
            raise OSError(f"Output directory does not exist: {output_dir}")

        if not output_dir.is_dir():
            raise OSError(f"Output path is not a directory: {output_dir}")

        encoded = self.encode(surface, settings)
        save_path = output_dir / encoded.filename
        save_path.write_bytes(encoded.data)
        logger.info(f"Exported {encoded.format} image to {save_path}")
        return save_path
