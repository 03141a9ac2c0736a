"""
Editing session controller.

Holds the state a presentation layer works against: the source image, the
current ImageSettings and DownloadSettings, the edit history and the last
rendered surface. Every committed settings change re-renders eagerly and
pushes a history entry; a change whose render fails is not committed.

Classes:
    EditSession: UI-free driver for load / adjust / preset / undo / export
"""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from OD_Libs.constants import (
    DEFAULT_EXPORT_FILENAME,
    EDITED_FILENAME_SUFFIX,
    HISTORY_ADJUST_TEMPLATE,
    HISTORY_IMAGE_LOADED,
    HISTORY_PRESET_TEMPLATE,
    HISTORY_RESET,
)
from OD_Libs.errors import MissingSourceImage
from OD_Libs.ImageEditingLib.filter_pipeline import render
from OD_Libs.ImageEditingLib.geometry import round_half_up
from OD_Libs.ImageEditingLib.histogram import Histogram, compute_histogram
from OD_Libs.ImageEditingLib.image_models import (
    DEFAULT_SETTINGS,
    DownloadSettings,
    FilterPreset,
    HistoryEntry,
    ImageSettings,
    RenderedSurface,
    SourceImage,
)
from OD_Libs.ImageEditingLib.presets import apply_preset, get_preset
from OD_Libs.IOLib.export_encoder import EncodedImage, ExportEncoder
from OD_Libs.IOLib.image_import import ImageInput, load_source_image
from OD_Libs.SessionLib.edit_history import EditHistory

logger = logging.getLogger(__name__)


def default_export_name(source_name: str) -> str:
    """'holiday.jpg' -> 'holiday-edited'."""
    stem = Path(source_name).stem if source_name else ""
    if not stem or stem.startswith("<"):
        return DEFAULT_EXPORT_FILENAME
    return f"{stem}{EDITED_FILENAME_SUFFIX}"


class EditSession:
    """
    Drive the editing core the way an editor UI does.

    Example:
        >>> session = EditSession()
        >>> session.load_image("photo.jpg")
        >>> session.update_settings(brightness=120)
        >>> session.apply_preset("vintage")
        >>> encoded = session.export()
    """

    def __init__(self, encoder: Optional[ExportEncoder] = None):
        self._encoder = encoder
        self.source: Optional[SourceImage] = None
        self.settings: ImageSettings = DEFAULT_SETTINGS
        self.download_settings = DownloadSettings()
        self.history = EditHistory()
        self.surface: Optional[RenderedSurface] = None

    @property
    def encoder(self) -> ExportEncoder:
        if self._encoder is None:
            self._encoder = ExportEncoder()
        return self._encoder

    def _require_source(self) -> SourceImage:
        if self.source is None:
            raise MissingSourceImage("No image has been loaded into the session")
        return self.source

    def _defaults_for(self, source: SourceImage) -> ImageSettings:
        return DEFAULT_SETTINGS.merge(width=source.original_width, height=source.original_height)

    def _commit(self, settings: ImageSettings, description: str) -> RenderedSurface:
        surface = render(self._require_source(), settings)
        self.settings = settings
        self.surface = surface
        self.history.push(settings, description)
        return surface

    def load_image(self, source: Union[SourceImage, ImageInput], name: Optional[str] = None) -> RenderedSurface:
        """
        Start a session on a new image.

        Settings reset to defaults sized to the image, the export name becomes
        "<stem>-edited" and the history restarts with "Image loaded".
        """
        if not isinstance(source, SourceImage):
            source = load_source_image(source, name=name)

        settings = self._defaults_for(source)
        surface = render(source, settings)

        self.source = source
        self.settings = settings
        self.surface = surface
        self.download_settings = DownloadSettings(filename=default_export_name(source.name))
        self.history.clear()
        self.history.push(settings, HISTORY_IMAGE_LOADED)
        logger.info(f"Session loaded {source.name or 'image'} ({source.original_width}x{source.original_height})")
        return surface

    def update_settings(
        self,
        changes: Optional[Mapping[str, Any]] = None,
        description: Optional[str] = None,
        **kwargs: Any,
    ) -> RenderedSurface:
        """
        Merge a partial settings update and re-render.

        With maintain_aspect_ratio set, changing only the width recomputes the
        height from the original ratio (and vice versa), rounded half up.
        The changed dimension always wins: the other one is derived from it
        directly, not fitted into the previous width x height box, so
        widening a locked image also makes it taller. When both dimensions
        change in one call the width wins.

        Args:
            changes: Mapping of field name to new value
            description: History label; defaults to "Adjusted <fields>"
            **kwargs: Additional field updates

        Returns:
            The newly rendered surface

        Raises:
            MissingSourceImage: If no image is loaded
            InvalidGeometry: If the new size cannot be rendered (nothing is committed)
            KeyError: If a field name is unknown
        """
        source = self._require_source()
        patch = dict(changes or {})
        patch.update(kwargs)

        current = self.settings
        updated = current.merge(patch)

        if updated.maintain_aspect_ratio:
            ratio = source.original_width / source.original_height
            if "width" in patch and patch["width"] != current.width:
                updated = updated.merge(height=round_half_up(updated.width / ratio))
            elif "height" in patch and patch["height"] != current.height:
                updated = updated.merge(width=round_half_up(updated.height * ratio))

        if description is None:
            description = HISTORY_ADJUST_TEMPLATE.format(fields=", ".join(sorted(patch)))
        return self._commit(updated, description)

    def apply_preset(self, preset: Union[FilterPreset, str]) -> RenderedSurface:
        self._require_source()
        if isinstance(preset, str):
            preset = get_preset(preset)
        updated = apply_preset(self.settings, preset)
        return self._commit(updated, HISTORY_PRESET_TEMPLATE.format(name=preset.name))

    def reset(self) -> RenderedSurface:
        """Return every setting to its default, keeping the image's size."""
        source = self._require_source()
        return self._commit(self._defaults_for(source), HISTORY_RESET)

    def _restore(self, entry: Optional[HistoryEntry]) -> Optional[HistoryEntry]:
        if entry is not None:
            self.settings = entry.settings
            self.surface = render(self._require_source(), entry.settings)
        return entry

    def undo(self) -> Optional[HistoryEntry]:
        return self._restore(self.history.undo())

    def redo(self) -> Optional[HistoryEntry]:
        return self._restore(self.history.redo())

    def update_download_settings(self, **changes: Any) -> DownloadSettings:
        self.download_settings = self.download_settings.merge(changes)
        return self.download_settings

    def _require_surface(self) -> RenderedSurface:
        self._require_source()
        if self.surface is None:
            raise MissingSourceImage("Nothing has been rendered yet")
        return self.surface

    def histogram(self) -> Histogram:
        """Compute the histogram of the last rendered surface (on demand)."""
        return compute_histogram(self._require_surface())

    def export(self) -> EncodedImage:
        return self.encoder.encode(self._require_surface(), self.download_settings)

    def save(self, output_dir: Path) -> Path:
        return self.encoder.save_export(self._require_surface(), self.download_settings, output_dir)
