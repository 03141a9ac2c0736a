"""
Static library of filter presets.

Each preset is a named partial ImageSettings. Applying one overlays only the
fields it names; geometry, crop and export quality are never touched unless
a preset names them.
"""

from typing import List, Union

from OD_Libs.ImageEditingLib.image_models import FilterPreset, ImageSettings

FILTER_PRESETS = (
    FilterPreset(
        id="vintage",
        name="Vintage",
        description="Classic film look",
        settings={
            "brightness": 110,
            "contrast": 120,
            "saturation": 80,
            "sepia": 30,
            "vignette": 20,
            "temperature": 10,
        },
    ),
    FilterPreset(
        id="dramatic",
        name="Dramatic",
        description="High contrast and vibrant",
        settings={
            "brightness": 105,
            "contrast": 140,
            "saturation": 130,
            "clarity": 20,
            "shadows": -20,
            "highlights": -10,
        },
    ),
    FilterPreset(
        id="bw-classic",
        name="B&W Classic",
        description="Timeless black and white",
        settings={
            "grayscale": 100,
            "contrast": 125,
            "brightness": 105,
            "clarity": 15,
        },
    ),
    FilterPreset(
        id="warm-sunset",
        name="Warm Sunset",
        description="Golden hour warmth",
        settings={
            "temperature": 25,
            "tint": 10,
            "saturation": 115,
            "highlights": -15,
            "shadows": 10,
        },
    ),
    FilterPreset(
        id="cool-blue",
        name="Cool Blue",
        description="Cool, crisp tones",
        settings={
            "temperature": -20,
            "tint": -5,
            "saturation": 110,
            "contrast": 115,
            "clarity": 10,
        },
    ),
    FilterPreset(
        id="soft-portrait",
        name="Soft Portrait",
        description="Gentle skin tones",
        settings={
            "brightness": 108,
            "contrast": 95,
            "saturation": 90,
            "blur": 0.5,
            "highlights": 10,
            "shadows": 15,
        },
    ),
)


def get_filter_presets() -> List[FilterPreset]:
    """Return the presets in display order."""
    return list(FILTER_PRESETS)


def get_preset(preset_id: str) -> FilterPreset:
    """
    Look up a preset by id.

    Raises:
        KeyError: If no preset has that id
    """
    for preset in FILTER_PRESETS:
        if preset.id == preset_id:
            return preset
    available = ", ".join(p.id for p in FILTER_PRESETS)
    raise KeyError(f"Unknown preset '{preset_id}'. Available presets: {available}")


def apply_preset(current: ImageSettings, preset: Union[FilterPreset, str]) -> ImageSettings:
    """Overlay the fields named by preset onto current."""
    if isinstance(preset, str):
        preset = get_preset(preset)
    return current.merge(preset.settings)
