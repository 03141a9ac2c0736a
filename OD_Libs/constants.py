"""
Constants and configuration values for Open Darkroom.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the editing core.
"""

# Default image settings (identity values for every adjustment)
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DEFAULT_QUALITY = 90
IDENTITY_PERCENT = 100.0

# Numeric ranges for ImageSettings fields: (minimum, maximum)
# Width/height have no upper bound.
SETTINGS_RANGES = {
    "width": (0, None),
    "height": (0, None),
    "brightness": (0.0, 200.0),
    "contrast": (0.0, 200.0),
    "saturation": (0.0, 200.0),
    "vibrance": (0.0, 200.0),
    "sharpness": (0.0, 200.0),
    "hue": (-180.0, 180.0),
    "grayscale": (0.0, 100.0),
    "sepia": (0.0, 100.0),
    "vignette": (0.0, 100.0),
    "blur": (0.0, 10.0),
    "temperature": (-50.0, 50.0),
    "tint": (-50.0, 50.0),
    "exposure": (-100.0, 100.0),
    "highlights": (-100.0, 100.0),
    "shadows": (-100.0, 100.0),
    "clarity": (-100.0, 100.0),
    "quality": (10, 100),
    "crop_x": (0.0, 100.0),
    "crop_y": (0.0, 100.0),
    "crop_width": (0.0, 100.0),
    "crop_height": (0.0, 100.0),
}

# Pixel value scale
CHANNEL_MAX = 255.0
MID_GRAY = 127.5

# Luma weights used by the histogram (ITU-R BT.601)
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Luminance weights used by grayscale/saturation matrices (ITU-R BT.709)
REC709_WEIGHTS = (0.2126, 0.7152, 0.0722)

# Sepia tone matrix (full strength)
SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)

# Tone stage tuning
WHITE_BALANCE_GAIN_PER_UNIT = 0.004  # 50 units = 20% channel gain
EXPOSURE_STOPS_PER_UNIT = 0.01  # 100 units = +1 stop
HIGHLIGHTS_THRESHOLD = 0.5
HIGHLIGHTS_FALLOFF = 0.7
HIGHLIGHTS_MAX_SHIFT = 0.4
SHADOWS_THRESHOLD = 0.5
SHADOWS_FALLOFF = 0.5
SHADOWS_MAX_SHIFT = 0.3
CLARITY_RADIUS = 12.0
CLARITY_MAX_AMOUNT = 0.6
SHARPNESS_RADIUS = 1.0
SHARPNESS_PERCENT = 150

# Resampling filter used when resizing the source to the output geometry
RESAMPLE_FILTER = "LANCZOS"

# Export formats: name -> (Pillow format, MIME type, lossy, supports alpha)
EXPORT_FORMATS = {
    "jpeg": ("JPEG", "image/jpeg", True, False),
    "png": ("PNG", "image/png", False, True),
    "webp": ("WEBP", "image/webp", True, True),
    "bmp": ("BMP", "image/bmp", False, False),
    "tiff": ("TIFF", "image/tiff", False, True),
}

# Metadata kinds each Pillow writer can embed
FORMAT_METADATA_SUPPORT = {
    "jpeg": {"exif", "icc_profile"},
    "png": {"exif", "icc_profile"},
    "webp": {"exif", "icc_profile"},
    "bmp": set(),
    "tiff": {"exif", "icc_profile"},
}

# Default download settings
DEFAULT_EXPORT_FILENAME = "edited-image"
DEFAULT_EXPORT_FORMAT = "jpeg"
EDITED_FILENAME_SUFFIX = "-edited"

# History descriptions
HISTORY_IMAGE_LOADED = "Image loaded"
HISTORY_RESET = "Reset to defaults"
HISTORY_PRESET_TEMPLATE = "Applied preset: {name}"
HISTORY_ADJUST_TEMPLATE = "Adjusted {fields}"

# Supported source file formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".tif", ".webp"}
