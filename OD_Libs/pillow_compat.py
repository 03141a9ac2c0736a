"""
Compatibility wrapper around Pillow (which provides the `PIL` namespace).

Loads the Pillow modules used by the editing core via importlib and
re-exports them: `Image`, `ImageFilter`, `ImageOps` and `features`.
Importing from `pillow_compat` keeps a single place that reports a
missing Pillow installation.
"""
from importlib import import_module
from types import ModuleType
from typing import Optional


def _import(name: str) -> Optional[ModuleType]:
    try:
        return import_module(name)
    except ImportError:
        return None


_pil_image = _import("PIL.Image")

if _pil_image is None:
    raise ImportError("pillow (PIL) is required: install with 'pip install Pillow'")

Image = _pil_image
ImageFilter = import_module("PIL.ImageFilter")
ImageOps = import_module("PIL.ImageOps")
features = import_module("PIL.features")

# Class object for isinstance checks and type hints
ImageClass = getattr(_pil_image, "Image")


def resample_filter(name: str) -> int:
    """Look up a resampling filter (e.g. "LANCZOS") by name."""
    return getattr(Image.Resampling, name.upper())
