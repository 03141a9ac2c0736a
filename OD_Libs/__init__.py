"""
OD_Libs - Open Darkroom Library Modules

This package contains the editing core of the Open Darkroom project,
organized into specialized sub-packages:

- ImageEditingLib: Settings model, filter pipeline, histogram and presets
- IOLib: Source image loading and export encoding
- SessionLib: Edit history and the editing session controller
"""

__version__ = "0.1.0"
