"""
SessionLib - Editing session state

This module provides the linear edit history and the EditSession
controller for the Open Darkroom project.
"""

from OD_Libs.SessionLib.edit_history import EditHistory
from OD_Libs.SessionLib.edit_session import EditSession, default_export_name

__all__ = [
    "EditHistory",
    "EditSession",
    "default_export_name",
]
