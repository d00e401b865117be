"""
SessionLib - Host-facing coloring sessions

Session configuration, the ColoringSession facade and the per-activity
session registry.
"""

from CB_Libs.SessionLib.session_config import ColoringConfig, load_config, save_config
from CB_Libs.SessionLib.coloring_session import ColoringSession, map_display_point
from CB_Libs.SessionLib.session_registry import SessionRegistry

__all__ = [
    "ColoringConfig",
    "load_config",
    "save_config",
    "ColoringSession",
    "map_display_point",
    "SessionRegistry",
]
