"""Utility modules for cubieviz."""

from cubieviz.utils.display import ProgressDisplay, StatusDisplay, LiveLogger

__all__ = [
    "ProgressDisplay",
    "StatusDisplay",
    "LiveLogger",
]
