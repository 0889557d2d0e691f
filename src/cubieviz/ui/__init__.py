"""Terminal-side controls: headless panels and the interactive console."""

from cubieviz.ui.panel import RotationPanel, CameraPanel, FanButton, ControlPanel
from cubieviz.ui.console import InteractiveConsole

__all__ = [
    "RotationPanel",
    "CameraPanel",
    "FanButton",
    "ControlPanel",
    "InteractiveConsole",
]
