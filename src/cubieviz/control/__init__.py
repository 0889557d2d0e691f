"""Controllers that turn UI input into scene mutations."""

from cubieviz.control.rotation import RotationController, target_key
from cubieviz.control.camera import CameraController, CameraState

__all__ = [
    "RotationController",
    "target_key",
    "CameraController",
    "CameraState",
]
