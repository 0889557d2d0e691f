"""
Camera state and controller.

The camera position is an observable value. The controller subscribes to it
and, on every change, moves the eye, re-aims at the world origin and
recomputes the view and projection matrices with pybullet. Nothing here runs
per frame.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Union

import numpy as np
import pybullet as p

from cubieviz.core.base import Axis, Vector3, parse_number
from cubieviz.core.config import CameraConfig
from cubieviz.utils.display import LiveLogger


ORIGIN: Vector3 = (0.0, 0.0, 0.0)
FALLBACK_UP: Vector3 = (0.0, 0.0, 1.0)


def _distance(a: Vector3, b: Vector3) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))


class CameraState:
    """Observable camera position in world coordinates."""

    def __init__(self, position: Vector3):
        x, y, z = position
        self._position: Vector3 = (float(x), float(y), float(z))
        self._observers: List[Callable[[Vector3], None]] = []
        self._validators: List[Callable[[Vector3], bool]] = []

    @property
    def position(self) -> Vector3:
        return self._position

    def subscribe(self, callback: Callable[[Vector3], None]) -> Callable[[], None]:
        """Register a change callback. Returns a function that unsubscribes it."""
        self._observers.append(callback)

        def unsubscribe():
            if callback in self._observers:
                self._observers.remove(callback)
        return unsubscribe

    def add_validator(self, check: Callable[[Vector3], bool]) -> Callable[[], None]:
        """Register a check that can refuse a new position before it is stored."""
        self._validators.append(check)

        def remove():
            if check in self._validators:
                self._validators.remove(check)
        return remove

    def set_position(self, position: Vector3) -> bool:
        """
        Replace the position and notify observers if it actually changed.

        A position refused by a validator leaves the state untouched.

        Returns:
            True when observers were notified
        """
        x, y, z = position
        new_position = (float(x), float(y), float(z))
        if new_position == self._position:
            return False
        if not all(check(new_position) for check in list(self._validators)):
            return False
        self._position = new_position
        for callback in list(self._observers):
            callback(new_position)
        return True

    def set_axis(self, axis: Union[Axis, str], value: float) -> bool:
        coords = list(self._position)
        coords["xyz".index(Axis.parse(axis).value)] = float(value)
        return self.set_position(tuple(coords))


class CameraController:
    """Keeps the view aimed at the world origin from the observed camera position."""

    def __init__(self, config: CameraConfig, state: Optional[CameraState] = None,
                 logger: Optional[LiveLogger] = None):
        self.config = config
        self.logger = logger or LiveLogger(verbose=False)
        self.state = state or CameraState(config.position)
        self.target: Vector3 = ORIGIN
        self.eye: Optional[Vector3] = None
        self.up: Vector3 = config.up_vector
        self.view_matrix: Optional[tuple] = None
        self.projection_matrix: Optional[tuple] = None
        self.update_count = 0

        self._update(self.state.position)
        self._remove_validator = self.state.add_validator(self._accepts)
        self._unsubscribe = self.state.subscribe(self._update)

    # ------------------------------------------------------------------ #
    # UI-facing mutations
    # ------------------------------------------------------------------ #
    def set_position(self, x: float, y: float, z: float) -> bool:
        return self.state.set_position((x, y, z))

    def set_axis_text(self, axis: Union[Axis, str], text: Any) -> bool:
        """Set one coordinate from free UI text; malformed text counts as 0."""
        value = parse_number(text)
        if value is None:
            self.logger.log_warning(f"Camera input {text!r} is not a number; using 0")
            value = 0.0
        try:
            return self.state.set_axis(axis, value)
        except ValueError as e:
            self.logger.log_warning(f"{e}; camera input ignored")
            return False

    def reset(self) -> bool:
        """Return the camera to its configured home position."""
        return self.state.set_position(self.config.position)

    def close(self) -> None:
        self._unsubscribe()
        self._remove_validator()

    # ------------------------------------------------------------------ #
    # Derived state
    # ------------------------------------------------------------------ #
    @property
    def forward(self) -> np.ndarray:
        """Unit vector from the eye toward the target."""
        direction = np.asarray(self.target) - np.asarray(self.eye)
        return direction / np.linalg.norm(direction)

    def view_matrix_array(self) -> np.ndarray:
        """The view matrix as a row-major 4x4 array (pybullet returns column-major)."""
        return np.asarray(self.view_matrix, dtype=float).reshape(4, 4).T

    def projection_matrix_array(self) -> np.ndarray:
        return np.asarray(self.projection_matrix, dtype=float).reshape(4, 4).T

    def to_camera_space(self, point: Vector3) -> np.ndarray:
        homogeneous = np.append(np.asarray(point, dtype=float), 1.0)
        return (self.view_matrix_array() @ homogeneous)[:3]

    def is_facing_origin(self, tolerance: float = 1e-6) -> bool:
        """True when the origin lies on the camera's forward (-z) axis."""
        x, y, z = self.to_camera_space(ORIGIN)
        return abs(x) <= tolerance and abs(y) <= tolerance and z < 0

    # ------------------------------------------------------------------ #
    # Internal
    # ------------------------------------------------------------------ #
    def _pick_up(self, direction: np.ndarray) -> Vector3:
        up = np.asarray(self.config.up_vector, dtype=float)
        if np.linalg.norm(np.cross(direction, up)) < 1e-9:
            return FALLBACK_UP
        return tuple(float(v) for v in up)

    def _accepts(self, position: Vector3) -> bool:
        if _distance(self.target, position) < 1e-9:
            self.logger.log_warning(f"Camera position {position} is on the origin; keeping previous view")
            return False
        return True

    def _update(self, position: Vector3) -> None:
        direction = np.asarray(self.target, dtype=float) - np.asarray(position, dtype=float)
        distance = _distance(self.target, position)
        if distance < 1e-9:
            self.logger.log_warning("Camera placed on the origin has nothing to aim at; keeping previous view")
            return

        self.up = self._pick_up(direction / distance)
        self.view_matrix = tuple(p.computeViewMatrix(
            cameraEyePosition=list(position),
            cameraTargetPosition=list(self.target),
            cameraUpVector=list(self.up),
        ))
        self.projection_matrix = tuple(p.computeProjectionMatrixFOV(
            fov=self.config.fov,
            aspect=self.config.aspect_ratio,
            nearVal=self.config.near_plane,
            farVal=self.config.far_plane,
        ))
        self.eye = tuple(position)
        self.update_count += 1
