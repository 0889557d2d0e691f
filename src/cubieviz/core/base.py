"""
Base types and interfaces for the cubieviz harness.

This module defines the rotation primitives shared by every scene node
(axes, per-axis angle triples, degree readouts) and the abstract interfaces
for renderers and grouping strategies.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple, Union, TYPE_CHECKING
from dataclasses import dataclass
from enum import Enum
from abc import ABC, abstractmethod
import math

from PIL import Image

if TYPE_CHECKING:
    from cubieviz.core.config import AssemblyConfig, RendererConfig, CameraConfig, LightingConfig
    from cubieviz.scene.nodes import SceneNode, PivotGroup, CubieNode
    from cubieviz.control.camera import CameraController


Vector3 = Tuple[float, float, float]


class Axis(Enum):
    """Rotation axes of a scene node."""
    X: str = "x"
    Y: str = "y"
    Z: str = "z"

    @classmethod
    def parse(cls, value: Union["Axis", str]) -> "Axis":
        """Accept an Axis or a case-insensitive axis name."""
        if isinstance(value, Axis):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Unknown axis: {value!r} (expected one of x, y, z)")


def to_radians(degrees: float) -> float:
    """Convert degrees to radians."""
    return degrees * math.pi / 180


def to_degrees(radians: float) -> float:
    """Convert radians to degrees."""
    return radians * 180 / math.pi


def parse_number(text: Any) -> Optional[float]:
    """
    Parse free UI text into a finite number.

    Empty text counts as zero. Returns None when the text is not a finite
    number.
    """
    if isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        try:
            value = float(text)
        except OverflowError:
            return None
    else:
        stripped = str(text).strip()
        if not stripped:
            return 0.0
        try:
            value = float(stripped)
        except ValueError:
            return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


parse_degrees = parse_number


def coerce_number(text: Any) -> float:
    """Parse UI text, treating anything malformed as 0."""
    value = parse_number(text)
    return 0.0 if value is None else value


@dataclass
class EulerAngles:
    """
    Three independent per-axis angles in radians.

    Each axis is stored and overwritten on its own. The triple is NOT a
    combined 3D orientation: when more than one axis is non-zero the rendered
    result depends on the order in which the engine composes the axes
    (X, then Y, then Z).
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def get(self, axis: Union[Axis, str]) -> float:
        return getattr(self, Axis.parse(axis).value)

    def set(self, axis: Union[Axis, str], value: float) -> None:
        setattr(self, Axis.parse(axis).value, float(value))

    def add(self, axis: Union[Axis, str], delta: float) -> None:
        name = Axis.parse(axis).value
        setattr(self, name, getattr(self, name) + float(delta))

    def as_tuple(self) -> Vector3:
        return (self.x, self.y, self.z)

    def to_readout(self) -> "RotationReadout":
        return RotationReadout(
            x=to_degrees(self.x),
            y=to_degrees(self.y),
            z=to_degrees(self.z),
        )

    @classmethod
    def from_degrees(cls, degrees: Vector3) -> "EulerAngles":
        x, y, z = degrees
        return cls(to_radians(x), to_radians(y), to_radians(z))


@dataclass(frozen=True)
class RotationReadout:
    """UI-facing rotation in degrees, derived from a node's stored radians."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> Vector3:
        return (self.x, self.y, self.z)

    def get(self, axis: Union[Axis, str]) -> float:
        return getattr(self, Axis.parse(axis).value)

    def to_dict(self) -> Dict[str, float]:
        """Convert readout to dictionary representation."""
        return {"x": self.x, "y": self.y, "z": self.z}

    def format(self, precision: int = 1) -> str:
        return (
            f"X: {self.x:.{precision}f}°, "
            f"Y: {self.y:.{precision}f}°, "
            f"Z: {self.z:.{precision}f}°"
        )


ZERO_READOUT = RotationReadout()


class BaseRenderer(ABC):
    """Base class for render engines that draw the scene graph."""

    def __init__(self, config: RendererConfig, lighting: LightingConfig):
        self.config: RendererConfig = config
        self.lighting: LightingConfig = lighting

    @abstractmethod
    def render(self, root: SceneNode, camera: CameraController) -> Image.Image:
        """Draw one frame from the current node transforms."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release engine resources."""
        pass


class BaseGroupingStrategy(ABC):
    """Base class for the ways cubies are composed under pivot groups."""

    description: str = ""

    def __init__(self, config: AssemblyConfig):
        self.config: AssemblyConfig = config

    @abstractmethod
    def compose(self, assembly: PivotGroup, cubies: List[CubieNode],
                world_positions: Dict[int, Vector3]) -> Dict[str, PivotGroup]:
        """
        Attach cubies to the assembly, creating intermediate pivot groups.

        Returns:
            Named pivot groups that the UI may address, excluding the assembly.
        """
        pass
