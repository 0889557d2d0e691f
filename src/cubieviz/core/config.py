"""
Configuration management for the cubieviz harness.

This module handles loading and validation of YAML configuration files and
provides typed configuration objects for the assembly, assets, camera,
lighting and renderer.
"""

import os
import yaml
from typing import Any, Dict, Optional, List, Tuple
from dataclasses import dataclass, field
from pathlib import Path

from cubieviz.core.base import Axis
from cubieviz.core.registry import GROUPING_REGISTRY, RENDERER_REGISTRY


def _is_triple(value: Any) -> bool:
    return (
        isinstance(value, (tuple, list))
        and len(value) == 3
        and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)
    )


@dataclass
class SceneConfig:
    """General scene settings."""
    name: str = "rubik_assembly"

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("name must be a non-empty string")


@dataclass
class AssemblyConfig:
    """How cubies are laid out and grouped."""
    cubie_count: int = 27
    shift: Tuple[float, float, float] = (3.0, 3.0, 3.0)
    scale: float = 1.5
    grouping: str = "independent"
    layer_axis: str = "y"
    hinge_members: List[int] = field(default_factory=lambda: [1, 2])
    hinge_axis: str = "x"
    fan_axis: str = "z"
    fan_step_degrees: float = 30.0
    initial_rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    default_step: float = 0.2

    def __post_init__(self):
        if not isinstance(self.cubie_count, int) or not 1 <= self.cubie_count <= 27:
            raise ValueError("cubie_count must be an integer between 1 and 27")
        if not _is_triple(self.shift):
            raise ValueError("shift must be a tuple of 3 numbers")
        self.shift = tuple(float(v) for v in self.shift)
        if not isinstance(self.scale, (float, int)) or self.scale <= 0:
            raise ValueError("scale must be a positive number")
        if not isinstance(self.grouping, str) or not self.grouping:
            raise ValueError("grouping must be a non-empty string")
        for name in ("layer_axis", "hinge_axis", "fan_axis"):
            Axis.parse(getattr(self, name))
        if not isinstance(self.hinge_members, (list, tuple)):
            raise ValueError("hinge_members must be a list of cubie indices")
        # members beyond cubie_count only matter when the hinge grouping is used
        limit = self.cubie_count if self.grouping == "hinge" else 27
        for index in self.hinge_members:
            if isinstance(index, bool) or not isinstance(index, int) or not 1 <= index <= limit:
                raise ValueError(f"hinge member {index!r} is not a cubie index in 1..{limit}")
        self.hinge_members = list(self.hinge_members)
        if not isinstance(self.fan_step_degrees, (float, int)):
            raise ValueError("fan_step_degrees must be a number")
        if not _is_triple(self.initial_rotation):
            raise ValueError("initial_rotation must be a tuple of 3 numbers (degrees)")
        self.initial_rotation = tuple(float(v) for v in self.initial_rotation)
        if not isinstance(self.default_step, (float, int)):
            raise ValueError("default_step must be a number")


@dataclass
class AssetConfig:
    """Where cubie meshes come from and how they are loaded."""
    path_pattern: str = "builtin://cubie/{index}"
    preload: bool = True
    max_workers: int = 4
    cubie_size: float = 1.9

    def __post_init__(self):
        if not isinstance(self.path_pattern, str) or not self.path_pattern:
            raise ValueError("path_pattern must be a non-empty string")
        if not isinstance(self.max_workers, int) or self.max_workers <= 0:
            raise ValueError("max_workers must be a positive integer")
        if not isinstance(self.cubie_size, (float, int)) or self.cubie_size <= 0:
            raise ValueError("cubie_size must be a positive number")

    def path_for(self, index: int) -> str:
        return self.path_pattern.format(index=index)


@dataclass
class CameraConfig:
    """Camera configuration for scene rendering."""
    position: Tuple[float, float, float] = (30.0, 10.0, 10.0)
    up_vector: Tuple[float, float, float] = (0.0, 1.0, 0.0)
    fov: float = 50.0
    aspect_ratio: float = 1.0
    near_plane: float = 0.1
    far_plane: float = 1000.0
    image_width: int = 512
    image_height: int = 512

    def __post_init__(self):
        if not _is_triple(self.position):
            raise ValueError("position must be a tuple of 3 floats")
        if not _is_triple(self.up_vector):
            raise ValueError("up_vector must be a tuple of 3 floats")
        self.position = tuple(float(v) for v in self.position)
        self.up_vector = tuple(float(v) for v in self.up_vector)
        if not isinstance(self.fov, (float, int)) or self.fov <= 0:
            raise ValueError("fov must be a positive number")
        if not isinstance(self.aspect_ratio, (float, int)) or self.aspect_ratio <= 0:
            raise ValueError("aspect_ratio must be a positive number")
        if not isinstance(self.near_plane, (float, int)) or self.near_plane <= 0:
            raise ValueError("near_plane must be a positive number")
        if not isinstance(self.far_plane, (float, int)) or self.far_plane <= self.near_plane:
            raise ValueError("far_plane must be a number greater than near_plane")
        if not isinstance(self.image_width, int) or self.image_width <= 0:
            raise ValueError("image_width must be a positive integer")
        if not isinstance(self.image_height, int) or self.image_height <= 0:
            raise ValueError("image_height must be a positive integer")


@dataclass
class LightingConfig:
    """Scene lights: one ambient term plus one directional light."""
    ambient: float = 0.5
    direction: Tuple[float, float, float] = (5.0, 5.0, 5.0)
    intensity: float = 1.5

    def __post_init__(self):
        if not isinstance(self.ambient, (float, int)) or self.ambient < 0:
            raise ValueError("ambient must be a non-negative number")
        if not _is_triple(self.direction):
            raise ValueError("direction must be a tuple of 3 floats")
        self.direction = tuple(float(v) for v in self.direction)
        if not isinstance(self.intensity, (float, int)) or self.intensity < 0:
            raise ValueError("intensity must be a non-negative number")


@dataclass
class RendererConfig:
    """Configuration for the render engine."""
    type: str = "pybullet"
    background: str = "#242424"

    def __post_init__(self):
        if not isinstance(self.type, str) or not self.type:
            raise ValueError("type must be a non-empty string")
        if not isinstance(self.background, str) or not self.background.startswith("#") or len(self.background) != 7:
            raise ValueError("background must be a color like '#242424'")


@dataclass
class Config:
    """Main configuration object."""
    scene: SceneConfig = field(default_factory=SceneConfig)
    assembly: AssemblyConfig = field(default_factory=AssemblyConfig)
    assets: AssetConfig = field(default_factory=AssetConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    lighting: LightingConfig = field(default_factory=LightingConfig)
    renderer: RendererConfig = field(default_factory=RendererConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        return cls(
            scene=SceneConfig(**(data.get("scene") or {})),
            assembly=AssemblyConfig(**(data.get("assembly") or {})),
            assets=AssetConfig(**(data.get("assets") or {})),
            camera=CameraConfig(**(data.get("camera") or {})),
            lighting=LightingConfig(**(data.get("lighting") or {})),
            renderer=RendererConfig(**(data.get("renderer") or {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Config to dictionary with YAML-friendly values."""
        def plain(section) -> Dict[str, Any]:
            return {
                k: list(v) if isinstance(v, tuple) else v
                for k, v in section.__dict__.items()
            }

        return {
            "scene": plain(self.scene),
            "assembly": plain(self.assembly),
            "assets": plain(self.assets),
            "camera": plain(self.camera),
            "lighting": plain(self.lighting),
            "renderer": plain(self.renderer),
        }


def load_config(config_path: str) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
        ValueError: If the file is empty or holds invalid values
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML config: {e}")

    if not data:
        raise ValueError("Configuration file is empty")
    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping at the top level")

    try:
        return Config.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error creating config from data: {e}")


def create_default_config(output_path: str = "config.yaml") -> Config:
    """
    Create a default configuration file.

    Args:
        output_path: Path where to save the default config

    Returns:
        Default Config object
    """
    config = Config()

    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)

    return config


def validate_config(config: Config) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation messages
    """
    issues = []

    # Make sure the strategy and renderer modules have registered themselves
    import cubieviz.scene.builder  # noqa: F401
    import cubieviz.render  # noqa: F401

    if config.assembly.grouping not in GROUPING_REGISTRY:
        issues.append(
            f"ERROR: Unknown grouping '{config.assembly.grouping}' "
            f"(available: {', '.join(sorted(GROUPING_REGISTRY))})"
        )

    if config.renderer.type not in RENDERER_REGISTRY:
        issues.append(
            f"ERROR: Unknown renderer '{config.renderer.type}' "
            f"(available: {', '.join(sorted(RENDERER_REGISTRY))})"
        )

    if config.assembly.grouping == "hinge" and not config.assembly.hinge_members:
        issues.append("WARNING: hinge grouping without hinge_members leaves the fan group empty")

    if len(set(config.assembly.hinge_members)) != len(config.assembly.hinge_members):
        issues.append("ERROR: hinge_members contains duplicate indices")

    if "{index}" not in config.assets.path_pattern:
        issues.append("WARNING: assets.path_pattern has no '{index}' placeholder; every cubie loads the same asset")

    pattern = config.assets.path_pattern
    if not pattern.startswith("builtin://") and "{index}" not in pattern and not os.path.exists(pattern):
        issues.append(f"WARNING: Asset file does not exist: {pattern}")

    if sum(abs(v) for v in config.camera.position) == 0:
        issues.append("ERROR: camera.position cannot be the origin (the camera aims at the origin)")

    if config.camera.far_plane < 50:
        issues.append("WARNING: camera.far_plane is small; distant cubies may be clipped")

    if config.assembly.fan_step_degrees == 0:
        issues.append("WARNING: fan_step_degrees is 0; the fan action will not move anything")

    return issues
