"""
Core modules for the cubieviz harness.

This package contains the fundamental components:
- Rotation primitives (axes, per-axis angles, degree readouts)
- Base classes for renderers and grouping strategies
- Configuration management
- Registry for component discovery
"""

from cubieviz.core.base import (
    Axis,
    EulerAngles,
    RotationReadout,
    ZERO_READOUT,
    BaseRenderer,
    BaseGroupingStrategy,
    to_radians,
    to_degrees,
    parse_degrees,
    parse_number,
    coerce_number,
)

from cubieviz.core.config import Config, load_config, create_default_config, validate_config, SceneConfig, AssemblyConfig, AssetConfig, CameraConfig, LightingConfig, RendererConfig

from cubieviz.core.registry import register_grouping, register_renderer, GROUPING_REGISTRY, RENDERER_REGISTRY

__all__ = [
    "Axis",
    "EulerAngles",
    "RotationReadout",
    "ZERO_READOUT",
    "BaseRenderer",
    "BaseGroupingStrategy",
    "to_radians",
    "to_degrees",
    "parse_degrees",
    "parse_number",
    "coerce_number",
    "Config",
    "load_config",
    "create_default_config",
    "validate_config",
    "SceneConfig",
    "AssemblyConfig",
    "AssetConfig",
    "CameraConfig",
    "LightingConfig",
    "RendererConfig",
    "register_grouping",
    "register_renderer",
    "GROUPING_REGISTRY",
    "RENDERER_REGISTRY",
]
