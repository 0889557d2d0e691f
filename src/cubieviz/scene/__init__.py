"""
Scene construction: layout table, nodes, registry, assets and the assembly builder.
"""

from cubieviz.scene.layout import GRID_LAYOUT, GRID_STEP, grid_position, shifted_position, validate_layout
from cubieviz.scene.nodes import SceneNode, CubieNode, PivotGroup
from cubieviz.scene.node_registry import NodeRegistry
from cubieviz.scene.assets import Asset, AssetInstance, AssetLibrary, load_asset
from cubieviz.scene.builder import Assembly, AssemblyBuilder, ASSEMBLY_GROUP, FAN_GROUP

__all__ = [
    "GRID_LAYOUT",
    "GRID_STEP",
    "grid_position",
    "shifted_position",
    "validate_layout",
    "SceneNode",
    "CubieNode",
    "PivotGroup",
    "NodeRegistry",
    "Asset",
    "AssetInstance",
    "AssetLibrary",
    "load_asset",
    "Assembly",
    "AssemblyBuilder",
    "ASSEMBLY_GROUP",
    "FAN_GROUP",
]
