"""
Assembly construction.

One builder covers every arrangement of the puzzle: the cubie count, the
layout table and the grouping strategy are parameters. Grouping strategies
register themselves by name and decide which pivot groups sit between the
assembly group and the cubies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from cubieviz.core.base import Axis, BaseGroupingStrategy, Vector3, to_radians
from cubieviz.core.config import AssemblyConfig, AssetConfig
from cubieviz.core.registry import GROUPING_REGISTRY, register_grouping
from cubieviz.scene.layout import GRID_LAYOUT, GRID_STEP, GridCoord, grid_position, shifted_position
from cubieviz.scene.nodes import CubieNode, PivotGroup, SceneNode


ASSEMBLY_GROUP = "assembly"
FAN_GROUP = "fan"

_AXIS_INDEX = {Axis.X: 0, Axis.Y: 1, Axis.Z: 2}


@dataclass
class Assembly:
    """The constructed scene: root node, assembly group, cubies and named groups."""
    root: SceneNode
    assembly: PivotGroup
    cubies: Dict[int, CubieNode]
    groups: Dict[str, PivotGroup] = field(default_factory=dict)
    world_positions: Dict[int, Vector3] = field(default_factory=dict)

    def group(self, name: str) -> Optional[PivotGroup]:
        return self.groups.get(name)

    def asset_paths(self) -> List[str]:
        """Unique asset paths in cubie index order."""
        seen: Dict[str, None] = {}
        for index in sorted(self.cubies):
            seen.setdefault(self.cubies[index].asset_path, None)
        return list(seen)

    def cubies_for_path(self, path: str) -> List[CubieNode]:
        return [self.cubies[i] for i in sorted(self.cubies) if self.cubies[i].asset_path == path]


@register_grouping("independent")
class IndependentGrouping(BaseGroupingStrategy):
    description = "Every cubie hangs directly off the assembly group"

    def compose(self, assembly, cubies, world_positions):
        for cubie in cubies:
            assembly.attach(cubie, world_positions[cubie.index])
        return {}


@register_grouping("layers")
class LayerGrouping(BaseGroupingStrategy):
    description = "One pivot group per slice along layer_axis, pivoting on the slice center"

    def compose(self, assembly, cubies, world_positions):
        axis = Axis.parse(self.config.layer_axis)
        slot = _AXIS_INDEX[axis]
        levels = sorted({world_positions[c.index][slot] for c in cubies})

        groups: Dict[str, PivotGroup] = {}
        for k, level in enumerate(levels):
            pivot = [0.0, 0.0, 0.0]
            pivot[slot] = level
            group = PivotGroup(f"layer_{axis.value}{k}", fan_step=to_radians(self.config.fan_step_degrees))
            assembly.attach(group, tuple(pivot))
            for cubie in cubies:
                if world_positions[cubie.index][slot] == level:
                    group.attach(cubie, world_positions[cubie.index])
            groups[group.name] = group
        return groups


@register_grouping("hinge")
class HingeGrouping(BaseGroupingStrategy):
    description = "Hinge members swing together in a fan group; the rest stay independent"

    def compose(self, assembly, cubies, world_positions):
        axis = Axis.parse(self.config.hinge_axis)
        slot = _AXIS_INDEX[axis]
        members = [i for i in self.config.hinge_members if any(c.index == i for c in cubies)]

        fan = PivotGroup(FAN_GROUP, fan_step=to_radians(self.config.fan_step_degrees))
        assembly.attach(fan, (0.0, 0.0, 0.0))
        groups: Dict[str, PivotGroup] = {FAN_GROUP: fan}

        by_index = {c.index: c for c in cubies}
        for k, index in enumerate(members):
            # alternate the hinge edge: first member hinges on its low side, second on its high side
            side = -1.0 if k % 2 == 0 else 1.0
            target = world_positions[index]
            pivot = list(target)
            pivot[slot] += side * GRID_STEP / 2.0
            hinge = PivotGroup(f"hinge_{index}")
            fan.attach(hinge, tuple(pivot))
            hinge.attach(by_index[index], target)
            groups[hinge.name] = hinge

        for cubie in cubies:
            if cubie.index not in members:
                assembly.attach(cubie, world_positions[cubie.index])
        return groups


class AssemblyBuilder:
    """Builds the scene graph for a given assembly configuration."""

    def __init__(self, assembly_config: AssemblyConfig, asset_config: AssetConfig,
                 table: Mapping[int, GridCoord] = GRID_LAYOUT):
        self.config = assembly_config
        self.assets = asset_config
        self.table = table

    def build(self) -> Assembly:
        strategy_cls = GROUPING_REGISTRY.get(self.config.grouping)
        if strategy_cls is None:
            raise ValueError(
                f"Unknown grouping '{self.config.grouping}' "
                f"(available: {', '.join(sorted(GROUPING_REGISTRY))})"
            )

        root = SceneNode("scene")
        assembly = PivotGroup(ASSEMBLY_GROUP, fan_step=to_radians(self.config.fan_step_degrees))
        root.add_child(assembly)

        indices = range(1, self.config.cubie_count + 1)
        world_positions = {i: shifted_position(i, self.config.shift, self.table) for i in indices}
        cubies = [
            CubieNode(
                index=i,
                asset_path=self.assets.path_for(i),
                position=world_positions[i],
                grid_coord=grid_position(i, self.table),
                scale=self.config.scale,
                initial_rotation=self.config.initial_rotation,
                default_step=self.config.default_step,
            )
            for i in indices
        ]

        strategy = strategy_cls(self.config)
        groups = {ASSEMBLY_GROUP: assembly}
        groups.update(strategy.compose(assembly, cubies, world_positions))

        return Assembly(
            root=root,
            assembly=assembly,
            cubies={c.index: c for c in cubies},
            groups=groups,
            world_positions=world_positions,
        )
