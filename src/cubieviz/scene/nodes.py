"""
Scene-graph nodes: plain transform nodes, cubies and pivot groups.

Nodes only store their local transform. Composing transforms down the tree
is the render engine's job (see ``cubieviz.render.transforms``), so rotating
a pivot group never touches the stored positions of its children.
"""

from __future__ import annotations

import math
from typing import Iterator, List, Optional, Tuple, Union, TYPE_CHECKING

from cubieviz.core.base import Axis, EulerAngles, RotationReadout, Vector3, ZERO_READOUT
from cubieviz.utils.display import LiveLogger

if TYPE_CHECKING:
    from cubieviz.scene.assets import Asset, AssetInstance
    from cubieviz.scene.node_registry import NodeRegistry


DEFAULT_STEP = 0.2
FAN_STEP = math.pi / 6


def _as_vector(value) -> Vector3:
    x, y, z = value
    return (float(x), float(y), float(z))


class SceneNode:
    """A transform node with position, per-axis rotation, uniform scale and children."""

    def __init__(self, name: str = "", position: Vector3 = (0.0, 0.0, 0.0), scale: float = 1.0):
        self.name = name
        self.position: Vector3 = _as_vector(position)
        self.rotation = EulerAngles()
        self.scale = float(scale)
        self.parent: Optional[SceneNode] = None
        self.children: List[SceneNode] = []

    @property
    def is_mounted(self) -> bool:
        return True

    def add_child(self, child: "SceneNode") -> "SceneNode":
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove_child(self, child: "SceneNode") -> None:
        if child in self.children:
            self.children.remove(child)
            child.parent = None

    def traverse(self) -> Iterator["SceneNode"]:
        """Depth-first, parents before children, in child order."""
        yield self
        for child in self.children:
            yield from child.traverse()

    def depth(self) -> int:
        level, node = 0, self.parent
        while node is not None:
            level, node = level + 1, node.parent
        return level

    def describe(self) -> str:
        x, y, z = self.position
        return f"{type(self).__name__} '{self.name}' position=({x:g}, {y:g}, {z:g})"

    def __repr__(self) -> str:
        return f"<{self.describe()}>"


class CubieNode(SceneNode):
    """
    One puzzle piece.

    The node exists from scene construction but only behaves as a live
    handle once its asset has been mounted. Before that (and after unmount)
    setters do nothing and the readout is zero.
    """

    def __init__(self, index: int, asset_path: str, position: Vector3,
                 grid_coord: Optional[Tuple[int, int, int]] = None,
                 scale: float = 1.5,
                 initial_rotation: Vector3 = (0.0, 0.0, 0.0),
                 default_step: float = DEFAULT_STEP):
        super().__init__(name=f"cubie_{index}", position=position, scale=scale)
        self.index = index
        self.asset_path = asset_path
        self.grid_coord = grid_coord
        self.initial_rotation: Vector3 = _as_vector(initial_rotation)
        self.default_step = default_step
        self.asset: Optional[AssetInstance] = None
        self.mount_count = 0

    @property
    def is_mounted(self) -> bool:
        return self.asset is not None

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def mount(self, asset: Asset, registry: NodeRegistry,
              logger: Optional[LiveLogger] = None) -> bool:
        """
        Attach a loaded asset and register this node under its index.

        The asset's bounding box is centered on the node's origin once per
        mount so rotations spin the geometry about its own center.

        Returns:
            False if the node was already mounted
        """
        if self.is_mounted:
            return False

        instance = asset.instance()
        center = instance.center_on_origin()
        self.asset = instance
        self.rotation = EulerAngles.from_degrees(self.initial_rotation)
        registry.register(self.index, self)
        self.mount_count += 1

        if logger is not None:
            cx, cy, cz = (float(v) for v in center)
            logger.log_info(f"Cubie {self.index} mounted; model center ({cx:.3f}, {cy:.3f}, {cz:.3f})")
        return True

    def unmount(self, registry: NodeRegistry) -> bool:
        """Detach the asset and drop the registry entry. Returns False if not mounted."""
        if not self.is_mounted:
            return False
        self.asset = None
        self.rotation = EulerAngles()
        if registry.resolve(self.index) is self:
            registry.unregister(self.index)
        return True

    # ------------------------------------------------------------------ #
    # Rotation handle
    # ------------------------------------------------------------------ #
    def set_axis_rotation(self, axis: Union[Axis, str], angle: Optional[float] = None) -> None:
        """Overwrite the stored angle (radians) of one axis."""
        if not self.is_mounted:
            return
        self.rotation.set(axis, self.default_step if angle is None else angle)

    def rotate_x_by_step(self, angle: Optional[float] = None) -> None:
        self.set_axis_rotation(Axis.X, angle)

    def rotate_y_by_step(self, angle: Optional[float] = None) -> None:
        self.set_axis_rotation(Axis.Y, angle)

    def rotate_z_by_step(self, angle: Optional[float] = None) -> None:
        self.set_axis_rotation(Axis.Z, angle)

    # The negative variants set the given value unchanged, like the positive ones.
    def rotate_neg_x_by_step(self, angle: Optional[float] = None) -> None:
        self.set_axis_rotation(Axis.X, angle)

    def rotate_neg_y_by_step(self, angle: Optional[float] = None) -> None:
        self.set_axis_rotation(Axis.Y, angle)

    def rotate_neg_z_by_step(self, angle: Optional[float] = None) -> None:
        self.set_axis_rotation(Axis.Z, angle)

    def get_rotation(self) -> RotationReadout:
        if not self.is_mounted:
            return ZERO_READOUT
        return self.rotation.to_readout()

    def describe(self) -> str:
        state = "mounted" if self.is_mounted else "pending"
        return f"{super().describe()} index={self.index} [{state}]"


class PivotGroup(SceneNode):
    """
    A composite node that rotates its children about its own position.

    Children are attached with their local offset set to the inverse of the
    pivot, so ``child.position + group.position`` stays the child's intended
    position in the group's parent frame.
    """

    def __init__(self, name: str, position: Vector3 = (0.0, 0.0, 0.0),
                 scale: float = 1.0, fan_step: float = FAN_STEP):
        super().__init__(name=name, position=position, scale=scale)
        self.fan_step = fan_step

    def attach(self, child: SceneNode, world_position: Vector3) -> SceneNode:
        """
        Add a child so it sits at ``world_position`` in this group's parent frame.
        """
        wx, wy, wz = _as_vector(world_position)
        px, py, pz = self.position
        child.position = (wx - px, wy - py, wz - pz)
        return self.add_child(child)

    def set_group_rotation(self, axis: Union[Axis, str], angle: float) -> None:
        """Overwrite the group's own angle (radians) of one axis."""
        self.rotation.set(axis, angle)

    def set_axis_rotation(self, axis: Union[Axis, str], angle: Optional[float] = None) -> None:
        self.set_group_rotation(axis, DEFAULT_STEP if angle is None else angle)

    def rotate_by_step(self, axis: Union[Axis, str] = Axis.Z, step: Optional[float] = None) -> float:
        """
        Advance one axis by a fixed step. Accumulates without wrapping.

        Returns:
            The new angle in radians
        """
        self.rotation.add(axis, self.fan_step if step is None else step)
        return self.rotation.get(axis)

    def get_rotation(self) -> RotationReadout:
        return self.rotation.to_readout()

    def cubies(self) -> List[CubieNode]:
        """Every cubie below this group, in traversal order."""
        return [node for node in self.traverse() if isinstance(node, CubieNode)]
