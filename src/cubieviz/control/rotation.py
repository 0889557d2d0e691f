"""
Rotation controller: turns UI rotation events into node mutations.

Every mutation is followed by an immediate read-back, so the readout kept
for display is always what the node actually stores rather than an echo of
the input.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Optional, Tuple, Union

from cubieviz.core.base import Axis, RotationReadout, ZERO_READOUT, parse_degrees, to_radians
from cubieviz.scene.node_registry import NodeRegistry
from cubieviz.scene.nodes import CubieNode, PivotGroup, SceneNode
from cubieviz.utils.display import LiveLogger


Target = Union[Hashable, SceneNode]


def target_key(node: SceneNode) -> Hashable:
    """Display key for a node: its index for cubies, its name otherwise."""
    if isinstance(node, CubieNode):
        return node.index
    return node.name


class RotationController:
    """
    Applies (target, axis, degrees) events.

    Targets are registry keys (cubie index or group name) or a directly held
    node, e.g. the whole assembly. Unresolved targets and malformed numbers
    never raise: the first is ignored, the second is read as 0.
    """

    def __init__(self, registry: NodeRegistry, logger: Optional[LiveLogger] = None,
                 fan_axis: Union[Axis, str] = Axis.Z):
        self.registry = registry
        self.logger = logger or LiveLogger(verbose=False)
        self.fan_axis = Axis.parse(fan_axis)
        self.display_state: Dict[Hashable, RotationReadout] = {}

    def apply_rotation(self, target: Target, axis: Union[Axis, str], degree_text: Any) -> Optional[RotationReadout]:
        """
        Set one axis of the target to an absolute angle given in degrees.

        Args:
            target: Registry key or node
            axis: "x", "y", "z" or an Axis
            degree_text: Free UI text (or a number)

        Returns:
            The read-back readout, or None if nothing was applied
        """
        degrees = parse_degrees(degree_text)
        if degrees is None:
            self.logger.log_warning(f"Rotation input {degree_text!r} is not a number; using 0")
            degrees = 0.0
        radians = to_radians(degrees)

        key, node = self._resolve(target)
        if node is None:
            self.logger.log_warning(f"No node mounted for target {key!r}; rotation ignored")
            return None

        try:
            axis = Axis.parse(axis)
        except ValueError as e:
            self.logger.log_warning(f"{e}; rotation ignored")
            return None

        node.set_axis_rotation(axis, radians)
        return self._refresh(key, node)

    def step_group(self, target: Target, axis: Optional[Union[Axis, str]] = None,
                   step: Optional[float] = None) -> Optional[RotationReadout]:
        """
        The fixed-step group action: advance a pivot group by its fan step.

        Repeated activation keeps accumulating; angles are not wrapped.
        """
        key, node = self._resolve(target)
        if not isinstance(node, PivotGroup):
            self.logger.log_warning(f"Target {key!r} is not a mounted pivot group; step ignored")
            return None

        try:
            axis = Axis.parse(axis) if axis is not None else self.fan_axis
        except ValueError as e:
            self.logger.log_warning(f"{e}; step ignored")
            return None

        node.rotate_by_step(axis, step)
        return self._refresh(key, node)

    def get_rotation(self, target: Target) -> RotationReadout:
        """Read a target's current rotation; zeros when it is not mounted."""
        _, node = self._resolve(target)
        if node is None:
            return ZERO_READOUT
        return node.get_rotation()

    def readout(self, target: Target) -> RotationReadout:
        """The last readout published for a target."""
        key, _ = self._resolve(target)
        return self.display_state.get(key, ZERO_READOUT)

    def refresh(self, target: Target) -> RotationReadout:
        """Re-read a target into the display state without mutating it."""
        key, node = self._resolve(target)
        if node is None:
            self.display_state.pop(key, None)
            return ZERO_READOUT
        return self._refresh(key, node)

    def _resolve(self, target: Target) -> Tuple[Hashable, Optional[SceneNode]]:
        if isinstance(target, SceneNode):
            return target_key(target), target
        return target, self.registry.resolve(target)

    def _refresh(self, key: Hashable, node: SceneNode) -> RotationReadout:
        readout = node.get_rotation()
        self.display_state[key] = readout
        return readout
