"""
Headless control widgets.

These model the on-screen controls as plain state holders: text inputs keep
whatever the user typed, readouts always come from the controller's read-back
rather than from the inputs.
"""

from __future__ import annotations

from typing import Dict, Hashable, List, Optional, TYPE_CHECKING

from cubieviz.control.camera import CameraController
from cubieviz.control.rotation import RotationController, Target, target_key
from cubieviz.core.base import Axis, RotationReadout, coerce_number
from cubieviz.scene.nodes import PivotGroup

if TYPE_CHECKING:
    from cubieviz.workbench import Workbench


AXES = (Axis.X, Axis.Y, Axis.Z)


class RotationPanel:
    """Three degree inputs and a readout for one target."""

    def __init__(self, target: Target, controller: RotationController, label: Optional[str] = None):
        self.target = target
        self.controller = controller
        self.label = label or f"Cubie {target}"
        self.inputs: Dict[Axis, str] = {axis: "0" for axis in AXES}

    def on_input(self, axis, text: str) -> Optional[RotationReadout]:
        """Handle an edit of one axis input."""
        try:
            axis = Axis.parse(axis)
        except ValueError:
            return None
        self.inputs[axis] = text
        return self.controller.apply_rotation(self.target, axis, text)

    @property
    def readout(self) -> RotationReadout:
        return self.controller.readout(self.target)

    def readout_text(self) -> str:
        return f"Current Rotation → {self.readout.format()}"

    def render_lines(self) -> List[str]:
        fields = "  ".join(f"{axis.value.upper()}[{self.inputs[axis]}]" for axis in AXES)
        return [f"{self.label}: {fields}", f"  {self.readout_text()}"]


class CameraPanel:
    """Three coordinate inputs and a reset button for the camera."""

    def __init__(self, camera: CameraController):
        self.camera = camera
        self.inputs: Dict[Axis, str] = {}
        self._sync_inputs()

    def on_input(self, axis, text: str) -> bool:
        changed = self.camera.set_axis_text(axis, text)
        self._sync_inputs()
        return changed

    def submit(self, x_text: str, y_text: str, z_text: str) -> bool:
        """Apply all three inputs as one camera move."""
        values = [coerce_number(text) for text in (x_text, y_text, z_text)]
        changed = self.camera.set_position(*values)
        self._sync_inputs()
        return changed

    def reset(self) -> bool:
        changed = self.camera.reset()
        self._sync_inputs()
        return changed

    def render_lines(self) -> List[str]:
        x, y, z = self.camera.state.position
        return [f"Camera: X[{x:g}]  Y[{y:g}]  Z[{z:g}]  (looking at the origin)"]

    def _sync_inputs(self) -> None:
        for axis, value in zip(AXES, self.camera.state.position):
            self.inputs[axis] = f"{value:g}"


class FanButton:
    """Steps a pivot group by its fan step. Holds no rotation state of its own."""

    def __init__(self, group: PivotGroup, controller: RotationController, label: str = "Fan"):
        self.group = group
        self.controller = controller
        self.label = label
        self.presses = 0

    def press(self) -> Optional[RotationReadout]:
        self.presses += 1
        return self.controller.step_group(self.group)

    def render_lines(self) -> List[str]:
        readout = self.controller.readout(self.group)
        return [f"[{self.label}] {self.group.name}: {readout.format()}"]


class ControlPanel:
    """Every control for a workbench: one rotation panel per target, camera and fan."""

    def __init__(self, workbench: "Workbench"):
        self.workbench = workbench
        self.rotation_panels: Dict[Hashable, RotationPanel] = {}
        self.camera_panel = CameraPanel(workbench.camera)
        self.fan_button = FanButton(workbench.fan_target, workbench.controller)
        self.sync()

    def sync(self) -> None:
        """Add panels for targets that became addressable since the last sync."""
        for key in self.workbench.targets():
            if key in self.rotation_panels:
                continue
            label = f"Cubie {key}" if isinstance(key, int) else f"Group {key}"
            self.rotation_panels[key] = RotationPanel(key, self.workbench.controller, label)

    def panel(self, target: Target) -> Optional[RotationPanel]:
        key = target_key(target) if not isinstance(target, (int, str)) else target
        return self.rotation_panels.get(key)

    def readouts(self) -> Dict[Hashable, RotationReadout]:
        return {key: self.workbench.controller.readout(key) for key in self.rotation_panels}

    def render_lines(self, targets: Optional[List[Hashable]] = None) -> List[str]:
        lines: List[str] = []
        keys = targets if targets is not None else list(self.rotation_panels)
        for key in keys:
            panel = self.rotation_panels.get(key)
            if panel is None:
                lines.append(f"{key}: no panel")
                continue
            lines.extend(panel.render_lines())
        lines.extend(self.fan_button.render_lines())
        lines.extend(self.camera_panel.render_lines())
        return lines
