"""
The workbench ties a configured scene together.

It builds the assembly, starts asset loading, mounts cubies as their assets
arrive, and owns the rotation controller, the camera and the renderer. UI
layers (panels, console, CLI) talk to the scene only through it.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, List, Optional, Set, Union

from PIL import Image

from cubieviz.control.camera import CameraController
from cubieviz.control.rotation import RotationController
from cubieviz.core.base import Axis, BaseRenderer, RotationReadout, coerce_number
from cubieviz.core.config import Config
from cubieviz.core.registry import RENDERER_REGISTRY
from cubieviz.scene.assets import AssetLibrary
from cubieviz.scene.builder import ASSEMBLY_GROUP, FAN_GROUP, Assembly, AssemblyBuilder
from cubieviz.scene.layout import GRID_LAYOUT
from cubieviz.scene.node_registry import NodeRegistry
from cubieviz.scene.nodes import PivotGroup
from cubieviz.utils.display import LiveLogger

import cubieviz.render  # noqa: F401  (registers the built-in renderers)


def parse_target(text: Union[str, int]) -> Hashable:
    """UI target text to a registry key: digits are cubie indices, anything else a group name."""
    if isinstance(text, int):
        return text
    text = str(text).strip()
    if text.lstrip("-").isdigit():
        return int(text)
    return text


class Workbench:
    """A live scene: assembly, registry, asset loading, controllers and renderer."""

    def __init__(self, config: Config, logger: Optional[LiveLogger] = None, table=GRID_LAYOUT):
        self.config = config
        self.logger = logger or LiveLogger(verbose=False)

        renderer_cls = RENDERER_REGISTRY.get(config.renderer.type)
        if renderer_cls is None:
            raise ValueError(
                f"Unknown renderer '{config.renderer.type}' "
                f"(available: {', '.join(sorted(RENDERER_REGISTRY))})"
            )
        self._renderer_cls = renderer_cls
        self._renderer: Optional[BaseRenderer] = None

        self.assembly: Assembly = AssemblyBuilder(config.assembly, config.assets, table).build()
        self.registry = NodeRegistry()
        for name, group in self.assembly.groups.items():
            self.registry.register(name, group)

        self.controller = RotationController(self.registry, self.logger, fan_axis=config.assembly.fan_axis)
        self.camera = CameraController(config.camera, logger=self.logger)
        self.assets = AssetLibrary(config.assets, self.logger)

        # cubies unmounted on purpose are not remounted by pump()
        self._detached: Set[int] = set()
        self.frame_count = 0

        self._command_handlers = {
            "rotate": self._cmd_rotate,
            "fan": self._cmd_fan,
            "camera": self._cmd_camera,
            "reset_camera": self._cmd_reset_camera,
            "state": self._cmd_state,
        }

        paths = self.assembly.asset_paths()
        if config.assets.preload:
            self.assets.preload(paths)
        else:
            for path in paths:
                self.assets.request(path)

        self.logger.log_action(
            "Scene built",
            f"{len(self.assembly.cubies)} cubies, grouping '{config.assembly.grouping}', "
            f"groups: {', '.join(self.assembly.groups)}",
        )

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    @property
    def renderer(self) -> BaseRenderer:
        if self._renderer is None:
            self._renderer = self._renderer_cls(self.config.renderer, self.config.lighting)
        return self._renderer

    def pump(self) -> List[int]:
        """
        Mount every cubie whose asset finished loading. Call once per frame.

        Returns:
            Indices mounted by this call
        """
        mounted = []
        for path, asset in self.assets.completed():
            for cubie in self.assembly.cubies_for_path(path):
                if cubie.is_mounted or cubie.index in self._detached:
                    continue
                cubie.mount(asset, self.registry, self.logger)
                mounted.append(cubie.index)
        if mounted:
            self.logger.log_info(f"Mounted cubies: {mounted}")
            if self.logger.verbose:
                self.logger.log_info("Scene hierarchy:\n" + "\n".join(self.describe_tree()))
        return mounted

    def wait_for_assets(self, timeout: Optional[float] = None) -> bool:
        """Block until loads finish, then mount. Returns False on timeout."""
        done = self.assets.wait(timeout=timeout)
        self.pump()
        for path, error in self.assets.failed().items():
            self.logger.log_warning(f"Cubies using {path} stay unmounted: {error}")
        return done

    def unmount(self, index: int) -> bool:
        cubie = self.assembly.cubies.get(index)
        if cubie is None or not cubie.unmount(self.registry):
            return False
        self._detached.add(index)
        self.controller.refresh(index)
        self.logger.log_info(f"Cubie {index} unmounted")
        return True

    def mount(self, index: int) -> bool:
        """Remount a cubie that was unmounted, if its asset is available."""
        cubie = self.assembly.cubies.get(index)
        if cubie is None or cubie.is_mounted:
            return False
        self._detached.discard(index)
        asset = self.assets.get(cubie.asset_path)
        if asset is None:
            return False
        return cubie.mount(asset, self.registry, self.logger)

    def frame(self) -> Image.Image:
        """One pass of the frame loop: mount what arrived, then draw."""
        self.pump()
        return self.render()

    def render(self) -> Image.Image:
        if self.camera.view_matrix is None:
            raise RuntimeError("Camera has no valid view; move it off the origin before rendering")
        image = self.renderer.render(self.assembly.root, self.camera)
        self.frame_count += 1
        return image

    def close(self) -> None:
        self.assets.close()
        self.camera.close()
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    # ------------------------------------------------------------------ #
    # Scene operations
    # ------------------------------------------------------------------ #
    @property
    def fan_target(self) -> PivotGroup:
        """The group the fan action turns: the hinge fan if there is one, else the whole assembly."""
        return self.assembly.group(FAN_GROUP) or self.assembly.assembly

    def rotate(self, target: Union[str, int], axis: Union[Axis, str], degree_text: Any) -> Optional[RotationReadout]:
        return self.controller.apply_rotation(parse_target(target), axis, degree_text)

    def fan(self, times: int = 1) -> RotationReadout:
        readout = self.controller.get_rotation(self.fan_target)
        for _ in range(times):
            readout = self.controller.step_group(self.fan_target)
        return readout

    def mounted_indices(self) -> List[int]:
        return sorted(i for i, c in self.assembly.cubies.items() if c.is_mounted)

    def targets(self) -> List[Hashable]:
        """Every addressable target: mounted cubie indices, then group names."""
        return self.mounted_indices() + list(self.assembly.groups)

    def describe_tree(self) -> List[str]:
        return ["  " * node.depth() + node.describe() for node in self.assembly.root.traverse()]

    def status(self) -> Dict[str, Any]:
        return {
            "scene": self.config.scene.name,
            "grouping": self.config.assembly.grouping,
            "cubies": len(self.assembly.cubies),
            "mounted": len(self.mounted_indices()),
            "pending_assets": len(self.assets.pending()),
            "failed_assets": len(self.assets.failed()),
            "camera": self.camera.state.position,
            "fan_rotation": self.controller.get_rotation(self.fan_target).format(),
            "frames": self.frame_count,
        }

    # ------------------------------------------------------------------ #
    # Command surface
    # ------------------------------------------------------------------ #
    def get_command_schemas(self) -> List[Dict[str, Any]]:
        """JSON schemas for the commands accepted by ``execute_command``."""
        def build_schema(name: str, desc: str, properties: Dict[str, Any], required: List[str]) -> Dict[str, Any]:
            return {
                "type": "function",
                "function": {
                    "name": name,
                    "description": desc,
                    "parameters": {
                        "type": "object",
                        "properties": properties,
                        "required": required,
                    },
                },
            }

        axis_schema = {"type": "string", "enum": ["x", "y", "z"]}
        return [
            build_schema(
                "rotate",
                "Set one axis of a cubie (by index) or a group (by name) to an absolute angle in degrees.",
                {
                    "target": {"type": "string", "description": f"Cubie index or group name, e.g. '5' or '{ASSEMBLY_GROUP}'."},
                    "axis": axis_schema,
                    "degrees": {"type": "string", "description": "Angle in degrees; malformed values count as 0."},
                },
                ["target", "axis", "degrees"],
            ),
            build_schema(
                "fan",
                "Advance the fan group by its fixed step.",
                {"times": {"type": "integer", "minimum": 1}},
                [],
            ),
            build_schema(
                "camera",
                "Move the camera; it keeps looking at the origin.",
                {"x": {"type": "number"}, "y": {"type": "number"}, "z": {"type": "number"}},
                ["x", "y", "z"],
            ),
            build_schema("reset_camera", "Return the camera to its home position.", {}, []),
            build_schema("state", "Show mounted cubies, groups and the camera position.", {}, []),
        ]

    def execute_command(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Dispatch a command by name."""
        handler = self._command_handlers.get(name)
        if not handler:
            return {"status": "error", "message": f"Unknown command '{name}'"}
        try:
            return handler(**(arguments or {}))
        except (TypeError, ValueError) as exc:
            return {"status": "error", "message": f"Command '{name}' failed: {exc}"}

    def _cmd_rotate(self, target, axis, degrees) -> Dict[str, Any]:
        readout = self.rotate(target, axis, degrees)
        if readout is None:
            return {"status": "ignored", "message": f"Target {target!r} is not mounted or axis {axis!r} is invalid"}
        return {"status": "ok", "target": parse_target(target), "rotation": readout.to_dict()}

    def _cmd_fan(self, times: int = 1) -> Dict[str, Any]:
        readout = self.fan(int(times))
        return {"status": "ok", "target": self.fan_target.name, "rotation": readout.to_dict()}

    def _cmd_camera(self, x, y, z) -> Dict[str, Any]:
        changed = self.camera.set_position(coerce_number(x), coerce_number(y), coerce_number(z))
        return {"status": "ok", "changed": changed, "position": list(self.camera.state.position)}

    def _cmd_reset_camera(self) -> Dict[str, Any]:
        changed = self.camera.reset()
        return {"status": "ok", "changed": changed, "position": list(self.camera.state.position)}

    def _cmd_state(self) -> Dict[str, Any]:
        state = self.status()
        state["camera"] = list(state["camera"])
        state["groups"] = {
            name: group.get_rotation().to_dict() for name, group in self.assembly.groups.items()
        }
        state["mounted_indices"] = self.mounted_indices()
        return {"status": "ok", **state}
