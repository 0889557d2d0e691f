"""
Offscreen rendering through pybullet's TinyRenderer.

Each mounted cubie becomes one static, collision-free multibody whose visual
shape is the cubie's mesh. Every frame the bodies are moved to the composed
world transforms and one camera image is captured.
"""

from typing import Dict, Tuple

import numpy as np
import pybullet as p
from PIL import Image

from cubieviz.control.camera import CameraController
from cubieviz.core.base import BaseRenderer
from cubieviz.core.registry import register_renderer
from cubieviz.render.transforms import decompose, matrix_to_quaternion, mounted_cubies
from cubieviz.scene.assets import hex_to_rgba
from cubieviz.scene.nodes import CubieNode, SceneNode


@register_renderer("pybullet")
class PyBulletRenderer(BaseRenderer):
    """Headless pybullet renderer (DIRECT mode, TinyRenderer)."""

    def __init__(self, config, lighting):
        super().__init__(config, lighting)
        self.client_id = p.connect(p.DIRECT)
        self.bodies: Dict[int, int] = {}
        # index -> (node, mount_count) the body was built from
        self._sources: Dict[int, Tuple[CubieNode, int]] = {}

    def render(self, root: SceneNode, camera: CameraController) -> Image.Image:
        live = dict(mounted_cubies(root))
        self._sync_bodies(live)

        for cubie, matrix in live.items():
            position, rotation, _ = decompose(matrix)
            p.resetBasePositionAndOrientation(
                self.bodies[cubie.index],
                position.tolist(),
                matrix_to_quaternion(rotation),
                physicsClientId=self.client_id,
            )

        width = camera.config.image_width
        height = camera.config.image_height
        _, _, rgb_img, _, seg_img = p.getCameraImage(
            width=width,
            height=height,
            viewMatrix=camera.view_matrix,
            projectionMatrix=camera.projection_matrix,
            lightDirection=list(self.lighting.direction),
            lightAmbientCoeff=min(self.lighting.ambient, 1.0),
            lightDiffuseCoeff=min(self.lighting.intensity / 2.0, 1.0),
            renderer=p.ER_TINY_RENDERER,
            physicsClientId=self.client_id,
        )

        rgb_array = np.array(rgb_img, dtype=np.uint8).reshape(height, width, 4)[:, :, :3].copy()
        mask = np.array(seg_img).reshape(height, width) < 0
        background = [int(c * 255) for c in hex_to_rgba(self.config.background)[:3]]
        rgb_array[mask] = background
        return Image.fromarray(rgb_array)

    def close(self) -> None:
        if self.client_id is not None:
            p.disconnect(self.client_id)
            self.client_id = None
            self.bodies.clear()
            self._sources.clear()

    def _sync_bodies(self, live: Dict[CubieNode, np.ndarray]) -> None:
        """Create bodies for newly mounted cubies and drop those that unmounted."""
        live_by_index = {cubie.index: cubie for cubie in live}

        for index in list(self.bodies):
            node, mount_count = self._sources[index]
            # a remount replaces the asset instance, so rebuild the shape too
            if live_by_index.get(index) is not node or node.mount_count != mount_count:
                p.removeBody(self.bodies.pop(index), physicsClientId=self.client_id)
                del self._sources[index]

        for cubie, matrix in live.items():
            if cubie.index not in self.bodies:
                self.bodies[cubie.index] = self._create_body(cubie, matrix)
                self._sources[cubie.index] = (cubie, cubie.mount_count)

    def _create_body(self, cubie: CubieNode, matrix: np.ndarray) -> int:
        _, _, scale = decompose(matrix)
        instance = cubie.asset
        visual_shape = p.createVisualShape(
            p.GEOM_MESH,
            vertices=instance.vertices.tolist(),
            indices=instance.faces.flatten().tolist(),
            meshScale=[scale, scale, scale],
            rgbaColor=list(hex_to_rgba(instance.color)),
            physicsClientId=self.client_id,
        )
        return p.createMultiBody(
            baseMass=0,
            baseVisualShapeIndex=visual_shape,
            physicsClientId=self.client_id,
        )
