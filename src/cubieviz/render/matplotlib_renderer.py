"""
Software rendering with matplotlib's mplot3d.

Slower than pybullet but needs no physics client, which makes it handy for
quick snapshots. The scene is Y-up; mplot3d is Z-up, so world coordinates
are turned a quarter around X before plotting.
"""

import io
import math
import os

import numpy as np
from PIL import Image

os.environ.setdefault("MPLBACKEND", "Agg")
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgba
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from cubieviz.control.camera import CameraController
from cubieviz.core.base import BaseRenderer
from cubieviz.core.registry import register_renderer
from cubieviz.render.transforms import cubie_world_vertices, mounted_cubies
from cubieviz.scene.nodes import SceneNode


def to_plot_space(points: np.ndarray) -> np.ndarray:
    """(x, y, z) Y-up -> (x, -z, y) Z-up."""
    points = np.asarray(points, dtype=float)
    return np.stack([points[..., 0], -points[..., 2], points[..., 1]], axis=-1)


def shade(color: str, normal: np.ndarray, light: np.ndarray, ambient: float, intensity: float):
    """Lambert shading of one face color."""
    r, g, b, a = to_rgba(color)
    diffuse = max(float(np.dot(normal, light)), 0.0) * intensity
    factor = min(ambient + diffuse * (1.0 - ambient), 1.0)
    return (r * factor, g * factor, b * factor, a)


@register_renderer("matplotlib")
class MatplotlibRenderer(BaseRenderer):
    """Draws every mounted cubie as a shaded Poly3DCollection."""

    dpi = 100

    def render(self, root: SceneNode, camera: CameraController) -> Image.Image:
        width = camera.config.image_width
        height = camera.config.image_height
        fig = plt.figure(figsize=(width / self.dpi, height / self.dpi), dpi=self.dpi)
        fig.patch.set_facecolor(self.config.background)
        ax = fig.add_subplot(111, projection="3d")
        ax.set_facecolor(self.config.background)
        ax.set_axis_off()

        light = np.asarray(self.lighting.direction, dtype=float)
        light = to_plot_space(light / np.linalg.norm(light))
        extent = 1.0

        for cubie, matrix in mounted_cubies(root):
            world = to_plot_space(cubie_world_vertices(cubie, matrix))
            triangles = world[cubie.asset.faces]
            normals = np.cross(triangles[:, 1] - triangles[:, 0], triangles[:, 2] - triangles[:, 0])
            lengths = np.linalg.norm(normals, axis=1, keepdims=True)
            normals = normals / np.where(lengths == 0, 1.0, lengths)
            colors = [
                shade(cubie.asset.color, n, light, self.lighting.ambient, self.lighting.intensity)
                for n in normals
            ]
            ax.add_collection3d(Poly3DCollection(triangles, facecolors=colors, edgecolors="none"))
            extent = max(extent, float(np.abs(world).max()))

        ax.set_xlim(-extent, extent)
        ax.set_ylim(-extent, extent)
        ax.set_zlim(-extent, extent)
        ax.set_box_aspect((1, 1, 1))
        ax.set_proj_type("persp", focal_length=1.0 / math.tan(math.radians(camera.config.fov) / 2.0))

        ex, ey, ez = to_plot_space(np.asarray(camera.eye, dtype=float))
        azimuth = math.degrees(math.atan2(ey, ex))
        elevation = math.degrees(math.atan2(ez, math.hypot(ex, ey)))
        ax.view_init(elev=elevation, azim=azimuth)

        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=self.dpi, facecolor=fig.get_facecolor())
        buf.seek(0)
        img = Image.open(buf).convert("RGB")
        plt.close(fig)
        return img

    def close(self) -> None:
        plt.close("all")
