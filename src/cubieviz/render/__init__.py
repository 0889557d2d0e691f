"""
Render engines for the cubieviz scene graph.

Importing this package registers every built-in renderer.
"""

from cubieviz.render.transforms import (
    euler_matrix,
    local_matrix,
    world_matrices,
    mounted_cubies,
    matrix_to_quaternion,
)
from cubieviz.render.pybullet_renderer import PyBulletRenderer
from cubieviz.render.matplotlib_renderer import MatplotlibRenderer

__all__ = [
    "euler_matrix",
    "local_matrix",
    "world_matrices",
    "mounted_cubies",
    "matrix_to_quaternion",
    "PyBulletRenderer",
    "MatplotlibRenderer",
]
