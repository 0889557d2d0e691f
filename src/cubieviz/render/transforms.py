"""
Transform composition for the scene graph.

Nodes store local position, per-axis rotation and uniform scale. The
renderers compose those down the tree every frame; this module is the one
place that does it.
"""

import math
from typing import Dict, Iterator, Tuple

import numpy as np
from trimesh import transformations

from cubieviz.core.base import EulerAngles
from cubieviz.scene.nodes import CubieNode, SceneNode


def euler_matrix(rotation: EulerAngles) -> np.ndarray:
    """
    4x4 rotation for a per-axis angle triple, applied in X, Y, Z order.

    Intrinsic X then Y then Z, i.e. ``R = Rx @ Ry @ Rz``.
    """
    cx, sx = math.cos(rotation.x), math.sin(rotation.x)
    cy, sy = math.cos(rotation.y), math.sin(rotation.y)
    cz, sz = math.cos(rotation.z), math.sin(rotation.z)

    rx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    ry = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    rz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])

    matrix = np.identity(4)
    matrix[:3, :3] = rx @ ry @ rz
    return matrix


def local_matrix(node: SceneNode) -> np.ndarray:
    """Translate, then rotate, then scale."""
    translate = transformations.translation_matrix(node.position)
    scale = transformations.scale_matrix(node.scale)
    return translate @ euler_matrix(node.rotation) @ scale


def world_matrices(root: SceneNode) -> Dict[SceneNode, np.ndarray]:
    """World matrix of every node under ``root`` (inclusive)."""
    matrices: Dict[SceneNode, np.ndarray] = {}

    def visit(node: SceneNode, parent: np.ndarray) -> None:
        matrix = parent @ local_matrix(node)
        matrices[node] = matrix
        for child in node.children:
            visit(child, matrix)

    visit(root, np.identity(4))
    return matrices


def mounted_cubies(root: SceneNode) -> Iterator[Tuple[CubieNode, np.ndarray]]:
    """Mounted cubies with their world matrices, in traversal order."""
    matrices = world_matrices(root)
    for node in root.traverse():
        if isinstance(node, CubieNode) and node.is_mounted:
            yield node, matrices[node]


def transform_points(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
    points = np.asarray(points, dtype=float)
    homogeneous = np.hstack([points, np.ones((len(points), 1))])
    return (homogeneous @ matrix.T)[:, :3]


def cubie_world_vertices(cubie: CubieNode, matrix: np.ndarray) -> np.ndarray:
    """Asset vertices (including the mount-time centering offset) in world space."""
    return transform_points(matrix, cubie.asset.vertices)


def decompose(matrix: np.ndarray) -> Tuple[np.ndarray, np.ndarray, float]:
    """
    Split a translate-rotate-uniform-scale matrix.

    Returns:
        (translation, 3x3 rotation, scale)
    """
    linear = matrix[:3, :3]
    scale = float(np.linalg.norm(linear[:, 0]))
    rotation = linear / scale if scale > 0 else np.identity(3)
    return matrix[:3, 3].copy(), rotation, scale


def matrix_to_quaternion(rotation: np.ndarray) -> Tuple[float, float, float, float]:
    """Rotation matrix to an (x, y, z, w) quaternion, the order pybullet expects."""
    matrix = np.identity(4)
    matrix[:3, :3] = rotation
    w, x, y, z = transformations.quaternion_from_matrix(matrix)
    return (float(x), float(y), float(z), float(w))
