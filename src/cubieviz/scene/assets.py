"""
Cubie asset loading and caching.

Meshes are loaded with trimesh on a worker pool. ``builtin://cubie/<n>``
paths produce a procedural cube whose authored origin sits on a corner, like
a model exported without recentering; any other path is read from disk.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np
import trimesh

from cubieviz.core.config import AssetConfig
from cubieviz.utils.display import LiveLogger


BUILTIN_SCHEME = "builtin://"

PIECE_COLORS = [
    '#FF6B6B',  # red
    '#4ECDC4',  # teal
    '#45B7D1',  # blue
    '#96CEB4',  # green
    '#FFEAA7',  # yellow
    '#DFE6E9',  # grey
    '#FD79A8',  # pink
    '#A29BFE',  # purple
    '#74B9FF',  # light blue
    '#55EFC4',  # mint
    '#FDCB6E',  # orange
    '#E17055',  # burnt orange
]


def get_piece_color(index: int) -> str:
    return PIECE_COLORS[index % len(PIECE_COLORS)]


def hex_to_rgba(color: str, alpha: float = 1.0) -> Tuple[float, float, float, float]:
    color = color.lstrip("#")
    r, g, b = (int(color[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
    return (r, g, b, alpha)


@dataclass
class Asset:
    """A loaded mesh, shared by every node that mounts it."""
    path: str
    mesh: trimesh.Trimesh
    color: str = PIECE_COLORS[0]

    def instance(self) -> "AssetInstance":
        return AssetInstance(asset=self)


@dataclass
class AssetInstance:
    """
    One placement of an asset inside a cubie node.

    ``offset`` is the asset's position relative to the node's local origin.
    """
    asset: Asset
    offset: np.ndarray = field(default_factory=lambda: np.zeros(3))

    @property
    def vertices(self) -> np.ndarray:
        return np.asarray(self.asset.mesh.vertices, dtype=float) + self.offset

    @property
    def faces(self) -> np.ndarray:
        return np.asarray(self.asset.mesh.faces, dtype=int)

    @property
    def color(self) -> str:
        return self.asset.color

    def bounds(self) -> np.ndarray:
        """Axis-aligned bounds as a (2, 3) array of min and max corners."""
        return np.asarray(self.asset.mesh.bounds, dtype=float) + self.offset

    def center_on_origin(self) -> np.ndarray:
        """
        Shift the asset so its bounding box is centered on the local origin.

        Returns:
            The center that was subtracted
        """
        center = self.bounds().mean(axis=0)
        self.offset = self.offset - center
        return center


def _builtin_index(path: str) -> int:
    tail = path[len(BUILTIN_SCHEME):].strip("/").split("/")
    if tail[0] != "cubie":
        raise ValueError(f"Unknown builtin asset: {path}")
    if len(tail) > 1 and tail[1]:
        return int(tail[1])
    return 0


def load_asset(path: str, cubie_size: float = 1.9) -> Asset:
    """
    Load one asset.

    Args:
        path: ``builtin://cubie/<n>`` or a mesh file trimesh can read
        cubie_size: Edge length of procedural cubies

    Returns:
        Asset object

    Raises:
        FileNotFoundError: If a file path does not exist
        ValueError: If the path names an unknown builtin or an empty mesh
    """
    if path.startswith(BUILTIN_SCHEME):
        index = _builtin_index(path)
        mesh = trimesh.creation.box(extents=(cubie_size, cubie_size, cubie_size))
        mesh.apply_translation((cubie_size / 2.0, cubie_size / 2.0, cubie_size / 2.0))
        return Asset(path=path, mesh=mesh, color=get_piece_color(index))

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Asset not found: {path}")

    mesh = trimesh.load(str(file_path), force="mesh")
    if len(mesh.vertices) == 0:
        raise ValueError(f"Asset has no vertices: {path}")
    return Asset(path=path, mesh=mesh)


class AssetLibrary:
    """
    Loads assets on a worker pool and caches them by path.

    Requests never block. Callers poll ``completed()`` (the workbench does this
    once per frame) and mount whatever has finished.
    """

    def __init__(self, config: AssetConfig, logger: Optional[LiveLogger] = None,
                 loader: Optional[Callable[[str], Asset]] = None):
        self.config = config
        self.logger = logger or LiveLogger(verbose=False)
        self._loader = loader or (lambda path: load_asset(path, cubie_size=config.cubie_size))
        self._executor = ThreadPoolExecutor(
            max_workers=config.max_workers,
            thread_name_prefix="cubieviz-assets",
        )
        self._futures: Dict[str, Future] = {}
        self._failed: Dict[str, str] = {}

    def request(self, path: str) -> Future:
        """Start loading ``path`` unless it is already cached or in flight."""
        future = self._futures.get(path)
        if future is None:
            future = self._executor.submit(self._loader, path)
            self._futures[path] = future
        return future

    def preload(self, paths: Iterable[str]) -> None:
        """Eagerly request a fixed list of paths before first use."""
        paths = list(paths)
        for path in paths:
            self.request(path)
        self.logger.log_action("Preloading assets", f"{len(paths)} paths")

    def get(self, path: str) -> Optional[Asset]:
        """Return the asset if it finished loading, None otherwise."""
        future = self._futures.get(path)
        if future is None or not future.done() or future.cancelled():
            return None
        if future.exception() is not None:
            self._record_failure(path, future.exception())
            return None
        return future.result()

    def completed(self) -> List[Tuple[str, Asset]]:
        """All successfully loaded assets, in request order."""
        loaded = []
        for path in list(self._futures):
            asset = self.get(path)
            if asset is not None:
                loaded.append((path, asset))
        return loaded

    def pending(self) -> List[str]:
        return [path for path, future in self._futures.items() if not future.done()]

    def failed(self) -> Dict[str, str]:
        """Paths whose load raised, mapped to the error text."""
        for path in list(self._futures):
            self.get(path)
        return dict(self._failed)

    def wait(self, paths: Optional[Iterable[str]] = None, timeout: Optional[float] = None) -> bool:
        """
        Block until the given (or all requested) loads finish.

        Returns:
            True when nothing is left pending
        """
        if paths is None:
            futures = list(self._futures.values())
        else:
            futures = [self.request(path) for path in paths]
        _, not_done = wait(futures, timeout=timeout)
        return not not_done

    def close(self) -> None:
        self._executor.shutdown(wait=True, cancel_futures=True)

    def _record_failure(self, path: str, exc: BaseException) -> None:
        if path in self._failed:
            return
        self._failed[path] = str(exc)
        self.logger.log_error(f"Failed to load asset {path}: {exc}")
