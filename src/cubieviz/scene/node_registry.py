"""Index-keyed lookup of live scene-node handles."""

from typing import Dict, Hashable, List, Optional

from cubieviz.scene.nodes import SceneNode


class NodeRegistry:
    """
    Maps a cubie index (or a group name) to the node currently mounted for it.

    A missing key is a normal state: the asset has not loaded yet or the node
    was unmounted. ``resolve`` returns None for it and callers treat that as
    a no-op.
    """

    def __init__(self):
        self._handles: Dict[Hashable, SceneNode] = {}

    def register(self, key: Hashable, handle: SceneNode) -> None:
        self._handles[key] = handle

    def unregister(self, key: Hashable) -> None:
        self._handles.pop(key, None)

    def resolve(self, key: Hashable) -> Optional[SceneNode]:
        return self._handles.get(key)

    def keys(self) -> List[Hashable]:
        return list(self._handles)

    def snapshot(self) -> Dict[Hashable, SceneNode]:
        return dict(self._handles)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._handles

    def __len__(self) -> int:
        return len(self._handles)
