from cubieviz.scene.node_registry import NodeRegistry
from cubieviz.scene.nodes import PivotGroup


def test_resolve_missing_key_returns_none():
    assert NodeRegistry().resolve(7) is None


def test_register_overwrites_and_keeps_one_handle_per_key():
    registry = NodeRegistry()
    first, second = PivotGroup("a"), PivotGroup("b")
    registry.register(3, first)
    registry.register(3, second)
    assert registry.resolve(3) is second
    assert len(registry) == 1


def test_unregister_missing_key_is_fine():
    registry = NodeRegistry()
    registry.unregister(42)
    registry.register("fan", PivotGroup("fan"))
    registry.unregister("fan")
    assert "fan" not in registry
    assert registry.keys() == []


def test_snapshot_is_a_copy():
    registry = NodeRegistry()
    registry.register(1, PivotGroup("a"))
    snapshot = registry.snapshot()
    registry.unregister(1)
    assert 1 in snapshot
