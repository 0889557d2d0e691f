import math

import numpy as np
import pytest

from cubieviz.core.config import AssemblyConfig, AssetConfig
from cubieviz.render.transforms import world_matrices
from cubieviz.scene.builder import ASSEMBLY_GROUP, FAN_GROUP, AssemblyBuilder
from cubieviz.scene.nodes import CubieNode, PivotGroup


def build(**kwargs):
    return AssemblyBuilder(AssemblyConfig(**kwargs), AssetConfig()).build()


def world_translation(assembly, node):
    return world_matrices(assembly.root)[node][:3, 3]


def test_independent_grouping():
    assembly = build()
    assert len(assembly.cubies) == 27
    assert list(assembly.groups) == [ASSEMBLY_GROUP]
    assert len(assembly.assembly.children) == 27
    assert assembly.cubies[5].position == (0.0, 3.0, 0.0)
    assert assembly.cubies[5].grid_coord == (-3, 0, -3)
    assert assembly.cubies[5].scale == 1.5
    assert assembly.cubies[5].asset_path == "builtin://cubie/5"


def test_cubie_count_limits_the_scene():
    assembly = build(cubie_count=8)
    assert sorted(assembly.cubies) == list(range(1, 9))
    assert len(assembly.asset_paths()) == 8


@pytest.mark.parametrize("grouping", ["independent", "layers"])
def test_single_cubie_scene_builds(grouping):
    assembly = build(cubie_count=1, grouping=grouping)
    assert list(assembly.cubies) == [1]
    assert ASSEMBLY_GROUP in assembly.groups


def test_shared_asset_paths():
    assembly = AssemblyBuilder(AssemblyConfig(), AssetConfig(path_pattern="builtin://cubie/1")).build()
    assert assembly.asset_paths() == ["builtin://cubie/1"]
    assert len(assembly.cubies_for_path("builtin://cubie/1")) == 27


def test_hinge_grouping_structure():
    assembly = build(grouping="hinge")
    assert set(assembly.groups) == {ASSEMBLY_GROUP, FAN_GROUP, "hinge_1", "hinge_2"}

    fan = assembly.group(FAN_GROUP)
    assert fan.parent is assembly.assembly
    assert [child.name for child in fan.children] == ["hinge_1", "hinge_2"]
    # the fan plus the 25 cubies outside it
    assert len(assembly.assembly.children) == 26

    hinge_1, hinge_2 = assembly.group("hinge_1"), assembly.group("hinge_2")
    assert hinge_1.position == (-4.5, 3.0, 3.0)
    assert hinge_2.position == (1.5, 3.0, 3.0)
    assert assembly.cubies[1].parent is hinge_1
    assert assembly.cubies[1].position == (1.5, 0.0, 0.0)
    assert assembly.cubies[2].position == (-1.5, 0.0, 0.0)


def test_every_grouping_preserves_world_positions():
    for grouping in ("independent", "hinge", "layers"):
        assembly = build(grouping=grouping)
        for index, cubie in assembly.cubies.items():
            assert world_translation(assembly, cubie) == pytest.approx(assembly.world_positions[index])


def test_rotating_the_fan_pivots_members_rigidly():
    assembly = build(grouping="hinge")
    fan = assembly.group(FAN_GROUP)
    fan.set_group_rotation("z", math.pi / 2)

    assert world_translation(assembly, assembly.cubies[1]) == pytest.approx([-3.0, -3.0, 3.0])
    assert world_translation(assembly, assembly.cubies[2]) == pytest.approx([-3.0, 0.0, 3.0])
    # cubies outside the fan do not move
    assert world_translation(assembly, assembly.cubies[3]) == pytest.approx([3.0, 3.0, 3.0])
    # stored local positions are untouched
    assert assembly.cubies[1].position == (1.5, 0.0, 0.0)


def test_hinge_rotation_swings_about_the_edge():
    assembly = build(grouping="hinge")
    hinge = assembly.group("hinge_1")
    hinge.set_group_rotation("y", math.pi)
    # half a turn about the pivot mirrors the cubie across it
    assert world_translation(assembly, assembly.cubies[1]) == pytest.approx([-6.0, 3.0, 3.0])


def test_layer_grouping():
    assembly = build(grouping="layers", layer_axis="y")
    layers = [name for name in assembly.groups if name.startswith("layer_")]
    assert layers == ["layer_y0", "layer_y1", "layer_y2"]
    for name in layers:
        assert len(assembly.group(name).cubies()) == 9

    top = assembly.group("layer_y2")
    assert top.position == (0.0, 3.0, 0.0)
    assert assembly.cubies[1] in top.cubies()
    assert assembly.cubies[1].position == (-3.0, 0.0, 3.0)


def test_rotating_a_layer_moves_only_its_cubies():
    assembly = build(grouping="layers", layer_axis="y")
    assembly.group("layer_y2").set_group_rotation("y", math.pi / 2)
    moved = world_translation(assembly, assembly.cubies[1])
    assert moved == pytest.approx([3.0, 3.0, 3.0])
    assert world_translation(assembly, assembly.cubies[10]) == pytest.approx(assembly.world_positions[10])


def test_unknown_grouping_raises():
    with pytest.raises(ValueError, match="Unknown grouping"):
        build(grouping="spiral")


def test_groups_are_pivot_groups_and_cubies_are_leaves():
    assembly = build(grouping="hinge")
    for group in assembly.groups.values():
        assert isinstance(group, PivotGroup)
    for node in assembly.root.traverse():
        if isinstance(node, CubieNode):
            assert node.children == []
    assert np.isclose(assembly.group(FAN_GROUP).fan_step, math.pi / 6)
