import pytest
from PIL import Image

from cubieviz.core.config import Config
from cubieviz.scene.builder import ASSEMBLY_GROUP, FAN_GROUP
from cubieviz.utils.display import LiveLogger
from cubieviz.workbench import Workbench, parse_target

from conftest import small_config_dict


def test_parse_target():
    assert parse_target("5") == 5
    assert parse_target(" 12 ") == 12
    assert parse_target(7) == 7
    assert parse_target("fan") == "fan"


def test_all_cubies_mount_and_register(workbench):
    assert workbench.mounted_indices() == list(range(1, 28))
    assert len(workbench.registry) == 27 + 1
    assert workbench.registry.resolve(ASSEMBLY_GROUP) is workbench.assembly.assembly
    assert workbench.pump() == []


def test_rotate_through_workbench(workbench):
    readout = workbench.rotate("5", "y", "90")
    assert readout.as_tuple() == pytest.approx((0.0, 90.0, 0.0))
    assert workbench.rotate("abc", "y", "90") is None


def test_fan_without_hinge_turns_the_assembly(workbench):
    assert workbench.fan_target is workbench.assembly.assembly
    readout = workbench.fan(2)
    assert readout.z == pytest.approx(60.0)


def test_fan_with_hinge_turns_the_fan_group(hinge_workbench):
    assert hinge_workbench.fan_target.name == FAN_GROUP
    hinge_workbench.fan()
    hinge_workbench.fan()
    assert hinge_workbench.assembly.group(FAN_GROUP).get_rotation().z == pytest.approx(60.0)
    assert hinge_workbench.assembly.assembly.get_rotation().z == 0.0


def test_unmount_and_remount(workbench):
    workbench.rotate(5, "x", "45")
    assert workbench.unmount(5)
    assert 5 not in workbench.registry
    assert workbench.rotate(5, "x", "10") is None
    assert workbench.controller.readout(5).x == 0.0

    assert workbench.pump() == []
    assert not workbench.unmount(5)

    assert workbench.mount(5)
    assert workbench.registry.resolve(5) is workbench.assembly.cubies[5]
    assert workbench.assembly.cubies[5].get_rotation().x == 0.0
    assert workbench.assembly.cubies[5].mount_count == 2


def test_operations_before_assets_arrive(logger):
    bench = Workbench(Config.from_dict(small_config_dict()), logger)
    try:
        # nothing is mounted until pump() runs
        assert bench.rotate(5, "y", "90") is None
        assert bench.controller.get_rotation(5).y == 0.0
        bench.wait_for_assets(timeout=30)
        assert bench.rotate(5, "y", "90").y == pytest.approx(90.0)
    finally:
        bench.close()


def test_verbose_pump_reports_the_hierarchy(logger, capsys):
    quiet = Workbench(Config.from_dict(small_config_dict(cubie_count=2)), logger)
    try:
        quiet.wait_for_assets(timeout=30)
        assert not any(m.startswith("Scene hierarchy") for m in logger.messages("info"))
    finally:
        quiet.close()

    verbose = LiveLogger(verbose=True)
    bench = Workbench(Config.from_dict(small_config_dict(cubie_count=2)), verbose)
    try:
        bench.wait_for_assets(timeout=30)
        hierarchy = [m for m in verbose.messages("info") if m.startswith("Scene hierarchy")]
        assert hierarchy
        assert "CubieNode 'cubie_2'" in hierarchy[-1]
        assert "Scene hierarchy" in capsys.readouterr().out
    finally:
        bench.close()


def test_failed_assets_leave_cubies_unmounted(tmp_path, logger):
    data = small_config_dict(cubie_count=3)
    data["assets"] = {"path_pattern": str(tmp_path / "missing_{index}.stl")}
    bench = Workbench(Config.from_dict(data), logger)
    try:
        assert bench.wait_for_assets(timeout=30)
        assert bench.mounted_indices() == []
        assert len(bench.assets.failed()) == 3
        assert bench.rotate(1, "x", "90") is None
    finally:
        bench.close()


def test_unknown_renderer_raises(logger):
    data = small_config_dict()
    data["renderer"]["type"] = "raytracer"
    with pytest.raises(ValueError, match="Unknown renderer"):
        Workbench(Config.from_dict(data), logger)


def test_frame_renders_an_image(workbench):
    image = workbench.frame()
    assert isinstance(image, Image.Image)
    assert workbench.frame_count == 1


def test_render_with_degenerate_camera_raises(logger):
    data = small_config_dict(cubie_count=1)
    data["camera"]["position"] = [0, 0, 0]
    bench = Workbench(Config.from_dict(data), logger)
    try:
        with pytest.raises(RuntimeError):
            bench.render()
    finally:
        bench.close()


def test_describe_tree_and_status(hinge_workbench):
    tree = hinge_workbench.describe_tree()
    assert tree[0].startswith("SceneNode 'scene'")
    assert any(line.startswith("      PivotGroup 'hinge_1'") for line in tree)

    status = hinge_workbench.status()
    assert status["mounted"] == 27
    assert status["grouping"] == "hinge"
    assert status["fan_rotation"] == "X: 0.0°, Y: 0.0°, Z: 0.0°"


def test_command_surface(workbench):
    names = [schema["function"]["name"] for schema in workbench.get_command_schemas()]
    assert names == ["rotate", "fan", "camera", "reset_camera", "state"]

    result = workbench.execute_command("rotate", {"target": "5", "axis": "z", "degrees": "30"})
    assert result["status"] == "ok"
    assert result["rotation"]["z"] == pytest.approx(30.0)

    assert workbench.execute_command("rotate", {"target": "99", "axis": "z", "degrees": "30"})["status"] == "ignored"
    assert workbench.execute_command("camera", {"x": 10, "y": -5, "z": 20})["position"] == [10.0, -5.0, 20.0]
    assert workbench.execute_command("reset_camera")["position"] == [30.0, 10.0, 10.0]
    assert workbench.execute_command("fan", {"times": 2})["rotation"]["z"] == pytest.approx(60.0)

    state = workbench.execute_command("state")
    assert state["mounted_indices"] == list(range(1, 28))
    assert state["groups"][ASSEMBLY_GROUP]["z"] == pytest.approx(60.0)

    assert workbench.execute_command("explode")["status"] == "error"
    assert workbench.execute_command("rotate", {"target": "5"})["status"] == "error"
