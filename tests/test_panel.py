import pytest

from cubieviz.core.base import Axis
from cubieviz.scene.builder import ASSEMBLY_GROUP
from cubieviz.ui.panel import CameraPanel, ControlPanel, FanButton, RotationPanel


def test_rotation_panel_readout_comes_from_the_node(workbench):
    panel = RotationPanel(5, workbench.controller)
    panel.on_input("y", "90")
    assert panel.inputs[Axis.Y] == "90"
    assert panel.readout_text() == "Current Rotation → X: 0.0°, Y: 90.0°, Z: 0.0°"

    panel.on_input("x", "oops")
    assert panel.inputs[Axis.X] == "oops"
    assert panel.readout.x == 0.0


def test_rotation_panel_ignores_bad_axis(workbench):
    panel = RotationPanel(5, workbench.controller)
    assert panel.on_input("q", "90") is None
    assert panel.readout.as_tuple() == (0.0, 0.0, 0.0)


def test_camera_panel(workbench):
    panel = CameraPanel(workbench.camera)
    assert panel.inputs == {Axis.X: "30", Axis.Y: "10", Axis.Z: "10"}

    assert panel.on_input("x", "10")
    assert panel.on_input("y", "-5")
    assert panel.on_input("z", "20")
    assert workbench.camera.eye == (10.0, -5.0, 20.0)
    assert workbench.camera.is_facing_origin(tolerance=1e-3)

    panel.on_input("z", "bogus")
    assert panel.inputs[Axis.Z] == "0"

    assert panel.reset()
    assert panel.inputs[Axis.X] == "30"


def test_camera_panel_submit_is_one_update(workbench):
    panel = CameraPanel(workbench.camera)
    before = workbench.camera.update_count

    assert panel.submit("10", "-5", "20")
    assert workbench.camera.update_count == before + 1
    assert panel.inputs == {Axis.X: "10", Axis.Y: "-5", Axis.Z: "20"}

    assert not panel.submit("10", "-5", "20")
    assert workbench.camera.update_count == before + 1


def test_camera_panel_refuses_the_origin(workbench):
    panel = CameraPanel(workbench.camera)

    assert not panel.submit("0", "0", "0")
    assert workbench.camera.state.position == workbench.camera.eye == (30.0, 10.0, 10.0)
    assert panel.inputs == {Axis.X: "30", Axis.Y: "10", Axis.Z: "10"}


def test_fan_button(hinge_workbench):
    button = FanButton(hinge_workbench.fan_target, hinge_workbench.controller)
    button.press()
    readout = button.press()
    assert readout.z == pytest.approx(60.0)
    assert button.presses == 2
    assert button.render_lines() == ["[Fan] fan: X: 0.0°, Y: 0.0°, Z: 60.0°"]


def test_control_panel_has_a_panel_per_target(hinge_workbench):
    panel = ControlPanel(hinge_workbench)
    assert set(panel.rotation_panels) == set(range(1, 28)) | {ASSEMBLY_GROUP, "fan", "hinge_1", "hinge_2"}
    assert panel.panel("hinge_1").label == "Group hinge_1"
    assert panel.panel(hinge_workbench.assembly.cubies[3]).label == "Cubie 3"

    panel.panel(3).on_input("z", "15")
    assert panel.readouts()[3].z == pytest.approx(15.0)

    lines = panel.render_lines([3, "missing"])
    assert lines[0] == "Cubie 3: X[0]  Y[0]  Z[15]"
    assert lines[1] == "  Current Rotation → X: 0.0°, Y: 0.0°, Z: 15.0°"
    assert lines[2] == "missing: no panel"
    assert lines[-1].startswith("Camera: X[30]  Y[10]  Z[10]")


def test_control_panel_sync_picks_up_late_mounts(logger):
    from cubieviz.core.config import Config
    from cubieviz.workbench import Workbench
    from conftest import small_config_dict

    bench = Workbench(Config.from_dict(small_config_dict(cubie_count=2)), logger)
    try:
        panel = ControlPanel(bench)
        assert set(panel.rotation_panels) == {ASSEMBLY_GROUP}
        bench.wait_for_assets(timeout=30)
        panel.sync()
        assert set(panel.rotation_panels) == {1, 2, ASSEMBLY_GROUP}
    finally:
        bench.close()
