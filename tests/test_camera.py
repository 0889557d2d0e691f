import math

import numpy as np
import pytest

from cubieviz.control.camera import CameraController, CameraState
from cubieviz.core.config import CameraConfig


@pytest.fixture
def camera(logger):
    controller = CameraController(CameraConfig(), logger=logger)
    yield controller
    controller.close()


def test_initial_view_is_computed_once(camera):
    assert camera.update_count == 1
    assert camera.eye == (30.0, 10.0, 10.0)
    assert len(camera.view_matrix) == 16
    assert len(camera.projection_matrix) == 16


def test_camera_moved_to_point_faces_origin(camera):
    assert camera.set_position(10, -5, 20)

    assert camera.eye == (10.0, -5.0, 20.0)
    assert camera.is_facing_origin(tolerance=1e-3)
    x, y, z = camera.to_camera_space((0.0, 0.0, 0.0))
    assert z == pytest.approx(-math.sqrt(10 ** 2 + 5 ** 2 + 20 ** 2), rel=1e-4)
    assert camera.to_camera_space((10.0, -5.0, 20.0)) == pytest.approx([0.0, 0.0, 0.0], abs=1e-3)
    assert camera.forward == pytest.approx(-np.array([10.0, -5.0, 20.0]) / math.sqrt(525))


def test_equal_position_is_not_a_change(camera):
    assert not camera.set_position(30, 10, 10)
    assert camera.update_count == 1


def test_each_change_recomputes_once(camera):
    camera.set_position(1, 2, 3)
    camera.set_position(1, 2, 4)
    assert camera.update_count == 3


def test_degenerate_eye_keeps_previous_view(camera, logger):
    view = camera.view_matrix
    assert not camera.set_position(0, 0, 0)
    assert camera.state.position == (30.0, 10.0, 10.0)
    assert camera.update_count == 1
    assert camera.view_matrix == view
    assert camera.eye == (30.0, 10.0, 10.0)
    assert any("origin" in m for m in logger.messages("warning"))


def test_eye_along_up_vector_uses_fallback_up(camera):
    camera.set_position(0, 25, 0)
    assert camera.up == (0.0, 0.0, 1.0)
    assert camera.is_facing_origin(tolerance=1e-3)


def test_set_axis_text_coerces_malformed_input(camera, logger):
    assert camera.set_axis_text("y", "abc")
    assert camera.state.position == (30.0, 0.0, 10.0)
    assert logger.messages("warning")
    assert not camera.set_axis_text("w", "3")


def test_reset_returns_home(camera):
    camera.set_position(5, 5, 5)
    assert camera.reset()
    assert camera.eye == (30.0, 10.0, 10.0)
    assert not camera.reset()


def test_shared_state_drives_controller(logger):
    state = CameraState((4.0, 4.0, 4.0))
    controller = CameraController(CameraConfig(), state=state, logger=logger)
    state.set_axis("x", 8)
    assert controller.eye == (8.0, 4.0, 4.0)
    controller.close()
    state.set_axis("x", 9)
    assert controller.eye == (8.0, 4.0, 4.0)


def test_unsubscribe_stops_notifications():
    state = CameraState((1.0, 1.0, 1.0))
    seen = []
    unsubscribe = state.subscribe(seen.append)
    state.set_position((2, 2, 2))
    unsubscribe()
    state.set_position((3, 3, 3))
    assert seen == [(2.0, 2.0, 2.0)]


def test_state_validator_refuses_before_storing():
    state = CameraState((1.0, 1.0, 1.0))
    seen = []
    state.subscribe(seen.append)
    remove = state.add_validator(lambda position: position[0] >= 0)

    assert not state.set_position((-1, 0, 0))
    assert state.position == (1.0, 1.0, 1.0)
    assert seen == []

    remove()
    assert state.set_position((-1, 0, 0))
    assert seen == [(-1.0, 0.0, 0.0)]


def test_axis_edit_onto_origin_is_refused(logger):
    controller = CameraController(CameraConfig(position=(5.0, 0.0, 0.0)), logger=logger)
    try:
        assert not controller.set_axis_text("x", "0")
        assert controller.state.position == (5.0, 0.0, 0.0)
        assert controller.eye == (5.0, 0.0, 0.0)
    finally:
        controller.close()
