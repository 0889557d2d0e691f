import pytest
import yaml

from cubieviz.core.config import (
    AssemblyConfig,
    CameraConfig,
    Config,
    RendererConfig,
    create_default_config,
    load_config,
    validate_config,
)


def test_defaults():
    config = Config()
    assert config.assembly.cubie_count == 27
    assert config.assembly.scale == 1.5
    assert config.assembly.fan_step_degrees == 30.0
    assert config.camera.position == (30.0, 10.0, 10.0)
    assert config.camera.fov == 50.0
    assert config.lighting.ambient == 0.5
    assert config.lighting.direction == (5.0, 5.0, 5.0)
    assert config.lighting.intensity == 1.5
    assert config.renderer.type == "pybullet"


def test_lists_become_tuples():
    config = Config.from_dict({"camera": {"position": [1, 2, 3]}, "assembly": {"shift": [0, 0, 0]}})
    assert config.camera.position == (1.0, 2.0, 3.0)
    assert config.assembly.shift == (0.0, 0.0, 0.0)


@pytest.mark.parametrize("kwargs", [
    {"cubie_count": 0},
    {"cubie_count": 28},
    {"scale": -1},
    {"layer_axis": "w"},
    {"hinge_members": [30]},
    {"shift": [1, 2]},
])
def test_invalid_assembly_values_raise(kwargs):
    with pytest.raises(ValueError):
        AssemblyConfig(**kwargs)


@pytest.mark.parametrize("grouping", ["independent", "layers"])
def test_single_cubie_scene_ignores_hinge_members(grouping):
    config = AssemblyConfig(cubie_count=1, grouping=grouping)
    assert config.cubie_count == 1
    assert config.hinge_members == [1, 2]


def test_hinge_members_must_fit_a_hinge_scene():
    with pytest.raises(ValueError):
        AssemblyConfig(cubie_count=1, grouping="hinge", hinge_members=[1, 2])
    assert AssemblyConfig(cubie_count=2, grouping="hinge").hinge_members == [1, 2]


def test_invalid_camera_values_raise():
    with pytest.raises(ValueError):
        CameraConfig(fov=0)
    with pytest.raises(ValueError):
        CameraConfig(near_plane=10, far_plane=5)
    with pytest.raises(ValueError):
        RendererConfig(background="gray")


def test_load_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"assembly": {"grouping": "hinge"}, "camera": {"fov": 60}}))
    config = load_config(str(path))
    assert config.assembly.grouping == "hinge"
    assert config.camera.fov == 60
    assert config.renderer.type == "pybullet"


def test_load_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    with pytest.raises(ValueError):
        load_config(str(empty))

    bad_values = tmp_path / "bad.yaml"
    bad_values.write_text(yaml.safe_dump({"assembly": {"cubie_count": 99}}))
    with pytest.raises(ValueError):
        load_config(str(bad_values))

    unknown_key = tmp_path / "unknown.yaml"
    unknown_key.write_text(yaml.safe_dump({"camera": {"zoom": 2}}))
    with pytest.raises(ValueError):
        load_config(str(unknown_key))

    malformed = tmp_path / "malformed.yaml"
    malformed.write_text("camera: [1, 2\n")
    with pytest.raises(yaml.YAMLError):
        load_config(str(malformed))


def test_create_default_config_round_trips(tmp_path):
    path = tmp_path / "default.yaml"
    created = create_default_config(str(path))
    assert load_config(str(path)).to_dict() == created.to_dict()


def test_validate_default_config_is_clean():
    assert validate_config(Config()) == []


def test_validate_reports_errors_and_warnings():
    config = Config()
    config.assembly.grouping = "spiral"
    config.renderer.type = "raytracer"
    config.camera.position = (0.0, 0.0, 0.0)
    config.assembly.fan_step_degrees = 0
    config.assembly.hinge_members = [1, 1]
    issues = validate_config(config)

    errors = [i for i in issues if i.startswith("ERROR")]
    warnings = [i for i in issues if i.startswith("WARNING")]
    assert any("spiral" in e for e in errors)
    assert any("raytracer" in e for e in errors)
    assert any("origin" in e for e in errors)
    assert any("duplicate" in e for e in errors)
    assert any("fan_step_degrees" in w for w in warnings)


def test_validate_warns_about_shared_asset_path():
    config = Config()
    config.assets.path_pattern = "builtin://cubie/1"
    assert any("placeholder" in i for i in validate_config(config))
