import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest
import yaml

from cubieviz.core.config import Config
from cubieviz.scene.assets import load_asset
from cubieviz.scene.node_registry import NodeRegistry
from cubieviz.scene.nodes import CubieNode
from cubieviz.utils.display import LiveLogger
from cubieviz.workbench import Workbench


def small_config_dict(**assembly):
    """A scene that renders quickly: tiny images, software renderer."""
    return {
        "scene": {"name": "test_scene"},
        "assembly": dict(assembly),
        "camera": {"image_width": 64, "image_height": 64},
        "renderer": {"type": "matplotlib"},
    }


@pytest.fixture
def logger():
    return LiveLogger(verbose=False)


@pytest.fixture
def registry():
    return NodeRegistry()


@pytest.fixture
def mounted_cubie(registry, logger):
    """Cubie 5, mounted with a procedural asset and registered."""
    cubie = CubieNode(index=5, asset_path="builtin://cubie/5", position=(0.0, 3.0, 0.0))
    cubie.mount(load_asset("builtin://cubie/5"), registry, logger)
    return cubie


@pytest.fixture
def workbench(logger):
    bench = Workbench(Config.from_dict(small_config_dict()), logger)
    assert bench.wait_for_assets(timeout=30)
    yield bench
    bench.close()


@pytest.fixture
def hinge_workbench(logger):
    bench = Workbench(Config.from_dict(small_config_dict(grouping="hinge")), logger)
    assert bench.wait_for_assets(timeout=30)
    yield bench
    bench.close()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "scene.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(small_config_dict(), f)
    return path
