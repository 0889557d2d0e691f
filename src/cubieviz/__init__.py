"""
cubieviz: a visualization harness for a 27-cubie cube puzzle

Places small 3D pieces in a 3x3x3 grid, lets a user rotate single pieces or
pivot groups of pieces about the x, y and z axes from numeric input, and
reports each node's orientation in degrees.

Example Usage:
```python
from cubieviz import Workbench, load_config

workbench = Workbench(load_config("configs/default.yaml"))
workbench.wait_for_assets()
workbench.rotate(5, "y", "90")
workbench.render().save("cube.png")
```

Command-line Usage:
```bash
cubieviz run --config configs/default.yaml
cubieviz render --config configs/hinge.yaml --fan 2 --output hinge.png
cubieviz layout
```
"""

# Normal imports instead of lazy loading to ensure proper registry initialization
from cubieviz.core.config import Config, load_config, validate_config
from cubieviz.workbench import Workbench

__version__ = "0.1.0"

__all__ = [
    "Config",
    "load_config",
    "validate_config",
    "Workbench",
]
