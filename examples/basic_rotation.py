#!/usr/bin/env python3
"""A quick demonstration of per-cubie rotation on the default 27-cubie assembly."""
import sys
from pathlib import Path

from cubieviz import Workbench, load_config, validate_config
from cubieviz.utils.display import LiveLogger


def main():
    """Rotate a few cubies, print their readouts and save one frame."""
    print("\n" + " cubieviz: basic rotation ".center(80, "="))

    config_path = Path(__file__).resolve().parent.parent / "configs" / "default.yaml"
    if not config_path.exists():
        print(f"❌ Configuration file not found: {config_path}")
        return 1

    config = load_config(str(config_path))
    errors = [issue for issue in validate_config(config) if issue.startswith("ERROR")]
    if errors:
        print(f"[X] Configuration is not valid: {errors}")
        return 1

    workbench = Workbench(config, LiveLogger(verbose=True))
    try:
        if not workbench.wait_for_assets(timeout=30):
            print("⚠️  Some assets are still loading; their cubies stay unmounted")

        print("\n[>] Rotating cubies...")
        for target, axis, degrees in [(5, "y", "90"), (14, "x", "45"), (27, "z", "not a number")]:
            readout = workbench.rotate(target, axis, degrees)
            print(f"  Cubie {target:>2}: {readout.format() if readout else 'not mounted'}")

        readout = workbench.rotate("assembly", "y", "20")
        print(f"  Assembly : {readout.format()}")

        workbench.camera.set_position(20.0, 15.0, 25.0)
        output = Path("renders") / "basic_rotation.png"
        output.parent.mkdir(parents=True, exist_ok=True)
        workbench.frame().save(output)
        print(f"\n✅ Frame saved to {output}")
    finally:
        workbench.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
