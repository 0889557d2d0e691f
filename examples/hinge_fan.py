#!/usr/bin/env python3
"""Hinge/fan composition: two cubies on opposite pivots turned by a shared fan group."""
import sys
from pathlib import Path

from cubieviz import Workbench, load_config
from cubieviz.utils.display import LiveLogger, StatusDisplay


def main():
    config_path = Path(__file__).resolve().parent.parent / "configs" / "hinge.yaml"
    config = load_config(str(config_path))

    workbench = Workbench(config, LiveLogger(verbose=False))
    try:
        workbench.wait_for_assets(timeout=30)

        StatusDisplay.print_header("Scene hierarchy")
        for row in workbench.describe_tree():
            print(row)

        output_dir = Path("renders") / "hinge_fan"
        output_dir.mkdir(parents=True, exist_ok=True)
        for step in range(4):
            if step:
                readout = workbench.fan()
                print(f"Fan step {step}: {readout.format()}")
            workbench.frame().save(output_dir / f"fan_{step}.png")

        # spinning a cubie inside the fan is independent of the fan angle
        workbench.rotate(1, "x", "90")
        workbench.frame().save(output_dir / "fan_spin.png")

        StatusDisplay.print_results(workbench.status(), "Final state")
        print(f"✅ Frames written to {output_dir}")
    finally:
        workbench.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
