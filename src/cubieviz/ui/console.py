"""
Interactive terminal front end for a workbench.
"""

from pathlib import Path
from typing import Callable, List, Optional

from cubieviz.scene.layout import layout_rows
from cubieviz.ui.panel import ControlPanel
from cubieviz.utils.display import StatusDisplay
from cubieviz.workbench import Workbench, parse_target


HELP_TEXT = """
Available commands:
  rotate <index> <axis> <deg>  - Set one axis of a cubie (e.g. rotate 5 y 90)
  group <name> <axis> <deg>    - Set one axis of a group (e.g. group assembly x 45)
  fan [n]                      - Advance the fan group n steps (default 1)
  camera <x> <y> <z>           - Move the camera (it keeps looking at the origin)
  camera reset                 - Return the camera to its home position
  show [targets...]            - Show inputs and readouts
  layout                       - Show the grid layout table
  tree                         - Show the scene hierarchy
  render [path]                - Render a frame to a PNG
  status                       - Show scene status
  quit/exit                    - Leave the console
"""


class InteractiveConsole:
    """Line-oriented REPL over a workbench and its control panel."""

    def __init__(self, workbench: Workbench, output_dir: str = "renders",
                 input_fn: Optional[Callable[[str], str]] = None):
        self.workbench = workbench
        self.panel = ControlPanel(workbench)
        self.output_dir = Path(output_dir)
        self.input_fn = input_fn
        self.render_count = 0

    def run(self) -> None:
        """Run the console main loop."""
        print("=== cubieviz console ===")
        print("Type 'help' for commands")

        while True:
            try:
                line = (self.input_fn or input)("\n> ")
            except EOFError:
                print("Goodbye!")
                break
            except KeyboardInterrupt:
                print("\nUse 'quit' to exit")
                continue

            try:
                if not self.handle_command(line):
                    print("Goodbye!")
                    break
            except Exception as e:
                print(f"Error: {e}")

    def handle_command(self, line: str) -> bool:
        """
        Execute one console line.

        Returns:
            False when the console should exit
        """
        parts = line.strip().split()
        if not parts:
            return True

        # pick up assets that finished loading since the last command
        self.workbench.pump()
        self.panel.sync()

        command, args = parts[0].lower(), parts[1:]

        if command in ("quit", "exit"):
            return False
        elif command == "help":
            print(HELP_TEXT)
        elif command in ("rotate", "group"):
            self._rotate(command, args)
        elif command == "fan":
            self._fan(args)
        elif command == "camera":
            self._camera(args)
        elif command == "show":
            self._show(args)
        elif command == "layout":
            self._layout()
        elif command == "tree":
            for row in self.workbench.describe_tree():
                print(row)
        elif command == "render":
            self._render(args)
        elif command == "status":
            StatusDisplay.print_results(self.workbench.status(), "Scene status")
        else:
            print(f"Unknown command: {command}")
            print("Type 'help' for commands")
        return True

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #
    def _rotate(self, command: str, args: List[str]) -> None:
        if len(args) < 3:
            print(f"Usage: {command} <target> <axis> <degrees>")
            return
        target = parse_target(args[0])
        if command == "group" and isinstance(target, int):
            print(f"✗ '{args[0]}' is a cubie index; use 'rotate' for cubies")
            return

        panel = self.panel.panel(target)
        if panel is None:
            # unknown or not yet mounted: still routed so the controller reports it
            readout = self.workbench.rotate(target, args[1], args[2])
        else:
            readout = panel.on_input(args[1], args[2])

        if readout is None:
            print(f"✗ Nothing to rotate for {args[0]} {args[1]} (not mounted or bad axis)")
        else:
            print(f"✓ {args[0]} → {readout.format()}")

    def _fan(self, args: List[str]) -> None:
        times = 1
        if args:
            try:
                times = max(int(args[0]), 1)
            except ValueError:
                print("Usage: fan [n]")
                return
        readout = None
        for _ in range(times):
            readout = self.panel.fan_button.press()
        print(f"✓ {self.panel.fan_button.group.name} → {readout.format()}")

    def _camera(self, args: List[str]) -> None:
        if args and args[0].lower() == "reset":
            self.panel.camera_panel.reset()
        elif len(args) == 3:
            self.panel.camera_panel.submit(*args)
        else:
            print("Usage: camera <x> <y> <z> | camera reset")
            return
        for row in self.panel.camera_panel.render_lines():
            print(row)

    def _show(self, args: List[str]) -> None:
        targets = [parse_target(a) for a in args] if args else None
        for row in self.panel.render_lines(targets):
            print(row)

    def _layout(self) -> None:
        StatusDisplay.print_table(
            ["index", "x", "y", "z"],
            [list(row) for row in layout_rows()],
        )

    def _render(self, args: List[str]) -> Optional[Path]:
        if args:
            path = Path(args[0])
        else:
            self.render_count += 1
            path = self.output_dir / f"frame_{self.render_count:03d}.png"
        path.parent.mkdir(parents=True, exist_ok=True)
        image = self.workbench.render()
        image.save(path)
        print(f"✓ Saved {path}")
        return path
