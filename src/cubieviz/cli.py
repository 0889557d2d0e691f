"""
Command-line interface for cubieviz.

Builds a scene from a YAML configuration and either drives it interactively
from the terminal or renders single frames to PNG files.
"""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from cubieviz.core.config import Config, load_config, create_default_config, validate_config
from cubieviz.core.registry import GROUPING_REGISTRY, RENDERER_REGISTRY
from cubieviz.scene.layout import GRID_LAYOUT, layout_rows, validate_layout
from cubieviz.utils.display import StatusDisplay, LiveLogger, ProgressDisplay


def get_available_components() -> Dict[str, List[str]]:
    """Get dynamically registered components."""
    # Import modules to trigger registration
    import cubieviz.scene.builder  # noqa: F401
    import cubieviz.render  # noqa: F401

    return {
        "groupings": sorted(GROUPING_REGISTRY.keys()),
        "renderers": sorted(RENDERER_REGISTRY.keys()),
    }


def parse_rotation_arg(text: str) -> Tuple[str, str, str]:
    """
    Split a ``TARGET:AXIS:DEGREES`` rotation argument.

    Raises:
        argparse.ArgumentTypeError: If the value does not have three parts
    """
    parts = text.split(":")
    if len(parts) != 3 or not parts[0] or not parts[1]:
        raise argparse.ArgumentTypeError(f"expected TARGET:AXIS:DEGREES, got '{text}'")
    return parts[0], parts[1], parts[2]


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    components = get_available_components()

    parser = argparse.ArgumentParser(
        description="cubieviz: interactive 27-cubie puzzle visualization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Start the interactive console
  cubieviz run --config configs/default.yaml

  # Render one frame with cubie 5 turned 90 degrees about y
  cubieviz render --config configs/default.yaml --rotate 5:y:90 --output cube.png

  # Swing the hinge pair two fan steps
  cubieviz render --config configs/hinge.yaml --fan 2

  # Show the grid layout table
  cubieviz layout

Available Components:
  Groupings: {', '.join(components['groupings'])}
  Renderers: {', '.join(components['renderers'])}
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Start the interactive console")
    run_parser.add_argument("--config", "-c", required=True, help="Path to configuration file")
    run_parser.add_argument("--renderer", choices=components["renderers"], help="Override renderer")
    run_parser.add_argument("--output-dir", default="renders", help="Directory for rendered frames")
    run_parser.add_argument("--timeout", type=float, default=30.0, help="Seconds to wait for assets before the prompt")
    run_parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")

    # Render command
    render_parser = subparsers.add_parser("render", help="Render one frame to a PNG file")
    render_parser.add_argument("--config", "-c", required=True, help="Path to configuration file")
    render_parser.add_argument("--output", "-o", default="cubieviz.png", help="Output image path")
    render_parser.add_argument("--renderer", choices=components["renderers"], help="Override renderer")
    render_parser.add_argument("--rotate", action="append", default=[], type=parse_rotation_arg,
                               metavar="TARGET:AXIS:DEGREES", help="Rotation to apply (repeatable)")
    render_parser.add_argument("--fan", type=int, default=0, help="Fan steps to apply")
    render_parser.add_argument("--camera", nargs=3, type=float, metavar=("X", "Y", "Z"), help="Camera position")
    render_parser.add_argument("--timeout", type=float, default=30.0, help="Seconds to wait for assets")
    render_parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")

    # Layout command
    layout_parser = subparsers.add_parser("layout", help="Show the grid layout table")
    layout_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")

    # Create config command
    config_parser = subparsers.add_parser("create-config", help="Create default configuration file")
    config_parser.add_argument("--output", "-o", default="config.yaml", help="Output configuration file")
    config_parser.add_argument("--grouping", choices=components["groupings"], help="Grouping strategy")
    config_parser.add_argument("--renderer", choices=components["renderers"], help="Renderer")
    config_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    # Validate config command
    validate_parser = subparsers.add_parser("validate-config", help="Validate configuration file")
    validate_parser.add_argument("config", help="Configuration file to validate")
    validate_parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")

    # List components command
    list_parser = subparsers.add_parser("list-components", help="List available components")
    list_parser.add_argument("--type", choices=["groupings", "renderers", "all"], default="all", help="Component type to list")
    list_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")

    return parser


def _load_and_validate_config(args, logger) -> Optional[Config]:
    """Load and validate configuration with error handling."""
    try:
        logger.log_action("Loading configuration")
        config = load_config(args.config)
        logger.log_result("Configuration loaded")

        if getattr(args, "renderer", None):
            config.renderer.type = args.renderer

        issues = validate_config(config)
        errors = [issue for issue in issues if issue.startswith("ERROR")]
        warnings = [issue for issue in issues if not issue.startswith("ERROR")]

        if errors:
            StatusDisplay.print_section("Configuration Errors")
            for error in errors:
                logger.log_error(error.replace("ERROR: ", ""))
            return None
        for warning in warnings:
            logger.log_warning(warning.replace("WARNING: ", ""))
        return config

    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {args.config}")
        logger.log_info("Use 'cubieviz create-config' to create a default configuration")
        return None
    except Exception as e:
        logger.log_error(f"Configuration error: {e}")
        return None


def _display_scene_config(config: Config) -> None:
    config_info = {
        "Scene": config.scene.name,
        "Cubies": config.assembly.cubie_count,
        "Grouping": config.assembly.grouping,
        "Renderer": config.renderer.type,
        "Camera": config.camera.position,
        "Assets": config.assets.path_pattern,
    }
    StatusDisplay.print_config(config_info, "Scene Configuration")


def _wait_for_assets(workbench, timeout: float) -> bool:
    """Wait for asset loads with a progress bar."""
    total = len(workbench.assembly.cubies)
    progress = ProgressDisplay(total, "Loading cubies")
    deadline = time.time() + timeout
    while True:
        workbench.pump()
        mounted = len(workbench.mounted_indices())
        progress.update(mounted)
        if not workbench.assets.pending():
            break
        if time.time() >= deadline:
            progress.finish(success=False)
            return False
        workbench.assets.wait(timeout=0.1)
    done = workbench.wait_for_assets(timeout=0)
    progress.finish(success=done and not workbench.assets.failed())
    return done


def run_command(args) -> int:
    """Execute run command."""
    from cubieviz.ui.console import InteractiveConsole
    from cubieviz.workbench import Workbench

    logger = LiveLogger(verbose=getattr(args, "verbose", False))

    try:
        StatusDisplay.print_header("cubieviz Interactive Session")
        config = _load_and_validate_config(args, logger)
        if config is None:
            return 1
        _display_scene_config(config)

        workbench = Workbench(config, logger)
        try:
            if not _wait_for_assets(workbench, args.timeout):
                logger.log_warning("Some assets are still loading; they mount as they arrive")
            InteractiveConsole(workbench, output_dir=args.output_dir).run()
        finally:
            workbench.close()
        return 0

    except KeyboardInterrupt:
        logger.log_warning("Session interrupted by user")
        return 1
    except Exception as e:
        logger.log_error(f"Failed to run session: {e}")
        return 1


def render_command(args) -> int:
    """Execute render command."""
    from cubieviz.workbench import Workbench

    logger = LiveLogger(verbose=getattr(args, "verbose", False))

    try:
        config = _load_and_validate_config(args, logger)
        if config is None:
            return 1

        workbench = Workbench(config, logger)
        try:
            if not _wait_for_assets(workbench, args.timeout):
                logger.log_warning("Some assets did not load in time; rendering what is mounted")

            for target, axis, degrees in args.rotate:
                if workbench.rotate(target, axis, degrees) is None:
                    logger.log_warning(f"Rotation {target}:{axis}:{degrees} was not applied")
            if args.fan > 0:
                workbench.fan(args.fan)
            if args.camera:
                workbench.camera.set_position(*args.camera)

            image = workbench.render()
            output = Path(args.output)
            output.parent.mkdir(parents=True, exist_ok=True)
            image.save(output)
        finally:
            workbench.close()

        StatusDisplay.print_results({
            "Output": str(output),
            "Size": f"{image.width}x{image.height}",
            "Mounted Cubies": len(workbench.mounted_indices()),
            "Renderer": config.renderer.type,
        }, "Render Summary")
        return 0

    except Exception as e:
        logger.log_error(f"Failed to render: {e}")
        return 1


def layout_command(args) -> int:
    """Execute layout command."""
    rows = layout_rows()
    if args.format == "json":
        print(json.dumps({str(index): [x, y, z] for index, x, y, z in rows}, indent=2))
        return 0

    StatusDisplay.print_header("Grid Layout Table")
    StatusDisplay.print_table(["index", "x", "y", "z"], rows)
    problems = validate_layout(GRID_LAYOUT)
    for problem in problems:
        StatusDisplay.print_status(problem, "error")
    return 1 if problems else 0


def create_config_command(args) -> int:
    """Execute create-config command."""
    logger = LiveLogger(verbose=True)

    try:
        StatusDisplay.print_header("Creating Configuration File")

        if Path(args.output).exists() and not args.force:
            logger.log_warning(f"Configuration file already exists: {args.output}")
            if not StatusDisplay.ask_confirmation("Overwrite existing file?"):
                logger.log_info("Configuration creation cancelled")
                return 0

        logger.log_action("Creating configuration")
        config = create_default_config(args.output)

        if args.grouping or args.renderer:
            import yaml
            if args.grouping:
                config.assembly.grouping = args.grouping
            if args.renderer:
                config.renderer.type = args.renderer
            with open(args.output, "w", encoding="utf-8") as f:
                yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)

        logger.log_result(f"Configuration created: {args.output}")
        StatusDisplay.print_results({
            "Output File": args.output,
            "Grouping": config.assembly.grouping,
            "Renderer": config.renderer.type,
        }, "Configuration Summary")

        logger.log_info("Next steps:")
        logger.log_info("1. Validate the configuration: cubieviz validate-config " + args.output)
        logger.log_info("2. Start a session: cubieviz run --config " + args.output)
        return 0

    except Exception as e:
        logger.log_error(f"Failed to create config: {e}")
        return 1


def validate_config_command(args) -> int:
    """Execute validate-config command."""
    logger = LiveLogger(verbose=True)

    try:
        StatusDisplay.print_header("Configuration Validation")

        logger.log_action(f"Loading configuration from: {args.config}")
        config = load_config(args.config)
        logger.log_result("Configuration loaded successfully")
        _display_scene_config(config)

        logger.log_action("Validating configuration")
        issues = validate_config(config)

        errors = [issue for issue in issues if issue.startswith("ERROR")]
        warnings = [issue for issue in issues if not issue.startswith("ERROR")]

        if args.strict and warnings:
            errors.extend(warnings)
            warnings = []

        if errors:
            StatusDisplay.print_section("Configuration Errors")
            for i, error in enumerate(errors, 1):
                logger.log_error(f"{i}. {error.replace('ERROR: ', '')}")
            StatusDisplay.print_results({
                "Status": "FAILED",
                "Errors Found": len(errors),
                "Warnings Found": len(warnings),
            }, "Validation Summary")
            return 1

        if warnings:
            StatusDisplay.print_section("Configuration Warnings")
            for i, warning in enumerate(warnings, 1):
                logger.log_warning(f"{i}. {warning.replace('WARNING: ', '')}")

        StatusDisplay.print_results({
            "Status": "VALID (with warnings)" if warnings else "VALID",
            "Warnings Found": len(warnings),
        }, "Validation Summary")
        return 0

    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {args.config}")
        return 1
    except Exception as e:
        logger.log_error(f"Failed to validate config: {e}")
        return 1


def list_components_command(args) -> int:
    """Execute list-components command."""
    components = get_available_components()
    if args.type != "all":
        components = {args.type: components.get(args.type, [])}

    if args.format == "json":
        print(json.dumps(components, indent=2))
        return 0

    StatusDisplay.print_header("Available Components")
    for comp_type, comp_list in components.items():
        StatusDisplay.print_section(comp_type.title())
        for comp in comp_list:
            print(f"  • {comp}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    try:
        parser = create_parser()

        argv = sys.argv[1:] if argv is None else argv
        if not argv:
            parser.print_help()
            return 1

        args = parser.parse_args(argv)

        # Route to appropriate command handler
        command_handlers = {
            "run": run_command,
            "render": render_command,
            "layout": layout_command,
            "create-config": create_config_command,
            "validate-config": validate_config_command,
            "list-components": list_components_command,
        }

        handler = command_handlers.get(args.command)
        if handler:
            return handler(args)
        parser.print_help()
        return 1

    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
