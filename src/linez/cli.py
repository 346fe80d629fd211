"""
Command-line interface for linez.

Provides commands for approximating an image and writing a default config.
"""

import argparse
import sys

from linez.config import load_config, save_default_config
from linez.tracer import configure_tracer, get_tracer


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="linez",
        description="linez: approximate an image with random straight lines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Approximate an image until Escape is pressed")
    run_parser.add_argument(
        "target",
        help="Target image file",
    )
    run_parser.add_argument(
        "--iterations", "-i",
        type=int,
        default=None,
        help="Iterations between display refreshes (default 4096)",
    )
    run_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    run_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random line stream",
    )
    run_parser.add_argument(
        "--thickness",
        type=int,
        default=None,
        help="Line thickness in pixels",
    )
    run_parser.add_argument(
        "--max-thickness",
        type=int,
        default=None,
        help="Draw thickness uniformly up to this value",
    )
    run_parser.add_argument(
        "--antialias",
        action="store_true",
        help="Blend lines with anti-aliased coverage",
    )
    run_parser.add_argument(
        "--scale",
        type=int,
        default=None,
        help="Integer upscaling of the preview window",
    )
    run_parser.add_argument(
        "--max-edge",
        type=int,
        default=None,
        help="Downscale the target so its longest edge is at most this many pixels",
    )
    run_parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window; stop with Ctrl-C",
    )
    run_parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    run_parser.add_argument(
        "--trace-level",
        default=None,
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    run_parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    run_parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )

    # Init config command
    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="linez_config.yaml",
        help="Output path for config file",
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return handle_run(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def apply_overrides(config, args):
    """Apply command-line flags on top of the loaded configuration."""
    if args.iterations is not None:
        config.loop.iterations_per_frame = args.iterations
    if args.seed is not None:
        config.loop.seed = args.seed
    if args.thickness is not None:
        config.sampler.thickness = args.thickness
    if args.max_thickness is not None:
        config.sampler.max_thickness = args.max_thickness
    if args.antialias:
        config.sampler.antialias = True
    if args.scale is not None:
        config.display.scale = args.scale
    if args.max_edge is not None:
        config.image.max_edge = args.max_edge
    if args.headless:
        config.display.headless = True

    if args.trace:
        config.tracing.enabled = True
    if args.trace_level is not None:
        config.tracing.level = args.trace_level
    if args.trace_file is not None:
        config.tracing.file_path = args.trace_file
    if args.trace_json:
        config.tracing.json_output = True

    return config


def handle_run(args):
    """Handle the run command."""
    config = apply_overrides(load_config(args.config), args)

    configure_tracer(
        enabled=config.tracing.enabled,
        level=config.tracing.level,
        file_path=config.tracing.file_path,
        json_output=config.tracing.json_output,
    )

    tracer = get_tracer()

    try:
        from linez.app import run_app
        from linez.io.load_image import load_target

        with tracer.span("cli_run", module="cli"):
            target = load_target(args.target, max_edge=config.image.max_edge)
            stats = run_app(target, config)

        print(f"\nStopped after {stats.iterations} iterations.")
        print(f"  Lines drawn: {stats.accepted} ({stats.acceptance_rate:.1%} of iterations)")
        print(f"  Skipped iterations: {stats.faults}")
        print(f"  RMS channel error: {stats.normalized_error:.2f}")

        return 0

    except Exception as e:
        tracer.event(f"Run failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1

    finally:
        tracer.config.close()


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
