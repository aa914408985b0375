"""Command-line interface for heightmap generation."""

import argparse
import logging
import time
from pathlib import Path

import numpy as np
import structlog

from .config import Config, find_config, load_config
from .exceptions import InvalidParameterError


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Generate a fault formation fractal heightmap"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path or name of a TOML config file",
    )
    parser.add_argument("--size", type=int, default=None, help="Grid side length")
    parser.add_argument(
        "--iterations", type=int, default=None, help="Number of fault lines"
    )
    parser.add_argument(
        "--min-delta", type=int, default=None, help="Smallest fault height step"
    )
    parser.add_argument(
        "--max-delta", type=int, default=None, help="Largest fault height step"
    )
    parser.add_argument(
        "--filter", type=float, default=None, help="Erosion strength in [0, 1)"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed (default: time based)"
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="heightmap.npz",
        help="Output path (default: heightmap.npz)",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Write big-endian int32 heights instead of .npz",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    return parser


def configure_logging(verbose: bool) -> None:
    """Configure structlog console output."""
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def resolve_config(args: argparse.Namespace) -> Config:
    """Load the config named on the command line and apply flag overrides.

    Raises:
        FileNotFoundError: If the named config cannot be found.
    """
    logger = structlog.get_logger()

    if args.config:
        config_path = find_config(args.config)
        config = load_config(config_path)
        logger.info("config_loaded", path=str(config_path))
    else:
        config = Config()

    overrides = {
        "size": args.size,
        "iterations": args.iterations,
        "min_delta": args.min_delta,
        "max_delta": args.max_delta,
        "filter": args.filter,
        "seed": args.seed,
    }
    for field, value in overrides.items():
        if value is not None:
            setattr(config.heightmap, field, value)

    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for heightmap generation."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    logger = structlog.get_logger()

    # Import here to avoid slow startup for --help
    from .fault_fractal import generate_heightmap
    from .persistence import save_heightmap, save_raw

    try:
        config = resolve_config(args)
    except FileNotFoundError as e:
        logger.error("config_not_found", error=str(e))
        raise SystemExit(1)

    params = config.heightmap
    print(
        f"Generating {params.size}x{params.size} heightmap with "
        f"{params.iterations} faults"
    )

    start_time = time.time()
    try:
        heightmap = generate_heightmap(params)
    except InvalidParameterError as e:
        logger.error("invalid_parameters", error=str(e))
        raise SystemExit(2)
    gen_time = time.time() - start_time

    heights = heightmap.height_map
    print(f"Generation complete in {gen_time:.2f}s (seed {heightmap.seed})")
    print(
        f"Heights: min {int(np.min(heights))}, max {int(np.max(heights))}, "
        f"mean {float(np.mean(heights)):.1f}"
    )

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if args.raw:
        save_raw(output_path, heightmap)
    else:
        save_heightmap(output_path, heightmap)

    print(f"Saved to {output_path}")


if __name__ == "__main__":
    main()
