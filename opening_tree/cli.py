"""
Command-line entry point.

Usage:
    python -m opening_tree --config config.json

    python -m opening_tree --config config.json \\
        --moves "e2e4 e7e5 g1f3" \\
        --color black \\
        --variation-depth 6 \\
        --engine-depth 18 \\
        --output lines.txt
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from tqdm import tqdm

from opening_tree.config import AppConfig, load_config
from opening_tree.engine.client import EngineClient
from opening_tree.errors import ConfigError, OpeningTreeError
from opening_tree.output import write_variations
from opening_tree.variations.explorer import ExplorationProgress, VariationExplorer

logger = logging.getLogger("opening_tree")


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def apply_overrides(config: AppConfig, args) -> AppConfig:
    """
    Apply command-line flags on top of the config file.

    Raises:
        ConfigError: If a merged value is invalid
    """
    engine_changes = {}
    if args.threads is not None:
        engine_changes["threads"] = args.threads
    if args.hash is not None:
        engine_changes["hash_mb"] = args.hash
    if args.multipv is not None:
        engine_changes["multipv"] = args.multipv
    if args.no_progress:
        engine_changes["print_progress"] = False
    if args.print_all:
        engine_changes["print_all"] = True

    variation_changes = {}
    if args.moves is not None:
        variation_changes["initial_moves"] = args.moves
    if args.engine_depth is not None:
        variation_changes["engine_depth"] = args.engine_depth
    if args.variation_depth is not None:
        variation_changes["variation_depth"] = args.variation_depth
    if args.color is not None:
        variation_changes["is_white"] = args.color == "white"

    try:
        return replace(
            config,
            engine_path=args.engine or config.engine_path,
            output_path=Path(args.output) if args.output else config.output_path,
            engine=replace(config.engine, **engine_changes),
            variations=replace(config.variations, **variation_changes),
        )
    except ValueError as e:
        raise ConfigError(str(e)) from e


def build_engine(config: AppConfig) -> EngineClient:
    engine = EngineClient(config.engine_path, echo_output=config.engine.print_all)
    if config.engine.threads is not None:
        engine.set_threads(config.engine.threads)
    if config.engine.hash_mb is not None:
        engine.set_hash(config.engine.hash_mb)
    if config.engine.multipv is not None:
        engine.set_multipv(config.engine.multipv)
    return engine


def run(config: AppConfig) -> int:
    """
    Explore variations as configured and write them out.

    Returns:
        Number of variations written
    """
    variations = config.variations
    initial = variations.initial_sequence

    try:
        initial.to_board()
    except ValueError as e:
        raise ConfigError(f"Initial moves '{initial}' are not a legal line: {e}") from e

    with build_engine(config) as engine:
        logger.info("Initial starting position:")
        for line in engine.board_dump(initial):
            logger.info(line)

        with tqdm(
            desc="Exploring",
            unit="node",
            disable=not config.engine.print_progress,
        ) as bar:

            def on_progress(progress: ExplorationProgress):
                bar.update(1)
                bar.set_postfix(
                    variations=progress.variations_found,
                    depth_left=progress.depth_remaining,
                )

            explorer = VariationExplorer(
                engine,
                variations.engine_depth,
                progress=on_progress,
            )
            found = explorer.explore(initial, variations.variation_depth, variations.is_white)

    return write_variations(found, config.output_path)


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Enumerate opening variations with a UCI engine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        default="config.json",
        help="JSON configuration file",
    )
    parser.add_argument(
        "--engine",
        default=None,
        help="Engine executable (overrides engine-path)",
    )
    parser.add_argument(
        "--moves",
        default=None,
        help="Initial moves in UCI notation, e.g. 'e2e4 e7e5'",
    )
    parser.add_argument(
        "--color",
        choices=["white", "black"],
        default=None,
        help="Side flag (overrides is-white)",
    )
    parser.add_argument(
        "--engine-depth",
        type=int,
        default=None,
        help="Engine search depth per position",
    )
    parser.add_argument(
        "--variation-depth",
        type=int,
        default=None,
        help="Plies to add to the initial line",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="Engine threads",
    )
    parser.add_argument(
        "--hash",
        type=int,
        default=None,
        help="Engine hash size in MB",
    )
    parser.add_argument(
        "--multipv",
        type=int,
        default=None,
        help="Candidate moves per branching node",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Output file (default: output-path from config, else stdout)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )
    parser.add_argument(
        "--print-all",
        action="store_true",
        help="Log every line the engine prints",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    try:
        config = apply_overrides(load_config(args.config), args)
        count = run(config)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        sys.exit(1)
    except (OpeningTreeError, ValueError) as e:
        print(f"\n\nError: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    logger.info(f"Done: {count} variations")


if __name__ == "__main__":
    main()
