"""
Sparse Life - unbounded Game of Life and B/S rule variants.

Main entry point for simulations.
"""

from __future__ import annotations
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from sparse_life.config import LifeConfig, RuleParams
from sparse_life.core import SequenceResult, World
from sparse_life.patterns import PATTERNS, get_pattern, load_pattern
from sparse_life.visualization import common_rect, render_text, plot_population, plot_world


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def run_simulation(
    config: LifeConfig,
    seed_cells,
    stop_population: Optional[int] = None,
) -> SequenceResult:
    """
    Run one simulation.

    Args:
        config: Simulation configuration
        seed_cells: Initial live (x, y) cells
        stop_population: Halt once the population exceeds this cap

    Returns:
        SequenceResult of the run
    """
    issues = config.validate()
    for issue in issues:
        logger.warning(f"Config: {issue}")

    engine = config.build_engine()
    driver = config.build_driver(engine)
    seed = World.from_cells(seed_cells, cache=engine.cache)

    logger.info(f"Rule {config.rule.rulestring}, seed population {seed.population}, "
                f"window {config.sequence.window_size}")

    predicate = None
    if stop_population is not None:
        def predicate(history, generation, _reserved):
            return history[0].population > stop_population

    with engine:
        result = driver.run(seed, config.sequence.window_size, stop_predicate=predicate)

    logger.info(result.summary())
    logger.info(f"Cached coordinates: {len(engine.cache)}")
    return result


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for running simulations."""
    parser = argparse.ArgumentParser(description="Sparse Life Simulator")

    source = parser.add_mutually_exclusive_group()
    source.add_argument('--pattern', type=str, default='r_pentomino',
                        choices=sorted(PATTERNS),
                        help='Built-in seed pattern (default: r_pentomino)')
    source.add_argument('--file', type=str, default=None,
                        help='Seed pattern file (.rle or .cells)')
    parser.add_argument('--config', type=str, default=None,
                        help='JSON configuration file')
    parser.add_argument('--rule', type=str, default=None,
                        help='Rulestring or preset name (default: B3/S23)')
    parser.add_argument('--window', type=int, default=None,
                        help='Sliding window size (default: 10)')
    parser.add_argument('--max-generations', type=int, default=None,
                        help='Stop after this many generations (default: unbounded)')
    parser.add_argument('--stop-population', type=int, default=None,
                        help='Stop once the population exceeds this cap')
    parser.add_argument('--workers', type=int, default=None,
                        help='Neighbor-counting threads (default: CPU count)')
    parser.add_argument('--flush-threshold', type=int, default=None,
                        help='Cache flush retain threshold (default: 2 * window + 1)')
    parser.add_argument('--flush-interval', type=int, default=None,
                        help='Flush the coordinate cache every N generations')
    parser.add_argument('--show', action='store_true',
                        help='Print the retained generations as text')
    parser.add_argument('--plot', type=str, default=None,
                        help='Save a figure of the final world and population to this path')

    args = parser.parse_args(argv)

    config = LifeConfig.load(args.config) if args.config else LifeConfig()

    if args.file:
        cells, file_rule = load_pattern(args.file)
        if file_rule and args.rule is None:
            try:
                config.rule = RuleParams.from_rulestring(file_rule)
            except ValueError as e:
                parser.error(f"{args.file}: {e}")
        logger.info(f"Loaded {len(cells)} cells from {args.file}")
    else:
        cells = get_pattern(args.pattern).cells

    if args.rule is not None:
        try:
            config.rule = RuleParams.from_rulestring(args.rule)
        except ValueError as e:
            parser.error(str(e))
    if args.window is not None:
        config.sequence.window_size = args.window
    if args.max_generations is not None:
        config.sequence.max_generations = args.max_generations
    if args.flush_threshold is not None:
        config.sequence.flush_threshold = args.flush_threshold
    if args.flush_interval is not None:
        config.sequence.flush_interval = args.flush_interval
    if args.workers is not None:
        config.engine.workers = args.workers

    result = run_simulation(config, cells, stop_population=args.stop_population)

    if args.show:
        non_empty = [w for w in result if not w.is_extinct]
        rect = common_rect(non_empty) if non_empty else None
        for world in result:
            print(f"Generation {world.generation} (population {world.population})")
            print(render_text(world, rect=rect) if rect is not None else "")
            print()

    if args.plot:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        fig, (ax_world, ax_pop) = plt.subplots(1, 2, figsize=(12, 5))
        final = result.final_world
        if final is not None:
            plot_world(final, ax=ax_world)
        plot_population(result, ax=ax_pop)
        fig.tight_layout()

        plot_path = Path(args.plot)
        plot_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(plot_path, dpi=150)
        plt.close(fig)
        logger.info(f"Figure saved to: {plot_path}")

    logger.info("Done!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
