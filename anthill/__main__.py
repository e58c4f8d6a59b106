"""Entry point for ``python -m anthill``.

Loads the default YAML config, restores any saved game, and opens a
Pygame window to play.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from anthill.simulation.config import SimulationConfig
from anthill.simulation.engine import SimulationEngine

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def main() -> None:
    """Parse CLI args, create engine, launch renderer."""
    parser = argparse.ArgumentParser(
        prog="anthill",
        description="Anthill - ant colony idle/action game",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--save",
        type=pathlib.Path,
        default=None,
        help="Save file location (overrides the config)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="RNG seed (overrides the config)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Target frames per second (default: 60)",
    )
    parser.add_argument(
        "--headless",
        type=int,
        metavar="TICKS",
        default=None,
        help="Run TICKS ticks without a window and print a summary",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    if args.save is not None:
        config.save_path = args.save
    if args.seed is not None:
        config.seed = args.seed

    engine = SimulationEngine(config=config)
    engine.load_game()

    if args.headless is not None:
        engine.run(ticks=args.headless)
        snap = engine.snapshot()
        print(
            f"tick={engine.tick} level={snap.level} kills={snap.enemies_killed} "
            f"resources={snap.resources}",
        )
        return

    from anthill.ui.pygame_client import PygameRenderer

    PygameRenderer(engine=engine).run(fps=args.fps)


if __name__ == "__main__":
    main()
