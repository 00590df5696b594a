"""Entry point for playing the Tanx Duel artillery game."""

import argparse
import logging

from tanx_duel.core import RoundSettings
from tanx_duel.pygame import run_pygame


def main() -> None:
    parser = argparse.ArgumentParser(description="Tanx artillery duel")
    parser.add_argument("--width", type=int, default=800, help="world width in pixels")
    parser.add_argument("--height", type=int, default=600, help="world height in pixels")
    parser.add_argument("--players", type=int, default=2, help="number of tanks (2-4)")
    parser.add_argument("--seed", type=int, default=None, help="seed for a reproducible match")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="print additional debug information to the console",
    )
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    run_pygame(
        args.width,
        args.height,
        seed=args.seed,
        settings=RoundSettings(player_count=args.players),
    )


if __name__ == "__main__":
    main()
