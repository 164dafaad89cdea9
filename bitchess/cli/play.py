from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import List, Optional

from ..config import Settings
from ..engine.errors import InvalidPositionError
from ..engine.game import Game
from ..engine.move import describe_move
from ..engine.policy import RandomPolicy, first_move_policy, self_play
from ..engine.state import STARTPOS_FEN
from ..engine.types import Color
from .render import render_ascii, render_compact


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play a game against itself with random moves")
    parser.add_argument(
        "--fen", type=str, default=STARTPOS_FEN, help="FEN string (default: startpos)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: none)")
    parser.add_argument(
        "--max-plies", type=int, default=500, help="Stop after this many plies (default: 500)"
    )
    parser.add_argument(
        "--policy", choices=("random", "first"), default="random", help="Move selection policy"
    )
    parser.add_argument(
        "--board",
        choices=("ascii", "compact", "none"),
        default="ascii",
        help="Board drawing style for the final position",
    )
    parser.add_argument("--verbose", action="store_true", help="Print every move played")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    try:
        game = Game.from_fen(args.fen, policy=settings.draw_policy())
    except InvalidPositionError as e:
        print(f"invalid position: {e}", file=sys.stderr)
        return 2

    policy = RandomPolicy(random.Random(args.seed)) if args.policy == "random" else first_move_policy
    white_first = game.state.side_to_move is Color.WHITE
    first_number = game.state.fullmove_number
    result = self_play(game, policy, max_plies=args.max_plies)

    if args.verbose:
        for ply, move in enumerate(result.moves):
            offset = ply if white_first else ply + 1
            number = first_number + offset // 2
            dots = "." if offset % 2 == 0 else "..."
            print(f"{number}{dots} {describe_move(move)}")
    if args.board == "ascii":
        print(render_ascii(game.state.board))
    elif args.board == "compact":
        print(render_compact(game.state.board))
    print(f"result={result.status.value} plies={result.plies} fen={result.final_fen}")
    logger.info("game finished", extra={"status": result.status.value, "plies": result.plies})
    return 0


if __name__ == "__main__":
    sys.exit(main())
