#!/usr/bin/env python3
"""Score a bowling game from a sequence of rolls.

Rolls are taken in turn order, e.g. for two players::

    python scripts/score_game.py --player Ann --player Bob 10 3 5 ...
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

from app.config import MAX_PLAYERS
from app.scoring.bowling import BowlingError, Game

logger = logging.getLogger("score_game")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "rolls",
        nargs="*",
        type=int,
        help="Pins knocked down by each ball, in turn order",
    )
    parser.add_argument(
        "--player",
        dest="players",
        action="append",
        default=None,
        help="Player name (repeat for multiple players; default: 'Player 1')",
    )
    parser.add_argument(
        "--max-players",
        type=int,
        default=MAX_PLAYERS,
        help="Maximum players allowed in the game",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the score card as JSON instead of a table",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def play(rolls: Sequence[int], players: Sequence[str], max_players: int) -> Game:
    game = Game(max_players)
    for name in players:
        game.add_player(name)
    for pins in rolls:
        game.roll(pins)
    return game


def _format_frame(pins: List[int], is_last: bool) -> str:
    marks: List[str] = []
    standing = 10
    fresh_rack = True
    for knocked in pins:
        if fresh_rack and knocked == 10:
            marks.append("X")
        elif not fresh_rack and knocked == standing:
            marks.append("/")
        else:
            marks.append("-" if knocked == 0 else str(knocked))
        standing -= knocked
        fresh_rack = standing == 0 or not fresh_rack
        if standing == 0:
            if not is_last:
                break
            standing = 10
    return " ".join(marks)


def render(game: Game) -> str:
    lines = []
    for player in game.players:
        frames = game.frames_for(player.id)
        marks = [_format_frame(f.pins, f.is_last) for f in frames]
        totals = game.running_totals(player.id)
        lines.append(f"{player.name}: {game.get_player_score(player.id)}")
        lines.append("  | " + " | ".join(f"{m:^7}" for m in marks) + " |")
        lines.append("  | " + " | ".join(f"{t:^7}" for t in totals) + " |")
    if game.winner is not None:
        lines.append(f"Winner: {game.winner.name}")
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    players = args.players or ["Player 1"]

    try:
        game = play(args.rolls, players, args.max_players)
    except BowlingError as exc:
        logger.error("%s (%s)", exc.detail, exc.kind.value)
        return 1

    if args.json:
        card = {
            "players": [
                {
                    "name": player.name,
                    "frames": [f.pins for f in game.frames_for(player.id)],
                    "scores": game.frame_scores(player.id),
                    "total": total,
                }
                for player, total in game.standings()
            ],
            "winner": game.winner.name if game.winner else None,
        }
        print(json.dumps(card, indent=2))
    else:
        print(render(game))
    return 0


if __name__ == "__main__":
    sys.exit(main())
