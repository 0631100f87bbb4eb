"""
Command-line interface for inspecting deals and replaying recorded games.

Usage examples:

    crew-replay deal 1 2 3 4 --seats seat1 seat2 seat3
    crew-replay replay mission-log.json --json
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .constants import SEATS
from .engine import game_phase, initialize_game_state
from .models import ServerState
from .moves import parse_move
from .serialization import MissionLog, mission_summary, sanitize_state

logger = logging.getLogger(__name__)


def _add_deal_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "deal",
        help="Show the hands, captain and draft pool for a set of seeds.",
    )
    parser.add_argument(
        "seeds",
        type=int,
        nargs=4,
        help="The four 32-bit seeds of the deal.",
    )
    parser.add_argument(
        "--seats",
        nargs="+",
        choices=SEATS,
        default=["seat1", "seat2", "seat3", "seat4"],
        help="Active seats in turn order.",
    )
    parser.add_argument(
        "--target",
        type=int,
        default=None,
        help="Mission point budget.",
    )
    parser.set_defaults(func=_cmd_deal)


def _add_replay_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "replay",
        help="Replay a stored mission log and report every mission's outcome.",
    )
    parser.add_argument(
        "log_file",
        type=str,
        help="Path to a mission log JSON file.",
    )
    parser.add_argument(
        "--viewer",
        type=str,
        default=None,
        help="Participant guid to reveal hands and secret values for.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the sanitized final state as JSON.",
    )
    parser.set_defaults(func=_cmd_replay)


def _cmd_deal(args: argparse.Namespace) -> int:
    seed1, seed2, seed3, seed4 = args.seeds
    seats = {seat: f"{seat}-guid:{seat}" for seat in args.seats}
    server_state = ServerState(
        seed1=seed1,
        seed2=seed2,
        seed3=seed3,
        seed4=seed4,
        starting_seats=list(args.seats),
        status="started",
        meta={"target": args.target} if args.target else {},
        **seats,
    )
    state = initialize_game_state(server_state)

    print(f"captain: {state.captain_seat}  tricks: {state.total_tricks}")
    print(f"missions: {' '.join(template.id for template in state.missions)}")
    for player in state.active_players():
        print(f"{player.seat}: {' '.join(player.hand)}")
    return 0


def _cmd_replay(args: argparse.Namespace) -> int:
    try:
        raw = json.loads(Path(args.log_file).read_text())
        mission_log = MissionLog(**raw)
    except (OSError, ValueError) as e:
        print(f"Could not read mission log {args.log_file}: {e}", file=sys.stderr)
        return 1

    server_state = mission_log.to_server_state()
    moves = [move for move in map(parse_move, mission_log.moves) if move is not None]
    if len(moves) != len(mission_log.moves):
        logger.warning(f"Skipped {len(mission_log.moves) - len(moves)} malformed move tokens")

    state = initialize_game_state(server_state, moves, args.viewer)

    if args.json:
        print(json.dumps(sanitize_state(state, args.viewer), indent=2))
        return 0

    print(f"phase: {game_phase(state, server_state).value}  succeeded: {state.succeeded}  undo used: {state.undo_used}")
    for row in mission_summary(state):
        status = row["status"] or "pending"
        print(f"{row['seat']} {row['name']:<12} mission {row['mission']:>2} {row['kind']:<20} {status}")
    if state.succeeded != mission_log.success:
        logger.warning(f"Replay outcome {state.succeeded} differs from recorded {mission_log.success}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crew-replay", description=__doc__.splitlines()[1])
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.environ.get("LOG_LEVEL", "WARNING"),
        help="Logging level (defaults to $LOG_LEVEL or WARNING).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_deal_parser(subparsers)
    _add_replay_parser(subparsers)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
