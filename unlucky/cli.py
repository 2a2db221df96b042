"""
Unlucky CLI - Command-line interface for the engine.

Usage:
    unlucky play [--humans N] [--bots N] [--bruno] [--analyze] [--seed S] [--load FILE]
    unlucky recommend <snapshot> [--tile T]     Advise the player to move in a saved game
    unlucky check <snapshot> <tile> <row> <col> Is a placement legal and completable?

Rows and columns are 0-indexed, matching the (r,c) notation in output.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import Callable

from .bots.recommender import DrawRecommender
from .display import render_moves, render_recommendation, render_score_map, render_state
from .engine_core.action import Discard, describe
from .engine_core.action_generator import MoveGenerator
from .engine_core.config import EngineConfig
from .engine_core.grid import Cell
from .engine_core.rules import is_legal, is_playable, remaining_counts
from .engine_core.setup import setup_game
from .engine_core.state import TileSource
from .errors import SnapshotError
from .session.game_loop import GameLoop, LoopState
from .snapshot import load_snapshot, save_snapshot

logger = logging.getLogger("unlucky")

InputFn = Callable[[str], str]


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Unlucky - Ripple grid tile engine",
        prog="unlucky",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug-level logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play an interactive game")
    play_parser.add_argument("--humans", type=int, default=1, help="Number of human players")
    play_parser.add_argument("--bots", type=int, default=1, help="Number of computer players")
    play_parser.add_argument("--bruno", action="store_true", help="Extra turn on diagonal match")
    play_parser.add_argument("--analyze", action="store_true",
                             help="Declare drawn tiles yourself (mirror a physical game)")
    play_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    play_parser.add_argument("--load", help="Resume from a snapshot file")

    # Recommend command
    recommend_parser = subparsers.add_parser("recommend", help="Advise the player to move")
    recommend_parser.add_argument("snapshot", help="Path to snapshot file")
    recommend_parser.add_argument("--tile", type=int, help="Rank placements for this tile")

    # Check command
    check_parser = subparsers.add_parser("check", help="Check a single placement")
    check_parser.add_argument("snapshot", help="Path to snapshot file")
    check_parser.add_argument("tile", type=int)
    check_parser.add_argument("row", type=int)
    check_parser.add_argument("col", type=int)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == "play":
        cmd_play(args)
    elif args.command == "recommend":
        cmd_recommend(args)
    elif args.command == "check":
        cmd_check(args)
    else:
        parser.print_help()
        sys.exit(1)


def _load_or_exit(path: str, config: EngineConfig, **kwargs):
    try:
        return load_snapshot(path, config=config, **kwargs)
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)
    except SnapshotError as e:
        print(f"Error: {e}")
        sys.exit(1)


def cmd_recommend(args):
    """Print the draw recommendation (and a move ranking) for a saved game."""
    config = EngineConfig.from_env()
    state = _load_or_exit(args.snapshot, config)
    board = state.current_board

    print(render_state(state))
    print()
    print(render_recommendation(DrawRecommender(config=config).recommend(state)))

    if args.tile is not None:
        moves = MoveGenerator(config=config).best_moves(state, args.tile, board=board)
        print()
        print(f"Best moves for {args.tile}:")
        print(render_moves(moves))
        print()
        print(render_score_map(state, args.tile, board=board))


def cmd_check(args):
    """Report legality and feasibility of one placement in a saved game."""
    config = EngineConfig.from_env()
    state = _load_or_exit(args.snapshot, config)
    board = state.current_board
    cell = Cell(args.row, args.col)

    legal = is_legal(board.grid, args.tile, cell, config.max_tile)
    playable = is_playable(state, cell, args.tile)
    remaining = remaining_counts(state)

    print(f"{board.name}: {args.tile} at {cell}")
    print(f"  legal:    {'yes' if legal else 'no'}")
    print(f"  feasible: {'yes' if playable else 'no'}")
    print(f"  copies of {args.tile} still obtainable: {remaining[args.tile]}")
    if not playable:
        sys.exit(2)


def cmd_play(args):
    """Start an interactive game."""
    config = EngineConfig.from_env()

    if args.load:
        state = _load_or_exit(args.load, config, bruno_variant=args.bruno, random_seed=args.seed)
        if args.humans != 1:
            automated = [i >= args.humans for i in range(state.num_players)]
            state = _load_or_exit(
                args.load, config, automated=automated,
                bruno_variant=args.bruno, random_seed=args.seed,
            )
        state.analyze = args.analyze
    else:
        diagonals = None
        if args.analyze:
            diagonals = [
                _ask_diagonal(input, f"Player {i + 1}", config)
                for i in range(args.humans)
            ]
        try:
            state = setup_game(
                num_humans=args.humans,
                num_bots=args.bots,
                analyze=args.analyze,
                bruno_variant=args.bruno,
                random_seed=args.seed,
                diagonals=diagonals,
                config=config,
            )
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)

    loop = GameLoop(state)
    run_interactive(loop)


def _ask_diagonal(ask: InputFn, name: str, config: EngineConfig) -> list[int] | None:
    size = config.board_size
    while True:
        line = ask(f"Enter {size} numbers for {name} diagonal (blank for random): ").strip()
        if not line:
            return None
        try:
            tiles = [int(part) for part in line.replace(",", " ").split()]
        except ValueError:
            print("Numbers only, please.")
            continue
        if len(tiles) != size:
            print(f"Need exactly {size} numbers.")
            continue
        return tiles


def run_interactive(loop: GameLoop, ask: InputFn = input) -> None:
    """Drive a game from the terminal until it ends or the player quits."""
    while loop.loop_state != LoopState.GAME_OVER:
        if loop.loop_state == LoopState.RUNNING_AUTOMA:
            result = loop.run_automa_turns()
            for line in result.actions:
                print(line)
            for error in result.errors:
                print(f"Error: {error}")
            if not result.success:
                return
            continue

        print()
        print(render_state(loop.state))
        if loop.loop_state == LoopState.WAITING_DRAW:
            if not _human_draw(loop, ask):
                print("Exiting game.")
                return
        else:
            _human_move(loop, ask)

    print()
    print(render_state(loop.state))
    print("GAME OVER!")
    winner = loop.state.get_board(loop.state.winner_id) if loop.state.winner_id else None
    if winner is not None:
        print(f"{winner.name} completed their grid.")
    else:
        print("The draw pile ran out with no completed grid.")


def _human_draw(loop: GameLoop, ask: InputFn) -> bool:
    """One draw prompt. Returns False when the player quits."""
    state = loop.state
    choice = ask(f"{state.current_board.name}: [d]raw, [t]able, [r]ecommend, [s]ave, or [q]uit? ")
    choice = choice.strip().lower()

    if choice == "q":
        return False

    if choice == "s":
        path = ask("Enter file name for save: ").strip()
        try:
            save_snapshot(state, path)
            print("Game saved.")
        except OSError as e:
            print(f"Failed to save: {e}")
        return True

    if choice == "r":
        print(render_recommendation(DrawRecommender(config=state.config).recommend(state)))
        return True

    if choice == "t":
        if state.table.is_empty:
            print("The table is empty.")
            return True
        print(f"Tiles on table: {state.table.sorted()}")
        tile = _ask_int(ask, "Enter tile to pick: ")
        if tile is None:
            return True
        result = loop.draw(TileSource.TABLE, tile)
    elif state.analyze:
        tile = _ask_int(ask, "Enter drawn tile: ")
        if tile is None:
            return True
        result = loop.draw(TileSource.DECLARED, tile)
    else:
        result = loop.draw(TileSource.PILE)

    for line in result.actions:
        print(line)
    for error in result.errors:
        print(f"Invalid choice: {error}")
    return True


def _human_move(loop: GameLoop, ask: InputFn) -> None:
    """One placement prompt for the held tile."""
    state = loop.state
    tile = state.held_tile
    action = ask(f"Action for {tile}? ([r]ecommend, [d]iscard, or row,col): ").strip().lower()

    if action == "d":
        result = loop.play(Discard(tile=tile))
    elif action == "r":
        moves = MoveGenerator(config=state.config).best_moves(state, tile)
        print(render_score_map(state, tile))
        print(render_moves(moves, limit=len(moves)))
        if not moves:
            return
        choice = _ask_int(ask, "Choose move number or press Enter to skip: ")
        if choice is None or not 1 <= choice <= len(moves):
            return
        result = loop.play(moves[choice - 1])
    else:
        try:
            row, col = (int(part) for part in action.split(","))
        except ValueError:
            print("Invalid input, try again.")
            return
        move = loop.move_for_cell(Cell(row, col))
        result = loop.play(move)
        if result.success:
            logger.debug("Human played %s", describe(move))

    for line in result.actions:
        print(line)
    for error in result.errors:
        print(f"Not allowed: {error}")


def _ask_int(ask: InputFn, prompt: str) -> int | None:
    text = ask(prompt).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        print("Invalid number.")
        return None


if __name__ == "__main__":
    main()
