"""
Snapshot persistence - Save and restore a game between turns.

File format (CSV, one record per line):

    TURN,<current player index>
    TABLE,<tile>,<tile>,...
    <N rows per board, N fields each, "." for an empty cell>

Boards follow in seating order. The draw pile is not stored: on load it
is rebuilt as the supply minus every grid and table tile, then shuffled.
A tile held mid-turn is not stored either, so it returns to the pile.
"""

from __future__ import annotations
import csv
from collections import Counter
import logging
import os
import random
from typing import Sequence

from .engine_core.config import EngineConfig, DEFAULT_CONFIG
from .engine_core.grid import Grid, EMPTY
from .engine_core.setup import build_supply
from .engine_core.state import Board, DrawPile, GamePhase, GameState, Table
from .errors import SnapshotError

logger = logging.getLogger("unlucky.engine")

EMPTY_MARK = "."


def save_snapshot(state: GameState, path: str | os.PathLike) -> None:
    """Write `state` to `path` in snapshot format."""
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["TURN", state.current_player_idx])
        writer.writerow(["TABLE", *state.table.tiles])
        for board in state.boards:
            for row in board.grid.rows:
                writer.writerow([EMPTY_MARK if v == EMPTY else v for v in row])
    logger.info("Saved snapshot to %s", path)


def load_snapshot(
    path: str | os.PathLike,
    automated: Sequence[bool] | None = None,
    bruno_variant: bool = False,
    random_seed: int | None = None,
    config: EngineConfig | None = None,
) -> GameState:
    """
    Read a snapshot into a fresh GameState.

    Args:
        path: Snapshot file
        automated: Per-board automa flags; default is the first board
            human and every other board automated
        bruno_variant: Enable the diagonal-match extra turn
        random_seed: Seed for shuffling the rebuilt draw pile
        config: Engine configuration (board size, supply)

    Raises:
        SnapshotError: the file is malformed or breaks tile conservation
        OSError: the file cannot be read
    """
    config = config or DEFAULT_CONFIG
    with open(path, newline="") as f:
        records = [record for record in csv.reader(f) if record]
    return parse_snapshot(records, automated, bruno_variant, random_seed, config)


def parse_snapshot(
    records: list[list[str]],
    automated: Sequence[bool] | None = None,
    bruno_variant: bool = False,
    random_seed: int | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> GameState:
    """Build a GameState from already-split CSV records."""
    if len(records) < 2:
        raise SnapshotError("Snapshot too short: expected TURN and TABLE records")

    turn = _parse_turn(records[0])
    table = _parse_table(records[1], config)
    grids = _parse_grids(records[2:], config)
    if not grids:
        raise SnapshotError("Snapshot holds no boards")
    if not 0 <= turn < len(grids):
        raise SnapshotError(f"TURN index {turn} out of range for {len(grids)} boards")

    if automated is None:
        automated = [idx > 0 for idx in range(len(grids))]
    elif len(automated) != len(grids):
        raise SnapshotError(f"{len(automated)} automa flags given for {len(grids)} boards")

    boards = []
    humans = bots = 0
    for grid, is_bot in zip(grids, automated):
        if is_bot:
            bots += 1
            player_id, name = f"bot_{bots}", f"Computer {bots}"
        else:
            humans += 1
            player_id, name = f"player_{humans}", f"Player {humans}"
        boards.append(Board(player_id=player_id, name=name, grid=grid, is_automated=bool(is_bot)))

    pile = Counter(build_supply(len(boards), config))
    used = Counter(table)
    for grid in grids:
        used.update(grid.values())
    for value, count in sorted(used.items()):
        if count > pile[value]:
            raise SnapshotError(f"Tile {value} appears {count} times, supply has {pile[value]}")
    pile.subtract(used)

    rng = random.Random(random_seed)
    tiles = list(pile.elements())
    tiles.sort()
    rng.shuffle(tiles)

    logger.info("Loaded snapshot: %d boards, %d tiles on table", len(boards), len(table))
    return GameState(
        game_id=f"unlucky_snapshot_{random_seed if random_seed is not None else rng.randint(0, 999999)}",
        boards=boards,
        table=Table(tiles=table),
        draw_pile=DrawPile.of(tiles),
        phase=GamePhase.PLAYING,
        current_player_idx=turn,
        bruno_variant=bruno_variant,
        config=config,
    )


def _parse_int(raw: str, what: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise SnapshotError(f"Bad {what}: {raw!r}") from None


def _parse_turn(record: list[str]) -> int:
    if record[0].strip() != "TURN":
        raise SnapshotError("Expected TURN record")
    if len(record) < 2:
        raise SnapshotError("TURN record missing player index")
    return _parse_int(record[1], "player index")


def _parse_table(record: list[str], config: EngineConfig) -> list[int]:
    if record[0].strip() != "TABLE":
        raise SnapshotError("Expected TABLE record")
    tiles = []
    for raw in record[1:]:
        if raw.strip() in ("", EMPTY_MARK):
            continue
        tile = _parse_int(raw, "table tile")
        if not 1 <= tile <= config.max_tile:
            raise SnapshotError(f"Table tile {tile} outside 1..{config.max_tile}")
        tiles.append(tile)
    return tiles


def _parse_grids(records: list[list[str]], config: EngineConfig) -> list[Grid]:
    size = config.board_size
    if len(records) % size:
        raise SnapshotError(f"{len(records)} board rows is not a multiple of {size}")

    grids = []
    for start in range(0, len(records), size):
        rows = []
        for record in records[start:start + size]:
            if len(record) != size:
                raise SnapshotError(f"Board row with {len(record)} fields, expected {size}")
            row = []
            for raw in record:
                if raw.strip() == EMPTY_MARK:
                    row.append(EMPTY)
                    continue
                tile = _parse_int(raw, "board tile")
                if not 1 <= tile <= config.max_tile:
                    raise SnapshotError(f"Board tile {tile} outside 1..{config.max_tile}")
                row.append(tile)
            rows.append(row)
        grids.append(Grid.from_rows(rows))
    return grids
