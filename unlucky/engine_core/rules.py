"""
Rules - Placement legality and completion feasibility.

Legality looks only at the nearest occupied cell in each of the four
directions: inward neighbours (up/left) must be smaller, outward
neighbours (down/right) must be larger.

Feasibility additionally asks whether the empty cells between a
placement and the next occupied cell outward (or the edge) can still be
filled from the tiles this board can obtain. Each empty cell on the
path reserves the smallest remaining value above the previous one, so
a path that would need tiles that no longer exist is rejected even
though the placement is legal today.

All predicates are total: malformed input (tile 0, out-of-range tile,
out-of-bounds cell) is answered with False, never an exception.
"""

from __future__ import annotations
from collections import Counter
import logging
from typing import TYPE_CHECKING, Mapping

from .config import DEFAULT_CONFIG
from .grid import Cell, Grid, EMPTY, INWARD, OUTWARD

if TYPE_CHECKING:
    from .state import Board, GameState

logger = logging.getLogger("unlucky.engine")


def _max_tile_for(grid: Grid) -> int:
    return grid.size * DEFAULT_CONFIG.tiles_per_cell


def is_valid_tile(tile: int, max_tile: int) -> bool:
    return isinstance(tile, int) and 1 <= tile <= max_tile


def is_legal(grid: Grid, tile: int, cell: Cell, max_tile: int | None = None) -> bool:
    """
    Check that `tile` at `cell` respects its nearest neighbours.

    The current content of `cell` itself is ignored, so the same check
    serves plain placements and swaps.
    """
    max_tile = max_tile or _max_tile_for(grid)
    if not is_valid_tile(tile, max_tile) or not cell.in_bounds(grid.size):
        return False

    for direction in INWARD:
        neighbour = grid.nearest(cell, direction)
        if neighbour is not None and not tile > grid.get(neighbour):
            return False

    for direction in OUTWARD:
        neighbour = grid.nearest(cell, direction)
        if neighbour is not None and not tile < grid.get(neighbour):
            return False

    return True


def remaining_counts(state: GameState) -> Counter[int]:
    """
    Copies of each value this board can still obtain.

    Supply minus every tile locked into any grid. Tiles on the table,
    in the draw pile or in hand all count as obtainable. The ledger is
    derived from the supply rather than from the pile, so states loaded
    from snapshots give the same answers.
    """
    supply = state.supply_per_value
    locked = state.locked_counts()
    counts: Counter[int] = Counter()
    for value in range(1, state.config.max_tile + 1):
        left = supply - locked[value]
        if left > 0:
            counts[value] = left
    return counts


def _smallest_at_least(pool: Counter[int], minimum: int) -> int | None:
    candidates = [value for value, count in pool.items() if count > 0 and value >= minimum]
    return min(candidates) if candidates else None


def _largest_at_most(pool: Counter[int], maximum: int) -> int | None:
    candidates = [value for value, count in pool.items() if count > 0 and value <= maximum]
    return max(candidates) if candidates else None


def _outward_path_fillable(
    grid: Grid,
    cell: Cell,
    tile: int,
    direction: tuple[int, int],
    remaining: Mapping[int, int],
) -> bool:
    """Empty cells outward of `cell` can take strictly increasing tiles."""
    pool = Counter(remaining)
    minimum = tile + 1
    for other in grid.walk(cell, direction):
        value = grid.get(other)
        if value != EMPTY:
            return value >= minimum
        chosen = _smallest_at_least(pool, minimum)
        if chosen is None:
            logger.debug("No tile >= %d left for %s (placing %d at %s)", minimum, other, tile, cell)
            return False
        pool[chosen] -= 1
        minimum = chosen + 1
    return True


def _inward_path_fillable(
    grid: Grid,
    cell: Cell,
    tile: int,
    direction: tuple[int, int],
    remaining: Mapping[int, int],
) -> bool:
    """Mirror image of the outward walk: strictly decreasing tiles inward."""
    pool = Counter(remaining)
    maximum = tile - 1
    for other in grid.walk(cell, direction):
        value = grid.get(other)
        if value != EMPTY:
            return value <= maximum
        chosen = _largest_at_most(pool, maximum)
        if chosen is None:
            logger.debug("No tile <= %d left for %s (placing %d at %s)", maximum, other, tile, cell)
            return False
        pool[chosen] -= 1
        maximum = chosen - 1
    return True


def is_feasible(
    grid: Grid,
    cell: Cell,
    tile: int,
    remaining: Mapping[int, int],
    check_inward: bool = False,
    max_tile: int | None = None,
) -> bool:
    """
    Check that a legal placement can still lead to a completed grid.

    Feasibility implies legality: an illegal placement is never feasible.
    Outward paths (down, right) are always checked against the supply;
    inward paths only when `check_inward` is set.
    """
    if not is_legal(grid, tile, cell, max_tile):
        return False

    for direction in OUTWARD:
        if not _outward_path_fillable(grid, cell, tile, direction, remaining):
            return False

    if check_inward:
        for direction in INWARD:
            if not _inward_path_fillable(grid, cell, tile, direction, remaining):
                return False

    return True


def is_playable(state: GameState, cell: Cell, tile: int, board: Board | None = None) -> bool:
    """
    Legality and feasibility of `tile` at `cell` on a board of `state`.

    If the cell is occupied the placement is judged as a swap: the
    displaced tile goes back to the table and counts as obtainable.
    """
    board = board or state.current_board
    grid = board.grid
    config = state.config
    if not cell.in_bounds(grid.size):
        return False

    pool = remaining_counts(state)
    old = grid.get(cell)
    if old != EMPTY:
        pool[old] += 1

    return is_feasible(
        grid, cell, tile, pool,
        check_inward=config.check_inward_supply,
        max_tile=config.max_tile,
    )
