"""
Text rendering for the terminal.

- render_state: table banner above all boards side by side
- render_score_map: score of the best move per cell for one tile
- render_moves / render_recommendation: ranked listings for prompts
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Sequence

from .engine_core.action import Move, describe
from .engine_core.action_generator import MoveGenerator
from .engine_core.grid import Cell, Grid, EMPTY

if TYPE_CHECKING:
    from .bots.recommender import Recommendation
    from .engine_core.state import Board, GameState

CELL_WIDTH = 5
BOARD_GAP = "  "


def _hline(size: int, width: int = CELL_WIDTH) -> str:
    return "+" + ("-" * width + "+") * size


def _row_line(cells: Sequence[str], width: int = CELL_WIDTH) -> str:
    return "|" + "|".join(content.center(width) for content in cells) + "|"


def render_grid_lines(grid: Grid, width: int = CELL_WIDTH) -> list[str]:
    """Boxed grid, one string per output line."""
    lines = []
    for row in grid.rows:
        lines.append(_hline(grid.size, width))
        lines.append(_row_line(["." if v == EMPTY else str(v) for v in row], width))
    lines.append(_hline(grid.size, width))
    return lines


def render_state(state: GameState) -> str:
    """Table banner and every board side by side, current player marked."""
    blocks: list[list[str]] = []
    for idx, board in enumerate(state.boards):
        grid_lines = render_grid_lines(board.grid)
        header = f"{board.name} *" if idx == state.current_player_idx else board.name
        blocks.append([header.center(len(grid_lines[0]))] + grid_lines)

    body = [BOARD_GAP.join(parts) for parts in zip(*blocks)]
    total = len(body[0]) if body else 0

    table = ",".join(str(t) for t in state.table.sorted()) or "(empty)"
    banner = [
        "+" + " TABLE ".center(total, "-") + "+",
        "|" + table.center(total) + "|",
        "+" + "-" * total + "+",
    ]
    footer = f"Draw pile: {len(state.draw_pile)} tiles"
    if state.held_tile is not None:
        footer += f"   In hand: {state.held_tile}"
    return "\n".join(banner + body + [footer])


def render_score_map(state: GameState, tile: int, board: Board | None = None) -> str:
    """
    Grid of scores for `tile`: the best move's score per cell.

    Cells the tile cannot go to show "-".
    """
    board = board or state.current_board
    scores = {
        move.cell: move.score
        for move in MoveGenerator(config=state.config).best_moves(state, tile, board=board)
    }
    grid = board.grid
    width = CELL_WIDTH + 1
    lines = [f"Scores for {tile} on {board.name}:"]
    for r in range(grid.size):
        lines.append(_hline(grid.size, width))
        cells = []
        for c in range(grid.size):
            score = scores.get(Cell(r, c))
            cells.append("-" if score is None else f"{score:.2f}")
        lines.append(_row_line(cells, width))
    lines.append(_hline(grid.size, width))
    return "\n".join(lines)


def render_moves(moves: Sequence[Move], limit: int = 5) -> str:
    """Numbered list of the top moves."""
    if not moves:
        return "No feasible placement - discard"
    lines = []
    for rank, move in enumerate(moves[:limit], start=1):
        lines.append(f"{rank:>2}. {describe(move):<40} score {move.score:.3f}")
    if len(moves) > limit:
        lines.append(f"    ... {len(moves) - limit} more")
    return "\n".join(lines)


def render_recommendation(rec: Recommendation | None) -> str:
    if rec is None:
        return "Recommendation: draw from the pile"
    text = f"Recommendation: take {rec.tile} from the {rec.source.value}, then {describe(rec.move)}"
    text += f" (score {rec.score:.3f})"
    if rec.weak_cell is not None:
        text += f"\n  Weakest tile sits at {rec.weak_cell}; consider swapping it out"
    return text
