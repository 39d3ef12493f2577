"""Static scoring of Othello positions."""
from __future__ import annotations

from .game import BLACK, BOARD_SIZE, Board, opponent

CORNER_WEIGHT = 25
EDGE_WEIGHT = 5

CORNERS = [(0, 0), (0, BOARD_SIZE - 1), (BOARD_SIZE - 1, 0), (BOARD_SIZE - 1, BOARD_SIZE - 1)]


def corner_score(board: Board, side: int) -> int:
    other = opponent(side)
    score = 0
    for r, c in CORNERS:
        cell = board.grid[r][c]
        if cell == side:
            score += CORNER_WEIGHT
        elif cell == other:
            score -= CORNER_WEIGHT
    return score


def edge_bonus(board: Board, side: int) -> int:
    """``EDGE_WEIGHT`` for every index ``i`` where an outer row or column holds ``side`` at ``i``.

    Each index counts once however many of the four edges match, and the
    opponent's edge discs are not subtracted.
    """
    last = BOARD_SIZE - 1
    grid = board.grid
    return EDGE_WEIGHT * sum(
        side in (grid[0][i], grid[last][i], grid[i][0], grid[i][last])
        for i in range(BOARD_SIZE)
    )


def evaluate(board: Board, side: int) -> int:
    """Return the score of ``board`` from ``side``'s perspective.

    Higher is better for ``side``: disc difference plus corner control plus
    the edge bonus.
    """
    black, white = board.count_pieces()
    discs = black - white if side == BLACK else white - black
    return discs + corner_score(board, side) + edge_bonus(board, side)
