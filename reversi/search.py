"""Move search for the computer player: fixed-depth minimax with alpha-beta pruning."""
from __future__ import annotations

import logging
from typing import NamedTuple, Optional

from .evaluation import evaluate
from .game import Board, Coord, apply_move, has_any_legal_move, opponent, side_name, valid_moves

logger = logging.getLogger(__name__)

MAX_DEPTH = 4
INF = float("inf")


class SearchStats:
    """Counts the positions visited during one search."""

    def __init__(self) -> None:
        self.nodes = 0


class SearchResult(NamedTuple):
    move: Optional[Coord]
    score: float
    nodes: int


def minimax(
    board: Board,
    depth: int,
    maximizing: bool,
    perspective: int,
    alpha: float = -INF,
    beta: float = INF,
    stats: Optional[SearchStats] = None,
) -> float:
    """Score ``board`` for ``perspective`` searching ``depth`` plies ahead.

    ``maximizing`` tells whether ``perspective`` or its opponent is to move.
    A side without a legal move passes, which costs one ply; when neither
    side can move the position is scored as it stands. ``board`` is never
    modified: each child position is searched on its own copy.
    """
    if stats is not None:
        stats.nodes += 1
    if depth <= 0 or board.is_full():
        return evaluate(board, perspective)

    current = perspective if maximizing else opponent(perspective)
    moves = valid_moves(board, current)
    if not moves:
        if not has_any_legal_move(board, opponent(current)):
            return evaluate(board, perspective)
        return minimax(board, depth - 1, not maximizing, perspective, alpha, beta, stats)

    if maximizing:
        best = -INF
        for r, c in moves:
            child = board.copy()
            apply_move(child, r, c, current)
            best = max(best, minimax(child, depth - 1, False, perspective, alpha, beta, stats))
            alpha = max(alpha, best)
            if beta <= alpha:
                break
    else:
        best = INF
        for r, c in moves:
            child = board.copy()
            apply_move(child, r, c, current)
            best = min(best, minimax(child, depth - 1, True, perspective, alpha, beta, stats))
            beta = min(beta, best)
            if beta <= alpha:
                break
    return best


def search(board: Board, side: int) -> SearchResult:
    """Pick ``side``'s move on ``board`` and report how it was found.

    Every legal move is scored with a fresh alpha-beta window; the first
    move with the highest score in row-major order wins. ``move`` is
    ``None`` when ``side`` has to pass.
    """
    stats = SearchStats()
    best: Optional[Coord] = None
    best_score = -INF
    for r, c in valid_moves(board, side):
        child = board.copy()
        apply_move(child, r, c, side)
        score = minimax(child, MAX_DEPTH - 1, False, side, -INF, INF, stats)
        if score > best_score:
            best_score = score
            best = (r, c)
    if best is None:
        logger.debug("%s has no legal move", side_name(side))
    else:
        logger.debug(
            "%s plays %s (score %s, %d nodes)", side_name(side), best, best_score, stats.nodes
        )
    return SearchResult(best, best_score, stats.nodes)


def best_move(board: Board, side: int) -> Optional[Coord]:
    """Return the computer's move for ``side`` or ``None`` if it must pass."""
    return search(board, side).move
