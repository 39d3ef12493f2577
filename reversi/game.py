"""Othello board, move rules and turn handling."""
from __future__ import annotations

from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

BOARD_SIZE = 8

EMPTY = 0
BLACK = 1
WHITE = -1

DIRECTIONS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
]

Coord = Tuple[int, int]


class IllegalMove(ValueError):
    """Raised when a move is applied that the rules do not allow."""

    def __init__(self, row: int, col: int, side: int) -> None:
        super().__init__(f"illegal move ({row}, {col}) for {side_name(side)}")
        self.row = row
        self.col = col
        self.side = side


def opponent(side: int) -> int:
    return -side


def side_name(side: int) -> str:
    if side == BLACK:
        return "Black"
    if side == WHITE:
        return "White"
    return "Nobody"


def inside(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


class Board:
    """8x8 grid of cell states plus the number of pieces placed so far."""

    def __init__(self) -> None:
        # Board represented as 2D list: 0 empty, 1 black, -1 white
        self.grid: List[List[int]] = [[EMPTY for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]
        mid = BOARD_SIZE // 2
        self.grid[mid - 1][mid - 1] = WHITE
        self.grid[mid][mid] = WHITE
        self.grid[mid - 1][mid] = BLACK
        self.grid[mid][mid - 1] = BLACK
        self.move_count = 4

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Board":
        """Build a board from explicit rows.

        The move count is derived from the pieces on the board, so the
        result is consistent no matter how the position was reached.
        """
        if len(rows) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in rows):
            raise ValueError(f"board must be {BOARD_SIZE}x{BOARD_SIZE}")
        board = cls.__new__(cls)
        board.grid = [list(row) for row in rows]
        black, white = board.count_pieces()
        board.move_count = black + white
        return board

    def copy(self) -> "Board":
        # Bypass ``__init__`` to avoid re-seeding the grid only to overwrite it.
        new_board = Board.__new__(Board)
        new_board.grid = [row[:] for row in self.grid]
        new_board.move_count = self.move_count
        return new_board

    def cell_at(self, row: int, col: int) -> int:
        return self.grid[row][col]

    def set_cell(self, row: int, col: int, side: int) -> None:
        self.grid[row][col] = side

    def count_pieces(self) -> Tuple[int, int]:
        black = sum(cell == BLACK for row in self.grid for cell in row)
        white = sum(cell == WHITE for row in self.grid for cell in row)
        return black, white

    def is_full(self) -> bool:
        return self.move_count >= BOARD_SIZE * BOARD_SIZE

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.grid == other.grid and self.move_count == other.move_count

    def __repr__(self) -> str:
        black, white = self.count_pieces()
        return f"Board(black={black}, white={white}, move_count={self.move_count})"


def new_game() -> Board:
    return Board()


def _run(board: Board, row: int, col: int, dr: int, dc: int, side: int) -> List[Coord]:
    """Return the opponent run captured by ``side`` from (row, col) along (dr, dc).

    The run must start right next to the target and be closed by a
    ``side`` piece; otherwise nothing is captured in that direction.
    """
    other = opponent(side)
    r, c = row + dr, col + dc
    run: List[Coord] = []
    while inside(r, c) and board.grid[r][c] == other:
        run.append((r, c))
        r += dr
        c += dc
    if run and inside(r, c) and board.grid[r][c] == side:
        return run
    return []


def is_legal_move(board: Board, row: int, col: int, side: int) -> bool:
    if not inside(row, col) or board.grid[row][col] != EMPTY:
        return False
    return any(_run(board, row, col, dr, dc, side) for dr, dc in DIRECTIONS)


def captures(board: Board, row: int, col: int, side: int) -> List[Coord]:
    """Cells flipped by ``side`` playing at (row, col), direction by direction."""
    if not inside(row, col) or board.grid[row][col] != EMPTY:
        return []
    captured: List[Coord] = []
    for dr, dc in DIRECTIONS:
        captured.extend(_run(board, row, col, dr, dc, side))
    return captured


def valid_moves(board: Board, side: int) -> List[Coord]:
    moves = []
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            if is_legal_move(board, r, c, side):
                moves.append((r, c))
    return moves


def has_any_legal_move(board: Board, side: int) -> bool:
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            if is_legal_move(board, r, c, side):
                return True
    return False


def is_game_over(board: Board) -> bool:
    return not has_any_legal_move(board, BLACK) and not has_any_legal_move(board, WHITE)


class FlipEvent(NamedTuple):
    row: int
    col: int
    from_side: int
    to_side: int


class Flips:
    """The cells flipped by one move, replayable as ``FlipEvent`` values.

    Events are built on demand and every iteration starts again from the
    first flip, so a presentation layer can replay them as often as it likes.
    """

    def __init__(self, cells: Sequence[Coord], side: int) -> None:
        self._cells = tuple(cells)
        self.side = side

    def __iter__(self) -> Iterator[FlipEvent]:
        for r, c in self._cells:
            yield FlipEvent(r, c, opponent(self.side), self.side)

    def __len__(self) -> int:
        return len(self._cells)

    @property
    def cells(self) -> Tuple[Coord, ...]:
        return self._cells

    def __repr__(self) -> str:
        return f"Flips(side={self.side}, cells={list(self._cells)})"


def apply_move(board: Board, row: int, col: int, side: int) -> Flips:
    """Place a piece for ``side`` at (row, col) and flip every captured disc.

    Raises ``IllegalMove`` without touching the board when the move is not
    legal for ``side``.
    """
    captured = captures(board, row, col, side)
    if not captured:
        raise IllegalMove(row, col, side)
    board.grid[row][col] = side
    board.move_count += 1
    for r, c in captured:
        board.grid[r][c] = side
    return Flips(captured, side)


class Game:
    """Turn state for a single game on top of a ``Board``."""

    def __init__(self, board: Optional[Board] = None, current_player: int = BLACK) -> None:
        self.board = board if board is not None else new_game()
        self.current_player = current_player
        # Track the coordinates of the most recent move. ``None`` means no
        # moves have been played yet.
        self.last_move: Optional[Coord] = None

    def valid_moves(self, player: Optional[int] = None) -> List[Coord]:
        if player is None:
            player = self.current_player
        return valid_moves(self.board, player)

    def can_move(self, player: Optional[int] = None) -> bool:
        if player is None:
            player = self.current_player
        return has_any_legal_move(self.board, player)

    def play(self, row: int, col: int) -> Optional[Flips]:
        """Play (row, col) for the side to move.

        Returns the flips on success. Illegal or off-board moves return
        ``None`` and leave the game unchanged.
        """
        player = self.current_player
        if not is_legal_move(self.board, row, col, player):
            return None
        flips = apply_move(self.board, row, col, player)
        self.last_move = (row, col)
        self.current_player = opponent(player)
        return flips

    def must_pass(self) -> bool:
        """True when the side to move is stuck but the opponent can still play."""
        return not self.can_move() and self.can_move(opponent(self.current_player))

    def pass_turn(self) -> bool:
        """Hand the turn to the opponent if the side to move has no legal move."""
        if not self.must_pass():
            return False
        self.current_player = opponent(self.current_player)
        return True

    def is_over(self) -> bool:
        return is_game_over(self.board)

    def score(self) -> Tuple[int, int]:
        return self.board.count_pieces()

    def winner(self) -> Optional[int]:
        """``BLACK``, ``WHITE`` or ``0`` for a draw; ``None`` while still in play."""
        if not self.is_over():
            return None
        black, white = self.score()
        if black > white:
            return BLACK
        if white > black:
            return WHITE
        return 0
