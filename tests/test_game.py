import sys
from pathlib import Path

import pytest

# Ensure project root is on path
sys.path.append(str(Path(__file__).resolve().parents[1]))

from reversi.game import (
    BLACK,
    EMPTY,
    WHITE,
    Board,
    FlipEvent,
    Game,
    IllegalMove,
    apply_move,
    captures,
    has_any_legal_move,
    is_game_over,
    is_legal_move,
    new_game,
    valid_moves,
)

B, W = BLACK, WHITE


def empty_rows():
    return [[EMPTY] * 8 for _ in range(8)]


def first_move_playout():
    """Positions of a game where each side always plays its first legal move."""
    game = Game()
    positions = [(game.board.copy(), game.current_player)]
    while not game.is_over():
        if not game.pass_turn():
            game.play(*game.valid_moves()[0])
        positions.append((game.board.copy(), game.current_player))
    return positions


def test_initial_position():
    board = new_game()
    assert board.cell_at(3, 3) == WHITE
    assert board.cell_at(3, 4) == BLACK
    assert board.cell_at(4, 3) == BLACK
    assert board.cell_at(4, 4) == WHITE
    assert board.count_pieces() == (2, 2)
    assert board.move_count == 4
    assert Game().current_player == BLACK


def test_initial_valid_moves():
    board = new_game()
    assert set(valid_moves(board, BLACK)) == {(2, 3), (3, 2), (4, 5), (5, 4)}
    assert set(valid_moves(board, WHITE)) == {(2, 4), (3, 5), (4, 2), (5, 3)}


def test_opening_move_flips_one_disc():
    board = new_game()
    flips = apply_move(board, 2, 3, BLACK)
    expected = empty_rows()
    expected[2][3] = B
    expected[3][3] = B
    expected[3][4] = B
    expected[4][3] = B
    expected[4][4] = W
    assert board.grid == expected
    assert board.count_pieces() == (4, 1)
    assert board.move_count == 5
    assert list(flips) == [FlipEvent(3, 3, WHITE, BLACK)]


def test_move_flips_in_several_directions():
    rows = empty_rows()
    rows[1][3] = B
    rows[2][3] = W
    rows[3][0] = B
    rows[3][1] = W
    rows[3][2] = W
    # Open diagonal: not closed by a black disc, so nothing flips there.
    rows[4][4] = W
    board = Board.from_rows(rows)
    assert board.move_count == 6

    assert captures(board, 3, 3, BLACK) == [(2, 3), (3, 2), (3, 1)]
    flips = apply_move(board, 3, 3, BLACK)
    assert len(flips) == 3
    assert board.count_pieces() == (6, 1)
    assert board.cell_at(4, 4) == WHITE
    assert board.move_count == 7


def test_flip_events_can_be_replayed():
    board = new_game()
    apply_move(board, 2, 3, BLACK)
    flips = apply_move(board, 2, 2, WHITE)
    first = list(flips)
    assert first == list(flips)
    assert all(event.from_side == BLACK and event.to_side == WHITE for event in first)
    assert [(e.row, e.col) for e in first] == list(flips.cells)
    for event in first:
        assert board.cell_at(event.row, event.col) == WHITE


@pytest.mark.parametrize("side", [BLACK, WHITE])
def test_occupied_and_off_board_cells_are_illegal(side):
    board = new_game()
    for r in range(8):
        for c in range(8):
            if board.cell_at(r, c) != EMPTY:
                assert not is_legal_move(board, r, c, side)
    for r, c in [(-1, 0), (0, -1), (8, 0), (0, 8), (8, 8), (-1, -1), (100, 3)]:
        assert not is_legal_move(board, r, c, side)


def test_illegal_move_raises_and_leaves_board_alone():
    board = new_game()
    before = board.copy()
    with pytest.raises(IllegalMove):
        apply_move(board, 0, 0, BLACK)
    with pytest.raises(IllegalMove):
        apply_move(board, 3, 3, BLACK)
    with pytest.raises(ValueError):
        apply_move(board, 8, 8, WHITE)
    assert board == before


def test_piece_counts_through_a_whole_game():
    positions = first_move_playout()
    for board, _ in positions:
        black, white = board.count_pieces()
        empty = sum(cell == EMPTY for row in board.grid for cell in row)
        assert black + white + empty == 64
        assert board.move_count == black + white

    for board, side in positions:
        if not has_any_legal_move(board, side):
            continue
        r, c = valid_moves(board, side)[0]
        after = board.copy()
        flips = apply_move(after, r, c, side)
        black, white = board.count_pieces()
        new_black, new_white = after.count_pieces()
        mine, theirs = (new_black - black, new_white - white)
        if side == WHITE:
            mine, theirs = theirs, mine
        assert mine == 1 + len(flips)
        assert theirs == -len(flips)
        assert new_black + new_white == black + white + 1


def test_has_any_legal_move_matches_exhaustive_scan():
    for board, _ in first_move_playout():
        for side in (BLACK, WHITE):
            exists = any(is_legal_move(board, r, c, side) for r in range(8) for c in range(8))
            assert has_any_legal_move(board, side) == exists


def test_forced_pass_hands_turn_over_without_touching_board():
    rows = empty_rows()
    rows[0][0] = W
    rows[0][1] = B
    board = Board.from_rows(rows)
    game = Game(board, current_player=BLACK)

    assert not has_any_legal_move(board, BLACK)
    assert has_any_legal_move(board, WHITE)
    assert not game.is_over()

    before = board.copy()
    assert game.pass_turn()
    assert game.current_player == WHITE
    assert game.board == before
    # White can move, so there is nothing to pass.
    assert not game.pass_turn()
    assert game.current_player == WHITE


def test_game_over_when_neither_side_can_move():
    rows = empty_rows()
    rows[0][0] = W
    rows[7][7] = B
    board = Board.from_rows(rows)
    assert board.move_count == 2
    assert is_game_over(board)
    assert Game(board).winner() == 0

    full = Board.from_rows([[B] * 8 for _ in range(8)])
    assert full.is_full()
    assert is_game_over(full)
    assert Game(full).winner() == BLACK


def test_game_play_rejects_illegal_moves():
    game = Game()
    before = game.board.copy()
    assert game.play(0, 0) is None
    assert game.play(8, 3) is None
    assert game.board == before
    assert game.current_player == BLACK
    assert game.last_move is None


def test_last_move_tracking():
    game = Game()
    assert game.last_move is None
    assert game.play(2, 3) is not None
    assert game.last_move == (2, 3)
    assert game.current_player == WHITE
    assert game.winner() is None


def test_from_rows_rejects_wrong_shape():
    with pytest.raises(ValueError):
        Board.from_rows([[EMPTY] * 8 for _ in range(7)])
