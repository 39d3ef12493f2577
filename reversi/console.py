#!/usr/bin/env python3
"""Play Reversi against the computer in a terminal."""
from __future__ import annotations

import argparse
import logging
from typing import Callable, Optional, Sequence, Tuple

from .game import BLACK, BOARD_SIZE, WHITE, Board, Game, opponent, side_name
from .search import best_move

logger = logging.getLogger(__name__)

COLUMNS = "ABCDEFGH"
SYMBOLS = {BLACK: "X", WHITE: "O"}


class InvalidCoordinate(ValueError):
    """Raised for text that is not a board coordinate such as ``D3``."""


def parse_coordinate(token: str) -> Tuple[int, int]:
    """Turn ``"D3"`` (column letter, then row digit) into ``(row, col)``."""
    text = token.strip().upper()
    if len(text) != 2:
        raise InvalidCoordinate(f"expected a letter and a digit, got {token!r}")
    letter, digit = text
    if letter not in COLUMNS or digit not in "12345678":
        raise InvalidCoordinate(f"{token!r} is not on the board")
    return int(digit) - 1, COLUMNS.index(letter)


def format_coordinate(row: int, col: int) -> str:
    return f"{COLUMNS[col]}{row + 1}"


def render(board: Board) -> str:
    black, white = board.count_pieces()
    lines = [
        f"Score - Black ({SYMBOLS[BLACK]}): {black}  |  White ({SYMBOLS[WHITE]}): {white}",
        "",
        "   " + " ".join(COLUMNS),
    ]
    for r in range(BOARD_SIZE):
        cells = [SYMBOLS.get(board.cell_at(r, c), ".") for c in range(BOARD_SIZE)]
        lines.append(f"{r + 1}  " + " ".join(cells))
    return "\n".join(lines)


def play(
    human: int = BLACK,
    input_func: Callable[[str], str] = input,
    print_func: Callable[[str], None] = print,
    game: Optional[Game] = None,
) -> Game:
    """Run a full game in the terminal and return the finished game.

    Bad or illegal input is reported and asked for again without touching
    the board. End of input stops the game where it stands.
    """
    if game is None:
        game = Game()
    computer = opponent(human)

    while not game.is_over():
        print_func("\n" + render(game.board))
        player = game.current_player

        if game.pass_turn():
            logger.info("%s passes", side_name(player))
            print_func(f"\n{side_name(player)} has no valid moves. Passing...")
            continue

        if player == human:
            try:
                text = input_func(f"\nYour turn ({side_name(player)}): ")
            except EOFError:
                logger.info("input closed, leaving game")
                return game
            try:
                row, col = parse_coordinate(text)
            except InvalidCoordinate:
                print_func("Invalid input! Enter moves as A1, B2, C3, etc.")
                continue
            if game.play(row, col) is None:
                print_func("Invalid move! Try again.")
        else:
            print_func("\nAI is thinking...")
            move = best_move(game.board, computer)
            if move is None:
                continue
            game.play(*move)
            print_func(f"AI played: {format_coordinate(*move)}")

    print_func("\n" + render(game.board))
    black, white = game.score()
    logger.info("game over: black %d, white %d", black, white)
    print_func("\n=== GAME OVER ===")
    print_func(f"Final Score:\nBlack ({SYMBOLS[BLACK]}): {black}\nWhite ({SYMBOLS[WHITE]}): {white}")
    winner = game.winner()
    if winner == 0:
        print_func("\nIT'S A TIE!")
    elif winner == human:
        print_func("\nYOU WIN!")
    else:
        print_func("\nAI WINS!")
    return game


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Play Reversi against the computer")
    parser.add_argument(
        "--human",
        choices=("black", "white"),
        default="black",
        help="Colour you play; Black moves first",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log the computer's search results"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    play(human=BLACK if args.human == "black" else WHITE)


if __name__ == "__main__":
    main()
