"""FastAPI front end for playing Reversi against the computer in a browser.

One local game is hosted at a time. The browser draws the board and animates
flips from the events pushed over the websocket.
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import List, Optional, Sequence, Set, Tuple

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect

from .game import BLACK, WHITE, Flips, Game, opponent, side_name
from .search import best_move

logger = logging.getLogger(__name__)

CELL_SIZE = 80
BOARD_OFFSET_X = 84
BOARD_OFFSET_Y = 150

SIDES = {"black": BLACK, "white": WHITE}

app = FastAPI(title="Reversi")


def cell_from_point(x: float, y: float) -> Tuple[int, int]:
    """Map a pixel position on the drawn board to ``(row, col)``.

    Points off the board map to coordinates outside 0..7; the move rules
    reject those.
    """
    col = int((x - BOARD_OFFSET_X) // CELL_SIZE)
    row = int((y - BOARD_OFFSET_Y) // CELL_SIZE)
    return row, col


def color_name(side: int) -> Optional[str]:
    for name, value in SIDES.items():
        if value == side:
            return name
    return None


class Session:
    """The game being played and the browsers watching it."""

    def __init__(self, human: int = BLACK) -> None:
        self.game = Game()
        self.human = human
        self.connections: Set[WebSocket] = set()
        self.bot_task: Optional[asyncio.Task] = None

    @property
    def computer(self) -> int:
        return opponent(self.human)

    def restart(self, human: Optional[int] = None) -> None:
        """Start a fresh game, optionally switching the human's colour."""
        if human is not None:
            self.human = human
        self.game = Game()

    def state(self) -> dict:
        game = self.game
        black, white = game.score()
        over = game.is_over()
        return {
            "board": game.board.grid,
            "last": game.last_move,
            "current": 0 if over else game.current_player,
            "human": color_name(self.human),
            "score": {"black": black, "white": white},
            "legal": game.valid_moves() if not over else [],
            "winner": game.winner(),
        }

    def update_message(self, flips: Optional[Flips] = None) -> dict:
        message = {"type": "update", **self.state()}
        message["flips"] = [event._asdict() for event in flips] if flips is not None else []
        return message

    def resolve_passes(self) -> List[int]:
        """Skip the turn of any side that cannot move; return who passed."""
        passed = []
        while self.game.pass_turn():
            passed.append(opponent(self.game.current_player))
            logger.info("%s passes", side_name(passed[-1]))
        return passed

    def human_move(self, row: int, col: int) -> Optional[Flips]:
        if self.game.current_player != self.human:
            return None
        flips = self.game.play(row, col)
        if flips is not None:
            self.resolve_passes()
        return flips

    def computer_move(self) -> Optional[Flips]:
        """Let the computer play if it is its turn; ``None`` otherwise."""
        game = self.game
        if game.current_player != self.computer or game.is_over():
            return None
        move = best_move(game.board, self.computer)
        if move is None:
            return None
        flips = game.play(*move)
        self.resolve_passes()
        if game.is_over():
            black, white = game.score()
            logger.info("game over: black %d, white %d", black, white)
        return flips

    async def broadcast(self, message: dict) -> None:
        for ws in list(self.connections):
            await ws.send_text(json.dumps(message))

    async def bot_move(self) -> None:
        """Play computer moves until it is the human's turn or the game ends."""
        while True:
            flips = self.computer_move()
            if flips is None:
                break
            await self.broadcast(self.update_message(flips))

    def schedule_bot_move(self) -> asyncio.Task:
        """Run ``bot_move`` in the background so the caller's update goes out first."""
        task = asyncio.create_task(self.bot_move())
        task.add_done_callback(_log_bot_failure)
        self.bot_task = task
        return task


def _log_bot_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("computer move failed", exc_info=exc)


session = Session()


@app.get("/state")
async def get_state() -> dict:
    return session.state()


@app.post("/new")
async def new_game(human: str = "black") -> dict:
    if human not in SIDES:
        raise HTTPException(status_code=400, detail=f"unknown side {human!r}")
    session.restart(SIDES[human])
    await session.broadcast(session.update_message())
    session.schedule_bot_move()
    return session.state()


async def _handle_move(websocket: WebSocket, row: int, col: int) -> None:
    flips = session.human_move(row, col)
    if flips is None:
        await websocket.send_text(json.dumps({"type": "error", "message": "Invalid move"}))
        return
    await session.broadcast(session.update_message(flips))
    # Let the player see their move before the computer responds.
    session.schedule_bot_move()


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    await websocket.accept()
    session.connections.add(websocket)
    await websocket.send_text(json.dumps({"type": "init", **session.state()}))
    try:
        while True:
            data = await websocket.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                msg = None
            if not isinstance(msg, dict):
                await websocket.send_text(json.dumps({"type": "error", "message": "Bad message"}))
                continue
            action = msg.get("action")
            if action == "move":
                try:
                    row, col = int(msg["row"]), int(msg["col"])
                except (KeyError, TypeError, ValueError, OverflowError):
                    await websocket.send_text(json.dumps({"type": "error", "message": "Invalid move"}))
                    continue
                await _handle_move(websocket, row, col)
            elif action == "click":
                try:
                    row, col = cell_from_point(float(msg["x"]), float(msg["y"]))
                except (KeyError, TypeError, ValueError, OverflowError):
                    await websocket.send_text(json.dumps({"type": "error", "message": "Invalid move"}))
                    continue
                await _handle_move(websocket, row, col)
            elif action == "restart":
                requested = msg.get("human")
                if requested is not None and (not isinstance(requested, str) or requested not in SIDES):
                    await websocket.send_text(json.dumps({"type": "error", "message": "Unknown side"}))
                    continue
                session.restart(SIDES.get(requested))
                await session.broadcast(session.update_message())
                session.schedule_bot_move()
            else:
                await websocket.send_text(json.dumps({"type": "error", "message": "Unknown action"}))
    except WebSocketDisconnect:
        logger.debug("websocket closed")
    finally:
        session.connections.discard(websocket)


def main(argv: Optional[Sequence[str]] = None) -> None:
    import uvicorn

    parser = argparse.ArgumentParser(description="Serve a Reversi game to the browser")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    args = parser.parse_args(argv)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
