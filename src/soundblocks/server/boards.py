from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Union

from fastapi import WebSocket

from soundblocks.protocol import Deploy, Update, encode

from .store import BlockStore

logger = logging.getLogger(__name__)


@dataclass
class Board:
    clients: set[WebSocket] = field(default_factory=set)
    store: BlockStore = field(default_factory=BlockStore)

    # Held while a client joins (snapshot + sync) and while a mutation is applied and fanned
    # out, so a joining client sees each event exactly once: in its snapshot or as a frame.
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


BOARDS: dict[str, Board] = {}
LOCK = asyncio.Lock()


async def get_board(board_id: str) -> Board:
    async with LOCK:
        if board_id not in BOARDS:
            logger.info("board %s created", board_id)
            BOARDS[board_id] = Board()
        return BOARDS[board_id]


async def fan_out(
    board: Board, msg: Union[Deploy, Update], exclude: WebSocket | None = None
) -> int:
    """Send one event to every client of the board but `exclude`; returns how many got it."""
    data = encode(msg)
    sent = 0
    for ws in list(board.clients):
        if ws is exclude:
            continue
        try:
            await ws.send_text(data)
        except Exception:
            # A socket that can't be written to is gone; its handler may not know yet.
            logger.info("fan-out to a client failed; removing it", exc_info=True)
            board.clients.discard(ws)
        else:
            sent += 1
    return sent
