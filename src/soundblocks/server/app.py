from __future__ import annotations

import logging

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from soundblocks.protocol import Deploy, ProtocolError, decode_inbound, encode, to_wire

from .boards import Board, fan_out, get_board
from .config import get_settings

logger = logging.getLogger(__name__)

app = FastAPI(title="soundblocks relay")


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.get("/boards/{board_id}")
async def board_snapshot(board_id: str):
    # Read-only view of the canonical state, same shape as the `sync` frame.
    board = await get_board(board_id)
    async with board.lock:
        return to_wire(board.store.snapshot())


@app.websocket("/ws")
async def ws_default(ws: WebSocket):
    await relay(get_settings().default_board, ws)


@app.websocket("/ws/{board_id}")
async def ws(board_id: str, ws: WebSocket):
    await relay(board_id, ws)


async def relay(board_id: str, ws: WebSocket) -> None:
    await ws.accept()
    board = await get_board(board_id)
    peer = getattr(ws.client, "host", None)

    try:
        async with board.lock:
            board.clients.add(ws)
            await ws.send_text(encode(board.store.snapshot()))
        logger.info(
            "[ws:%s] client connected from=%s (clients=%d)", board_id, peer, len(board.clients)
        )

        while True:
            frame = await ws.receive()
            if frame["type"] == "websocket.disconnect":
                break
            # Binary frames go through the same codec as text ones.
            raw = frame.get("text") or frame.get("bytes") or ""
            try:
                msg = decode_inbound(raw)
            except ProtocolError as e:
                logger.warning("[ws:%s] dropped frame from=%s: %s", board_id, peer, e)
                continue
            if get_settings().debug_log_msgs:
                logger.info("[ws:%s] in t=%s id=%s from=%s", board_id, msg.t, msg.id, peer)
            await apply_and_fan_out(board, msg, sender=ws)
    except WebSocketDisconnect:
        pass
    finally:
        board.clients.discard(ws)
        logger.info(
            "[ws:%s] client disconnected from=%s (clients=%d)", board_id, peer, len(board.clients)
        )


async def apply_and_fan_out(board: Board, msg, *, sender: WebSocket | None) -> None:
    """Apply one client event to the board's store and relay it to everyone else."""
    async with board.lock:
        if isinstance(msg, Deploy):
            board.store.insert(msg.block())
        else:
            board.store.merge(msg.id, msg.fields())
        await fan_out(board, msg, exclude=sender)
