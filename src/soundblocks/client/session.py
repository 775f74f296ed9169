from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional, Union

import websockets

from soundblocks.protocol import Deploy, ProtocolError, Sync, Update, decode, encode

from .audio import Voices
from .config import ClientSettings, get_client_settings
from .interaction import Interaction
from .replica import ClientReplica

logger = logging.getLogger(__name__)


class ClientSession:
    """
    Everything one connected client owns: replica, interaction state, outbound queue.

    Local actions are applied to the replica synchronously and their events are queued
    for the writer task; inbound frames are applied one at a time by `handle_text`.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        *,
        voices: Optional[Voices] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or get_client_settings()
        self.replica = ClientReplica(voices)
        self.interaction = Interaction(
            self.replica,
            self.emit,
            min_block_length=self.settings.min_block_length,
            rng=rng,
        )
        self.outbox: asyncio.Queue[str] = asyncio.Queue()
        self.synced = asyncio.Event()

    def emit(self, msg: Union[Deploy, Update]) -> None:
        # Encoded now: later local edits to the block must not leak into a queued frame.
        self.outbox.put_nowait(encode(msg))

    def handle_text(self, raw: Union[str, bytes]) -> None:
        try:
            msg = decode(raw)
        except ProtocolError as e:
            logger.warning("dropped frame from relay: %s", e)
            return

        if isinstance(msg, Sync):
            self.replica.on_sync(msg)
            self.synced.set()
        elif isinstance(msg, Deploy):
            self.replica.on_deploy(msg.block())
        else:
            self.replica.on_update(msg)

    async def run(self, url: Optional[str] = None) -> None:
        """Connect to the relay and process frames until the connection closes."""
        url = url or self.settings.relay_url
        async with websockets.connect(url, max_size=2**22) as ws:
            logger.info("connected to %s", url)
            writer = asyncio.create_task(self._pump(ws))
            try:
                async for raw in ws:
                    self.handle_text(raw)
            finally:
                await stop_writer(writer)
        logger.info("disconnected from %s", url)

    async def _pump(self, ws) -> None:
        while True:
            data = await self.outbox.get()
            try:
                await ws.send(data)
            finally:
                self.outbox.task_done()


async def stop_writer(writer: asyncio.Task) -> None:
    """Cancel the outbox writer; a send error it died of is logged, not re-raised."""
    writer.cancel()
    try:
        await writer
    except asyncio.CancelledError:
        pass
    except Exception:
        # The read loop's own outcome is what `run` reports.
        logger.warning("outbox writer stopped with an error", exc_info=True)
