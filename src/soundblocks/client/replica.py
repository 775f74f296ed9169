from __future__ import annotations

import logging
from typing import Iterator, Optional

from soundblocks.protocol.messages import Block, Point, Sync, Update

from .audio import Voices
from .geometry import contains

logger = logging.getLogger(__name__)


class ClientReplica:
    """
    One client's mirror of the relay's block store.

    Blocks are mutated in place: the interaction layer moves and recolors them while they
    are dragged. `cur_id` is the advisory id counter used to propose the next block id.
    """

    def __init__(self, voices: Voices | None = None) -> None:
        self.blocks: list[Block] = []
        self.cur_id = 0
        self.synced = False
        self.voices = voices or Voices()

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def on_sync(self, sync: Sync) -> None:
        if self.synced:
            logger.warning("sync received twice; replacing local state")
        for block in self.blocks:
            self.voices.stop(block.id)
        self.blocks = []
        for block in sync.blocks:
            self._append(block.model_copy(deep=True))
        self.cur_id = sync.cur_id
        self.synced = True
        logger.info("synced %d block(s), cur_id=%d", len(self.blocks), self.cur_id)

    def on_deploy(self, block: Block) -> None:
        self._append(block.model_copy(deep=True))
        self._advance(block.id)

    def add_local(self, block: Block) -> None:
        """Optimistic apply of this client's own deploy, before it goes on the wire."""
        self._append(block)
        self._advance(block.id)

    def on_update(self, update: Update) -> bool:
        block = self.get(update.id)
        if block is None:
            logger.warning("update: could not find block id=%s; dropped", update.id)
            return False
        fields = update.fields()
        if "pos" in fields:
            block.pos = fields["pos"]
        if "type" in fields and fields["type"] != block.type:
            block.type = fields["type"]
            self.voices.set_kind(block.id, block.type)
        return True

    def set_type(self, block: Block, kind: str) -> None:
        block.type = kind
        self.voices.set_kind(block.id, kind)

    def get(self, block_id: int) -> Optional[Block]:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def block_at(self, point: Point) -> Optional[Block]:
        """Earliest deployed block under the cursor."""
        for block in self.blocks:
            if contains(block, point):
                return block
        return None

    def _append(self, block: Block) -> None:
        self.blocks.append(block)
        self.voices.start(block.id, block.type)

    def _advance(self, block_id: int) -> None:
        # Unconditional: a late deploy with a small id moves the counter backwards.
        if block_id + 1 < self.cur_id:
            logger.warning(
                "deploy id=%d regresses cur_id %d -> %d; id collisions likely",
                block_id,
                self.cur_id,
                block_id + 1,
            )
        self.cur_id = block_id + 1
