from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

from soundblocks.protocol.messages import Block, Sync

logger = logging.getLogger(__name__)


class BlockStore:
    """
    Canonical blocks of one board, in insertion order, plus the id counter (`cur_id`).

    This is the trust boundary: `insert` and `merge` accept whatever the writer sent.
    Ids are chosen by clients, so two racing deploys can store two blocks with the same id;
    `merge` then only ever reaches the first of them.
    """

    def __init__(self) -> None:
        self._blocks: list[Block] = []
        self.cur_id = 0

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(list(self._blocks))

    def snapshot(self) -> Sync:
        return Sync(cur_id=self.cur_id, blocks=[b.model_copy(deep=True) for b in self._blocks])

    def get(self, block_id: int) -> Optional[Block]:
        for block in self._blocks:
            if block.id == block_id:
                return block
        return None

    def insert(self, block: Block) -> None:
        # No uniqueness or geometry check.
        self._blocks.append(block.model_copy(deep=True))
        self.cur_id = max(self.cur_id, block.id + 1)

    def merge(self, block_id: int, fields: dict[str, Any]) -> bool:
        block = self.get(block_id)
        if block is None:
            logger.warning(
                "merge: no block with id=%s; dropped fields=%s", block_id, sorted(fields)
            )
            return False
        for name, value in fields.items():
            setattr(block, name, value)
        return True
