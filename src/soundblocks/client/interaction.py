from __future__ import annotations

import enum
import logging
import random
from typing import Callable, Optional, Union

from soundblocks.protocol.constants import INVALID_COLOR, MIN_BLOCK_LENGTH, VALID_COLOR
from soundblocks.protocol.messages import Block, Deploy, Point, Size, Update

from .geometry import blocks_overlap, normalize_rectangle, rectangles_overlap
from .replica import ClientReplica

logger = logging.getLogger(__name__)

Emit = Callable[[Union[Deploy, Update]], None]

DRAG_KEY = " "
WAVE_KEYS = {"a": "sine", "s": "square", "d": "sawtooth", "f": "triangle"}


class Mode(str, enum.Enum):
    IDLE = "idle"
    HOLDING = "holding"
    DRAGGING = "dragging"


def random_color(rng: random.Random) -> str:
    while True:
        color = f"rgb({rng.randrange(255)}, {rng.randrange(255)}, {rng.randrange(255)})"
        # A base color must never read as a preview color.
        if color not in (VALID_COLOR, INVALID_COLOR):
            return color


class Interaction:
    """
    Pointer/keyboard state machine of one client.

    Holding draws a new block from an anchor point; Dragging moves an existing block.
    A change is only committed (applied to the replica and emitted) when it passes the
    admission check: minimum size for new blocks, no overlap for both.

    A drag released over another block does not end: the block stays on the pointer until a
    later pointer-down (or pointer-up) happens at a valid position.
    """

    def __init__(
        self,
        replica: ClientReplica,
        emit: Emit,
        *,
        min_block_length: float = MIN_BLOCK_LENGTH,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.replica = replica
        self.emit = emit
        self.min_block_length = min_block_length
        self.rng = rng or random.Random()

        self.mode = Mode.IDLE
        self.drag_mode = False
        self.pressed = False
        self.current: Optional[Block] = None

        # Holding
        self.hold_point: Optional[Point] = None
        self.preview_pos: Optional[Point] = None
        self.preview_size = Size(width=0, height=0)
        self.preview_color: Optional[str] = None

        # Dragging
        self.drag_block: Optional[Block] = None
        self.drag_point: Optional[Point] = None
        self.drag_origin: Optional[Point] = None
        self.drag_color: Optional[str] = None

    @property
    def preview_valid(self) -> bool:
        return self.preview_color == VALID_COLOR

    def pointer_down(self, cursor: Point) -> None:
        if not self._ready():
            return
        self.pressed = True

        if self.mode is Mode.DRAGGING:
            if self.drag_block.color != INVALID_COLOR:
                self._release_drag()
            return

        over = self.replica.block_at(cursor)
        if not self.drag_mode:
            if over is None:
                self.current = None
                self.mode = Mode.HOLDING
                self.hold_point = cursor
                self.preview_pos = cursor
                self.preview_size = Size(width=0, height=0)
                self.preview_color = INVALID_COLOR
            else:
                self.current = over
                self.replica.voices.pluck(over.id)
        elif over is not None:
            self.mode = Mode.DRAGGING
            self.drag_block = over
            self.drag_point = cursor
            self.drag_origin = over.pos.model_copy()
            self.drag_color = over.color
            self.current = over

    def pointer_move(self, cursor: Point) -> None:
        if not self.pressed and self.mode is not Mode.DRAGGING:
            return

        if self.mode is Mode.HOLDING:
            self.preview_pos, self.preview_size = normalize_rectangle(self.hold_point, cursor)
            self.preview_color = VALID_COLOR if self._admissible() else INVALID_COLOR
        elif self.mode is Mode.DRAGGING:
            block = self.drag_block
            block.pos = Point(
                x=self.drag_origin.x + (cursor.x - self.drag_point.x),
                y=self.drag_origin.y + (cursor.y - self.drag_point.y),
            )
            overlap = any(
                blocks_overlap(block, other) for other in self.replica if other is not block
            )
            block.color = INVALID_COLOR if overlap else self.drag_color

    def pointer_up(self) -> None:
        if not self.pressed:
            return

        if self.mode is Mode.HOLDING:
            if self.preview_valid:
                self._deploy()
            self._clear_hold()
        elif self.mode is Mode.DRAGGING and self.drag_block.color != INVALID_COLOR:
            self._release_drag()

        self.pressed = False

    def set_drag_mode(self, on: bool) -> None:
        self.drag_mode = on

    def key_down(self, key: str) -> None:
        key = key.lower() if len(key) == 1 else key
        if key == DRAG_KEY:
            self.set_drag_mode(True)
        elif key in WAVE_KEYS:
            self.set_type(WAVE_KEYS[key])

    def key_up(self, key: str) -> None:
        if key == DRAG_KEY:
            self.set_drag_mode(False)

    def set_type(self, kind: str) -> None:
        """Retype the current block locally, then tell everyone else."""
        if self.current is None or not self._ready():
            return
        self.replica.set_type(self.current, kind)
        self.emit(Update(id=self.current.id, type=kind))

    def _ready(self) -> bool:
        if not self.replica.synced:
            logger.debug("input ignored: replica not synced yet")
            return False
        return True

    def _admissible(self) -> bool:
        if (
            self.preview_size.width <= self.min_block_length
            or self.preview_size.height <= self.min_block_length
        ):
            return False
        for block in self.replica:
            if rectangles_overlap(self.preview_pos, self.preview_size, block.pos, block.size):
                return False
        return True

    def _deploy(self) -> None:
        block = Block(
            id=self.replica.cur_id,
            pos=self.preview_pos,
            size=self.preview_size,
            type="sine",
            color=random_color(self.rng),
        )
        self.replica.add_local(block)
        self.current = block
        self.emit(Deploy.of(block))
        logger.debug("deployed block id=%d", block.id)

    def _clear_hold(self) -> None:
        self.mode = Mode.IDLE
        self.hold_point = None
        self.preview_pos = None
        self.preview_size = Size(width=0, height=0)
        self.preview_color = None

    def _release_drag(self) -> None:
        block = self.drag_block
        self.emit(Update(id=block.id, pos=block.pos.model_copy()))
        self.mode = Mode.IDLE
        self.drag_block = None
        self.drag_point = None
        self.drag_origin = None
        self.drag_color = None
