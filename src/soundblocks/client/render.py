from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session import ClientSession

BLOCK_ALPHA = 0.7


def draw_frame(surface, session: ClientSession) -> None:
    """
    Draw one frame: every block, then the hold preview on top.

    `surface` is any 2D target exposing `clear()` and
    `fill_rect(x, y, width, height, color, alpha)`. Reads the replica, never mutates it.
    """
    surface.clear()
    for block in session.replica:
        surface.fill_rect(
            block.pos.x, block.pos.y, block.size.width, block.size.height, block.color, BLOCK_ALPHA
        )
    ia = session.interaction
    if ia.hold_point is not None and ia.preview_pos is not None:
        surface.fill_rect(
            ia.preview_pos.x,
            ia.preview_pos.y,
            ia.preview_size.width,
            ia.preview_size.height,
            ia.preview_color,
            BLOCK_ALPHA,
        )
