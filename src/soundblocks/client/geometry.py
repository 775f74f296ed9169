from __future__ import annotations

from soundblocks.protocol.messages import Block, Point, Size


def normalize_rectangle(start: Point, end: Point) -> tuple[Point, Size]:
    """Top-left corner and non-negative size of the rectangle spanned by two corners."""
    dx = end.x - start.x
    dy = end.y - start.y
    return (
        Point(x=min(start.x, end.x), y=min(start.y, end.y)),
        Size(width=abs(dx), height=abs(dy)),
    )


def rectangles_overlap(p1: Point, s1: Size, p2: Point, s2: Size) -> bool:
    # Shared edges and corners are not overlap.
    if p1.x >= p2.x + s2.width or p2.x >= p1.x + s1.width:
        return False
    if p1.y >= p2.y + s2.height or p2.y >= p1.y + s1.height:
        return False
    return True


def blocks_overlap(a: Block, b: Block) -> bool:
    return rectangles_overlap(a.pos, a.size, b.pos, b.size)


def contains(block: Block, point: Point) -> bool:
    """Strict interior hit test; a cursor on the border is not over the block."""
    dx = point.x - block.pos.x
    dy = point.y - block.pos.y
    return 0 < dx < block.size.width and 0 < dy < block.size.height
