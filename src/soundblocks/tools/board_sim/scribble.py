from __future__ import annotations

import argparse
import asyncio
import logging
import random

from soundblocks.client.config import get_client_settings
from soundblocks.client.session import ClientSession
from soundblocks.protocol import Point

logger = logging.getLogger(__name__)


def drag_path(start: Point, end: Point, steps: int = 8) -> list[Point]:
    """Evenly spaced cursor positions from `start` (exclusive) to `end` (inclusive)."""
    steps = max(1, steps)
    return [
        Point(
            x=start.x + (end.x - start.x) * i / steps,
            y=start.y + (end.y - start.y) * i / steps,
        )
        for i in range(1, steps + 1)
    ]


def draw_block(session: ClientSession, start: Point, end: Point) -> bool:
    """Press at `start`, drag to `end`, release. True if a block was committed."""
    before = len(session.replica)
    ia = session.interaction
    ia.pointer_down(start)
    for pt in drag_path(start, end):
        ia.pointer_move(pt)
    ia.pointer_up()
    return len(session.replica) > before


def random_gesture(
    rng: random.Random, width: float, height: float, min_len: float
) -> tuple[Point, Point]:
    w = rng.uniform(min_len + 1, min_len * 4)
    h = rng.uniform(min_len + 1, min_len * 4)
    x = rng.uniform(0, max(1.0, width - w))
    y = rng.uniform(0, max(1.0, height - h))
    return Point(x=x, y=y), Point(x=x + w, y=y + h)


async def scribble(url: str, *, count: int, width: float, height: float, seed: int | None) -> int:
    rng = random.Random(seed)
    session = ClientSession(rng=rng)
    runner = asyncio.create_task(session.run(url))
    synced = asyncio.create_task(session.synced.wait())
    await asyncio.wait({runner, synced}, return_when=asyncio.FIRST_COMPLETED)
    if runner.done():
        synced.cancel()
        # Connection failed or closed before the sync frame arrived.
        await runner
        return 0

    committed = 0
    attempts = 0
    while committed < count and attempts < count * 20:
        attempts += 1
        start, end = random_gesture(rng, width, height, session.settings.min_block_length)
        if draw_block(session, start, end):
            committed += 1
        await asyncio.sleep(0)

    await session.outbox.join()
    runner.cancel()
    try:
        await runner
    except asyncio.CancelledError:
        pass
    logger.info("committed %d block(s) in %d attempt(s)", committed, attempts)
    return committed


def main() -> None:
    ap = argparse.ArgumentParser(description="Connect a scripted client that draws random blocks.")
    ap.add_argument("--ws", default=None, help="Relay URL (default: SOUNDBLOCKS_CLIENT_RELAY_URL)")
    ap.add_argument("--count", type=int, default=5)
    ap.add_argument("--width", type=float, default=1280.0)
    ap.add_argument("--height", type=float, default=720.0)
    ap.add_argument("--seed", type=int, default=None)
    args = ap.parse_args()

    settings = get_client_settings()
    logging.basicConfig(level=settings.log_level.upper())
    asyncio.run(
        scribble(
            args.ws or settings.relay_url,
            count=args.count,
            width=args.width,
            height=args.height,
            seed=args.seed,
        )
    )


if __name__ == "__main__":
    main()
