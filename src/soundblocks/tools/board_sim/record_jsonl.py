from __future__ import annotations

import argparse
import asyncio
import json
import logging
import time
from pathlib import Path

import websockets

from soundblocks.protocol import ProtocolError, decode, to_wire

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def record_line(raw: str | bytes, ts_ms: int) -> str:
    """One JSONL line for a relay frame; frames that fail to decode are kept verbatim."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    try:
        msg = to_wire(decode(raw))
    except ProtocolError as e:
        logger.warning("recording undecodable frame: %s", e)
        return json.dumps({"ts": ts_ms, "raw": raw}, ensure_ascii=False)
    return json.dumps({"ts": ts_ms, "msg": msg}, ensure_ascii=False)


async def record(ws_url: str, out_path: Path, *, echo: bool) -> None:
    # A passive client: it gets the sync and every fan-out frame, and never sends.
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("a", encoding="utf-8") as f:
        async with websockets.connect(ws_url, max_size=2**22) as ws:
            async for raw in ws:
                line = record_line(raw, _now_ms())
                if echo:
                    print(f"[record] {line}")
                f.write(line + "\n")
                f.flush()


def main() -> None:
    ap = argparse.ArgumentParser(description="Record relay traffic of one board to a JSONL file.")
    ap.add_argument("--ws", required=True, help="WebSocket URL, e.g. ws://127.0.0.1:3000/ws/board1")
    ap.add_argument("--out", required=True, help="Output JSONL path")
    ap.add_argument("--print", action="store_true", help="Print received frames to stdout")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO)
    asyncio.run(record(args.ws, Path(args.out), echo=args.print))


if __name__ == "__main__":
    main()
