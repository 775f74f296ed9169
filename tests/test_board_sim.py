from __future__ import annotations

import json
import random

from soundblocks.protocol import Point
from soundblocks.tools.board_sim.record_jsonl import record_line
from soundblocks.tools.board_sim.scribble import draw_block, drag_path, random_gesture

from .conftest import drain


def test_drag_path_ends_at_target():
    path = drag_path(Point(x=0, y=0), Point(x=80, y=40), steps=4)
    assert path == [
        Point(x=20, y=10),
        Point(x=40, y=20),
        Point(x=60, y=30),
        Point(x=80, y=40),
    ]


def test_random_gestures_pass_min_size():
    rng = random.Random(3)
    for _ in range(20):
        start, end = random_gesture(rng, 800, 600, 25)
        assert end.x - start.x > 25
        assert end.y - start.y > 25


def test_draw_block_commits_and_refuses_overlap(session):
    assert draw_block(session, Point(x=0, y=0), Point(x=50, y=50))
    assert not draw_block(session, Point(x=60, y=60), Point(x=20, y=20))
    assert [json.loads(raw)["t"] for raw in drain(session)] == ["deploy"]


def test_record_line_keeps_decoded_and_raw_frames():
    line = json.loads(record_line('{"t":"update","id":2,"type":"sine"}', 1000))
    assert line == {"ts": 1000, "msg": {"t": "update", "id": 2, "type": "sine"}}

    line = json.loads(record_line(b"garbage", 1001))
    assert line == {"ts": 1001, "raw": "garbage"}
