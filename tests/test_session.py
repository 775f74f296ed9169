from __future__ import annotations

import json
import logging
import random

from soundblocks.client.render import BLOCK_ALPHA, draw_frame
from soundblocks.client.session import ClientSession
from soundblocks.protocol import INVALID_COLOR, Point, Sync, Update, encode

from .conftest import drain, make_block


class FakeSurface:
    def __init__(self):
        self.ops = []

    def clear(self):
        self.ops.append(("clear",))

    def fill_rect(self, x, y, w, h, color, alpha):
        self.ops.append(("rect", x, y, w, h, color, alpha))


def pump(session: ClientSession, ws) -> None:
    for raw in drain(session):
        ws.send_text(raw)


def test_handle_text_dispatches(settings):
    s = ClientSession(settings)
    s.handle_text(encode(Sync(cur_id=1, blocks=[make_block(0, 0, 0)])))
    assert s.synced.is_set()
    assert s.replica.cur_id == 1

    s.handle_text(
        '{"t":"deploy","id":1,"pos":{"x":100,"y":0},"size":{"width":30,"height":30},'
        '"type":"square","color":"rgb(4, 4, 4)"}'
    )
    assert s.replica.get(1).type == "square"
    assert s.replica.cur_id == 2

    s.handle_text(encode(Update(id=1, pos=Point(x=5, y=500))))
    assert s.replica.get(1).pos == Point(x=5, y=500)


def test_handle_text_drops_garbage(settings, caplog):
    s = ClientSession(settings)
    with caplog.at_level(logging.WARNING):
        s.handle_text("{oops")
    assert not s.synced.is_set()
    assert "dropped frame" in caplog.text


def test_emitted_frame_is_frozen_at_emit_time(session):
    ia = session.interaction
    ia.pointer_down(Point(x=0, y=0))
    ia.pointer_move(Point(x=40, y=40))
    ia.pointer_up()
    session.replica.get(0).pos = Point(x=900, y=900)
    (raw,) = drain(session)
    assert json.loads(raw)["pos"] == {"x": 0, "y": 0}


def test_two_clients_converge_through_relay(client, settings):
    a = ClientSession(settings, rng=random.Random(1))
    b = ClientSession(settings, rng=random.Random(2))

    with client.websocket_connect("/ws/jam") as wa, client.websocket_connect("/ws/jam") as wb:
        a.handle_text(wa.receive_text())
        b.handle_text(wb.receive_text())

        # a draws a block.
        a.interaction.pointer_down(Point(x=10, y=10))
        a.interaction.pointer_move(Point(x=60, y=60))
        a.interaction.pointer_up()
        pump(a, wa)
        b.handle_text(wb.receive_text())

        assert b.replica.cur_id == 1
        assert b.replica.get(0).model_dump() == a.replica.get(0).model_dump()

        # b drags it and retypes it.
        b.interaction.key_down(" ")
        b.interaction.pointer_down(Point(x=20, y=20))
        b.interaction.pointer_move(Point(x=120, y=20))
        b.interaction.pointer_up()
        b.interaction.key_up(" ")
        b.interaction.key_down("d")
        pump(b, wb)
        a.handle_text(wa.receive_text())
        a.handle_text(wa.receive_text())

        assert a.replica.get(0).pos == Point(x=110, y=10)
        assert a.replica.get(0).type == "sawtooth"

        # A late joiner sees the same board.
        with client.websocket_connect("/ws/jam") as wc:
            c = ClientSession(settings)
            c.handle_text(wc.receive_text())

    assert c.replica.cur_id == 1
    assert [blk.model_dump() for blk in c.replica] == [blk.model_dump() for blk in a.replica]


def test_draw_frame_paints_blocks_then_preview(session):
    session.replica.on_deploy(make_block(0, 100, 100, color="rgb(7, 7, 7)"))
    ia = session.interaction
    ia.pointer_down(Point(x=0, y=0))
    ia.pointer_move(Point(x=10, y=20))

    surface = FakeSurface()
    draw_frame(surface, session)

    assert surface.ops == [
        ("clear",),
        ("rect", 100, 100, 50, 50, "rgb(7, 7, 7)", BLOCK_ALPHA),
        ("rect", 0, 0, 10, 20, INVALID_COLOR, BLOCK_ALPHA),
    ]


def test_draw_frame_without_preview(session):
    surface = FakeSurface()
    draw_frame(surface, session)
    assert surface.ops == [("clear",)]
