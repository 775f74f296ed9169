"""
Pytest configuration and fixtures for soundblocks tests.
"""

from __future__ import annotations

import random

import pytest
from fastapi.testclient import TestClient

from soundblocks.client.config import ClientSettings
from soundblocks.client.session import ClientSession
from soundblocks.protocol import Block, Point, Size, Sync
from soundblocks.server import boards
from soundblocks.server.app import app


def make_block(block_id: int, x: float, y: float, w: float = 50, h: float = 50, **kw) -> Block:
    kw.setdefault("color", f"rgb({block_id}, 0, 0)")
    return Block(id=block_id, pos=Point(x=x, y=y), size=Size(width=w, height=h), **kw)


@pytest.fixture(autouse=True)
def fresh_boards():
    """Boards live for the process lifetime; isolate every test."""
    boards.BOARDS.clear()
    yield
    boards.BOARDS.clear()


@pytest.fixture
def client():
    # One portal (event loop) shared by every websocket in the test.
    with TestClient(app) as c:
        yield c


@pytest.fixture
def settings():
    return ClientSettings(relay_url="ws://testserver/ws", min_block_length=25)


@pytest.fixture
def session(settings):
    """A client session that has received an empty sync."""
    s = ClientSession(settings, rng=random.Random(7))
    s.replica.on_sync(Sync(cur_id=0, blocks=[]))
    return s


def drain(session: ClientSession) -> list[str]:
    out = []
    while not session.outbox.empty():
        out.append(session.outbox.get_nowait())
    return out
