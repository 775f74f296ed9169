from .codec import ProtocolError, decode, decode_inbound, encode, to_wire
from .constants import (
    INVALID_COLOR,
    MIN_BLOCK_LENGTH,
    T_DEPLOY,
    T_SYNC,
    T_UPDATE,
    VALID_COLOR,
    WAVE_TYPES,
)
from .messages import Block, Deploy, Point, Size, Sync, Update, WaveType

__all__ = [
    "Block",
    "Deploy",
    "INVALID_COLOR",
    "MIN_BLOCK_LENGTH",
    "Point",
    "ProtocolError",
    "Size",
    "Sync",
    "T_DEPLOY",
    "T_SYNC",
    "T_UPDATE",
    "Update",
    "VALID_COLOR",
    "WAVE_TYPES",
    "WaveType",
    "decode",
    "decode_inbound",
    "encode",
    "to_wire",
]
