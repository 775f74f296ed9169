from __future__ import annotations

import json
from typing import Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from .messages import Deploy, InboundMsg, OutboundMsg, Sync, Update

_ANY = TypeAdapter(OutboundMsg)
_INBOUND = TypeAdapter(InboundMsg)


class ProtocolError(ValueError):
    """A frame that is not valid JSON or does not match any known event shape."""


def to_wire(msg: BaseModel) -> dict:
    # Absent optional fields stay absent so partial updates remain partial.
    return msg.model_dump(mode="json", by_alias=True, exclude_none=True)


def encode(msg: Union[Sync, Deploy, Update]) -> str:
    return json.dumps(to_wire(msg), separators=(",", ":"), ensure_ascii=False)


def _load(raw: Union[str, bytes]) -> object:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"frame is not JSON: {e}") from e


def decode(raw: Union[str, bytes]) -> Union[Sync, Deploy, Update]:
    """Decode any frame the relay or a client may send."""
    obj = _load(raw)
    try:
        return _ANY.validate_python(obj)
    except ValidationError as e:
        raise ProtocolError(f"bad frame: {e.error_count()} error(s): {_first_error(e)}") from e


def decode_inbound(raw: Union[str, bytes]) -> Union[Deploy, Update]:
    """Decode a frame a client sent to the relay (`sync` is relay-only)."""
    obj = _load(raw)
    try:
        return _INBOUND.validate_python(obj)
    except ValidationError as e:
        raise ProtocolError(f"bad frame: {e.error_count()} error(s): {_first_error(e)}") from e


def _first_error(e: ValidationError) -> str:
    errs = e.errors()
    if not errs:
        return str(e)
    loc = ".".join(str(p) for p in errs[0].get("loc", ()))
    return f"{loc or '<root>'}: {errs[0].get('msg')}"
