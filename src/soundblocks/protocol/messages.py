from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, TypeAlias, Union

from pydantic import BaseModel, ConfigDict, Field

# Canvas coordinates: real-valued, origin top-left, already offset to canvas space.
WaveType: TypeAlias = Literal["sine", "square", "sawtooth", "triangle"]


class Point(BaseModel):
    x: float
    y: float


class Size(BaseModel):
    width: float
    height: float


class Block(BaseModel):
    """
    The unit of shared state.

    `id`, `size` and the base `color` never change after creation; `pos` and `type` may be
    rewritten by `update` events. Sizes are not checked here: the admission check lives on
    the client and the relay trusts whatever arrives.
    """

    id: Annotated[int, Field(ge=0)]
    pos: Point
    size: Size
    type: WaveType = "sine"
    color: str


class Sync(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    t: Literal["sync"] = "sync"
    cur_id: Annotated[int, Field(alias="curID", ge=0)]
    blocks: list[Block] = Field(default_factory=list)


class Deploy(Block):
    t: Literal["deploy"] = "deploy"

    @classmethod
    def of(cls, block: Block) -> Deploy:
        return cls(**block.model_dump())

    def block(self) -> Block:
        return Block(**self.model_dump(exclude={"t"}))


class Update(BaseModel):
    t: Literal["update"] = "update"
    id: Annotated[int, Field(ge=0)]
    pos: Optional[Point] = None
    type: Optional[WaveType] = None

    def fields(self) -> dict[str, Any]:
        """Fields this update actually carries (absent ones must be left untouched)."""
        out: dict[str, Any] = {}
        if self.pos is not None:
            out["pos"] = self.pos.model_copy()
        if self.type is not None:
            out["type"] = self.type
        return out


InboundMsg: TypeAlias = Annotated[Union[Deploy, Update], Field(discriminator="t")]
OutboundMsg: TypeAlias = Annotated[Union[Sync, Deploy, Update], Field(discriminator="t")]
