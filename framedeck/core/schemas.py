# framedeck/core/schemas.py

"""
Wire models shared by the HTTP API and the API client.

The same records travel in both directions: the API serializes storage rows
into them, the client parses responses back into them, and the editor keeps
them as its in-memory cache.
"""

from datetime import datetime
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from .models import Demo, Frame


class FrameRecord(BaseModel):
    """A frame as listed under its demo."""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    order: int
    html: str


class DemoRecord(BaseModel):
    """A demo with its frames, as returned by GET /demos."""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    name: str
    frames: Tuple[FrameRecord, ...] = ()


class FrameUpdate(BaseModel):
    """Body of PUT /frames/{id}."""
    model_config = ConfigDict(extra="ignore")

    html: StrictStr


class UpdatedFrame(BaseModel):
    """Response of PUT /frames/{id}."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    order: int
    html: str
    demo_id: str = Field(alias="demoId")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


def sort_frames(frames: Iterable[FrameRecord]) -> Tuple[FrameRecord, ...]:
    """Order frames by their `order` key; equal keys keep their relative position."""
    return tuple(sorted(frames, key=lambda frame: frame.order))


def demo_to_record(demo: Demo) -> DemoRecord:
    frames = sort_frames(FrameRecord.model_validate(frame) for frame in demo.frames)
    return DemoRecord(id=demo.id, name=demo.name, frames=frames)


def frame_to_update_response(frame: Frame) -> UpdatedFrame:
    return UpdatedFrame(
        id=frame.id,
        order=frame.order,
        html=frame.html,
        demo_id=frame.demo_id,
        updated_at=frame.updated_at,
    )
