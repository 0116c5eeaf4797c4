# framedeck/core/models.py

"""
Relational model for demos and their frames.

A Demo owns an ordered collection of Frames. Ordering is carried by each
frame's `order` column and applied by consumers; the relationship itself
makes no ordering promise.
"""

import uuid
from datetime import datetime, timezone
from typing import List

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Demo(Base):
    """A named, browsable sequence of HTML frames."""

    __tablename__ = "demos"

    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    frames: Mapped[List["Frame"]] = relationship(
        back_populates="demo",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"Demo(id={self.id!r}, name={self.name!r}, frames={len(self.frames)})"


class Frame(Base):
    """One unit of HTML content within a demo."""

    __tablename__ = "frames"

    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=_new_id)
    html: Mapped[str] = mapped_column(sa.Text, nullable=False)
    # Sort key only: neither unique nor gapless
    order: Mapped[int] = mapped_column("order", sa.Integer, nullable=False)
    demo_id: Mapped[str] = mapped_column(
        sa.String(36),
        sa.ForeignKey("demos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    demo: Mapped[Demo] = relationship(back_populates="frames")

    def __repr__(self) -> str:
        return f"Frame(id={self.id!r}, order={self.order}, demo_id={self.demo_id!r})"
