# framedeck/core/storage.py

"""
Storage layer for demos and frames.

This module owns the SQLAlchemy engine and its connection pool, verifies the
connection and synchronizes the schema at startup, and implements the
operations the API layer relies on. Every operation runs inside a scoped
session that acquires one pooled connection, commits before returning and
releases the connection whether the operation succeeded or not.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import sqlalchemy as sa
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker
from sqlalchemy.pool import StaticPool

from ..exceptions import BadRequestError, NotFoundError, StorageUnavailableError
from .models import Base, Demo, Frame, utcnow
from .settings import DatabaseConfig

logger = logging.getLogger("framedeck")
sql_logger = logging.getLogger("framedeck.sql")

FrameSpec = Union[str, Tuple[int, str], Dict[str, Any]]


def create_storage_engine(config: DatabaseConfig) -> Engine:
    """
    Create a pooled engine for the configured database.

    In-memory SQLite shares a single connection so every session sees the
    same database; everything else gets a bounded queue pool.
    """
    kwargs: Dict[str, Any] = {"future": True}

    if config.is_memory:
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        if config.is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False}
        kwargs.update(
            pool_size=config.pool.size,
            max_overflow=0,
            pool_timeout=config.pool.acquire_timeout,
            pool_recycle=config.pool.recycle_after,
            pool_pre_ping=True,
        )

    engine = sa.create_engine(config.url, **kwargs)

    if config.is_sqlite:
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    if config.echo:
        @event.listens_for(engine, "before_cursor_execute")
        def _log_statement(conn, cursor, statement, parameters, context, executemany):
            sql_logger.debug(f"{statement} {parameters!r}")

    logger.debug(f"Storage engine created for {config.safe_url}")
    return engine


def _normalize_frame_specs(frames: Iterable[FrameSpec]) -> List[Tuple[int, str]]:
    """Turn html strings, (order, html) pairs or dicts into (order, html) pairs."""
    normalized = []
    for position, spec in enumerate(frames, start=1):
        if isinstance(spec, str):
            normalized.append((position, spec))
        elif isinstance(spec, dict):
            if "html" not in spec or not isinstance(spec["html"], str):
                raise BadRequestError("Frame requires an 'html' string", field="html")
            order = spec.get("order", position)
            if not isinstance(order, int) or isinstance(order, bool):
                raise BadRequestError("Frame 'order' must be an integer", field="order")
            normalized.append((order, spec["html"]))
        else:
            order, html = spec
            normalized.append((int(order), html))
    return normalized


class FrameStore:
    """
    Durable record of demos and frames.

    The store is safe to share between request handlers: it holds no state
    besides the engine and a session factory.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "FrameStore":
        return cls(create_storage_engine(config))

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Acquire a session for one operation; commit on success, always release."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Storage operation failed: {e}")
            raise StorageUnavailableError("Storage operation failed", original_error=e) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    def verify_connection(self) -> None:
        """Check that the database answers; raise StorageUnavailableError otherwise."""
        try:
            with self.engine.connect() as conn:
                conn.execute(sa.text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Unable to connect to the database: {e}")
            raise StorageUnavailableError("Unable to connect to the database", original_error=e) from e
        logger.info("Connection to the database has been established successfully.")

    def sync_schema(self) -> None:
        """Create missing tables for the demo/frame model."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Error synchronizing models: {e}")
            raise StorageUnavailableError("Error synchronizing models", original_error=e) from e
        logger.info("Models synchronized with the database.")

    def check_health(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(sa.text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def list_demos_with_frames(self) -> List[Demo]:
        """Return every demo with its frames loaded. Frame order is not guaranteed."""
        with self.session_scope() as session:
            demos = session.scalars(
                sa.select(Demo).options(selectinload(Demo.frames)).order_by(Demo.created_at, Demo.id)
            ).all()
            return list(demos)

    def get_frame(self, frame_id: str) -> Frame:
        with self.session_scope() as session:
            frame = session.get(Frame, frame_id)
            if frame is None:
                raise NotFoundError(identifier=frame_id)
            return frame

    def get_demo(self, demo_id: str) -> Demo:
        with self.session_scope() as session:
            demo = session.get(Demo, demo_id, options=[selectinload(Demo.frames)])
            if demo is None:
                raise NotFoundError(resource="Demo", identifier=demo_id)
            return demo

    def update_frame_html(self, frame_id: str, new_html: str) -> Frame:
        """Replace a frame's html and move its last-modified timestamp."""
        with self.session_scope() as session:
            frame = session.get(Frame, frame_id)
            if frame is None:
                raise NotFoundError(identifier=frame_id)
            frame.html = new_html
            frame.updated_at = utcnow()
            session.flush()
            logger.info(f"Updated frame {frame_id} ({len(new_html)} chars)")
            return frame

    def create_demo(self, name: str, frames: Sequence[FrameSpec] = ()) -> Demo:
        """
        Create a demo with its frames.

        Args:
            name: Display name, must not be blank
            frames: html strings (ordered by position, starting at 1),
                (order, html) pairs, or dicts with 'html' and optional 'order'

        Returns:
            The new Demo with its frames loaded
        """
        if not isinstance(name, str) or not name.strip():
            raise BadRequestError("Demo name must be a non-empty string", field="name")

        frame_specs = _normalize_frame_specs(frames)
        with self.session_scope() as session:
            demo = Demo(name=name.strip())
            demo.frames = [Frame(order=order, html=html) for order, html in frame_specs]
            session.add(demo)
            session.flush()
            logger.info(f"Created demo '{demo.name}' with {len(frame_specs)} frames")
            return demo

    def delete_demo(self, demo_id: str) -> None:
        """Delete a demo and, through ownership, all of its frames."""
        with self.session_scope() as session:
            demo = session.get(Demo, demo_id)
            if demo is None:
                raise NotFoundError(resource="Demo", identifier=demo_id)
            session.delete(demo)
            logger.info(f"Deleted demo {demo_id}")

    def delete_all_demos(self) -> int:
        with self.session_scope() as session:
            demos = session.scalars(sa.select(Demo)).all()
            for demo in demos:
                session.delete(demo)
            return len(demos)
