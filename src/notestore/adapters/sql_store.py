"""Relational note store on SQLAlchemy (PostgreSQL in production, SQLite in tests)."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Column, Integer, Text, create_engine, delete, or_, select, update
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..core.errors import NoteNotFoundError, StoreError
from ..core.model import Note, NoteId
from ..core.ports import NoteStore

logger = logging.getLogger(__name__)

Base = declarative_base()

DEFAULT_TIMEOUT = 5.0


class NoteRow(Base):
    """SQLAlchemy model for the notes table."""
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)

    def to_note(self) -> Note:
        return Note(id=self.id, title=self.title, content=self.content)


def normalize_database_url(dsn: str) -> tuple[str, dict[str, Any]]:
    """
    Turn a user supplied connection string into a SQLAlchemy URL.

    Accepts:
    - any SQLAlchemy URL (sqlite:///notes.db, postgresql+psycopg2://...)
    - postgres://... and postgresql://... (libpq URIs)
    - libpq keyword strings such as "host=db user=app dbname=notes"

    Returns the URL plus extra connect_args (the raw keyword string is handed
    to psycopg2 as `dsn`).
    """
    dsn = dsn.strip()
    if "://" not in dsn:
        return "postgresql+psycopg2://", {"dsn": dsn}
    for prefix in ("postgres://", "postgresql://"):
        if dsn.startswith(prefix):
            return "postgresql+psycopg2://" + dsn[len(prefix):], {}
    return dsn, {}


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def _engine_options(url: str, timeout: float, pool_size: int) -> dict[str, Any]:
    """Pool and per-dialect timeouts so no statement outlives `timeout`."""
    backend = make_url(url).get_backend_name()
    options: dict[str, Any] = {"pool_pre_ping": True}
    if _is_memory_sqlite(url):
        # every thread must see the same in-memory database
        options["poolclass"] = StaticPool
    else:
        options["pool_size"] = pool_size
        options["pool_timeout"] = timeout
    if backend == "sqlite":
        options["connect_args"] = {"timeout": timeout, "check_same_thread": False}
    if backend == "postgresql":
        options["connect_args"] = {
            "connect_timeout": max(1, int(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    return options


class SQLNoteStore(NoteStore):
    """
    Store backed by a single `notes` table.

    Each call borrows a pooled connection for exactly one statement and
    commits it on its own; there are no multi-statement transactions.
    Search is case-insensitive. An update with no non-empty field fails
    with StoreError instead of succeeding as a no-op.
    """

    def __init__(
        self,
        dsn: str,
        timeout: float = DEFAULT_TIMEOUT,
        pool_size: int = 5,
        engine: Engine | None = None,
    ):
        self.timeout = timeout
        if engine is None:
            url, connect_args = normalize_database_url(dsn)
            options = _engine_options(url, timeout, pool_size)
            options["connect_args"] = {**options.get("connect_args", {}), **connect_args}
            engine = create_engine(url, **options)
        self.engine = engine
        self._sessions = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self._init_schema()

    def _init_schema(self) -> None:
        """Create the notes table if it does not exist."""
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as exc:
            raise StoreError(f"cannot create notes table: {exc}") from exc

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Scoped session: always closed, backend errors become StoreError."""
        session = self._sessions()
        try:
            yield session
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(str(exc)) from exc
        finally:
            session.close()

    def get_note(self, note_id: NoteId) -> Note:
        with self._session() as session:
            row = session.get(NoteRow, note_id)
            if row is None:
                raise NoteNotFoundError(note_id)
            return row.to_note()

    def create_note(self, note: Note) -> NoteId:
        with self._session() as session:
            row = NoteRow(title=note.title, content=note.content)
            session.add(row)
            session.commit()
            logger.debug("sql: inserted note %s", row.id)
            return row.id

    def update_note(self, note_id: NoteId, note: Note) -> None:
        fields = {}
        if note.title:
            fields["title"] = note.title
        if note.content:
            fields["content"] = note.content
        if not fields:
            raise StoreError("no fields to update")

        with self._session() as session:
            result = session.execute(
                update(NoteRow).where(NoteRow.id == note_id).values(**fields)
            )
            if result.rowcount == 0:
                session.rollback()
                raise NoteNotFoundError(note_id)
            session.commit()

    def delete_note(self, note_id: NoteId) -> None:
        with self._session() as session:
            result = session.execute(delete(NoteRow).where(NoteRow.id == note_id))
            if result.rowcount == 0:
                session.rollback()
                raise NoteNotFoundError(note_id)
            session.commit()
            logger.debug("sql: deleted note %s", note_id)

    def find_like(self, text: str) -> list[Note]:
        stmt = (
            select(NoteRow)
            .where(
                or_(
                    NoteRow.title.icontains(text, autoescape=True),
                    NoteRow.content.icontains(text, autoescape=True),
                )
            )
            .order_by(NoteRow.id)
        )
        with self._session() as session:
            return [row.to_note() for row in session.scalars(stmt)]

    def close(self) -> None:
        self.engine.dispose()
