"""Runtime wiring: backend selection and service construction."""

import logging
from dataclasses import dataclass, field

from .adapters.memory_store import MemoryNoteStore
from .adapters.sql_store import SQLNoteStore
from .config import NotesConfig
from .core.ports import NoteStore
from .core.service import NoteService

logger = logging.getLogger(__name__)

BACKEND_MEMORY = "memory"
BACKEND_SQL = "sql"


def build_store(dsn: str | None, timeout: float = 5.0, pool_size: int = 5) -> NoteStore:
    """In-memory store without a connection string, relational store with one."""
    if dsn:
        logger.info("Using relational note store")
        return SQLNoteStore(dsn, timeout=timeout, pool_size=pool_size)
    logger.info("Using in-memory note store")
    return MemoryNoteStore()


@dataclass
class Runtime:
    """Container for all wired components."""
    store: NoteStore
    service: NoteService
    config: NotesConfig = field(default_factory=NotesConfig)

    @property
    def backend(self) -> str:
        return BACKEND_SQL if isinstance(self.store, SQLNoteStore) else BACKEND_MEMORY

    def close(self) -> None:
        self.store.close()


def build_runtime(config: NotesConfig | None = None, dsn: str | None = None) -> Runtime:
    """Build and wire all components; `dsn` overrides the configured one."""
    if config is None:
        config = NotesConfig()
    if dsn is None:
        dsn = config.store.dsn

    store = build_store(dsn, timeout=config.store.timeout, pool_size=config.store.pool_size)
    return Runtime(store=store, service=NoteService(store), config=config)
