"""FastAPI application exposing notes as remote calls."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import FastAPI, Path, Query, status

from .. import __version__
from ..core.errors import ValidationError
from ..runtime import Runtime
from .errors import PATTERN_EMPTY, install_error_handlers
from .schemas import Empty, NoteOut, NoteRequest, NotesOut

logger = logging.getLogger(__name__)

# ids are 64-bit integers in every backend
NoteIdPath = Annotated[int, Path(ge=-(2**63), le=2**63 - 1, description="Note id")]


def create_app(runtime: Runtime) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Routes are plain functions so the server runs each request on its
    worker thread pool; the runtime's store is shared by all of them and
    closed when the application shuts down.

    Args:
        runtime: Runtime instance with service and store

    Returns:
        FastAPI application instance
    """
    service = runtime.service

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Serving notes from the %s backend", runtime.backend)
        yield
        logger.info("Closing %s backend", runtime.backend)
        runtime.close()

    app = FastAPI(
        title="notestore",
        description="Create, fetch, update, delete and search notes",
        version=__version__,
        lifespan=lifespan,
    )
    install_error_handlers(app)

    @app.get("/health")
    def health() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "backend": runtime.backend}

    @app.post("/notes", response_model=NoteOut, status_code=status.HTTP_201_CREATED)
    def create_note(payload: NoteRequest) -> NoteOut:
        """Create a note and return it with its assigned id."""
        note = payload.to_note()
        note.id = service.create_note(note)
        return NoteOut.model_validate(note)

    @app.get("/notes/{note_id}", response_model=NoteOut)
    def get_note(note_id: NoteIdPath) -> NoteOut:
        return NoteOut.model_validate(service.get_note(note_id))

    @app.put("/notes/{note_id}", response_model=Empty)
    def update_note(note_id: NoteIdPath, payload: NoteRequest) -> Empty:
        service.update_note(payload.to_note(note_id))
        return Empty()

    @app.delete("/notes/{note_id}", response_model=Empty)
    def delete_note(note_id: NoteIdPath) -> Empty:
        service.delete_note(note_id)
        return Empty()

    @app.get("/notes", response_model=NotesOut)
    def search_notes(
        pattern: str = Query("", description="Substring to look for in title or content"),
    ) -> NotesOut:
        """Search notes by substring."""
        if not pattern:
            raise ValidationError(PATTERN_EMPTY)
        notes = service.find_like(pattern)
        return NotesOut(notes=[NoteOut.model_validate(n) for n in notes])

    return app
