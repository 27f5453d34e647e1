"""In-process note store guarded by a reader/writer lock."""

import itertools
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace

from ..core.errors import NoteNotFoundError
from ..core.model import Note, NoteId
from ..core.ports import NoteStore

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Many readers or one writer.

    Waiting writers block new readers so a steady stream of searches cannot
    starve mutations.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class MemoryNoteStore(NoteStore):
    """
    Dict-backed store. Nothing survives the process.

    Ids come from a counter that only moves forward, so an id freed by a
    delete is never handed out again. Updates with no non-empty field are
    accepted and change nothing. Search is case-sensitive.
    """

    def __init__(self) -> None:
        self._notes: dict[NoteId, Note] = {}
        self._ids = itertools.count(1)
        self._lock = ReadWriteLock()

    def get_note(self, note_id: NoteId) -> Note:
        with self._lock.read():
            note = self._notes.get(note_id)
            if note is None:
                raise NoteNotFoundError(note_id)
            return replace(note)

    def create_note(self, note: Note) -> NoteId:
        with self._lock.write():
            note_id = next(self._ids)
            self._notes[note_id] = Note(id=note_id, title=note.title, content=note.content)
        logger.debug("memory: stored note %s", note_id)
        return note_id

    def update_note(self, note_id: NoteId, note: Note) -> None:
        with self._lock.write():
            existing = self._notes.get(note_id)
            if existing is None:
                raise NoteNotFoundError(note_id)
            if note.title:
                existing.title = note.title
            if note.content:
                existing.content = note.content

    def delete_note(self, note_id: NoteId) -> None:
        with self._lock.write():
            if self._notes.pop(note_id, None) is None:
                raise NoteNotFoundError(note_id)
        logger.debug("memory: deleted note %s", note_id)

    def find_like(self, text: str) -> list[Note]:
        with self._lock.read():
            return [
                replace(note)
                for note_id, note in sorted(self._notes.items())
                if text in note.title or text in note.content
            ]

    def close(self) -> None:
        pass

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._notes)
