import logging

from .model import Note, NoteId
from .ports import NoteStore

logger = logging.getLogger(__name__)


class NoteService:
    """Entry point for the API layer; forwards every call to the store."""

    def __init__(self, store: NoteStore):
        self.store = store

    def get_note(self, note_id: NoteId) -> Note:
        return self.store.get_note(note_id)

    def create_note(self, note: Note) -> NoteId:
        note_id = self.store.create_note(note)
        logger.debug("Created note id=%s", note_id)
        return note_id

    def update_note(self, note: Note) -> None:
        if note.id is None:
            raise ValueError("update_note requires a note with an id")
        self.store.update_note(note.id, note)
        logger.debug("Updated note id=%s", note.id)

    def delete_note(self, note_id: NoteId) -> None:
        self.store.delete_note(note_id)
        logger.debug("Deleted note id=%s", note_id)

    def find_like(self, text: str) -> list[Note]:
        return self.store.find_like(text)
