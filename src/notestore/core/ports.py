from typing import Protocol

from .model import Note, NoteId


class NoteStore(Protocol):
    """
    Note persistence. Both backends expose exactly this surface.

    Stores assign ids, raise NoteNotFoundError for absent ids and
    StoreError for backend failures.
    """

    def get_note(self, note_id: NoteId) -> Note:
        pass

    def create_note(self, note: Note) -> NoteId:
        pass

    def update_note(self, note_id: NoteId, note: Note) -> None:
        """Merge the non-empty fields of `note` into the stored note."""
        pass

    def delete_note(self, note_id: NoteId) -> None:
        pass

    def find_like(self, text: str) -> list[Note]:
        """Notes whose title or content contains `text`."""
        pass

    def close(self) -> None:
        pass
