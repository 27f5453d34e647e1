"""Domain error taxonomy shared by stores, service and API."""


class NotesError(Exception):
    """Base class for all notestore errors."""


class NoteNotFoundError(NotesError):
    """Raised when an id has no live note."""

    def __init__(self, note_id: int):
        super().__init__(f"note {note_id} does not exist")
        self.note_id = note_id


class StoreError(NotesError):
    """Backend failure: connection, timeout or a malformed update."""


class ValidationError(NotesError):
    """Request rejected before reaching the store."""
