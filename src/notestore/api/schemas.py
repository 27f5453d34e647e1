from pydantic import BaseModel, ConfigDict, Field

from ..core.model import Note


class NoteRequest(BaseModel):
    """Body of create and update calls. Both fields are required."""
    title: str = Field(..., min_length=1, description="Note title (non-empty).")
    content: str = Field(..., min_length=1, description="Note content (non-empty).")

    def to_note(self, note_id: int | None = None) -> Note:
        return Note(id=note_id, title=self.title, content=self.content)


class NoteOut(BaseModel):
    """Note as returned over the wire."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str


class NotesOut(BaseModel):
    notes: list[NoteOut]


class Empty(BaseModel):
    pass
