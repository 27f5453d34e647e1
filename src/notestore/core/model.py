from __future__ import annotations

from dataclasses import dataclass

NoteId = int


@dataclass
class Note:
    title: str = ""
    content: str = ""
    id: NoteId | None = None  # assigned by the store on creation
