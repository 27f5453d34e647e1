"""HTTP client for a running notestore server."""

from typing import Any

import httpx

from .core.model import Note, NoteId

DEFAULT_URL = "http://127.0.0.1:50051"


class NotesClientError(Exception):
    """Error returned by the server, carrying its code and message."""

    def __init__(self, code: str, message: str, status_code: int):
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
        self.status_code = status_code


class NotesClient:
    """
    Thin wrapper over the notes routes.

    Pass `http` to reuse an existing httpx.Client (for example FastAPI's
    TestClient); otherwise one is created for `base_url` and closed by
    close().
    """

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        timeout: float = 10.0,
        http: httpx.Client | None = None,
    ):
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def __enter__(self) -> "NotesClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def _call(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self.http.request(method, path, **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            raise NotesClientError(
                body.get("code", "internal"),
                body.get("message", response.text),
                response.status_code,
            )
        return response.json()

    def create_note(self, title: str, content: str) -> NoteId:
        data = self._call("POST", "/notes", json={"title": title, "content": content})
        return data["id"]

    def get_note(self, note_id: NoteId) -> Note:
        return Note(**self._call("GET", f"/notes/{note_id}"))

    def update_note(self, note_id: NoteId, title: str, content: str) -> None:
        self._call("PUT", f"/notes/{note_id}", json={"title": title, "content": content})

    def delete_note(self, note_id: NoteId) -> None:
        self._call("DELETE", f"/notes/{note_id}")

    def search_notes(self, pattern: str) -> list[Note]:
        data = self._call("GET", "/notes", params={"pattern": pattern})
        return [Note(**item) for item in data["notes"]]
