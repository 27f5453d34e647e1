"""Tests for the HTTP client against an in-process app."""

import pytest
from fastapi.testclient import TestClient

from notestore.api.app import create_app
from notestore.client import NotesClient, NotesClientError
from notestore.core.model import Note
from notestore.runtime import build_runtime


@pytest.fixture
def notes_client():
    app = create_app(build_runtime())
    with NotesClient(http=TestClient(app)) as client:
        yield client


def test_round_trip(notes_client):
    note_id = notes_client.create_note("title", "content")
    assert notes_client.get_note(note_id) == Note(id=note_id, title="title", content="content")

    notes_client.update_note(note_id, "new title", "new content")
    assert notes_client.get_note(note_id).title == "new title"

    assert [n.id for n in notes_client.search_notes("new")] == [note_id]

    notes_client.delete_note(note_id)
    with pytest.raises(NotesClientError) as excinfo:
        notes_client.get_note(note_id)
    assert excinfo.value.code == "not_found"
    assert excinfo.value.status_code == 404


def test_validation_error(notes_client):
    with pytest.raises(NotesClientError) as excinfo:
        notes_client.create_note("", "content")
    assert excinfo.value.code == "invalid_argument"
    assert excinfo.value.message.startswith("invalid note")


def test_empty_search_pattern(notes_client):
    with pytest.raises(NotesClientError) as excinfo:
        notes_client.search_notes("")
    assert excinfo.value.message == "pattern cannot be empty"


def test_injected_http_client_is_not_closed():
    http = TestClient(create_app(build_runtime()))
    NotesClient(http=http).close()
    assert http.get("/health").status_code == 200
