"""Tests for the command line entry point."""

import json

import pytest

from notestore import __version__, cli
from notestore.core.model import Note


def test_parse_address():
    assert cli.parse_address("127.0.0.1:50051") == ("127.0.0.1", 50051)
    assert cli.parse_address("localhost:8080") == ("localhost", 8080)
    assert cli.parse_address(":9000") == ("0.0.0.0", 9000)
    assert cli.parse_address("[::1]:7000") == ("::1", 7000)


@pytest.mark.parametrize("address", ["localhost", "host:", "host:port", "host:70000"])
def test_parse_address_rejects(address):
    with pytest.raises(ValueError):
        cli.parse_address(address)


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert f"notestore {__version__}" in out
    assert "python" in out
    assert "platform" in out


def test_serve_requires_address(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["serve"])
    assert excinfo.value.code == 2


def test_serve_selects_backend_and_runs(monkeypatch, tmp_path):
    calls = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr("uvicorn.run", fake_run)
    monkeypatch.delenv("NOTESTORE_DSN", raising=False)
    monkeypatch.chdir(tmp_path)

    dsn = f"sqlite:///{tmp_path / 'notes.db'}"
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["serve", "127.0.0.1:6000", dsn])

    assert excinfo.value.code == 0
    assert calls["host"] == "127.0.0.1"
    assert calls["port"] == 6000
    assert calls["timeout_graceful_shutdown"] == 10.0
    assert (tmp_path / "notes.db").exists()


def test_serve_bad_address(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["serve", "nowhere"])
    assert excinfo.value.code == 1
    assert "Invalid listen address" in capsys.readouterr().err


class FakeClient:
    """Stands in for NotesClient in client subcommands."""

    notes = {1: Note(id=1, title="A", content="B")}

    def __init__(self, base_url):
        self.base_url = base_url

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        pass

    def create_note(self, title, content):
        return 2

    def get_note(self, note_id):
        if note_id not in self.notes:
            raise cli.NotesClientError("not_found", f"note not found: {note_id}", 404)
        return self.notes[note_id]

    def search_notes(self, pattern):
        return [n for n in self.notes.values() if pattern in n.title]


@pytest.fixture
def fake_client(monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "NotesClient", FakeClient)
    monkeypatch.chdir(tmp_path)


def test_create_prints_id(fake_client, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["create", "A", "B"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == "2"


def test_get_json(fake_client, capsys):
    with pytest.raises(SystemExit):
        cli.main(["--json", "get", "1"])
    assert json.loads(capsys.readouterr().out) == {"id": 1, "title": "A", "content": "B"}


def test_search_plain(fake_client, capsys):
    with pytest.raises(SystemExit):
        cli.main(["search", "A"])
    assert capsys.readouterr().out == "1\tA\tB\n"


def test_client_error_exit_code(fake_client, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["get", "9"])
    assert excinfo.value.code == 1
    assert "note not found: 9 (not_found)" in capsys.readouterr().err
