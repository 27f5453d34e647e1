"""Tests for backend selection and runtime wiring."""

import tempfile
from pathlib import Path

from notestore.adapters.memory_store import MemoryNoteStore
from notestore.adapters.sql_store import SQLNoteStore
from notestore.config import NotesConfig, StoreConfig
from notestore.core.model import Note
from notestore.runtime import BACKEND_MEMORY, BACKEND_SQL, build_runtime, build_store


def test_no_dsn_selects_memory():
    assert isinstance(build_store(None), MemoryNoteStore)
    assert isinstance(build_store(""), MemoryNoteStore)


def test_dsn_selects_sql():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = build_store(f"sqlite:///{Path(tmpdir) / 'notes.db'}", timeout=1.0)
        try:
            assert isinstance(store, SQLNoteStore)
            assert store.timeout == 1.0
        finally:
            store.close()


def test_build_runtime_defaults_to_memory():
    rt = build_runtime()
    assert rt.backend == BACKEND_MEMORY
    assert rt.service.store is rt.store


def test_build_runtime_uses_configured_dsn():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = NotesConfig(store=StoreConfig(dsn=f"sqlite:///{Path(tmpdir) / 'notes.db'}"))
        rt = build_runtime(config)
        try:
            assert rt.backend == BACKEND_SQL
            note_id = rt.service.create_note(Note(title="A", content="B"))
            assert rt.service.get_note(note_id).content == "B"
        finally:
            rt.close()


def test_explicit_dsn_overrides_config():
    config = NotesConfig(store=StoreConfig(dsn="postgresql://nowhere/notes"))
    rt = build_runtime(config, dsn="")
    assert rt.backend == BACKEND_MEMORY
