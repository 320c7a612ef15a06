"""Shared fixtures for sparky tests."""

import pytest

from sparky.ai.tools import DomainContext
from sparky.models import Note, Reminder
from sparky.notebook import Notebook


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch, tmp_path):
    """Prevent tests from reading a real .env or touching real data."""
    monkeypatch.setenv("GEMINI_API_KEY", "test_key")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setattr("sparky.config._settings", None)


@pytest.fixture
def notebook():
    """Three notes: pinned, completed, favourite-with-reminder."""
    return Notebook(notes=[
        Note(
            id="n1",
            title="Groceries",
            content="<p>Buy <b>milk</b> and eggs</p>",
            is_pinned=True,
            last_modified="2026-01-01T00:00:00+00:00",
        ),
        Note(
            id="n2",
            title="Tax return",
            content="File by July",
            is_completed=True,
            last_modified="2026-01-02T00:00:00+00:00",
        ),
        Note(
            id="n3",
            title="Dentist",
            content="Book appointment",
            is_favourite=True,
            reminder=Reminder(time="2026-02-01T09:00:00"),
            last_modified="2026-01-03T00:00:00+00:00",
        ),
    ])


@pytest.fixture
def ctx(notebook):
    return DomainContext(notebook)
