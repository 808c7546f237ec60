"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from duq.config import Config
from duq.context import AppContext
from main import create_context
from tests.fakes import FakeAssistant


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def config(data_dir: Path) -> Config:
    return Config(data_dir)


@pytest.fixture
def assistant() -> FakeAssistant:
    return FakeAssistant()


@pytest.fixture
def ctx(data_dir: Path, assistant: FakeAssistant) -> AppContext:
    """Fully wired context on a temp data dir, with a fake assistant."""
    context = create_context(data_dir)
    context.assistant = assistant
    return context


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    path = project / "app.py"
    path.write_text("def add(a, b):\n    return a + b\n", encoding="utf-8")
    return path
