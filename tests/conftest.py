"""Shared fixtures for taskman tests."""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from taskman.store import TodoStore

SAMPLE_TODO = """\
call mum
(B) write report +work
x (A) pay rent @home
(A) buy milk figma:123 @home +errand

x tidy desk
"""


@pytest.fixture(autouse=True)
def isolated_todo_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point default task file locations at a temporary directory."""
    todo_dir = tmp_path / "todo"
    monkeypatch.setenv("TASKMAN_DIR", str(todo_dir))
    return todo_dir


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary project directory and change to it."""
    original_dir = os.getcwd()
    project = tmp_path / "project"
    project.mkdir()
    os.chdir(project)
    try:
        yield project
    finally:
        os.chdir(original_dir)


@pytest.fixture
def todo_file(isolated_todo_dir: Path) -> Path:
    """Create todo.txt with sample tasks."""
    isolated_todo_dir.mkdir(parents=True, exist_ok=True)
    path = isolated_todo_dir / "todo.txt"
    path.write_text(SAMPLE_TODO, encoding="utf-8")
    return path


@pytest.fixture
def done_file(isolated_todo_dir: Path) -> Path:
    """Create done.txt with one previously archived task."""
    isolated_todo_dir.mkdir(parents=True, exist_ok=True)
    path = isolated_todo_dir / "done.txt"
    path.write_text("x old thing\n", encoding="utf-8")
    return path


@pytest.fixture
def store(todo_file: Path, done_file: Path) -> TodoStore:
    """A store over the sample files, already loaded."""
    todo_store = TodoStore(todo_file, done_file)
    todo_store.load()
    return todo_store
