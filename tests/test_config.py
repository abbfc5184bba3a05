"""Tests for taskman.config module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskman.config import CONFIG_FILE, LinkConfig, TaskmanConfig, default_todo_dir


class TestDefaultTodoDir:
    """Tests for default_todo_dir function."""

    def test_env_override(self, isolated_todo_dir: Path) -> None:
        """Test TASKMAN_DIR sets the directory."""
        assert default_todo_dir() == isolated_todo_dir

    def test_home_default(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test the default is ~/todo."""
        monkeypatch.delenv("TASKMAN_DIR")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_todo_dir() == tmp_path / "todo"


class TestTaskmanConfig:
    """Tests for TaskmanConfig model."""

    def test_defaults(self, isolated_todo_dir: Path) -> None:
        """Test default values."""
        config = TaskmanConfig()
        assert config.todo_path == isolated_todo_dir / "todo.txt"
        assert config.done_path == isolated_todo_dir / "done.txt"
        assert config.links == {}
        assert config.priorities == "ABCDEFGHIJKLMNOP"

    def test_paths_expand_user(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test ~ in file settings is expanded."""
        monkeypatch.setenv("HOME", str(tmp_path))
        config = TaskmanConfig(todo_file="~/t.txt", done_file="~/d.txt")
        assert config.todo_path == tmp_path / "t.txt"
        assert config.done_path == tmp_path / "d.txt"

    def test_links(self) -> None:
        """Test link configuration."""
        config = TaskmanConfig(
            links={"figma": {"template": "https://figma.example/x?node-id={value}"}}
        )
        assert config.links["figma"] == LinkConfig(
            template="https://figma.example/x?node-id={value}", param="node-id"
        )

    @pytest.mark.parametrize("priorities", ["", "abc", "A1"])
    def test_invalid_priorities(self, priorities: str) -> None:
        """Test priority letters must be uppercase A-Z."""
        with pytest.raises(Exception):
            TaskmanConfig(priorities=priorities)


class TestLoadSave:
    """Tests for loading and saving config."""

    def test_load_missing_returns_defaults(self, temp_project: Path) -> None:
        """Test defaults when no config file exists."""
        assert TaskmanConfig.load() == TaskmanConfig()

    def test_load_default_path(self, temp_project: Path) -> None:
        """Test loading from .taskman/config.json."""
        CONFIG_FILE.parent.mkdir()
        CONFIG_FILE.write_text(json.dumps({"todo_file": "/tmp/mine.txt", "priorities": "ABC"}))

        config = TaskmanConfig.load()

        assert config.todo_file == "/tmp/mine.txt"
        assert config.priorities == "ABC"

    def test_save_and_load(self, tmp_path: Path) -> None:
        """Test a saved config loads back equal."""
        path = tmp_path / "nested" / "config.json"
        config = TaskmanConfig(
            todo_file="a.txt",
            done_file="b.txt",
            links={"jira": LinkConfig(template="https://jira/{value}", param="selectedIssue")},
        )

        config.save(path)

        assert TaskmanConfig.load(path) == config
