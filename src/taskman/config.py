"""Configuration models for taskman."""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


def default_todo_dir() -> Path:
    """Directory holding the task files unless the config says otherwise."""
    env_dir = os.environ.get("TASKMAN_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / "todo"


class LinkConfig(BaseModel):
    """How an attribute is turned into a link.

    ``template`` is a URL with a ``{value}`` placeholder. ``param`` is the
    query parameter taken from a pasted URL when setting the attribute.
    """

    template: str
    param: str = "node-id"


class TaskmanConfig(BaseModel):
    """Main configuration for taskman."""

    todo_file: str = Field(default_factory=lambda: str(default_todo_dir() / "todo.txt"))
    done_file: str = Field(default_factory=lambda: str(default_todo_dir() / "done.txt"))
    links: dict[str, LinkConfig] = Field(default_factory=dict)
    priorities: str = "ABCDEFGHIJKLMNOP"

    @field_validator("priorities")
    @classmethod
    def _uppercase_letters(cls, value: str) -> str:
        if not value or not all("A" <= c <= "Z" for c in value):
            raise ValueError("priorities must be uppercase letters A-Z")
        return value

    @property
    def todo_path(self) -> Path:
        return Path(self.todo_file).expanduser()

    @property
    def done_path(self) -> Path:
        return Path(self.done_file).expanduser()

    @classmethod
    def load(cls, path: Path | None = None) -> TaskmanConfig:
        """Load configuration from file or return defaults."""
        if path is None:
            path = CONFIG_FILE

        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        return cls.model_validate(data)

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = CONFIG_FILE

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)


# Default config directory
CONFIG_DIR = Path(".taskman")
CONFIG_FILE = CONFIG_DIR / "config.json"
