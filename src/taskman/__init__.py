"""taskman - a todo.txt style task list."""

__version__ = "0.1.0"
