"""CLI interface for taskman."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from taskman import __version__
from taskman.config import CONFIG_FILE, TaskmanConfig
from taskman.errors import InvalidMutationError, TaskmanError
from taskman.links import node_id_from_url
from taskman.record import Record, RecordKey
from taskman.store import (
    TodoStore,
    check_attribute,
    check_body,
    check_key,
    check_task,
    filter_records,
)

console = Console()

T = TypeVar("T")

key_priority_option = click.option(
    "--priority",
    "-p",
    "key_priority",
    default=None,
    help="Current priority of the task (omit if it has none)",
)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="taskman")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Config file (default: {CONFIG_FILE})",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """taskman - a todo.txt task list.

    Tasks are identified by their text and priority exactly as shown by
    ``taskman list``.

    \b
    Examples:
      taskman add "(A) buy milk @home +errand"
      taskman done "buy milk @home +errand" -p A
      taskman priority "buy milk @home +errand" B -p A
      taskman archive
    """
    _setup_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["config"] = TaskmanConfig.load(config_path)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _setup_logging(verbose: bool) -> None:
    root = logging.getLogger("taskman")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _run(
    ctx: click.Context,
    action: Callable[[TodoStore], T],
    check: Callable[[], None] | None = None,
) -> T:
    """Load the store, run action against it, and report taskman errors.

    ``check`` validates the command's input before any file is read.
    """
    config: TaskmanConfig = ctx.obj["config"]
    store = TodoStore.from_config(config)
    try:
        if check is not None:
            check()
        store.load()
        return action(store)
    except TaskmanError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        ctx.exit(1)


def _key(body: str, priority: str | None) -> RecordKey:
    if priority is not None:
        priority = priority.upper()
    return RecordKey(body, priority or None)


def _print_record(label: str, record: Record) -> None:
    priority = f"({record.priority}) " if record.priority else ""
    console.print(f"[green]{label}:[/green] {escape(priority + record.body)}")


def _check_attribute_input(key: RecordKey, name: str, value: str) -> None:
    check_key(key)
    check_attribute(name, value)


@main.command("list")
@click.argument("query", required=False)
@click.pass_context
def list_command(ctx: click.Context, query: str | None) -> None:
    """List tasks, optionally filtered.

    A single letter shows that priority; longer text searches task bodies.
    The todo file is rewritten in sorted, canonical form.
    """

    def show(store: TodoStore) -> None:
        store.save()
        records = filter_records(store.records, query)

        if not records:
            console.print("[dim]No tasks.[/dim]")
            return

        table = Table(show_header=True)
        table.add_column("Done", style="green", width=4)
        table.add_column("Pri", style="cyan", width=3)
        table.add_column("Task", style="white")
        table.add_column("Attributes", style="dim")

        for record in records:
            body = escape(record.body)
            table.add_row(
                "[green]✓[/green]" if record.done else "",
                record.priority or "-",
                f"[strike]{body}[/strike]" if record.done else body,
                escape(" ".join(f"{k}:{v}" for k, v in record.attributes)),
            )

        console.print(table)

    _run(ctx, show)


@main.command()
@click.argument("line")
@click.pass_context
def add(ctx: click.Context, line: str) -> None:
    """Add a task written in todo.txt form."""
    record = _run(ctx, lambda store: store.add(line), lambda: check_task(line))
    _print_record("Added", record)


@main.command()
@click.argument("body")
@key_priority_option
@click.option("--undo", is_flag=True, help="Mark the task as not done")
@click.pass_context
def done(ctx: click.Context, body: str, key_priority: str | None, undo: bool) -> None:
    """Mark a task as done (or not done with --undo)."""
    key = _key(body, key_priority)
    record = _run(
        ctx, lambda store: store.set_done(key, not undo), lambda: check_key(key)
    )
    _print_record("Reopened" if undo else "Done", record)


@main.command()
@click.argument("body")
@click.argument("new_priority")
@key_priority_option
@click.pass_context
def priority(ctx: click.Context, body: str, new_priority: str, key_priority: str | None) -> None:
    """Set a task's priority. Use "-" to clear it."""
    config: TaskmanConfig = ctx.obj["config"]
    key = _key(body, key_priority)

    letter = None if new_priority == "-" else new_priority.upper()
    if letter is not None and letter not in config.priorities:
        console.print(
            f"[red]Error:[/red] Priority must be one of {config.priorities} or '-'"
        )
        ctx.exit(1)

    record = _run(
        ctx, lambda store: store.set_priority(key, letter), lambda: check_key(key)
    )
    _print_record("Updated", record)


@main.command()
@click.argument("body")
@click.argument("new_body")
@key_priority_option
@click.pass_context
def edit(ctx: click.Context, body: str, new_body: str, key_priority: str | None) -> None:
    """Replace a task's text."""
    key = _key(body, key_priority)

    def check() -> None:
        check_key(key)
        check_body(new_body)

    record = _run(ctx, lambda store: store.update_body(key, new_body), check)
    _print_record("Updated", record)


@main.command()
@click.argument("body")
@click.argument("name")
@click.argument("value")
@key_priority_option
@click.pass_context
def attr(ctx: click.Context, body: str, name: str, value: str, key_priority: str | None) -> None:
    """Set a key:value attribute on a task."""
    key = _key(body, key_priority)
    record = _run(
        ctx,
        lambda store: store.set_attribute(key, name, value),
        lambda: _check_attribute_input(key, name, value),
    )
    _print_record("Updated", record)


@main.command()
@click.argument("body")
@click.argument("url")
@key_priority_option
@click.option("--name", "-n", default="figma", show_default=True, help="Link attribute name")
@click.pass_context
def link(ctx: click.Context, body: str, url: str, key_priority: str | None, name: str) -> None:
    """Attach a link to a task by pasting its URL.

    The configured query parameter (``node-id`` by default) is taken from the
    URL and stored as an attribute.
    """
    config: TaskmanConfig = ctx.obj["config"]
    key = _key(body, key_priority)
    link_config = config.links.get(name)
    param = link_config.param if link_config else "node-id"

    try:
        value = node_id_from_url(url, param)
    except InvalidMutationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        ctx.exit(1)

    record = _run(
        ctx,
        lambda store: store.set_attribute(key, name, value),
        lambda: _check_attribute_input(key, name, value),
    )
    _print_record("Linked", record)


@main.command()
@click.pass_context
def archive(ctx: click.Context) -> None:
    """Move finished tasks to the done file."""
    archived = _run(ctx, lambda store: store.cleanup())
    count = len(archived)
    if count:
        console.print(f"[green]Archived {count} task(s).[/green]")
    else:
        console.print("[dim]Nothing to archive.[/dim]")


@main.command()
@click.argument("query", required=False)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to file instead of stdout",
)
@click.pass_context
def html(ctx: click.Context, query: str | None, output: Path | None) -> None:
    """Render the task list as a static HTML page."""
    from taskman.render import render_html

    config: TaskmanConfig = ctx.obj["config"]
    page = _run(ctx, lambda store: render_html(store.records, config, query))

    if output is None:
        click.echo(page, nl=False)
        return

    output.write_text(page, encoding="utf-8")
    console.print(f"[green]Wrote[/green] {output}")


@main.group("config")
def config_group() -> None:
    """Show or create configuration."""
    pass


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration."""
    config: TaskmanConfig = ctx.obj["config"]

    table = Table(title="Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Todo file", str(config.todo_path))
    table.add_row("Done file", str(config.done_path))
    table.add_row("Priorities", config.priorities)
    for name, link_config in sorted(config.links.items()):
        table.add_row(f"Link: {name}", f"{link_config.template} (from {link_config.param})")

    console.print(table)


@config_group.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing config")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Write a config file and create empty task files if missing."""
    config: TaskmanConfig = ctx.obj["config"]
    path: Path = ctx.obj["config_path"] or CONFIG_FILE

    if path.exists() and not force:
        console.print(
            f"[yellow]Config already exists:[/yellow] {path}. Use --force to overwrite."
        )
    else:
        config.save(path)
        console.print(f"[green]Config saved:[/green] {path}")

    for task_file in (config.todo_path, config.done_path):
        if not task_file.exists():
            task_file.parent.mkdir(parents=True, exist_ok=True)
            task_file.touch()
            console.print(f"[green]Created[/green] {task_file}")
