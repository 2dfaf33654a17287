"""Command line interface for line-timestamps.

Runs the watcher, shows a document's line timestamps, and prints the
edit script between two files.
"""

import signal
import sys
from pathlib import Path

import click

from line_timestamps.config import Config, load_config
from line_timestamps.content import FileContentProvider, split_lines
from line_timestamps.diff import EditOp, compute_edit_script
from line_timestamps.errors import StorageUnavailable
from line_timestamps.logging import setup_logging
from line_timestamps.models import parse_timestamp
from line_timestamps.store import TimestampStore
from line_timestamps.watcher.daemon import run_watcher, signal_handler

STAMP_WIDTH = 7


def format_stamp(timestamp: str | None, verbose: bool = False) -> str:
    """Format a stored timestamp for display in local time."""
    if timestamp is None:
        return ""
    if verbose:
        return timestamp
    return parse_timestamp(timestamp).astimezone().strftime("%H:%M")


def print_op(op: EditOp, old_lines: list[str], new_lines: list[str]) -> None:
    """Print one edit script op with the lines it touches."""
    header = f"{op.tag:<8} old[{op.old_start}:{op.old_end}] -> new[{op.new_start}:{op.new_end}]"
    if op.tag == "equal":
        click.echo(f"\033[2m{header}\033[0m")
        return

    click.echo(f"\033[1m{header}\033[0m")
    for line in old_lines[op.old_start : op.old_end]:
        click.echo(f"\033[31m- {line}\033[0m")
    for line in new_lines[op.new_start : op.new_end]:
        click.echo(f"\033[32m+ {line}\033[0m")


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Path to config file",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """Track when each line of your documents was last edited."""
    config = load_config(config_path)
    setup_logging("cli", log_dir=config.log_dir, console=False)
    ctx.obj = config


@cli.command()
@click.pass_obj
def watch(config: Config) -> None:
    """Watch the vault and record edited lines."""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    click.echo(f"Watching {config.vault_path} (store: {config.store_path})")
    try:
        run_watcher(config)
    except StorageUnavailable as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("document")
@click.option("--verbose", "-v", is_flag=True, help="Show full ISO-8601 timestamps")
@click.pass_obj
def show(config: Config, document: str, verbose: bool) -> None:
    """Show each line of DOCUMENT with the time it was last edited.

    DOCUMENT is a path relative to the vault.
    """
    store = TimestampStore(config.store_path)
    try:
        entries = store.get_entries(document)
    except StorageUnavailable as e:
        click.echo(f"Error reading timestamps: {e}", err=True)
        sys.exit(1)

    width = 24 if verbose else STAMP_WIDTH
    provider = FileContentProvider(config.vault_path)
    try:
        lines = provider.get_full_content(document)
    except FileNotFoundError:
        # Document is gone; list what the store still holds
        click.echo(f"{document} not found in {config.vault_path}, showing stored entries", err=True)
        for index, timestamp in entries.items():
            click.echo(f"{index:>5}  {format_stamp(timestamp, verbose)}")
        return

    for index, line in enumerate(lines):
        stamp = format_stamp(entries.get(index), verbose)
        click.echo(f"\033[36m{stamp:<{width}}\033[0m {line}")


@cli.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def diff(old: Path, new: Path) -> None:
    """Print the line edit script that turns OLD into NEW."""
    old_lines = split_lines(old.read_text(encoding="utf-8"))
    new_lines = split_lines(new.read_text(encoding="utf-8"))

    script = compute_edit_script(old_lines, new_lines)
    for op in script:
        print_op(op, old_lines, new_lines)

    changed = sum(1 for op in script if op.tag != "equal")
    click.echo(f"\n{changed} change(s) across {len(old_lines)} -> {len(new_lines)} lines")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
