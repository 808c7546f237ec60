"""Command-line front-end — argparse wiring and per-subcommand handlers.

Usage:
    duq explain src/app.py
    duq docstrings src/app.py
    duq chain src/app.py "refactor,test,docstrings" --continue-on-error
    duq backups src/app.py
    duq revert src/app.py --id <backup-id>
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from duq import __version__
from duq.exceptions import DuqError
from duq.models.backup_record import BackupEntry
from duq.utils import format_size

if TYPE_CHECKING:
    from duq.commands.registry import CommandRegistry
    from duq.context import AppContext

_TARGET_LABELS = {
    "file": ("file", "File to process"),
    "directory": ("directory", "Directory to process"),
    "any": ("path", "File or directory to process"),
}


def build_parser(registry: CommandRegistry) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="duq",
        description="Developer Utility with Q - CLI tool for Amazon Q",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data-dir", type=Path, default=None, help="Data directory (default: ~/.duq)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    sub = parser.add_subparsers(dest="command", metavar="<command>")

    for command in registry.commands:
        p = sub.add_parser(command.name, aliases=list(command.aliases), help=command.description)
        metavar, help_text = _TARGET_LABELS[command.target_kind.value]
        p.add_argument("target", metavar=metavar, help=help_text)
        if command.accepts_output:
            p.add_argument("-o", "--output", default=None, help="Custom output path")
        p.set_defaults(handler=_handle_command, command_name=command.name)

    p = sub.add_parser("chain", help="Run multiple commands in sequence")
    p.add_argument("target", metavar="path", help="File or directory to process")
    p.add_argument("steps", help='Comma-separated list of commands to run (e.g. "refactor,test,docstrings")')
    p.add_argument("-o", "--output", default=None, help="Custom output path for generated files")
    p.add_argument(
        "-c", "--continue-on-error", action="store_true", help="Continue execution if a step fails"
    )
    p.set_defaults(handler=_handle_chain)

    p = sub.add_parser("revert", help="Revert a file to its previous state")
    p.add_argument("file", nargs="?", default=None, help="File to revert (omit to revert the most recent change)")
    p.add_argument("-i", "--id", dest="backup_id", default=None, help="Specific backup ID to restore")
    p.set_defaults(handler=_handle_revert)

    p = sub.add_parser("backups", help="List available backups")
    p.add_argument("file", nargs="?", default=None, help="File to list backups for (omit to list all backups)")
    p.set_defaults(handler=_handle_backups)

    return parser


def dispatch(ctx: AppContext, args: argparse.Namespace) -> int:
    """Run the handler chosen by the parser; returns the process exit code."""
    return args.handler(ctx, args)


# ── Handlers ──


def _handle_command(ctx: AppContext, args: argparse.Namespace) -> int:
    command = ctx.registry.get(args.command_name)
    target = Path(args.target).expanduser().resolve()
    if not ctx.reader.exists(target):
        logger.error(f"Error: Path not found: {target}")
        return 1

    _, reason = ctx.chain_executor.validate(command.name, ctx.reader.is_directory(target))
    if reason:
        logger.error(f"Error: {reason}")
        return 1

    output = getattr(args, "output", None)
    try:
        command.run(ctx, target, Path(output).expanduser().resolve() if output else None)
    except DuqError as e:
        logger.error(str(e))
        return 1
    return 0


def _handle_chain(ctx: AppContext, args: argparse.Namespace) -> int:
    result = ctx.chain_executor.execute(
        ctx,
        args.target,
        args.steps,
        output=args.output,
        continue_on_error=args.continue_on_error,
    )
    return 0 if result.completed else 1


def _handle_revert(ctx: AppContext, args: argparse.Namespace) -> int:
    result = ctx.restore_manager.restore_backup(args.file, args.backup_id)
    if not result.success:
        return 1
    logger.success(f"✓ Reverted {result.file_path}")
    print(f"Restored state from {result.timestamp} (before '{result.operation}')")
    return 0


def _handle_backups(ctx: AppContext, args: argparse.Namespace) -> int:
    entries = ctx.backup_manager.list_backups(args.file)
    if not entries:
        where = f" for {Path(args.file).resolve()}" if args.file else ""
        print(f"No backups found{where}.")
        return 0

    if args.file:
        print(f"Backups for {entries[0].file_path} (newest first):")
    else:
        print("Backup history (newest first):")
    for i, entry in enumerate(entries, start=1):
        print(_format_entry(ctx, i, entry, show_path=args.file is None))
    return 0


def _format_entry(ctx: AppContext, position: int, entry: BackupEntry, show_path: bool) -> str:
    blob = ctx.backup_manager.blob_path(entry.id)
    size = format_size(blob.stat().st_size) if blob.is_file() else "missing"
    line = f"{position:>3}. {entry.timestamp}  {entry.operation:<10}  {size:>9}  id: {entry.id}"
    if show_path:
        line += f"\n     {entry.file_path}"
    return line
