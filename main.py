"""Application entry point — wires services and runs the CLI."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

from duq.cli import build_parser, dispatch
from duq.commands.registry import CommandRegistry
from duq.config import Config
from duq.context import AppContext
from duq.core.assistant import AssistantRunner
from duq.core.backup import BackupManager
from duq.core.chain import ChainExecutor
from duq.core.restore import RestoreManager
from duq.core.source_reader import SourceReader
from duq.logger import setup_logger


def create_context(data_dir: Path | None = None, registry: CommandRegistry | None = None) -> AppContext:
    """Wire all services and return an AppContext."""
    config = Config(data_dir)

    # Commands
    if registry is None:
        registry = CommandRegistry()
        registry.discover_commands()

    # Core services
    backup_manager = BackupManager(config)
    restore_manager = RestoreManager(backup_manager)

    return AppContext(
        config=config,
        backup_manager=backup_manager,
        restore_manager=restore_manager,
        assistant=AssistantRunner(config),
        reader=SourceReader(config),
        registry=registry,
        chain_executor=ChainExecutor(registry),
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Application entry point."""
    setup_logger()

    registry = CommandRegistry()
    registry.discover_commands()

    parser = build_parser(registry)
    args = parser.parse_args(argv)
    if getattr(args, "handler", None) is None:
        parser.print_help()
        return 0

    ctx = create_context(args.data_dir, registry)
    setup_logger(ctx.config.log_dir, verbose=args.verbose)
    return dispatch(ctx, args)


if __name__ == "__main__":
    sys.exit(main())
