"""Application context — service container for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from duq.commands.registry import CommandRegistry
    from duq.config import Config
    from duq.core.assistant import AssistantRunner
    from duq.core.backup import BackupManager
    from duq.core.chain import ChainExecutor
    from duq.core.restore import RestoreManager
    from duq.core.source_reader import SourceReader


@dataclass
class AppContext:
    """
    Central service container.

    Commands receive this at run time instead of reaching for globals, so
    tests can hand them a context wired to temp directories and fakes.
    """

    config: Config

    # Backup services
    backup_manager: BackupManager
    restore_manager: RestoreManager

    # Command services
    assistant: AssistantRunner
    reader: SourceReader
    registry: CommandRegistry
    chain_executor: ChainExecutor
