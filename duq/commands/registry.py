"""Command auto-discovery — maps command names to Command instances."""

from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path

from loguru import logger

from duq.commands.base import Command

_INFRASTRUCTURE_MODULES = {"base", "registry"}


class CommandRegistry:
    """
    Auto-discovers ``Command`` subclasses from ``duq/commands/<module>.py``.

    Usage::

        registry = CommandRegistry()
        registry.discover_commands()
        registry.get("docstrings")      # → DocstringsCommand
        registry.get("badcmd")          # → None
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    # ── Read-only access ──

    @property
    def commands(self) -> list[Command]:
        return list(self._commands.values())

    @property
    def names(self) -> list[str]:
        return list(self._commands)

    def get(self, name: str) -> Command | None:
        """Look up a command by its name."""
        return self._commands.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    # ── Registration ──

    def register(self, command: Command) -> None:
        if command.name in self._commands:
            logger.warning(f"Replacing registered command '{command.name}'")
        self._commands[command.name] = command
        logger.debug(f"Registered command: {command.name} ({command.target_kind.value})")

    def discover_commands(self) -> None:
        """Scan the ``duq.commands`` package and register every concrete Command."""
        self._commands.clear()
        commands_dir = Path(__file__).parent

        for module_info in sorted(pkgutil.iter_modules([str(commands_dir)]), key=lambda m: m.name):
            if module_info.ispkg or module_info.name in _INFRASTRUCTURE_MODULES:
                continue
            module_name = f"duq.commands.{module_info.name}"
            try:
                module = importlib.import_module(module_name)
            except ImportError as e:
                logger.debug(f"Skipping command module '{module_info.name}': {e}")
                continue

            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (
                    isinstance(attr, type)
                    and issubclass(attr, Command)
                    and attr is not Command
                    and not getattr(attr, "__abstractmethods__", None)
                    and attr.__module__ == module_name
                ):
                    self._register_class(attr, attr_name)

    def _register_class(self, cls: type[Command], class_name: str) -> None:
        try:
            self.register(cls())
        except Exception as e:
            logger.error(f"Failed to instantiate command '{class_name}': {e}")
