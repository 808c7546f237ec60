"""Exception hierarchy."""

from __future__ import annotations


class DuqError(Exception):
    """Base class for all duq errors."""


class SourceReadError(DuqError):
    """The primary input file or directory could not be read."""


class CommandError(DuqError):
    """A command ran but could not produce its result."""


class AssistantError(DuqError):
    """The external assistant process failed or is unavailable."""
