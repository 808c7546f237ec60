"""duq — Developer Utility with Q."""

__version__ = "1.0.1"
