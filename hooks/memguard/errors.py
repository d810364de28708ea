"""Exceptions raised by memguard.

Hook entry points never let these escape (they fail open); the CLI actions
turn them into an exit status of 1 with a short message.
"""


class MemguardError(Exception):
    """Base class for memguard errors."""


class ProjectRootNotFound(MemguardError):
    """No ``.ai-memory/`` directory above the starting directory."""

    def __init__(self, start_dir):
        super().__init__(f"No .ai-memory/ found above {start_dir}")
        self.start_dir = start_dir
