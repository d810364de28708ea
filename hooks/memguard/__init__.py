"""memguard: shared engine for the project-memory hook scripts.

Each hook invocation is a fresh process: state lives in small files under
the project's ``.ai-memory/`` directory and is read once, decided on, and
written back once.
"""

__version__ = "1.4.0"
