#!/usr/bin/env python3
"""PostToolUse hook: thin shim, delegates to memguard.orchestrator.

Save reminders, summary checkpoints and task-completion notices.
Fail-open: always exits 0.
"""
import os
import sys

# Ensure hooks dir is on sys.path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from memguard.orchestrator import handle_post_tool_use, post_tool_use_main as _main  # noqa: E402, F401

if __name__ == "__main__":
    _main()
