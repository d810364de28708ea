#!/usr/bin/env python3
"""SessionStart hook: thin shim, delegates to memguard.orchestrator.

Registers the session, opens a fresh epoch (clears the memory-check
sentinel, escalation state and task counters) and briefs the agent.
Fail-open: always exits 0.
"""
import os
import sys

# Ensure hooks dir is on sys.path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from memguard.orchestrator import handle_session_start, session_start_main as _main  # noqa: E402, F401

if __name__ == "__main__":
    _main()
