#!/usr/bin/env python3
"""SessionEnd hook: drops this session's project-root registry entry.

Fail-open: always exits 0.
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from memguard.orchestrator import handle_session_stop, session_stop_main as _main  # noqa: E402, F401

if __name__ == "__main__":
    _main()
