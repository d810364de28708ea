#!/usr/bin/env python3
"""PreToolUse hook: thin shim, delegates to memguard.orchestrator.

Denies research tool calls while memory is unconsulted or saves are
overdue. Fail-open: always exits 0.

Usage (called by Claude Code hooks):
  echo '{"session_id":"abc","tool_name":"Bash","tool_input":{...},"cwd":"..."}' | python enforcer.py
"""
import os
import sys

# Ensure hooks dir is on sys.path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from memguard.orchestrator import handle_pre_tool_use, pre_tool_use_main as _main  # noqa: E402, F401

if __name__ == "__main__":
    _main()
