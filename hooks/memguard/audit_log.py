"""JSONL audit trail of hook decisions.

Every non-trivial decision (warn, block, deny) is appended to
``.ai-memory/.hook-audit.jsonl`` in the project. Designed to never raise
exceptions so it cannot interfere with enforcement.

When the file grows past ``max_bytes`` it is rotated to ``.1`` (the previous
``.1`` is dropped).
"""

import json
import os
from datetime import datetime, timezone

from memguard.config import AUDIT_MAX_BYTES

AUDIT_FILE = ".hook-audit.jsonl"
DEBUG_LOG_FILE = ".hook-debug.log"
DEBUG_LOG_MAX_LINES = 1000


def _rotate_file(filepath):
    """current -> .1, replacing any older .1"""
    try:
        os.replace(filepath, f"{filepath}.1")
    except OSError:
        pass  # Rotation failure must not break logging


def log_gate_decision(memory_dir, gate_name, tool_name, decision, reason,
                      session_id="", max_bytes=AUDIT_MAX_BYTES, timestamp=None):
    """Append one gate decision record to the project's audit trail.

    Args:
        memory_dir: The project's ``.ai-memory`` directory.
        gate_name: Name of the gate (e.g. "GATE 2: SAVE REMINDER").
        tool_name: The tool being checked (e.g. "Bash", "WebFetch").
        decision: One of "pass", "warn", "block" or "deny".
        reason: Human-readable explanation of the decision.
        session_id: Optional session identifier for correlation.
        max_bytes: Rotate the file once it is larger than this.
        timestamp: Optional POSIX time; defaults to now.
    """
    try:
        filepath = os.path.join(memory_dir, AUDIT_FILE)
        try:
            if os.path.getsize(filepath) > max_bytes:
                _rotate_file(filepath)
        except OSError:
            pass  # No file yet

        if timestamp is None:
            now = datetime.now(timezone.utc)
        else:
            now = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        entry = {
            "timestamp": now.isoformat(),
            "gate": gate_name,
            "tool": tool_name,
            "decision": decision,
            "reason": reason,
            "session_id": session_id,
        }
        with open(filepath, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")
    except Exception:
        pass


def read_decisions(memory_dir, gate_name=None, limit=50):
    """Recent audit records, newest first. Malformed lines are skipped."""
    results = []
    try:
        with open(os.path.join(memory_dir, AUDIT_FILE), encoding="utf-8") as f:
            lines = f.readlines()
    except OSError:
        return results

    for raw in reversed(lines):
        raw = raw.strip()
        if not raw:
            continue
        try:
            entry = json.loads(raw)
        except ValueError:
            continue
        if gate_name and entry.get("gate") != gate_name:
            continue
        results.append(entry)
        if len(results) >= limit:
            break
    return results


def _log_debug(memory_dir, msg):
    """Append a debug line to the hook debug log (opt-in: only if file exists).

    Never crashes. Caps the file at 1000 lines (truncates from the top).
    """
    if not memory_dir:
        return
    path = os.path.join(memory_dir, DEBUG_LOG_FILE)
    try:
        if not os.path.exists(path):
            return  # Opt-in: only write if file exists

        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"[{timestamp}] {msg}\n")

        with open(path, encoding="utf-8") as f:
            lines = f.readlines()
        if len(lines) > DEBUG_LOG_MAX_LINES:
            with open(path, "w", encoding="utf-8") as f:
                f.writelines(lines[-DEBUG_LOG_MAX_LINES:])
    except Exception:
        pass
