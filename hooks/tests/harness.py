"""Shared helpers for the memguard test suite.

Provides project builders, a controllable clock, payload builders and
run_hook(), which drives the real hook scripts through stdin/stdout.
"""

import json
import os
import subprocess
import sys

# Add hooks dir to path so gate/memguard imports work
HOOKS_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if HOOKS_DIR not in sys.path:
    sys.path.insert(0, HOOKS_DIR)

from memguard.knowledge import DECISIONS_FILE, RESEARCH_FILE

MAIN_SESSION = "test-main"

# A fixed "now" well away from zero so elapsed-time arithmetic is obvious
T0 = 1_700_000_000.0


class FakeClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
        return self.now


def make_project(base, name="proj"):
    """Create ``base/name/.ai-memory`` and return (root, memory_dir) as str."""
    root = os.path.join(str(base), name)
    memory_dir = os.path.join(root, ".ai-memory")
    os.makedirs(memory_dir, exist_ok=True)
    return root, memory_dir


def seed_knowledge(memory_dir, mtime=None, research=None, decisions=None):
    """Write one research and/or decision line and optionally pin the mtimes."""
    research = research if research is not None else [
        {"id": "r1", "ts": "2023-11-14T00:00:00+00:00", "topic": "retry policy",
         "tags": ["http", "retry"], "finding": "Backoff caps at 30s", "staleness": "stable"},
    ]
    decisions = decisions if decisions is not None else []
    for name, entries in ((RESEARCH_FILE, research), (DECISIONS_FILE, decisions)):
        if not entries:
            continue
        path = os.path.join(memory_dir, name)
        with open(path, "a") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")
        if mtime is not None:
            os.utime(path, (mtime, mtime))


def touch_save(memory_dir, mtime):
    """Simulate a save: bump research.jsonl's mtime to ``mtime``."""
    path = os.path.join(memory_dir, RESEARCH_FILE)
    with open(path, "a") as f:
        f.write(json.dumps({"id": "saved", "ts": "2023-11-15T00:00:00+00:00", "topic": "saved",
                            "tags": [], "finding": "x"}) + "\n")
    os.utime(path, (mtime, mtime))


def bash(command, description="", cwd="", session_id=MAIN_SESSION):
    tool_input = {"command": command}
    if description:
        tool_input["description"] = description
    return {"session_id": session_id, "tool_name": "Bash", "tool_input": tool_input, "cwd": cwd}


def tool(tool_name, cwd="", session_id=MAIN_SESSION, **tool_input):
    return {"session_id": session_id, "tool_name": tool_name, "tool_input": tool_input, "cwd": cwd}


def run_hook(script, payload, env=None, cwd=None):
    """Run a hook script as Claude Code would. Returns (returncode, output_dict, stderr)."""
    data = payload if isinstance(payload, str) else json.dumps(payload)
    result = subprocess.run(
        [sys.executable, os.path.join(HOOKS_DIR, script)],
        input=data, capture_output=True, text=True, timeout=10,
        env=env, cwd=cwd,
    )
    try:
        output = json.loads(result.stdout) if result.stdout.strip() else None
    except ValueError:
        output = None
    return result.returncode, output, result.stderr.strip()
