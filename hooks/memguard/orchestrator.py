"""Hook entry points: stdin payload in, one JSON object out, exit 0.

Each ``handle_*`` function takes the decoded payload and returns the dict to
print; the ``*_main`` wrappers add the stdin/stdout plumbing and the
fail-open guard.
"""

import logging
import os
import sys
import time

from memguard.config import load_config
from memguard.engine import DecisionEngine
from memguard.hook_io import configure_logging, emit, read_payload
from memguard.invocation import ToolInvocation
from memguard.knowledge import KnowledgeStore
from memguard.project import memory_dir_for, resolve_project_root, unregister_session
from memguard.session import start_session
from memguard.state import StateStore

logger = logging.getLogger(__name__)


def _session_id(payload):
    value = payload.get("session_id", payload.get("sessionId", ""))
    return value if isinstance(value, str) else ""


def _cwd(payload):
    value = payload.get("cwd")
    return value if isinstance(value, str) and value else os.getcwd()


def build_engine(invocation, clock=time.time):
    """Engine for the project the call belongs to, or None outside any project."""
    root = resolve_project_root(invocation.cwd or os.getcwd(), invocation.session_id)
    if root is None:
        return None
    memory_dir = memory_dir_for(root)
    return DecisionEngine(
        StateStore(memory_dir),
        KnowledgeStore(memory_dir),
        load_config(memory_dir),
        clock=clock,
    )


def handle_pre_tool_use(payload, clock=time.time):
    invocation = ToolInvocation.from_payload(payload)
    if not invocation.is_gated:
        return {}
    engine = build_engine(invocation, clock)
    if engine is None:
        return {}
    return engine.pre_check(invocation).to_pre_output()


def handle_post_tool_use(payload, clock=time.time):
    invocation = ToolInvocation.from_payload(payload)
    if not (invocation.is_gated or invocation.is_task_event):
        return {}
    engine = build_engine(invocation, clock)
    if engine is None:
        return {}
    return engine.post_check(invocation).to_post_output()


def handle_session_start(payload, clock=time.time):
    session_id = _session_id(payload)
    root = resolve_project_root(_cwd(payload), session_id, scan_home=True)
    if root is None:
        return {}
    memory_dir = memory_dir_for(root)
    message = start_session(
        root,
        session_id,
        StateStore(memory_dir),
        KnowledgeStore(memory_dir),
        load_config(memory_dir),
        now=clock(),
    )
    return {"systemMessage": message}


def handle_session_stop(payload):
    session_id = _session_id(payload)
    if session_id:
        unregister_session(session_id)
    return {}


def _run(handler, label):
    """Fail-open wrapper: always prints a JSON object and exits 0."""
    configure_logging()
    output = {}
    try:
        output = handler(read_payload())
    except Exception as e:
        # FAIL-OPEN: hook crashes must never block work
        logger.error("[%s] hook error (non-blocking): %s", label, e)
    finally:
        try:
            emit(output)
        finally:
            sys.exit(0)


def pre_tool_use_main():
    _run(handle_pre_tool_use, "PreToolUse")


def post_tool_use_main():
    _run(handle_post_tool_use, "PostToolUse")


def session_start_main():
    _run(handle_session_start, "SessionStart")


def session_stop_main():
    _run(handle_session_stop, "SessionEnd")
