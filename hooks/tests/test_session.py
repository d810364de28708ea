"""Tests for memguard/session.py"""
import json
import os
from datetime import datetime, timezone

from harness import T0
from memguard.config import EngineConfig
from memguard.knowledge import RESEARCH_FILE
from memguard.project import registered_root
from memguard.session import briefing, format_summary, start_session, summarize
from memguard.state import EscalationState, TaskTracker


def _iso(ts):
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def test_start_session_opens_new_epoch(project, stores):
    root, _ = project
    store, knowledge = stores
    store.save_escalation(EscalationState(reminder_count=4))
    store.mark_memory_checked(T0 - 5)
    store.save_tasks(TaskTracker(tasks_created=2, tool_calls_since_summary=11))

    message = start_session(root, "sess-1", store, knowledge, EngineConfig(), now=T0)

    assert registered_root("sess-1") == root
    assert store.load_escalation().reminder_count == 0
    assert store.memory_checked_at() == 0.0
    assert store.load_tasks() == TaskTracker()
    assert store.session_started_at() == T0
    assert "save-decision" in message


def test_briefing_counts_fresh_and_stale(stores):
    _, knowledge = stores
    knowledge.add_decision("scope", "No GUI", "CLI only")
    with open(os.path.join(knowledge.memory_dir, RESEARCH_FILE), "w") as f:
        f.write(json.dumps({"topic": "a", "ts": _iso(T0 - 3600)}) + "\n")
        f.write(json.dumps({"topic": "b", "ts": _iso(T0 - 30 * 86400)}) + "\n")
    text = briefing(knowledge, EngineConfig(), T0)
    assert "1 decisions, 1 recent research findings (1 older than 7 days)" in text
    assert "check-memory" in text


def test_briefing_empty_store_skips_consult_line(stores):
    _, knowledge = stores
    text = briefing(knowledge, EngineConfig(), T0)
    assert "0 decisions, 0 recent research findings." in text
    assert "check-memory" not in text.split("Save as you go")[0]


def test_summary_counts_this_session_and_resets(stores):
    store, knowledge = stores
    with open(os.path.join(knowledge.memory_dir, RESEARCH_FILE), "w") as f:
        f.write(json.dumps({"topic": "before", "ts": _iso(T0 - 100)}) + "\n")
    store.mark_session_start(T0)
    knowledge.add_research("after", "x", "saved during the session")
    store.save_tasks(TaskTracker(tasks_created=1, tool_calls_since_summary=12))

    summary = summarize(store, knowledge, now=T0 + 50)

    assert summary.research_saved == 1
    assert summary.total_research == 2
    assert not summary.pending_saves
    assert store.load_tasks() == TaskTracker()
    assert store.last_summary_at() == T0 + 50
    assert "Saved this session: 1 research, 0 decisions" in format_summary(summary)


def test_summary_with_pending_saves_keeps_counters(stores):
    store, knowledge = stores
    knowledge.add_research("old", "x", "y")
    saved_at = os.path.getmtime(os.path.join(knowledge.memory_dir, RESEARCH_FILE))
    store.save_escalation(EscalationState(reminder_count=2, last_known_save_at=saved_at))
    store.save_tasks(TaskTracker(tool_calls_since_summary=12))

    summary = summarize(store, knowledge, now=T0)

    assert summary.pending_saves
    assert store.load_tasks().tool_calls_since_summary == 12
    assert store.last_summary_at() == 0.0
    assert format_summary(summary).startswith("WARNING: PENDING SAVES DETECTED")
