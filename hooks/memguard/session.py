"""Session lifecycle: the SessionStart briefing and the end-of-session summary."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from memguard.project import register_session
from memguard.reporting import CHECK_MEMORY_CMD, SAVE_DECISION_CMD, SAVE_RESEARCH_CMD, SUMMARY_CMD

logger = logging.getLogger(__name__)


def start_session(root, session_id, store, knowledge, config, now=None):
    """Open a new session epoch for ``root`` and return the briefing text."""
    now = time.time() if now is None else now
    if session_id:
        register_session(session_id, root)
    store.reset_session(now)
    return briefing(knowledge, config, now)


def briefing(knowledge, config, now):
    decisions = knowledge.decisions()
    fresh, stale = knowledge.split_by_staleness(config.staleness_days, now)
    lines = [
        f"[memguard] Project memory: {len(decisions)} decisions, "
        f"{len(fresh)} recent research findings"
        + (f" ({len(stale)} older than {config.staleness_days} days)" if stale else "")
        + ".",
    ]
    if decisions or fresh or stale:
        lines.append(f"Consult it before researching anything: {CHECK_MEMORY_CMD}")
    lines.extend([
        "Save as you go:",
        f"- Decision: {SAVE_DECISION_CMD}",
        f"- Research: {SAVE_RESEARCH_CMD}",
        f"Before ending the session run: {SUMMARY_CMD}",
    ])
    return "\n".join(lines)


@dataclass
class SessionSummary:
    decisions_saved: int
    research_saved: int
    total_decisions: int
    total_research: int
    pending_saves: bool


def _iso(ts):
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def summarize(store, knowledge, now=None):
    """Count this session's saves and close the checkpoint window.

    The task tracker is reset and ``.last-session-summary`` written only when
    nothing is pending; otherwise the agent is expected to save and re-run.
    """
    now = time.time() if now is None else now
    since = _iso(store.session_started_at())
    decisions = knowledge.decisions()
    research = knowledge.research()

    state = store.load_escalation()
    pending = state.reminder_count > 0 and knowledge.last_saved_at() <= state.last_known_save_at

    summary = SessionSummary(
        decisions_saved=sum(1 for d in decisions if str(d.get("ts") or "") > since),
        research_saved=sum(1 for r in research if str(r.get("ts") or "") > since),
        total_decisions=len(decisions),
        total_research=len(research),
        pending_saves=pending,
    )
    if not pending:
        store.reset_tasks()
        store.mark_summary(now)
    return summary


def format_summary(summary):
    lines = []
    if summary.pending_saves:
        lines.extend([
            "WARNING: PENDING SAVES DETECTED",
            "Research happened since the last save. Save findings first, then re-run:",
            f"- Decision: {SAVE_DECISION_CMD}",
            f"- Research: {SAVE_RESEARCH_CMD}",
            "",
        ])
    lines.extend([
        "Session Summary",
        f"  Saved this session: {summary.research_saved} research, {summary.decisions_saved} decisions",
        f"  Total memory:       {summary.total_research} research, {summary.total_decisions} decisions",
    ])
    return "\n".join(lines)
