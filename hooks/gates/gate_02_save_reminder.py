"""Gate 2: SAVE REMINDER

Research produces knowledge; this gate makes sure it gets saved.

PostToolUse: after an exploratory shell command, nudge the agent to save
(at most once per throttle window). Once more than ``escalation_threshold``
nudges have gone unanswered the nudge becomes a block. Web fetch/search and
research delegations skip the nudges and block straight away.

PreToolUse: while escalated and nothing has been saved since, deny further
research calls.

Saving anything to decisions.jsonl or research.jsonl resets the count.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
from memguard.escalation import EscalationTracker, Verdict
from memguard.gate_result import GateResult
from memguard.intent import Intent
from memguard.invocation import ToolKind
from memguard.reporting import escalation_deny, immediate_save_block, save_advisory, save_block

GATE_NAME = "GATE 2: SAVE REMINDER"


def _tracker(ctx):
    return EscalationTracker(ctx.config.escalation_threshold, ctx.config.throttle_seconds)


def check(ctx, event_type="PreToolUse"):
    invocation = ctx.invocation
    if not invocation.is_gated:
        return GateResult(blocked=False, gate_name=GATE_NAME)
    if event_type == "PreToolUse":
        # Routine shell work is never held up by pending reminders
        if ctx.intent is Intent.OPERATIONAL and invocation.kind is ToolKind.SHELL:
            return GateResult(blocked=False, gate_name=GATE_NAME)
        return _check_pre(ctx)
    if ctx.intent is Intent.OPERATIONAL and invocation.kind is ToolKind.SHELL:
        return GateResult(blocked=False, gate_name=GATE_NAME)
    return _track_post(ctx)


def _check_pre(ctx):
    state = ctx.store.load_escalation()
    verdict, new_state = _tracker(ctx).evaluate_pre(state, ctx.latest_save_at)
    if new_state != state:
        # A save landed since the last reminder: persist the reset
        ctx.store.save_escalation(new_state)
    if verdict is Verdict.DENY:
        msg = escalation_deny(GATE_NAME, new_state.reminder_count)
        return GateResult(blocked=True, message=msg, gate_name=GATE_NAME,
                          metadata={"reminder_count": new_state.reminder_count})
    return GateResult(blocked=False, gate_name=GATE_NAME)


def _track_post(ctx):
    invocation = ctx.invocation
    immediate = invocation.is_immediate_save
    state = ctx.store.load_escalation()
    verdict, new_state = _tracker(ctx).evaluate_post(state, ctx.now, ctx.latest_save_at, immediate=immediate)
    if new_state != state:
        ctx.store.save_escalation(new_state)

    if immediate and ctx.config.clear_consultation_after_immediate_save:
        ctx.store.clear_memory_check()

    metadata = {"reminder_count": new_state.reminder_count}
    if verdict is Verdict.ADVISE:
        return GateResult(blocked=False, message=save_advisory(GATE_NAME), gate_name=GATE_NAME,
                          severity="warn", metadata=metadata, escalation="warn")
    if verdict is Verdict.BLOCK:
        if immediate:
            msg = immediate_save_block(GATE_NAME, invocation.tool_name)
        else:
            msg = save_block(GATE_NAME, new_state.reminder_count, ctx.config.throttle_seconds)
        return GateResult.block(msg, gate_name=GATE_NAME, metadata=metadata)
    return GateResult(blocked=False, gate_name=GATE_NAME)
