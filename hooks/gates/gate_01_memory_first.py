"""Gate 1: MEMORY FIRST

Denies research tool calls until the project's memory has been consulted
within the last 10 minutes. Only applies once the project has saved at least
one decision or finding: an empty store has nothing to consult.

Consulting means running ``check-memory``, which writes the
``.last-memory-check`` sentinel. The sentinel is wiped at session start, so
every session begins with one fresh consultation.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
from memguard.gate_result import GateResult
from memguard.intent import Intent
from memguard.reporting import consult_first_deny

GATE_NAME = "GATE 1: MEMORY FIRST"


def requires_consultation(ctx):
    return ctx.intent is Intent.EXPLORATORY and not ctx.knowledge.is_empty()


def last_consulted_at(ctx):
    """Sentinel time, or 0.0 if absent or too far in the future."""
    checked_at = ctx.store.memory_checked_at()
    # Clamp future timestamps (clock skew / hand-edited sentinel)
    if checked_at > ctx.now + ctx.config.clock_skew_seconds:
        return 0.0
    return checked_at


def was_consulted_recently(ctx):
    checked_at = last_consulted_at(ctx)
    return checked_at > 0 and ctx.now - checked_at <= ctx.config.consultation_ttl_seconds


def check(ctx, event_type="PreToolUse"):
    if event_type != "PreToolUse":
        return GateResult(blocked=False, gate_name=GATE_NAME)

    if not ctx.invocation.is_gated or not requires_consultation(ctx):
        return GateResult(blocked=False, gate_name=GATE_NAME)

    if was_consulted_recently(ctx):
        return GateResult(blocked=False, gate_name=GATE_NAME)

    msg = consult_first_deny(GATE_NAME, last_consulted_at(ctx), ctx.now)
    return GateResult(blocked=True, message=msg, gate_name=GATE_NAME)
