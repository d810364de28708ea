"""Gate 3: SUMMARY CHECKPOINT

Every ``checkpoint_interval`` gated calls (20 by default) the agent is made
to stop and run the session summary, whatever the escalation state. The
counter lives in the task tracker and is reset when the checkpoint fires and
whenever ``session-summary`` completes.

PostToolUse only; never denies.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
from memguard.gate_result import GateResult
from memguard.reporting import checkpoint_block
from memguard.tasks import count_gated_call

GATE_NAME = "GATE 3: SUMMARY CHECKPOINT"


def check(ctx, event_type="PostToolUse"):
    if event_type != "PostToolUse" or not ctx.invocation.is_gated:
        return GateResult(blocked=False, gate_name=GATE_NAME)

    interval = ctx.config.checkpoint_interval
    tracker, due = count_gated_call(ctx.store.load_tasks(), interval)
    ctx.store.save_tasks(tracker)
    if due:
        return GateResult.block(checkpoint_block(GATE_NAME, interval), gate_name=GATE_NAME)
    return GateResult(blocked=False, gate_name=GATE_NAME)
