"""Gate 4: TASK COMPLETION

Follows TaskCreate / TaskUpdate calls. The moment every created task is
completed, the agent is told (once) to save what it learned and summarize.
A new TaskCreate re-arms the notice.

PostToolUse only; never denies.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
from memguard.gate_result import GateResult
from memguard.invocation import ToolKind
from memguard.reporting import tasks_complete_block
from memguard.tasks import on_task_created, on_task_updated

GATE_NAME = "GATE 4: TASK COMPLETION"


def check(ctx, event_type="PostToolUse"):
    invocation = ctx.invocation
    if event_type != "PostToolUse" or not invocation.is_task_event:
        return GateResult(blocked=False, gate_name=GATE_NAME)

    tracker = ctx.store.load_tasks()
    if invocation.kind is ToolKind.TASK_CREATE:
        ctx.store.save_tasks(on_task_created(tracker))
        return GateResult(blocked=False, gate_name=GATE_NAME)

    new_tracker, all_done = on_task_updated(tracker, invocation.status)
    if new_tracker != tracker:
        ctx.store.save_tasks(new_tracker)
    if all_done:
        msg = tasks_complete_block(GATE_NAME, new_tracker.tasks_created)
        return GateResult.block(msg, gate_name=GATE_NAME)
    return GateResult(blocked=False, gate_name=GATE_NAME)
