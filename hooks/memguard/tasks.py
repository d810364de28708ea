"""Task-completion tracking and the periodic summary checkpoint.

Both run off the same ``.task-tracker`` record. Neither ever denies a tool
call; they surface a one-off blocking message at the moment their condition
is first met.
"""

from dataclasses import replace

from memguard.config import CHECKPOINT_INTERVAL

COMPLETED = "completed"
DELETED = "deleted"


def on_task_created(tracker):
    return replace(tracker, tasks_created=tracker.tasks_created + 1, completion_notified=False)


def on_task_updated(tracker, status):
    """Apply a TaskUpdate. Returns (new_tracker, all_done_now).

    ``all_done_now`` is True only on the update that first makes
    completed >= created > 0; later updates stay quiet until a new task is
    created.
    """
    status = (status or "").strip().lower()
    if status == COMPLETED:
        completed = min(tracker.tasks_created, tracker.tasks_completed + 1)
        tracker = replace(tracker, tasks_completed=completed)
    elif status == DELETED:
        created = max(0, tracker.tasks_created - 1)
        tracker = replace(tracker, tasks_created=created, tasks_completed=min(tracker.tasks_completed, created))
    else:
        return tracker, False

    all_done = tracker.tasks_created > 0 and tracker.tasks_completed >= tracker.tasks_created
    if all_done and not tracker.completion_notified:
        return replace(tracker, completion_notified=True), True
    return tracker, False


def count_gated_call(tracker, interval=CHECKPOINT_INTERVAL):
    """Count one gated call. Returns (new_tracker, checkpoint_due).

    When the count reaches ``interval`` the checkpoint fires and the counter
    starts over.
    """
    calls = tracker.tool_calls_since_summary + 1
    if interval > 0 and calls >= interval:
        return replace(tracker, tool_calls_since_summary=0), True
    return replace(tracker, tool_calls_since_summary=calls), False
