"""Tests for memguard/tasks.py"""
from memguard.state import TaskTracker
from memguard.tasks import count_gated_call, on_task_created, on_task_updated


def test_create_increments_and_rearms():
    tracker = on_task_created(TaskTracker(tasks_created=1, tasks_completed=1, completion_notified=True))
    assert tracker.tasks_created == 2
    assert tracker.completion_notified is False


def test_completing_last_task_notifies_once():
    tracker = TaskTracker(tasks_created=3, tasks_completed=2)
    tracker, done = on_task_updated(tracker, "completed")
    assert done is True
    assert tracker.tasks_completed == 3
    assert tracker.completion_notified is True

    tracker, done = on_task_updated(tracker, "completed")
    assert done is False
    assert tracker.tasks_completed == 3


def test_partial_completion_is_quiet():
    tracker, done = on_task_updated(TaskTracker(tasks_created=3, tasks_completed=0), "completed")
    assert done is False
    assert tracker.tasks_completed == 1


def test_other_statuses_are_ignored():
    tracker = TaskTracker(tasks_created=2, tasks_completed=1)
    for status in ("in_progress", "pending", "", None):
        new, done = on_task_updated(tracker, status)
        assert new == tracker
        assert done is False


def test_delete_floors_at_zero_and_clamps_completed():
    tracker, done = on_task_updated(TaskTracker(), "deleted")
    assert tracker.tasks_created == 0
    assert done is False

    tracker, _ = on_task_updated(TaskTracker(tasks_created=2, tasks_completed=2, completion_notified=True), "deleted")
    assert tracker.tasks_created == 1
    assert tracker.tasks_completed == 1


def test_deleting_the_only_open_task_completes_the_set():
    tracker, done = on_task_updated(TaskTracker(tasks_created=3, tasks_completed=2), "deleted")
    assert done is True
    assert tracker.tasks_created == 2


def test_checkpoint_fires_at_interval_and_resets():
    tracker = TaskTracker()
    fired = []
    for _ in range(45):
        tracker, due = count_gated_call(tracker, interval=20)
        fired.append(due)
    assert [i + 1 for i, due in enumerate(fired) if due] == [20, 40]
    assert tracker.tool_calls_since_summary == 5


def test_checkpoint_disabled_with_zero_interval():
    tracker, due = count_gated_call(TaskTracker(tool_calls_since_summary=100), interval=0)
    assert due is False
    assert tracker.tool_calls_since_summary == 101
