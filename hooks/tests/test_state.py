"""Tests for memguard/state.py"""
import json
import os

from memguard.state import (
    ESCALATION_FILE,
    SENTINEL_FILE,
    STATE_VERSION,
    TASK_TRACKER_FILE,
    EscalationState,
    StateStore,
    TaskTracker,
    decode_escalation_state,
    decode_task_tracker,
    decode_timestamp,
    encode_escalation_state,
)


# ---------------------------------------------------------------------------
# Escalation state decoding
# ---------------------------------------------------------------------------

def test_escalation_state_round_trips():
    state = EscalationState(last_reminder_at=1700000000.5, reminder_count=3, last_known_save_at=1699999000.0)
    assert decode_escalation_state(encode_escalation_state(state)) == state


def test_encoded_state_carries_version():
    data = json.loads(encode_escalation_state(EscalationState()))
    assert data["version"] == STATE_VERSION
    assert set(data) == {"version", "last_reminder_at", "reminder_count", "last_known_save_at"}


def test_legacy_bare_timestamp_is_milliseconds():
    state = decode_escalation_state("1700000000500\n")
    assert state == EscalationState(last_reminder_at=1700000000.5, reminder_count=0, last_known_save_at=0.0)


def test_legacy_camel_case_object_is_milliseconds():
    raw = json.dumps({"ts": 1700000000000, "reminderCount": 4, "lastSaveTs": 1699999999000})
    state = decode_escalation_state(raw)
    assert state.reminder_count == 4
    assert state.last_reminder_at == 1700000000.0
    assert state.last_known_save_at == 1699999999.0


def test_garbage_decodes_to_default():
    for raw in (None, "", "   ", "{not json", "[1, 2]", "hello", "nan", '{"version": 2, "reminder_count": "lots"}'):
        state = decode_escalation_state(raw)
        assert state.reminder_count == 0, raw
        assert state.last_known_save_at == 0.0, raw


def test_negative_and_bool_counts_are_clamped():
    assert decode_escalation_state('{"version": 2, "reminder_count": -5}').reminder_count == 0
    assert decode_escalation_state('{"version": 2, "reminder_count": true}').reminder_count == 0


def test_newer_version_reads_known_fields():
    raw = json.dumps({"version": 9, "reminder_count": 2, "last_reminder_at": 5.0, "extra": 1})
    state = decode_escalation_state(raw)
    assert state.reminder_count == 2
    assert state.last_reminder_at == 5.0


def test_non_numeric_version_does_not_raise():
    assert decode_escalation_state('{"version": "two", "reminder_count": 1}').reminder_count == 1


def test_is_escalated_is_strictly_greater():
    assert not EscalationState(reminder_count=2).is_escalated(2)
    assert EscalationState(reminder_count=3).is_escalated(2)


# ---------------------------------------------------------------------------
# Task tracker decoding
# ---------------------------------------------------------------------------

def test_task_tracker_legacy_keys():
    tracker = decode_task_tracker(json.dumps({"created": 3, "completed": 1, "toolCallsSinceSummary": 7}))
    assert tracker == TaskTracker(tasks_created=3, tasks_completed=1, tool_calls_since_summary=7)


def test_task_tracker_clamps_completed():
    tracker = decode_task_tracker(json.dumps({"version": 2, "tasks_created": 1, "tasks_completed": 5}))
    assert tracker.tasks_completed == 1


def test_task_tracker_corrupt_is_default():
    assert decode_task_tracker("{{{") == TaskTracker()
    assert decode_task_tracker('"just a string"') == TaskTracker()


def test_decode_timestamp():
    assert decode_timestamp("1700000000.25") == 1700000000.25
    assert decode_timestamp("") == 0.0
    assert decode_timestamp("soon") == 0.0
    assert decode_timestamp("-5") == 0.0
    assert decode_timestamp("inf") == 0.0


# ---------------------------------------------------------------------------
# StateStore
# ---------------------------------------------------------------------------

def test_store_missing_files_are_defaults(stores):
    store, _ = stores
    assert store.load_escalation() == EscalationState()
    assert store.load_tasks() == TaskTracker()
    assert store.memory_checked_at() == 0.0
    assert store.session_started_at() == 0.0


def test_store_escalation_round_trip(stores):
    store, _ = stores
    state = EscalationState(last_reminder_at=10.0, reminder_count=2, last_known_save_at=5.0)
    assert store.save_escalation(state)
    assert store.load_escalation() == state
    # no temp files left behind
    assert [n for n in os.listdir(store.memory_dir) if ".tmp." in n] == []


def test_store_corrupt_escalation_file(stores):
    store, _ = stores
    with open(os.path.join(store.memory_dir, ESCALATION_FILE), "w") as f:
        f.write("\x00\x01garbage")
    assert store.load_escalation() == EscalationState()


def test_store_sentinel(stores):
    store, _ = stores
    store.mark_memory_checked(1234.5)
    assert store.memory_checked_at() == 1234.5
    store.clear_memory_check()
    assert store.memory_checked_at() == 0.0
    store.clear_memory_check()  # already gone


def test_store_write_failure_is_swallowed(tmp_path):
    store = StateStore(str(tmp_path / "does-not-exist"))
    assert store.save_escalation(EscalationState(reminder_count=1)) is False
    assert store.load_escalation() == EscalationState()


def test_reset_session(stores):
    store, _ = stores
    store.save_escalation(EscalationState(reminder_count=5))
    store.mark_memory_checked(100.0)
    store.save_tasks(TaskTracker(tasks_created=2, tasks_completed=1, tool_calls_since_summary=9))

    store.reset_session(now=2000.0)

    assert not os.path.exists(os.path.join(store.memory_dir, ESCALATION_FILE))
    assert not os.path.exists(os.path.join(store.memory_dir, SENTINEL_FILE))
    assert os.path.exists(os.path.join(store.memory_dir, TASK_TRACKER_FILE))
    assert store.load_tasks() == TaskTracker()
    assert store.session_started_at() == 2000.0
