"""State persistence for the hook engine.

Every record lives in its own small file under the project's ``.ai-memory/``
directory and is read once at the start of a hook invocation and written
back whole at the end:

    .last-reminder          EscalationState (JSON)
    .last-memory-check      memory-consultation sentinel (plain timestamp)
    .task-tracker           TaskTracker (JSON)
    .session-start-ts       epoch of the current session (plain timestamp)
    .last-session-summary   when the summary action last completed

Reads never raise: a missing file is the default record, a corrupt one is
the default record plus a warning. Writes go to a temp file and are
``os.replace``d into place so a reader never sees a half-written record.

There is no locking between processes. Pre- and post-checks for overlapping
tool calls may race; the transitions they make are monotonic (a reset only
ever follows a strictly newer knowledge-log mtime), so a lost update costs at
most one extra reminder.

Schema versioning: STATE_VERSION tracks the current record layout. Older
layouts are decoded through explicit legacy branches in the decode_*
functions rather than sniffed at call sites.
"""

import json
import logging
import os
import time
from dataclasses import asdict, dataclass

logger = logging.getLogger(__name__)

STATE_VERSION = 2

ESCALATION_FILE = ".last-reminder"
SENTINEL_FILE = ".last-memory-check"
TASK_TRACKER_FILE = ".task-tracker"
SESSION_START_FILE = ".session-start-ts"
LAST_SUMMARY_FILE = ".last-session-summary"

# v0 and v1 records were written in epoch milliseconds
MS_PER_SECOND = 1000.0


@dataclass
class EscalationState:
    last_reminder_at: float = 0.0
    reminder_count: int = 0
    last_known_save_at: float = 0.0

    def is_escalated(self, threshold):
        return self.reminder_count > threshold

    def to_dict(self):
        return {"version": STATE_VERSION, **asdict(self)}


@dataclass
class TaskTracker:
    tasks_created: int = 0
    tasks_completed: int = 0
    tool_calls_since_summary: int = 0
    completion_notified: bool = False

    def to_dict(self):
        return {"version": STATE_VERSION, **asdict(self)}


def _number(value, default=0.0):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def _count(value):
    value = _number(value, 0)
    return max(0, int(value))


def decode_escalation_state(raw):
    """Decode the text of ``.last-reminder`` into an EscalationState.

    Accepted layouts:
      v2:      {"version": 2, "last_reminder_at", "reminder_count", "last_known_save_at"}
      v1:      {"ts", "reminderCount", "lastSaveTs"}   (no version key)
      v0:      a bare number, the time of the last reminder and nothing else
    v0 and v1 hold epoch milliseconds and are converted to seconds.
    Anything else decodes to the default state.
    """
    if raw is None:
        return EscalationState()
    text = raw.strip()
    if not text:
        return EscalationState()

    if not text.startswith("{"):
        # v0: bare timestamp
        try:
            value = float(text)
        except ValueError:
            logger.warning("Unrecognised escalation state %r, using defaults", text[:40])
            return EscalationState()
        if value != value or value in (float("inf"), float("-inf")):
            return EscalationState()
        return EscalationState(last_reminder_at=value / MS_PER_SECOND, reminder_count=0, last_known_save_at=0.0)

    try:
        data = json.loads(text)
    except ValueError:
        logger.warning("Corrupt escalation state, using defaults")
        return EscalationState()
    if not isinstance(data, dict):
        return EscalationState()

    version = data.get("version")
    if version is None:
        # v1: the original camelCase layout
        return EscalationState(
            last_reminder_at=_number(data.get("ts")) / MS_PER_SECOND,
            reminder_count=_count(data.get("reminderCount")),
            last_known_save_at=_number(data.get("lastSaveTs")) / MS_PER_SECOND,
        )
    if _number(version) > STATE_VERSION:
        logger.warning("Escalation state v%s is newer than v%d, reading known fields", version, STATE_VERSION)
    return EscalationState(
        last_reminder_at=float(_number(data.get("last_reminder_at"))),
        reminder_count=_count(data.get("reminder_count")),
        last_known_save_at=float(_number(data.get("last_known_save_at"))),
    )


def encode_escalation_state(state):
    return json.dumps(state.to_dict())


def decode_task_tracker(raw):
    """Decode ``.task-tracker``. Accepts v2 and the original v1 camelCase layout."""
    if not raw or not raw.strip():
        return TaskTracker()
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Corrupt task tracker, using defaults")
        return TaskTracker()
    if not isinstance(data, dict):
        return TaskTracker()

    if data.get("version") is None:
        tracker = TaskTracker(
            tasks_created=_count(data.get("created")),
            tasks_completed=_count(data.get("completed")),
            tool_calls_since_summary=_count(data.get("toolCallsSinceSummary")),
        )
    else:
        tracker = TaskTracker(
            tasks_created=_count(data.get("tasks_created")),
            tasks_completed=_count(data.get("tasks_completed")),
            tool_calls_since_summary=_count(data.get("tool_calls_since_summary")),
            completion_notified=data.get("completion_notified") is True,
        )
    # Invariant: completed never exceeds created
    tracker.tasks_completed = min(tracker.tasks_completed, tracker.tasks_created)
    return tracker


def decode_timestamp(raw):
    """Decode a plain-text timestamp file. Returns 0.0 for anything unusable."""
    if not raw:
        return 0.0
    try:
        value = float(raw.strip())
    except ValueError:
        return 0.0
    if value != value or value < 0 or value == float("inf"):
        return 0.0
    return value


class StateStore:
    """Typed load/save for the engine's per-project state files."""

    def __init__(self, memory_dir):
        self.memory_dir = memory_dir

    def _path(self, name):
        return os.path.join(self.memory_dir, name)

    def _read(self, name):
        try:
            with open(self._path(name), encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", name, e)
            return None

    def _write(self, name, text):
        """Atomic whole-file overwrite. Failures are logged, never raised."""
        path = self._path(name)
        tmp = f"{path}.tmp.{os.getpid()}"
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp, path)
            return True
        except OSError as e:
            logger.warning("Could not write %s: %s", name, e)
            try:
                os.unlink(tmp)
            except OSError:
                pass
            return False

    def _remove(self, name):
        try:
            os.unlink(self._path(name))
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove %s: %s", name, e)

    # -- escalation ------------------------------------------------------

    def load_escalation(self):
        return decode_escalation_state(self._read(ESCALATION_FILE))

    def save_escalation(self, state):
        return self._write(ESCALATION_FILE, encode_escalation_state(state))

    def clear_escalation(self):
        self._remove(ESCALATION_FILE)

    # -- memory-consultation sentinel -----------------------------------

    def memory_checked_at(self):
        return decode_timestamp(self._read(SENTINEL_FILE))

    def mark_memory_checked(self, now=None):
        return self._write(SENTINEL_FILE, repr(time.time() if now is None else now))

    def clear_memory_check(self):
        self._remove(SENTINEL_FILE)

    # -- task tracker ----------------------------------------------------

    def load_tasks(self):
        return decode_task_tracker(self._read(TASK_TRACKER_FILE))

    def save_tasks(self, tracker):
        return self._write(TASK_TRACKER_FILE, json.dumps(tracker.to_dict()))

    def reset_tasks(self):
        return self.save_tasks(TaskTracker())

    # -- session markers -------------------------------------------------

    def session_started_at(self):
        return decode_timestamp(self._read(SESSION_START_FILE))

    def mark_session_start(self, now=None):
        return self._write(SESSION_START_FILE, repr(time.time() if now is None else now))

    def last_summary_at(self):
        return decode_timestamp(self._read(LAST_SUMMARY_FILE))

    def mark_summary(self, now=None):
        return self._write(LAST_SUMMARY_FILE, repr(time.time() if now is None else now))

    def reset_session(self, now=None):
        """Start a new epoch: clear sentinel and escalation, zero the task tracker."""
        self.clear_memory_check()
        self.clear_escalation()
        self.reset_tasks()
        self.mark_session_start(now)
