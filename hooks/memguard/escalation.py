"""Escalation tracker: advisory reminders that harden into denials.

Three states keyed on ``reminder_count`` against ``threshold``:

    Calm        count <= threshold   pre: allow    post: advise (throttled)
    Escalated   count >  threshold   pre: deny     post: block
    Reset       newer save observed  count -> 0, back to Calm

A reset is the only way out of Escalated and is only ever triggered by a
knowledge-log mtime strictly newer than ``last_known_save_at``, so
re-evaluating against the same save timestamp is a no-op. That monotonicity
is what lets independent pre/post processes share one state file without
locking.

Immediate-save kinds skip Calm: their first post-check sets the count to
``threshold + 1`` straight away.

All functions here are pure: they take a state and return a new one.
"""

from dataclasses import replace
from enum import Enum

from memguard.config import ESCALATION_THRESHOLD, THROTTLE_SECONDS


class Verdict(Enum):
    ALLOW = "allow"
    ADVISE = "advise"
    BLOCK = "block"
    DENY = "deny"


class Phase(Enum):
    PRE = "PreToolUse"
    POST = "PostToolUse"


class EscalationTracker:
    def __init__(self, threshold=ESCALATION_THRESHOLD, throttle_seconds=THROTTLE_SECONDS):
        self.threshold = threshold
        self.throttle_seconds = throttle_seconds

    def observe_save(self, state, latest_save_at):
        """Apply the reset transition if a strictly newer save is visible."""
        if latest_save_at > state.last_known_save_at:
            return replace(state, reminder_count=0, last_known_save_at=latest_save_at)
        return state

    def is_escalated(self, state):
        return state.is_escalated(self.threshold)

    def is_throttled(self, state, now):
        elapsed = now - state.last_reminder_at
        # A reminder "from the future" (clock change) never throttles
        if elapsed < 0:
            return False
        return elapsed < self.throttle_seconds

    def evaluate_pre(self, state, latest_save_at):
        """Pre-check: deny while escalated and nothing has been saved since."""
        state = self.observe_save(state, latest_save_at)
        if self.is_escalated(state):
            return Verdict.DENY, state
        return Verdict.ALLOW, state

    def evaluate_post(self, state, now, latest_save_at, immediate=False):
        """Post-check transition. Returns (verdict, new_state).

        Gradual kinds: throttled no-op, else count += 1 and ADVISE while the
        new count is within the threshold, BLOCK once past it.
        Immediate kinds: force Escalated and BLOCK, no throttle.
        """
        state = self.observe_save(state, latest_save_at)
        if immediate:
            state = replace(
                state,
                reminder_count=max(state.reminder_count, self.threshold + 1),
                last_reminder_at=now,
            )
            return Verdict.BLOCK, state

        if self.is_throttled(state, now):
            return Verdict.ALLOW, state

        state = replace(state, reminder_count=state.reminder_count + 1, last_reminder_at=now)
        if self.is_escalated(state):
            return Verdict.BLOCK, state
        return Verdict.ADVISE, state

    def evaluate(self, state, now, latest_save_at, phase=Phase.POST, immediate=False):
        """Single entry point: ``(state, now, latest_save_at) -> (verdict, new_state)``."""
        if phase is Phase.PRE:
            return self.evaluate_pre(state, latest_save_at)
        return self.evaluate_post(state, now, latest_save_at, immediate=immediate)
