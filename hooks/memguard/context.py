"""Everything a gate needs to judge one tool call."""

from dataclasses import dataclass, field

from memguard.config import EngineConfig
from memguard.intent import Intent


@dataclass
class GateContext:
    invocation: object
    intent: Intent
    store: object
    knowledge: object
    config: EngineConfig
    now: float
    _latest_save_at: float = field(default=None, repr=False)

    @property
    def latest_save_at(self):
        """Knowledge-log mtime, read at most once per hook invocation."""
        if self._latest_save_at is None:
            self._latest_save_at = self.knowledge.last_saved_at()
        return self._latest_save_at
