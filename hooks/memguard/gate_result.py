"""Gate result object returned by every gate check.

Graduated escalation via the 'escalation' field:
- "block": the agent must stop (PreToolUse: deny the call; PostToolUse:
  decision "block")
- "warn": advisory message only, the agent carries on
- "allow": nothing to say (default when blocked=False and no message)

A PostToolUse hook cannot stop a call that already ran, so "block" there
means "make the agent read this before doing anything else".
"""


class GateResult:
    VALID_ESCALATIONS = ("block", "warn", "allow")

    def __init__(self, blocked=False, message="", gate_name="", severity="info",
                 metadata=None, escalation=None):
        self.blocked = blocked
        self.message = message
        self.gate_name = gate_name
        self.severity = severity  # "info", "warn", "error"
        self.metadata = metadata or {}
        # Infer from blocked/message if not explicit
        if escalation is not None:
            self.escalation = escalation if escalation in self.VALID_ESCALATIONS else "block"
        elif blocked:
            self.escalation = "block"
        else:
            self.escalation = "warn" if message else "allow"

    @classmethod
    def allow(cls, gate_name=""):
        return cls(blocked=False, gate_name=gate_name)

    @classmethod
    def warn(cls, message, gate_name=""):
        return cls(blocked=False, message=message, gate_name=gate_name, severity="warn", escalation="warn")

    @classmethod
    def block(cls, message, gate_name="", metadata=None):
        return cls(blocked=True, message=message, gate_name=gate_name, severity="error",
                   metadata=metadata, escalation="block")

    def to_dict(self):
        """Returns all fields as a dictionary for structured logging."""
        return {
            "blocked": self.blocked,
            "message": self.message,
            "gate_name": self.gate_name,
            "severity": self.severity,
            "metadata": self.metadata,
            "escalation": self.escalation,
        }

    def to_pre_output(self):
        """PreToolUse hook JSON: {} to allow, a deny decision otherwise."""
        if self.escalation == "block":
            return {
                "hookSpecificOutput": {
                    "hookEventName": "PreToolUse",
                    "permissionDecision": "deny",
                    "permissionDecisionReason": self.message,
                }
            }
        return {}

    def to_post_output(self):
        """PostToolUse hook JSON: {}, an advisory systemMessage, or a block."""
        if self.escalation == "block":
            return {"decision": "block", "reason": self.message}
        if self.escalation == "warn" and self.message:
            return {"systemMessage": self.message}
        return {}

    @property
    def is_warning(self):
        """Returns True if this is an advisory warning (not blocking)."""
        return self.escalation == "warn" and not self.blocked

    def __repr__(self):
        status = "BLOCKED" if self.blocked else "PASS"
        if self.escalation == "warn":
            return f"GateResult({status}, {self.gate_name}, escalation=warn)"
        return f"GateResult({status}, {self.gate_name})"
