"""Decision engine: one verdict per PreToolUse / PostToolUse call.

The engine owns nothing persistent. It is handed a StateStore and a
KnowledgeStore for one project, builds a GateContext for the call, and runs
the registered gates in order:

    PreToolUse   ungated tool -> allow
                 save/consult/summary command -> allow
                 gate 1 (memory first), gate 2 (save reminder); first block wins

    PostToolUse  task events -> gate 4
                 ungated tool or save/consult/summary command -> no-op
                 gate 3 (checkpoint), then gate 2; messages are joined

A gate that raises is logged and skipped: enforcement fails open.
"""

import importlib
import logging
import re
import time

from memguard.audit_log import _log_debug, log_gate_decision
from memguard.config import EngineConfig
from memguard.context import GateContext
from memguard.gate_registry import POST_GATE_MODULES, PRE_GATE_MODULES
from memguard.gate_result import GateResult
from memguard.intent import classify
from memguard.invocation import ToolKind
from memguard.reporting import combine

logger = logging.getLogger(__name__)

ENGINE_NAME = "memguard"

# The actions that clear a gate must never be gated themselves. Matched only in
# command position (start, or after ; & |), optionally behind an interpreter
# and a path, so `grep -rn check-memory src/` is still research.
SELF_REFERENTIAL = re.compile(
    r"(?:^|[;&|])\s*"
    r"(?:(?:python3?|node|bash|sh|npx)\s+(?:-\S+\s+)*)?"
    r"[\"']?(?:\S*/)?"
    r"(?:save[-_]decision|save[-_]research|check[-_]memory|session[-_]summary)"
    r"(?:\.\w+)?[\"']?(?=\s|$)",
    re.MULTILINE,
)

_loaded_gates = {}  # module name -> module


def _load_gate(module_name):
    mod = _loaded_gates.get(module_name)
    if mod is None:
        mod = importlib.import_module(module_name)
        _loaded_gates[module_name] = mod
    return mod


def is_self_referential(invocation):
    return invocation.kind is ToolKind.SHELL and bool(SELF_REFERENTIAL.search(invocation.command))


class DecisionEngine:
    def __init__(self, store, knowledge, config=None, clock=time.time, classifier=classify,
                 audit=log_gate_decision):
        self.store = store
        self.knowledge = knowledge
        self.config = config or EngineConfig()
        self.clock = clock
        self.classifier = classifier
        self.audit = audit

    def _context(self, invocation):
        return GateContext(
            invocation=invocation,
            intent=self.classifier(invocation),
            store=self.store,
            knowledge=self.knowledge,
            config=self.config,
            now=self.clock(),
        )

    def _run_gate(self, module_name, ctx, event_type):
        try:
            return _load_gate(module_name).check(ctx, event_type=event_type)
        except Exception as e:
            logger.error("%s failed on %s: %s", module_name, ctx.invocation.tool_name, e)
            _log_debug(self.store.memory_dir, f"{module_name} crashed: {type(e).__name__}: {e}")
            return GateResult(blocked=False, gate_name=module_name)

    def _record(self, ctx, result, decision):
        _log_debug(
            self.store.memory_dir,
            f"{decision} {ctx.invocation.tool_name} intent={ctx.intent.value} gate={result.gate_name}",
        )
        if not self.config.audit_log or self.audit is None:
            return
        self.audit(
            self.store.memory_dir,
            result.gate_name,
            ctx.invocation.tool_name,
            decision,
            result.message,
            session_id=ctx.invocation.session_id,
            max_bytes=self.config.audit_max_bytes,
            timestamp=ctx.now,
        )

    def pre_check(self, invocation):
        """Returns a GateResult; blocked means deny the call."""
        if not invocation.is_gated or is_self_referential(invocation):
            return GateResult.allow(ENGINE_NAME)

        ctx = self._context(invocation)
        for module_name in PRE_GATE_MODULES:
            result = self._run_gate(module_name, ctx, "PreToolUse")
            if result.blocked:
                self._record(ctx, result, "deny")
                return result
        return GateResult.allow(ENGINE_NAME)

    def post_check(self, invocation):
        """Returns a GateResult: allow, warn (advisory) or block."""
        watched = invocation.is_gated or invocation.is_task_event
        if not watched or is_self_referential(invocation):
            return GateResult.allow(ENGINE_NAME)

        ctx = self._context(invocation)
        results = []
        for module_name in POST_GATE_MODULES:
            result = self._run_gate(module_name, ctx, "PostToolUse")
            if result.escalation == "allow":
                continue
            self._record(ctx, result, result.escalation)
            results.append(result)

        if not results:
            return GateResult.allow(ENGINE_NAME)
        if len(results) == 1:
            return results[0]
        message = combine(*(r.message for r in results))
        gate_name = ", ".join(r.gate_name for r in results)
        if any(r.blocked for r in results):
            return GateResult.block(message, gate_name=gate_name)
        return GateResult.warn(message, gate_name=gate_name)
