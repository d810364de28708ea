"""Hook payload -> ToolInvocation.

The host sends one JSON object per hook call. Claude Code uses snake_case
keys (``tool_name``, ``tool_input``, ``session_id``); camelCase spellings are
accepted too. Anything missing or of the wrong type becomes an empty value,
so a malformed payload turns into an invocation no gate cares about.
"""

from dataclasses import dataclass
from enum import Enum


class ToolKind(Enum):
    SHELL = "Shell"
    WEB_FETCH = "WebFetch"
    WEB_SEARCH = "WebSearch"
    DELEGATE = "Delegate"
    TASK_CREATE = "TaskCreate"
    TASK_UPDATE = "TaskUpdate"
    OTHER = "other"


# Host tool names -> kinds
TOOL_KINDS = {
    "Bash": ToolKind.SHELL,
    "WebFetch": ToolKind.WEB_FETCH,
    "WebSearch": ToolKind.WEB_SEARCH,
    "Task": ToolKind.DELEGATE,
    "Agent": ToolKind.DELEGATE,
    "TaskCreate": ToolKind.TASK_CREATE,
    "TaskUpdate": ToolKind.TASK_UPDATE,
}

# Kinds subject to the consultation / escalation policy
GATED_KINDS = frozenset({ToolKind.SHELL, ToolKind.WEB_FETCH, ToolKind.WEB_SEARCH, ToolKind.DELEGATE})

# Gated kinds whose output must be saved right away rather than after a few reminders
IMMEDIATE_SAVE_KINDS = frozenset({ToolKind.WEB_FETCH, ToolKind.WEB_SEARCH, ToolKind.DELEGATE})

TASK_KINDS = frozenset({ToolKind.TASK_CREATE, ToolKind.TASK_UPDATE})

# The host launches this agent when a delegation names none
DEFAULT_SUBAGENT = "general-purpose"


def _text(value):
    return value if isinstance(value, str) else ""


def _first(mapping, *keys):
    for key in keys:
        if key in mapping:
            return mapping[key]
    return None


@dataclass(frozen=True)
class ToolInvocation:
    tool_name: str = ""
    command: str = ""
    description: str = ""
    subagent_kind: str = ""
    status: str = ""
    cwd: str = ""
    session_id: str = ""

    @property
    def kind(self):
        return TOOL_KINDS.get(self.tool_name, ToolKind.OTHER)

    @property
    def is_gated(self):
        return self.kind in GATED_KINDS

    @property
    def is_immediate_save(self):
        return self.kind in IMMEDIATE_SAVE_KINDS

    @property
    def is_task_event(self):
        return self.kind in TASK_KINDS

    @classmethod
    def from_payload(cls, data):
        if not isinstance(data, dict):
            return cls()
        tool_input = _first(data, "tool_input", "toolInput")
        if not isinstance(tool_input, dict):
            tool_input = {}
        tool_name = _text(_first(data, "tool_name", "toolName"))
        subagent = _text(_first(tool_input, "subagent_type", "subagentType"))
        if not subagent and TOOL_KINDS.get(tool_name) is ToolKind.DELEGATE:
            subagent = DEFAULT_SUBAGENT
        return cls(
            tool_name=tool_name,
            command=_text(tool_input.get("command")),
            description=_text(tool_input.get("description")),
            subagent_kind=subagent,
            status=_text(tool_input.get("status")),
            cwd=_text(data.get("cwd")),
            session_id=_text(_first(data, "session_id", "sessionId")),
        )
