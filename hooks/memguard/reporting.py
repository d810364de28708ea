"""Message text shown to the agent.

Every message names the gate that produced it and the exact commands that
clear the condition, so the agent can act without looking anything up.
"""

SAVE_DECISION_CMD = 'save-decision "<category>" "<decision>" "<rationale>"'
SAVE_RESEARCH_CMD = 'save-research "<topic>" "<tags>" "<finding>" [stable|versioned|volatile]'
CHECK_MEMORY_CMD = 'check-memory "<keywords>"'
SUMMARY_CMD = "session-summary"


def _save_commands():
    return f"- Decision: {SAVE_DECISION_CMD}\n- Research: {SAVE_RESEARCH_CMD}"


def save_advisory(gate_name):
    return (
        f"[{gate_name}] You just ran a research command. If it turned up a decision or a "
        f"finding, save it NOW before continuing:\n{_save_commands()}\n"
        f"- Check first: {CHECK_MEMORY_CMD}"
    )


def save_block(gate_name, reminder_count, throttle_seconds):
    minutes = max(1, int(reminder_count * throttle_seconds / 60))
    return (
        f"[{gate_name}] BLOCKED: ~{minutes}+ minutes of research without saving any findings.\n"
        f"STOP and save your discoveries before continuing:\n{_save_commands()}\n"
        f"After saving, you may continue your task."
    )


def immediate_save_block(gate_name, tool_name):
    return (
        f"[{gate_name}] BLOCKED: {tool_name} results are research. Save what you learned "
        f"before doing anything else:\n{_save_commands()}\n"
        f"Further research tools are denied until a save is recorded."
    )


def escalation_deny(gate_name, reminder_count):
    return (
        f"[{gate_name}] BLOCKED: You have received {reminder_count} save reminders without "
        f"saving any findings.\nYou MUST save your discoveries NOW before using any more "
        f"research tools:\n{_save_commands()}"
    )


def consult_first_deny(gate_name, checked_at, now):
    if checked_at <= 0:
        lead = "Memory has not been checked this session."
    else:
        minutes = int((now - checked_at) / 60)
        lead = f"Memory last checked {minutes} min ago (stale)."
    return (
        f"[{gate_name}] BLOCKED: {lead} Consult memory first; this project already has "
        f"saved decisions and research:\n- {CHECK_MEMORY_CMD}\n"
        f"Then retry. Past findings may already answer this."
    )


def checkpoint_block(gate_name, interval):
    return (
        f"[{gate_name}] {interval} research calls since the last summary. Checkpoint now: "
        f"save anything unsaved, then run:\n- {SUMMARY_CMD}"
    )


def tasks_complete_block(gate_name, tasks_created):
    noun = "task" if tasks_created == 1 else "tasks"
    return (
        f"[{gate_name}] All {tasks_created} {noun} complete. Before reporting back, save any "
        f"decisions or findings from this work:\n{_save_commands()}\n"
        f"- Then: {SUMMARY_CMD}"
    )


def combine(*messages):
    return "\n\n".join(m for m in messages if m)
