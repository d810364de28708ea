"""Canonical gate module registry, one list per hook event.

PreToolUse stops at the first block. PostToolUse runs every gate and joins
their messages in list order.
"""

PRE_GATE_MODULES = [
    "gates.gate_01_memory_first",
    "gates.gate_02_save_reminder",
]

POST_GATE_MODULES = [
    "gates.gate_04_task_completion",
    "gates.gate_03_checkpoint",
    "gates.gate_02_save_reminder",  # Last: its message follows a checkpoint block
]
