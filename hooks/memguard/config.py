"""Tuning constants and per-project overrides for the hook engine.

Defaults live here as named constants. A project may override any of them
in ``.ai-memory/config.json`` under a ``"hooks"`` key:

    {"hooks": {"escalation_threshold": 3, "audit_log": false}}

The file is read once per process and cached (each hook invocation is a
fresh process, so the cache never goes stale in practice).
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace

logger = logging.getLogger(__name__)

MARKER_DIR = ".ai-memory"
CONFIG_FILE = "config.json"

# Deny after this many ignored reminders
ESCALATION_THRESHOLD = 2
# No repeat reminder within this window of the previous one
THROTTLE_SECONDS = 3 * 60
# A memory check stays valid this long
CONSULTATION_TTL_SECONDS = 10 * 60
# Gated calls between forced summary checkpoints
CHECKPOINT_INTERVAL = 20
# Research older than this is reported as stale at session start
STALENESS_DAYS = 7
# Sentinel timestamps further than this into the future are ignored
CLOCK_SKEW_SECONDS = 60
# Audit trail rotates past this size
AUDIT_MAX_BYTES = 1024 * 1024

SESSIONS_DIR_ENV = "AI_MEMORY_SESSIONS_DIR"
LOG_LEVEL_ENV = "AI_MEMORY_LOG_LEVEL"


@dataclass(frozen=True)
class EngineConfig:
    escalation_threshold: int = ESCALATION_THRESHOLD
    throttle_seconds: float = THROTTLE_SECONDS
    consultation_ttl_seconds: float = CONSULTATION_TTL_SECONDS
    checkpoint_interval: int = CHECKPOINT_INTERVAL
    staleness_days: int = STALENESS_DAYS
    clock_skew_seconds: float = CLOCK_SKEW_SECONDS
    clear_consultation_after_immediate_save: bool = True
    audit_log: bool = True
    audit_max_bytes: int = AUDIT_MAX_BYTES

    def with_overrides(self, overrides):
        """Return a copy with valid entries of ``overrides`` applied.

        Unknown keys and values of the wrong type are skipped with a warning.
        """
        if not isinstance(overrides, dict):
            return self
        known = {f.name: f for f in fields(self)}
        accepted = {}
        for key, value in overrides.items():
            field = known.get(key)
            if field is None:
                logger.warning("Ignoring unknown hook setting %r", key)
                continue
            default = getattr(self, key)
            if isinstance(default, bool):
                ok = isinstance(value, bool)
            else:
                ok = isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0
            if not ok:
                logger.warning("Ignoring hook setting %s=%r (expected %s)", key, value, field.type.__name__)
                continue
            accepted[key] = field.type(value)
        return replace(self, **accepted) if accepted else self


_config_cache = {}  # memory_dir -> EngineConfig


def load_config(memory_dir=None):
    """Load the engine config for a project. Cached per-process.

    Missing or malformed config files yield the defaults.
    """
    if memory_dir is None:
        return EngineConfig()
    cached = _config_cache.get(memory_dir)
    if cached is not None:
        return cached
    config = EngineConfig()
    path = os.path.join(memory_dir, CONFIG_FILE)
    try:
        with open(path) as f:
            data = json.load(f)
        if isinstance(data, dict):
            config = config.with_overrides(data.get("hooks", {}))
    except FileNotFoundError:
        pass
    except (OSError, ValueError) as e:
        logger.warning("Unreadable %s, using defaults: %s", path, e)
    _config_cache[memory_dir] = config
    return config


def clear_config_cache():
    _config_cache.clear()


def sessions_dir():
    """Directory holding the per-session project-root registry."""
    override = os.environ.get(SESSIONS_DIR_ENV)
    if override:
        return override
    home = os.environ.get("USERPROFILE") or os.path.expanduser("~") or "/tmp"
    return os.path.join(home, ".ai-memory-sessions")
