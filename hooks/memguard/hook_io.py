"""stdin/stdout plumbing shared by the hook entry points.

stdout carries exactly one JSON object; anything diagnostic goes to stderr.
"""

import json
import logging
import os
import sys

from memguard.config import LOG_LEVEL_ENV


def configure_logging(stream=None):
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        stream=stream or sys.stderr,
        level=level,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )


def read_payload(stream=None):
    """Parse the hook payload. Empty or invalid input yields {}."""
    stream = stream or sys.stdin
    try:
        raw = stream.read()
    except (OSError, ValueError):
        return {}
    if not raw or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def emit(output, stream=None):
    stream = stream or sys.stdout
    stream.write(json.dumps(output or {}))
    stream.flush()
