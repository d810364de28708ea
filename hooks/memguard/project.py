"""Project-root resolution and the per-session root registry.

A project is any directory holding a ``.ai-memory/`` marker. Hooks walk up
from the ``cwd`` the host passes in. Some hosts hand hook subprocesses a
useless ``cwd`` (a system directory on Windows), so SessionStart (which does
get the right one) records the resolved root per ``session_id`` and later
hooks fall back to that record.
"""

import logging
import os

from memguard.config import MARKER_DIR, sessions_dir
from memguard.errors import ProjectRootNotFound

logger = logging.getLogger(__name__)


def memory_dir_for(project_root):
    return os.path.join(project_root, MARKER_DIR)


def find_project_root(start_dir):
    """Walk up from ``start_dir`` to the first directory containing the marker.

    Returns None when ``start_dir`` is empty, not a directory, or no ancestor
    carries the marker.
    """
    if not start_dir:
        return None
    try:
        current = os.path.abspath(start_dir)
    except (TypeError, ValueError):
        return None
    if not os.path.isdir(current):
        return None
    while True:
        if os.path.isdir(os.path.join(current, MARKER_DIR)):
            return current
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def require_project_root(start_dir):
    """Like find_project_root but raises ProjectRootNotFound."""
    root = find_project_root(start_dir)
    if root is None:
        raise ProjectRootNotFound(start_dir)
    return root


def _safe_session_id(session_id):
    safe_id = "".join(c for c in str(session_id) if c.isalnum() or c in "-_")
    return safe_id or None


def _registry_path(session_id):
    safe_id = _safe_session_id(session_id)
    if safe_id is None:
        return None
    return os.path.join(sessions_dir(), safe_id)


def register_session(session_id, project_root):
    """Record ``project_root`` for ``session_id``. Best-effort."""
    path = _registry_path(session_id)
    if path is None or not project_root:
        return
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(project_root)
    except OSError as e:
        logger.warning("Could not register session %s: %s", session_id, e)


def registered_root(session_id):
    """Return the registered root for ``session_id`` if it still has a marker."""
    path = _registry_path(session_id)
    if path is None:
        return None
    try:
        with open(path, encoding="utf-8") as f:
            saved = f.read().strip()
    except OSError:
        return None
    if saved and os.path.isdir(os.path.join(saved, MARKER_DIR)):
        return saved
    return None


def unregister_session(session_id):
    path = _registry_path(session_id)
    if path is None:
        return
    try:
        os.unlink(path)
    except OSError:
        pass  # Already gone or never registered


def scan_home_for_projects(home=None):
    """Look for a marker in ``home`` and its immediate, non-hidden children.

    With several candidates, the one whose marker directory was modified most
    recently wins.
    """
    home = home or os.environ.get("USERPROFILE") or os.environ.get("HOME")
    if not home:
        return None
    candidates = []
    if os.path.isdir(os.path.join(home, MARKER_DIR)):
        candidates.append(home)
    try:
        with os.scandir(home) as entries:
            for entry in entries:
                if entry.name.startswith(".") or not entry.is_dir():
                    continue
                if os.path.isdir(os.path.join(entry.path, MARKER_DIR)):
                    candidates.append(entry.path)
    except OSError:
        pass
    if not candidates:
        return None

    def _marker_mtime(root):
        try:
            return os.path.getmtime(os.path.join(root, MARKER_DIR))
        except OSError:
            return 0.0

    return max(candidates, key=_marker_mtime)


def resolve_project_root(cwd, session_id=None, scan_home=False):
    """Resolve the project root for a hook invocation.

    Order: walk up from ``cwd``; the session registry; optionally a scan of
    the home directory (SessionStart only). Returns None if all fail.
    """
    root = find_project_root(cwd)
    if root is None and session_id:
        root = registered_root(session_id)
        if root is not None:
            logger.debug("Resolved %s via session registry", root)
    if root is None and scan_home:
        root = scan_home_for_projects()
    return root
