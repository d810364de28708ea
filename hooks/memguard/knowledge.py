"""Read-side view of the project's knowledge logs.

Two append-only JSONL logs live in the marker directory:
``decisions.jsonl`` and ``research.jsonl``. The hook engine only ever asks
two questions of them: when was the last save (max mtime), and is there
anything at all. It never writes. The search and append helpers exist for
the ``check-memory`` / ``save-*`` actions.
"""

import json
import logging
import os
import secrets
import time
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

DECISIONS_FILE = "decisions.jsonl"
RESEARCH_FILE = "research.jsonl"
LOG_FILES = (DECISIONS_FILE, RESEARCH_FILE)

STALENESS_LEVELS = ("stable", "versioned", "volatile")
DECISION_CATEGORIES = ("architecture", "constraint", "convention", "testing", "scope", "unresolved")


class KnowledgeStore:
    def __init__(self, memory_dir):
        self.memory_dir = memory_dir

    def _path(self, name):
        return os.path.join(self.memory_dir, name)

    def last_saved_at(self):
        """Most recent modification time of either log, 0.0 if neither exists."""
        latest = 0.0
        for name in LOG_FILES:
            try:
                latest = max(latest, os.path.getmtime(self._path(name)))
            except OSError:
                continue
        return latest

    def is_empty(self):
        """True when neither log holds any bytes (or neither is readable)."""
        for name in LOG_FILES:
            try:
                if os.path.getsize(self._path(name)) > 0:
                    return False
            except OSError:
                continue
        return True

    def _read(self, name):
        entries = []
        try:
            with open(self._path(name), encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entry = json.loads(line)
                    except ValueError:
                        continue  # Skip malformed lines
                    if isinstance(entry, dict):
                        entries.append(entry)
        except OSError:
            return []
        return entries

    def decisions(self):
        return self._read(DECISIONS_FILE)

    def research(self):
        return self._read(RESEARCH_FILE)

    def search(self, query, limit=10):
        """Keyword-score both logs. Returns (research_hits, decision_hits).

        Each hit is ``(score, entry)``, highest score first. Research scores
        tag 3 / topic 2 / finding 1 per keyword; decisions score decision 3 /
        category 2 / rationale 1.
        """
        keywords = [kw for kw in query.lower().split() if kw]
        research_hits = []
        for entry in self.research():
            tags = [str(t).lower() for t in entry.get("tags") or []]
            topic = str(entry.get("topic") or "").lower()
            finding = str(entry.get("finding") or "").lower()
            score = 0
            for kw in keywords:
                if any(kw in t for t in tags):
                    score += 3
                if kw in topic:
                    score += 2
                if kw in finding:
                    score += 1
            if score:
                research_hits.append((score, entry))

        decision_hits = []
        for entry in self.decisions():
            decision = str(entry.get("decision") or "").lower()
            category = str(entry.get("category") or "").lower()
            rationale = str(entry.get("rationale") or "").lower()
            score = 0
            for kw in keywords:
                if kw in decision:
                    score += 3
                if kw in category:
                    score += 2
                if kw in rationale:
                    score += 1
            if score:
                decision_hits.append((score, entry))

        research_hits.sort(key=lambda hit: hit[0], reverse=True)
        decision_hits.sort(key=lambda hit: hit[0], reverse=True)
        return research_hits[:limit], decision_hits[:limit]

    def has_match(self, query):
        research_hits, decision_hits = self.search(query, limit=1)
        return bool(research_hits or decision_hits)

    def split_by_staleness(self, staleness_days, now=None):
        """Partition research into (fresh, stale) by entry age."""
        now = time.time() if now is None else now
        cutoff = datetime.fromtimestamp(now - staleness_days * 86400, tz=timezone.utc).isoformat()
        fresh, stale = [], []
        for entry in self.research():
            (stale if str(entry.get("ts") or "") < cutoff else fresh).append(entry)
        return fresh, stale

    def _append(self, name, entry):
        os.makedirs(self.memory_dir, exist_ok=True)
        with open(self._path(name), "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")
        return entry

    def add_decision(self, category, decision, rationale):
        entry = {
            "id": secrets.token_hex(4),
            "ts": _now_iso(),
            "category": category,
            "decision": decision,
            "rationale": rationale,
            "source": "auto",
        }
        return self._append(DECISIONS_FILE, entry)

    def add_research(self, topic, tags, finding, staleness="stable"):
        if staleness not in STALENESS_LEVELS:
            raise ValueError(f"staleness must be one of {', '.join(STALENESS_LEVELS)}")
        if isinstance(tags, str):
            tags = tags.split(",")
        entry = {
            "id": secrets.token_hex(4),
            "ts": _now_iso(),
            "topic": topic,
            "tags": [t.strip().lower() for t in tags if t.strip()],
            "finding": finding,
            "source_tool": "auto",
            "confidence": 0.8,
            "staleness": staleness,
        }
        return self._append(RESEARCH_FILE, entry)


def _now_iso():
    return datetime.now(timezone.utc).isoformat()
