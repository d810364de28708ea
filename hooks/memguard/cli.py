"""Console scripts the agent runs to consult and feed project memory.

    check-memory "keywords"
    save-decision <category> <decision> <rationale>
    save-research <topic> <tags> <finding> [stable|versioned|volatile]
    session-summary
    init-memory [directory]

The first four are recognised by the engine as self-referential and are never
gated. Each resolves the project from the current directory and exits 1 if
there is none. init-memory enrolls a directory by creating its .ai-memory/.
"""

import argparse
import logging
import os
import sys
import time

from memguard.errors import MemguardError
from memguard.hook_io import configure_logging
from memguard.knowledge import DECISION_CATEGORIES, LOG_FILES, STALENESS_LEVELS, KnowledgeStore
from memguard.project import memory_dir_for, require_project_root
from memguard.session import format_summary, summarize
from memguard.state import StateStore

logger = logging.getLogger(__name__)

TOP_MATCHES = 3

STALENESS_BADGES = {
    "stable": "[FRESH]",
    "versioned": "[CHECK VERSION]",
    "volatile": "[VERIFY]",
}


def _stores(cwd=None):
    memory_dir = memory_dir_for(require_project_root(cwd or os.getcwd()))
    return StateStore(memory_dir), KnowledgeStore(memory_dir)


def _run(main, argv):
    configure_logging()
    try:
        return main(argv)
    except MemguardError as e:
        print(str(e), file=sys.stderr)
        return 1


def check_memory(argv=None):
    parser = argparse.ArgumentParser(prog="check-memory",
                                     description="Search saved decisions and research before investigating")
    parser.add_argument("keywords", nargs="+", help="Search keywords")
    args = parser.parse_args(argv)
    query = " ".join(args.keywords).strip()
    if not query:
        parser.error("keywords must not be empty")

    store, knowledge = _stores()
    research_hits, decision_hits = knowledge.search(query, limit=TOP_MATCHES)
    # Searching counts as consulting, even with no hits
    store.mark_memory_checked(time.time())

    if not research_hits and not decision_hits:
        print(f'No saved memory matches "{query}". Safe to investigate; save what you find.')
        return 0
    if research_hits:
        print("Research:")
        for score, entry in research_hits:
            badge = STALENESS_BADGES.get(entry.get("staleness"), "[VERIFY]")
            print(f"  {badge} {entry.get('topic', '')} (score {score})")
            print(f"      {entry.get('finding', '')}")
    if decision_hits:
        print("Decisions:")
        for score, entry in decision_hits:
            print(f"  [{entry.get('category', '')}] {entry.get('decision', '')} (score {score})")
            if entry.get("rationale"):
                print(f"      {entry['rationale']}")
    return 0


def save_decision(argv=None):
    parser = argparse.ArgumentParser(prog="save-decision", description="Record a project decision")
    parser.add_argument("category", choices=DECISION_CATEGORIES)
    parser.add_argument("decision")
    parser.add_argument("rationale")
    args = parser.parse_args(argv)

    _, knowledge = _stores()
    entry = knowledge.add_decision(args.category, args.decision, args.rationale)
    print(f"Saved decision {entry['id']} [{entry['category']}]: {entry['decision']}")
    return 0


def save_research(argv=None):
    parser = argparse.ArgumentParser(prog="save-research", description="Record a research finding")
    parser.add_argument("topic")
    parser.add_argument("tags", help="Comma-separated tags")
    parser.add_argument("finding")
    parser.add_argument("staleness", nargs="?", default="stable", choices=STALENESS_LEVELS)
    args = parser.parse_args(argv)

    _, knowledge = _stores()
    entry = knowledge.add_research(args.topic, args.tags, args.finding, args.staleness)
    print(f"Saved research {entry['id']}: {entry['topic']} [{', '.join(entry['tags'])}]")
    return 0


def session_summary(argv=None):
    parser = argparse.ArgumentParser(prog="session-summary",
                                     description="Report this session's saves; run before ending a session")
    parser.parse_args(argv)

    store, knowledge = _stores()
    print(format_summary(summarize(store, knowledge)))
    return 0


def init_memory(argv=None):
    parser = argparse.ArgumentParser(prog="init-memory",
                                     description="Enroll a project by creating its .ai-memory/ directory")
    parser.add_argument("directory", nargs="?", default=None, help="Project root (default: current directory)")
    args = parser.parse_args(argv)

    memory_dir = memory_dir_for(os.path.abspath(args.directory or os.getcwd()))
    if os.path.isdir(memory_dir):
        print(f"{memory_dir} already exists. Skipping initialization.")
        return 0
    os.makedirs(memory_dir)
    for name in LOG_FILES:
        open(os.path.join(memory_dir, name), "w").close()
    print(f"Created {memory_dir}")
    return 0


def check_memory_main():
    sys.exit(_run(check_memory, None))


def save_decision_main():
    sys.exit(_run(save_decision, None))


def save_research_main():
    sys.exit(_run(save_research, None))


def session_summary_main():
    sys.exit(_run(session_summary, None))


def init_memory_main():
    sys.exit(_run(init_memory, None))
