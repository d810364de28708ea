"""Tests for memguard/cli.py"""
import os
import time

import pytest

from memguard import cli
from memguard.state import EscalationState


@pytest.fixture
def in_project(project, monkeypatch):
    root, _ = project
    monkeypatch.chdir(root)
    return project


def test_check_memory_marks_sentinel_even_without_hits(in_project, stores, capsys):
    store, _ = stores
    before = time.time()
    assert cli.check_memory(["kubernetes"]) == 0
    assert "No saved memory matches" in capsys.readouterr().out
    assert store.memory_checked_at() >= before


def test_save_then_check(in_project, stores, capsys):
    assert cli.save_research(["retry policy", "http,retry", "Backoff caps at 30s", "volatile"]) == 0
    assert cli.save_decision(["convention", "Retry idempotent calls only", "safety"]) == 0
    capsys.readouterr()

    assert cli.check_memory(["retry"]) == 0
    out = capsys.readouterr().out
    assert "[VERIFY] retry policy" in out
    assert "[convention] Retry idempotent calls only" in out


def test_save_decision_rejects_unknown_category(in_project):
    with pytest.raises(SystemExit) as exc:
        cli.save_decision(["vibes", "x", "y"])
    assert exc.value.code == 2


def test_save_research_rejects_bad_staleness(in_project):
    with pytest.raises(SystemExit):
        cli.save_research(["t", "tags", "finding", "ancient"])


def test_outside_project_exits_1(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert cli._run(cli.check_memory, ["anything"]) == 1
    assert "No .ai-memory/" in capsys.readouterr().err


def test_session_summary_reports_pending(in_project, stores, capsys):
    store, knowledge = stores
    knowledge.add_research("t", "x", "y")
    store.save_escalation(EscalationState(reminder_count=1, last_known_save_at=knowledge.last_saved_at()))
    assert cli.session_summary([]) == 0
    assert "PENDING SAVES DETECTED" in capsys.readouterr().out


def test_init_memory_enrolls_directory(tmp_path, monkeypatch, capsys):
    target = tmp_path / "fresh"
    target.mkdir()
    monkeypatch.chdir(target)
    assert cli.init_memory([]) == 0
    memory_dir = target / ".ai-memory"
    assert sorted(p.name for p in memory_dir.iterdir()) == ["decisions.jsonl", "research.jsonl"]
    assert (memory_dir / "research.jsonl").read_text() == ""
    assert "Created" in capsys.readouterr().out

    # the enrolled directory is now a project for the other commands
    assert cli.check_memory(["anything"]) == 0


def test_init_memory_leaves_existing_directory_alone(project, capsys):
    root, memory_dir = project
    with open(os.path.join(memory_dir, "decisions.jsonl"), "w") as f:
        f.write('{"decision": "keep"}\n')
    assert cli.init_memory([root]) == 0
    assert "already exists" in capsys.readouterr().out
    with open(os.path.join(memory_dir, "decisions.jsonl")) as f:
        assert f.read() == '{"decision": "keep"}\n'
