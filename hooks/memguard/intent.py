"""Intent classification: is a tool call research or routine work?

Exploratory calls (searching, fetching, investigating) produce knowledge
worth saving and are subject to the consult/save policy. Operational calls
(building, moving files, committing) are exempt.

Shell commands are judged by an ordered rule list; the first rule that
returns an Intent wins:

    1. safelist      unmistakably operational command prefixes
    2. description   keyword score of the agent's own summary of the call
    3. signatures    inherently exploratory commands, else operational

A description never outranks a safelisted command: ``rm -rf build``
described as "investigate the build dir" is still a delete.

Non-shell tools are classified structurally (see classify()).
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from memguard.invocation import ToolKind


class Intent(Enum):
    EXPLORATORY = "exploratory"
    OPERATIONAL = "operational"


# Delegated agents that go off and research
EXPLORATION_SUBAGENTS = frozenset({
    "general-purpose", "explore", "plan", "architect",
    "code-explorer", "code-architect", "researcher",
})

# Descriptions this short carry no usable signal
MIN_DESCRIPTION_LENGTH = 10

SAFELIST_PATTERNS = [
    re.compile(r"^(?:mkdir|mv|cp|rm|rmdir|touch|ln|chmod|chown|chgrp)\b"),
    re.compile(r"^(?:cd|pwd|ls)\b"),
    re.compile(
        r"^(?:npm|pnpm|yarn|bun)\s+(?:install|i|ci|add|remove|uninstall|build|test|run|publish|link)\b"
    ),
    re.compile(r"^(?:pip3?|uv\s+pip)\s+(?:install|uninstall)\b"),
    re.compile(r"^(?:uv|poetry|pdm|hatch)\s+(?:sync|add|remove|lock|build|install|run)\b"),
    re.compile(r"^(?:cargo|go)\s+(?:build|test|install|run|fmt|add|mod|get|vet|clippy)\b"),
    re.compile(r"^(?:make|cmake|ninja|mvn|gradle|\./gradlew|bundle|gem\s+install|dotnet\s+(?:build|test|restore))\b"),
    re.compile(r"^(?:python3?\s+-m\s+)?(?:pytest|tox|nox|unittest)\b"),
    re.compile(
        r"^git\s+(?:add|commit|push|pull|checkout|switch|merge|rebase|reset|restore|stash|tag|"
        r"branch|fetch|clone|init|cherry-pick|revert|rm|mv|am|apply|worktree)\b"
    ),
]

EXPLORATION_KEYWORDS = [
    re.compile(r"\bsearch\w*", re.I),
    re.compile(r"\binvestigat\w*", re.I),
    re.compile(r"\bexplor\w*", re.I),
    re.compile(r"\binspect\w*", re.I),
    re.compile(r"\bdebug\w*", re.I),
    re.compile(r"\btrac(?:e|es|ed|ing)\b", re.I),
    re.compile(r"\blook(?:s|ed|ing)?\s+(?:for|at|into)\b", re.I),
    re.compile(r"\bfind(?:ing)?\s+out\b", re.I),
    re.compile(r"\bfigur(?:e|ing)\s+out\b", re.I),
    re.compile(r"\b(?:what|how|where|why)\s+(?:is|are|does|do)\b", re.I),
]

OPERATIONAL_KEYWORDS = [
    re.compile(r"\bcreat\w*", re.I),
    re.compile(r"\bbuild\w*", re.I),
    re.compile(r"\binstall\w*", re.I),
    re.compile(r"\b(?:run|runs|running)\b", re.I),
    re.compile(r"\bdeploy\w*", re.I),
    re.compile(r"\bcommit\w*", re.I),
    re.compile(r"\btest\w*", re.I),
    re.compile(r"\bclean\w*", re.I),
    re.compile(r"\bdelet\w*", re.I),
    re.compile(r"\bmov(?:e|es|ed|ing)\b", re.I),
    re.compile(r"\bcop(?:y|ies|ied|ying)\b", re.I),
    re.compile(r"\brenam\w*", re.I),
    re.compile(r"\bconfigur\w*", re.I),
    re.compile(r"\bgenerat\w*", re.I),
    re.compile(r"\b(?:write|writes|writing|wrote)\b", re.I),
    re.compile(r"\bfix\w*", re.I),
    re.compile(r"\bexecut\w*", re.I),
    re.compile(r"\bsync\w*", re.I),
]

EXPLORATORY_COMMANDS = [
    # network fetch
    re.compile(r"\b(?:curl|wget|http|xh)\s"),
    # history inspection
    re.compile(r"\bgit\s+(?:log|show|blame|shortlog|reflog|diff|grep)\b"),
    # text search
    re.compile(r"(?:^|[\s|;&(])(?:grep|egrep|fgrep|rg|ag|ack)\b"),
    # file locating
    re.compile(r"(?:^|[\s|;&(])(?:find|fd|locate|which|whereis|tree)\b"),
    # package-registry lookups
    re.compile(r"\b(?:npm|pnpm|yarn)\s+(?:view|info|show|search|outdated)\b"),
    re.compile(r"\bpip3?\s+(?:show|search|index|download)\b"),
    re.compile(r"\b(?:cargo\s+search|gem\s+search|brew\s+(?:info|search)|apt(?:-cache)?\s+(?:show|search))\b"),
    re.compile(r"\bgh\s+(?:search|api|repo\s+view|issue\s+view|pr\s+view)\b"),
]

_LEADING_CD = re.compile(r"^cd\s+(?:\"[^\"]*\"|'[^']*'|\S+)\s*(?:&&|;)\s*")


def _normalise_command(command):
    """Strip leading ``cd <dir> &&`` hops so the real command is judged."""
    text = command.strip()
    while True:
        stripped = _LEADING_CD.sub("", text, count=1)
        if stripped == text:
            return text
        text = stripped.lstrip()


def _any_match(patterns, text):
    return any(p.search(text) for p in patterns)


def score_description(description, patterns):
    """Number of distinct patterns in ``patterns`` that hit ``description``."""
    return sum(1 for p in patterns if p.search(description))


@dataclass(frozen=True)
class Rule:
    """One classification step. ``decide`` returns an Intent or None to pass."""

    name: str
    decide: Callable[[str, str], Optional[Intent]]

    def __call__(self, command, description):
        return self.decide(command, description)


def _safelist(command, description):
    if _any_match(SAFELIST_PATTERNS, _normalise_command(command)):
        return Intent.OPERATIONAL
    return None


def _description_score(command, description):
    description = description.strip()
    if len(description) <= MIN_DESCRIPTION_LENGTH:
        return None
    explore = score_description(description, EXPLORATION_KEYWORDS)
    operate = score_description(description, OPERATIONAL_KEYWORDS)
    if explore > operate:
        return Intent.EXPLORATORY
    if operate > explore:
        return Intent.OPERATIONAL
    return None


def _command_signature(command, description):
    if _any_match(EXPLORATORY_COMMANDS, command):
        return Intent.EXPLORATORY
    return Intent.OPERATIONAL


SAFELIST_RULE = Rule("safelist", _safelist)
DESCRIPTION_RULE = Rule("description", _description_score)
SIGNATURE_RULE = Rule("signature", _command_signature)

DEFAULT_RULES: List[Rule] = [SAFELIST_RULE, DESCRIPTION_RULE, SIGNATURE_RULE]


def classify_command(command, description="", rules: Sequence[Rule] = DEFAULT_RULES):
    for rule in rules:
        intent = rule(command or "", description or "")
        if intent is not None:
            return intent
    return Intent.OPERATIONAL


def is_exploration_subagent(subagent_kind):
    return (subagent_kind or "").strip().lower() in EXPLORATION_SUBAGENTS


def classify(invocation, rules: Sequence[Rule] = DEFAULT_RULES):
    """Classify a ToolInvocation.

    Web fetch/search is always exploratory; delegation is exploratory only
    for research-flavoured agents; shell goes through ``rules``; every other
    tool is operational.
    """
    kind = invocation.kind
    if kind in (ToolKind.WEB_FETCH, ToolKind.WEB_SEARCH):
        return Intent.EXPLORATORY
    if kind is ToolKind.DELEGATE:
        if is_exploration_subagent(invocation.subagent_kind):
            return Intent.EXPLORATORY
        return Intent.OPERATIONAL
    if kind is ToolKind.SHELL:
        return classify_command(invocation.command, invocation.description, rules)
    return Intent.OPERATIONAL
