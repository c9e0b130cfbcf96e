"""
modules/input/task_extractor.py
--------------------------------
Keyword-rule extraction of required stops ("tasks") from an errand request.

Two passes:

  1. Specific rules: TASK_RULES, evaluated in order.  Multi-word and
     cuisine-specific phrasings sit before the bare catch-alls so that
     "chinese restaurant" claims its text before "restaurant" can.
  2. Generic pass: "stop at X" / "go to X" / "visit X" for any X not
     already covered by a specific task.  X is cut short at the first
     keyword a specific task claimed, so "stop at the library for dinner"
     yields both a restaurant and a "library" stop.

Dedup: a match is dropped when its lowercased text was already matched,
or when its span overlaps text an earlier task already claimed.

Tasks are returned in the order they appear in the message.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import config
from schemas.trip import Priority, Task, TaskCategory

logger = logging.getLogger(__name__)

_CUISINES = (
    "chinese", "italian", "mexican", "thai", "indian", "japanese", "korean",
    "vietnamese", "greek", "french", "mediterranean", "sushi", "pizza",
)


@dataclass(frozen=True)
class TaskRule:
    """
    One row of the rule table.

    description may reference named groups of the pattern, e.g. "{cuisine}"
    (values are title-cased).
    """
    name: str
    pattern: re.Pattern
    category: TaskCategory
    priority: Priority
    default_minutes: int
    description: str

    def describe(self, match: re.Match) -> str:
        groups = {k: v.title() for k, v in match.groupdict().items() if v}
        return self.description.format(**groups)


def _rule(name, pattern, category, priority, minutes, description) -> TaskRule:
    return TaskRule(
        name=name,
        pattern=re.compile(pattern, re.IGNORECASE),
        category=category,
        priority=priority,
        default_minutes=minutes,
        description=description,
    )


# ── Rule table (order matters) ────────────────────────────────────────────────
TASK_RULES: tuple[TaskRule, ...] = (
    # Kids / family
    _rule("pick_up_kids",
          r"\bpick\s+up\s+(?:the\s+|my\s+)?(?:kids|children|child|son|daughter)\b",
          TaskCategory.SCHOOL, Priority.HIGH, 5, "Pick up kids"),
    _rule("drop_off_kids",
          r"\bdrop\s+off\s+(?:the\s+|my\s+)?(?:kids|children|child|son|daughter)\b",
          TaskCategory.SCHOOL, Priority.HIGH, 5, "Drop off kids"),

    # Shopping
    _rule("buy_groceries",
          r"\b(?:get|pick\s+up|buy|grab)\s+(?:some\s+)?(?:groceries|food|supplies)\b",
          TaskCategory.GROCERY, Priority.MEDIUM, 20, "Get groceries"),
    _rule("supermarket",
          r"\b(?:go\s+to|stop\s+at|visit|route\s+(?:me\s+)?to)\s+(?:the\s+|a\s+)?"
          r"(?:supermarket|grocery\s+store|market)\b",
          TaskCategory.GROCERY, Priority.MEDIUM, 20, "Supermarket"),

    # Food: named cuisine before the bare catch-all
    _rule("cuisine_restaurant",
          r"\b(?P<cuisine>" + "|".join(_CUISINES) + r")(?:\s+(?:restaurant|food|place))?\b",
          TaskCategory.RESTAURANT, Priority.MEDIUM, 15, "{cuisine} restaurant"),
    _rule("restaurant",
          r"\b(?:restaurant|food|lunch|dinner)\b",
          TaskCategory.RESTAURANT, Priority.MEDIUM, 15, "Restaurant"),
    _rule("coffee",
          r"\b(?:get|grab|pick\s+up)\s+(?:some\s+|a\s+)?coffee\b",
          TaskCategory.COFFEE, Priority.LOW, 10, "Get coffee"),

    # Services
    _rule("post_office",
          r"\b(?:post\s+office|(?:mail|send)\s+(?:a\s+)?package)\b",
          TaskCategory.POST_OFFICE, Priority.MEDIUM, 10, "Post office"),
    _rule("pharmacy",
          r"\b(?:pharmacy|pick\s+up\s+(?:my\s+)?medicine|prescriptions?)\b",
          TaskCategory.PHARMACY, Priority.HIGH, 10, "Pharmacy"),
    _rule("gas",
          r"\b(?:gas\s+station|get\s+gas|fill\s+up)\b",
          TaskCategory.GAS, Priority.MEDIUM, 5, "Gas station"),
    _rule("bank",
          r"\b(?:bank|atm|withdraw\s+(?:some\s+)?(?:money|cash))\b",
          TaskCategory.BANK, Priority.MEDIUM, 15, "Bank"),

    # Activities
    _rule("gym",
          r"\b(?:gym|workout|work\s+out|exercise)\b",
          TaskCategory.GYM, Priority.MEDIUM, 60, "Gym"),
)

_GENERIC_STOP_RE = re.compile(
    r"\b(?:stop\s+at|go\s+to|visit)\s+(?:the\s+|a\s+|an\s+|my\s+)?"
    r"(?P<phrase>[a-z][a-z'\s]*?)"
    r"(?=\s+(?:and|by|in|then|for)\b|\s*[,.;!?]|\s*$)",
    re.IGNORECASE,
)

# Destinations, not stops; LocationExtractor owns them.
_NON_STOP_PHRASES = frozenset({"home"})

# Connector words left dangling once a phrase is cut at a claimed keyword.
_TRAILING_CONNECTORS_RE = re.compile(r"(?:\s+(?:for|to|at|with|and|then|the|a|an|my))+$", re.IGNORECASE)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _overlaps(span: tuple[int, int], claimed: list[tuple[int, int]]) -> bool:
    start, end = span
    return any(start < c_end and c_start < end for c_start, c_end in claimed)


def _unclaimed_head(text: str, span: tuple[int, int], claimed: list[tuple[int, int]]) -> str:
    """
    The part of text[span] before the first keyword an earlier task claimed.

    Empty when the phrase itself starts inside a claimed span.
    """
    start, end = span
    for c_start, c_end in claimed:
        if c_start <= start < c_end:
            return ""
    cut = min((c_start for c_start, _ in claimed if start < c_start < end), default=end)
    head = text[start:cut].strip()
    return _TRAILING_CONNECTORS_RE.sub("", head).strip()


def _covered_by_existing(phrase: str, tasks: list[Task]) -> bool:
    """Substring overlap (either direction) with any task description or keyword."""
    p = phrase.lower()
    for task in tasks:
        for text in (task.description, *task.matched_keywords):
            t = text.lower()
            if p in t or t in p:
                return True
    return False


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def extract_tasks(text: str) -> list[Task]:
    """Return the stops requested in `text`, in message order (may be empty)."""
    found: list[tuple[int, Task]] = []
    seen: set[str] = set()
    claimed: list[tuple[int, int]] = []

    # ── Pass 1: specific rules ───────────────────────────────────────────────
    for rule in TASK_RULES:
        for match in rule.pattern.finditer(text):
            key = match.group(0).lower()
            if key in seen or _overlaps(match.span(), claimed):
                continue
            seen.add(key)
            claimed.append(match.span())
            found.append((match.start(), Task(
                description=rule.describe(match),
                category=rule.category,
                priority=rule.priority,
                estimated_duration_minutes=rule.default_minutes,
                matched_keywords=(match.group(0),),
            )))
            logger.debug("task rule %s matched %r", rule.name, match.group(0))

    # ── Pass 2: generic "stop at X" ──────────────────────────────────────────
    specific = [t for _, t in found]
    for match in _GENERIC_STOP_RE.finditer(text):
        phrase = _unclaimed_head(text, match.span("phrase"), claimed)
        span = (match.start(), match.start("phrase") + len(phrase))
        keyword = text[span[0]:span[1]]
        key = keyword.lower()
        if not phrase or phrase.lower() in _NON_STOP_PHRASES or key in seen:
            continue
        if _covered_by_existing(phrase, specific):
            continue
        seen.add(key)
        claimed.append(span)
        found.append((match.start(), Task(
            description=phrase,
            category=TaskCategory.GENERIC,
            priority=Priority.MEDIUM,
            estimated_duration_minutes=config.GENERIC_TASK_MINUTES,
            matched_keywords=(keyword,),
            location=phrase,
        )))
        logger.debug("generic stop matched %r", phrase)

    found.sort(key=lambda item: item[0])
    return [task for _, task in found]
