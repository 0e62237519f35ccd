"""Static keyword and pattern tables used by the analyzers.

Bump ``LEXICON_VERSION`` whenever a table changes so cached results derived
from an older vocabulary can be told apart.
"""

from __future__ import annotations

import re
from types import MappingProxyType

LEXICON_VERSION = "2024.1"

# Journal sentiment
POSITIVE_WORDS = (
    "happy", "great", "awesome", "done", "finished", "completed", "success", "achieved",
    "proud", "excited", "grateful", "amazing", "wonderful", "excellent", "fantastic",
    "joy", "love", "win", "wins", "progress", "breakthrough",
)
NEGATIVE_WORDS = (
    "stuck", "confused", "overwhelmed", "tired", "stressed", "frustrated", "difficult",
    "hard", "struggle", "struggling", "anxious", "worried", "concern", "concerned",
    "problem", "problems", "issue", "issues", "fail", "failed", "behind",
)
# Narrower list used for burnout signals.
BURNOUT_NEGATIVE_WORDS = (
    "stuck", "confused", "overwhelmed", "tired", "stressed", "frustrated", "difficult",
    "anxious", "worried",
)
THEME_STOPWORDS = frozenset(
    {
        "about", "after", "before", "could", "would", "should", "there", "their",
        "these", "those", "which", "where", "while",
    }
)


def word_pattern(words: tuple[str, ...]) -> re.Pattern[str]:
    """Case-insensitive whole-word alternation over ``words``."""

    return re.compile(r"\b(?:" + "|".join(re.escape(word) for word in words) + r")\b", re.IGNORECASE)


POSITIVE_PATTERN = word_pattern(POSITIVE_WORDS)
NEGATIVE_PATTERN = word_pattern(NEGATIVE_WORDS)
BURNOUT_NEGATIVE_PATTERN = word_pattern(BURNOUT_NEGATIVE_WORDS)

# Batch categorization, tested in insertion order.
CATEGORY_KEYWORDS = MappingProxyType(
    {
        "work": (
            "meeting", "client", "email", "presentation", "deadline", "report", "call", "zoom",
            "slack", "project", "boss", "colleague", "conference", "review", "proposal",
            "budget", "invoice", "contract",
        ),
        "home": (
            "grocery", "groceries", "laundry", "clean", "cook", "dinner", "lunch", "dishes",
            "vacuum", "trash", "shopping", "errands", "bills", "rent", "utilities", "repair",
            "maintenance",
        ),
        "gym": (
            "workout", "gym", "exercise", "run", "running", "yoga", "fitness", "stretch",
            "cardio", "weights", "training", "bike", "swim", "swimming", "hike", "hiking",
            "sports",
        ),
        "projects": (
            "build", "create", "design", "develop", "plan", "launch", "prototype", "mvp",
            "feature", "app", "website", "startup", "product", "code", "coding", "programming",
        ),
    }
)
CATEGORY_PATTERNS = MappingProxyType({name: word_pattern(words) for name, words in CATEGORY_KEYWORDS.items()})
UNCATEGORIZED = frozenset({"", "inbox", "uncategorized"})

# Domino dependency analysis
BLOCKING_PHRASES = ("after", "once", "when", "following", "depends on")
DEPENDENCY_VERBS = (
    "create", "build", "design", "develop", "write", "draft", "prepare",
    "setup", "configure", "install", "research", "analyze", "plan",
)
PREREQUISITE_PAIRS = MappingProxyType(
    {
        "setup": frozenset({"configure", "use", "run", "test"}),
        "create": frozenset({"edit", "update", "modify", "review", "share"}),
        "design": frozenset({"implement", "build", "develop"}),
        "research": frozenset({"decide", "plan", "choose"}),
        "write": frozenset({"review", "edit", "publish", "send"}),
        "plan": frozenset({"execute", "implement", "start"}),
    }
)
NOUN_STOPWORDS = frozenset({"the", "and", "or", "but", "for", "with", "from", "to", "in", "on", "at", "by"})

# Tiny task heuristic
TINY_TASK_KEYWORDS = (
    "pay", "send", "check", "renew", "schedule", "reply", "email", "call", "text", "message",
    "confirm", "verify", "submit", "upload", "download", "forward", "respond", "acknowledge",
    "approve", "review", "sign", "file", "update", "quick",
)
BIG_TASK_KEYWORDS = (
    "research", "analyze", "design", "develop", "implement", "create", "build", "write",
    "draft", "plan", "strategy", "meeting", "presentation",
)

# Priority scoring categories
HIGH_PRIORITY_CATEGORIES = frozenset({"urgent", "primary_focus"})
WORK_CATEGORY = "work"
