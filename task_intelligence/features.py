"""Per-task feature extraction."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from task_intelligence.lexicon import BIG_TASK_KEYWORDS, TINY_TASK_KEYWORDS
from task_intelligence.schema import Task, TinyTaskClassification

COMPLEXITY_TITLE_LENGTH = 200
SHORT_TITLE_WORDS = 5


@dataclass(frozen=True)
class TaskFeatures:
    """Scalar and boolean signals derived from a single task."""

    age_days: float
    word_count: int
    title_length: int
    complexity: float
    category: Optional[str]
    has_reminder: bool
    hours_until_reminder: Optional[float]
    is_overdue: bool
    due_within_24h: bool
    is_completed: bool
    is_tiny: bool
    has_person_name: bool
    keywords: frozenset[str]
    is_recurring: bool


def normalize_category(category: Optional[str]) -> Optional[str]:
    if category is None:
        return None
    normalized = str(category).strip().lower()
    return normalized or None


def extract_features(task: Task, now: datetime) -> TaskFeatures:
    """Extract scoring features from ``task`` as seen at ``now``."""

    hours_until_reminder = None
    if task.reminder_time is not None:
        hours_until_reminder = (task.reminder_time - now).total_seconds() / 3600.0

    title_length = len(task.title)
    return TaskFeatures(
        age_days=(now - task.created_at).total_seconds() / 86400.0,
        word_count=len(task.title.split()),
        title_length=title_length,
        complexity=min(title_length / COMPLEXITY_TITLE_LENGTH, 1.0),
        category=normalize_category(task.category),
        has_reminder=hours_until_reminder is not None,
        hours_until_reminder=hours_until_reminder,
        is_overdue=hours_until_reminder is not None and hours_until_reminder < 0,
        due_within_24h=hours_until_reminder is not None and 0 < hours_until_reminder < 24,
        is_completed=task.completed,
        is_tiny=task.is_tiny,
        has_person_name=task.has_person_name,
        keywords=frozenset(keyword.lower() for keyword in task.keywords),
        is_recurring=task.is_recurring,
    )


def classify_tiny(title: str) -> TinyTaskClassification:
    """Guess whether a task takes five minutes or less from its title alone."""

    text = title.lower()
    has_big = any(keyword in text for keyword in BIG_TASK_KEYWORDS)
    has_tiny = any(keyword in text for keyword in TINY_TASK_KEYWORDS)
    is_short = len(title.split()) <= SHORT_TITLE_WORDS

    if has_big:
        confidence, reason = 0.1, "Contains keywords suggesting complex work"
    elif has_tiny and is_short:
        confidence, reason = 0.9, "Quick admin action with clear intent"
    elif has_tiny:
        confidence, reason = 0.7, "Administrative action detected"
    elif is_short:
        confidence, reason = 0.5, "Brief task description"
    else:
        confidence, reason = 0.3, "May require more time or focus"

    return TinyTaskClassification(is_tiny=confidence >= 0.5, confidence=confidence, reason=reason)
