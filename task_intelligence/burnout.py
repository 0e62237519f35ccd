"""Heuristic burnout risk detection from task and journal activity."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from task_intelligence.lexicon import BURNOUT_NEGATIVE_PATTERN, UNCATEGORIZED
from task_intelligence.schema import BurnoutAssessment, JournalEntry, Task

WINDOW_DAYS = 7

LOW_COMPLETION_RATE = 0.3
LOW_COMPLETION_POINTS = 20
OVERDUE_LIMIT = 5
OVERDUE_POINTS = 15
INBOX_LIMIT = 20
INBOX_POINTS = 10
NEGATIVE_RATE = 0.5
NEGATIVE_POINTS = 25
HIGH_VOLUME_LIMIT = 30
MIN_REFLECTIONS = 3
LOW_REFLECTION_POINTS = 15

HIGH_RISK_SCORE = 50
MEDIUM_RISK_SCORE = 25

FACTOR_LOW_COMPLETION = "Low completion rate"
FACTOR_OVERDUE = "Multiple overdue tasks"
FACTOR_INBOX = "Large inbox backlog"
FACTOR_NEGATIVE_JOURNAL = "Frequent negative sentiment in journal"
FACTOR_LOW_REFLECTION = "High load, low reflection"


def risk_tier(score: int) -> str:
    if score >= HIGH_RISK_SCORE:
        return "high"
    if score >= MEDIUM_RISK_SCORE:
        return "medium"
    return "low"


def _is_inbox(task: Task) -> bool:
    return task.category is None or task.category.strip().lower() in UNCATEGORIZED


def detect_burnout(
    tasks: Iterable[Task],
    journal: Iterable[JournalEntry],
    now: datetime,
    window_days: int = WINDOW_DAYS,
) -> BurnoutAssessment:
    """Score burnout risk; the factor list is the user-facing explanation."""

    tasks = list(tasks)
    cutoff = now - timedelta(days=window_days)
    recent_tasks = [task for task in tasks if task.created_at >= cutoff]
    recent_journal = [entry for entry in journal if entry.created_at >= cutoff]

    score = 0
    factors: list[str] = []

    if recent_tasks:
        completion_rate = sum(1 for task in recent_tasks if task.completed) / len(recent_tasks)
        if completion_rate < LOW_COMPLETION_RATE:
            score += LOW_COMPLETION_POINTS
            factors.append(FACTOR_LOW_COMPLETION)

    overdue = [
        task for task in tasks if not task.completed and task.reminder_time is not None and task.reminder_time < now
    ]
    if len(overdue) > OVERDUE_LIMIT:
        score += OVERDUE_POINTS
        factors.append(FACTOR_OVERDUE)

    inbox = [task for task in tasks if not task.completed and _is_inbox(task)]
    if len(inbox) > INBOX_LIMIT:
        score += INBOX_POINTS
        factors.append(FACTOR_INBOX)

    if recent_journal:
        negative = sum(1 for entry in recent_journal if BURNOUT_NEGATIVE_PATTERN.search(entry.content))
        if negative / len(recent_journal) > NEGATIVE_RATE:
            score += NEGATIVE_POINTS
            factors.append(FACTOR_NEGATIVE_JOURNAL)

    if len(recent_tasks) > HIGH_VOLUME_LIMIT and len(recent_journal) < MIN_REFLECTIONS:
        score += LOW_REFLECTION_POINTS
        factors.append(FACTOR_LOW_REFLECTION)

    return BurnoutAssessment(risk=risk_tier(score), score=score, factors=tuple(factors))
