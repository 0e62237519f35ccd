"""Aggregate activity patterns over a task collection."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

import numpy as np

from task_intelligence.schema import PatternSummary, Task

PEAK_HOUR_COUNT = 3
MIN_RECURRING_TITLE_LENGTH = 5
DEFAULT_CATEGORY = "inbox"


def peak_hours(hours: Iterable[int], top: int = PEAK_HOUR_COUNT) -> list[int]:
    """Busiest hours of day, lower hour first on ties."""

    histogram = np.bincount(np.asarray(list(hours), dtype=int), minlength=24)
    ranked = np.argsort(-histogram, kind="stable")
    return [int(hour) for hour in ranked if histogram[hour] > 0][:top]


def recurring_titles(titles: Iterable[str]) -> list[str]:
    """Normalized titles that occur more than once, each reported once."""

    seen: set[str] = set()
    repeated: list[str] = []
    for title in titles:
        normalized = title.lower().strip()
        if normalized in seen and len(normalized) > MIN_RECURRING_TITLE_LENGTH and normalized not in repeated:
            repeated.append(normalized)
        seen.add(normalized)
    return repeated


def analyze_patterns(tasks: Iterable[Task]) -> PatternSummary:
    """Category distribution, peak creation hours and recurring titles."""

    tasks = list(tasks)
    categories = Counter(task.category or DEFAULT_CATEGORY for task in tasks)
    return PatternSummary(
        category_distribution=dict(categories),
        peak_hours=tuple(peak_hours(task.created_at.hour for task in tasks)),
        recurring_titles=tuple(recurring_titles(task.title for task in tasks)),
    )
