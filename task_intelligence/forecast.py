"""Cognitive-load forecast over the next two weeks."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

import numpy as np

from task_intelligence.schema import LoadForecast, LoadForecastEntry, Task

logger = logging.getLogger(__name__)

FORECAST_DAYS = 14
STORM_THRESHOLD = 60
MAX_LOAD_SCORE = 100

TASK_POINTS, TASK_CAP = 5, 40
DEADLINE_POINTS, DEADLINE_CAP = 10, 30
RECURRENCE_POINTS, RECURRENCE_CAP = 5, 20
CLUSTER_FREE_CATEGORIES, CLUSTER_POINTS, CLUSTER_CAP = 3, 5, 10

UNCATEGORIZED_LABEL = "uncategorized"


def _weekday(day: date) -> int:
    """Day of week with 0 = Sunday."""

    return day.isoweekday() % 7


def recurrence_dates(task: Task, start: date, days: int = FORECAST_DAYS) -> tuple[list[date], Optional[str]]:
    """Occurrences of a recurring task in ``[start, start + days)``.

    Returns the dates plus a warning when the recurrence data cannot be
    scheduled (unknown pattern or missing recurrence day).
    """

    pattern = (task.recurrence_pattern or "").strip().lower()
    if pattern == "daily":
        matches = lambda day: True  # noqa: E731
    elif pattern in ("weekly", "monthly") and task.recurrence_day is None:
        return [], f"Task {task.id}: {pattern} recurrence has no recurrence_day"
    elif pattern == "weekly" and not 0 <= task.recurrence_day <= 6:
        return [], f"Task {task.id}: weekly recurrence_day {task.recurrence_day} out of range"
    elif pattern == "monthly" and not 1 <= task.recurrence_day <= 31:
        return [], f"Task {task.id}: monthly recurrence_day {task.recurrence_day} out of range"
    elif pattern == "weekly":
        matches = lambda day: _weekday(day) == task.recurrence_day  # noqa: E731
    elif pattern == "monthly":
        matches = lambda day: day.day == task.recurrence_day  # noqa: E731
    else:
        return [], f"Task {task.id}: unrecognized recurrence pattern '{task.recurrence_pattern}'"

    dates = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        if task.recurrence_end_date is not None and day > task.recurrence_end_date:
            break
        if matches(day):
            dates.append(day)
    return dates, None


def load_scores(
    task_counts: np.ndarray,
    deadline_counts: np.ndarray,
    recurrence_counts: np.ndarray,
    category_counts: np.ndarray,
) -> np.ndarray:
    """Capped per-day load score for aligned count arrays."""

    cluster_penalty = np.minimum(np.maximum(category_counts - CLUSTER_FREE_CATEGORIES, 0) * CLUSTER_POINTS, CLUSTER_CAP)
    total = (
        np.minimum(task_counts * TASK_POINTS, TASK_CAP)
        + np.minimum(deadline_counts * DEADLINE_POINTS, DEADLINE_CAP)
        + np.minimum(recurrence_counts * RECURRENCE_POINTS, RECURRENCE_CAP)
        + cluster_penalty
    )
    return np.minimum(total, MAX_LOAD_SCORE)


def _recommendation(density: Counter) -> Optional[str]:
    if not density:
        return None
    category, count = max(density.items(), key=lambda item: item[1])
    return f"Focus on {category} tasks - {count} items"


def forecast_load(tasks: Iterable[Task], now: datetime, days: int = FORECAST_DAYS) -> LoadForecast:
    """Project per-day cognitive load from deadlines and recurrences."""

    today = now.date()
    window = [today + timedelta(days=offset) for offset in range(days)]
    index = {day: position for position, day in enumerate(window)}

    task_counts = np.zeros(days, dtype=int)
    deadline_counts = np.zeros(days, dtype=int)
    recurrence_counts = np.zeros(days, dtype=int)
    densities = [Counter() for _ in window]
    warnings: list[str] = []

    for task in tasks:
        if task.completed:
            continue
        category = task.category or UNCATEGORIZED_LABEL

        if task.reminder_time is not None:
            position = index.get(task.reminder_time.date())
            if position is not None:
                task_counts[position] += 1
                deadline_counts[position] += 1
                densities[position][category] += 1

        if task.is_recurring:
            occurrences, warning = recurrence_dates(task, today, days=days)
            if warning:
                logger.warning(warning)
                warnings.append(warning)
            for day in occurrences:
                position = index[day]
                task_counts[position] += 1
                recurrence_counts[position] += 1
                densities[position][category] += 1

    category_counts = np.array([len(density) for density in densities], dtype=int)
    scores = load_scores(task_counts, deadline_counts, recurrence_counts, category_counts)

    entries = {}
    for position, day in enumerate(window):
        score = int(scores[position])
        entries[day] = LoadForecastEntry(
            date=day,
            expected_load_score=score,
            task_count=int(task_counts[position]),
            deadline_count=int(deadline_counts[position]),
            recurrence_count=int(recurrence_counts[position]),
            cluster_density=dict(densities[position]),
            recommended_focus_task=_recommendation(densities[position]) if score >= STORM_THRESHOLD else None,
        )

    return LoadForecast(entries_by_date=entries, warnings=tuple(warnings))
