"""Regex fallback categorization for uncategorized tasks."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from task_intelligence.lexicon import CATEGORY_PATTERNS, UNCATEGORIZED
from task_intelligence.schema import Task


def needs_category(task: Task) -> bool:
    return task.category is None or task.category.strip().lower() in UNCATEGORIZED


def categorize_title(title: str) -> Optional[str]:
    """First category whose pattern matches ``title``, or ``None``."""

    for category, pattern in CATEGORY_PATTERNS.items():
        if pattern.search(title):
            return category
    return None


def categorize_batch(tasks: Iterable[Task]) -> list[Task]:
    """Return tasks with a category filled in where a pattern matches.

    Inputs are never modified; matched tasks are returned as copies.
    """

    categorized = []
    for task in tasks:
        category = categorize_title(task.title) if needs_category(task) else None
        categorized.append(replace(task, category=category) if category else task)
    return categorized
