"""Additive priority scoring with explainable reasons."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping, Optional

from task_intelligence.features import TaskFeatures, extract_features
from task_intelligence.lexicon import HIGH_PRIORITY_CATEGORIES, WORK_CATEGORY
from task_intelligence.schema import Persona, PriorityResult, Task

# Hand-tuned weights and thresholds.
MUST_THRESHOLD = 20
SHOULD_THRESHOLD = 5
FOCUS_SELECTION_THRESHOLD = 20

REMINDER_POINTS = 10
DUE_SOON_POINTS = 15
OVERDUE_POINTS = 25
HIGH_PRIORITY_CATEGORY_POINTS = 15
PREFERENCE_WEIGHT = 25
AVOIDANCE_WEIGHT = 20
AMBITION_WEIGHT = 15
MOMENTUM_THRESHOLD = 0.6
MOMENTUM_WEIGHT = 10
MANAGEABLE_WORD_LIMIT = 10
MANAGEABLE_POINTS = 15
LONG_TITLE_POINTS = 5
UNLOCK_POINTS_PER_TASK = 3
UNLOCK_POINTS_CAP = 25
OLD_TASK_DAYS = 7
OLD_TASK_POINTS = 5
TINY_TASK_POINTS = -5
COMPLETED_POINTS = -100
WORK_HOURS = (9, 18)
WORK_HOURS_POINTS = 5


def bucket_for(score: float) -> str:
    """Map a score onto the must/should/could buckets."""

    if score >= MUST_THRESHOLD:
        return "must"
    if score >= SHOULD_THRESHOLD:
        return "should"
    return "could"


def _fmt(points: float) -> str:
    return f"{round(points, 2):+g}"


def _persona_components(features: TaskFeatures, persona: Persona) -> list[tuple[float, str]]:
    components: list[tuple[float, str]] = []
    category = features.category

    preference = persona.preference_domains.get(category, 0.0) if category else 0.0
    if preference:
        points = preference * PREFERENCE_WEIGHT
        components.append((points, f"Matches preference ({category}) ({_fmt(points)})"))

    avoidance = persona.avoidance_profile.get(category, 0.0) if category else 0.0
    if avoidance:
        points = -avoidance * AVOIDANCE_WEIGHT
        components.append((points, f"Avoidance pattern detected ({category}) ({_fmt(points)})"))

    ambition_match = 1.0 - abs(persona.ambition - features.complexity)
    points = ambition_match * AMBITION_WEIGHT
    if points:
        label = "Matches ambition level" if ambition_match > 0.7 else "Partial ambition alignment"
        components.append((points, f"{label} ({_fmt(points)})"))

    if persona.momentum > MOMENTUM_THRESHOLD:
        points = persona.momentum * MOMENTUM_WEIGHT
        components.append((points, f"Momentum boost ({_fmt(points)})"))

    return components


def score_components(
    task: Task,
    now: datetime,
    persona: Optional[Persona] = None,
    unlocks_count: int = 0,
) -> list[tuple[float, str]]:
    """Return every contributing (points, reason) pair for ``task``."""

    features = extract_features(task, now)
    components: list[tuple[float, str]] = []

    if features.has_reminder:
        components.append((REMINDER_POINTS, f"Has a deadline ({_fmt(REMINDER_POINTS)})"))
    if features.due_within_24h:
        components.append((DUE_SOON_POINTS, f"Due within 24 hours ({_fmt(DUE_SOON_POINTS)})"))
    if features.is_overdue:
        components.append((OVERDUE_POINTS, f"Overdue ({_fmt(OVERDUE_POINTS)})"))

    if features.category in HIGH_PRIORITY_CATEGORIES:
        components.append(
            (HIGH_PRIORITY_CATEGORY_POINTS, f"High priority category ({_fmt(HIGH_PRIORITY_CATEGORY_POINTS)})")
        )

    if persona is not None:
        components.extend(_persona_components(features, persona))

    if features.word_count <= MANAGEABLE_WORD_LIMIT:
        components.append((MANAGEABLE_POINTS, f"Manageable complexity ({_fmt(MANAGEABLE_POINTS)})"))
    else:
        components.append((LONG_TITLE_POINTS, f"Longer task description ({_fmt(LONG_TITLE_POINTS)})"))

    if unlocks_count > 0:
        points = min(unlocks_count * UNLOCK_POINTS_PER_TASK, UNLOCK_POINTS_CAP)
        components.append((points, f"Unlocks {unlocks_count} tasks ({_fmt(points)})"))

    if int(features.age_days) > OLD_TASK_DAYS:
        components.append((OLD_TASK_POINTS, f"Older task ({_fmt(OLD_TASK_POINTS)})"))

    if features.is_tiny:
        components.append((TINY_TASK_POINTS, f"Tiny task ({_fmt(TINY_TASK_POINTS)})"))

    if features.is_completed:
        components.append((COMPLETED_POINTS, f"Already completed ({_fmt(COMPLETED_POINTS)})"))

    start, end = WORK_HOURS
    if features.category == WORK_CATEGORY and start <= now.hour < end:
        components.append((WORK_HOURS_POINTS, f"Work task during work hours ({_fmt(WORK_HOURS_POINTS)})"))

    return components


def score_task(
    task: Task,
    now: datetime,
    persona: Optional[Persona] = None,
    unlocks_count: int = 0,
) -> PriorityResult:
    """Score a single task and bucket it."""

    components = score_components(task, now, persona=persona, unlocks_count=unlocks_count)
    score = sum(points for points, _ in components)
    return PriorityResult(
        task_id=task.id,
        score=score,
        bucket=bucket_for(score),
        reasons=tuple(reason for _, reason in components),
    )


def compute_priorities(
    tasks: Iterable[Task],
    now: datetime,
    persona: Optional[Persona] = None,
    unlocks: Optional[Mapping[str, int]] = None,
) -> list[PriorityResult]:
    """Score every task; highest score first, input order kept on ties."""

    unlocks = unlocks or {}
    results = [
        score_task(task, now, persona=persona, unlocks_count=int(unlocks.get(task.id, 0)))
        for task in tasks
    ]
    return sorted(results, key=lambda result: -result.score)


def select_focus_task(results: Iterable[PriorityResult]) -> Optional[PriorityResult]:
    """Pick the highest-scoring result that clears the focus gate.

    Returns ``None`` when no result scores at least ``FOCUS_SELECTION_THRESHOLD``.
    """

    best: Optional[PriorityResult] = None
    for result in results:
        if result.score < FOCUS_SELECTION_THRESHOLD:
            continue
        if best is None or result.score > best.score:
            best = result
    return best


def choose_focus_task(
    tasks: Iterable[Task],
    now: datetime,
    persona: Optional[Persona] = None,
    unlocks: Optional[Mapping[str, int]] = None,
) -> Optional[PriorityResult]:
    """Score the open tasks and select today's single focus task."""

    open_tasks = [task for task in tasks if not task.completed]
    return select_focus_task(compute_priorities(open_tasks, now, persona=persona, unlocks=unlocks))
