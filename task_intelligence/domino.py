"""Lexical dependency analysis between a focus task and other open tasks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from task_intelligence.lexicon import (
    BLOCKING_PHRASES,
    DEPENDENCY_VERBS,
    NOUN_STOPWORDS,
    PREREQUISITE_PAIRS,
)
from task_intelligence.schema import DominoResult, Task, UnlockedTask

logger = logging.getLogger(__name__)

CANDIDATE_POOL_SIZE = 50
MIN_MENTION_LENGTH = 3
JACCARD_THRESHOLD = 0.4

BLOCKER_CONFIDENCE = 0.9
PREREQUISITE_CONFIDENCE = 0.8
CATEGORY_CONFIDENCE = 0.5
CLUSTER_CONFIDENCE = 0.5

_RELATIONSHIP_ORDER = {"blocker": 0, "prerequisite": 1, "related": 2, "cluster": 3}
_UNLOCKING = frozenset({"blocker", "prerequisite"})


@dataclass(frozen=True)
class TitleComponents:
    verbs: frozenset[str]
    nouns: tuple[str, ...]


@dataclass(frozen=True)
class Relationship:
    kind: str
    confidence: float


def extract_components(title: str) -> TitleComponents:
    """Split a title into dictionary verbs and candidate nouns."""

    lowered = title.lower()
    verbs = frozenset(verb for verb in DEPENDENCY_VERBS if verb in lowered)
    nouns = tuple(
        word.lower()
        for word in title.split()
        if len(word) > 3 and word.lower() not in DEPENDENCY_VERBS and word.lower() not in NOUN_STOPWORDS
    )
    return TitleComponents(verbs=verbs, nouns=nouns)


def keyword_overlap(first: Iterable[str], second: Iterable[str]) -> float:
    """Jaccard similarity of two keyword collections, case-insensitive."""

    set1 = {keyword.lower() for keyword in first}
    set2 = {keyword.lower() for keyword in second}
    if not set1 or not set2:
        return 0.0
    return len(set1 & set2) / len(set1 | set2)


def _mentions(focus: Task, candidate_lower: str) -> bool:
    return any(len(word) > MIN_MENTION_LENGTH and word in candidate_lower for word in focus.title.lower().split())


def _shares_noun(first: tuple[str, ...], second: tuple[str, ...]) -> bool:
    return any(n1 in n2 or n2 in n1 for n1 in first for n2 in second)


def classify_relationship(
    focus: Task,
    candidate: Task,
    clusters: Optional[Mapping[str, str]] = None,
) -> Optional[Relationship]:
    """Classify how ``candidate`` depends on ``focus``; ``None`` if unrelated.

    The relation is directional: a blocker or prerequisite here means finishing
    ``focus`` unblocks ``candidate``, not the other way round.
    """

    candidate_lower = candidate.title.lower()
    if any(phrase in candidate_lower for phrase in BLOCKING_PHRASES) and _mentions(focus, candidate_lower):
        return Relationship("blocker", BLOCKER_CONFIDENCE)

    focus_parts = extract_components(focus.title)
    candidate_parts = extract_components(candidate.title)
    for prereq_verb, followups in PREREQUISITE_PAIRS.items():
        if prereq_verb not in focus_parts.verbs or not (candidate_parts.verbs & followups):
            continue
        if _shares_noun(focus_parts.nouns, candidate_parts.nouns):
            return Relationship("prerequisite", PREREQUISITE_CONFIDENCE)

    overlap = keyword_overlap(focus.keywords, candidate.keywords)
    if overlap > JACCARD_THRESHOLD:
        return Relationship("related", overlap)

    if focus.category and candidate.category and focus.category == candidate.category:
        return Relationship("related", CATEGORY_CONFIDENCE)

    if clusters:
        label = clusters.get(focus.id)
        if label is not None and clusters.get(candidate.id) == label:
            return Relationship("cluster", CLUSTER_CONFIDENCE)

    return None


def candidate_pool(focus: Task, tasks: Iterable[Task], pool_size: int = CANDIDATE_POOL_SIZE) -> list[Task]:
    """Most recent open tasks other than ``focus``, newest first."""

    open_tasks = [task for task in tasks if not task.completed and task.id != focus.id]
    return sorted(open_tasks, key=lambda task: task.created_at, reverse=True)[:pool_size]


def analyze_domino_effect(
    focus: Task,
    tasks: Iterable[Task],
    clusters: Optional[Mapping[str, str]] = None,
    pool_size: int = CANDIDATE_POOL_SIZE,
) -> DominoResult:
    """Find the open tasks that completing ``focus`` would unblock or advance."""

    pool = candidate_pool(focus, tasks, pool_size=pool_size)
    if not pool:
        return DominoResult(focus_task_id=focus.id, unlocks_count=0, unlocked_tasks=(), reasoning=("No other open tasks",))

    logger.debug("Analyzing domino effect for %r against %d tasks", focus.title, len(pool))

    reasoning: list[str] = []
    focus_cluster = clusters.get(focus.id) if clusters else None
    if focus_cluster:
        reasoning.append(f'Part of "{focus_cluster}" cluster')

    seen: set[str] = set()
    unlocked: list[UnlockedTask] = []
    for candidate in pool:
        if candidate.id in seen:
            continue
        relationship = classify_relationship(focus, candidate, clusters=clusters)
        if relationship is None:
            continue
        seen.add(candidate.id)
        unlocked.append(
            UnlockedTask(
                task_id=candidate.id,
                title=candidate.title,
                relationship=relationship.kind,
                confidence=relationship.confidence,
            )
        )
        if relationship.kind == "blocker":
            reasoning.append(f'Directly blocks "{candidate.title}"')
        elif relationship.kind == "prerequisite":
            reasoning.append(f'Prerequisite for "{candidate.title}"')

    unlocked.sort(key=lambda item: _RELATIONSHIP_ORDER[item.relationship])
    unlocks_count = sum(1 for item in unlocked if item.relationship in _UNLOCKING)

    if not unlocked:
        reasoning.append("Standalone task with no direct dependencies")
    elif unlocks_count:
        logger.debug("Domino effect: %r unlocks %d tasks", focus.title, unlocks_count)

    return DominoResult(
        focus_task_id=focus.id,
        unlocks_count=unlocks_count,
        unlocked_tasks=tuple(unlocked),
        reasoning=tuple(reasoning),
    )


def unlock_counts(tasks: Iterable[Task], pool_size: int = CANDIDATE_POOL_SIZE) -> dict[str, int]:
    """Unlock count for every open task, for feeding into priority scoring."""

    task_list = list(tasks)
    return {
        task.id: analyze_domino_effect(task, task_list, pool_size=pool_size).unlocks_count
        for task in task_list
        if not task.completed
    }
