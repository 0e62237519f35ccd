"""Core record and result schema for the task intelligence engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

RECURRENCE_NONE = "none"
RECURRENCE_PATTERNS = ("daily", "weekly", "monthly")

BUCKETS = ("must", "should", "could")
RELATIONSHIPS = ("blocker", "prerequisite", "related", "cluster")
RISK_TIERS = ("low", "medium", "high")


@dataclass(frozen=True)
class Task:
    """Normalized task record read by every analyzer."""

    id: str
    title: str
    created_at: datetime
    category: Optional[str] = None
    completed: bool = False
    completed_at: Optional[datetime] = None
    reminder_time: Optional[datetime] = None
    recurrence_pattern: str = RECURRENCE_NONE
    recurrence_day: Optional[int] = None
    recurrence_end_date: Optional[date] = None
    is_tiny: bool = False
    keywords: frozenset[str] = frozenset()
    has_person_name: bool = False

    @property
    def is_recurring(self) -> bool:
        return bool(self.recurrence_pattern) and self.recurrence_pattern != RECURRENCE_NONE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "created_at": self.created_at.isoformat(),
            "completed": self.completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "reminder_time": self.reminder_time.isoformat() if self.reminder_time else None,
            "recurrence_pattern": self.recurrence_pattern,
            "recurrence_day": self.recurrence_day,
            "recurrence_end_date": self.recurrence_end_date.isoformat() if self.recurrence_end_date else None,
            "is_tiny": self.is_tiny,
            "keywords": sorted(self.keywords),
            "has_person_name": self.has_person_name,
        }


@dataclass(frozen=True)
class JournalEntry:
    """Journal record; content is free text."""

    id: str
    content: str
    created_at: datetime
    mood: Optional[str] = None


@dataclass(frozen=True)
class Persona:
    """Immutable per-request snapshot of a user's focus persona."""

    preference_domains: dict[str, float] = field(default_factory=dict)
    avoidance_profile: dict[str, float] = field(default_factory=dict)
    ambition: float = 0.5
    momentum: float = 0.5

    def __post_init__(self) -> None:
        # Keys are compared against normalized task categories.
        for name in ("preference_domains", "avoidance_profile"):
            weights = getattr(self, name)
            object.__setattr__(self, name, {str(key).strip().lower(): value for key, value in weights.items()})


@dataclass(frozen=True)
class PriorityResult:
    task_id: str
    score: float
    bucket: str
    reasons: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "score": self.score,
            "bucket": self.bucket,
            "reasons": list(self.reasons),
        }


@dataclass(frozen=True)
class UnlockedTask:
    task_id: str
    title: str
    relationship: str
    confidence: float

    def to_dict(self) -> dict:
        return {
            "id": self.task_id,
            "title": self.title,
            "relationship": self.relationship,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class DominoResult:
    """Tasks related to a focus task, blockers and prerequisites first."""

    focus_task_id: str
    unlocks_count: int
    unlocked_tasks: tuple[UnlockedTask, ...]
    reasoning: tuple[str, ...]

    def summary(self) -> str:
        """One-line description of how many tasks completion unlocks."""

        if self.unlocks_count == 0:
            return ""
        if self.unlocks_count == 1:
            return "Completing this will unlock 1 related task."
        return f"Completing this will unlock {self.unlocks_count} related tasks."

    def to_dict(self) -> dict:
        return {
            "focus_task_id": self.focus_task_id,
            "unlocks_count": self.unlocks_count,
            "unlocked_tasks": [task.to_dict() for task in self.unlocked_tasks],
            "reasoning": list(self.reasoning),
        }


@dataclass(frozen=True)
class LoadForecastEntry:
    date: date
    expected_load_score: int
    task_count: int
    deadline_count: int
    recurrence_count: int
    cluster_density: dict[str, int]
    recommended_focus_task: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "expected_load_score": self.expected_load_score,
            "task_count": self.task_count,
            "deadline_count": self.deadline_count,
            "recurrence_count": self.recurrence_count,
            "cluster_density": dict(self.cluster_density),
            "recommended_focus_task": self.recommended_focus_task,
        }


@dataclass(frozen=True)
class LoadForecast:
    """Per-day load records keyed by date, plus data-quality warnings."""

    entries_by_date: dict[date, LoadForecastEntry]
    warnings: tuple[str, ...] = ()

    def for_date(self, day: date) -> Optional[LoadForecastEntry]:
        return self.entries_by_date.get(day)

    def ranked(self) -> list[LoadForecastEntry]:
        """Entries sorted by load score, highest first, then by date."""

        return sorted(self.entries_by_date.values(), key=lambda e: (-e.expected_load_score, e.date))

    def upcoming_storms(self, days_ahead: int = 7, threshold: int = 60) -> list[LoadForecastEntry]:
        """High-load days within the first ``days_ahead`` days, in date order."""

        days = sorted(self.entries_by_date)
        if not days:
            return []
        first = days[0]
        return [
            self.entries_by_date[day]
            for day in days
            if (day - first).days <= days_ahead and self.entries_by_date[day].expected_load_score >= threshold
        ]

    def to_dict(self) -> dict:
        return {
            "entries": [entry.to_dict() for entry in self.ranked()],
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class BurnoutAssessment:
    risk: str
    score: int
    factors: tuple[str, ...]

    def to_dict(self) -> dict:
        return {"risk": self.risk, "score": self.score, "factors": list(self.factors)}


@dataclass(frozen=True)
class PatternSummary:
    category_distribution: dict[str, int]
    peak_hours: tuple[int, ...]
    recurring_titles: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "category_distribution": dict(self.category_distribution),
            "peak_hours": list(self.peak_hours),
            "recurring_titles": list(self.recurring_titles),
        }


@dataclass(frozen=True)
class JournalInsight:
    sentiment: dict[str, int]
    themes: tuple[str, ...]
    total_entries: int
    moods: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "sentiment": dict(self.sentiment),
            "themes": list(self.themes),
            "total_entries": self.total_entries,
            "moods": dict(self.moods),
        }


@dataclass(frozen=True)
class TinyTaskClassification:
    is_tiny: bool
    confidence: float
    reason: str
