"""JSON adapter: validate raw task, journal and persona records."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Optional

from task_intelligence.errors import InvalidInput
from task_intelligence.schema import RECURRENCE_NONE, JournalEntry, Persona, Task

_REQUIRED_TASK_FIELDS = ("id", "title", "created_at")
_REQUIRED_JOURNAL_FIELDS = ("id", "content", "created_at")
_TRUE_STRINGS = {"true", "1", "yes", "y"}
_FALSE_STRINGS = {"false", "0", "no", "n", ""}


def parse_timestamp(value: Any, label: str, field_name: str) -> datetime:
    """Parse an ISO-8601 timestamp; offset-aware values become local naive time."""

    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            text = str(value).strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
        except Exception as exc:  # noqa: BLE001
            raise InvalidInput(f"{label}: malformed {field_name}") from exc

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _optional_timestamp(item: dict, key: str, label: str) -> Optional[datetime]:
    value = item.get(key)
    if value in (None, ""):
        return None
    return parse_timestamp(value, label, key)


def _optional_date(item: dict, key: str, label: str) -> Optional[date]:
    value = item.get(key)
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except Exception as exc:  # noqa: BLE001
        raise InvalidInput(f"{label}: malformed {key}") from exc


def _parse_bool(value: Any, label: str, key: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise InvalidInput(f"{label}: invalid boolean for {key}")


def _parse_keywords(value: Any, label: str) -> frozenset[str]:
    if value in (None, ""):
        return frozenset()
    if isinstance(value, str):
        value = value.split(";")
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise InvalidInput(f"{label}: keywords must be a list of strings")
    return frozenset(str(keyword).strip().lower() for keyword in value if str(keyword).strip())


def _missing(item: dict, required: tuple[str, ...]) -> list[str]:
    return [field for field in required if item.get(field) in (None, "")]


def parse_task(item: Any, index: int = 1) -> Task:
    """Validate a raw task mapping and build a ``Task``."""

    label = f"Task {index}"
    if not isinstance(item, dict):
        raise InvalidInput(f"{label}: expected an object")
    missing = _missing(item, _REQUIRED_TASK_FIELDS)
    if missing:
        raise InvalidInput(f"{label}: missing required fields {missing}")

    recurrence_day = item.get("recurrence_day")
    if recurrence_day not in (None, ""):
        try:
            recurrence_day = int(recurrence_day)
        except Exception as exc:  # noqa: BLE001
            raise InvalidInput(f"{label}: invalid recurrence_day") from exc
    else:
        recurrence_day = None

    category = item.get("category")
    category = str(category).strip() if category not in (None, "") else None

    return Task(
        id=str(item["id"]).strip(),
        title=str(item["title"]),
        created_at=parse_timestamp(item["created_at"], label, "created_at"),
        category=category,
        completed=_parse_bool(item.get("completed"), label, "completed"),
        completed_at=_optional_timestamp(item, "completed_at", label),
        reminder_time=_optional_timestamp(item, "reminder_time", label),
        recurrence_pattern=str(item.get("recurrence_pattern") or RECURRENCE_NONE).strip().lower(),
        recurrence_day=recurrence_day,
        recurrence_end_date=_optional_date(item, "recurrence_end_date", label),
        is_tiny=_parse_bool(item.get("is_tiny", item.get("is_tiny_task")), label, "is_tiny"),
        keywords=_parse_keywords(item.get("keywords"), label),
        has_person_name=_parse_bool(item.get("has_person_name"), label, "has_person_name"),
    )


def parse_journal_entry(item: Any, index: int = 1) -> JournalEntry:
    """Validate a raw journal mapping and build a ``JournalEntry``."""

    label = f"Journal entry {index}"
    if not isinstance(item, dict):
        raise InvalidInput(f"{label}: expected an object")
    missing = [field for field in _REQUIRED_JOURNAL_FIELDS if item.get(field) is None]
    if missing:
        raise InvalidInput(f"{label}: missing required fields {missing}")

    mood = item.get("mood")
    return JournalEntry(
        id=str(item["id"]).strip(),
        content=str(item["content"]),
        created_at=parse_timestamp(item["created_at"], label, "created_at"),
        mood=str(mood).strip() if mood else None,
    )


def _weights(value: Any, key: str) -> dict[str, float]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidInput(f"Persona: {key} must be an object")
    return {str(name).strip().lower(): _unit_interval(weight, f"{key}.{name}") for name, weight in value.items()}


def _unit_interval(value: Any, key: str) -> float:
    try:
        number = float(value)
    except Exception as exc:  # noqa: BLE001
        raise InvalidInput(f"Persona: {key} must be a number") from exc
    if not 0.0 <= number <= 1.0:
        raise InvalidInput(f"Persona: {key} must be within [0, 1]")
    return number


def parse_persona(item: Any) -> Optional[Persona]:
    """Build an immutable ``Persona`` snapshot; ``None`` passes through."""

    if item is None:
        return None
    if not isinstance(item, dict):
        raise InvalidInput("Persona: expected an object")
    return Persona(
        preference_domains=_weights(item.get("preference_domains"), "preference_domains"),
        avoidance_profile=_weights(item.get("avoidance_profile"), "avoidance_profile"),
        ambition=_unit_interval(item.get("ambition", 0.5), "ambition"),
        momentum=_unit_interval(item.get("momentum", 0.5), "momentum"),
    )


def parse_tasks(items: Any) -> list[Task]:
    if not isinstance(items, list):
        raise InvalidInput("tasks must be a list of objects")
    return [parse_task(item, i) for i, item in enumerate(items, start=1)]


def parse_journal(items: Any) -> list[JournalEntry]:
    if not isinstance(items, list):
        raise InvalidInput("journal entries must be a list of objects")
    return [parse_journal_entry(item, i) for i, item in enumerate(items, start=1)]


def parse(file_path: str) -> list[Task]:
    """Parse a JSON export of task records."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if isinstance(payload, dict):
        payload = payload.get("tasks")
    return parse_tasks(payload)


def parse_journal_file(file_path: str) -> list[JournalEntry]:
    """Parse a JSON export of journal entries."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if isinstance(payload, dict):
        payload = payload.get("entries", payload.get("journal"))
    return parse_journal(payload)
