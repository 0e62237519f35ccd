import json
from datetime import date, datetime, timezone

import pytest

from task_intelligence.adapters.csv_adapter import parse as parse_csv
from task_intelligence.adapters.json_adapter import parse as parse_json
from task_intelligence.adapters.json_adapter import (
    parse_journal_file,
    parse_persona,
    parse_task,
    parse_timestamp,
)
from task_intelligence.errors import InvalidInput


def test_csv_parse_success(tmp_path):
    path = tmp_path / "tasks.csv"
    path.write_text(
        "id,title,created_at,category,completed,reminder_time,keywords,is_tiny_task\n"
        "a,Pay rent,2025-01-01T09:00:00,home,false,2025-01-03T09:00:00,rent;bills,yes\n"
        "b,Write report,2025-01-01T10:00:00,,true,,,\n",
        encoding="utf-8",
    )
    tasks = parse_csv(str(path))
    assert len(tasks) == 2
    assert tasks[0].keywords == frozenset({"rent", "bills"})
    assert tasks[0].is_tiny
    assert tasks[0].reminder_time == datetime(2025, 1, 3, 9, 0)
    assert tasks[1].category is None
    assert tasks[1].completed


def test_csv_parse_invalid_row(tmp_path):
    path = tmp_path / "tasks.csv"
    path.write_text("id,title,created_at\na,Pay rent,bad\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Task 2: malformed created_at"):
        parse_csv(str(path))


def test_csv_parse_missing_column(tmp_path):
    path = tmp_path / "tasks.csv"
    path.write_text("id,title\na,Pay rent\n", encoding="utf-8")
    with pytest.raises(InvalidInput, match="created_at"):
        parse_csv(str(path))


def test_json_parse_success(tmp_path):
    path = tmp_path / "tasks.json"
    payload = {
        "tasks": [
            {"id": "a", "title": "Gym", "created_at": "2025-01-01T09:00:00"},
            {
                "id": "b",
                "title": "Water plants",
                "created_at": "2025-01-01T10:00:00",
                "recurrence_pattern": "Weekly",
                "recurrence_day": "3",
                "recurrence_end_date": "2025-03-01",
            },
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    tasks = parse_json(str(path))
    assert len(tasks) == 2
    assert tasks[1].recurrence_pattern == "weekly"
    assert tasks[1].recurrence_day == 3
    assert tasks[1].recurrence_end_date == date(2025, 3, 1)
    assert tasks[1].is_recurring
    assert not tasks[0].is_recurring


def test_json_parse_malformed(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": "a", "title": "x", "created_at": "bad"}]), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_json(str(path))


def test_missing_required_field_names_the_record():
    with pytest.raises(InvalidInput, match=r"Task 4: missing required fields \['title'\]"):
        parse_task({"id": "a", "created_at": "2025-01-01T09:00:00"}, 4)


def test_invalid_boolean_rejected():
    with pytest.raises(InvalidInput, match="completed"):
        parse_task({"id": "a", "title": "x", "created_at": "2025-01-01", "completed": "maybe"})


def test_utc_timestamps_become_local_naive():
    parsed = parse_timestamp("2025-01-01T09:00:00Z", "Task 1", "created_at")
    expected = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parsed.tzinfo is None
    assert parsed == expected


def test_journal_file(tmp_path):
    path = tmp_path / "journal.json"
    payload = {"entries": [{"id": "1", "content": "Tired", "created_at": "2025-01-02T21:00:00", "mood": "low"}]}
    path.write_text(json.dumps(payload), encoding="utf-8")
    entries = parse_journal_file(str(path))
    assert entries[0].mood == "low"
    assert entries[0].created_at == datetime(2025, 1, 2, 21, 0)


def test_parse_persona():
    persona = parse_persona({"preference_domains": {"Home": 0.8}, "ambition": 0.7})
    assert persona.preference_domains == {"home": 0.8}
    assert persona.avoidance_profile == {}
    assert persona.ambition == 0.7
    assert persona.momentum == 0.5
    assert parse_persona(None) is None


def test_persona_weights_must_be_unit_interval():
    with pytest.raises(InvalidInput, match="momentum"):
        parse_persona({"momentum": 1.5})
