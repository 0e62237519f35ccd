"""CSV adapter for task exports."""

from __future__ import annotations

import csv

from task_intelligence.adapters.json_adapter import parse_task
from task_intelligence.errors import InvalidInput
from task_intelligence.schema import Task

_REQUIRED_COLUMNS = {"id", "title", "created_at"}


def parse(file_path: str) -> list[Task]:
    """Parse a CSV task export; ``keywords`` is a ``;``-separated column."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        missing = sorted(_REQUIRED_COLUMNS - set(reader.fieldnames))
        if missing:
            raise InvalidInput(f"CSV header is missing columns {missing}")

        return [parse_task(dict(row), row_number) for row_number, row in enumerate(reader, start=2)]
