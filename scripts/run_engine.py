"""Run one analyzer over a CSV/JSON task export."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from task_intelligence.adapters import csv_adapter, json_adapter
from task_intelligence.config import load_config
from task_intelligence.dispatcher import Dispatcher


def _load_tasks(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(str(path))
    if suffix == ".json":
        return json_adapter.parse(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")


def _build_payload(args: argparse.Namespace) -> dict:
    tasks = [task.to_dict() for task in _load_tasks(Path(args.data))] if args.data else []
    payload: dict = {"tasks": tasks}
    if args.journal:
        payload["entries"] = [
            {"id": entry.id, "content": entry.content, "created_at": entry.created_at.isoformat(), "mood": entry.mood}
            for entry in json_adapter.parse_journal_file(args.journal)
        ]
    if args.now:
        payload["now"] = args.now
    if args.kind == "domino_effect":
        focus = next((task for task in tasks if task["id"] == args.focus_id), None)
        if focus is None:
            raise ValueError(f"--focus-id '{args.focus_id}' not found in {args.data}")
        payload["task"] = focus
    return payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a task-intelligence analyzer")
    parser.add_argument("--kind", required=True, help="Request kind, e.g. compute_priorities")
    parser.add_argument("--data", help="Path to CSV/JSON tasks file")
    parser.add_argument("--journal", help="Path to JSON journal file")
    parser.add_argument("--focus-id", help="Focus task id for domino_effect")
    parser.add_argument("--now", help="ISO timestamp to evaluate against")
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args()

    config = load_config(args.config)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with Dispatcher(config=config) as engine:
        response = engine.handle({"kind": args.kind, "payload": _build_payload(args)})

    print(json.dumps(response, indent=2))
    if "error" in response:
        sys.exit(1)


if __name__ == "__main__":
    main()
