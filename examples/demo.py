"""Demo script for task-intelligence."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from task_intelligence.dispatcher import Dispatcher


def main() -> None:
    data = json.loads(Path("examples/sample_tasks.json").read_text(encoding="utf-8"))
    tasks = data["tasks"]
    now = "2025-01-15T10:00:00"

    with Dispatcher() as engine:
        for kind in ("compute_priorities", "select_focus", "forecast_load", "detect_burnout"):
            response = engine.handle({"kind": kind, "payload": {"tasks": tasks, "entries": data["entries"], "now": now}})
            print(kind, json.dumps(response.get("result", response), indent=2))

        domino = engine.handle({"kind": "domino_effect", "payload": {"task": tasks[0], "tasks": tasks}})
        print("domino_effect", json.dumps(domino["result"], indent=2))

        insights = engine.handle({"kind": "generate_insights", "payload": {"entries": data["entries"]}})
        print("generate_insights", json.dumps(insights["result"], indent=2))


if __name__ == "__main__":
    main()
