import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pytest

from task_intelligence import dispatcher as dispatcher_module
from task_intelligence.config import EngineConfig
from task_intelligence.dispatcher import Dispatcher, Request, Response, dispatch

NOW = datetime(2025, 1, 15, 10, 0)


def sample_tasks():
    return [
        {"id": "a", "title": "Design the database schema", "created_at": "2025-01-14T09:00:00", "category": "projects"},
        {
            "id": "b",
            "title": "Once schema is designed, implement the API",
            "created_at": "2025-01-14T10:00:00",
        },
        {
            "id": "c",
            "title": "Client meeting prep",
            "created_at": "2025-01-10T09:00:00",
            "reminder_time": "2025-01-15T08:00:00",
        },
    ]


@pytest.fixture
def engine():
    with Dispatcher(clock=lambda: NOW) as instance:
        yield instance


def test_kinds_cover_every_analyzer(engine):
    assert set(engine.kinds) == {
        "analyze_patterns",
        "generate_insights",
        "categorize_batch",
        "compute_priorities",
        "detect_burnout",
        "domino_effect",
        "forecast_load",
        "select_focus",
    }


def test_unknown_kind(engine):
    response = engine.handle({"kind": "launch_rocket", "payload": {}})
    assert response == {
        "kind": "launch_rocket",
        "error": "Unknown operation 'launch_rocket'",
        "error_type": "unknown_operation",
    }


def test_non_object_request(engine):
    response = engine.dispatch(["not", "a", "request"])
    assert not response.ok
    assert response.error_type == "invalid_input"
    assert response.kind is None


def test_missing_tasks_is_invalid_input(engine):
    response = engine.dispatch(Request("compute_priorities"))
    assert response.error_type == "invalid_input"
    assert "tasks" in response.error


def test_malformed_date_names_the_task(engine):
    tasks = sample_tasks()
    tasks[1]["created_at"] = "yesterday"
    response = engine.dispatch(Request("compute_priorities", {"tasks": tasks}))
    assert response.error_type == "invalid_input"
    assert response.error == "Task 2: malformed created_at"


def test_analyzer_crash_is_wrapped(engine, monkeypatch):
    def explode(tasks):
        raise RuntimeError("boom")

    monkeypatch.setattr(dispatcher_module, "analyze_patterns", explode)
    response = engine.dispatch(Request("analyze_patterns", {"tasks": []}))
    assert response.error_type == "analyzer_failure"
    assert "boom" in response.error


def test_empty_inputs_return_empty_results(engine):
    assert engine.dispatch(Request("compute_priorities", {"tasks": []})).result == []
    assert engine.dispatch(Request("select_focus", {"tasks": []})).result == {
        "selected": None,
        "reason": "No suitable task found",
    }
    insights = engine.dispatch(Request("generate_insights", {"entries": []})).result
    assert insights["total_entries"] == 0
    forecast = engine.dispatch(Request("forecast_load", {"tasks": []})).result
    assert len(forecast["entries"]) == 14


def test_compute_priorities_uses_clock(engine):
    response = engine.dispatch(Request("compute_priorities", {"tasks": sample_tasks()}))
    assert response.ok
    assert response.result[0]["task_id"] == "c"
    assert "Overdue (+25)" in response.result[0]["reasons"]


def test_payload_now_overrides_clock(engine):
    payload = {"tasks": sample_tasks(), "now": "2025-01-14T09:00:00"}
    result = engine.dispatch(Request("compute_priorities", payload)).result
    top = next(item for item in result if item["task_id"] == "c")
    assert "Due within 24 hours (+15)" in top["reasons"]


def test_domino_effect(engine):
    tasks = sample_tasks()
    response = engine.dispatch(Request("domino_effect", {"task": tasks[0], "tasks": tasks}))
    result = response.result
    assert result["focus_task_id"] == "a"
    assert result["unlocks_count"] == 1
    assert result["unlocked_tasks"][0]["id"] == "b"
    assert result["summary"] == "Completing this will unlock 1 related task."


def test_categorize_batch(engine):
    result = engine.dispatch(Request("categorize_batch", {"tasks": sample_tasks()})).result
    assert result["categorized_count"] == 1
    assert result["tasks"][2]["category"] == "work"
    assert result["tasks"][1]["category"] is None


def test_detect_burnout_accepts_missing_journal(engine):
    result = engine.dispatch(Request("detect_burnout", {"tasks": sample_tasks()})).result
    assert result["risk"] in ("low", "medium", "high")
    assert isinstance(result["factors"], list)


def test_submit_runs_concurrently():
    requests = [Request("forecast_load", {"tasks": sample_tasks()}) for _ in range(8)]
    with Dispatcher(config=EngineConfig(max_workers=4), clock=lambda: NOW) as engine:
        futures = [engine.submit(request) for request in requests]
        responses = [future.result(timeout=10) for future in futures]
    assert all(isinstance(response, Response) and response.ok for response in responses)
    assert len({str(response.result) for response in responses}) == 1


def test_module_level_dispatch():
    response = dispatch({"kind": "analyze_patterns", "payload": {"tasks": sample_tasks()}})
    assert response.ok
    assert response.result["category_distribution"]["inbox"] == 2


def test_directly_built_requests_are_validated(engine):
    missing_payload = engine.dispatch(Request("compute_priorities", None))
    assert missing_payload.error_type == "invalid_input"
    assert "tasks" in missing_payload.error

    bad_kind = engine.dispatch(Request(["x"], {}))
    assert bad_kind.error_type == "invalid_input"
    assert bad_kind.kind is None

    bad_payload = engine.dispatch(Request("forecast_load", ["tasks"]))
    assert bad_payload.error_type == "invalid_input"


def test_concurrent_submits_share_one_pool(monkeypatch):
    created = []

    class CountingExecutor(ThreadPoolExecutor):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    monkeypatch.setattr(dispatcher_module, "ThreadPoolExecutor", CountingExecutor)
    engine = Dispatcher(clock=lambda: NOW)
    start = threading.Barrier(8)

    def submit():
        start.wait()
        return engine.submit(Request("forecast_load", {"tasks": []}))

    with ThreadPoolExecutor(max_workers=8) as callers:
        futures = [future.result(timeout=10) for future in [callers.submit(submit) for _ in range(8)]]
    assert all(future.result(timeout=10).ok for future in futures)
    assert len(created) == 1

    engine.close()
    assert engine._executor is None
