"""Route typed requests to analyzers and return typed responses.

Every analyzer is a pure function of its payload, so requests can run on a
shared thread pool without locking. Failures never escape ``dispatch``: they
come back as error responses carrying an ``error_type`` code.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional, Union

from task_intelligence.adapters.json_adapter import (
    parse_journal,
    parse_persona,
    parse_task,
    parse_tasks,
    parse_timestamp,
)
from task_intelligence.burnout import detect_burnout
from task_intelligence.categorizer import categorize_batch, needs_category
from task_intelligence.config import EngineConfig
from task_intelligence.domino import analyze_domino_effect
from task_intelligence.errors import AnalyzerFailure, EngineError, InvalidInput, UnknownOperation
from task_intelligence.forecast import forecast_load
from task_intelligence.journal import generate_insights
from task_intelligence.patterns import analyze_patterns
from task_intelligence.priority import choose_focus_task, compute_priorities

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Request:
    kind: str
    payload: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, message: Any) -> "Request":
        if not isinstance(message, dict):
            raise InvalidInput("request must be an object")
        kind = message.get("kind")
        if not isinstance(kind, str) or not kind:
            raise InvalidInput("request is missing 'kind'")
        payload = message.get("payload", {})
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise InvalidInput("payload must be an object")
        return cls(kind=kind, payload=payload)


@dataclass(frozen=True)
class Response:
    kind: Optional[str]
    result: Any = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        if self.ok:
            return {"kind": self.kind, "result": self.result}
        return {"kind": self.kind, "error": self.error, "error_type": self.error_type}


def _require(payload: dict, key: str) -> Any:
    if key not in payload:
        raise InvalidInput(f"payload is missing '{key}'")
    return payload[key]


def _unlocks(payload: dict) -> dict[str, int]:
    raw = payload.get("unlocks") or {}
    if not isinstance(raw, dict):
        raise InvalidInput("unlocks must map task ids to counts")
    try:
        return {str(task_id): int(count) for task_id, count in raw.items()}
    except (TypeError, ValueError) as exc:
        raise InvalidInput("unlocks counts must be integers") from exc


def _clusters(payload: dict) -> dict[str, str]:
    raw = payload.get("clusters") or {}
    if not isinstance(raw, dict):
        raise InvalidInput("clusters must map task ids to labels")
    return {str(task_id): str(label) for task_id, label in raw.items()}


def _journal_payload(payload: dict, *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    raise InvalidInput(f"payload is missing '{keys[0]}'")


class Dispatcher:
    """Validate requests, run the addressed analyzer and wrap the outcome."""

    def __init__(self, config: Optional[EngineConfig] = None, clock: Callable[[], datetime] = datetime.now):
        self.config = config or EngineConfig()
        self._clock = clock
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()
        self._handlers: dict[str, Callable[[dict, datetime], Any]] = {
            "analyze_patterns": self._analyze_patterns,
            "generate_insights": self._generate_insights,
            "categorize_batch": self._categorize_batch,
            "compute_priorities": self._compute_priorities,
            "detect_burnout": self._detect_burnout,
            "domino_effect": self._domino_effect,
            "forecast_load": self._forecast_load,
            "select_focus": self._select_focus,
        }

    @property
    def kinds(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def dispatch(self, request: Union[Request, dict]) -> Response:
        """Run one request synchronously; never raises."""

        if isinstance(request, Request):
            kind, message = request.kind, {"kind": request.kind, "payload": request.payload}
        else:
            kind, message = (request.get("kind") if isinstance(request, dict) else None), request
        if not isinstance(kind, str):
            kind = None

        try:
            request = Request.from_dict(message)
            handler = self._handlers.get(request.kind)
            if handler is None:
                raise UnknownOperation(request.kind)

            payload = request.payload
            now = parse_timestamp(payload["now"], "Request", "now") if payload.get("now") else self._clock()
            logger.debug("Dispatching %s", request.kind)
            result = handler(payload, now)
        except EngineError as exc:
            logger.error("Rejected %s request: %s", kind, exc)
            return Response(kind=kind, error=str(exc), error_type=exc.error_type)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Analyzer %s failed", kind)
            failure = AnalyzerFailure(kind or "request", exc)
            return Response(kind=kind, error=str(failure), error_type=failure.error_type)

        return Response(kind=request.kind, result=result)

    def handle(self, message: dict) -> dict:
        """Transport-friendly form of ``dispatch``: dict in, dict out."""

        return self.dispatch(message).to_dict()

    def submit(self, request: Union[Request, dict]) -> "Future[Response]":
        """Run a request on the worker pool."""

        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.config.max_workers, thread_name_prefix="task-intelligence"
                )
            return self._executor.submit(self.dispatch, request)

    def close(self) -> None:
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self) -> "Dispatcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _analyze_patterns(self, payload: dict, now: datetime) -> dict:
        tasks = parse_tasks(_require(payload, "tasks"))
        return analyze_patterns(tasks).to_dict()

    def _generate_insights(self, payload: dict, now: datetime) -> dict:
        entries = parse_journal(_journal_payload(payload, "entries", "journal"))
        return generate_insights(entries).to_dict()

    def _categorize_batch(self, payload: dict, now: datetime) -> dict:
        tasks = parse_tasks(_require(payload, "tasks"))
        categorized = categorize_batch(tasks)
        changed = sum(1 for before, after in zip(tasks, categorized) if needs_category(before) and after is not before)
        return {"tasks": [task.to_dict() for task in categorized], "categorized_count": changed}

    def _compute_priorities(self, payload: dict, now: datetime) -> list[dict]:
        tasks = parse_tasks(_require(payload, "tasks"))
        persona = parse_persona(payload.get("persona"))
        results = compute_priorities(tasks, now, persona=persona, unlocks=_unlocks(payload))
        return [result.to_dict() for result in results]

    def _select_focus(self, payload: dict, now: datetime) -> dict:
        tasks = parse_tasks(_require(payload, "tasks"))
        persona = parse_persona(payload.get("persona"))
        selected = choose_focus_task(tasks, now, persona=persona, unlocks=_unlocks(payload))
        if selected is None:
            return {"selected": None, "reason": "No suitable task found"}
        return {"selected": selected.to_dict(), "reason": None}

    def _detect_burnout(self, payload: dict, now: datetime) -> dict:
        tasks = parse_tasks(_require(payload, "tasks"))
        journal = parse_journal(payload.get("journal", payload.get("entries", [])))
        return detect_burnout(tasks, journal, now, window_days=self.config.burnout_window_days).to_dict()

    def _domino_effect(self, payload: dict, now: datetime) -> dict:
        focus = parse_task(_require(payload, "task"), 0)
        tasks = parse_tasks(payload.get("tasks", []))
        result = analyze_domino_effect(
            focus, tasks, clusters=_clusters(payload), pool_size=self.config.candidate_pool_size
        )
        return {**result.to_dict(), "summary": result.summary()}

    def _forecast_load(self, payload: dict, now: datetime) -> dict:
        tasks = parse_tasks(_require(payload, "tasks"))
        return forecast_load(tasks, now, days=self.config.forecast_days).to_dict()


def dispatch(request: Union[Request, dict], config: Optional[EngineConfig] = None) -> Response:
    """Dispatch a single request with a throwaway dispatcher."""

    return Dispatcher(config=config).dispatch(request)
