from datetime import datetime, timedelta

from task_intelligence.domino import (
    analyze_domino_effect,
    candidate_pool,
    classify_relationship,
    extract_components,
    keyword_overlap,
    unlock_counts,
)
from task_intelligence.schema import Task

NOW = datetime(2025, 1, 15, 10, 0)


def make_task(task_id, title, minutes_ago=60, **overrides):
    return Task(id=task_id, title=title, created_at=NOW - timedelta(minutes=minutes_ago), **overrides)


def test_blocking_language_is_directional():
    schema = make_task("a", "Design the database schema")
    api = make_task("b", "Once schema is designed, implement the API")

    forward = classify_relationship(schema, api)
    assert forward.kind == "blocker"
    assert forward.confidence == 0.9

    backward = classify_relationship(api, schema)
    assert backward is None or backward.kind not in ("blocker", "prerequisite")


def test_prerequisite_verb_pairs_with_shared_noun():
    focus = make_task("a", "Setup staging server")
    follow = make_task("b", "Configure staging monitoring")
    relationship = classify_relationship(focus, follow)
    assert relationship.kind == "prerequisite"
    assert relationship.confidence == 0.8


def test_prerequisite_requires_shared_noun():
    focus = make_task("a", "Setup staging server")
    other = make_task("b", "Configure mailbox filters")
    assert classify_relationship(focus, other) is None


def test_extract_components():
    components = extract_components("Write the launch announcement")
    assert components.verbs == frozenset({"write"})
    assert components.nouns == ("launch", "announcement")


def test_keyword_overlap_jaccard():
    assert keyword_overlap({"budget", "q3", "finance"}, {"Budget", "q3", "report"}) == 0.5
    assert keyword_overlap(set(), {"budget"}) == 0.0


def test_keyword_related_uses_similarity_as_confidence():
    focus = make_task("a", "Review numbers", keywords=frozenset({"budget", "q3", "finance"}))
    other = make_task("b", "Share slides", keywords=frozenset({"budget", "q3", "report"}))
    relationship = classify_relationship(focus, other)
    assert relationship.kind == "related"
    assert relationship.confidence == 0.5


def test_same_category_fallback():
    focus = make_task("a", "Vacuum hallway", category="home")
    other = make_task("b", "Water plants", category="home")
    relationship = classify_relationship(focus, other)
    assert relationship.kind == "related"
    assert relationship.confidence == 0.5


def test_empty_pool_reports_no_open_tasks():
    focus = make_task("a", "Design the database schema")
    result = analyze_domino_effect(focus, [])
    assert result.unlocks_count == 0
    assert result.unlocked_tasks == ()
    assert result.reasoning == ("No other open tasks",)
    assert result.to_dict() == {
        "focus_task_id": "a",
        "unlocks_count": 0,
        "unlocked_tasks": [],
        "reasoning": ["No other open tasks"],
    }


def test_pool_excludes_focus_and_completed():
    focus = make_task("a", "Design the database schema")
    done = make_task("b", "After schema, seed data", completed=True)
    result = analyze_domino_effect(focus, [focus, done])
    assert result.reasoning == ("No other open tasks",)


def test_results_sorted_and_only_dependencies_unlock():
    focus = make_task("a", "Design the database schema", category="projects")
    tasks = [
        make_task("related", "Pick a project name", minutes_ago=10, category="projects"),
        make_task("blocked", "Once schema is designed, implement the API", minutes_ago=20),
        make_task("unrelated", "Buy milk", minutes_ago=30),
    ]
    result = analyze_domino_effect(focus, tasks)

    assert [item.task_id for item in result.unlocked_tasks] == ["blocked", "related"]
    assert [item.relationship for item in result.unlocked_tasks] == ["blocker", "related"]
    assert result.unlocks_count == 1
    assert result.reasoning == ('Directly blocks "Once schema is designed, implement the API"',)
    assert result.summary() == "Completing this will unlock 1 related task."


def test_standalone_task_reasoning():
    focus = make_task("a", "Call the dentist")
    result = analyze_domino_effect(focus, [make_task("b", "Buy milk")])
    assert result.unlocks_count == 0
    assert result.reasoning == ("Standalone task with no direct dependencies",)
    assert result.summary() == ""


def test_cluster_relationship():
    focus = make_task("a", "Draft press release")
    other = make_task("b", "Book venue")
    result = analyze_domino_effect(focus, [other], clusters={"a": "launch", "b": "launch"})
    assert result.unlocked_tasks[0].relationship == "cluster"
    assert result.reasoning[0] == 'Part of "launch" cluster'
    assert result.unlocks_count == 0


def test_duplicate_candidates_are_reported_once():
    focus = make_task("a", "Vacuum hallway", category="home")
    twin = make_task("b", "Water plants", category="home")
    result = analyze_domino_effect(focus, [twin, twin])
    assert len(result.unlocked_tasks) == 1


def test_candidate_pool_keeps_newest():
    focus = make_task("focus", "Vacuum hallway", category="home")
    tasks = [make_task(f"t{i}", "Water plants", minutes_ago=i, category="home") for i in range(60)]
    pool = candidate_pool(focus, tasks, pool_size=50)
    assert len(pool) == 50
    assert pool[0].id == "t0"
    assert "t59" not in {task.id for task in pool}
    assert len(analyze_domino_effect(focus, tasks).unlocked_tasks) == 50


def test_unlock_counts_feed_priority():
    schema = make_task("a", "Design the database schema")
    api = make_task("b", "Once schema is designed, implement the API")
    counts = unlock_counts([schema, api])
    assert counts == {"a": 1, "b": 0}
