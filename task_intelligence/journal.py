"""Keyword sentiment and theme extraction for journal entries."""

from __future__ import annotations

import string
from collections import Counter
from typing import Iterable

from task_intelligence.lexicon import NEGATIVE_PATTERN, POSITIVE_PATTERN, THEME_STOPWORDS
from task_intelligence.schema import JournalEntry, JournalInsight

THEME_COUNT = 5
MIN_THEME_LENGTH = 4


def classify_sentiment(content: str) -> str:
    """Return positive, negative or neutral for a single entry."""

    positive = len(POSITIVE_PATTERN.findall(content))
    negative = len(NEGATIVE_PATTERN.findall(content))
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def theme_words(content: str) -> list[str]:
    words = (word.strip(string.punctuation) for word in content.lower().split())
    return [
        word
        for word in words
        if len(word) > MIN_THEME_LENGTH and not word.isdigit() and word not in THEME_STOPWORDS
    ]


def generate_insights(entries: Iterable[JournalEntry]) -> JournalInsight:
    """Sentiment tally and top themes across journal entries."""

    entries = list(entries)
    sentiment = {"positive": 0, "negative": 0, "neutral": 0}
    frequencies: Counter = Counter()
    moods: Counter = Counter()

    for entry in entries:
        sentiment[classify_sentiment(entry.content)] += 1
        frequencies.update(theme_words(entry.content))
        if entry.mood:
            moods[entry.mood] += 1

    return JournalInsight(
        sentiment=sentiment,
        themes=tuple(word for word, _ in frequencies.most_common(THEME_COUNT)),
        total_entries=len(entries),
        moods=dict(moods),
    )
