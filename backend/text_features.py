"""Keyword themes, contextual nouns and recurring 2-grams from reflections."""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, Optional

from entries import MoodEntry

THEME_KEYWORDS: dict[str, tuple[str, ...]] = {
    "work": ("work", "job", "boss", "colleague", "meeting", "deadline", "project"),
    "family": ("family", "parent", "sibling", "child", "partner", "spouse"),
    "health": ("health", "sick", "tired", "sleep", "exercise", "pain"),
    "social": ("friend", "party", "event", "people", "social"),
    "finance": ("money", "bill", "expense", "budget", "financial"),
}

CONTEXT_WORDS = frozenset({
    "work", "job", "boss", "colleague", "meeting", "deadline", "project",
    "family", "partner", "friend", "relationship", "parent", "child",
    "school", "study", "exam", "homework", "teacher", "class",
    "money", "financial", "bills", "budget", "expense", "income",
    "health", "sick", "tired", "sleep", "doctor", "pain",
    "weather", "rain", "sunny", "cold", "hot",
    "home", "house", "apartment", "room", "kitchen",
})

# 2-grams that say nothing on their own
STOP_PHRASES = frozenset({"i am", "i feel", "it was", "to be", "and i", "in the", "on the"})

_NON_WORD = re.compile(r"[^\w]")


def extract_themes(text: Optional[str]) -> list[str]:
    """Themes with at least one keyword in ``text``, in THEME_KEYWORDS order."""
    lowered = (text or "").lower()
    if not lowered:
        return []
    return [
        theme
        for theme, keywords in THEME_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    ]


def find_common_context_words(entries: Iterable[MoodEntry], limit: int = 5) -> list[tuple[str, int]]:
    """Most frequent contextual nouns across the entries' reflections.

    Counts every occurrence, so one entry can contribute several times.
    Ties keep first-seen order.
    """
    counts: Counter[str] = Counter()
    for entry in entries:
        if not entry.has_reflection:
            continue
        for word in entry.reflection_text.lower().split():
            clean = _NON_WORD.sub("", word)
            if len(clean) > 2 and clean in CONTEXT_WORDS:
                counts[clean] += 1
    return counts.most_common(limit)


def extract_bigrams(
    entries: Iterable[MoodEntry],
    max_entries: Optional[int] = 30,
    max_words: Optional[int] = 50,
) -> dict[str, int]:
    """Recurring 2-word sequences (count >= 2) minus STOP_PHRASES.

    Only the first ``max_entries`` entries and the first ``max_words``
    words of each reflection are read.
    """
    counts: Counter[str] = Counter()
    for index, entry in enumerate(entries):
        if max_entries is not None and index >= max_entries:
            break
        if not entry.has_reflection:
            continue
        words = entry.reflection_text.lower().split()
        if max_words is not None:
            words = words[:max_words]
        for first, second in zip(words, words[1:]):
            counts[f"{first} {second}"] += 1

    return {
        phrase: count
        for phrase, count in counts.items()
        if count >= 2 and phrase not in STOP_PHRASES
    }
