"""Tests for theme, context-word and 2-gram extraction."""

from __future__ import annotations

from entries import MoodEntry
from text_features import extract_bigrams, extract_themes, find_common_context_words


def _entry(reflection: str | None, mood: int = 3) -> MoodEntry:
    return MoodEntry(
        id=None, mood_value=mood, mood_label="Neutral", timestamp="2026-03-02T10:00:00", reflection=reflection
    )


def test_themes_in_fixed_order() -> None:
    text = "Spent money on a party after the project deadline"
    assert extract_themes(text) == ["work", "social", "finance"]


def test_themes_empty_text() -> None:
    assert extract_themes("") == []
    assert extract_themes(None) == []
    assert extract_themes("just a quiet day") == []


def test_context_words_count_every_occurrence() -> None:
    entries = [
        _entry("Work, work and more work."),
        _entry("Family dinner after work"),
        _entry(None),
    ]
    assert find_common_context_words(entries) == [("work", 4), ("family", 1)]


def test_context_words_ignore_non_vocabulary() -> None:
    assert find_common_context_words([_entry("lovely sunset by the lake")]) == []


def test_context_words_top_five_only() -> None:
    entries = [_entry("work job boss meeting deadline project family")]
    assert len(find_common_context_words(entries)) == 5


def test_bigrams_keep_recurring_phrases() -> None:
    entries = [
        _entry("I feel so tired today"),
        _entry("so tired of everything"),
        _entry("I feel okay"),
    ]
    assert extract_bigrams(entries) == {"so tired": 2}


def test_bigrams_respect_entry_cap() -> None:
    entries = [_entry("long day"), _entry("long day"), _entry("long day")]
    assert extract_bigrams(entries, max_entries=1) == {}
    assert extract_bigrams(entries, max_entries=2) == {"long day": 2}
    assert extract_bigrams(entries, max_entries=None) == {"long day": 3}


def test_bigrams_respect_word_cap() -> None:
    entries = [_entry("alpha beta gamma delta"), _entry("alpha beta gamma delta")]
    assert extract_bigrams(entries, max_words=2) == {"alpha beta": 2}
