"""Tests for the insight heuristics and the pipeline that runs them."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

import insight_service
from entries import MoodEntry, SentimentResult, sort_recent, with_reflections
from insight_service import (
    contextual_patterns,
    coping_recognition,
    day_of_week_patterns,
    environmental_awareness,
    generate_insights,
    length_variation,
    nuanced_emotions,
    progress_recognition,
    time_of_day_patterns,
    trigger_identification,
)
from insight_types import (
    InsightType,
    MoodInsight,
    Priority,
    RecoveryData,
    ThemeDivergenceData,
    TriggerData,
)

MONDAY = datetime(2026, 3, 2, 12)


def _entry(when: datetime, mood: int, reflection: str | None = None, comparative: float | None = None) -> MoodEntry:
    stamp = when.isoformat()
    sentiment = SentimentResult(comparative=comparative) if comparative is not None else None
    return MoodEntry(
        id=None, mood_value=mood, mood_label="x", timestamp=stamp, created_at=stamp,
        reflection=reflection, sentiment=sentiment,
    )


def _work_trigger_entries() -> list[MoodEntry]:
    reflections = ["work piled up", "stuck at work late", "work stress again", "more work emails", "felt flat"]
    return [
        _entry(MONDAY + timedelta(days=i, hours=8), 2 if i % 2 else 1, text)
        for i, text in enumerate(reflections)
    ]


def test_trigger_scenario() -> None:
    insights = generate_insights(_work_trigger_entries(), now=MONDAY + timedelta(days=5))
    assert len(insights) == 1
    insight = insights[0]
    assert insight.type is InsightType.TRIGGER_IDENTIFICATION
    assert insight.priority is Priority.HIGH
    assert insight.observation == "work seems to be on your mind during tougher days"
    assert insight.data == TriggerData(word="work", frequency=4)


def test_positive_trigger_when_low_days_have_no_common_word() -> None:
    entries = [
        _entry(MONDAY, 1, "felt flat"),
        _entry(MONDAY + timedelta(days=1), 2, "nothing much"),
        _entry(MONDAY + timedelta(days=2), 5, "saw a friend"),
        _entry(MONDAY + timedelta(days=3), 4, "friend came over"),
        _entry(MONDAY + timedelta(days=4), 3, "quiet"),
    ]
    insight = trigger_identification(entries)
    assert insight.observation == "friend often appears in your brighter moments"
    assert insight.data.positive is True


def test_trigger_needs_five_reflections() -> None:
    assert trigger_identification(_work_trigger_entries()[:4]) is None


def test_recovery_scenario() -> None:
    days_and_moods = [(0, 1), (2, 4), (3, 3), (4, 3), (5, 1), (7, 4), (8, 3), (9, 3), (10, 3), (11, 3)]
    entries = [_entry(MONDAY + timedelta(days=d), mood) for d, mood in days_and_moods]
    insight = coping_recognition(entries)
    assert insight.type is InsightType.COPING_RECOGNITION
    assert insight.priority is Priority.HIGH
    assert insight.observation == "You naturally bounce back from difficult moments - usually within 2 days"
    assert insight.data == RecoveryData(average_days=2, instances=2)


def test_recovery_within_a_day() -> None:
    moods = [1, 3, 1, 3, 3, 3, 3, 3, 3, 3]
    entries = [_entry(MONDAY + timedelta(days=i), mood) for i, mood in enumerate(moods)]
    assert coping_recognition(entries).observation.endswith("within 1 day")


def test_slow_recovery_is_not_reported() -> None:
    days_and_moods = [(0, 1), (5, 4), (6, 1), (11, 4)] + [(12 + i, 3) for i in range(6)]
    entries = [_entry(MONDAY + timedelta(days=d), mood) for d, mood in days_and_moods]
    assert coping_recognition(entries) is None


def test_monday_blues() -> None:
    entries = [_entry(MONDAY + timedelta(days=i), 1 if i == 0 else 4) for i in range(7)]
    insight = day_of_week_patterns(entries)
    assert insight.observation == "Mondays tend to be tougher for you"
    assert insight.priority is Priority.MEDIUM
    assert insight.data.lowest_day == "Monday"
    assert insight.data.highest_day == "Sunday"


def test_other_low_day() -> None:
    entries = [_entry(MONDAY + timedelta(days=i), 1 if i == 2 else 4) for i in range(7)]
    insight = day_of_week_patterns(entries)
    assert insight.observation == "Wednesdays tend to be lower energy while Sundays are typically brighter"


def test_flat_week_has_no_day_insight() -> None:
    entries = [_entry(MONDAY + timedelta(days=i), 3) for i in range(7)]
    assert day_of_week_patterns(entries) is None


def test_morning_brighter_than_evening() -> None:
    entries = []
    for day in range(3):
        entries.append(_entry(MONDAY.replace(hour=8) + timedelta(days=day), 3, "morning", 0.5))
        entries.append(_entry(MONDAY.replace(hour=20) + timedelta(days=day), 3, "evening", -0.2))
    insight = time_of_day_patterns(entries)
    assert insight.observation.startswith("Morning check-ins tend to show more forward-looking language")
    assert insight.data.morning_count == 3
    assert insight.data.evening_count == 3


def test_consistency_recognition() -> None:
    entries = [_entry(MONDAY + timedelta(days=i), 3, "ok") for i in range(7)]
    insight = progress_recognition(entries, entries, now=MONDAY + timedelta(days=7))
    assert insight.observation.startswith("You've been consistent with tracking for 7 days")
    assert insight.data.days == 7


def _sparse(reflections: list[str]) -> tuple[list[MoodEntry], datetime]:
    entries = [_entry(MONDAY + timedelta(days=10 * i), 3, text) for i, text in enumerate(reflections)]
    return sort_recent(entries), MONDAY + timedelta(days=10 * len(reflections))


def test_reflection_depth_growth() -> None:
    ordered, now = _sparse(["short note here today"] * 5 + ["a much longer note written about today"] * 5)
    insight = progress_recognition(ordered, with_reflections(ordered), now)
    assert insight.observation.startswith("You're writing more detailed reflections")
    assert insight.data.recent_average_words == 7
    assert insight.data.older_average_words == 4


def test_vocabulary_growth() -> None:
    older = ["fine day again today"] * 5
    recent = [f"alpha{i} beta{i} gamma{i} delta{i}" for i in range(5)]
    ordered, now = _sparse(older + recent)
    insight = progress_recognition(ordered, with_reflections(ordered), now)
    assert insight.priority is Priority.LOW
    assert insight.data.expansion_percent == 400


def test_weekday_and_weekend_topics_diverge() -> None:
    entries = [_entry(MONDAY + timedelta(days=i), 3, "another work day") for i in range(5)]
    entries += [_entry(MONDAY + timedelta(days=5 + i), 4, "time with family") for i in range(2)]
    entries += [_entry(MONDAY + timedelta(days=7 + i), 3) for i in range(3)]
    insight = environmental_awareness(entries)
    assert insight.data == ThemeDivergenceData(weekday_focus="work", weekend_focus="family")


def test_weekend_mood_lift() -> None:
    entries = [_entry(MONDAY + timedelta(days=i), 5 if i % 7 >= 5 else 3) for i in range(10)]
    insight = environmental_awareness(entries)
    assert insight.observation.startswith("Your mood patterns vary between weekdays and weekends")
    assert insight.data.weekend_average == 5.0


def test_length_variation() -> None:
    entries = [
        _entry(MONDAY, 3, "fine day", 0.1),
        _entry(MONDAY + timedelta(days=1), 3, "all good", 0.2),
        _entry(MONDAY + timedelta(days=2), 3, "quite ok", 0.0),
        _entry(MONDAY + timedelta(days=3), 2, "one two three four five six seven eight nine ten", -0.3),
    ]
    insight = length_variation(entries)
    assert insight.type is InsightType.LENGTH_VARIATION
    assert insight.data.average_words == 4.0
    assert insight.data.difficult_long_entries == 1


def test_contextual_patterns() -> None:
    entries = [
        _entry(MONDAY, 2, "my boss again", -0.3),
        _entry(MONDAY + timedelta(days=1), 2, "boss yelled", -0.4),
        _entry(MONDAY + timedelta(days=2), 4, "boss was nice", 0.3),
    ]
    insight = contextual_patterns(entries)
    assert insight.observation == "boss comes up often during more challenging times"
    assert insight.data.frequency == 2


def test_nuanced_emotions() -> None:
    entries = [
        _entry(MONDAY, 5, "awful", -0.2),
        _entry(MONDAY + timedelta(days=1), 5, "terrible", -0.4),
        _entry(MONDAY + timedelta(days=2), 3, "meh", 0.0),
    ]
    insight = nuanced_emotions(entries)
    assert insight.priority is Priority.LOW
    assert insight.data.discrepancies == 2
    assert insight.data.reflected_entries == 3


def test_too_few_entries_or_reflections() -> None:
    assert generate_insights(_work_trigger_entries()[:2]) == []
    entries = [_entry(MONDAY + timedelta(days=i), 3, "ok" if i == 0 else None) for i in range(5)]
    assert generate_insights(entries) == []


def test_insights_ordered_by_priority(monkeypatch) -> None:
    low = MoodInsight(type=InsightType.LENGTH_VARIATION, observation="low", priority=Priority.LOW)
    medium = MoodInsight(type=InsightType.DAY_OF_WEEK_PATTERNS, observation="medium", priority=Priority.MEDIUM)
    monkeypatch.setattr(insight_service, "nuanced_emotions", lambda reflected: low)
    monkeypatch.setattr(insight_service, "day_of_week_patterns", lambda entries: medium)

    insights = generate_insights(_work_trigger_entries(), now=MONDAY + timedelta(days=5))
    assert [i.priority for i in insights] == [Priority.HIGH, Priority.MEDIUM, Priority.LOW]


def test_failing_heuristic_is_skipped(monkeypatch) -> None:
    def boom(_reflected):
        raise RuntimeError("broken")

    monkeypatch.setattr(insight_service, "nuanced_emotions", boom)
    insights = generate_insights(_work_trigger_entries(), now=MONDAY + timedelta(days=5))
    assert [i.type for i in insights] == [InsightType.TRIGGER_IDENTIFICATION]


def test_insights_are_deterministic() -> None:
    now = MONDAY + timedelta(days=5)
    first = [i.to_dict() for i in generate_insights(_work_trigger_entries(), now=now)]
    second = [i.to_dict() for i in generate_insights(_work_trigger_entries(), now=now)]
    assert first == second


def test_supporting_data_must_match_type() -> None:
    with pytest.raises(TypeError):
        MoodInsight(
            type=InsightType.COPING_RECOGNITION,
            observation="x",
            priority=Priority.HIGH,
            data=TriggerData(word="work", frequency=3),
        )


def test_insight_to_dict() -> None:
    insight = MoodInsight(
        type=InsightType.COPING_RECOGNITION,
        observation="bounce",
        priority=Priority.HIGH,
        data=RecoveryData(average_days=2, instances=3),
    )
    assert insight.to_dict() == {
        "type": "coping_recognition",
        "observation": "bounce",
        "priority": "high",
        "actionable_suggestion": None,
        "supporting_data": {"kind": "recovery", "average_days": 2, "instances": 3},
    }


def test_undated_entry_does_not_block_insights() -> None:
    undated = MoodEntry(id=None, mood_value=2, mood_label="x", timestamp="garbage", reflection="work again")
    insights = generate_insights(_work_trigger_entries() + [undated], now=MONDAY + timedelta(days=5))
    assert [i.type for i in insights] == [InsightType.TRIGGER_IDENTIFICATION]
    assert insights[0].data == TriggerData(word="work", frequency=5)


def test_temporal_patterns_type_is_reserved() -> None:
    with pytest.raises(TypeError):
        MoodInsight(
            type=InsightType.TEMPORAL_PATTERNS,
            observation="x",
            priority=Priority.LOW,
            data=TriggerData(word="work", frequency=3),
        )
    bare = MoodInsight(type=InsightType.TEMPORAL_PATTERNS, observation="x", priority=Priority.LOW)
    assert bare.to_dict()["supporting_data"] is None
    insights = generate_insights(_work_trigger_entries(), now=MONDAY + timedelta(days=5))
    assert InsightType.TEMPORAL_PATTERNS not in [i.type for i in insights]
