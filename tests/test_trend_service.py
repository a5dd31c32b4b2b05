"""Tests for the daily mood flow and time-of-day profile."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from entries import MoodEntry
from trend_service import (
    FlowPoint,
    circadian_profile,
    emotional_flow,
    format_hour,
    peak_energy_times,
    trend_direction,
)

NOW = datetime(2026, 3, 31, 12)


def _at(when: datetime, mood: int) -> MoodEntry:
    return MoodEntry(id=None, mood_value=mood, mood_label="x", timestamp=when.isoformat())


def _flow(moods: list[float]) -> list[FlowPoint]:
    return [FlowPoint(day=date(2026, 3, 1) + timedelta(days=i), avg_mood=m, entry_count=1) for i, m in enumerate(moods)]


def test_emotional_flow_groups_by_day() -> None:
    entries = [
        _at(datetime(2026, 3, 1, 10), 1),
        _at(datetime(2026, 3, 6, 9), 5),
        _at(datetime(2026, 3, 5, 9), 2),
        _at(datetime(2026, 3, 5, 18), 4),
    ]
    flow = emotional_flow(entries, days=30, now=NOW)
    assert [(p.day, p.avg_mood, p.entry_count) for p in flow] == [
        (date(2026, 3, 5), 3.0, 2),
        (date(2026, 3, 6), 5.0, 1),
    ]
    assert flow[0].to_dict() == {"date": "2026-03-05", "avg_mood": 3.0, "entry_count": 2}


def test_trend_direction() -> None:
    assert trend_direction(_flow([2, 2, 2, 4, 4, 4, 4])) == "improving"
    assert trend_direction(_flow([4, 4, 4, 2, 2, 2, 2])) == "declining"
    assert trend_direction(_flow([3, 3.1, 3, 3.2])) == "stable"
    assert trend_direction(_flow([5])) == "stable"


def test_trend_uses_last_week_only() -> None:
    assert trend_direction(_flow([1, 1, 1, 1, 3, 3, 3, 3, 3, 3, 3])) == "stable"


def test_circadian_profile() -> None:
    profile = circadian_profile([_at(datetime(2026, 3, 2, 9), 4), _at(datetime(2026, 3, 3, 9), 5)])
    assert len(profile) == 24
    assert profile[9].count == 2
    assert profile[9].avg_mood == 4.5
    assert profile[10].count == 0


def test_format_hour() -> None:
    assert [format_hour(h) for h in (0, 9, 12, 15)] == ["12 AM", "9 AM", "12 PM", "3 PM"]


def test_peak_energy_times() -> None:
    entries = [_at(datetime(2026, 3, 2 + d, 9), 5) for d in range(3)]
    entries += [_at(datetime(2026, 3, 2, 20), 4)]
    entries += [_at(datetime(2026, 3, 2 + d, 14), 2) for d in range(2)]
    peaks = peak_energy_times(circadian_profile(entries))
    assert [(p["hour"], p["time_label"], p["frequency"]) for p in peaks] == [(9, "9 AM", 3), (20, "8 PM", 1)]
