"""Daily mood flow, trend direction and time-of-day profile."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from entries import MoodEntry

TREND_WINDOW = 7
TREND_THRESHOLD = 0.3


@dataclass
class FlowPoint:
    day: date
    avg_mood: float
    entry_count: int

    def to_dict(self):
        return {"date": self.day.isoformat(), "avg_mood": round(self.avg_mood, 2), "entry_count": self.entry_count}


@dataclass
class HourProfile:
    hour: int
    count: int
    avg_mood: float


def emotional_flow(
    entries: Iterable[MoodEntry], days: int = 30, now: Optional[datetime] = None
) -> list[FlowPoint]:
    """Average mood per calendar day over the last ``days`` days, oldest first."""
    now = now or datetime.now()
    since = now - timedelta(days=days)
    moods: dict[date, list[int]] = defaultdict(list)
    for entry in entries:
        moment = entry.occurred_at
        if moment is not None and moment >= since:
            moods[moment.date()].append(entry.mood_value)

    return [
        FlowPoint(day=day, avg_mood=sum(values) / len(values), entry_count=len(values))
        for day, values in sorted(moods.items())
    ]


def trend_direction(flow: Sequence[FlowPoint]) -> str:
    """"improving", "declining" or "stable" over the last week of points."""
    if len(flow) < 2:
        return "stable"
    recent = list(flow[-TREND_WINDOW:])
    first_half = recent[:(len(recent) + 1) // 2]
    second_half = recent[len(recent) // 2:]
    first_avg = sum(p.avg_mood for p in first_half) / len(first_half)
    second_avg = sum(p.avg_mood for p in second_half) / len(second_half)

    difference = second_avg - first_avg
    if difference > TREND_THRESHOLD:
        return "improving"
    if difference < -TREND_THRESHOLD:
        return "declining"
    return "stable"


def circadian_profile(entries: Iterable[MoodEntry]) -> list[HourProfile]:
    moods: dict[int, list[int]] = defaultdict(list)
    for entry in entries:
        moment = entry.occurred_at
        if moment is not None:
            moods[moment.hour].append(entry.mood_value)
    return [
        HourProfile(hour=hour, count=len(moods[hour]),
                    avg_mood=sum(moods[hour]) / len(moods[hour]) if moods[hour] else 0.0)
        for hour in range(24)
    ]


def format_hour(hour: int) -> str:
    if hour == 0:
        return "12 AM"
    if hour == 12:
        return "12 PM"
    if hour < 12:
        return f"{hour} AM"
    return f"{hour - 12} PM"


def peak_energy_times(profile: Sequence[HourProfile], limit: int = 3) -> list[dict]:
    """Busiest hours whose average mood is good (>= 4)."""
    peaks = sorted(
        (p for p in profile if p.count > 0 and p.avg_mood >= 4),
        key=lambda p: p.count,
        reverse=True,
    )[:limit]
    return [
        {"hour": p.hour, "time_label": format_hour(p.hour), "avg_mood": round(p.avg_mood, 2), "frequency": p.count}
        for p in peaks
    ]
